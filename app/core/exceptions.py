"""
Error taxonomy shared by the services and the HTTP layer.

Services raise these; ``app.main`` renders them as JSON with the
status code each class carries.
"""
from fastapi import status


class ClinicError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal Server Error"
    default_message: str = "An unexpected error occurred"
    headers = None

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationError(ClinicError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthenticated"
    default_message = "Could not validate credentials"
    headers = {"WWW-Authenticate": "Bearer"}


class AuthorizationError(ClinicError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"
    default_message = "Not enough permissions"


class NotFoundError(ClinicError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"
    default_message = "The requested resource was not found"


class DoctorNotFoundError(NotFoundError):
    default_message = "Doctor not found"


class ValidationError(ClinicError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation Error"
    default_message = "Invalid input"


class InvalidTransitionError(ClinicError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid Transition"
    default_message = "Appointment status cannot be changed"


class StoreError(ClinicError):
    """Persistence failure. Its message is logged, never sent to the client."""


class TokenInvalid(Exception):
    """Raised by the credential layer when a token cannot be trusted."""
