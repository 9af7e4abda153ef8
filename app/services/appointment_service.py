"""
Appointment lifecycle.

    pending --confirm (own doctor)--------------> confirmed
    pending --cancel (patient or doctor)--------> cancelled
    confirmed --cancel (patient or doctor)------> cancelled

The doctor may also cancel a confirmed appointment, as the doctor-side
status route allows; cancel's only guard is party membership.

cancelled and completed are terminal. Nothing in this service moves an
appointment into completed, and nothing moves one out of a terminal state.
Only the status changes after booking; date and reason are fixed.
"""
from datetime import datetime
from typing import Union
import logging

from ..core.exceptions import (
    AuthorizationError, DoctorNotFoundError, InvalidTransitionError,
    NotFoundError, ValidationError
)
from ..core.security import UserRole
from ..models.appointment import Appointment, AppointmentStatus
from .identity_service import Identity, authorize
from .store import Store

logger = logging.getLogger(__name__)

# Target status -> statuses it may be entered from
ALLOWED_SOURCES = {
    AppointmentStatus.CONFIRMED: frozenset({AppointmentStatus.PENDING}),
    AppointmentStatus.CANCELLED: frozenset({
        AppointmentStatus.PENDING,
        AppointmentStatus.CONFIRMED,
    }),
}

class AppointmentService:
    def __init__(self, store: Store):
        self.store = store

    def create(
        self,
        patient: Identity,
        doctor_id: int,
        date: datetime,
        reason: str
    ) -> Appointment:
        """Book a pending appointment for the calling patient."""
        authorize(patient, UserRole.PATIENT)

        if not isinstance(doctor_id, int) or isinstance(doctor_id, bool):
            raise ValidationError("doctor_id is required")
        if not isinstance(date, datetime):
            raise ValidationError("date is required")
        if not isinstance(reason, str) or not reason.strip():
            raise ValidationError("reason is required")

        doctor = self.store.find_account_by_id(doctor_id)
        if doctor is None or doctor.role != UserRole.DOCTOR:
            raise DoctorNotFoundError()

        appointment = Appointment(
            patient_id=patient.id,
            doctor_id=doctor.id,
            date=date,
            reason=reason.strip(),
            status=AppointmentStatus.PENDING,
        )
        appointment = self.store.create_appointment(appointment)

        logger.info(
            f"Appointment {appointment.id} booked by patient {patient.id} "
            f"with doctor {doctor.id}"
        )
        return appointment

    def confirm(self, doctor: Identity, appointment_id: int) -> Appointment:
        """Confirm a pending appointment. Only its own doctor may do this."""
        authorize(doctor, UserRole.DOCTOR)

        appointment = self._get(appointment_id)
        if appointment.doctor_id != doctor.id:
            self._deny(doctor, appointment, "confirm")

        return self._transition(appointment, AppointmentStatus.CONFIRMED, doctor)

    def cancel(self, actor: Identity, appointment_id: int) -> Appointment:
        """Cancel an appointment that is not yet terminal.

        Either party may cancel: the doctor declining a request, or the
        patient withdrawing it.
        """
        appointment = self._get(appointment_id)
        if not appointment.is_party(actor.id):
            self._deny(actor, appointment, "cancel")

        return self._transition(appointment, AppointmentStatus.CANCELLED, actor)

    def update_status(
        self,
        doctor: Identity,
        appointment_id: int,
        status: Union[AppointmentStatus, str]
    ) -> Appointment:
        """Doctor-side status change; accepts confirmed or cancelled only."""
        authorize(doctor, UserRole.DOCTOR)

        try:
            status = AppointmentStatus(status)
        except ValueError:
            raise ValidationError("Invalid status provided.")

        if status == AppointmentStatus.CONFIRMED:
            return self.confirm(doctor, appointment_id)
        if status == AppointmentStatus.CANCELLED:
            return self.cancel(doctor, appointment_id)

        raise ValidationError("Invalid status provided.")

    def _get(self, appointment_id: int) -> Appointment:
        appointment = self.store.find_appointment_by_id(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment not found.")
        return appointment

    def _deny(self, actor: Identity, appointment: Appointment, action: str):
        logger.warning(
            f"Account {actor.id} may not {action} appointment {appointment.id}"
        )
        raise AuthorizationError(f"Not authorized to {action} this appointment.")

    def _transition(
        self,
        appointment: Appointment,
        target: AppointmentStatus,
        actor: Identity
    ) -> Appointment:
        current = AppointmentStatus(appointment.status)
        if current.is_terminal or current not in ALLOWED_SOURCES[target]:
            raise InvalidTransitionError(
                f"Cannot change appointment status from {current.value} to {target.value}."
            )

        appointment.status = target
        appointment = self.store.save_appointment(appointment)

        logger.info(
            f"Appointment {appointment.id} {current.value} -> {target.value} "
            f"by account {actor.id}"
        )
        return appointment
