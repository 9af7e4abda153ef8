from typing import Callable, Dict, List
import logging

from ..core.exceptions import AuthorizationError
from ..core.security import UserRole
from ..models.appointment import Appointment
from ..schemas.appointment import AppointmentDetail, AppointmentResponse
from ..schemas.auth import PublicProfile
from .identity_service import Identity, authorize
from .store import Store

logger = logging.getLogger(__name__)

class AppointmentQueryService:
    """Read side: which appointments a caller may see, and with whose details."""

    def __init__(self, store: Store):
        self.store = store
        self._scopes: Dict[UserRole, Callable[[Identity], List[AppointmentDetail]]] = {
            UserRole.PATIENT: self._for_patient,
            UserRole.DOCTOR: self._for_doctor,
            UserRole.ADMIN: self._for_admin,
        }

    def list_for(self, identity: Identity) -> List[AppointmentDetail]:
        scope = self._scopes.get(identity.role)
        if scope is None:
            raise AuthorizationError("Invalid user role")
        return scope(identity)

    def list_all(self, identity: Identity) -> List[AppointmentDetail]:
        authorize(identity, UserRole.ADMIN)
        return self._for_admin(identity)

    def _for_patient(self, identity: Identity) -> List[AppointmentDetail]:
        appointments = self.store.find_appointments(patient_id=identity.id)
        return [self._detail(a, doctor=True) for a in appointments]

    def _for_doctor(self, identity: Identity) -> List[AppointmentDetail]:
        appointments = self.store.find_appointments(doctor_id=identity.id)
        return [self._detail(a, patient=True) for a in appointments]

    def _for_admin(self, identity: Identity) -> List[AppointmentDetail]:
        appointments = self.store.find_appointments()
        logger.info(f"Admin {identity.id} listed {len(appointments)} appointments")
        return [self._detail(a, patient=True, doctor=True) for a in appointments]

    @staticmethod
    def _detail(
        appointment: Appointment,
        patient: bool = False,
        doctor: bool = False
    ) -> AppointmentDetail:
        base = AppointmentResponse.model_validate(appointment).model_dump()
        return AppointmentDetail(
            **base,
            patient=PublicProfile.model_validate(appointment.patient) if patient else None,
            doctor=PublicProfile.model_validate(appointment.doctor) if doctor else None,
        )
