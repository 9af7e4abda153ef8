"""
Persistence gateway for accounts and appointments.

Every database failure is rolled back and re-raised as StoreError so
callers never see driver or SQL details.
"""
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import List, Optional
import logging

from ..core.database import MAX_ROW_ID
from ..core.exceptions import StoreError, ValidationError, InvalidTransitionError
from ..core.security import UserRole
from ..models.account import Account
from ..models.appointment import Appointment

logger = logging.getLogger(__name__)

def _is_row_id(value) -> bool:
    # Ids the database could never have issued resolve to nothing
    return isinstance(value, int) and 1 <= value <= MAX_ROW_ID

class Store:
    def __init__(self, db: Session):
        self.db = db

    # Accounts

    def find_account_by_id(self, account_id: int) -> Optional[Account]:
        if not _is_row_id(account_id):
            return None
        try:
            return self.db.get(Account, account_id)
        except SQLAlchemyError as exc:
            raise self._fail("find_account_by_id", exc)

    def find_account_by_email(self, email: str) -> Optional[Account]:
        try:
            return self.db.query(Account).filter(
                Account.email == email.strip().lower()
            ).first()
        except SQLAlchemyError as exc:
            raise self._fail("find_account_by_email", exc)

    def find_accounts(self, role: Optional[UserRole] = None) -> List[Account]:
        try:
            query = self.db.query(Account)
            if role is not None:
                query = query.filter(Account.role == role)
            return query.order_by(Account.id).all()
        except SQLAlchemyError as exc:
            raise self._fail("find_accounts", exc)

    def create_account(self, account: Account) -> Account:
        try:
            self.db.add(account)
            self.db.commit()
            self.db.refresh(account)
            return account
        except IntegrityError:
            self.db.rollback()
            raise ValidationError("Email already registered")
        except SQLAlchemyError as exc:
            raise self._fail("create_account", exc)

    def save_account(self, account: Account) -> Account:
        try:
            self.db.commit()
            self.db.refresh(account)
            return account
        except SQLAlchemyError as exc:
            raise self._fail("save_account", exc)

    # Appointments

    def find_appointment_by_id(self, appointment_id: int) -> Optional[Appointment]:
        if not _is_row_id(appointment_id):
            return None
        try:
            return self.db.get(Appointment, appointment_id)
        except SQLAlchemyError as exc:
            raise self._fail("find_appointment_by_id", exc)

    def find_appointments(
        self,
        patient_id: Optional[int] = None,
        doctor_id: Optional[int] = None
    ) -> List[Appointment]:
        try:
            query = self.db.query(Appointment).options(
                joinedload(Appointment.patient),
                joinedload(Appointment.doctor),
            )
            if patient_id is not None:
                query = query.filter(Appointment.patient_id == patient_id)
            if doctor_id is not None:
                query = query.filter(Appointment.doctor_id == doctor_id)
            return query.order_by(Appointment.created_at, Appointment.id).all()
        except SQLAlchemyError as exc:
            raise self._fail("find_appointments", exc)

    def create_appointment(self, appointment: Appointment) -> Appointment:
        try:
            self.db.add(appointment)
            self.db.commit()
            self.db.refresh(appointment)
            return appointment
        except SQLAlchemyError as exc:
            raise self._fail("create_appointment", exc)

    def save_appointment(self, appointment: Appointment) -> Appointment:
        appointment_id = appointment.id
        try:
            self.db.commit()
            self.db.refresh(appointment)
            return appointment
        except StaleDataError:
            # Another request changed the row after we read it
            self.db.rollback()
            logger.warning(f"Concurrent update rejected for appointment {appointment_id}")
            raise InvalidTransitionError("Appointment was modified by another request")
        except SQLAlchemyError as exc:
            raise self._fail("save_appointment", exc)

    def _fail(self, operation: str, exc: Exception) -> StoreError:
        self.db.rollback()
        logger.error(f"Store operation {operation} failed: {str(exc)}")
        return StoreError(f"{operation} failed")
