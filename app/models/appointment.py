from sqlalchemy import Column, Integer, ForeignKey, DateTime, Text, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.database import Base

class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

TERMINAL_STATUSES = frozenset({AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED})

class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)

    # Parties
    patient_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)

    # Appointment details
    date = Column(DateTime, nullable=False, index=True)
    reason = Column(Text, nullable=False)
    status = Column(SQLEnum(AppointmentStatus), nullable=False, default=AppointmentStatus.PENDING)

    # Tracking
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    version_id = Column(Integer, nullable=False)

    # Relationships
    patient = relationship("Account", foreign_keys=[patient_id])
    doctor = relationship("Account", foreign_keys=[doctor_id])

    # Concurrent status writes on the same row fail with StaleDataError
    __mapper_args__ = {"version_id_col": version_id}

    def is_party(self, account_id: int) -> bool:
        return account_id in (self.patient_id, self.doctor_id)

    def __repr__(self):
        return f"<Appointment(id={self.id}, patient_id={self.patient_id}, doctor_id={self.doctor_id}, status='{self.status}')>"
