from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from ..models.appointment import AppointmentStatus
from .auth import PublicProfile

# Properties to receive on booking
class AppointmentCreate(BaseModel):
    doctor_id: int
    date: datetime
    reason: str = Field(..., min_length=1)

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Reason must not be blank")
        return value

# Doctor-side status update
class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus

# Properties shared by stored appointments
class AppointmentResponse(BaseModel):
    id: int
    patient_id: int
    doctor_id: int
    date: datetime
    reason: str
    status: AppointmentStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

# Appointment with the other party's public details
class AppointmentDetail(AppointmentResponse):
    patient: Optional[PublicProfile] = None
    doctor: Optional[PublicProfile] = None

class AppointmentActionResponse(BaseModel):
    message: str
    appointment: AppointmentResponse
