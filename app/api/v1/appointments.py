from fastapi import APIRouter, Depends, status
from typing import List

from ...api.deps import (
    get_admin_identity, get_current_identity, get_doctor_identity,
    get_patient_identity, get_store
)
from ...services.appointment_query_service import AppointmentQueryService
from ...services.appointment_service import AppointmentService
from ...services.identity_service import Identity
from ...services.store import Store
from ...schemas.appointment import (
    AppointmentActionResponse, AppointmentCreate, AppointmentDetail,
    AppointmentResponse, AppointmentStatusUpdate
)

router = APIRouter(prefix="/appointments", tags=["Appointments"])

def _action(message: str, appointment) -> AppointmentActionResponse:
    return AppointmentActionResponse(
        message=message,
        appointment=AppointmentResponse.model_validate(appointment)
    )

@router.post(
    "/book",
    response_model=AppointmentActionResponse,
    status_code=status.HTTP_201_CREATED
)
async def book_appointment(
    data: AppointmentCreate,
    patient: Identity = Depends(get_patient_identity),
    store: Store = Depends(get_store)
):
    """Book an appointment with a doctor (patient only)."""
    appointment = AppointmentService(store).create(
        patient, data.doctor_id, data.date, data.reason
    )
    return _action("Appointment booked successfully", appointment)

@router.get("/my", response_model=List[AppointmentDetail])
async def my_appointments(
    identity: Identity = Depends(get_current_identity),
    store: Store = Depends(get_store)
):
    """Appointments visible to the caller, scoped by role."""
    return AppointmentQueryService(store).list_for(identity)

@router.get("/all", response_model=List[AppointmentDetail])
async def all_appointments(
    admin: Identity = Depends(get_admin_identity),
    store: Store = Depends(get_store)
):
    """Every appointment with both parties' details (admin only)."""
    return AppointmentQueryService(store).list_all(admin)

@router.put("/{appointment_id}/confirm", response_model=AppointmentActionResponse)
async def confirm_appointment(
    appointment_id: int,
    doctor: Identity = Depends(get_doctor_identity),
    store: Store = Depends(get_store)
):
    """Confirm a pending appointment (its doctor only)."""
    appointment = AppointmentService(store).confirm(doctor, appointment_id)
    return _action("Appointment confirmed successfully.", appointment)

@router.put("/{appointment_id}/cancel", response_model=AppointmentActionResponse)
async def cancel_appointment(
    appointment_id: int,
    identity: Identity = Depends(get_current_identity),
    store: Store = Depends(get_store)
):
    """Cancel an appointment (its patient or its doctor)."""
    appointment = AppointmentService(store).cancel(identity, appointment_id)
    return _action("Appointment cancelled successfully.", appointment)

@router.put("/{appointment_id}/status", response_model=AppointmentActionResponse)
async def update_appointment_status(
    appointment_id: int,
    data: AppointmentStatusUpdate,
    doctor: Identity = Depends(get_doctor_identity),
    store: Store = Depends(get_store)
):
    """Set an appointment to confirmed or cancelled (its doctor only)."""
    appointment = AppointmentService(store).update_status(
        doctor, appointment_id, data.status
    )
    return _action(f"Appointment {appointment.status.value} successfully.", appointment)
