from fastapi import APIRouter, Depends
from typing import List

from ...api.deps import get_admin_identity, get_doctor_identity, get_store
from ...core.security import UserRole
from ...services.auth_service import AuthService
from ...services.store import Store
from ...schemas.auth import PublicProfile, UserResponse

router = APIRouter(prefix="/users", tags=["Users"])

@router.get("/doctors", response_model=List[PublicProfile])
async def list_doctors(store: Store = Depends(get_store)):
    """List doctors. Public, so patients can pick one before booking."""
    doctors = AuthService(store).list_accounts(UserRole.DOCTOR)
    return [PublicProfile.model_validate(doctor) for doctor in doctors]

@router.get(
    "/patients",
    response_model=List[PublicProfile],
    dependencies=[Depends(get_doctor_identity)]
)
async def list_patients(store: Store = Depends(get_store)):
    """List patients (doctor only)."""
    patients = AuthService(store).list_accounts(UserRole.PATIENT)
    return [PublicProfile.model_validate(patient) for patient in patients]

@router.get(
    "/all",
    response_model=List[UserResponse],
    dependencies=[Depends(get_admin_identity)]
)
async def list_users(store: Store = Depends(get_store)):
    """List all accounts (admin only)."""
    accounts = AuthService(store).list_accounts()
    return [UserResponse.model_validate(account) for account in accounts]
