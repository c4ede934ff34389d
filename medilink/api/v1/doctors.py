from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from medilink.api.deps import get_current_clinic
from medilink.db.models import Clinic
from medilink.db.session import get_session
from medilink.schemas.doctor import AvailabilityUpdate, DoctorCreate, DoctorResponse, DoctorUpdate
from medilink.services.dashboard_service import or_empty
from medilink.services.doctor_service import DoctorService

router = APIRouter()

async def get_doctor_service(session: AsyncSession = Depends(get_session)) -> DoctorService:
    return DoctorService(session)

@router.get("/", response_model=List[DoctorResponse])
async def read_doctors(
    clinic: Clinic = Depends(get_current_clinic),
    service: DoctorService = Depends(get_doctor_service),
):
    return await or_empty(service.get_doctors(clinic.id), "doctors", [])

@router.post("/", response_model=DoctorResponse)
async def create_doctor(
    request: DoctorCreate,
    clinic: Clinic = Depends(get_current_clinic),
    service: DoctorService = Depends(get_doctor_service),
):
    return await service.add_doctor(clinic.id, request)

@router.patch("/{doctor_id}", response_model=DoctorResponse)
async def update_doctor(
    doctor_id: UUID,
    request: DoctorUpdate,
    clinic: Clinic = Depends(get_current_clinic),
    service: DoctorService = Depends(get_doctor_service),
):
    return await service.update_doctor(clinic.id, doctor_id, request)

@router.put("/{doctor_id}/availability", response_model=DoctorResponse)
async def update_availability(
    doctor_id: UUID,
    request: AvailabilityUpdate,
    clinic: Clinic = Depends(get_current_clinic),
    service: DoctorService = Depends(get_doctor_service),
):
    return await service.set_availability(clinic.id, doctor_id, request.available)

@router.delete("/{doctor_id}")
async def delete_doctor(
    doctor_id: UUID,
    clinic: Clinic = Depends(get_current_clinic),
    service: DoctorService = Depends(get_doctor_service),
):
    await service.delete_doctor(clinic.id, doctor_id)
    return {"message": "Doctor removed successfully"}
