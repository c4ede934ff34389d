from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from medilink.core.config import settings
from medilink.db.session import get_session
from medilink.schemas.directory import ClinicResponse, PharmacyResponse, SpecialtyResponse
from medilink.schemas.doctor import DoctorResponse
from medilink.services.dashboard_service import or_empty
from medilink.services.doctor_service import DoctorService
from medilink.services.tenant_service import TenantService

router = APIRouter()

@router.get("/clinics", response_model=List[ClinicResponse])
async def read_clinics(limit: int = 100, session: AsyncSession = Depends(get_session)):
    return await or_empty(TenantService(session).list_clinics(limit), "clinics", [])

@router.get("/pharmacies", response_model=List[PharmacyResponse])
async def read_pharmacies(limit: int = settings.DIRECTORY_LIMIT, session: AsyncSession = Depends(get_session)):
    return await or_empty(TenantService(session).list_pharmacies(limit), "pharmacies", [])

@router.get("/specialties", response_model=List[SpecialtyResponse])
async def read_specialties(session: AsyncSession = Depends(get_session)):
    return await or_empty(TenantService(session).list_specialties(), "specialties", [])

@router.get("/clinics/{clinic_id}/doctors", response_model=List[DoctorResponse])
async def read_available_doctors(clinic_id: UUID, session: AsyncSession = Depends(get_session)):
    await TenantService(session).get_clinic(clinic_id)
    return await or_empty(DoctorService(session).get_doctors(clinic_id, available_only=True), "doctors", [])
