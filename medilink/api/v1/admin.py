from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from medilink.api.deps import require_admin
from medilink.db.models import Clinic, Pharmacy
from medilink.db.session import get_session
from medilink.schemas.directory import ClinicResponse, PharmacyResponse, VerifyRequest
from medilink.services.tenant_service import TenantService

router = APIRouter(dependencies=[Depends(require_admin)])

@router.get("/clinics", response_model=List[ClinicResponse])
async def review_clinics(session: AsyncSession = Depends(get_session)):
    return await TenantService(session).list_for_review(Clinic)

@router.get("/pharmacies", response_model=List[PharmacyResponse])
async def review_pharmacies(session: AsyncSession = Depends(get_session)):
    return await TenantService(session).list_for_review(Pharmacy)

@router.put("/clinics/{clinic_id}/verified", response_model=ClinicResponse)
async def verify_clinic(clinic_id: UUID, request: VerifyRequest, session: AsyncSession = Depends(get_session)):
    return await TenantService(session).set_verified(Clinic, clinic_id, request.verified)

@router.put("/pharmacies/{pharmacy_id}/verified", response_model=PharmacyResponse)
async def verify_pharmacy(pharmacy_id: UUID, request: VerifyRequest, session: AsyncSession = Depends(get_session)):
    return await TenantService(session).set_verified(Pharmacy, pharmacy_id, request.verified)
