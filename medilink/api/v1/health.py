from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from medilink.api.deps import get_current_patient
from medilink.db.models import Profile
from medilink.db.session import get_session
from medilink.schemas.health import HealthEntryCreate, HealthEntryResponse
from medilink.services.dashboard_service import or_empty
from medilink.services.health_service import HealthService

router = APIRouter()

@router.get("/timeline", response_model=List[HealthEntryResponse])
async def read_timeline(
    patient: Profile = Depends(get_current_patient),
    session: AsyncSession = Depends(get_session),
):
    return await or_empty(HealthService(session).get_timeline(patient.id), "health records", [])

@router.post("/timeline", response_model=HealthEntryResponse)
async def add_timeline_entry(
    request: HealthEntryCreate,
    patient: Profile = Depends(get_current_patient),
    session: AsyncSession = Depends(get_session),
):
    return await HealthService(session).add_entry(patient.id, request)
