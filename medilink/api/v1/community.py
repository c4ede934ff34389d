from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from medilink.api.deps import get_current_clinic, get_current_patient
from medilink.db.models import Clinic, Profile
from medilink.db.session import get_session
from medilink.schemas.community import EventCreate, EventResponse, GroupResponse, PostCreate, PostResponse
from medilink.services.community_service import CommunityService
from medilink.services.dashboard_service import or_empty

router = APIRouter()

@router.get("/posts", response_model=List[PostResponse])
async def read_posts(
    limit: int = 20,
    group_id: Optional[UUID] = None,
    session: AsyncSession = Depends(get_session),
):
    return await or_empty(CommunityService(session).get_posts(limit, group_id), "posts", [])

@router.post("/posts", response_model=PostResponse)
async def create_post(
    request: PostCreate,
    patient: Profile = Depends(get_current_patient),
    session: AsyncSession = Depends(get_session),
):
    return await CommunityService(session).create_post(patient.id, request)

@router.post("/posts/{post_id}/like", response_model=PostResponse)
async def like_post(
    post_id: UUID,
    patient: Profile = Depends(get_current_patient),
    session: AsyncSession = Depends(get_session),
):
    return await CommunityService(session).like_post(patient.id, post_id)

@router.get("/groups", response_model=List[GroupResponse])
async def read_groups(
    available_only: bool = False,
    limit: int = 10,
    patient: Profile = Depends(get_current_patient),
    session: AsyncSession = Depends(get_session),
):
    groups = CommunityService(session).get_groups(patient.id, limit, available_only)
    return await or_empty(groups, "groups", [])

@router.post("/groups/{group_id}/join")
async def join_group(
    group_id: UUID,
    patient: Profile = Depends(get_current_patient),
    session: AsyncSession = Depends(get_session),
):
    await CommunityService(session).join_group(patient.id, group_id)
    return {"message": "Joined group"}

@router.get("/events", response_model=List[EventResponse])
async def read_events(limit: int = 10, session: AsyncSession = Depends(get_session)):
    return await or_empty(CommunityService(session).get_upcoming_events(limit), "events", [])

@router.post("/events", response_model=EventResponse)
async def create_event(
    request: EventCreate,
    clinic: Clinic = Depends(get_current_clinic),
    session: AsyncSession = Depends(get_session),
):
    return await CommunityService(session).create_event(clinic.id, request)

@router.post("/events/{event_id}/register", response_model=EventResponse)
async def register_for_event(
    event_id: UUID,
    patient: Profile = Depends(get_current_patient),
    session: AsyncSession = Depends(get_session),
):
    return await CommunityService(session).register_for_event(patient.id, event_id)
