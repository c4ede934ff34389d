from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from medilink.api.deps import get_current_clinic, get_current_patient
from medilink.db.models import Clinic, Profile
from medilink.db.session import get_session
from medilink.schemas.appointment import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStatusUpdate,
    ClinicAppointmentList,
    PatientAppointment,
)
from medilink.services.appointment_service import AppointmentService, summarize_clinic_appointments
from medilink.services.dashboard_service import or_empty

router = APIRouter()

async def get_appointment_service(session: AsyncSession = Depends(get_session)) -> AppointmentService:
    return AppointmentService(session)

@router.post("/", response_model=AppointmentResponse)
async def book_appointment(
    request: AppointmentCreate,
    patient: Profile = Depends(get_current_patient),
    service: AppointmentService = Depends(get_appointment_service),
):
    return await service.create_appointment(patient.id, request)

@router.get("/mine", response_model=List[PatientAppointment])
async def read_my_appointments(
    limit: int | None = None,
    patient: Profile = Depends(get_current_patient),
    service: AppointmentService = Depends(get_appointment_service),
):
    return await or_empty(service.get_patient_appointments(patient.id, limit), "appointments", [])

@router.get("/clinic", response_model=ClinicAppointmentList)
async def read_clinic_appointments(
    clinic: Clinic = Depends(get_current_clinic),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointments = await or_empty(service.get_clinic_appointments(clinic.id), "appointments", [])
    return summarize_clinic_appointments(appointments)

@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: UUID,
    request: AppointmentStatusUpdate,
    clinic: Clinic = Depends(get_current_clinic),
    service: AppointmentService = Depends(get_appointment_service),
):
    return await service.update_status(clinic.id, appointment_id, request.status)
