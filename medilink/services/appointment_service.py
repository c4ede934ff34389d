from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlmodel import select

from medilink.core.errors import ForbiddenError, NotFoundError
from medilink.core.logger import logger
from medilink.core.reconcile import ForeignJoin, reconcile
from medilink.core.status import APPOINTMENT_TRANSITIONS, AppointmentStatus, ensure_transition
from medilink.db.models import Appointment, Clinic, Doctor, Profile, Specialty
from medilink.schemas.appointment import (
    AppointmentCreate,
    ClinicAppointment,
    ClinicAppointmentList,
    PatientAppointment,
)
from medilink.services.base import BaseService

log = logger.getChild("appointments")

PATIENT_JOIN = ForeignJoin(
    "patient_id", Profile, "patient", ("full_name",), {"full_name": "Unknown Patient"}
)
CLINIC_JOIN = ForeignJoin(
    "clinic_id", Clinic, "clinic", ("clinic_name", "address"), {"clinic_name": "Unknown Clinic"}
)
DOCTOR_JOIN = ForeignJoin(
    "doctor_id", Doctor, "doctor", ("name", "specialty_id"), {"name": "Unknown Doctor"}, optional=True
)
SPECIALTY_JOIN = ForeignJoin(
    "specialty_id", Specialty, "specialty", ("name",), {"name": "General"}
)


async def attach_doctor_specialties(session, merged: List[dict]) -> List[dict]:
    """Second hop: resolve the specialty of each attached doctor."""
    refs = [item["doctor"] for item in merged if item.get("doctor") is not None]
    resolved = await reconcile(session, refs, [SPECIALTY_JOIN])
    for ref, with_specialty in zip(refs, resolved):
        ref["specialty"] = with_specialty["specialty"]["name"]
    return merged


class AppointmentService(BaseService):
    async def create_appointment(self, patient_id: UUID, data: AppointmentCreate) -> Appointment:
        clinic = await self._get(Clinic, data.clinic_id, "clinic")
        if not clinic:
            raise NotFoundError("Clinic not found")

        if data.doctor_id is not None:
            doctor = await self._get(Doctor, data.doctor_id, "doctor")
            if not doctor or doctor.clinic_id != data.clinic_id:
                raise NotFoundError("Doctor not found at this clinic")
            if not doctor.available:
                raise ForbiddenError("Doctor is not available for booking")

        appointment = Appointment(
            patient_id=patient_id,
            clinic_id=data.clinic_id,
            doctor_id=data.doctor_id,
            appointment_date=data.appointment_date,
            appointment_time=data.appointment_time,
            notes=data.notes or None,
            status=AppointmentStatus.PENDING.value,
        )
        self.session.add(appointment)
        await self._commit("Failed to book appointment")
        await self.session.refresh(appointment)
        log.info(f"Appointment {appointment.id} booked at clinic {data.clinic_id}")
        return appointment

    async def get_clinic_appointments(self, clinic_id: UUID) -> List[ClinicAppointment]:
        stmt = (
            select(Appointment)
            .where(Appointment.clinic_id == clinic_id)
            .order_by(Appointment.appointment_date, Appointment.appointment_time)
        )
        rows = await self._fetch_all(stmt, "appointments")
        merged = await reconcile(self.session, rows, [PATIENT_JOIN, DOCTOR_JOIN])
        await attach_doctor_specialties(self.session, merged)
        return [ClinicAppointment.model_validate(item) for item in merged]

    async def get_patient_appointments(
        self, patient_id: UUID, limit: Optional[int] = None
    ) -> List[PatientAppointment]:
        stmt = (
            select(Appointment)
            .where(Appointment.patient_id == patient_id)
            .order_by(Appointment.appointment_date, Appointment.appointment_time)
        )
        if limit:
            stmt = stmt.limit(limit)
        rows = await self._fetch_all(stmt, "appointments")
        merged = await reconcile(self.session, rows, [CLINIC_JOIN, DOCTOR_JOIN])
        await attach_doctor_specialties(self.session, merged)
        return [PatientAppointment.model_validate(item) for item in merged]

    async def update_status(self, clinic_id: UUID, appointment_id: UUID, status: str) -> Appointment:
        appointment = await self._get(Appointment, appointment_id, "appointment")
        if not appointment:
            raise NotFoundError("Appointment not found")
        if appointment.clinic_id != clinic_id:
            raise ForbiddenError("Appointment belongs to another clinic")

        status = getattr(status, "value", status)
        ensure_transition(APPOINTMENT_TRANSITIONS, appointment.status, status)
        appointment.status = status
        self.session.add(appointment)
        await self._commit("Failed to update appointment")
        await self.session.refresh(appointment)
        log.info(f"Appointment {appointment_id} -> {status}")
        return appointment


def summarize_clinic_appointments(
    appointments: List[ClinicAppointment], today: Optional[date] = None
) -> ClinicAppointmentList:
    today = today or date.today()
    return ClinicAppointmentList(
        appointments=appointments,
        pending=[a for a in appointments if a.status == AppointmentStatus.PENDING.value],
        confirmed=[a for a in appointments if a.status == AppointmentStatus.CONFIRMED.value],
        today_count=sum(1 for a in appointments if a.appointment_date == today),
    )
