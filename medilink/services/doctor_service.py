from typing import List
from uuid import UUID

from sqlmodel import func, select

from medilink.core.errors import ForbiddenError, NotFoundError
from medilink.core.logger import logger
from medilink.core.reconcile import ForeignJoin, reconcile
from medilink.db.models import Doctor, Specialty
from medilink.schemas.doctor import DoctorCreate, DoctorResponse, DoctorUpdate
from medilink.services.base import BaseService

log = logger.getChild("doctors")

SPECIALTY_JOIN = ForeignJoin("specialty_id", Specialty, "specialty", ("name",), {"name": "General"})


class DoctorService(BaseService):
    async def get_doctors(self, clinic_id: UUID, available_only: bool = False) -> List[DoctorResponse]:
        stmt = select(Doctor).where(Doctor.clinic_id == clinic_id)
        if available_only:
            stmt = stmt.where(Doctor.available == True)
        stmt = stmt.order_by(Doctor.name)
        rows = await self._fetch_all(stmt, "doctors")
        merged = await reconcile(self.session, rows, [SPECIALTY_JOIN])
        return [DoctorResponse.model_validate(item) for item in merged]

    async def count_doctors(self, clinic_id: UUID) -> int:
        stmt = select(func.count(Doctor.id)).where(Doctor.clinic_id == clinic_id)
        return await self._fetch_one(stmt, "doctors") or 0

    async def _get_owned(self, clinic_id: UUID, doctor_id: UUID) -> Doctor:
        doctor = await self._get(Doctor, doctor_id, "doctor")
        if not doctor:
            raise NotFoundError("Doctor not found")
        if doctor.clinic_id != clinic_id:
            raise ForbiddenError("Doctor belongs to another clinic")
        return doctor

    async def _check_specialty(self, specialty_id):
        if specialty_id is not None and not await self._get(Specialty, specialty_id, "specialty"):
            raise NotFoundError("Specialty not found")

    async def _respond(self, doctor: Doctor) -> DoctorResponse:
        merged = await reconcile(self.session, [doctor], [SPECIALTY_JOIN])
        return DoctorResponse.model_validate(merged[0])

    async def add_doctor(self, clinic_id: UUID, data: DoctorCreate) -> DoctorResponse:
        await self._check_specialty(data.specialty_id)
        doctor = Doctor(**data.model_dump(), clinic_id=clinic_id)
        self.session.add(doctor)
        await self._commit("Failed to save doctor")
        await self.session.refresh(doctor)
        log.info(f"Doctor {doctor.id} added to clinic {clinic_id}")
        return await self._respond(doctor)

    async def update_doctor(self, clinic_id: UUID, doctor_id: UUID, data: DoctorUpdate) -> DoctorResponse:
        doctor = await self._get_owned(clinic_id, doctor_id)
        update_data = data.model_dump(exclude_unset=True)
        if "specialty_id" in update_data:
            await self._check_specialty(update_data["specialty_id"])
        for key, value in update_data.items():
            setattr(doctor, key, value)
        self.session.add(doctor)
        await self._commit("Failed to save doctor")
        await self.session.refresh(doctor)
        return await self._respond(doctor)

    async def set_availability(self, clinic_id: UUID, doctor_id: UUID, available: bool) -> DoctorResponse:
        return await self.update_doctor(clinic_id, doctor_id, DoctorUpdate(available=available))

    async def delete_doctor(self, clinic_id: UUID, doctor_id: UUID):
        doctor = await self._get_owned(clinic_id, doctor_id)
        await self.session.delete(doctor)
        await self._commit("Failed to delete doctor")
        log.info(f"Doctor {doctor_id} removed from clinic {clinic_id}")
