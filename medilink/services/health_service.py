from collections import defaultdict
from typing import List
from uuid import UUID

from sqlmodel import select

from medilink.core.logger import logger
from medilink.db.models import HealthMedicine, HealthRecord, HealthSymptom
from medilink.schemas.health import HealthEntryCreate, HealthEntryResponse, MedicineDetail, SymptomDetail
from medilink.services.base import BaseService

log = logger.getChild("health")


class HealthService(BaseService):
    """Patient health timeline: entries plus their symptom / medicine details."""

    async def get_timeline(self, patient_id: UUID) -> List[HealthEntryResponse]:
        stmt = (
            select(HealthRecord)
            .where(HealthRecord.patient_id == patient_id)
            .order_by(HealthRecord.entry_date.desc(), HealthRecord.created_at.desc())
        )
        entries = await self._fetch_all(stmt, "health records")
        if not entries:
            return []

        ids = [e.id for e in entries]
        symptoms = await self._fetch_all(
            select(HealthSymptom).where(HealthSymptom.health_memory_id.in_(ids)), "health symptoms"
        )
        medicines = await self._fetch_all(
            select(HealthMedicine).where(HealthMedicine.health_memory_id.in_(ids)), "health medicines"
        )
        symptoms_by_entry = defaultdict(list)
        for s in symptoms:
            symptoms_by_entry[s.health_memory_id].append(SymptomDetail.model_validate(s, from_attributes=True))
        medicines_by_entry = defaultdict(list)
        for m in medicines:
            medicines_by_entry[m.health_memory_id].append(MedicineDetail.model_validate(m, from_attributes=True))

        return [
            HealthEntryResponse(
                id=e.id,
                entry_type=e.entry_type,
                title=e.title,
                description=e.description,
                entry_date=e.entry_date,
                severity=e.severity,
                symptoms=symptoms_by_entry[e.id],
                medicines=medicines_by_entry[e.id],
            )
            for e in entries
        ]

    async def add_entry(self, patient_id: UUID, data: HealthEntryCreate) -> HealthEntryResponse:
        record = HealthRecord(
            patient_id=patient_id,
            entry_type=data.entry_type,
            title=data.title,
            description=data.description,
            entry_date=data.entry_date,
            severity=data.severity,
        )
        self.session.add(record)
        await self._flush("Failed to add entry")
        symptoms, medicines = [], []
        if data.entry_type == "symptom":
            self.session.add(HealthSymptom(health_memory_id=record.id, **data.symptom.model_dump()))
            symptoms.append(data.symptom)
        elif data.entry_type == "medicine":
            self.session.add(HealthMedicine(health_memory_id=record.id, **data.medicine.model_dump()))
            medicines.append(data.medicine)
        await self._commit("Failed to add entry")
        log.info(f"Health entry {record.id} ({data.entry_type}) added")
        return HealthEntryResponse(
            id=record.id,
            entry_type=record.entry_type,
            title=record.title,
            description=record.description,
            entry_date=record.entry_date,
            severity=record.severity,
            symptoms=symptoms,
            medicines=medicines,
        )
