from pydantic import BaseModel, Field, model_validator
from uuid import UUID
from datetime import date
from typing import Optional, List, Literal

class SymptomDetail(BaseModel):
    symptom_name: str
    body_part: Optional[str] = None
    duration_days: Optional[int] = Field(default=None, ge=0)

class MedicineDetail(BaseModel):
    medicine_name: str
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    effectiveness: Optional[int] = Field(default=None, ge=1, le=5)

class HealthEntryCreate(BaseModel):
    entry_type: Literal["symptom", "medicine", "visit", "note"]
    title: str = Field(min_length=1)
    description: Optional[str] = None
    entry_date: date
    severity: Optional[int] = Field(default=None, ge=1, le=5)
    symptom: Optional[SymptomDetail] = None
    medicine: Optional[MedicineDetail] = None

    @model_validator(mode="after")
    def check_detail(self):
        if self.entry_type == "symptom" and self.symptom is None:
            raise ValueError("symptom entries need symptom details")
        if self.entry_type == "medicine" and self.medicine is None:
            raise ValueError("medicine entries need medicine details")
        if self.entry_type != "symptom":
            self.severity = None
        return self

class HealthEntryResponse(BaseModel):
    id: UUID
    entry_type: str
    title: str
    description: Optional[str] = None
    entry_date: date
    severity: Optional[int] = None
    symptoms: List[SymptomDetail] = []
    medicines: List[MedicineDetail] = []
