from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import date, datetime
from uuid import UUID, uuid4

class HealthRecord(SQLModel, table=True):
    __tablename__ = "health_memory"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    patient_id: UUID = Field(foreign_key="profiles.id", index=True)
    entry_type: str # symptom, medicine, visit, note
    title: str
    description: Optional[str] = None
    entry_date: date
    severity: Optional[int] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

class HealthSymptom(SQLModel, table=True):
    __tablename__ = "health_symptoms"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    health_memory_id: UUID = Field(foreign_key="health_memory.id", index=True)
    symptom_name: str
    body_part: Optional[str] = None
    duration_days: Optional[int] = None

class HealthMedicine(SQLModel, table=True):
    __tablename__ = "health_medicines"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    health_memory_id: UUID = Field(foreign_key="health_memory.id", index=True)
    medicine_name: str
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    effectiveness: Optional[int] = None
