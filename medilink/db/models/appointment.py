from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import date, datetime, time
from uuid import UUID, uuid4

class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    patient_id: UUID = Field(foreign_key="profiles.id", index=True)
    clinic_id: UUID = Field(foreign_key="clinics.id", index=True)
    doctor_id: Optional[UUID] = Field(default=None, foreign_key="doctors.id")
    appointment_date: date
    appointment_time: time
    status: str = Field(default="pending") # pending, confirmed, completed, cancelled
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
