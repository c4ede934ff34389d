from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID

class DoctorBase(BaseModel):
    name: str = Field(min_length=1)
    specialty_id: Optional[UUID] = None
    qualification: Optional[str] = None
    experience_years: Optional[int] = Field(default=None, ge=0)
    consultation_fee: Optional[float] = Field(default=None, ge=0)
    available: bool = True

class DoctorCreate(DoctorBase):
    pass

class DoctorUpdate(BaseModel):
    name: Optional[str] = None
    specialty_id: Optional[UUID] = None
    qualification: Optional[str] = None
    experience_years: Optional[int] = Field(default=None, ge=0)
    consultation_fee: Optional[float] = Field(default=None, ge=0)
    available: Optional[bool] = None

class SpecialtyRef(BaseModel):
    name: str

class DoctorResponse(DoctorBase):
    id: UUID
    clinic_id: UUID
    specialty: SpecialtyRef

    class Config:
        from_attributes = True

class AvailabilityUpdate(BaseModel):
    available: bool
