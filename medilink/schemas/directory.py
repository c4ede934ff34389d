from pydantic import BaseModel
from typing import Optional
from uuid import UUID

class ClinicResponse(BaseModel):
    id: UUID
    clinic_name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    verified: bool

    class Config:
        from_attributes = True

class PharmacyResponse(BaseModel):
    id: UUID
    pharmacy_name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    verified: bool

    class Config:
        from_attributes = True

class SpecialtyResponse(BaseModel):
    id: UUID
    name: str

    class Config:
        from_attributes = True

class ProfileResponse(BaseModel):
    id: UUID
    full_name: str
    phone: Optional[str] = None
    address: Optional[str] = None

    class Config:
        from_attributes = True

class VerifyRequest(BaseModel):
    verified: bool
