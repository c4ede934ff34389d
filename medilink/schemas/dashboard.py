from pydantic import BaseModel
from typing import List

from medilink.schemas.appointment import ClinicAppointmentList, PatientAppointment
from medilink.schemas.directory import ClinicResponse, PharmacyResponse, ProfileResponse, SpecialtyResponse
from medilink.schemas.order import PharmacyOrderList, PatientOrder
from medilink.schemas.stock import StockItemResponse

class PatientDashboard(BaseModel):
    profile: ProfileResponse
    appointments: List[PatientAppointment]
    orders: List[PatientOrder]
    pharmacies: List[PharmacyResponse]
    clinics: List[ClinicResponse]
    specialties: List[SpecialtyResponse]

class PharmacyDashboard(BaseModel):
    pharmacy: PharmacyResponse
    orders: PharmacyOrderList
    low_stock: List[StockItemResponse]

class ClinicDashboard(BaseModel):
    clinic: ClinicResponse
    appointments: ClinicAppointmentList
    doctor_count: int
