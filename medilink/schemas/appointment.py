from pydantic import BaseModel
from uuid import UUID
from datetime import date, datetime, time
from typing import Optional, List

from medilink.core.status import AppointmentStatus

class AppointmentCreate(BaseModel):
    clinic_id: UUID
    doctor_id: Optional[UUID] = None
    appointment_date: date
    appointment_time: time
    notes: Optional[str] = None

class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus

class AppointmentResponse(BaseModel):
    id: UUID
    patient_id: UUID
    clinic_id: UUID
    doctor_id: Optional[UUID]
    appointment_date: date
    appointment_time: time
    status: str
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class PatientRef(BaseModel):
    full_name: str

class ClinicRef(BaseModel):
    clinic_name: str
    address: Optional[str] = None

class DoctorRef(BaseModel):
    name: str
    specialty: Optional[str] = None

class ClinicAppointment(AppointmentResponse):
    patient: PatientRef
    doctor: Optional[DoctorRef] = None

class PatientAppointment(AppointmentResponse):
    clinic: ClinicRef
    doctor: Optional[DoctorRef] = None

class ClinicAppointmentList(BaseModel):
    appointments: List[ClinicAppointment]
    pending: List[ClinicAppointment]
    confirmed: List[ClinicAppointment]
    today_count: int
