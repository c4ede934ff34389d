from datetime import date, time, timedelta

import pytest

from medilink.core.errors import ForbiddenError, InvalidTransitionError, NotFoundError
from medilink.core.roles import Role
from medilink.db.models import Doctor, Specialty
from medilink.schemas.appointment import AppointmentCreate
from medilink.services.appointment_service import AppointmentService, summarize_clinic_appointments


@pytest.fixture
async def booking(register, session):
    patient = await register(Role.PATIENT, "Asha Menon")
    clinic = await register(Role.CLINIC, "City Care Clinic")
    other_clinic = await register(Role.CLINIC, "Lakeside Clinic")
    specialty = Specialty(name="Dermatology")
    session.add(specialty)
    await session.commit()
    doctor = Doctor(clinic_id=clinic.id, name="Dr. Nair", specialty_id=specialty.id)
    session.add(doctor)
    await session.commit()
    return {"patient": patient, "clinic": clinic, "other_clinic": other_clinic, "doctor": doctor}


def request_for(clinic, doctor=None, day=None):
    return AppointmentCreate(
        clinic_id=clinic.id,
        doctor_id=doctor.id if doctor else None,
        appointment_date=day or date.today() + timedelta(days=3),
        appointment_time=time(9, 30),
    )


async def test_new_appointment_is_pending(session, booking):
    service = AppointmentService(session)
    appointment = await service.create_appointment(booking["patient"].id, request_for(booking["clinic"], booking["doctor"]))

    assert appointment.status == "pending"
    assert appointment.patient_id == booking["patient"].id


async def test_status_moves_forward(session, booking):
    service = AppointmentService(session)
    clinic = booking["clinic"]
    appointment = await service.create_appointment(booking["patient"].id, request_for(clinic))

    appointment = await service.update_status(clinic.id, appointment.id, "confirmed")
    assert appointment.status == "confirmed"
    appointment = await service.update_status(clinic.id, appointment.id, "completed")
    assert appointment.status == "completed"

    with pytest.raises(InvalidTransitionError):
        await service.update_status(clinic.id, appointment.id, "pending")


async def test_pending_cannot_jump_to_completed(session, booking):
    service = AppointmentService(session)
    clinic = booking["clinic"]
    appointment = await service.create_appointment(booking["patient"].id, request_for(clinic))

    with pytest.raises(InvalidTransitionError) as e:
        await service.update_status(clinic.id, appointment.id, "completed")
    assert e.value.current == "pending"


async def test_only_owning_clinic_updates_status(session, booking):
    service = AppointmentService(session)
    appointment = await service.create_appointment(booking["patient"].id, request_for(booking["clinic"]))

    with pytest.raises(ForbiddenError):
        await service.update_status(booking["other_clinic"].id, appointment.id, "confirmed")


async def test_doctor_must_belong_to_clinic(session, booking):
    service = AppointmentService(session)
    with pytest.raises(NotFoundError):
        await service.create_appointment(
            booking["patient"].id, request_for(booking["other_clinic"], booking["doctor"])
        )


async def test_unavailable_doctor_cannot_be_booked(session, booking):
    doctor = booking["doctor"]
    doctor.available = False
    session.add(doctor)
    await session.commit()

    with pytest.raises(ForbiddenError):
        await AppointmentService(session).create_appointment(
            booking["patient"].id, request_for(booking["clinic"], doctor)
        )


async def test_lists_carry_joined_display_fields(session, booking):
    service = AppointmentService(session)
    clinic = booking["clinic"]
    await service.create_appointment(booking["patient"].id, request_for(clinic, booking["doctor"]))
    await service.create_appointment(booking["patient"].id, request_for(clinic, day=date.today()))

    for_clinic = await service.get_clinic_appointments(clinic.id)
    for_patient = await service.get_patient_appointments(booking["patient"].id)

    assert [a.patient.full_name for a in for_clinic] == ["Asha Menon", "Asha Menon"]
    assert for_clinic[0].doctor is None
    assert for_clinic[1].doctor.name == "Dr. Nair"
    assert for_clinic[1].doctor.specialty == "Dermatology"
    assert {a.clinic.clinic_name for a in for_patient} == {"City Care Clinic"}

    summary = summarize_clinic_appointments(for_clinic)
    assert summary.today_count == 1
    assert len(summary.pending) == 2
    assert summary.confirmed == []


async def test_patient_list_honours_limit(session, booking):
    service = AppointmentService(session)
    for offset in range(4):
        await service.create_appointment(
            booking["patient"].id, request_for(booking["clinic"], day=date.today() + timedelta(days=offset))
        )

    assert len(await service.get_patient_appointments(booking["patient"].id, limit=2)) == 2
