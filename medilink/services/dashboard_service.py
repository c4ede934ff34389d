"""
Dashboard assembly for the three tenant kinds.

Each section is fetched independently inside its own savepoint. A section
whose fetch fails is logged and rendered empty, and the savepoint rollback
keeps the transaction usable for the sections after it.
"""

from typing import Awaitable, TypeVar
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from medilink.core.config import settings
from medilink.core.errors import FetchError
from medilink.core.logger import logger
from medilink.schemas.dashboard import ClinicDashboard, PatientDashboard, PharmacyDashboard
from medilink.schemas.directory import ClinicResponse, PharmacyResponse, ProfileResponse, SpecialtyResponse
from medilink.schemas.stock import StockItemResponse
from medilink.services.appointment_service import AppointmentService, summarize_clinic_appointments
from medilink.services.doctor_service import DoctorService
from medilink.services.order_service import OrderService, summarize_pharmacy_orders
from medilink.services.stock_service import StockService
from medilink.services.tenant_service import TenantService
from medilink.services.base import BaseService

log = logger.getChild("dashboard")

T = TypeVar("T")


async def or_empty(fetch: Awaitable[T], what: str, empty: T) -> T:
    try:
        return await fetch
    except FetchError as exc:
        log.warning(f"Showing no {what}: {exc.detail}")
        return empty


class DashboardService(BaseService):
    async def _isolated(self, fetch: Awaitable[T], what: str) -> T:
        try:
            async with self.session.begin_nested():
                return await fetch
        except SQLAlchemyError as exc:
            log.error(f"Error isolating {what}: {exc}")
            raise FetchError(f"Failed to load {what}") from exc

    async def _section(self, fetch: Awaitable[T], what: str, empty: T) -> T:
        return await or_empty(self._isolated(fetch, what), what, empty)

    async def patient_dashboard(self, user_id: UUID) -> PatientDashboard:
        tenants = TenantService(self.session)
        profile = await tenants.get_profile_for_user(user_id)
        appointments = AppointmentService(self.session)
        orders = OrderService(self.session)

        return PatientDashboard(
            profile=ProfileResponse.model_validate(profile),
            appointments=await self._section(
                appointments.get_patient_appointments(profile.id, limit=settings.PATIENT_DASHBOARD_LIMIT),
                "appointments", [],
            ),
            orders=await self._section(orders.get_patient_orders(profile.id), "orders", []),
            pharmacies=[
                PharmacyResponse.model_validate(p)
                for p in await self._section(tenants.list_pharmacies(limit=settings.DIRECTORY_LIMIT), "pharmacies", [])
            ],
            clinics=[
                ClinicResponse.model_validate(c)
                for c in await self._section(tenants.list_clinics(), "clinics", [])
            ],
            specialties=[
                SpecialtyResponse.model_validate(s)
                for s in await self._section(tenants.list_specialties(), "specialties", [])
            ],
        )

    async def pharmacy_dashboard(self, user_id: UUID) -> PharmacyDashboard:
        pharmacy = await TenantService(self.session).get_pharmacy_for_user(user_id)
        orders = await self._section(OrderService(self.session).get_pharmacy_orders(pharmacy.id), "orders", [])
        low_stock = await self._section(StockService(self.session).get_low_stock(pharmacy.id), "low stock", [])
        return PharmacyDashboard(
            pharmacy=PharmacyResponse.model_validate(pharmacy),
            orders=summarize_pharmacy_orders(orders),
            low_stock=[StockItemResponse.model_validate(item) for item in low_stock],
        )

    async def clinic_dashboard(self, user_id: UUID) -> ClinicDashboard:
        clinic = await TenantService(self.session).get_clinic_for_user(user_id)
        appointments = await self._section(
            AppointmentService(self.session).get_clinic_appointments(clinic.id), "appointments", []
        )
        doctor_count = await self._section(DoctorService(self.session).count_doctors(clinic.id), "doctors", 0)
        return ClinicDashboard(
            clinic=ClinicResponse.model_validate(clinic),
            appointments=summarize_clinic_appointments(appointments),
            doctor_count=doctor_count,
        )
