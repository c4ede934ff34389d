from typing import List, Optional, Union
from uuid import UUID

from sqlmodel import select

from medilink.core.errors import NotFoundError
from medilink.core.logger import logger
from medilink.core.roles import Role
from medilink.db.models import Clinic, Pharmacy, Profile, Specialty
from medilink.services.base import BaseService

log = logger.getChild("tenants")

Tenant = Union[Profile, Clinic, Pharmacy]

TENANT_MODELS = {
    Role.PATIENT: Profile,
    Role.PHARMACY: Pharmacy,
    Role.CLINIC: Clinic,
}


class TenantService(BaseService):
    """
    Resolves the acting tenant for an account. Seed rows have no user_id and
    can never be returned here.
    """

    async def get_tenant(self, role: Role, user_id: Optional[UUID]) -> Tenant:
        model = TENANT_MODELS[role]
        if user_id is None:
            raise NotFoundError(f"No {role.value} profile for this account")
        stmt = select(model).where(model.user_id == user_id)
        tenant = await self._fetch_one(stmt, f"{role.value} profile")
        if tenant is None:
            raise NotFoundError(f"No {role.value} profile for this account")
        return tenant

    async def get_profile_for_user(self, user_id: UUID) -> Profile:
        return await self.get_tenant(Role.PATIENT, user_id)

    async def get_pharmacy_for_user(self, user_id: UUID) -> Pharmacy:
        return await self.get_tenant(Role.PHARMACY, user_id)

    async def get_clinic_for_user(self, user_id: UUID) -> Clinic:
        return await self.get_tenant(Role.CLINIC, user_id)

    async def get_clinic(self, clinic_id: UUID) -> Clinic:
        clinic = await self._get(Clinic, clinic_id, "clinic")
        if not clinic:
            raise NotFoundError("Clinic not found")
        return clinic

    async def get_pharmacy(self, pharmacy_id: UUID) -> Pharmacy:
        pharmacy = await self._get(Pharmacy, pharmacy_id, "pharmacy")
        if not pharmacy:
            raise NotFoundError("Pharmacy not found")
        return pharmacy

    async def list_clinics(self, limit: Optional[int] = None) -> List[Clinic]:
        stmt = select(Clinic).order_by(Clinic.clinic_name)
        if limit:
            stmt = stmt.limit(limit)
        return await self._fetch_all(stmt, "clinics")

    async def list_pharmacies(self, limit: Optional[int] = None) -> List[Pharmacy]:
        stmt = select(Pharmacy).order_by(Pharmacy.pharmacy_name)
        if limit:
            stmt = stmt.limit(limit)
        return await self._fetch_all(stmt, "pharmacies")

    async def list_for_review(self, model) -> list:
        """Newest first, verified or not."""
        return await self._fetch_all(select(model).order_by(model.created_at.desc()), model.__tablename__)

    async def set_verified(self, model, tenant_id: UUID, verified: bool) -> Tenant:
        tenant = await self._get(model, tenant_id, model.__tablename__)
        if not tenant:
            raise NotFoundError(f"{model.__name__} not found")
        tenant.verified = verified
        self.session.add(tenant)
        await self._commit("Failed to update verification")
        log.info(f"{model.__name__} {tenant_id} verified={verified}")
        return tenant

    async def list_specialties(self) -> List[Specialty]:
        return await self._fetch_all(select(Specialty).order_by(Specialty.name), "specialties")
