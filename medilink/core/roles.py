"""
Role resolution.

A user id maps to at most one tenant role through the ``user_roles`` table.
The resolver reports three outcomes: a role, no role (``None``), or a lookup
failure (``RoleLookupError``). What to do on failure is the caller's policy,
see ``AuthContext``.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select

from medilink.core.errors import RoleLookupError
from medilink.core.logger import logger
from medilink.db.models import RoleAssignment

log = logger.getChild("roles")


class Role(str, Enum):
    PATIENT = "patient"
    PHARMACY = "pharmacy"
    CLINIC = "clinic"

    @property
    def dashboard_path(self) -> str:
        return f"/dashboard/{self.value}"


class ResolutionKind(str, Enum):
    UNKNOWN = "unknown"
    RESOLVED = "resolved"
    NONE = "none"


@dataclass(frozen=True)
class RoleResolution:
    kind: ResolutionKind
    role: Optional[Role] = None

    @classmethod
    def unknown(cls) -> "RoleResolution":
        return cls(ResolutionKind.UNKNOWN)

    @classmethod
    def none(cls) -> "RoleResolution":
        return cls(ResolutionKind.NONE)

    @classmethod
    def resolved(cls, role: Role) -> "RoleResolution":
        return cls(ResolutionKind.RESOLVED, role)

    @property
    def is_pending(self) -> bool:
        return self.kind == ResolutionKind.UNKNOWN


class RoleResolver:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_user_role(self, user_id: UUID) -> Optional[Role]:
        stmt = select(RoleAssignment.role).where(RoleAssignment.user_id == user_id)
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                rows = result.scalars().all()
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as exc:
            log.error(f"Error fetching user role for {user_id}: {exc!r}")
            raise RoleLookupError() from exc

        if not rows:
            log.warning(f"No role found for user: {user_id}")
            return None
        if len(rows) > 1:
            # user_roles.user_id is unique; more than one row is a broken table
            log.error(f"Multiple roles found for user: {user_id}")
            raise RoleLookupError("Multiple roles assigned")

        try:
            return Role(rows[0])
        except ValueError:
            log.warning(f"Unsupported role '{rows[0]}' for user: {user_id}")
            return None
