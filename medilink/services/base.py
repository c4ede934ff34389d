from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from medilink.core.errors import FetchError, MutationError, classify_integrity_error
from medilink.core.logger import logger

log = logger.getChild("services")


class BaseService:
    """Shared fetch / commit handling. Subclasses keep the query logic."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _fetch_all(self, stmt, what: str) -> list:
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            log.error(f"Error fetching {what}: {exc}")
            raise FetchError(f"Failed to load {what}") from exc
        return list(result.scalars().all())

    async def _fetch_one(self, stmt, what: str):
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            log.error(f"Error fetching {what}: {exc}")
            raise FetchError(f"Failed to load {what}") from exc
        return result.scalars().first()

    async def _get(self, model, ident, what: str):
        try:
            return await self.session.get(model, ident)
        except SQLAlchemyError as exc:
            log.error(f"Error fetching {what}: {exc}")
            raise FetchError(f"Failed to load {what}") from exc

    async def _commit(self, generic_detail: str, conflict_detail: Optional[str] = None):
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            log.warning(f"Integrity error: {exc.orig}")
            raise classify_integrity_error(exc, conflict_detail or generic_detail, generic_detail) from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            log.error(f"Error saving changes: {exc}")
            raise MutationError(generic_detail) from exc

    async def _flush(self, generic_detail: str, conflict_detail: Optional[str] = None):
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise classify_integrity_error(exc, conflict_detail or generic_detail, generic_detail) from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            log.error(f"Error saving changes: {exc}")
            raise MutationError(generic_detail) from exc

    async def _fetch_rows(self, stmt, what: str) -> list:
        """Like _fetch_all, for multi-column selects."""
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            log.error(f"Error fetching {what}: {exc}")
            raise FetchError(f"Failed to load {what}") from exc
        return list(result.all())
