from datetime import date, timedelta
from typing import List, Optional
from uuid import UUID

from sqlmodel import select

from medilink.core.errors import ForbiddenError, NotFoundError
from medilink.core.logger import logger
from medilink.db.models import StockItem
from medilink.schemas.stock import StockItemCreate, StockItemUpdate
from medilink.services.base import BaseService

log = logger.getChild("stock")

DUPLICATE_BATCH = "Batch number already exists for this pharmacy"
SAVE_FAILED = "Failed to save stock item"


class StockService(BaseService):
    async def get_stock(self, pharmacy_id: UUID, limit: Optional[int] = None) -> List[StockItem]:
        stmt = (
            select(StockItem)
            .where(StockItem.pharmacy_id == pharmacy_id)
            .order_by(StockItem.medicine_name, StockItem.batch_number)
        )
        if limit:
            stmt = stmt.limit(limit)
        return await self._fetch_all(stmt, "stock")

    async def get_low_stock(self, pharmacy_id: UUID) -> List[StockItem]:
        stmt = (
            select(StockItem)
            .where(
                StockItem.pharmacy_id == pharmacy_id,
                StockItem.quantity <= StockItem.minimum_stock_level,
            )
            .order_by(StockItem.quantity)
        )
        return await self._fetch_all(stmt, "low stock")

    async def get_expiring(self, pharmacy_id: UUID, within_days: int = 30, today: Optional[date] = None) -> List[StockItem]:
        today = today or date.today()
        stmt = (
            select(StockItem)
            .where(
                StockItem.pharmacy_id == pharmacy_id,
                StockItem.expiry_date.is_not(None),
                StockItem.expiry_date <= today + timedelta(days=within_days),
            )
            .order_by(StockItem.expiry_date)
        )
        return await self._fetch_all(stmt, "expiring stock")

    async def _get_owned(self, pharmacy_id: UUID, item_id: UUID) -> StockItem:
        item = await self._get(StockItem, item_id, "stock item")
        if not item:
            raise NotFoundError("Stock item not found")
        if item.pharmacy_id != pharmacy_id:
            raise ForbiddenError("Stock item belongs to another pharmacy")
        return item

    async def add_item(self, pharmacy_id: UUID, data: StockItemCreate) -> StockItem:
        item = StockItem(**data.model_dump(), pharmacy_id=pharmacy_id)
        self.session.add(item)
        await self._commit(SAVE_FAILED, DUPLICATE_BATCH)
        await self.session.refresh(item)
        log.info(f"Stock item {item.id} ({item.batch_number}) added for pharmacy {pharmacy_id}")
        return item

    async def update_item(self, pharmacy_id: UUID, item_id: UUID, data: StockItemUpdate) -> StockItem:
        item = await self._get_owned(pharmacy_id, item_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(item, key, value)
        self.session.add(item)
        await self._commit(SAVE_FAILED, DUPLICATE_BATCH)
        await self.session.refresh(item)
        return item

    async def delete_item(self, pharmacy_id: UUID, item_id: UUID):
        item = await self._get_owned(pharmacy_id, item_id)
        await self.session.delete(item)
        await self._commit("Failed to delete stock item")
        log.info(f"Stock item {item_id} deleted for pharmacy {pharmacy_id}")
