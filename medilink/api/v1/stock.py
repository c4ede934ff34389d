from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from medilink.api.deps import get_current_pharmacy
from medilink.db.models import Pharmacy
from medilink.db.session import get_session
from medilink.schemas.stock import StockItemCreate, StockItemResponse, StockItemUpdate
from medilink.services.dashboard_service import or_empty
from medilink.services.stock_service import StockService

router = APIRouter()

async def get_stock_service(session: AsyncSession = Depends(get_session)) -> StockService:
    return StockService(session)

@router.get("/", response_model=List[StockItemResponse])
async def read_stock(
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
    service: StockService = Depends(get_stock_service),
):
    return await or_empty(service.get_stock(pharmacy.id), "stock", [])

@router.get("/low", response_model=List[StockItemResponse])
async def read_low_stock(
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
    service: StockService = Depends(get_stock_service),
):
    return await or_empty(service.get_low_stock(pharmacy.id), "low stock", [])

@router.get("/expiring", response_model=List[StockItemResponse])
async def read_expiring_stock(
    within_days: int = 30,
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
    service: StockService = Depends(get_stock_service),
):
    return await or_empty(service.get_expiring(pharmacy.id, within_days), "expiring stock", [])

@router.post("/", response_model=StockItemResponse)
async def add_stock_item(
    request: StockItemCreate,
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
    service: StockService = Depends(get_stock_service),
):
    return await service.add_item(pharmacy.id, request)

@router.patch("/{item_id}", response_model=StockItemResponse)
async def update_stock_item(
    item_id: UUID,
    request: StockItemUpdate,
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
    service: StockService = Depends(get_stock_service),
):
    return await service.update_item(pharmacy.id, item_id, request)

@router.delete("/{item_id}")
async def delete_stock_item(
    item_id: UUID,
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
    service: StockService = Depends(get_stock_service),
):
    await service.delete_item(pharmacy.id, item_id)
    return {"message": "Stock item deleted successfully"}
