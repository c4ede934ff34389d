from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from medilink.api.deps import get_current_patient, get_current_pharmacy
from medilink.db.models import Pharmacy, Profile
from medilink.db.session import get_session
from medilink.schemas.order import (
    OrderCreate,
    OrderResponse,
    OrderStatusUpdate,
    PatientOrder,
    PharmacyOrderList,
)
from medilink.services.dashboard_service import or_empty
from medilink.services.order_service import OrderService, summarize_pharmacy_orders

router = APIRouter()

async def get_order_service(session: AsyncSession = Depends(get_session)) -> OrderService:
    return OrderService(session)

@router.post("/", response_model=OrderResponse)
async def place_order(
    request: OrderCreate,
    patient: Profile = Depends(get_current_patient),
    service: OrderService = Depends(get_order_service),
):
    return await service.create_order(patient.id, request)

@router.get("/mine", response_model=List[PatientOrder])
async def read_my_orders(
    patient: Profile = Depends(get_current_patient),
    service: OrderService = Depends(get_order_service),
):
    return await or_empty(service.get_patient_orders(patient.id), "orders", [])

@router.get("/pharmacy", response_model=PharmacyOrderList)
async def read_pharmacy_orders(
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
    service: OrderService = Depends(get_order_service),
):
    orders = await or_empty(service.get_pharmacy_orders(pharmacy.id), "orders", [])
    return summarize_pharmacy_orders(orders)

@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: UUID,
    request: OrderStatusUpdate,
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
    service: OrderService = Depends(get_order_service),
):
    return await service.update_status(pharmacy.id, order_id, request.status)
