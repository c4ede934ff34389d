from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlmodel import select

from medilink.core.errors import ForbiddenError, NotFoundError
from medilink.core.logger import logger
from medilink.core.reconcile import ForeignJoin, reconcile
from medilink.core.status import ORDER_TRANSITIONS, OrderStatus, ensure_transition
from medilink.core.utils import utc_today
from medilink.db.models import MedicineOrder, Pharmacy, Profile
from medilink.schemas.order import OrderCreate, PatientOrder, PharmacyOrder, PharmacyOrderList
from medilink.services.base import BaseService

log = logger.getChild("orders")

PATIENT_JOIN = ForeignJoin(
    "patient_id", Profile, "patient", ("full_name",), {"full_name": "Unknown Patient"}
)
PHARMACY_JOIN = ForeignJoin(
    "pharmacy_id", Pharmacy, "pharmacy", ("pharmacy_name", "phone"),
    {"pharmacy_name": "Unknown Pharmacy", "phone": ""},
)


class OrderService(BaseService):
    async def create_order(self, patient_id: UUID, data: OrderCreate) -> MedicineOrder:
        pharmacy = await self._get(Pharmacy, data.pharmacy_id, "pharmacy")
        if not pharmacy:
            raise NotFoundError("Pharmacy not found")

        order = MedicineOrder(
            patient_id=patient_id,
            pharmacy_id=data.pharmacy_id,
            medicines=data.medicines,
            delivery_address=data.delivery_address,
            phone=data.phone,
            payment_method=data.payment_method,
            is_urgent=data.is_urgent,
            notes=data.notes or None,
            status=OrderStatus.PENDING.value,
        )
        self.session.add(order)
        await self._commit("Failed to place order")
        await self.session.refresh(order)
        log.info(f"Order {order.id} placed with pharmacy {data.pharmacy_id} (urgent={order.is_urgent})")
        return order

    async def get_pharmacy_orders(self, pharmacy_id: UUID, limit: Optional[int] = None) -> List[PharmacyOrder]:
        stmt = (
            select(MedicineOrder)
            .where(MedicineOrder.pharmacy_id == pharmacy_id)
            .order_by(MedicineOrder.created_at.desc())
        )
        if limit:
            stmt = stmt.limit(limit)
        rows = await self._fetch_all(stmt, "orders")
        merged = await reconcile(self.session, rows, [PATIENT_JOIN])
        return [PharmacyOrder.model_validate(item) for item in merged]

    async def get_patient_orders(self, patient_id: UUID, limit: Optional[int] = None) -> List[PatientOrder]:
        stmt = (
            select(MedicineOrder)
            .where(MedicineOrder.patient_id == patient_id)
            .order_by(MedicineOrder.created_at.desc())
        )
        if limit:
            stmt = stmt.limit(limit)
        rows = await self._fetch_all(stmt, "orders")
        merged = await reconcile(self.session, rows, [PHARMACY_JOIN])
        return [PatientOrder.model_validate(item) for item in merged]

    async def update_status(self, pharmacy_id: UUID, order_id: UUID, status) -> MedicineOrder:
        order = await self._get(MedicineOrder, order_id, "order")
        if not order:
            raise NotFoundError("Order not found")
        if order.pharmacy_id != pharmacy_id:
            raise ForbiddenError("Order belongs to another pharmacy")

        status = getattr(status, "value", status)
        ensure_transition(ORDER_TRANSITIONS, order.status, status)
        order.status = status
        self.session.add(order)
        await self._commit("Failed to update order")
        await self.session.refresh(order)
        log.info(f"Order {order_id} -> {status}")
        return order


def urgent_orders(orders: List[PharmacyOrder]) -> List[PharmacyOrder]:
    return [o for o in orders if o.is_urgent and o.status == OrderStatus.PENDING.value]


def plain_pending_orders(orders: List[PharmacyOrder]) -> List[PharmacyOrder]:
    # Urgent pending orders are listed under urgent_orders only
    return [o for o in orders if o.status == OrderStatus.PENDING.value and not o.is_urgent]


def summarize_pharmacy_orders(orders: List[PharmacyOrder], today: Optional[date] = None) -> PharmacyOrderList:
    today = today or utc_today()
    return PharmacyOrderList(
        orders=orders,
        urgent=urgent_orders(orders),
        pending=plain_pending_orders(orders),
        today_count=sum(1 for o in orders if o.created_at.date() == today),
    )
