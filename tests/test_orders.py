from datetime import date, datetime
from types import SimpleNamespace
from uuid import uuid4

import pytest

from medilink.core.errors import ForbiddenError, InvalidTransitionError, NotFoundError
from medilink.core.roles import Role
from medilink.schemas.appointment import PatientRef
from medilink.schemas.order import OrderCreate, PharmacyOrder
from medilink.services import order_service
from medilink.services.order_service import (
    OrderService,
    plain_pending_orders,
    summarize_pharmacy_orders,
    urgent_orders,
)


def order_request(pharmacy, urgent=False):
    return OrderCreate(
        pharmacy_id=pharmacy.id,
        medicines="Paracetamol 500mg x 10",
        delivery_address="12 Park Road",
        phone="9800000000",
        is_urgent=urgent,
    )


def pharmacy_order(status, urgent, created_at=None):
    return PharmacyOrder(
        id=uuid4(),
        patient_id=uuid4(),
        pharmacy_id=uuid4(),
        medicines="Cetirizine",
        delivery_address="1 Hill St",
        phone="9800000000",
        payment_method="cash",
        is_urgent=urgent,
        status=status,
        created_at=created_at or datetime(2026, 10, 19, 9, 0),
        patient=PatientRef(full_name="Ravi"),
    )


@pytest.fixture
async def parties(register):
    return {
        "patient": await register(Role.PATIENT, "Ravi Kumar"),
        "pharmacy": await register(Role.PHARMACY, "Green Cross Pharmacy"),
        "other_pharmacy": await register(Role.PHARMACY, "Corner Chemist"),
    }


def test_urgent_and_plain_pending_are_disjoint():
    orders = [
        pharmacy_order("pending", urgent=True),
        pharmacy_order("pending", urgent=False),
        pharmacy_order("confirmed", urgent=True),
        pharmacy_order("delivered", urgent=False),
    ]

    urgent = urgent_orders(orders)
    pending = plain_pending_orders(orders)

    assert [o.id for o in urgent] == [orders[0].id]
    assert [o.id for o in pending] == [orders[1].id]
    assert not {o.id for o in urgent} & {o.id for o in pending}


def test_summary_counts_todays_orders():
    orders = [
        pharmacy_order("pending", False, datetime(2026, 10, 19, 8, 0)),
        pharmacy_order("pending", False, datetime(2026, 10, 18, 8, 0)),
    ]
    summary = summarize_pharmacy_orders(orders, today=date(2026, 10, 19))
    assert summary.today_count == 1
    assert len(summary.orders) == 2


async def test_order_walks_through_every_status(session, parties):
    service = OrderService(session)
    pharmacy = parties["pharmacy"]
    order = await service.create_order(parties["patient"].id, order_request(pharmacy))
    assert order.status == "pending"

    for status in ("confirmed", "preparing", "out_for_delivery", "delivered"):
        order = await service.update_status(pharmacy.id, order.id, status)
        assert order.status == status

    with pytest.raises(InvalidTransitionError):
        await service.update_status(pharmacy.id, order.id, "pending")


async def test_order_cannot_skip_a_step(session, parties):
    service = OrderService(session)
    pharmacy = parties["pharmacy"]
    order = await service.create_order(parties["patient"].id, order_request(pharmacy))

    with pytest.raises(InvalidTransitionError):
        await service.update_status(pharmacy.id, order.id, "out_for_delivery")


async def test_started_order_cannot_be_cancelled(session, parties):
    service = OrderService(session)
    pharmacy = parties["pharmacy"]
    order = await service.create_order(parties["patient"].id, order_request(pharmacy))
    await service.update_status(pharmacy.id, order.id, "confirmed")
    await service.update_status(pharmacy.id, order.id, "preparing")

    with pytest.raises(InvalidTransitionError):
        await service.update_status(pharmacy.id, order.id, "cancelled")


async def test_other_pharmacy_cannot_touch_order(session, parties):
    service = OrderService(session)
    order = await service.create_order(parties["patient"].id, order_request(parties["pharmacy"]))

    with pytest.raises(ForbiddenError):
        await service.update_status(parties["other_pharmacy"].id, order.id, "confirmed")


async def test_order_for_unknown_pharmacy_is_rejected(session, parties):
    fake = SimpleNamespace(id=uuid4())
    with pytest.raises(NotFoundError):
        await OrderService(session).create_order(parties["patient"].id, order_request(fake))


async def test_order_lists_join_counterparty(session, parties):
    service = OrderService(session)
    pharmacy = parties["pharmacy"]
    await service.create_order(parties["patient"].id, order_request(pharmacy, urgent=True))
    await service.create_order(parties["patient"].id, order_request(pharmacy))

    incoming = await service.get_pharmacy_orders(pharmacy.id)
    placed = await service.get_patient_orders(parties["patient"].id)

    assert {o.patient.full_name for o in incoming} == {"Ravi Kumar"}
    assert {o.pharmacy.pharmacy_name for o in placed} == {"Green Cross Pharmacy"}
    summary = summarize_pharmacy_orders(incoming)
    assert len(summary.urgent) == 1
    assert len(summary.pending) == 1


def test_today_count_uses_the_clock_of_created_at(monkeypatch):
    # 00:30 UTC on the 20th is still the 19th in zones west of UTC
    monkeypatch.setattr(order_service, "utc_today", lambda: date(2026, 10, 20))
    orders = [
        pharmacy_order("pending", False, datetime(2026, 10, 20, 0, 30)),
        pharmacy_order("pending", False, datetime(2026, 10, 19, 23, 30)),
    ]

    assert summarize_pharmacy_orders(orders).today_count == 1


async def test_order_placed_now_counts_as_today(session, parties):
    service = OrderService(session)
    pharmacy = parties["pharmacy"]
    await service.create_order(parties["patient"].id, order_request(pharmacy))

    summary = summarize_pharmacy_orders(await service.get_pharmacy_orders(pharmacy.id))

    assert summary.today_count == 1
