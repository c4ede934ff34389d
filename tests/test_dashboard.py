"""
Dashboard sections are isolated: one failing fetch renders that section
empty and leaves the others intact.
"""

import logging

import pytest
from sqlalchemy import event, text

from medilink.core.roles import Role
from medilink.schemas.order import OrderCreate
from medilink.schemas.stock import StockItemCreate
from medilink.services.dashboard_service import DashboardService
from medilink.services.order_service import OrderService
from medilink.services.stock_service import StockService


@pytest.fixture
def statements(engine):
    seen = []

    def record(conn, cursor, statement, parameters, context, executemany):
        seen.append(statement.strip().upper())

    event.listen(engine.sync_engine, "before_cursor_execute", record)
    yield seen
    event.remove(engine.sync_engine, "before_cursor_execute", record)


@pytest.fixture
async def pharmacy(register, session):
    pharmacy = await register(Role.PHARMACY, "Green Cross Pharmacy")
    patient = await register(Role.PATIENT, "Ravi Kumar")
    await StockService(session).add_item(
        pharmacy.id, StockItemCreate(medicine_name="Insulin", batch_number="B-9", quantity=2)
    )
    await OrderService(session).create_order(
        patient.id,
        OrderCreate(pharmacy_id=pharmacy.id, medicines="Insulin", delivery_address="4 Lake Rd", phone="98000"),
    )
    return pharmacy


async def broken_orders(self, pharmacy_id, limit=None):
    return await self._fetch_all(text("SELECT * FROM missing_orders"), "orders")


async def test_sections_render_when_all_fetches_succeed(session, pharmacy):
    dashboard = await DashboardService(session).pharmacy_dashboard(pharmacy.user_id)

    assert len(dashboard.orders.orders) == 1
    assert [item.batch_number for item in dashboard.low_stock] == ["B-9"]


async def test_failed_section_does_not_empty_later_sections(session, pharmacy, statements, monkeypatch, caplog):
    caplog.set_level(logging.WARNING, logger="medilink")
    user_id = pharmacy.user_id
    monkeypatch.setattr(OrderService, "get_pharmacy_orders", broken_orders)

    dashboard = await DashboardService(session).pharmacy_dashboard(user_id)

    assert dashboard.orders.orders == []
    assert dashboard.pharmacy.pharmacy_name == "Green Cross Pharmacy"
    assert [item.batch_number for item in dashboard.low_stock] == ["B-9"]
    assert any(s.startswith("ROLLBACK TO SAVEPOINT") for s in statements)
    assert "Showing no orders" in caplog.text
