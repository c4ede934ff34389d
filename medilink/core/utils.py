from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")

def round_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)

def line_total(quantity: int, unit_price: float) -> Decimal:
    # Always derived from the stored quantity and price
    return round_money(Decimal(str(quantity)) * Decimal(str(unit_price)))

def utc_today() -> date:
    # created_at columns hold naive UTC timestamps
    return datetime.now(timezone.utc).date()

def stock_status(quantity: int, minimum_stock_level: int) -> str:
    if quantity <= minimum_stock_level:
        return "low"
    if quantity <= minimum_stock_level * 1.5:
        return "warning"
    return "normal"
