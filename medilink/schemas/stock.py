from pydantic import BaseModel, Field, computed_field
from uuid import UUID
from datetime import date
from decimal import Decimal
from typing import Optional

from medilink.core.utils import line_total, stock_status as classify_stock

class StockItemBase(BaseModel):
    medicine_name: str = Field(min_length=1)
    generic_name: Optional[str] = None
    manufacturer: Optional[str] = None
    batch_number: str = Field(min_length=1)
    quantity: int = Field(default=0, ge=0)
    unit: str = "pieces"
    purchase_price: float = Field(default=0, ge=0)
    selling_price: float = Field(default=0, ge=0)
    purchase_date: Optional[date] = None
    expiry_date: Optional[date] = None
    supplier_name: Optional[str] = None
    supplier_contact: Optional[str] = None
    storage_location: Optional[str] = None
    minimum_stock_level: int = Field(default=10, ge=0)
    notes: Optional[str] = None

class StockItemCreate(StockItemBase):
    pass

class StockItemUpdate(BaseModel):
    medicine_name: Optional[str] = None
    generic_name: Optional[str] = None
    manufacturer: Optional[str] = None
    batch_number: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    unit: Optional[str] = None
    purchase_price: Optional[float] = Field(default=None, ge=0)
    selling_price: Optional[float] = Field(default=None, ge=0)
    purchase_date: Optional[date] = None
    expiry_date: Optional[date] = None
    supplier_name: Optional[str] = None
    supplier_contact: Optional[str] = None
    storage_location: Optional[str] = None
    minimum_stock_level: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None

class StockItemResponse(StockItemBase):
    id: UUID
    pharmacy_id: UUID

    @computed_field
    @property
    def stock_value(self) -> Decimal:
        return line_total(self.quantity, self.selling_price)

    @computed_field
    @property
    def stock_status(self) -> str:
        return classify_stock(self.quantity, self.minimum_stock_level)

    class Config:
        from_attributes = True
