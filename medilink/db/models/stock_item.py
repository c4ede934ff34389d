from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from datetime import date, datetime
from uuid import UUID, uuid4

class StockItem(SQLModel, table=True):
    __tablename__ = "pharmacy_stock"
    __table_args__ = (
        UniqueConstraint("pharmacy_id", "batch_number", name="uq_pharmacy_stock_batch"),
    )
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    pharmacy_id: UUID = Field(foreign_key="pharmacies.id", index=True)
    medicine_name: str
    generic_name: Optional[str] = None
    manufacturer: Optional[str] = None
    batch_number: str
    quantity: int = Field(default=0)
    unit: str = Field(default="pieces")
    purchase_price: float = Field(default=0)
    selling_price: float = Field(default=0)
    purchase_date: Optional[date] = None
    expiry_date: Optional[date] = None
    supplier_name: Optional[str] = None
    supplier_contact: Optional[str] = None
    storage_location: Optional[str] = None
    minimum_stock_level: int = Field(default=10)
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
