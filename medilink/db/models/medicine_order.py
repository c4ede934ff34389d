from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID, uuid4

class MedicineOrder(SQLModel, table=True):
    __tablename__ = "medicine_orders"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    patient_id: UUID = Field(foreign_key="profiles.id", index=True)
    pharmacy_id: UUID = Field(foreign_key="pharmacies.id", index=True)
    medicines: str
    delivery_address: str
    phone: str
    payment_method: str = Field(default="cash")
    is_urgent: bool = Field(default=False)
    status: str = Field(default="pending") # pending, confirmed, preparing, out_for_delivery, delivered, cancelled
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
