from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from typing import Optional, List

from medilink.core.status import OrderStatus
from medilink.schemas.appointment import PatientRef

class OrderCreate(BaseModel):
    pharmacy_id: UUID
    medicines: str = Field(min_length=1)
    delivery_address: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    payment_method: str = "cash"
    is_urgent: bool = False
    notes: Optional[str] = None

class OrderStatusUpdate(BaseModel):
    status: OrderStatus

class OrderResponse(BaseModel):
    id: UUID
    patient_id: UUID
    pharmacy_id: UUID
    medicines: str
    delivery_address: str
    phone: str
    payment_method: str
    is_urgent: bool
    status: str
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class PharmacyRef(BaseModel):
    pharmacy_name: str
    phone: str = ""

class PharmacyOrder(OrderResponse):
    patient: PatientRef

class PatientOrder(OrderResponse):
    pharmacy: PharmacyRef

class PharmacyOrderList(BaseModel):
    orders: List[PharmacyOrder]
    urgent: List[PharmacyOrder]
    pending: List[PharmacyOrder]
    today_count: int
