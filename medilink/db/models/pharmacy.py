from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID, uuid4

class Pharmacy(SQLModel, table=True):
    __tablename__ = "pharmacies"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: Optional[UUID] = Field(default=None, foreign_key="accounts.id", unique=True, index=True)
    pharmacy_name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    license_number: Optional[str] = None
    verified: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)
