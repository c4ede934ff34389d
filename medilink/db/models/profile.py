from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID, uuid4

class Profile(SQLModel, table=True):
    """Patient profile. Rows without user_id are seed data."""
    __tablename__ = "profiles"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: Optional[UUID] = Field(default=None, foreign_key="accounts.id", unique=True, index=True)
    full_name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    verified: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)
