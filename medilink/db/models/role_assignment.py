from sqlmodel import SQLModel, Field
from datetime import datetime
from uuid import UUID, uuid4

class RoleAssignment(SQLModel, table=True):
    __tablename__ = "user_roles"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="accounts.id", unique=True, index=True)
    role: str # patient, pharmacy, clinic
    created_at: datetime = Field(default_factory=datetime.utcnow)
