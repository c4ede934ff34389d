from sqlmodel import SQLModel, Field
from uuid import UUID, uuid4

class Specialty(SQLModel, table=True):
    __tablename__ = "specialties"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(unique=True)
