from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from datetime import date, datetime, time
from uuid import UUID, uuid4

class HealthEvent(SQLModel, table=True):
    __tablename__ = "health_events"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    clinic_id: Optional[UUID] = Field(default=None, foreign_key="clinics.id", index=True)
    title: str
    description: Optional[str] = None
    event_type: str = Field(default="health_camp") # health_camp, vaccination, workshop, screening
    event_date: date
    event_time: Optional[time] = None
    location: str
    is_free: bool = Field(default=True)
    cost: float = Field(default=0)
    max_participants: int = Field(default=50)
    current_participants: int = Field(default=0)
    contact_phone: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

class EventParticipant(SQLModel, table=True):
    __tablename__ = "event_participants"
    __table_args__ = (
        UniqueConstraint("event_id", "profile_id", name="uq_event_participants_profile"),
    )
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="health_events.id", index=True)
    profile_id: UUID = Field(foreign_key="profiles.id")
    registered_at: datetime = Field(default_factory=datetime.utcnow)
