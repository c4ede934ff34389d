from pydantic import BaseModel, Field, model_validator
from uuid import UUID
from datetime import date, datetime, time
from typing import Optional, Literal

class PostCreate(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    post_type: Literal["discussion", "question", "story", "event", "challenge"] = "discussion"
    is_anonymous: bool = False
    group_id: Optional[UUID] = None

class PostResponse(BaseModel):
    id: UUID
    title: str
    content: str
    post_type: str
    is_anonymous: bool
    likes_count: int
    replies_count: int
    created_at: datetime
    author_name: str
    group_id: Optional[UUID] = None
    group_name: Optional[str] = None

class GroupResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    category: str
    member_count: int
    is_member: bool

class EventCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    event_type: Literal["health_camp", "vaccination", "workshop", "screening"] = "health_camp"
    event_date: date
    event_time: Optional[time] = None
    location: str = Field(min_length=1)
    max_participants: int = Field(default=50, ge=1)
    is_free: bool = True
    cost: float = Field(default=0, ge=0)
    contact_phone: Optional[str] = None

    @model_validator(mode="after")
    def free_events_cost_nothing(self):
        if self.is_free:
            self.cost = 0
        return self

class EventResponse(BaseModel):
    id: UUID
    title: str
    description: Optional[str] = None
    event_type: str
    event_date: date
    event_time: Optional[time] = None
    location: str
    is_free: bool
    cost: float
    current_participants: int
    max_participants: int
    clinic_name: Optional[str] = None
