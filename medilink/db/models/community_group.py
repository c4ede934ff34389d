from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from datetime import datetime
from uuid import UUID, uuid4

class CommunityGroup(SQLModel, table=True):
    __tablename__ = "community_groups"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    description: Optional[str] = None
    category: str = Field(default="condition_support") # condition_support, wellness_challenge, local_group, family_circle
    is_private: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)

class GroupMember(SQLModel, table=True):
    __tablename__ = "group_members"
    __table_args__ = (
        UniqueConstraint("group_id", "profile_id", name="uq_group_members_profile"),
    )
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    group_id: UUID = Field(foreign_key="community_groups.id", index=True)
    profile_id: UUID = Field(foreign_key="profiles.id", index=True)
    joined_at: datetime = Field(default_factory=datetime.utcnow)
