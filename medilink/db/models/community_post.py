from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from datetime import datetime
from uuid import UUID, uuid4

class CommunityPost(SQLModel, table=True):
    __tablename__ = "community_posts"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    author_id: UUID = Field(foreign_key="profiles.id", index=True)
    group_id: Optional[UUID] = Field(default=None, foreign_key="community_groups.id", index=True)
    title: str
    content: str
    post_type: str = Field(default="discussion") # discussion, question, story, event, challenge
    is_anonymous: bool = Field(default=False)
    likes_count: int = Field(default=0)
    replies_count: int = Field(default=0)
    created_at: datetime = Field(default_factory=datetime.utcnow)

class PostLike(SQLModel, table=True):
    __tablename__ = "post_likes"
    __table_args__ = (
        UniqueConstraint("post_id", "profile_id", name="uq_post_likes_profile"),
    )
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    post_id: UUID = Field(foreign_key="community_posts.id", index=True)
    profile_id: UUID = Field(foreign_key="profiles.id")
    created_at: datetime = Field(default_factory=datetime.utcnow)
