"""
Health community: posts, likes, groups and health events.

Community participation is tied to the patient profile. Events are published
by clinics. Duplicate likes, memberships and registrations are conflicts.
"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlmodel import func, select

from medilink.core.errors import ForbiddenError, MutationError, NotFoundError
from medilink.core.logger import logger
from medilink.core.reconcile import ForeignJoin, reconcile
from medilink.core.utils import utc_today
from medilink.db.models import (
    Clinic,
    CommunityGroup,
    CommunityPost,
    EventParticipant,
    GroupMember,
    HealthEvent,
    PostLike,
    Profile,
)
from medilink.schemas.community import EventCreate, EventResponse, GroupResponse, PostCreate, PostResponse
from medilink.services.base import BaseService

log = logger.getChild("community")

AUTHOR_JOIN = ForeignJoin("author_id", Profile, "author", ("full_name",), {"full_name": "Unknown"})
GROUP_JOIN = ForeignJoin(
    "group_id", CommunityGroup, "group", ("name",), {"name": "Unknown Group"}, optional=True
)
EVENT_CLINIC_JOIN = ForeignJoin(
    "clinic_id", Clinic, "clinic", ("clinic_name",), {"clinic_name": "Unknown Clinic"}, optional=True
)

ALREADY_LIKED = "You already liked this post"
ALREADY_MEMBER = "You are already a member of this group"
ALREADY_REGISTERED = "You are already registered for this event"


def _to_post(item: dict) -> PostResponse:
    name = "Anonymous" if item["is_anonymous"] else item["author"]["full_name"]
    group = item["group"]
    return PostResponse(**item, author_name=name, group_name=group["name"] if group else None)


def _to_event(item: dict) -> EventResponse:
    clinic = item["clinic"]
    return EventResponse(**item, clinic_name=clinic["clinic_name"] if clinic else None)


class CommunityService(BaseService):
    async def get_posts(self, limit: int = 20, group_id: Optional[UUID] = None) -> List[PostResponse]:
        stmt = select(CommunityPost)
        if group_id is not None:
            stmt = stmt.where(CommunityPost.group_id == group_id)
        stmt = stmt.order_by(CommunityPost.created_at.desc()).limit(limit)
        rows = await self._fetch_all(stmt, "community posts")
        merged = await reconcile(self.session, rows, [AUTHOR_JOIN, GROUP_JOIN])
        return [_to_post(item) for item in merged]

    async def _post_response(self, post: CommunityPost) -> PostResponse:
        merged = await reconcile(self.session, [post], [AUTHOR_JOIN, GROUP_JOIN])
        return _to_post(merged[0])

    async def create_post(self, author_id: UUID, data: PostCreate) -> PostResponse:
        if data.group_id is not None and not await self._get(CommunityGroup, data.group_id, "group"):
            raise NotFoundError("Group not found")
        post = CommunityPost(author_id=author_id, **data.model_dump())
        self.session.add(post)
        await self._commit("Failed to create post")
        await self.session.refresh(post)
        return await self._post_response(post)

    async def like_post(self, profile_id: UUID, post_id: UUID) -> PostResponse:
        post = await self._get(CommunityPost, post_id, "post")
        if not post:
            raise NotFoundError("Post not found")
        self.session.add(PostLike(post_id=post_id, profile_id=profile_id))
        await self._flush("Failed to like post", ALREADY_LIKED)
        post.likes_count = CommunityPost.likes_count + 1
        self.session.add(post)
        await self._commit("Failed to like post", ALREADY_LIKED)
        await self.session.refresh(post)
        return await self._post_response(post)

    async def get_groups(
        self, profile_id: UUID, limit: int = 10, available_only: bool = False
    ) -> List[GroupResponse]:
        """Groups with member counts. ``available_only`` lists public groups not yet joined."""
        stmt = select(CommunityGroup)
        if available_only:
            joined = select(GroupMember.group_id).where(GroupMember.profile_id == profile_id)
            stmt = stmt.where(CommunityGroup.is_private.is_(False), CommunityGroup.id.not_in(joined))
        stmt = stmt.order_by(CommunityGroup.name).limit(limit)
        groups = await self._fetch_all(stmt, "community groups")
        if not groups:
            return []

        ids = [g.id for g in groups]
        counts = dict(await self._fetch_rows(
            select(GroupMember.group_id, func.count(GroupMember.id))
            .where(GroupMember.group_id.in_(ids))
            .group_by(GroupMember.group_id),
            "group members",
        ))
        memberships = set(await self._fetch_all(
            select(GroupMember.group_id).where(
                GroupMember.profile_id == profile_id, GroupMember.group_id.in_(ids)
            ),
            "group memberships",
        ))
        return [
            GroupResponse(
                id=g.id,
                name=g.name,
                description=g.description,
                category=g.category,
                member_count=counts.get(g.id, 0),
                is_member=g.id in memberships,
            )
            for g in groups
        ]

    async def join_group(self, profile_id: UUID, group_id: UUID) -> GroupMember:
        group = await self._get(CommunityGroup, group_id, "group")
        if not group:
            raise NotFoundError("Group not found")
        if group.is_private:
            raise ForbiddenError("This group is private")
        member = GroupMember(group_id=group_id, profile_id=profile_id)
        self.session.add(member)
        await self._commit("Failed to join group", ALREADY_MEMBER)
        log.info(f"Profile {profile_id} joined group {group_id}")
        return member

    async def get_upcoming_events(self, limit: int = 10, today: Optional[date] = None) -> List[EventResponse]:
        today = today or utc_today()
        stmt = (
            select(HealthEvent)
            .where(HealthEvent.event_date >= today)
            .order_by(HealthEvent.event_date, HealthEvent.event_time)
            .limit(limit)
        )
        rows = await self._fetch_all(stmt, "health events")
        merged = await reconcile(self.session, rows, [EVENT_CLINIC_JOIN])
        return [_to_event(item) for item in merged]

    async def _event_response(self, event: HealthEvent) -> EventResponse:
        merged = await reconcile(self.session, [event], [EVENT_CLINIC_JOIN])
        return _to_event(merged[0])

    async def create_event(self, clinic_id: UUID, data: EventCreate) -> EventResponse:
        event = HealthEvent(**data.model_dump(), clinic_id=clinic_id)
        self.session.add(event)
        await self._commit("Failed to create event")
        await self.session.refresh(event)
        log.info(f"Event {event.id} published by clinic {clinic_id}")
        return await self._event_response(event)

    async def register_for_event(
        self, profile_id: UUID, event_id: UUID, today: Optional[date] = None
    ) -> EventResponse:
        event = await self._get(HealthEvent, event_id, "event")
        if not event:
            raise NotFoundError("Event not found")
        if event.event_date < (today or utc_today()):
            raise MutationError("This event has already taken place")
        if event.current_participants >= event.max_participants:
            raise MutationError("This event is full")

        self.session.add(EventParticipant(event_id=event_id, profile_id=profile_id))
        await self._flush("Failed to register for event", ALREADY_REGISTERED)
        event.current_participants = HealthEvent.current_participants + 1
        self.session.add(event)
        await self._commit("Failed to register for event", ALREADY_REGISTERED)
        await self.session.refresh(event)
        return await self._event_response(event)
