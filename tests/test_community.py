"""
Community posts, likes, groups and health events.
"""

from datetime import date, time
from uuid import uuid4

import pytest
from sqlmodel import select

from medilink.core.errors import ConflictError, ForbiddenError, MutationError, NotFoundError
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
from medilink.schemas.community import EventCreate, PostCreate
from medilink.services.community_service import CommunityService

TODAY = date(2026, 10, 19)


@pytest.fixture
async def people(session):
    asha, ravi = Profile(full_name="Asha Menon"), Profile(full_name="Ravi Kumar")
    clinic = Clinic(clinic_name="City Care", address="1 Main St")
    diabetes = CommunityGroup(name="Diabetes Support")
    moms = CommunityGroup(name="New Moms", category="family_circle")
    hidden = CommunityGroup(name="Oncology Circle", is_private=True)
    session.add_all([asha, ravi, clinic, diabetes, moms, hidden])
    await session.commit()
    return {
        "asha": asha,
        "ravi": ravi,
        "clinic": clinic,
        "diabetes": diabetes,
        "moms": moms,
        "hidden": hidden,
    }


def event(clinic_id, on, **kwargs):
    return HealthEvent(
        clinic_id=clinic_id,
        title=kwargs.pop("title", "Free BP Camp"),
        event_date=on,
        location="Community Hall",
        **kwargs,
    )


# ── Posts & likes ────────────────────────────────────────────────────

async def test_post_in_group_carries_group_name(session, people):
    service = CommunityService(session)
    await service.create_post(
        people["asha"].id, PostCreate(title="Hi", content="Sugar levels", group_id=people["diabetes"].id)
    )
    await service.create_post(people["ravi"].id, PostCreate(title="Tips", content="Walk daily", is_anonymous=True))

    posts = {p.title: p for p in await service.get_posts()}

    assert posts["Hi"].group_name == "Diabetes Support"
    assert posts["Hi"].author_name == "Asha Menon"
    assert posts["Tips"].group_name is None
    assert posts["Tips"].author_name == "Anonymous"


async def test_posts_can_be_filtered_by_group(session, people):
    service = CommunityService(session)
    await service.create_post(
        people["asha"].id, PostCreate(title="In group", content="x", group_id=people["moms"].id)
    )
    await service.create_post(people["asha"].id, PostCreate(title="Public", content="y"))

    posts = await service.get_posts(group_id=people["moms"].id)

    assert [p.title for p in posts] == ["In group"]


async def test_post_in_unknown_group_is_rejected(session, people):
    with pytest.raises(NotFoundError):
        await CommunityService(session).create_post(
            people["asha"].id, PostCreate(title="Hi", content="x", group_id=uuid4())
        )


async def test_like_increments_count(session, people):
    service = CommunityService(session)
    post = await service.create_post(people["asha"].id, PostCreate(title="Hi", content="x"))

    await service.like_post(people["asha"].id, post.id)
    liked = await service.like_post(people["ravi"].id, post.id)

    assert liked.likes_count == 2


async def test_duplicate_like_is_conflict(session, people):
    service = CommunityService(session)
    post = await service.create_post(people["asha"].id, PostCreate(title="Hi", content="x"))
    await service.like_post(people["ravi"].id, post.id)

    with pytest.raises(ConflictError) as exc:
        await service.like_post(people["ravi"].id, post.id)

    assert exc.value.detail == "You already liked this post"
    stored = (await session.execute(select(CommunityPost).where(CommunityPost.id == post.id))).scalar_one()
    await session.refresh(stored)
    assert stored.likes_count == 1
    likes = (await session.execute(select(PostLike))).scalars().all()
    assert len(likes) == 1


async def test_like_missing_post_is_not_found(session, people):
    with pytest.raises(NotFoundError):
        await CommunityService(session).like_post(people["asha"].id, uuid4())


# ── Groups ───────────────────────────────────────────────────────────

async def test_groups_report_member_count_and_membership(session, people):
    session.add_all([
        GroupMember(group_id=people["diabetes"].id, profile_id=people["asha"].id),
        GroupMember(group_id=people["diabetes"].id, profile_id=people["ravi"].id),
        GroupMember(group_id=people["moms"].id, profile_id=people["ravi"].id),
    ])
    await session.commit()

    groups = {g.name: g for g in await CommunityService(session).get_groups(people["asha"].id)}

    assert groups["Diabetes Support"].member_count == 2
    assert groups["Diabetes Support"].is_member is True
    assert groups["New Moms"].member_count == 1
    assert groups["New Moms"].is_member is False
    assert groups["Oncology Circle"].member_count == 0


async def test_group_listing_is_three_queries(session, people, queries):
    queries.reset()
    await CommunityService(session).get_groups(people["asha"].id)
    assert queries.count == 3


async def test_available_groups_skip_joined_and_private(session, people):
    service = CommunityService(session)
    await service.join_group(people["asha"].id, people["diabetes"].id)

    groups = await service.get_groups(people["asha"].id, available_only=True)

    assert [g.name for g in groups] == ["New Moms"]


async def test_join_group_twice_is_conflict(session, people):
    service = CommunityService(session)
    await service.join_group(people["asha"].id, people["moms"].id)

    with pytest.raises(ConflictError) as exc:
        await service.join_group(people["asha"].id, people["moms"].id)

    assert exc.value.detail == "You are already a member of this group"


async def test_private_group_cannot_be_joined(session, people):
    with pytest.raises(ForbiddenError):
        await CommunityService(session).join_group(people["asha"].id, people["hidden"].id)


# ── Events ───────────────────────────────────────────────────────────

async def test_upcoming_events_have_clinic_names(session, people):
    clinic_id = people["clinic"].id
    session.add_all([
        event(clinic_id, date(2026, 10, 25), title="Later"),
        event(clinic_id, TODAY, title="Today"),
        event(clinic_id, date(2026, 10, 1), title="Past"),
        event(None, date(2026, 10, 20), title="Independent"),
    ])
    await session.commit()

    events = await CommunityService(session).get_upcoming_events(today=TODAY)

    assert [e.title for e in events] == ["Today", "Independent", "Later"]
    assert events[0].clinic_name == "City Care"
    assert events[1].clinic_name is None


async def test_event_from_removed_clinic_gets_placeholder(session, people):
    session.add(event(uuid4(), date(2026, 10, 25)))
    await session.commit()

    events = await CommunityService(session).get_upcoming_events(today=TODAY)

    assert events[0].clinic_name == "Unknown Clinic"


async def test_clinic_publishes_free_event(session, people):
    created = await CommunityService(session).create_event(
        people["clinic"].id,
        EventCreate(title="Flu shots", event_type="vaccination", event_date=date(2026, 11, 3),
                    event_time=time(9, 0), location="Clinic lobby", is_free=True, cost=200),
    )

    assert created.clinic_name == "City Care"
    assert created.cost == 0
    assert created.current_participants == 0


async def test_registration_counts_participants(session, people):
    service = CommunityService(session)
    camp = event(people["clinic"].id, date(2026, 10, 25))
    session.add(camp)
    await session.commit()

    registered = await service.register_for_event(people["asha"].id, camp.id, today=TODAY)

    assert registered.current_participants == 1
    with pytest.raises(ConflictError):
        await service.register_for_event(people["asha"].id, camp.id, today=TODAY)


async def test_full_event_rejects_registration(session, people):
    camp = event(people["clinic"].id, date(2026, 10, 25), max_participants=1, current_participants=1)
    session.add(camp)
    await session.commit()

    with pytest.raises(MutationError) as exc:
        await CommunityService(session).register_for_event(people["ravi"].id, camp.id, today=TODAY)

    assert exc.value.detail == "This event is full"
    assert (await session.execute(select(EventParticipant))).scalars().all() == []


async def test_past_event_rejects_registration(session, people):
    camp = event(people["clinic"].id, date(2026, 10, 1))
    session.add(camp)
    await session.commit()

    with pytest.raises(MutationError):
        await CommunityService(session).register_for_event(people["ravi"].id, camp.id, today=TODAY)
