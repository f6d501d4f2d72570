from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from campushub.core.exceptions import NotFoundError, ValidationFailedError
from campushub.schemas.admin import AdminUserUpdate
from campushub.schemas.announcements import AnnouncementCreate
from campushub.schemas.events import EventCreate
from campushub.schemas.users import UserRole
from campushub.services.admin import ACCOUNT_DELETED_CLOSE_CODE

NOW = datetime(2030, 5, 1, 12, 0, tzinfo=timezone.utc)


def _event_payload(**overrides) -> EventCreate:
    data = {"title": "Career Fair", "date": NOW + timedelta(days=2), "location": "Gym"}
    data.update(overrides)
    return EventCreate(**data)


@pytest.mark.asyncio
async def test_delete_user_cascades_membership_registrations_and_session(hub) -> None:
    ada = await hub.add_user("Ada", role=UserRole.admin)
    cleo = await hub.add_user("Cleo")
    vic = await hub.add_user("Vic")
    bo = await hub.add_user("Bo")
    group = await hub.add_group(cleo, vic, bo)
    event = await hub.events.create_event(ada, _event_payload())
    await hub.events.register(event.id, vic)
    await hub.events.save_event(event.id, vic)
    await hub.typing.on_typing_start(group.id, vic.id, "Vic")
    vic_conn, bo_conn = hub.connect(vic), hub.connect(bo)

    await hub.admin.delete_user(ada, vic.id)

    assert await hub.store.get_user(vic.id) is None
    assert await hub.store.list_notifications(vic.id) == []
    assert await hub.store.list_saved_events(vic.id) == []

    refreshed = await hub.store.get_group(group.id)
    assert refreshed.members == [cleo.id, bo.id]
    assert refreshed.member_count == 2
    assert vic.id not in refreshed.member_roles
    [left] = bo_conn.of_type("member_left")
    assert left["data"]["userId"] == vic.id

    assert await hub.store.list_registrations(event.id) == []
    assert (await hub.store.get_event(event.id)).current_participants == 0
    assert bo_conn.of_type("event_registration_update")[-1]["data"]["currentParticipants"] == 0

    assert not hub.typing.is_typing(group.id, vic.id)
    assert not hub.sessions.is_connected(vic.id)
    assert vic_conn.close_code == ACCOUNT_DELETED_CLOSE_CODE


@pytest.mark.asyncio
async def test_cannot_delete_self_or_a_group_creator(hub) -> None:
    ada = await hub.add_user("Ada", role=UserRole.admin)
    cleo = await hub.add_user("Cleo")
    group = await hub.add_group(cleo)

    with pytest.raises(ValidationFailedError) as self_delete:
        await hub.admin.delete_user(ada, ada.id)
    assert self_delete.value.code == "self_delete"

    with pytest.raises(ValidationFailedError) as owner:
        await hub.admin.delete_user(ada, cleo.id)
    assert owner.value.code == "user_owns_groups"
    assert owner.value.details == {"group_ids": [group.id]}
    assert await hub.store.get_user(cleo.id) is not None

    with pytest.raises(NotFoundError):
        await hub.admin.delete_user(ada, "ghost")


@pytest.mark.asyncio
async def test_update_user_changes_only_given_fields(hub) -> None:
    sam = await hub.add_user("Sam")

    updated = await hub.admin.update_user(
        sam.id, AdminUserUpdate(role=UserRole.admin, year="4th Year")
    )

    assert (updated.role, updated.year) == (UserRole.admin, "4th Year")
    assert updated.full_name == "Sam"
    assert updated.department == "Computer Science"
    assert (await hub.store.get_user(sam.id)).role == UserRole.admin

    with pytest.raises(NotFoundError):
        await hub.admin.update_user("ghost", AdminUserUpdate(full_name="Nobody"))


@pytest.mark.asyncio
async def test_user_listings_are_public_views(hub) -> None:
    await hub.add_user("Ada", role=UserRole.admin)
    sam = await hub.add_user("Sam")

    students = await hub.admin.list_students()
    users = await hub.admin.list_users()

    assert [s.id for s in students] == [sam.id]
    assert len(users) == 2
    assert all(not hasattr(u, "password_hash") for u in users)


@pytest.mark.asyncio
async def test_stats_count_upcoming_non_cancelled_events_and_unread(hub) -> None:
    ada = await hub.add_user("Ada", role=UserRole.admin)
    sam = await hub.add_user("Sam")
    await hub.add_group(sam)
    await hub.events.create_event(ada, _event_payload())
    await hub.events.create_event(
        ada, _event_payload(title="Old Fair", date=NOW - timedelta(days=1))
    )
    await hub.events.create_event(ada, _event_payload(title="Called Off", cancelled=True))
    await hub.announcements.create_announcement(
        ada, AnnouncementCreate(title="Library", description="Open late this week")
    )
    [first, *_] = await hub.store.list_notifications(sam.id)
    await hub.notifications.mark_read(first.id, sam.id)

    dashboard = await hub.admin.dashboard_stats(sam.id, now=NOW)
    stats = await hub.admin.admin_stats(ada.id, now=NOW)

    assert dashboard.total_announcements == 1
    assert dashboard.total_groups == 1
    assert dashboard.upcoming_events == 1
    assert dashboard.unread_notifications == 3
    assert (stats.total_users, stats.total_events, stats.upcoming_events) == (2, 3, 1)
    assert stats.unread_notifications == 0


@pytest.mark.asyncio
async def test_saved_events_are_per_user(hub) -> None:
    ada = await hub.add_user("Ada", role=UserRole.admin)
    sam = await hub.add_user("Sam")
    tia = await hub.add_user("Tia")
    later = await hub.events.create_event(ada, _event_payload(date=NOW + timedelta(days=5)))
    sooner = await hub.events.create_event(ada, _event_payload(title="Meetup"))

    assert await hub.events.save_event(later.id, sam) is True
    assert await hub.events.save_event(sooner.id, sam) is True
    assert await hub.events.save_event(sooner.id, sam) is False

    assert [e.id for e in await hub.events.list_saved(sam)] == [sooner.id, later.id]
    assert await hub.events.list_saved(tia) == []

    assert await hub.events.unsave_event(sooner.id, sam) is True
    assert await hub.events.unsave_event(sooner.id, sam) is False
    assert [e.id for e in await hub.events.list_saved(sam)] == [later.id]

    await hub.events.delete_event(later.id)
    assert await hub.events.list_saved(sam) == []

    with pytest.raises(NotFoundError):
        await hub.events.save_event("nope", sam)


@pytest.mark.asyncio
async def test_category_and_upcoming_listings(hub) -> None:
    ada = await hub.add_user("Ada", role=UserRole.admin)
    talk = await hub.events.create_event(ada, _event_payload(category="Academic"))
    game = await hub.events.create_event(
        ada, _event_payload(title="Derby", category="Sports", date=NOW + timedelta(days=10))
    )
    await hub.events.create_event(
        ada, _event_payload(title="Rained Out", category="Sports", cancelled=True)
    )

    assert [e.id for e in await hub.events.list_by_category("Academic")] == [talk.id]
    assert len(await hub.events.list_by_category("Sports")) == 2
    assert await hub.events.list_by_category("Cultural") == []

    assert [e.id for e in await hub.events.list_upcoming(7, now=NOW)] == [talk.id]
    assert {e.id for e in await hub.events.list_upcoming(30, now=NOW)} == {talk.id, game.id}
    assert await hub.events.list_upcoming(1, now=NOW) == []
