from __future__ import annotations

import pytest

from campushub.schemas.groups import Group
from campushub.services.datastore import InMemoryDataStore


@pytest.mark.asyncio
async def test_missing_ids_return_none_or_empty() -> None:
    store = InMemoryDataStore()

    assert await store.get_user("nope") is None
    assert await store.get_group("nope") is None
    assert await store.get_message("nope") is None
    assert await store.list_messages("nope") == []
    assert await store.list_registrations("nope") == []
    assert await store.delete_post("nope") is False
    assert await store.remove_registration("nope", "u") == 0


@pytest.mark.asyncio
async def test_reads_are_copies_until_saved() -> None:
    store = InMemoryDataStore()
    await store.save_group(Group(id="g1", name="Group", category="Clubs"))

    loaded = await store.get_group("g1")
    loaded.members.append("u1")
    assert (await store.get_group("g1")).members == []

    await store.save_group(loaded)
    assert (await store.get_group("g1")).members == ["u1"]


@pytest.mark.asyncio
async def test_email_lookup_is_case_insensitive(hub) -> None:
    user = await hub.add_user("Case Test")
    found = await hub.store.get_user_by_email(user.email.upper())
    assert found is not None and found.id == user.id
