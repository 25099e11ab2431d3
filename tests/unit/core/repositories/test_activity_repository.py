"""Tests for ActivityRepository."""

from notesync.core.repositories import ActivityRepository


async def test_list_is_newest_first_and_limited(test_session, note, owner):
    repo = ActivityRepository(test_session)
    for i in range(5):
        await repo.append(owner.id, note.id, "update", {"n": i})
    await test_session.commit()

    entries = await repo.list_for_note(note.id, limit=3)

    assert [e.details["n"] for e in entries] == [4, 3, 2]
    assert all(e.user.name == "Olivia Owner" for e in entries)


async def test_entries_without_note_are_not_listed(test_session, note, owner):
    repo = ActivityRepository(test_session)
    await repo.append(owner.id, None, "login")
    await repo.append(owner.id, note.id, "create")
    await test_session.commit()

    entries = await repo.list_for_note(note.id, limit=50)
    assert [e.action for e in entries] == ["create"]
