"""ActivityRecorder: recording and reading the audit trail."""

import pytest

from notesync.core.errors import ForbiddenError
from notesync.core.models.activity import ActivityAction
from notesync.core.services.activity_service import ActivityRecorder


@pytest.mark.asyncio
async def test_list_is_capped_at_page_size(test_session, note, owner):
    recorder = ActivityRecorder(test_session)
    for i in range(55):
        await recorder.record(owner.id, note.id, ActivityAction.UPDATE, {"n": i})
    await test_session.commit()

    entries = await recorder.list_for(note.id, owner.id)
    assert len(entries) == 50
    assert entries[0].details == {"n": 54}
    assert entries[0].user_name == "Olivia Owner"

    assert len(await recorder.list_for(note.id, owner.id, limit=500)) == 50
    assert len(await recorder.list_for(note.id, owner.id, limit=5)) == 5


@pytest.mark.asyncio
async def test_viewer_may_read_activity(test_session, note, owner, viewer, grant):
    await grant(note, viewer, "viewer")
    recorder = ActivityRecorder(test_session)
    await recorder.record(owner.id, note.id, "create")
    await test_session.commit()

    entries = await recorder.list_for(note.id, viewer.id)
    assert [e.action for e in entries] == ["create"]


@pytest.mark.asyncio
async def test_stranger_may_not_read_activity(test_session, note, stranger):
    with pytest.raises(ForbiddenError):
        await ActivityRecorder(test_session).list_for(note.id, stranger.id)


@pytest.mark.asyncio
async def test_record_does_not_commit(test_session, note, owner):
    note_id, owner_id = note.id, owner.id
    recorder = ActivityRecorder(test_session)
    await recorder.record(owner_id, note_id, ActivityAction.PIN)
    await test_session.rollback()

    assert await recorder.list_for(note_id, owner_id) == []
