"""NoteService against an in-memory SQLite database."""

import uuid

import pytest
from sqlalchemy import select

from notesync.core.errors import ForbiddenError, InvalidInputError, NotFoundError
from notesync.core.models import ActivityLog
from notesync.core.schemas.notes import NoteCreate, NoteUpdate
from notesync.core.services.note_service import NoteService


async def _actions(session, note_id):
    result = await session.execute(
        select(ActivityLog.action).where(ActivityLog.note_id == note_id).order_by(ActivityLog.id)
    )
    return list(result.scalars())


@pytest.mark.asyncio
async def test_create_note_records_activity(test_session, owner):
    svc = NoteService(test_session)

    resp = await svc.create_note(owner.id, NoteCreate(title="Groceries", content="milk"))

    assert resp.title == "Groceries"
    assert resp.owner_id == owner.id
    assert resp.owner_name == "Olivia Owner"
    assert resp.user_permission == "owner"
    assert resp.is_pinned is False
    assert resp.collaborators == []
    assert await _actions(test_session, resp.id) == ["create"]


@pytest.mark.asyncio
async def test_create_note_rejects_blank_title(test_session, owner):
    svc = NoteService(test_session)
    request = NoteCreate.model_construct(title="   ", content="", tags="")

    with pytest.raises(InvalidInputError):
        await svc.create_note(owner.id, request)


@pytest.mark.asyncio
async def test_get_note_missing_is_not_found(test_session, owner):
    with pytest.raises(NotFoundError):
        await NoteService(test_session).get_note(uuid.uuid4(), owner.id)


@pytest.mark.asyncio
async def test_get_note_stranger_is_forbidden(test_session, note, stranger):
    with pytest.raises(ForbiddenError):
        await NoteService(test_session).get_note(note.id, stranger.id)


@pytest.mark.asyncio
async def test_get_note_lists_collaborators(test_session, note, owner, editor, viewer, grant):
    await grant(note, editor, "editor")
    await grant(note, viewer, "viewer")
    svc = NoteService(test_session)

    resp = await svc.get_note(note.id, viewer.id)

    assert resp.user_permission == "viewer"
    assert {(c.name, c.permission) for c in resp.collaborators} == {
        ("Ed Editor", "editor"),
        ("Vera Viewer", "viewer"),
    }


@pytest.mark.asyncio
async def test_share_token_only_visible_to_owner(test_session, make_note, owner, editor, grant):
    note = await make_note(owner, "Public", share_token="tok")
    await grant(note, editor, "editor")
    svc = NoteService(test_session)

    assert (await svc.get_note(note.id, owner.id)).share_token == "tok"
    assert (await svc.get_note(note.id, editor.id)).share_token is None


@pytest.mark.asyncio
async def test_editor_can_update_content(test_session, note, editor, grant):
    await grant(note, editor, "editor")
    svc = NoteService(test_session)

    resp = await svc.update_note(note.id, editor.id, NoteUpdate(content="milk, eggs"))

    assert resp.content == "milk, eggs"
    assert resp.title == "Groceries"
    assert resp.user_permission == "editor"
    assert await _actions(test_session, note.id) == ["update"]

    entry = (await test_session.execute(select(ActivityLog))).scalars().one()
    assert entry.user_id == editor.id
    assert entry.details == {"fields": ["content"]}


@pytest.mark.asyncio
async def test_viewer_cannot_update(test_session, note, viewer, grant):
    await grant(note, viewer, "viewer")

    with pytest.raises(ForbiddenError):
        await NoteService(test_session).update_note(note.id, viewer.id, NoteUpdate(content="x"))
    assert await _actions(test_session, note.id) == []


@pytest.mark.asyncio
@pytest.mark.parametrize("action", ["delete_note", "toggle_pin"])
async def test_owner_only_operations_refuse_editor(test_session, note, editor, grant, action):
    await grant(note, editor, "editor")
    svc = NoteService(test_session)

    with pytest.raises(ForbiddenError):
        await getattr(svc, action)(note.id, editor.id)


@pytest.mark.asyncio
async def test_delete_keeps_activity_with_null_note(test_session, note, owner):
    await NoteService(test_session).delete_note(note.id, owner.id)

    rows = (await test_session.execute(select(ActivityLog.action, ActivityLog.note_id))).all()
    assert rows == [("delete", None)]

    with pytest.raises(NotFoundError):
        await NoteService(test_session).get_note(note.id, owner.id)


@pytest.mark.asyncio
async def test_toggle_pin_moves_note_first(test_session, make_note, owner):
    older = await make_note(owner, "older")
    await make_note(owner, "newer")
    svc = NoteService(test_session)

    resp = await svc.toggle_pin(older.id, owner.id)
    assert resp.is_pinned is True

    titles = [n.title for n in await svc.list_notes(owner.id)]
    assert titles[0] == "older"

    entry = (await test_session.execute(select(ActivityLog))).scalars().one()
    assert (entry.action, entry.details) == ("pin", {"is_pinned": True})


@pytest.mark.asyncio
async def test_list_and_search_report_caller_role(test_session, note, make_note, owner, viewer, grant):
    await grant(note, viewer, "viewer")
    await make_note(viewer, "Viewer's own milk")
    svc = NoteService(test_session)

    listed = {n.title: n.user_permission for n in await svc.list_notes(viewer.id)}
    assert listed == {"Groceries": "viewer", "Viewer's own milk": "owner"}

    found = {n.title for n in await svc.search_notes(viewer.id, "MILK")}
    assert found == {"Groceries", "Viewer's own milk"}
    assert await svc.search_notes(viewer.id, "") == []


@pytest.mark.asyncio
async def test_shared_note_read_by_token(test_session, make_note, owner):
    await make_note(owner, "Public", content="hello", share_token="abc")
    svc = NoteService(test_session)

    shared = await svc.get_shared_note("abc")
    assert shared.title == "Public"
    assert shared.owner_name == "Olivia Owner"

    with pytest.raises(NotFoundError):
        await svc.get_shared_note("nope")
