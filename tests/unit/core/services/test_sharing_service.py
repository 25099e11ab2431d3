"""SharingService: share tokens and collaborator grants."""

import pytest
from sqlalchemy import select

from notesync.core.errors import ForbiddenError, InvalidInputError, NotFoundError
from notesync.core.models import ActivityLog
from notesync.core.repositories import CollaboratorRepository
from notesync.core.schemas.sharing import CollaboratorRequest
from notesync.core.services.sharing_service import SharingService


async def _actions(session):
    result = await session.execute(select(ActivityLog.action).order_by(ActivityLog.id))
    return list(result.scalars())


@pytest.mark.asyncio
async def test_share_token_is_stable(test_session, note, owner):
    svc = SharingService(test_session)

    first = await svc.generate_share_token(note.id, owner.id)
    second = await svc.generate_share_token(note.id, owner.id)

    assert first.share_token
    assert first.share_token == second.share_token
    assert await _actions(test_session) == ["share"]


@pytest.mark.asyncio
async def test_share_requires_owner(test_session, note, editor, grant):
    await grant(note, editor, "editor")

    with pytest.raises(ForbiddenError):
        await SharingService(test_session).generate_share_token(note.id, editor.id)


@pytest.mark.asyncio
async def test_add_collaborator_then_change_level(test_session, note, owner, editor):
    svc = SharingService(test_session)

    added = await svc.add_collaborator(
        note.id, owner.id, CollaboratorRequest(email="EDITOR@example.com", permission="viewer")
    )
    assert (added.user_id, added.permission) == (editor.id, "viewer")

    await svc.add_collaborator(
        note.id, owner.id, CollaboratorRequest(email="editor@example.com", permission="editor")
    )
    repo = CollaboratorRepository(test_session)
    assert await repo.get_permission(note.id, editor.id) == "editor"
    assert len(await repo.list_for_note(note.id)) == 1
    assert await _actions(test_session) == ["add_collaborator", "add_collaborator"]


@pytest.mark.asyncio
async def test_add_collaborator_invalid_permission(test_session, note, owner, editor):
    with pytest.raises(InvalidInputError):
        await SharingService(test_session).add_collaborator(
            note.id, owner.id, CollaboratorRequest(email=editor.email, permission="admin")
        )


@pytest.mark.asyncio
async def test_add_collaborator_unknown_email(test_session, note, owner):
    with pytest.raises(NotFoundError):
        await SharingService(test_session).add_collaborator(
            note.id, owner.id, CollaboratorRequest(email="ghost@example.com", permission="viewer")
        )


@pytest.mark.asyncio
async def test_owner_cannot_add_themselves(test_session, note, owner):
    with pytest.raises(InvalidInputError):
        await SharingService(test_session).add_collaborator(
            note.id, owner.id, CollaboratorRequest(email=owner.email, permission="editor")
        )
    assert await CollaboratorRepository(test_session).list_for_note(note.id) == []


@pytest.mark.asyncio
async def test_editor_cannot_manage_collaborators(test_session, note, editor, viewer, grant):
    await grant(note, editor, "editor")

    with pytest.raises(ForbiddenError):
        await SharingService(test_session).add_collaborator(
            note.id, editor.id, CollaboratorRequest(email=viewer.email, permission="viewer")
        )


@pytest.mark.asyncio
async def test_remove_collaborator(test_session, note, owner, viewer, grant):
    await grant(note, viewer, "viewer")
    svc = SharingService(test_session)

    await svc.remove_collaborator(note.id, owner.id, viewer.id)
    assert await CollaboratorRepository(test_session).get_grant(note.id, viewer.id) is None

    with pytest.raises(NotFoundError):
        await svc.remove_collaborator(note.id, owner.id, viewer.id)
    assert await _actions(test_session) == ["remove_collaborator"]
