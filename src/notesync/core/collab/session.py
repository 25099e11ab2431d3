"""
Live collaboration sessions.

A :class:`CollaborationHub` owns every live connection and the
:class:`PresenceRegistry`. WebSocket handlers feed it inbound frames one at a
time per connection; it checks access, updates presence and fans
notifications out to the other connections of the same note.

Edits are relayed, never merged: the last ``content-update`` a client applies
wins. Persisting text is the client's job through the REST API.
"""

from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Protocol, Union
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from ...security import Identity
from ..access import NoteAction, NoteRole, role_allows
from ..logging import get_logger
from ..schemas.collab import (
    AnnounceOnline,
    ContentUpdate,
    ContentUpdated,
    ErrorFrame,
    Frame,
    JoinNote,
    LeaveNote,
    ParticipantInfo,
    ParticipantJoined,
    ParticipantLeft,
    ParticipantList,
    ParticipantTyping,
    PresenceStatus,
    Typing,
    inbound_adapter,
)
from .presence import Participant, PresenceRegistry

logger = get_logger("collab")

AccessResolver = Callable[[UUID, UUID], Awaitable[NoteRole]]


class Connection(Protocol):
    """What the hub needs from a live connection."""

    connection_id: str
    identity: Optional[Identity]

    def deliver(self, payload: Dict[str, Any]) -> None:
        """Queue a frame for the peer without blocking the caller."""


async def resolve_access_from_store(note_id: UUID, user_id: UUID) -> NoteRole:
    """Look up the caller's current role in a fresh database session."""
    from ...database import AsyncSessionLocal
    from ..services.note_access import resolve_note_role

    async with AsyncSessionLocal() as session:
        _, role = await resolve_note_role(session, note_id, user_id)
        return role


class CollaborationHub:
    """Connection table, presence and message routing for one process."""

    def __init__(
        self,
        access_resolver: Optional[AccessResolver] = None,
        registry: Optional[PresenceRegistry] = None,
    ):
        self.access_resolver = access_resolver or resolve_access_from_store
        self.registry = registry or PresenceRegistry()
        self._connections: Dict[str, Connection] = {}

    # connection lifecycle

    def register(self, connection: Connection) -> None:
        self._connections[connection.connection_id] = connection
        logger.info(
            "Connection opened",
            extra={
                "connection_id": connection.connection_id,
                "user_id": _user_id(connection),
            },
        )

    def is_live(self, connection: Connection) -> bool:
        return self._connections.get(connection.connection_id) is connection

    def handle_disconnect(self, connection: Connection) -> None:
        """Drop a connection from every note and tell the others.

        Runs once per closed socket, but calling it again (or for a
        connection that never joined anything) does nothing.
        """
        was_live = self._connections.pop(connection.connection_id, None) is not None

        for note_id, participant in self.registry.disconnect_all(connection.connection_id):
            self._broadcast_to_note(
                note_id,
                ParticipantLeft(note_id=note_id, user_id=participant.user_id),
            )

        identity = connection.identity
        if was_live and identity is not None:
            self._broadcast_all(
                PresenceStatus(user_id=identity.user_id, name=identity.name, status="offline"),
                exclude=connection.connection_id,
            )
        if was_live:
            logger.info(
                "Connection closed",
                extra={"connection_id": connection.connection_id, "user_id": _user_id(connection)},
            )

    # inbound

    async def dispatch(self, connection: Connection, raw: Union[str, bytes, dict]) -> None:
        """Parse one inbound frame and route it.

        Malformed frames get an ``error`` reply to the sender only, as do
        frames whose access lookup hits a database error.
        """
        try:
            if isinstance(raw, dict):
                frame = inbound_adapter.validate_python(raw)
            else:
                frame = inbound_adapter.validate_json(raw)
        except ValidationError as exc:
            logger.debug(
                "Malformed frame",
                extra={"connection_id": connection.connection_id, "errors": exc.error_count()},
            )
            self._send(connection, ErrorFrame(message="Malformed message", detail=_first_error(exc)))
            return

        try:
            if isinstance(frame, JoinNote):
                await self.handle_join(connection, frame.note_id)
            elif isinstance(frame, LeaveNote):
                self.handle_leave(connection, frame.note_id)
            elif isinstance(frame, ContentUpdate):
                await self.handle_content_update(connection, frame)
            elif isinstance(frame, Typing):
                await self.handle_typing(connection, frame)
            elif isinstance(frame, AnnounceOnline):
                self.handle_announce_online(connection)
        except SQLAlchemyError:
            # fail the frame, keep the session
            logger.error(
                "Access lookup failed",
                extra={"connection_id": connection.connection_id, "type": frame.type},
                exc_info=True,
            )
            self._send(connection, ErrorFrame(message="Internal error"))

    async def handle_join(self, connection: Connection, note_id: UUID) -> None:
        identity = connection.identity
        if identity is None:
            return

        role = await self.access_resolver(note_id, identity.user_id)
        # the socket may have closed while the lookup was suspended
        if not self.is_live(connection):
            return
        if not role_allows(role, NoteAction.READ):
            logger.warning(
                "Join refused",
                extra={"note_id": str(note_id), "user_id": str(identity.user_id)},
            )
            return

        rejoin = self.registry.is_joined(note_id, connection.connection_id)
        participants = self.registry.join(
            note_id,
            Participant(
                user_id=identity.user_id,
                name=identity.name,
                connection_id=connection.connection_id,
            ),
        )

        self._send(
            connection,
            ParticipantList(
                note_id=note_id,
                participants=[
                    ParticipantInfo(user_id=p.user_id, name=p.name, connection_id=p.connection_id)
                    for p in participants
                ],
            ),
        )
        if not rejoin:
            self._broadcast_to_note(
                note_id,
                ParticipantJoined(note_id=note_id, user_id=identity.user_id, name=identity.name),
                exclude=connection.connection_id,
            )
            logger.info(
                "Joined note",
                extra={"note_id": str(note_id), "connection_id": connection.connection_id},
            )

    def handle_leave(self, connection: Connection, note_id: UUID) -> None:
        if connection.identity is None:
            return
        removed = self.registry.leave(note_id, connection.connection_id)
        if removed is None:
            return
        self._broadcast_to_note(note_id, ParticipantLeft(note_id=note_id, user_id=removed.user_id))
        logger.info(
            "Left note",
            extra={"note_id": str(note_id), "connection_id": connection.connection_id},
        )

    async def handle_content_update(self, connection: Connection, frame: ContentUpdate) -> None:
        """Relay an edit to everyone else in the note.

        Edits from principals without edit rights are dropped without a reply.
        """
        identity = connection.identity
        if identity is None:
            logger.warning(
                "Dropped anonymous content update",
                extra={"note_id": str(frame.note_id), "connection_id": connection.connection_id},
            )
            return

        role = await self.access_resolver(frame.note_id, identity.user_id)
        if not self.is_live(connection):
            return
        if not role_allows(role, NoteAction.EDIT_CONTENT):
            logger.warning(
                "Dropped unauthorized content update",
                extra={
                    "note_id": str(frame.note_id),
                    "user_id": str(identity.user_id),
                    "role": role.value,
                },
            )
            return

        await self._broadcast_to_readers(
            frame.note_id,
            ContentUpdated(
                note_id=frame.note_id,
                title=frame.title,
                content=frame.content,
                updated_by=identity.user_id,
                updated_by_name=identity.name,
                timestamp=datetime.now(timezone.utc),
            ),
            exclude=connection.connection_id,
        )

    async def handle_typing(self, connection: Connection, frame: Typing) -> None:
        """Relay a typing notice to the other participants of the note.

        The sender needs an identity and must have joined the note. Its role is
        not looked up: only participants can receive the notice, and each of
        them is re-checked for read access before delivery.
        """
        identity = connection.identity
        if identity is None:
            return
        if not self.registry.is_joined(frame.note_id, connection.connection_id):
            return
        await self._broadcast_to_readers(
            frame.note_id,
            ParticipantTyping(
                note_id=frame.note_id,
                user_id=identity.user_id,
                name=identity.name,
                is_typing=frame.is_typing,
            ),
            exclude=connection.connection_id,
        )

    def handle_announce_online(self, connection: Connection) -> None:
        identity = connection.identity
        if identity is None:
            return
        self._broadcast_all(
            PresenceStatus(user_id=identity.user_id, name=identity.name, status="online"),
            exclude=connection.connection_id,
        )

    # outbound

    def _send(self, connection: Connection, frame: Frame) -> None:
        self._deliver([connection], frame.dump())

    def _broadcast_to_note(self, note_id: UUID, frame: Frame, exclude: Optional[str] = None) -> None:
        recipients = [
            self._connections[cid]
            for cid in self.registry.connection_ids(note_id)
            if cid != exclude and cid in self._connections
        ]
        self._deliver(recipients, frame.dump())

    async def _broadcast_to_readers(
        self, note_id: UUID, frame: Frame, exclude: Optional[str] = None
    ) -> None:
        """Deliver note content only to participants who can still read the note.

        Presence is granted at join time, so a revoked grant or a deleted note
        is caught here: such participants are removed from the note and the
        rest are told they left.
        """
        roles: Dict[UUID, NoteRole] = {}
        recipients: List[Participant] = []
        for participant in self.registry.participants(note_id):
            if participant.connection_id == exclude:
                continue
            if participant.user_id not in roles:
                try:
                    roles[participant.user_id] = await self.access_resolver(
                        note_id, participant.user_id
                    )
                except SQLAlchemyError:
                    logger.error(
                        "Recipient access lookup failed",
                        extra={"note_id": str(note_id), "user_id": str(participant.user_id)},
                        exc_info=True,
                    )
                    continue
            if not role_allows(roles[participant.user_id], NoteAction.READ):
                self._evict(note_id, participant.connection_id)
                continue
            recipients.append(participant)

        # lookups may have suspended; skip anyone who left or closed meanwhile
        live = [
            self._connections[p.connection_id]
            for p in recipients
            if p.connection_id in self._connections
            and self.registry.is_joined(note_id, p.connection_id)
        ]
        self._deliver(live, frame.dump())

    def _evict(self, note_id: UUID, connection_id: str) -> None:
        removed = self.registry.leave(note_id, connection_id)
        if removed is None:
            return
        logger.warning(
            "Removed participant without read access",
            extra={
                "note_id": str(note_id),
                "connection_id": connection_id,
                "user_id": str(removed.user_id),
            },
        )
        self._broadcast_to_note(note_id, ParticipantLeft(note_id=note_id, user_id=removed.user_id))

    def _broadcast_all(self, frame: Frame, exclude: Optional[str] = None) -> None:
        recipients = [c for cid, c in self._connections.items() if cid != exclude]
        self._deliver(recipients, frame.dump())

    def _deliver(self, recipients: Iterable[Connection], payload: Dict[str, Any]) -> None:
        # one failing peer must not stop delivery to the rest
        for connection in recipients:
            try:
                connection.deliver(payload)
            except Exception:
                logger.warning(
                    "Delivery failed",
                    extra={"connection_id": connection.connection_id, "type": payload.get("type")},
                    exc_info=True,
                )

    # introspection

    def participants(self, note_id: UUID) -> List[Participant]:
        return self.registry.participants(note_id)

    def stats(self) -> Dict[str, int]:
        return {
            "connections": len(self._connections),
            "authenticated_connections": sum(
                1 for c in self._connections.values() if c.identity is not None
            ),
            **self.registry.stats(),
        }


def _user_id(connection: Connection) -> Optional[str]:
    return str(connection.identity.user_id) if connection.identity else None


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else first.get("msg", "")


# Singleton instance
_hub: Optional[CollaborationHub] = None


def get_collab_hub() -> CollaborationHub:
    """Get the process-wide collaboration hub."""
    global _hub
    if _hub is None:
        _hub = CollaborationHub()
    return _hub
