"""
In-memory presence for live collaboration.

Maps each note to the participants currently attached to it, one entry per
connection. Only the collaboration hub mutates it; everything runs on the
event loop thread so no locking is needed.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple
from uuid import UUID


@dataclass(frozen=True)
class Participant:
    """One connection's presence in a note."""

    user_id: UUID
    name: str
    connection_id: str


class PresenceRegistry:
    """note id -> {connection id -> participant}.

    Invariants: a connection appears at most once per note, and a note with
    no participants has no entry at all.
    """

    def __init__(self):
        self._notes: Dict[UUID, Dict[str, Participant]] = {}
        # reverse index so a dropped connection is cleaned up without a scan
        self._joined: Dict[str, Set[UUID]] = {}

    def join(self, note_id: UUID, participant: Participant) -> List[Participant]:
        """Attach ``participant`` to a note and return everyone now present.

        Rejoining with the same connection replaces the entry instead of
        adding a second one.
        """
        members = self._notes.setdefault(note_id, {})
        members[participant.connection_id] = participant
        self._joined.setdefault(participant.connection_id, set()).add(note_id)
        return list(members.values())

    def leave(self, note_id: UUID, connection_id: str) -> Optional[Participant]:
        """Detach a connection from a note; returns the removed participant."""
        members = self._notes.get(note_id)
        if not members or connection_id not in members:
            return None

        removed = members.pop(connection_id)
        if not members:
            del self._notes[note_id]

        notes = self._joined.get(connection_id)
        if notes is not None:
            notes.discard(note_id)
            if not notes:
                del self._joined[connection_id]
        return removed

    def disconnect_all(self, connection_id: str) -> List[Tuple[UUID, Participant]]:
        """Remove a connection from every note it joined.

        Returns ``(note_id, removed participant)`` pairs. Safe to call for a
        connection that never joined anything, and safe to call twice.
        """
        removed = []
        for note_id in list(self._joined.get(connection_id, ())):
            participant = self.leave(note_id, connection_id)
            if participant is not None:
                removed.append((note_id, participant))
        self._joined.pop(connection_id, None)
        return removed

    def participants(self, note_id: UUID) -> List[Participant]:
        return list(self._notes.get(note_id, {}).values())

    def connection_ids(self, note_id: UUID) -> List[str]:
        return list(self._notes.get(note_id, {}))

    def is_joined(self, note_id: UUID, connection_id: str) -> bool:
        return connection_id in self._notes.get(note_id, {})

    def notes_for(self, connection_id: str) -> Set[UUID]:
        return set(self._joined.get(connection_id, ()))

    def __contains__(self, note_id: UUID) -> bool:
        return note_id in self._notes

    def stats(self) -> Dict[str, int]:
        return {
            "active_notes": len(self._notes),
            "participants": sum(len(m) for m in self._notes.values()),
        }
