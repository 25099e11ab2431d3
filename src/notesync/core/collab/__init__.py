"""
Live collaboration: presence tracking and the session message protocol.

    - PresenceRegistry: which connections are attached to which note
    - CollaborationHub: connection table, access checks and fan-out
    - WebSocketConnection: per-socket outbox feeding the hub's deliveries
"""

from .connection import WebSocketConnection
from .presence import Participant, PresenceRegistry
from .session import CollaborationHub, Connection, get_collab_hub, resolve_access_from_store

__all__ = [
    "Participant",
    "PresenceRegistry",
    "CollaborationHub",
    "Connection",
    "WebSocketConnection",
    "get_collab_hub",
    "resolve_access_from_store",
]
