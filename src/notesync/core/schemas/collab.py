"""
Frames exchanged over the collaboration WebSocket.

Every frame is a JSON object with a ``type`` key. Field names on the wire are
camelCase; the models accept either spelling.
"""

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class Frame(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def dump(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# inbound


class JoinNote(Frame):
    type: Literal["join-note"]
    note_id: UUID


class LeaveNote(Frame):
    type: Literal["leave-note"]
    note_id: UUID


class ContentUpdate(Frame):
    type: Literal["content-update"]
    note_id: UUID
    title: str
    content: str


class Typing(Frame):
    type: Literal["typing"]
    note_id: UUID
    is_typing: bool


class AnnounceOnline(Frame):
    type: Literal["announce-online"]


InboundFrame = Annotated[
    Union[JoinNote, LeaveNote, ContentUpdate, Typing, AnnounceOnline],
    Field(discriminator="type"),
]

inbound_adapter = TypeAdapter(InboundFrame)


# outbound


class ParticipantInfo(Frame):
    user_id: UUID
    name: str
    connection_id: str


class ParticipantJoined(Frame):
    type: Literal["participant-joined"] = "participant-joined"
    note_id: UUID
    user_id: UUID
    name: str


class ParticipantLeft(Frame):
    type: Literal["participant-left"] = "participant-left"
    note_id: UUID
    user_id: UUID


class ParticipantList(Frame):
    type: Literal["participant-list"] = "participant-list"
    note_id: UUID
    participants: List[ParticipantInfo]


class ContentUpdated(Frame):
    type: Literal["content-updated"] = "content-updated"
    note_id: UUID
    title: str
    content: str
    updated_by: UUID
    updated_by_name: str
    timestamp: datetime


class ParticipantTyping(Frame):
    type: Literal["participant-typing"] = "participant-typing"
    note_id: UUID
    user_id: UUID
    name: str
    is_typing: bool


class PresenceStatus(Frame):
    type: Literal["presence-status"] = "presence-status"
    user_id: UUID
    name: str
    status: Literal["online", "offline"]


class ErrorFrame(Frame):
    type: Literal["error"] = "error"
    message: str
    detail: Optional[str] = None
