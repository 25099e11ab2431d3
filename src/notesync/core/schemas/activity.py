"""Activity timeline schemas."""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ActivityResponse(BaseModel):
    """One audit entry."""

    id: int
    user_id: uuid.UUID
    user_name: Optional[str] = None
    note_id: Optional[uuid.UUID] = None
    action: str
    details: Optional[Any] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
