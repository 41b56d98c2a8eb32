"""Conversation transcript message model."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class Message(BaseModel):
    """A single message in a session transcript."""

    id: Optional[int] = Field(default=None, description="Database ID")
    session_id: str = Field(..., min_length=1, description="Owning session")
    role: Literal["user", "assistant"] = Field(..., description="Message author")
    text: str = Field(..., description="Message body")
    created_at: datetime = Field(
        default_factory=datetime.now, description="Message timestamp"
    )

    model_config = {"frozen": True}
