"""Scheduled wake-up data model."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Wakeup(BaseModel):
    """A pending request to re-check one alert at or after ``run_at``."""

    id: Optional[int] = Field(default=None, description="Database ID")
    session_id: str = Field(..., min_length=1, description="Owning session")
    alert_id: str = Field(..., min_length=1, description="Alert to re-check")
    run_at: datetime = Field(..., description="Earliest time to fire")

    model_config = {"frozen": True}
