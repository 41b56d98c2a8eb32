"""Alert data model."""

from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field


class AlertCondition(str, Enum):
    """Direction in which the price must cross the target."""

    ABOVE = "above"
    BELOW = "below"


class Alert(BaseModel):
    """Represents a user-defined price alert."""

    id: str = Field(..., min_length=1, description="Unique alert ID")
    symbol: str = Field(..., min_length=1, description="Ticker symbol")
    target_price: float = Field(..., description="Price threshold")
    condition: AlertCondition = Field(..., description="Trigger direction")
    created_at: datetime = Field(
        default_factory=datetime.now, description="Alert creation timestamp"
    )
    active: bool = Field(default=True, description="Whether alert is still armed")

    model_config = {"frozen": True}

    def is_triggered(self, price: float) -> bool:
        """Check whether an observed price satisfies the alert.

        Comparisons are inclusive, so a price exactly at the target triggers.

        Args:
            price: Price reported by the feed at check time.

        Returns:
            True if the alert condition is met.
        """
        if self.condition == AlertCondition.ABOVE:
            return price >= self.target_price
        return price <= self.target_price


class AlertCollection(BaseModel):
    """All alerts for one session, in insertion order."""

    version: Literal[1] = 1
    alerts: list[Alert] = Field(default_factory=list)

    model_config = {"frozen": True}

    def get(self, alert_id: str) -> Optional[Alert]:
        for alert in self.alerts:
            if alert.id == alert_id:
                return alert
        return None

    def ids(self) -> set[str]:
        return {alert.id for alert in self.alerts}

    def active(self) -> list[Alert]:
        return [alert for alert in self.alerts if alert.active]

    def with_alert(self, alert: Alert) -> "AlertCollection":
        """Return a copy with the alert appended."""
        return AlertCollection(alerts=[*self.alerts, alert])

    def without(self, alert_id: str) -> "AlertCollection":
        """Return a copy with the given alert removed."""
        return AlertCollection(
            alerts=[alert for alert in self.alerts if alert.id != alert_id]
        )

    def replace(self, updated: Alert) -> "AlertCollection":
        """Return a copy with the alert of the same ID replaced."""
        return AlertCollection(
            alerts=[updated if alert.id == updated.id else alert for alert in self.alerts]
        )
