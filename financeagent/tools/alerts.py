"""Price alert tools for AI agents.

These tools let the assistant create, list and delete price alerts for
the current session.
"""

from typing import Literal, Optional

from financeagent.config import load_config
from financeagent.exceptions import PersistenceError
from financeagent.models import AlertCondition
from financeagent.runtime import AlertRuntime, build_runtime


# Global runtime instance (set by application)
_runtime: Optional[AlertRuntime] = None


def set_runtime(runtime: Optional[AlertRuntime]) -> None:
    """Set the global alert runtime used by the tools.

    Args:
        runtime: Runtime to use, or None to fall back to the default.
    """
    global _runtime
    _runtime = runtime


def get_runtime() -> Optional[AlertRuntime]:
    """Get the global alert runtime.

    Returns:
        The runtime set by the application, or None if not set yet.
    """
    return _runtime


def _ensure_runtime() -> AlertRuntime:
    global _runtime
    if _runtime is None:
        _runtime = build_runtime(load_config())
    return _runtime


async def set_price_alert(
    symbol: str,
    target_price: float,
    condition: Literal["above", "below"],
) -> dict:
    """Set a price alert to be notified when a stock reaches a target price.

    Args:
        symbol: Stock ticker symbol (e.g., "AAPL").
        target_price: Target price to trigger the alert.
        condition: Trigger when price goes "above" or "below" the target.

    Returns:
        Dictionary containing:
        - success: Whether the alert was created
        - alert_id: ID of the new alert (None on failure)
        - message: Confirmation text
        - error: Error message if creation failed (None if successful)
    """
    try:
        result = await _ensure_runtime().service.create_alert(
            symbol, target_price, AlertCondition(condition)
        )
        return {"success": True, **result, "error": None}
    except (PersistenceError, ValueError) as e:
        return {
            "success": False,
            "alert_id": None,
            "message": "Failed to set alert",
            "error": str(e),
        }


async def list_alerts() -> dict:
    """List all active price alerts.

    Returns:
        Dictionary containing:
        - count: Number of active alerts
        - alerts: List of alerts with id, symbol, condition, target_price, created_at
        - error: Error message if listing failed (None if successful)
    """
    try:
        alerts = await _ensure_runtime().service.list_alerts()
        return {"count": len(alerts), "alerts": alerts, "error": None}
    except PersistenceError as e:
        return {"count": 0, "alerts": [], "error": str(e)}


async def delete_alert(alert_id: str) -> dict:
    """Delete a price alert by its ID.

    Args:
        alert_id: The ID of the alert to delete.

    Returns:
        Dictionary containing:
        - found: Whether an alert with that ID existed and was removed
        - message: Status text
        - error: Error message if deletion failed (None if successful)
    """
    try:
        result = await _ensure_runtime().service.delete_alert(alert_id)
    except PersistenceError as e:
        return {"found": False, "message": "Failed to delete alert", "error": str(e)}

    if result["found"]:
        message = f"✅ Alert {alert_id} has been deleted"
    else:
        message = f"Alert with ID {alert_id} not found"
    return {"found": result["found"], "message": message, "error": None}
