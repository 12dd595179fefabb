from typing import Any, Optional


def success(data: Any = None, message: Optional[str] = None, **extra) -> dict:
    """Standard ``{"success": true, ...}`` envelope."""
    body = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return body


def failure(message: str, **extra) -> dict:
    return {"success": False, "message": message, **extra}
