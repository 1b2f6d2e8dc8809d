from typing import Any


def send_response(message: str, data: Any = None, **extra) -> dict:
    """Wrap a payload in the standard ``{success, message, data}`` envelope."""
    response = {"success": True, "message": message}
    response.update(extra)
    if data is not None:
        response["data"] = data
    return response
