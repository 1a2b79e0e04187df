from typing import Any


def success_response(data: Any = None, message: str | None = None) -> dict:
    return {"status": "success", "data": data, "message": message}


def error_response(message: str, data: Any = None) -> dict:
    return {"status": "error", "data": data, "message": message}


# The like endpoint predates the envelope above and keeps its own shape.
def like_ok(incremented: bool, like_count: int) -> dict:
    return {"ok": True, "incremented": incremented, "like_count": like_count}


def like_error(error: str) -> dict:
    return {"ok": False, "error": error}
