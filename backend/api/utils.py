from typing import Any, Optional

from rest_framework import status as http_status
from rest_framework.response import Response

__all__ = [
    "actor_of",
    "envelope",
    "error_envelope",
]


def actor_of(request) -> Optional[Any]:
    """Пользователь запроса или None для анонима."""
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    return user


def envelope(
    data: Any = None,
    message: Optional[str] = None,
    status: int = http_status.HTTP_200_OK,
) -> Response:
    body = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return Response(body, status=status)


def error_envelope(
    message: str,
    status: int,
    errors: Optional[dict] = None,
    headers: Optional[dict] = None,
) -> Response:
    body = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return Response(body, status=status, headers=headers)
