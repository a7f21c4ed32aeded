"""Преобразование исключений в единый конверт ответа.

Подключается через ``REST_FRAMEWORK["EXCEPTION_HANDLER"]``.
"""
import logging

from django.conf import settings
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.views import exception_handler

from api.utils import error_envelope
from recipes.exceptions import (
    Conflict,
    InternalFailure,
    NotFound,
    RecipeBookError,
    Unauthenticated,
    Unauthorized,
    ValidationFailed,
)

logger = logging.getLogger(__name__)

DOMAIN_STATUSES = {
    ValidationFailed: status.HTTP_422_UNPROCESSABLE_ENTITY,
    Unauthenticated: status.HTTP_401_UNAUTHORIZED,
    Unauthorized: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    Conflict: status.HTTP_400_BAD_REQUEST,
    InternalFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _domain_status(exc: RecipeBookError) -> int:
    for exc_class, code in DOMAIN_STATUSES.items():
        if isinstance(exc, exc_class):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _as_field_errors(detail) -> dict:
    if isinstance(detail, dict):
        return {
            field: msgs if isinstance(msgs, list) else [msgs]
            for field, msgs in detail.items()
        }
    if isinstance(detail, list):
        return {"non_field_errors": detail}
    return {"non_field_errors": [detail]}


def _internal_failure(exc: Exception, message: str):
    errors = {"detail": [str(exc.__cause__ or exc)]} if settings.DEBUG else None
    return error_envelope(
        message, status.HTTP_500_INTERNAL_SERVER_ERROR, errors=errors
    )


def envelope_exception_handler(exc, context):
    if isinstance(exc, InternalFailure):
        return _internal_failure(exc, exc.message)

    if isinstance(exc, RecipeBookError):
        code = _domain_status(exc)
        errors = getattr(exc, "errors", None)
        headers = None
        if isinstance(exc, Unauthenticated):
            headers = {"WWW-Authenticate": "Bearer"}
        return error_envelope(exc.message, code, errors=errors, headers=headers)

    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.exception(
            "Unhandled error in %s", view.__class__.__name__ if view else "view"
        )
        return _internal_failure(exc, "Внутренняя ошибка сервера.")

    if isinstance(exc, drf_exceptions.ValidationError):
        return error_envelope(
            "Ошибка валидации.",
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            errors=_as_field_errors(response.data),
        )

    detail = response.data.get("detail") if isinstance(response.data, dict) else None
    headers = {
        name: value
        for name, value in response.items()
        if name in ("WWW-Authenticate", "Retry-After", "Allow")
    }
    return error_envelope(
        str(detail or "Ошибка запроса."),
        response.status_code,
        headers=headers or None,
    )
