"""Ошибки предметной области.

Сервисы рецептов ничего не знают об HTTP: они поднимают эти исключения,
а ``api.exceptions`` превращает их в ответы с нужным статусом.
"""
from typing import Mapping, Optional, Sequence


class RecipeBookError(Exception):
    default_message = "Ошибка обработки запроса."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(RecipeBookError):
    default_message = "Ошибка валидации."

    def __init__(
        self,
        errors: Mapping[str, Sequence[str]],
        message: Optional[str] = None,
    ):
        super().__init__(message)
        self.errors = {field: list(msgs) for field, msgs in errors.items()}


class Unauthenticated(RecipeBookError):
    default_message = "Требуется аутентификация."


class Unauthorized(RecipeBookError):
    default_message = "Недостаточно прав для этого действия."


class NotFound(RecipeBookError):
    default_message = "Не найдено."


class Conflict(RecipeBookError):
    default_message = "Операция противоречит текущему состоянию."


class InternalFailure(RecipeBookError):
    default_message = "Не удалось выполнить операцию."
