"""Правила видимости и владения.

Все функции чистые: получают ресурс и актора (``None`` для анонима) и
либо возвращают решение, либо поднимают ошибку предметной области.
Приватный рецепт для чужих выглядит как несуществующий.
"""
from typing import Any, Optional

from recipes.exceptions import NotFound, Unauthenticated, Unauthorized


def is_authenticated(actor: Any) -> bool:
    return bool(actor is not None and getattr(actor, "is_authenticated", False))


def is_admin_user(actor: Any) -> bool:
    return bool(
        is_authenticated(actor)
        and (
            getattr(actor, "is_staff", False)
            or getattr(actor, "is_superuser", False)
        )
    )


def _same_user(user_id: Optional[int], actor: Any) -> bool:
    return is_authenticated(actor) and user_id == actor.pk


def is_recipe_author(recipe, actor: Any) -> bool:
    return _same_user(recipe.author_id, actor)


def can_read_recipe(recipe, actor: Any) -> bool:
    return bool(recipe.is_public) or is_recipe_author(recipe, actor)


def ensure_can_read_recipe(recipe, actor: Any) -> None:
    if not can_read_recipe(recipe, actor):
        raise NotFound("Рецепт не найден.")


def ensure_authenticated(actor: Any) -> None:
    if not is_authenticated(actor):
        raise Unauthenticated()


def ensure_can_modify_recipe(recipe, actor: Any) -> None:
    ensure_authenticated(actor)
    if not is_recipe_author(recipe, actor):
        raise Unauthorized("Изменять рецепт может только его автор.")


def ensure_can_interact(recipe, actor: Any) -> None:
    """Комментарии, оценки и избранное доступны только видимым рецептам."""
    ensure_authenticated(actor)
    ensure_can_read_recipe(recipe, actor)


def ensure_is_author(resource, actor: Any) -> None:
    ensure_authenticated(actor)
    if not _same_user(resource.author_id, actor):
        raise Unauthorized("Действие доступно только автору.")


def ensure_can_delete_comment(comment, actor: Any) -> None:
    ensure_authenticated(actor)
    if _same_user(comment.author_id, actor):
        return
    if is_recipe_author(comment.recipe, actor):
        return
    raise Unauthorized(
        "Удалить комментарий может его автор или автор рецепта."
    )


def ensure_can_manage_catalog(actor: Any) -> None:
    ensure_authenticated(actor)
    if not is_admin_user(actor):
        raise Unauthorized("Справочники редактирует только администратор.")
