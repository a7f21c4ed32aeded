"""Справочники: категории и ингредиенты."""
import logging
from typing import Optional

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError
from django.utils.text import slugify

from recipes import guards
from recipes.constants import (
    CATEGORY_NAME_MAX_LEN,
    CATEGORY_SLUG_MAX_LEN,
    INGREDIENT_NAME_MAX_LEN,
    INGREDIENT_UNIT_MAX_LEN,
)
from recipes.exceptions import Conflict, ValidationFailed
from recipes.models import Category, Ingredient

logger = logging.getLogger(__name__)


def _clean_name(name: Optional[str], max_len: int) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationFailed({"name": ["Обязательное поле."]})
    if len(name) > max_len:
        raise ValidationFailed({"name": [f"Не более {max_len} символов."]})
    return name


def _ensure_unique_name(model, name: str, exclude_pk=None) -> None:
    qs = model.objects.filter(name__iexact=name)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise ValidationFailed(
            {"name": ["Запись с таким названием уже существует."]}
        )


def _save(instance, update_fields=None) -> None:
    try:
        with transaction.atomic():
            instance.save(update_fields=update_fields)
    except IntegrityError as exc:
        raise ValidationFailed(
            {"name": ["Запись с таким названием уже существует."]}
        ) from exc


def _delete_unused(instance) -> None:
    if instance.recipe_links.exists():
        raise Conflict("Нельзя удалить запись, которая используется в рецептах.")
    try:
        instance.delete()
    except ProtectedError as exc:
        raise Conflict(
            "Нельзя удалить запись, которая используется в рецептах."
        ) from exc


def create_category(actor, name: str) -> Category:
    guards.ensure_can_manage_catalog(actor)
    name = _clean_name(name, CATEGORY_NAME_MAX_LEN)
    _ensure_unique_name(Category, name)
    slug = slugify(name, allow_unicode=True)[:CATEGORY_SLUG_MAX_LEN]
    if not slug:
        raise ValidationFailed(
            {"name": ["Название должно содержать буквы или цифры."]}
        )
    category = Category(name=name, slug=slug)
    _save(category)
    logger.info("Category %s created", category.slug)
    return category


def update_category(category: Category, actor, name: str) -> Category:
    guards.ensure_can_manage_catalog(actor)
    name = _clean_name(name, CATEGORY_NAME_MAX_LEN)
    _ensure_unique_name(Category, name, exclude_pk=category.pk)
    category.name = name
    _save(category, update_fields=["name"])
    return category


def delete_category(category: Category, actor) -> None:
    guards.ensure_can_manage_catalog(actor)
    _delete_unused(category)
    logger.info("Category %s deleted", category.slug)


def _clean_unit(default_unit: Optional[str]) -> str:
    default_unit = (default_unit or "").strip()
    if len(default_unit) > INGREDIENT_UNIT_MAX_LEN:
        raise ValidationFailed(
            {"default_unit": [f"Не более {INGREDIENT_UNIT_MAX_LEN} символов."]}
        )
    return default_unit


def create_ingredient(
    actor, name: str, default_unit: Optional[str] = None
) -> Ingredient:
    guards.ensure_can_manage_catalog(actor)
    name = _clean_name(name, INGREDIENT_NAME_MAX_LEN)
    _ensure_unique_name(Ingredient, name)
    ingredient = Ingredient(name=name, default_unit=_clean_unit(default_unit))
    _save(ingredient)
    logger.info("Ingredient %r created", ingredient.name)
    return ingredient


def update_ingredient(
    ingredient: Ingredient,
    actor,
    name: str,
    default_unit: Optional[str] = None,
) -> Ingredient:
    guards.ensure_can_manage_catalog(actor)
    name = _clean_name(name, INGREDIENT_NAME_MAX_LEN)
    _ensure_unique_name(Ingredient, name, exclude_pk=ingredient.pk)
    ingredient.name = name
    ingredient.default_unit = _clean_unit(default_unit)
    _save(ingredient, update_fields=["name", "default_unit"])
    return ingredient


def delete_ingredient(ingredient: Ingredient, actor) -> None:
    guards.ensure_can_manage_catalog(actor)
    name = ingredient.name
    _delete_unused(ingredient)
    logger.info("Ingredient %r deleted", name)
