"""Запись агрегата рецепта: рецепт, шаги, ингредиенты и категории.

Проверки данных и прав выполняются до начала транзакции; внутри
транзакции любая ошибка базы откатывает все изменения целиком.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from django.db import DatabaseError, IntegrityError, transaction
from django.utils.text import slugify

from recipes import guards
from recipes.constants import (
    INGREDIENT_NOTE_MAX_LEN,
    INGREDIENT_UNIT_MAX_LEN,
    MIN_CALORIES,
    MIN_MINUTES,
    MIN_SERVINGS,
    RECIPE_SLUG_MAX_LEN,
    RECIPE_TITLE_MAX_LEN,
    STEP_NUMBER_MIN,
)
from recipes.dto import (
    IngredientLinkInput,
    RecipeDraft,
    RecipePatch,
    StepInput,
)
from recipes.exceptions import InternalFailure, ValidationFailed
from recipes.models import (
    Category,
    Difficulty,
    Ingredient,
    Recipe,
    RecipeIngredient,
    RecipeStep,
)

logger = logging.getLogger(__name__)

Errors = Dict[str, List[str]]


def make_slug(title: str) -> str:
    slug = slugify(title or "", allow_unicode=True)
    return slug[:RECIPE_SLUG_MAX_LEN].strip("-")


def _check_min(errors: Errors, field: str, value: Any, minimum: int):
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        errors.setdefault(field, []).append("Ожидается целое число.")
    elif value < minimum:
        errors.setdefault(field, []).append(
            f"Значение должно быть не меньше {minimum}."
        )


def _validate_fields(values: Dict[str, Any]) -> Errors:
    errors: Errors = {}
    if "title" in values:
        title = (values["title"] or "").strip()
        if not title:
            errors["title"] = ["Обязательное поле."]
        elif len(title) > RECIPE_TITLE_MAX_LEN:
            errors["title"] = [
                f"Не более {RECIPE_TITLE_MAX_LEN} символов."
            ]
    if "difficulty" in values and values["difficulty"] not in Difficulty.values:
        errors["difficulty"] = ["Допустимо: easy, medium, hard."]
    _check_min(errors, "prep_minutes", values.get("prep_minutes"), MIN_MINUTES)
    _check_min(errors, "cook_minutes", values.get("cook_minutes"), MIN_MINUTES)
    _check_min(errors, "servings", values.get("servings"), MIN_SERVINGS)
    _check_min(errors, "calories", values.get("calories"), MIN_CALORIES)
    if "is_public" in values and not isinstance(values["is_public"], bool):
        errors["is_public"] = ["Ожидается логическое значение."]
    return errors


def _normalize_fields(values: Dict[str, Any]) -> Dict[str, Any]:
    values = dict(values)
    if "title" in values:
        values["title"] = values["title"].strip()
    if "description" in values and values["description"] is None:
        values["description"] = ""
    return values


def _validate_steps(steps: Sequence[StepInput]) -> Errors:
    messages = []
    seen = set()
    for step in steps:
        if step.step_number is None or step.step_number < STEP_NUMBER_MIN:
            messages.append("Номер шага должен быть не меньше 1.")
        elif step.step_number in seen:
            messages.append(f"Номер шага {step.step_number} повторяется.")
        seen.add(step.step_number)
        if not (step.instruction or "").strip():
            messages.append(
                f"У шага {step.step_number} пустая инструкция."
            )
    return {"steps": messages} if messages else {}


def _validate_ingredients(links: Sequence[IngredientLinkInput]) -> Errors:
    messages = []
    ids = [link.ingredient_id for link in links]
    if len(ids) != len(set(ids)):
        messages.append("Ингредиенты не должны повторяться.")
    known = set(
        Ingredient.objects.filter(pk__in=ids).values_list("pk", flat=True)
    )
    for missing in sorted(set(ids) - known):
        messages.append(f"Ингредиент {missing} не найден.")
    for link in links:
        if link.quantity is not None and link.quantity < 0:
            messages.append("Количество не может быть отрицательным.")
        if link.unit and len(link.unit) > INGREDIENT_UNIT_MAX_LEN:
            messages.append(
                f"Единица измерения не длиннее "
                f"{INGREDIENT_UNIT_MAX_LEN} символов."
            )
        if link.note and len(link.note) > INGREDIENT_NOTE_MAX_LEN:
            messages.append(
                f"Примечание не длиннее {INGREDIENT_NOTE_MAX_LEN} символов."
            )
    return {"ingredients": messages} if messages else {}


def _validate_categories(category_ids: Sequence[int]) -> Errors:
    ids = set(category_ids)
    known = set(
        Category.objects.filter(pk__in=ids).values_list("pk", flat=True)
    )
    messages = [
        f"Категория {missing} не найдена."
        for missing in sorted(ids - known)
    ]
    return {"categories": messages} if messages else {}


def _validate_collections(
    steps: Optional[Sequence[StepInput]],
    ingredients: Optional[Sequence[IngredientLinkInput]],
    category_ids: Optional[Sequence[int]],
) -> Errors:
    errors: Errors = {}
    if steps is not None:
        errors.update(_validate_steps(steps))
    if ingredients is not None:
        errors.update(_validate_ingredients(ingredients))
    if category_ids is not None:
        errors.update(_validate_categories(category_ids))
    return errors


def _slug_taken(slug: str) -> bool:
    return Recipe.objects.filter(slug=slug).exists()


def _duplicate_slug_error() -> ValidationFailed:
    return ValidationFailed(
        {"title": ["Рецепт с таким названием (слагом) уже существует."]}
    )


def ensure_slug_available(slug: str) -> None:
    if not slug:
        raise ValidationFailed(
            {"title": ["Название должно содержать буквы или цифры."]}
        )
    if _slug_taken(slug):
        raise _duplicate_slug_error()


def _create_steps(recipe: Recipe, steps: Iterable[StepInput]) -> None:
    RecipeStep.objects.bulk_create(
        [
            RecipeStep(
                recipe=recipe,
                step_number=step.step_number,
                instruction=step.instruction.strip(),
            )
            for step in steps
        ]
    )


def _create_ingredient_links(
    recipe: Recipe, links: Iterable[IngredientLinkInput]
) -> None:
    RecipeIngredient.objects.bulk_create(
        [
            RecipeIngredient(
                recipe=recipe,
                ingredient_id=link.ingredient_id,
                quantity=link.quantity,
                unit=link.unit or "",
                note=link.note or "",
            )
            for link in links
        ]
    )


def create_recipe(
    author,
    draft: RecipeDraft,
    steps: Sequence[StepInput] = (),
    ingredients: Sequence[IngredientLinkInput] = (),
    category_ids: Sequence[int] = (),
) -> Recipe:
    guards.ensure_authenticated(author)
    values = draft.values()
    errors = _validate_fields(values)
    errors.update(_validate_collections(steps, ingredients, category_ids))
    if errors:
        raise ValidationFailed(errors)

    values = _normalize_fields(values)
    slug = make_slug(values["title"])
    ensure_slug_available(slug)

    try:
        with transaction.atomic():
            recipe = Recipe.objects.create(author=author, slug=slug, **values)
            _create_steps(recipe, steps)
            _create_ingredient_links(recipe, ingredients)
            recipe.categories.set(set(category_ids))
    except IntegrityError as exc:
        if _slug_taken(slug):
            raise _duplicate_slug_error() from exc
        logger.exception("Recipe %r was not created", slug)
        raise InternalFailure("Ошибка при создании рецепта.") from exc
    except DatabaseError as exc:
        logger.exception("Recipe %r was not created", slug)
        raise InternalFailure("Ошибка при создании рецепта.") from exc

    logger.info("Recipe %s created by user %s", recipe.slug, author.pk)
    return recipe


def update_recipe(
    recipe: Recipe,
    actor,
    patch: RecipePatch,
    steps: Optional[Sequence[StepInput]] = None,
    ingredients: Optional[Sequence[IngredientLinkInput]] = None,
    category_ids: Optional[Sequence[int]] = None,
) -> Recipe:
    """Шаги и ингредиенты заменяются целиком, категории приводятся
    ровно к переданному набору. Слаг после создания не меняется."""
    guards.ensure_can_modify_recipe(recipe, actor)
    changes = patch.changes()
    errors = _validate_fields(changes)
    errors.update(_validate_collections(steps, ingredients, category_ids))
    if errors:
        raise ValidationFailed(errors)
    changes = _normalize_fields(changes)

    try:
        with transaction.atomic():
            if changes:
                for name, value in changes.items():
                    setattr(recipe, name, value)
                recipe.save(update_fields=[*changes, "updated_at"])
            if steps is not None:
                recipe.steps.all().delete()
                _create_steps(recipe, steps)
            if ingredients is not None:
                recipe.ingredient_links.all().delete()
                _create_ingredient_links(recipe, ingredients)
            if category_ids is not None:
                recipe.categories.set(set(category_ids))
    except DatabaseError as exc:
        logger.exception("Recipe %s was not updated", recipe.slug)
        raise InternalFailure("Ошибка при обновлении рецепта.") from exc

    logger.info("Recipe %s updated by user %s", recipe.slug, actor.pk)
    return recipe


def _remove_files(images) -> None:
    for image in images:
        image.delete(save=False)


def delete_recipe(recipe: Recipe, actor) -> None:
    guards.ensure_can_modify_recipe(recipe, actor)
    images = [photo.image for photo in recipe.photos.all() if photo.image]
    slug = recipe.slug
    try:
        with transaction.atomic():
            recipe.delete()
            transaction.on_commit(lambda: _remove_files(images))
    except DatabaseError as exc:
        logger.exception("Recipe %s was not deleted", slug)
        raise InternalFailure("Ошибка при удалении рецепта.") from exc
    logger.info("Recipe %s deleted by user %s", slug, actor.pk)
