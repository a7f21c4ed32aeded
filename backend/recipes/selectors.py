"""Именованные запросы чтения.

Каждая функция явно перечисляет, какие связи подгружаются, и возвращает
рецепты уже с вычисленными показателями для переданного зрителя.
"""
from typing import Any, Optional

from django.db.models import Prefetch, Q, QuerySet

from recipes import guards
from recipes.exceptions import NotFound
from recipes.metrics import annotate_metrics, annotate_usage
from recipes.models import (
    Category,
    Comment,
    Ingredient,
    Photo,
    Rating,
    Recipe,
    RecipeIngredient,
)


def _cover_photos() -> Prefetch:
    return Prefetch(
        "photos",
        queryset=Photo.objects.filter(is_cover=True),
        to_attr="cover_photos",
    )


def recipes_for(viewer: Any = None) -> QuerySet:
    """Все рецепты с показателями и данными для карточки списка."""
    qs = (
        Recipe.objects.select_related("author")
        .prefetch_related("categories", _cover_photos())
        .order_by("-created_at", "-id")
    )
    return annotate_metrics(qs, viewer)


def public_recipes(viewer: Any = None) -> QuerySet:
    return recipes_for(viewer).filter(is_public=True)


def recipes_by_author(author, viewer: Any = None) -> QuerySet:
    qs = recipes_for(viewer).filter(author=author)
    if not guards.is_authenticated(viewer) or viewer.pk != author.pk:
        qs = qs.filter(is_public=True)
    return qs


def favorite_recipes(user) -> QuerySet:
    """Избранное пользователя, кроме чужих рецептов, ставших приватными."""
    return recipes_for(user).filter(
        Q(is_public=True) | Q(author=user),
        favorites__user=user,
    )


def get_recipe(slug: str) -> Recipe:
    """Рецепт без проверки видимости, для операций изменения."""
    recipe = (
        Recipe.objects.select_related("author").filter(slug=slug).first()
    )
    if recipe is None:
        raise NotFound("Рецепт не найден.")
    return recipe


def get_visible_recipe(slug: str, viewer: Any = None) -> Recipe:
    recipe = get_recipe(slug)
    guards.ensure_can_read_recipe(recipe, viewer)
    return recipe


def load_recipe_detail(slug: str, viewer: Any = None) -> Recipe:
    """Полный агрегат рецепта одним явным вызовом."""
    recipe = (
        annotate_metrics(Recipe.objects.filter(slug=slug), viewer)
        .select_related("author")
        .prefetch_related(
            "steps",
            "categories",
            "photos",
            Prefetch(
                "ingredient_links",
                queryset=RecipeIngredient.objects.select_related(
                    "ingredient"
                ),
            ),
            Prefetch(
                "comments",
                queryset=Comment.objects.select_related("author"),
            ),
            Prefetch(
                "ratings",
                queryset=Rating.objects.select_related("author"),
            ),
        )
        .first()
    )
    if recipe is None:
        raise NotFound("Рецепт не найден.")
    guards.ensure_can_read_recipe(recipe, viewer)
    return recipe


def get_recipe_by_slug(slug: str, viewer: Any = None) -> Recipe:
    return load_recipe_detail(slug, viewer)


def comments_for(recipe) -> QuerySet:
    return (
        Comment.objects.filter(recipe=recipe)
        .select_related("author")
        .order_by("-created_at", "-id")
    )


def ratings_for(recipe) -> QuerySet:
    return (
        Rating.objects.filter(recipe=recipe)
        .select_related("author")
        .order_by("-created_at", "-id")
    )


def get_comment(pk: int) -> Comment:
    comment = (
        Comment.objects.select_related("author", "recipe")
        .filter(pk=pk)
        .first()
    )
    if comment is None:
        raise NotFound("Комментарий не найден.")
    return comment


def get_rating(pk: int) -> Rating:
    rating = (
        Rating.objects.select_related("author", "recipe")
        .filter(pk=pk)
        .first()
    )
    if rating is None:
        raise NotFound("Оценка не найдена.")
    return rating


def get_photo(pk: int) -> Photo:
    photo = Photo.objects.select_related("recipe").filter(pk=pk).first()
    if photo is None:
        raise NotFound("Фото не найдено.")
    return photo


def categories_with_usage() -> QuerySet:
    return annotate_usage(Category.objects.all()).order_by("name")


def ingredients_with_usage(search: Optional[str] = None) -> QuerySet:
    qs = annotate_usage(Ingredient.objects.all())
    if search:
        qs = qs.filter(name__icontains=search.strip())
    return qs.order_by("name")


def get_category(pk: int) -> Category:
    category = categories_with_usage().filter(pk=pk).first()
    if category is None:
        raise NotFound("Категория не найдена.")
    return category


def get_ingredient(pk: int) -> Ingredient:
    ingredient = ingredients_with_usage().filter(pk=pk).first()
    if ingredient is None:
        raise NotFound("Ингредиент не найден.")
    return ingredient
