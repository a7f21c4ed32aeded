"""Вычисляемые показатели рецепта.

Значения не хранятся в таблицах: каждый запрос пересчитывает их из
текущего состояния связанных записей через аннотации.
"""
from typing import Any, Iterable, Optional

from django.db.models import (
    Avg,
    BooleanField,
    Count,
    Exists,
    ExpressionWrapper,
    F,
    FloatField,
    IntegerField,
    OuterRef,
    QuerySet,
    Subquery,
    Value,
)
from django.db.models.functions import Coalesce

from recipes.models import Comment, Favorite, Rating


def total_time(
    prep_minutes: Optional[int], cook_minutes: Optional[int]
) -> int:
    return (prep_minutes or 0) + (cook_minutes or 0)


def average_rating(values: Iterable[int]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def total_time_expression() -> ExpressionWrapper:
    return ExpressionWrapper(
        Coalesce(F("prep_minutes"), Value(0))
        + Coalesce(F("cook_minutes"), Value(0)),
        output_field=IntegerField(),
    )


def _per_recipe(model, recipe_field: str = "recipe") -> QuerySet:
    return (
        model.objects.filter(**{recipe_field: OuterRef("pk")})
        .order_by()
        .values(recipe_field)
    )


def _count_of(model) -> Coalesce:
    counted = _per_recipe(model).annotate(cnt=Count("pk")).values("cnt")
    return Coalesce(
        Subquery(counted, output_field=IntegerField()),
        Value(0),
    )


def _average_rating_expression() -> Coalesce:
    averaged = _per_recipe(Rating).annotate(avg=Avg("value")).values("avg")
    return Coalesce(
        Subquery(averaged, output_field=FloatField()),
        Value(0.0),
        output_field=FloatField(),
    )


def _is_favorite_expression(viewer: Any):
    if viewer is None or not getattr(viewer, "is_authenticated", False):
        return Value(False, output_field=BooleanField())
    return Exists(
        Favorite.objects.filter(user=viewer, recipe=OuterRef("pk"))
    )


def annotate_metrics(
    queryset: QuerySet, viewer: Any = None
) -> QuerySet:
    """Добавляет к рецептам total_time, средний рейтинг, счетчики и
    признак избранного для конкретного зрителя."""
    return queryset.annotate(
        total_time=total_time_expression(),
        average_rating=_average_rating_expression(),
        ratings_count=_count_of(Rating),
        favorites_count=_count_of(Favorite),
        comments_count=_count_of(Comment),
        is_favorite=_is_favorite_expression(viewer),
    )


def annotate_usage(queryset: QuerySet) -> QuerySet:
    """Счетчики использования для категорий и ингредиентов."""
    links = queryset.model._meta.get_field("recipe_links").related_model
    target = queryset.model._meta.model_name
    used = (
        links.objects.filter(**{target: OuterRef("pk")})
        .order_by()
        .values(target)
    )
    public_used = used.filter(recipe__is_public=True)
    return queryset.annotate(
        recipes_count=Coalesce(
            Subquery(
                used.annotate(cnt=Count("pk")).values("cnt"),
                output_field=IntegerField(),
            ),
            Value(0),
        ),
        public_recipes_count=Coalesce(
            Subquery(
                public_used.annotate(cnt=Count("pk")).values("cnt"),
                output_field=IntegerField(),
            ),
            Value(0),
        ),
    )
