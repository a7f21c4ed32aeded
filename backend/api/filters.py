from django.db.models import Exists, OuterRef, Q, QuerySet
from django_filters import rest_framework as filters

from api.constants import (
    DEFAULT_SORT_FIELD,
    DEFAULT_SORT_ORDER,
    SORTABLE_FIELDS,
)
from recipes.models import Difficulty, Recipe, RecipeCategory


def apply_sorting(
    queryset: QuerySet, sort_by=None, sort_order=None
) -> QuerySet:
    """Сортировка только по разрешенным полям; иначе created_at desc."""
    if sort_by not in SORTABLE_FIELDS:
        sort_by, sort_order = DEFAULT_SORT_FIELD, DEFAULT_SORT_ORDER
    if sort_order not in ("asc", "desc"):
        sort_order = DEFAULT_SORT_ORDER
    prefix = "-" if sort_order == "desc" else ""
    return queryset.order_by(f"{prefix}{sort_by}", f"{prefix}id")


class RecipeFilter(filters.FilterSet):
    search = filters.CharFilter(method="filter_search", label="Поиск")
    difficulty = filters.CharFilter(
        method="filter_difficulty", label="Сложность"
    )
    category_id = filters.NumberFilter(
        method="filter_category", label="Категория"
    )
    max_time = filters.NumberFilter(
        method="filter_max_time", label="Не дольше, мин"
    )

    class Meta:
        model = Recipe
        fields = ("search", "difficulty", "category_id", "max_time")

    def filter_search(
            self,
            queryset: QuerySet,
            name: str,
            value: str
    ) -> QuerySet:
        needle = (value or "").strip()
        if not needle:
            return queryset
        return queryset.filter(
            Q(title__icontains=needle) | Q(description__icontains=needle)
        )

    def filter_difficulty(
            self,
            queryset: QuerySet,
            name: str,
            value: str
    ) -> QuerySet:
        if value in Difficulty.values:
            return queryset.filter(difficulty=value)
        return queryset

    def filter_category(
            self,
            queryset: QuerySet,
            name: str,
            value
    ) -> QuerySet:
        linked = RecipeCategory.objects.filter(
            recipe=OuterRef("pk"), category_id=int(value)
        )
        return queryset.filter(Exists(linked))

    def filter_max_time(
            self,
            queryset: QuerySet,
            name: str,
            value
    ) -> QuerySet:
        return queryset.filter(total_time__lte=value)

    def filter_queryset(self, queryset: QuerySet) -> QuerySet:
        queryset = super().filter_queryset(queryset)
        return apply_sorting(
            queryset,
            self.data.get("sort_by"),
            self.data.get("sort_order"),
        )
