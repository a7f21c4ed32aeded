"""Пагинаторы API с единым конвертом ответа."""

from rest_framework.pagination import PageNumberPagination

from api.constants import (
    FEEDBACK_PAGE_SIZE,
    INGREDIENTS_PAGE_SIZE,
    MAX_PAGE_SIZE,
    PAGE_SIZE_QUERY_PARAM,
    RECIPES_PAGE_SIZE,
)
from api.utils import envelope


class EnvelopePagination(PageNumberPagination):
    """Страница с общим числом записей и метаданными страницы."""

    page_size = RECIPES_PAGE_SIZE
    page_size_query_param = PAGE_SIZE_QUERY_PARAM
    max_page_size = MAX_PAGE_SIZE

    def get_paginated_response(self, data):
        paginator = self.page.paginator
        return envelope(
            {
                "items": data,
                "total": paginator.count,
                "per_page": paginator.per_page,
                "current_page": self.page.number,
                "last_page": paginator.num_pages,
            }
        )


class RecipePagination(EnvelopePagination):
    page_size = RECIPES_PAGE_SIZE


class IngredientPagination(EnvelopePagination):
    page_size = INGREDIENTS_PAGE_SIZE


class FeedbackPagination(EnvelopePagination):
    page_size = FEEDBACK_PAGE_SIZE
