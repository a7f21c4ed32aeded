"""Константы для пагинации и базовых ограничений API."""

# Пагинация
RECIPES_PAGE_SIZE = 12
INGREDIENTS_PAGE_SIZE = 20
FEEDBACK_PAGE_SIZE = 10          # комментарии и оценки
MAX_PAGE_SIZE = 100
PAGE_SIZE_QUERY_PARAM = "per_page"

# Сортировка списка рецептов
SORTABLE_FIELDS = ("created_at", "title", "average_rating", "favorites_count")
DEFAULT_SORT_FIELD = "created_at"
DEFAULT_SORT_ORDER = "desc"

# Быстрый поиск ингредиентов
INGREDIENT_SEARCH_MIN_LEN = 2
INGREDIENT_SEARCH_LIMIT = 10

# Регистрация
MIN_PASSWORD_LEN = 8
