"""Ограничения полей моделей рецептов."""

RECIPE_TITLE_MAX_LEN = 150
RECIPE_SLUG_MAX_LEN = 160
MIN_MINUTES = 0
MIN_SERVINGS = 1
MIN_CALORIES = 0

STEP_NUMBER_MIN = 1

CATEGORY_NAME_MAX_LEN = 60
CATEGORY_SLUG_MAX_LEN = 70

INGREDIENT_NAME_MAX_LEN = 120
INGREDIENT_UNIT_MAX_LEN = 20
INGREDIENT_NOTE_MAX_LEN = 255
QUANTITY_MAX_DIGITS = 10
QUANTITY_DECIMAL_PLACES = 2

COMMENT_MAX_LEN = 1000

RATING_MIN = 1
RATING_MAX = 5
