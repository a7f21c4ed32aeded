from django.core.validators import (
    MaxValueValidator,
    MinValueValidator,
    RegexValidator,
)

from recipes.constants import RATING_MAX, RATING_MIN


SLUG_REGEX = r"^[-\w]+\Z"

SLUG_VALIDATOR = RegexValidator(
    regex=SLUG_REGEX,
    message="Разрешены буквы, цифры, дефис и подчеркивание.",
)

RATING_VALIDATORS = [
    MinValueValidator(RATING_MIN, message="Оценка не может быть меньше 1."),
    MaxValueValidator(RATING_MAX, message="Оценка не может быть больше 5."),
]
