from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models.functions import Lower

from recipes.constants import (
    CATEGORY_NAME_MAX_LEN,
    CATEGORY_SLUG_MAX_LEN,
    INGREDIENT_NAME_MAX_LEN,
    INGREDIENT_NOTE_MAX_LEN,
    INGREDIENT_UNIT_MAX_LEN,
    MIN_CALORIES,
    MIN_MINUTES,
    MIN_SERVINGS,
    QUANTITY_DECIMAL_PLACES,
    QUANTITY_MAX_DIGITS,
    RATING_MAX,
    RATING_MIN,
    RECIPE_SLUG_MAX_LEN,
    RECIPE_TITLE_MAX_LEN,
    STEP_NUMBER_MIN,
)
from recipes.validators import RATING_VALIDATORS, SLUG_VALIDATOR

User = settings.AUTH_USER_MODEL


class Difficulty(models.TextChoices):
    EASY = "easy", "Легко"
    MEDIUM = "medium", "Средне"
    HARD = "hard", "Сложно"


class Category(models.Model):
    name = models.CharField(
        "Название",
        max_length=CATEGORY_NAME_MAX_LEN,
        unique=True,
    )
    slug = models.SlugField(
        "Слаг",
        max_length=CATEGORY_SLUG_MAX_LEN,
        unique=True,
        allow_unicode=True,
        validators=[SLUG_VALIDATOR],
    )

    class Meta:
        ordering = ["name"]
        verbose_name = "Категория"
        verbose_name_plural = "Категории"
        constraints = [
            models.UniqueConstraint(
                Lower("name"),
                name="category_name_ci_unique",
            ),
        ]

    def __str__(self) -> str:
        return self.name


class Ingredient(models.Model):
    name = models.CharField(
        "Название",
        max_length=INGREDIENT_NAME_MAX_LEN,
        unique=True,
    )
    default_unit = models.CharField(
        "Единица измерения по умолчанию",
        max_length=INGREDIENT_UNIT_MAX_LEN,
        blank=True,
        default="",
    )

    class Meta:
        ordering = ["name"]
        verbose_name = "Ингредиент"
        verbose_name_plural = "Ингредиенты"
        constraints = [
            models.UniqueConstraint(
                Lower("name"),
                name="ingredient_name_ci_unique",
            ),
        ]

    def __str__(self) -> str:
        if self.default_unit:
            return f"{self.name} ({self.default_unit})"
        return self.name


class Recipe(models.Model):
    author = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="recipes",
        verbose_name="Автор",
    )
    title = models.CharField(
        "Название",
        max_length=RECIPE_TITLE_MAX_LEN,
        db_index=True,
    )
    slug = models.SlugField(
        "Слаг",
        max_length=RECIPE_SLUG_MAX_LEN,
        unique=True,
        allow_unicode=True,
        editable=False,
    )
    description = models.TextField("Описание", blank=True, default="")
    prep_minutes = models.PositiveIntegerField(
        "Подготовка, мин",
        null=True,
        blank=True,
        validators=[MinValueValidator(MIN_MINUTES)],
    )
    cook_minutes = models.PositiveIntegerField(
        "Приготовление, мин",
        null=True,
        blank=True,
        validators=[MinValueValidator(MIN_MINUTES)],
    )
    servings = models.PositiveSmallIntegerField(
        "Количество порций",
        null=True,
        blank=True,
        validators=[MinValueValidator(MIN_SERVINGS)],
    )
    difficulty = models.CharField(
        "Сложность",
        max_length=6,
        choices=Difficulty.choices,
    )
    is_public = models.BooleanField("Публичный", default=True)
    calories = models.PositiveIntegerField(
        "Калорийность",
        null=True,
        blank=True,
        validators=[MinValueValidator(MIN_CALORIES)],
    )
    categories = models.ManyToManyField(
        Category,
        through="RecipeCategory",
        related_name="recipes",
        verbose_name="Категории",
    )
    ingredients = models.ManyToManyField(
        Ingredient,
        through="RecipeIngredient",
        related_name="recipes",
        verbose_name="Ингредиенты",
    )
    created_at = models.DateTimeField("Создан", auto_now_add=True)
    updated_at = models.DateTimeField("Изменен", auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = "Рецепт"
        verbose_name_plural = "Рецепты"
        indexes = [
            models.Index(
                fields=["is_public", "-created_at"],
                name="recipe_public_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return self.title


class RecipeStep(models.Model):
    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        related_name="steps",
        verbose_name="Рецепт",
    )
    step_number = models.PositiveSmallIntegerField(
        "Номер шага",
        validators=[MinValueValidator(STEP_NUMBER_MIN)],
    )
    instruction = models.TextField("Инструкция")

    class Meta:
        ordering = ["step_number"]
        verbose_name = "Шаг рецепта"
        verbose_name_plural = "Шаги рецепта"
        constraints = [
            models.UniqueConstraint(
                fields=["recipe", "step_number"],
                name="unique_recipe_step_number",
            ),
            models.CheckConstraint(
                condition=models.Q(step_number__gte=STEP_NUMBER_MIN),
                name="recipe_step_number_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.step_number}. {self.instruction[:30]}"


class RecipeIngredient(models.Model):
    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        related_name="ingredient_links",
    )
    ingredient = models.ForeignKey(
        Ingredient,
        on_delete=models.PROTECT,
        related_name="recipe_links",
    )
    quantity = models.DecimalField(
        "Количество",
        max_digits=QUANTITY_MAX_DIGITS,
        decimal_places=QUANTITY_DECIMAL_PLACES,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
    )
    unit = models.CharField(
        "Единица измерения",
        max_length=INGREDIENT_UNIT_MAX_LEN,
        blank=True,
        default="",
    )
    note = models.CharField(
        "Примечание",
        max_length=INGREDIENT_NOTE_MAX_LEN,
        blank=True,
        default="",
    )

    class Meta:
        ordering = ["id"]
        verbose_name = "Ингредиент в рецепте"
        verbose_name_plural = "Ингредиенты в рецепте"
        constraints = [
            models.UniqueConstraint(
                fields=["recipe", "ingredient"],
                name="unique_recipe_ingredient",
            )
        ]

    def __str__(self) -> str:
        return f"{self.ingredient} x {self.quantity or ''} {self.unit}"


class RecipeCategory(models.Model):
    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        related_name="category_links",
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name="recipe_links",
    )

    class Meta:
        verbose_name = "Категория рецепта"
        verbose_name_plural = "Категории рецептов"
        constraints = [
            models.UniqueConstraint(
                fields=["recipe", "category"],
                name="unique_recipe_category",
            )
        ]

    def __str__(self) -> str:
        return f"{self.recipe} / {self.category}"


class Comment(models.Model):
    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        related_name="comments",
        verbose_name="Рецепт",
    )
    author = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="comments",
        verbose_name="Автор",
    )
    content = models.TextField("Текст")
    created_at = models.DateTimeField("Создан", auto_now_add=True)
    updated_at = models.DateTimeField("Изменен", auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = "Комментарий"
        verbose_name_plural = "Комментарии"

    def __str__(self) -> str:
        return f"{self.author} → {self.recipe}: {self.content[:30]}"


class Rating(models.Model):
    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        related_name="ratings",
        verbose_name="Рецепт",
    )
    author = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="ratings",
        verbose_name="Автор",
    )
    value = models.PositiveSmallIntegerField(
        "Оценка",
        validators=RATING_VALIDATORS,
    )
    created_at = models.DateTimeField("Создана", auto_now_add=True)
    updated_at = models.DateTimeField("Изменена", auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = "Оценка"
        verbose_name_plural = "Оценки"
        constraints = [
            models.UniqueConstraint(
                fields=["recipe", "author"],
                name="unique_rating_recipe_author",
            ),
            models.CheckConstraint(
                condition=models.Q(
                    value__gte=RATING_MIN,
                    value__lte=RATING_MAX,
                ),
                name="rating_value_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.author} → {self.recipe}: {self.value}"


class Photo(models.Model):
    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        related_name="photos",
        verbose_name="Рецепт",
    )
    author = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="photos",
        verbose_name="Загрузил",
    )
    image = models.ImageField("Файл", upload_to="recipes/photos/")
    is_cover = models.BooleanField("Обложка", default=False)
    created_at = models.DateTimeField("Загружено", auto_now_add=True)

    class Meta:
        ordering = ["-is_cover", "id"]
        verbose_name = "Фото"
        verbose_name_plural = "Фото"
        constraints = [
            models.UniqueConstraint(
                fields=["recipe"],
                condition=models.Q(is_cover=True),
                name="unique_recipe_cover_photo",
            )
        ]

    def __str__(self) -> str:
        return self.image.name


class Favorite(models.Model):
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="favorites",
    )
    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        related_name="favorites",
    )
    created_at = models.DateTimeField("Добавлено", auto_now_add=True)

    class Meta:
        verbose_name = "Избранное"
        verbose_name_plural = "Избранное"
        constraints = [
            models.UniqueConstraint(
                fields=["user", "recipe"],
                name="unique_favorite_user_recipe",
            )
        ]

    def __str__(self) -> str:
        return f"{self.user} → {self.recipe}"
