from django import forms
from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html, format_html_join
from django.utils.http import urlencode
from rangefilter.filters import DateRangeFilter

from .exceptions import ValidationFailed
from .metrics import annotate_metrics, annotate_usage
from .models import (
    Category,
    Comment,
    Favorite,
    Ingredient,
    Photo,
    Rating,
    Recipe,
    RecipeCategory,
    RecipeIngredient,
    RecipeStep,
)
from .services import ensure_slug_available, make_slug

admin.site.site_header = "Книга рецептов - админка"
admin.site.site_title = "Книга рецептов | Администрирование"
admin.site.index_title = "Панель управления"


def _recipe_changelist_url(**params):
    app_label = Recipe._meta.app_label
    model_name = Recipe._meta.model_name
    base = reverse(f"admin:{app_label}_{model_name}_changelist")
    return f"{base}?{urlencode(params)}"


class RecipeStepInline(admin.TabularInline):
    model = RecipeStep
    extra = 1
    fields = ("step_number", "instruction")
    ordering = ("step_number",)


class RecipeIngredientInline(admin.TabularInline):
    model = RecipeIngredient
    extra = 1
    autocomplete_fields = ("ingredient",)
    fields = ("ingredient", "quantity", "unit", "note")


class RecipeCategoryInline(admin.TabularInline):
    model = RecipeCategory
    extra = 0
    autocomplete_fields = ("category",)


class PhotoInline(admin.TabularInline):
    model = Photo
    extra = 0
    fields = ("image", "is_cover", "author")
    autocomplete_fields = ("author",)


class _UsageAdmin(admin.ModelAdmin):
    """Справочник со ссылкой на рецепты, где используется запись."""

    usage_lookup = None

    def get_queryset(self, request):
        return annotate_usage(super().get_queryset(request))

    @admin.display(description="Рецептов", ordering="recipes_count")
    def recipes_count_link(self, obj):
        url = _recipe_changelist_url(**{self.usage_lookup: obj.id})
        return format_html('<a href="{}">{}</a>', url, obj.recipes_count)


@admin.register(Ingredient)
class IngredientAdmin(_UsageAdmin):
    list_display = ("id", "name", "default_unit", "recipes_count_link")
    search_fields = ("^name",)
    list_filter = ("default_unit",)
    ordering = ("name",)
    usage_lookup = "ingredients__id__exact"


@admin.register(Category)
class CategoryAdmin(_UsageAdmin):
    list_display = ("id", "name", "slug", "recipes_count_link")
    search_fields = ("name", "slug")
    ordering = ("name",)
    prepopulated_fields = {"slug": ("name",)}
    usage_lookup = "categories__id__exact"


class TotalTimeFilter(admin.SimpleListFilter):
    title = "общее время"
    parameter_name = "total_time_range"

    def lookups(self, request, model_admin):
        return (
            ("30", "до 30 мин"),
            ("60", "31-60 мин"),
            ("61", "больше 60 мин"),
        )

    def queryset(self, request, queryset):
        v = self.value()
        if v == "30":
            return queryset.filter(total_time__lte=30)
        if v == "60":
            return queryset.filter(total_time__gt=30, total_time__lte=60)
        if v == "61":
            return queryset.filter(total_time__gt=60)
        return queryset


class RecipeAdminForm(forms.ModelForm):
    class Meta:
        model = Recipe
        fields = (
            "author",
            "title",
            "description",
            "prep_minutes",
            "cook_minutes",
            "servings",
            "difficulty",
            "is_public",
            "calories",
        )

    def clean_title(self):
        title = self.cleaned_data["title"]
        # Слаг задается один раз, при создании.
        if self.instance.slug:
            return title
        try:
            ensure_slug_available(make_slug(title))
        except ValidationFailed as exc:
            raise forms.ValidationError(exc.errors["title"]) from exc
        return title


@admin.register(Recipe)
class RecipeAdmin(admin.ModelAdmin):
    form = RecipeAdminForm
    list_display = (
        "id",
        "title",
        "slug",
        "difficulty",
        "is_public",
        "categories_list",
        "author_link",
        "total_time",
        "average_rating",
        "favorites_count_link",
        "created_at",
    )
    list_display_links = ("id", "title")
    search_fields = ("title", "slug", "author__username", "author__email")
    list_filter = (
        "difficulty",
        "is_public",
        "categories",
        TotalTimeFilter,
        ("created_at", DateRangeFilter),
    )
    inlines = (
        RecipeStepInline,
        RecipeIngredientInline,
        RecipeCategoryInline,
        PhotoInline,
    )
    readonly_fields = ("slug", "created_at", "updated_at")
    ordering = ("-created_at",)
    autocomplete_fields = ("author",)

    def get_queryset(self, request):
        qs = (
            super()
            .get_queryset(request)
            .select_related("author")
            .prefetch_related("categories")
        )
        return annotate_metrics(qs)

    def save_model(self, request, obj, form, change):
        if not obj.slug:
            obj.slug = make_slug(obj.title)
        super().save_model(request, obj, form, change)

    @admin.display(description="Категории")
    def categories_list(self, obj: Recipe):
        categories = list(obj.categories.all())
        if not categories:
            return "-"
        rows = [
            (_recipe_changelist_url(categories__id__exact=c.id), c.name)
            for c in categories
        ]
        return format_html_join(
            " ",
            (
                '<a href="{}" '
                'style="display:inline-block;padding:1px 6px;'
                "margin:0 4px 4px 0;border:1px solid #ddd;"
                'border-radius:10px;text-decoration:none;">{}</a>'
            ),
            rows,
        )

    @admin.display(description="Время, мин", ordering="total_time")
    def total_time(self, obj):
        return obj.total_time

    @admin.display(description="Рейтинг", ordering="average_rating")
    def average_rating(self, obj):
        return f"{obj.average_rating:.1f} ({obj.ratings_count})"

    @admin.display(description="В избранном", ordering="favorites_count")
    def favorites_count_link(self, obj):
        app_label = Favorite._meta.app_label
        model_name = Favorite._meta.model_name
        url = reverse(f"admin:{app_label}_{model_name}_changelist")
        query = urlencode({"recipe__id__exact": obj.id})
        return format_html(
            '<a href="{}?{}">{}</a>', url, query, obj.favorites_count
        )

    @admin.display(description="Автор", ordering="author__username")
    def author_link(self, obj):
        return format_html(
            '<a href="{}">{}</a>',
            _recipe_changelist_url(author__id__exact=obj.author_id),
            obj.author,
        )


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ("id", "recipe", "author", "short_content", "created_at")
    search_fields = ("content", "recipe__title", "author__username")
    list_filter = (("created_at", DateRangeFilter),)
    autocomplete_fields = ("recipe", "author")

    @admin.display(description="Комментарий")
    def short_content(self, obj):
        return obj.content[:60]


@admin.register(Rating)
class RatingAdmin(admin.ModelAdmin):
    list_display = ("id", "recipe", "author", "value", "created_at")
    search_fields = ("recipe__title", "author__username")
    list_filter = ("value",)
    autocomplete_fields = ("recipe", "author")


@admin.register(Photo)
class PhotoAdmin(admin.ModelAdmin):
    list_display = ("id", "image_thumb", "recipe", "is_cover", "created_at")
    search_fields = ("recipe__title",)
    list_filter = ("is_cover",)
    autocomplete_fields = ("recipe", "author")

    @admin.display(description="Фото")
    def image_thumb(self, obj):
        if not obj.image:
            return "-"
        return format_html(
            (
                '<img src="{}" '
                'style="height:40px;width:auto;border-radius:4px;" />'
            ),
            obj.image.url,
        )


@admin.register(Favorite)
class FavoriteAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "recipe", "created_at")
    search_fields = ("user__username", "recipe__title")
    list_filter = ("user",)
