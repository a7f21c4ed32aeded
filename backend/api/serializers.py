from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.db.models import Q

from djoser.conf import settings as djoser_settings
from djoser.serializers import (
    TokenCreateSerializer as DjoserTokenCreateSerializer,
)
from drf_extra_fields.fields import Base64ImageField
from rest_framework import exceptions, serializers

from api.constants import MIN_PASSWORD_LEN
from recipes.constants import (
    CATEGORY_NAME_MAX_LEN,
    COMMENT_MAX_LEN,
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
    RECIPE_TITLE_MAX_LEN,
    STEP_NUMBER_MIN,
)
from recipes.dto import (
    UNSET,
    IngredientLinkInput,
    RecipeDraft,
    RecipePatch,
    StepInput,
)
from recipes.models import (
    Category,
    Comment,
    Difficulty,
    Ingredient,
    Photo,
    Rating,
    Recipe,
)
from users.constants import BIO_MAX_LEN, NAME_MAX_LEN
from users.models import User


class UserInfoSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ("id", "username", "name", "avatar_url")
        read_only_fields = fields


class CurrentUserSerializer(serializers.ModelSerializer):
    recipes_count = serializers.SerializerMethodField()
    favorites_count = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = (
            "id",
            "username",
            "name",
            "email",
            "bio",
            "avatar_url",
            "date_joined",
            "recipes_count",
            "favorites_count",
        )
        read_only_fields = fields

    def get_recipes_count(self, obj):
        return obj.recipes.count()

    def get_favorites_count(self, obj):
        return obj.favorites.count()


class _PasswordConfirmationMixin:
    def _check_confirmation(self, attrs, field="password"):
        if attrs.get(field) != attrs.get("password_confirmation"):
            raise serializers.ValidationError(
                {"password_confirmation": ["Пароли не совпадают."]}
            )


class UserCreateSerializer(
    _PasswordConfirmationMixin, serializers.ModelSerializer
):
    name = serializers.CharField(
        required=True,
        allow_blank=False,
        max_length=NAME_MAX_LEN,
    )
    password = serializers.CharField(
        write_only=True,
        required=True,
        allow_blank=False,
        min_length=MIN_PASSWORD_LEN,
    )
    password_confirmation = serializers.CharField(
        write_only=True,
        required=True,
    )
    bio = serializers.CharField(
        required=False,
        allow_blank=True,
        max_length=BIO_MAX_LEN,
    )

    class Meta:
        model = User
        fields = (
            "id",
            "username",
            "name",
            "email",
            "bio",
            "password",
            "password_confirmation",
        )

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Обязательное поле.")
        return value

    def validate_email(self, value):
        val = (value or "").strip().lower()
        if not val:
            raise serializers.ValidationError("Укажите email.")
        if User.objects.filter(email__iexact=val).exists():
            raise serializers.ValidationError(
                "Пользователь с таким email уже существует."
            )
        return val

    def validate(self, attrs):
        self._check_confirmation(attrs)
        candidate = User(
            username=attrs.get("username"),
            email=attrs.get("email"),
            name=attrs.get("name"),
        )
        validate_password(attrs["password"], candidate)
        return attrs

    def create(self, validated_data):
        validated_data.pop("password_confirmation")
        return User.objects.create_user(**validated_data)


class ProfileUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ("username", "name", "email", "bio", "avatar_url")

    def validate_email(self, value):
        val = (value or "").strip().lower()
        exists = (
            User.objects.filter(email__iexact=val)
            .exclude(pk=self.instance.pk)
            .exists()
        )
        if exists:
            raise serializers.ValidationError(
                "Пользователь с таким email уже существует."
            )
        return val


class SetPasswordSerializer(
    _PasswordConfirmationMixin, serializers.Serializer
):
    current_password = serializers.CharField(
        write_only=True,
        required=True,
    )
    password = serializers.CharField(
        write_only=True,
        required=True,
    )
    password_confirmation = serializers.CharField(
        write_only=True,
        required=True,
    )

    def validate_current_password(self, value):
        user = self.context.get("request").user
        if not user.check_password(value):
            raise serializers.ValidationError("Неверный текущий пароль.")
        return value

    def validate(self, attrs):
        self._check_confirmation(attrs)
        validate_password(attrs["password"], self.context.get("request").user)
        return attrs


class LoginOrEmailTokenCreateSerializer(DjoserTokenCreateSerializer):
    login = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        login_field = djoser_settings.LOGIN_FIELD

        raw_login = (
            attrs.get("login")
            or attrs.get(login_field)
            or attrs.get("email")
            or ""
        ).strip()

        password = attrs.get("password") or ""
        if not raw_login or not password:
            raise serializers.ValidationError(
                {"non_field_errors": ["Укажите логин и пароль."]}
            )

        login_norm = raw_login.lower()

        UserModel = get_user_model()
        user = UserModel.objects.filter(
            Q(email__iexact=login_norm) | Q(username__iexact=login_norm)
        ).first()

        if not user or not user.check_password(password):
            raise exceptions.AuthenticationFailed("Неверные учетные данные.")
        if not getattr(user, "is_active", True):
            raise exceptions.AuthenticationFailed(
                "Пользователь деактивирован."
            )

        attrs[login_field] = getattr(user, login_field)
        return super().validate(attrs)


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ("id", "name", "slug")
        read_only_fields = ("id", "slug")


class CategoryUsageSerializer(CategorySerializer):
    recipes_count = serializers.IntegerField(read_only=True)
    public_recipes_count = serializers.IntegerField(read_only=True)

    class Meta(CategorySerializer.Meta):
        fields = CategorySerializer.Meta.fields + (
            "recipes_count",
            "public_recipes_count",
        )


class IngredientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Ingredient
        fields = ("id", "name", "default_unit")
        read_only_fields = ("id",)


class IngredientUsageSerializer(IngredientSerializer):
    recipes_count = serializers.IntegerField(read_only=True)
    public_recipes_count = serializers.IntegerField(read_only=True)

    class Meta(IngredientSerializer.Meta):
        fields = IngredientSerializer.Meta.fields + (
            "recipes_count",
            "public_recipes_count",
        )


class CategoryWriteSerializer(serializers.Serializer):
    """Входные данные категории; уникальность проверяет сервис."""

    name = serializers.CharField(max_length=CATEGORY_NAME_MAX_LEN)


class IngredientWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=INGREDIENT_NAME_MAX_LEN)
    default_unit = serializers.CharField(
        max_length=INGREDIENT_UNIT_MAX_LEN,
        required=False,
        allow_blank=True,
        allow_null=True,
    )


class PhotoSerializer(serializers.ModelSerializer):
    url = serializers.SerializerMethodField()

    class Meta:
        model = Photo
        fields = ("id", "url", "is_cover", "created_at")
        read_only_fields = fields

    def get_url(self, obj):
        request = self.context.get("request")
        if obj.image:
            url = obj.image.url
            return request.build_absolute_uri(url) if request else url
        return None


class PhotoCreateSerializer(serializers.Serializer):
    image = Base64ImageField(required=True, help_text="Изображение в base64")
    is_cover = serializers.BooleanField(required=False, default=False)


class StepSerializer(serializers.Serializer):
    step_number = serializers.IntegerField(min_value=STEP_NUMBER_MIN)
    instruction = serializers.CharField()


class RecipeIngredientReadSerializer(serializers.Serializer):
    id = serializers.IntegerField(source="ingredient.id")
    name = serializers.CharField(source="ingredient.name")
    quantity = serializers.DecimalField(
        max_digits=QUANTITY_MAX_DIGITS,
        decimal_places=QUANTITY_DECIMAL_PLACES,
        allow_null=True,
    )
    unit = serializers.SerializerMethodField()
    note = serializers.CharField()

    def get_unit(self, obj):
        return obj.unit or obj.ingredient.default_unit


class RecipeIngredientWriteSerializer(serializers.Serializer):
    ingredient_id = serializers.IntegerField(min_value=1)
    quantity = serializers.DecimalField(
        max_digits=QUANTITY_MAX_DIGITS,
        decimal_places=QUANTITY_DECIMAL_PLACES,
        min_value=0,
        required=False,
        allow_null=True,
    )
    unit = serializers.CharField(
        max_length=INGREDIENT_UNIT_MAX_LEN,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    note = serializers.CharField(
        max_length=INGREDIENT_NOTE_MAX_LEN,
        required=False,
        allow_blank=True,
        allow_null=True,
    )


class CommentSerializer(serializers.ModelSerializer):
    author = UserInfoSerializer(read_only=True)

    class Meta:
        model = Comment
        fields = ("id", "content", "author", "created_at", "updated_at")
        read_only_fields = ("id", "author", "created_at", "updated_at")


class CommentWriteSerializer(serializers.Serializer):
    content = serializers.CharField(max_length=COMMENT_MAX_LEN)


class RatingSerializer(serializers.ModelSerializer):
    author = UserInfoSerializer(read_only=True)
    rating = serializers.IntegerField(source="value", read_only=True)

    class Meta:
        model = Rating
        fields = ("id", "rating", "author", "created_at", "updated_at")
        read_only_fields = fields


class RatingWriteSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=RATING_MIN, max_value=RATING_MAX)


class RecipeListSerializer(serializers.ModelSerializer):
    """Карточка рецепта; показатели берутся из аннотаций запроса."""

    author = UserInfoSerializer(read_only=True)
    categories = CategorySerializer(many=True, read_only=True)
    cover_photo = serializers.SerializerMethodField()
    total_time = serializers.IntegerField(read_only=True)
    average_rating = serializers.FloatField(read_only=True)
    ratings_count = serializers.IntegerField(read_only=True)
    favorites_count = serializers.IntegerField(read_only=True)
    comments_count = serializers.IntegerField(read_only=True)
    is_favorite = serializers.BooleanField(read_only=True)
    difficulty_text = serializers.CharField(
        source="get_difficulty_display", read_only=True
    )

    class Meta:
        model = Recipe
        fields = (
            "id",
            "slug",
            "title",
            "description",
            "prep_minutes",
            "cook_minutes",
            "total_time",
            "servings",
            "difficulty",
            "difficulty_text",
            "is_public",
            "calories",
            "author",
            "categories",
            "cover_photo",
            "average_rating",
            "ratings_count",
            "favorites_count",
            "comments_count",
            "is_favorite",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields

    def get_cover_photo(self, obj):
        covers = getattr(obj, "cover_photos", None)
        if covers is None:
            covers = [p for p in obj.photos.all() if p.is_cover]
        if not covers:
            return None
        return PhotoSerializer(covers[0], context=self.context).data


class RecipeDetailSerializer(RecipeListSerializer):
    steps = StepSerializer(many=True, read_only=True)
    ingredients = RecipeIngredientReadSerializer(
        source="ingredient_links", many=True, read_only=True
    )
    photos = PhotoSerializer(many=True, read_only=True)
    comments = CommentSerializer(many=True, read_only=True)
    ratings = RatingSerializer(many=True, read_only=True)

    class Meta(RecipeListSerializer.Meta):
        fields = RecipeListSerializer.Meta.fields + (
            "steps",
            "ingredients",
            "photos",
            "comments",
            "ratings",
        )
        read_only_fields = fields


class RecipeWriteSerializer(serializers.Serializer):
    """Проверка формата; правила агрегата проверяет сервис рецептов."""

    title = serializers.CharField(max_length=RECIPE_TITLE_MAX_LEN)
    description = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )
    prep_minutes = serializers.IntegerField(
        min_value=MIN_MINUTES, required=False, allow_null=True
    )
    cook_minutes = serializers.IntegerField(
        min_value=MIN_MINUTES, required=False, allow_null=True
    )
    servings = serializers.IntegerField(
        min_value=MIN_SERVINGS, required=False, allow_null=True
    )
    difficulty = serializers.ChoiceField(choices=Difficulty.choices)
    is_public = serializers.BooleanField(required=False)
    calories = serializers.IntegerField(
        min_value=MIN_CALORIES, required=False, allow_null=True
    )
    steps = StepSerializer(many=True, required=False)
    ingredients = RecipeIngredientWriteSerializer(many=True, required=False)
    categories = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        required=False,
    )

    SCALAR_FIELDS = (
        "title",
        "description",
        "prep_minutes",
        "cook_minutes",
        "servings",
        "difficulty",
        "is_public",
        "calories",
    )

    def to_draft(self) -> RecipeDraft:
        data = self.validated_data
        return RecipeDraft(
            title=data["title"],
            difficulty=data["difficulty"],
            description=data.get("description") or "",
            prep_minutes=data.get("prep_minutes"),
            cook_minutes=data.get("cook_minutes"),
            servings=data.get("servings"),
            is_public=data.get("is_public", True),
            calories=data.get("calories"),
        )

    def to_patch(self) -> RecipePatch:
        data = self.validated_data
        return RecipePatch(
            **{name: data.get(name, UNSET) for name in self.SCALAR_FIELDS}
        )

    def steps_input(self):
        if "steps" not in self.validated_data:
            return None
        return [
            StepInput(
                step_number=item["step_number"],
                instruction=item["instruction"],
            )
            for item in self.validated_data["steps"]
        ]

    def ingredients_input(self):
        if "ingredients" not in self.validated_data:
            return None
        return [
            IngredientLinkInput(
                ingredient_id=item["ingredient_id"],
                quantity=item.get("quantity"),
                unit=item.get("unit"),
                note=item.get("note"),
            )
            for item in self.validated_data["ingredients"]
        ]

    def category_ids(self):
        return self.validated_data.get("categories")
