import logging

from django_filters.rest_framework import DjangoFilterBackend
from djoser.utils import login_user, logout_user
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated

from api.constants import (
    INGREDIENT_SEARCH_LIMIT,
    INGREDIENT_SEARCH_MIN_LEN,
    RECIPES_PAGE_SIZE,
)
from api.filters import RecipeFilter
from api.pagination import (
    FeedbackPagination,
    IngredientPagination,
    RecipePagination,
)
from api.serializers import (
    CategorySerializer,
    CategoryUsageSerializer,
    CategoryWriteSerializer,
    CommentSerializer,
    CommentWriteSerializer,
    CurrentUserSerializer,
    IngredientSerializer,
    IngredientUsageSerializer,
    IngredientWriteSerializer,
    LoginOrEmailTokenCreateSerializer,
    PhotoCreateSerializer,
    PhotoSerializer,
    ProfileUpdateSerializer,
    RatingSerializer,
    RatingWriteSerializer,
    RecipeDetailSerializer,
    RecipeListSerializer,
    RecipeWriteSerializer,
    SetPasswordSerializer,
    UserCreateSerializer,
)
from api.utils import actor_of, envelope
from recipes import catalog, guards, selectors, services, social

logger = logging.getLogger(__name__)


def _paginated(view, paginator, queryset, serializer_class):
    page = paginator.paginate_queryset(queryset, view.request, view=view)
    serializer = serializer_class(
        page, many=True, context={"request": view.request}
    )
    return paginator.get_paginated_response(serializer.data)


class AuthViewSet(viewsets.GenericViewSet):
    """Регистрация, вход по токену и управление своим профилем."""

    permission_classes = (IsAuthenticated,)

    def get_permissions(self):
        if self.action in ("register", "login"):
            return [AllowAny()]
        return super().get_permissions()

    def _user_data(self, user):
        return CurrentUserSerializer(
            user, context={"request": self.request}
        ).data

    @action(detail=False, methods=["post"], url_path="register")
    def register(self, request):
        serializer = UserCreateSerializer(
            data=request.data, context={"request": request}
        )
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        token = login_user(request, user)
        logger.info("User %s registered", user.pk)
        return envelope(
            {
                "user": self._user_data(user),
                "token": token.key,
                "token_type": "Bearer",
            },
            message="Регистрация прошла успешно.",
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["post"], url_path="login")
    def login(self, request):
        serializer = LoginOrEmailTokenCreateSerializer(
            data=request.data, context={"request": request}
        )
        serializer.is_valid(raise_exception=True)
        user = serializer.user
        token = login_user(request, user)
        return envelope(
            {
                "user": self._user_data(user),
                "token": token.key,
                "token_type": "Bearer",
            },
            message="Вход выполнен.",
        )

    @action(detail=False, methods=["post"], url_path="logout")
    def logout(self, request):
        logout_user(request)
        return envelope(message="Выход выполнен.")

    @action(detail=False, methods=["get"], url_path="me")
    def me(self, request):
        return envelope(self._user_data(request.user))

    @action(detail=False, methods=["put", "patch"], url_path="profile")
    def profile(self, request):
        serializer = ProfileUpdateSerializer(
            request.user,
            data=request.data,
            partial=request.method == "PATCH",
            context={"request": request},
        )
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return envelope(self._user_data(user), message="Профиль обновлен.")

    @action(detail=False, methods=["post"], url_path="change-password")
    def change_password(self, request):
        serializer = SetPasswordSerializer(
            data=request.data, context={"request": request}
        )
        serializer.is_valid(raise_exception=True)

        user = request.user
        user.set_password(serializer.validated_data["password"])
        user.save(update_fields=["password"])
        logger.info("User %s changed password", user.pk)
        return envelope(message="Пароль изменен.")


class RecipeViewSet(viewsets.GenericViewSet):
    lookup_field = "slug"
    permission_classes = (AllowAny,)
    filter_backends = (DjangoFilterBackend,)
    filterset_class = RecipeFilter
    pagination_class = RecipePagination

    def get_permissions(self):
        if self.action in ("create", "mine", "favorites"):
            return [IsAuthenticated()]
        return super().get_permissions()

    def get_queryset(self):
        return selectors.public_recipes(actor_of(self.request))

    def _detail(self, slug, code=status.HTTP_200_OK, message=None):
        recipe = selectors.load_recipe_detail(slug, actor_of(self.request))
        data = RecipeDetailSerializer(
            recipe, context={"request": self.request}
        ).data
        return envelope(data, message=message, status=code)

    def _list(self, queryset):
        queryset = self.filter_queryset(queryset)
        return _paginated(
            self, self.paginator, queryset, RecipeListSerializer
        )

    def list(self, request):
        return self._list(self.get_queryset())

    def retrieve(self, request, slug=None):
        return self._detail(slug)

    def create(self, request):
        serializer = RecipeWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        recipe = services.create_recipe(
            request.user,
            serializer.to_draft(),
            steps=serializer.steps_input() or (),
            ingredients=serializer.ingredients_input() or (),
            category_ids=serializer.category_ids() or (),
        )
        return self._detail(
            recipe.slug,
            code=status.HTTP_201_CREATED,
            message="Рецепт создан.",
        )

    def update(self, request, slug=None, **kwargs):
        actor = actor_of(request)
        recipe = selectors.get_recipe(slug)
        guards.ensure_can_modify_recipe(recipe, actor)
        serializer = RecipeWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        services.update_recipe(
            recipe,
            actor,
            serializer.to_patch(),
            steps=serializer.steps_input(),
            ingredients=serializer.ingredients_input(),
            category_ids=serializer.category_ids(),
        )
        return self._detail(recipe.slug, message="Рецепт обновлен.")

    def partial_update(self, request, slug=None):
        return self.update(request, slug=slug)

    def destroy(self, request, slug=None):
        recipe = selectors.get_recipe(slug)
        services.delete_recipe(recipe, actor_of(request))
        return envelope(message="Рецепт удален.")

    @action(detail=False, methods=["get"], url_path="mine")
    def mine(self, request):
        return self._list(
            selectors.recipes_by_author(request.user, request.user)
        )

    @action(detail=False, methods=["get"], url_path="favorites")
    def favorites(self, request):
        return self._list(selectors.favorite_recipes(request.user))

    @action(detail=True, methods=["post"], url_path="favorite")
    def favorite(self, request, slug=None):
        recipe = selectors.get_recipe(slug)
        state = social.toggle_favorite(recipe, actor_of(request))
        return envelope(
            {
                "is_favorite": state,
                "favorites_count": recipe.favorites.count(),
            },
            message=(
                "Рецепт добавлен в избранное."
                if state
                else "Рецепт удален из избранного."
            ),
        )

    @action(detail=True, methods=["get", "post"], url_path="comments")
    def comments(self, request, slug=None):
        actor = actor_of(request)
        if request.method == "GET":
            recipe = selectors.get_visible_recipe(slug, actor)
            return _paginated(
                self,
                FeedbackPagination(),
                selectors.comments_for(recipe),
                CommentSerializer,
            )

        recipe = selectors.get_recipe(slug)
        guards.ensure_can_interact(recipe, actor)
        serializer = CommentWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = social.add_comment(
            recipe, actor, serializer.validated_data["content"]
        )
        return envelope(
            CommentSerializer(comment, context={"request": request}).data,
            message="Комментарий добавлен.",
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["get", "post"], url_path="ratings")
    def ratings(self, request, slug=None):
        actor = actor_of(request)
        if request.method == "GET":
            recipe = selectors.get_visible_recipe(slug, actor)
            return _paginated(
                self,
                FeedbackPagination(),
                selectors.ratings_for(recipe),
                RatingSerializer,
            )

        recipe = selectors.get_recipe(slug)
        guards.ensure_can_interact(recipe, actor)
        serializer = RatingWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        rating = social.add_rating(
            recipe, actor, serializer.validated_data["rating"]
        )
        fresh = selectors.get_visible_recipe(slug, actor)
        return envelope(
            {
                "rating": RatingSerializer(
                    rating, context={"request": request}
                ).data,
                "average_rating": fresh.average_rating,
                "ratings_count": fresh.ratings_count,
            },
            message="Оценка сохранена.",
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["get"], url_path="my-rating")
    def my_rating(self, request, slug=None):
        recipe = selectors.get_recipe(slug)
        rating = social.get_user_rating(recipe, actor_of(request))
        data = (
            RatingSerializer(rating, context={"request": request}).data
            if rating
            else None
        )
        return envelope({"rating": data})

    @action(detail=True, methods=["post"], url_path="photos")
    def photos(self, request, slug=None):
        actor = actor_of(request)
        recipe = selectors.get_recipe(slug)
        guards.ensure_can_modify_recipe(recipe, actor)
        serializer = PhotoCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        photo = social.add_photo(
            recipe,
            actor,
            serializer.validated_data["image"],
            is_cover=serializer.validated_data["is_cover"],
        )
        return envelope(
            PhotoSerializer(photo, context={"request": request}).data,
            message="Фото добавлено.",
            status=status.HTTP_201_CREATED,
        )


class CommentViewSet(viewsets.ViewSet):
    permission_classes = (AllowAny,)

    def update(self, request, pk=None):
        comment = selectors.get_comment(pk)
        actor = actor_of(request)
        guards.ensure_is_author(comment, actor)
        serializer = CommentWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = social.update_comment(
            comment, actor, serializer.validated_data["content"]
        )
        return envelope(
            CommentSerializer(comment, context={"request": request}).data,
            message="Комментарий обновлен.",
        )

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        comment = selectors.get_comment(pk)
        social.delete_comment(comment, actor_of(request))
        return envelope(message="Комментарий удален.")


class RatingViewSet(viewsets.ViewSet):
    permission_classes = (AllowAny,)

    def update(self, request, pk=None):
        rating = selectors.get_rating(pk)
        actor = actor_of(request)
        guards.ensure_is_author(rating, actor)
        serializer = RatingWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        rating = social.update_rating(
            rating, actor, serializer.validated_data["rating"]
        )
        return envelope(
            RatingSerializer(rating, context={"request": request}).data,
            message="Оценка обновлена.",
        )

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        rating = selectors.get_rating(pk)
        social.delete_rating(rating, actor_of(request))
        return envelope(message="Оценка удалена.")


class PhotoViewSet(viewsets.ViewSet):
    permission_classes = (AllowAny,)

    @action(detail=True, methods=["post"], url_path="cover")
    def cover(self, request, pk=None):
        photo = social.set_cover_photo(
            selectors.get_photo(pk), actor_of(request)
        )
        return envelope(
            PhotoSerializer(photo, context={"request": request}).data,
            message="Обложка обновлена.",
        )

    def destroy(self, request, pk=None):
        photo = selectors.get_photo(pk)
        social.delete_photo(photo, actor_of(request))
        return envelope(message="Фото удалено.")


class CategoryViewSet(viewsets.ViewSet):
    """Справочник категорий; изменения доступны только персоналу."""

    permission_classes = (AllowAny,)

    def list(self, request):
        data = CategoryUsageSerializer(
            selectors.categories_with_usage(), many=True
        ).data
        return envelope(data)

    def retrieve(self, request, pk=None):
        category = selectors.get_category(pk)
        recipes = selectors.public_recipes(actor_of(request)).filter(
            category_links__category=category
        )[:RECIPES_PAGE_SIZE]
        data = CategoryUsageSerializer(category).data
        data["recipes"] = RecipeListSerializer(
            recipes, many=True, context={"request": request}
        ).data
        return envelope(data)

    def _validated(self, request):
        guards.ensure_can_manage_catalog(actor_of(request))
        serializer = CategoryWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def create(self, request):
        data = self._validated(request)
        category = catalog.create_category(actor_of(request), data["name"])
        return envelope(
            CategorySerializer(category).data,
            message="Категория создана.",
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, pk=None):
        category = selectors.get_category(pk)
        data = self._validated(request)
        category = catalog.update_category(
            category, actor_of(request), data["name"]
        )
        return envelope(
            CategorySerializer(category).data,
            message="Категория обновлена.",
        )

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        category = selectors.get_category(pk)
        catalog.delete_category(category, actor_of(request))
        return envelope(message="Категория удалена.")


class IngredientViewSet(viewsets.GenericViewSet):
    permission_classes = (AllowAny,)
    pagination_class = IngredientPagination

    def get_queryset(self):
        return selectors.ingredients_with_usage(
            self.request.query_params.get("search")
        )

    def list(self, request):
        return _paginated(
            self, self.paginator, self.get_queryset(), IngredientUsageSerializer
        )

    def retrieve(self, request, pk=None):
        return envelope(
            IngredientUsageSerializer(selectors.get_ingredient(pk)).data
        )

    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request):
        needle = (request.query_params.get("q") or "").strip()
        if len(needle) < INGREDIENT_SEARCH_MIN_LEN:
            return envelope([])
        found = selectors.ingredients_with_usage(needle)[
            :INGREDIENT_SEARCH_LIMIT
        ]
        return envelope(IngredientSerializer(found, many=True).data)

    def _validated(self, request):
        guards.ensure_can_manage_catalog(actor_of(request))
        serializer = IngredientWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def create(self, request):
        data = self._validated(request)
        ingredient = catalog.create_ingredient(
            actor_of(request), data["name"], data.get("default_unit")
        )
        return envelope(
            IngredientSerializer(ingredient).data,
            message="Ингредиент создан.",
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, pk=None):
        ingredient = selectors.get_ingredient(pk)
        data = self._validated(request)
        ingredient = catalog.update_ingredient(
            ingredient,
            actor_of(request),
            data["name"],
            data.get("default_unit"),
        )
        return envelope(
            IngredientSerializer(ingredient).data,
            message="Ингредиент обновлен.",
        )

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        ingredient = selectors.get_ingredient(pk)
        catalog.delete_ingredient(ingredient, actor_of(request))
        return envelope(message="Ингредиент удален.")
