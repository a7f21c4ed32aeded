from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    AuthViewSet,
    CategoryViewSet,
    CommentViewSet,
    IngredientViewSet,
    PhotoViewSet,
    RatingViewSet,
    RecipeViewSet,
)

app_name = "api"

router = DefaultRouter()
router.register("auth", AuthViewSet, basename="auth")
router.register("recipes", RecipeViewSet, basename="recipes")
router.register("comments", CommentViewSet, basename="comments")
router.register("ratings", RatingViewSet, basename="ratings")
router.register("photos", PhotoViewSet, basename="photos")
router.register("categories", CategoryViewSet, basename="categories")
router.register("ingredients", IngredientViewSet, basename="ingredients")

urlpatterns = [
    path("", include(router.urls)),
]
