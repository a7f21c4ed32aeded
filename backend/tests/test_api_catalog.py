import pytest
from rest_framework import status

from recipes.models import Category, Ingredient

pytestmark = pytest.mark.django_db

CATEGORIES = "/api/v1/categories/"
INGREDIENTS = "/api/v1/ingredients/"


class TestCategories:
    def test_list_with_usage(self, api_client, pasta, italian, dessert):
        response = api_client.get(CATEGORIES)
        assert response.status_code == status.HTTP_200_OK
        by_slug = {c["slug"]: c for c in response.data["data"]}
        assert by_slug["italian"]["recipes_count"] == 1
        assert by_slug["dessert"]["public_recipes_count"] == 0

    def test_detail_lists_public_recipes(
        self, api_client, chef, make_recipe, pasta, italian
    ):
        make_recipe(chef, "Hidden", is_public=False, category_ids=[italian.pk])
        response = api_client.get(f"{CATEGORIES}{italian.pk}/")
        data = response.data["data"]
        assert data["name"] == "Italian"
        assert [r["title"] for r in data["recipes"]] == ["Pasta"]

    def test_staff_creates(self, client_for, editor):
        response = client_for(editor).post(
            CATEGORIES, {"name": "Soups"}, format="json"
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["data"]["slug"] == "soups"

    def test_name_length_is_checked_per_catalog(self, client_for, editor):
        client = client_for(editor)
        response = client.post(CATEGORIES, {"name": "x" * 61}, format="json")
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "name" in response.data["errors"]
        assert not Category.objects.exists()

        response = client.post(
            INGREDIENTS, {"name": "x" * 61}, format="json"
        )
        assert response.status_code == status.HTTP_201_CREATED

    def test_regular_user_is_forbidden(self, client_for, chef):
        response = client_for(chef).post(
            CATEGORIES, {"name": "Soups"}, format="json"
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not Category.objects.exists()

    def test_anonymous_is_unauthenticated(self, api_client, db):
        response = api_client.post(
            CATEGORIES, {"name": "Soups"}, format="json"
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_referenced_category_delete_conflicts(
        self, client_for, editor, pasta, italian, dessert
    ):
        client = client_for(editor)
        response = client.delete(f"{CATEGORIES}{italian.pk}/")
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["success"] is False
        response = client.delete(f"{CATEGORIES}{dessert.pk}/")
        assert response.status_code == status.HTTP_200_OK

    def test_rename(self, client_for, editor, italian):
        response = client_for(editor).patch(
            f"{CATEGORIES}{italian.pk}/", {"name": "Italiano"}, format="json"
        )
        assert response.data["data"]["name"] == "Italiano"
        assert response.data["data"]["slug"] == "italian"


class TestIngredients:
    @pytest.fixture
    def pantry(self, db):
        Ingredient.objects.bulk_create(
            Ingredient(name=name, default_unit="g")
            for name in (
                "Sugar",
                "Brown sugar",
                "Salt",
                "Semolina",
                "Sunflower oil",
            )
        )

    def test_list_is_paginated_and_searchable(self, api_client, pantry):
        response = api_client.get(INGREDIENTS, {"search": "sugar"})
        page = response.data["data"]
        assert page["per_page"] == 20
        assert [i["name"] for i in page["items"]] == ["Brown sugar", "Sugar"]

    def test_quick_search(self, api_client, pantry):
        response = api_client.get(f"{INGREDIENTS}search/", {"q": "su"})
        names = [i["name"] for i in response.data["data"]]
        assert names == ["Brown sugar", "Sugar", "Sunflower oil"]

    def test_quick_search_needs_two_characters(self, api_client, pantry):
        response = api_client.get(f"{INGREDIENTS}search/", {"q": "s"})
        assert response.data["data"] == []

    def test_staff_creates_and_updates(self, client_for, editor):
        client = client_for(editor)
        response = client.post(
            INGREDIENTS,
            {"name": "Basil", "default_unit": "leaves"},
            format="json",
        )
        assert response.status_code == status.HTTP_201_CREATED
        pk = response.data["data"]["id"]

        response = client.put(
            f"{INGREDIENTS}{pk}/",
            {"name": "Fresh basil", "default_unit": "bunch"},
            format="json",
        )
        assert response.data["data"] == {
            "id": pk,
            "name": "Fresh basil",
            "default_unit": "bunch",
        }

    def test_duplicate_name(self, client_for, editor, flour):
        response = client_for(editor).post(
            INGREDIENTS, {"name": "FLOUR"}, format="json"
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "name" in response.data["errors"]

    def test_referenced_ingredient_delete_conflicts(
        self, client_for, editor, pasta, flour
    ):
        response = client_for(editor).delete(f"{INGREDIENTS}{flour.pk}/")
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Ingredient.objects.filter(pk=flour.pk).exists()
