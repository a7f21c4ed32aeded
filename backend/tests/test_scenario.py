"""Регистрация, создание рецепта и его появление в ленте."""
import pytest
from rest_framework import status
from rest_framework.test import APIClient

pytestmark = pytest.mark.django_db


def test_registered_chef_publishes_pasta(api_client):
    response = api_client.post(
        "/api/v1/auth/register/",
        {
            "name": "Chef One",
            "username": "chef1",
            "email": "chef1@example.com",
            "password": "Pasta-lover-42",
            "password_confirmation": "Pasta-lover-42",
        },
        format="json",
    )
    assert response.status_code == status.HTTP_201_CREATED
    token = response.data["data"]["token"]

    chef = APIClient()
    chef.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    response = chef.post(
        "/api/v1/recipes/",
        {
            "title": "Pasta",
            "difficulty": "easy",
            "prep_minutes": 5,
            "cook_minutes": 12,
            "is_public": True,
            "steps": [
                {"step_number": 1, "instruction": "Boil water"},
                {"step_number": 2, "instruction": "Add pasta"},
            ],
        },
        format="json",
    )
    assert response.status_code == status.HTTP_201_CREATED

    listing = APIClient().get("/api/v1/recipes/")
    items = listing.data["data"]["items"]
    assert [item["title"] for item in items] == ["Pasta"]
    pasta = items[0]
    assert pasta["total_time"] == 17
    assert pasta["average_rating"] == 0
    assert pasta["author"]["username"] == "chef1"
    assert pasta["is_favorite"] is False
