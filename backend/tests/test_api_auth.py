import pytest
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient

pytestmark = pytest.mark.django_db

AUTH = "/api/v1/auth/"

REGISTRATION = {
    "name": "Chef One",
    "username": "chef1",
    "email": "Chef1@Example.com",
    "password": "Pasta-lover-42",
    "password_confirmation": "Pasta-lover-42",
}


def bearer(token):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


class TestRegister:
    def test_returns_user_and_token(self, api_client, django_user_model):
        response = api_client.post(
            f"{AUTH}register/", REGISTRATION, format="json"
        )
        assert response.status_code == status.HTTP_201_CREATED
        data = response.data["data"]
        assert data["token_type"] == "Bearer"
        assert data["user"]["email"] == "chef1@example.com"
        assert data["user"]["recipes_count"] == 0
        user = django_user_model.objects.get(username="chef1")
        assert Token.objects.get(user=user).key == data["token"]
        assert user.check_password("Pasta-lover-42")

    def test_password_confirmation_must_match(self, api_client):
        payload = dict(REGISTRATION, password_confirmation="other-pass-42")
        response = api_client.post(f"{AUTH}register/", payload, format="json")
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "password_confirmation" in response.data["errors"]

    def test_email_is_unique_case_insensitively(self, api_client, chef):
        payload = dict(
            REGISTRATION, username="chef2", email="CHEF1@example.com"
        )
        response = api_client.post(f"{AUTH}register/", payload, format="json")
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "email" in response.data["errors"]

    def test_reserved_username(self, api_client):
        payload = dict(REGISTRATION, username="me")
        response = api_client.post(f"{AUTH}register/", payload, format="json")
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "username" in response.data["errors"]


class TestLogin:
    @pytest.mark.parametrize("login", ["chef1", "CHEF1@example.com"])
    def test_by_username_or_email(
        self, api_client, chef, password, login
    ):
        response = api_client.post(
            f"{AUTH}login/",
            {"login": login, "password": password},
            format="json",
        )
        assert response.status_code == status.HTTP_200_OK
        token = response.data["data"]["token"]
        me = bearer(token).get(f"{AUTH}me/")
        assert me.status_code == status.HTTP_200_OK
        assert me.data["data"]["username"] == "chef1"

    def test_wrong_password(self, api_client, chef):
        response = api_client.post(
            f"{AUTH}login/",
            {"login": "chef1", "password": "nope"},
            format="json",
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data["success"] is False

    def test_token_keyword_is_accepted_too(self, chef):
        token = Token.objects.create(user=chef)
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Token {token.key}")
        assert client.get(f"{AUTH}me/").status_code == status.HTTP_200_OK


def test_logout_revokes_token(chef):
    token = Token.objects.create(user=chef)
    client = bearer(token.key)
    assert client.post(f"{AUTH}logout/").status_code == status.HTTP_200_OK
    assert not Token.objects.filter(user=chef).exists()
    response = client.get(f"{AUTH}me/")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_me_requires_authentication(api_client):
    response = api_client.get(f"{AUTH}me/")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_profile_update(client_for, chef, guest):
    client = client_for(chef)
    response = client.patch(
        f"{AUTH}profile/",
        {"bio": "Pasta fan", "avatar_url": "https://example.com/a.png"},
        format="json",
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.data["data"]["bio"] == "Pasta fan"

    response = client.patch(
        f"{AUTH}profile/", {"email": "GUEST@example.com"}, format="json"
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_change_password(client_for, chef, password):
    client = client_for(chef)
    response = client.post(
        f"{AUTH}change-password/",
        {
            "current_password": "wrong",
            "password": "N3w-secret-pass",
            "password_confirmation": "N3w-secret-pass",
        },
        format="json",
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert "current_password" in response.data["errors"]

    response = client.post(
        f"{AUTH}change-password/",
        {
            "current_password": password,
            "password": "N3w-secret-pass",
            "password_confirmation": "N3w-secret-pass",
        },
        format="json",
    )
    assert response.status_code == status.HTTP_200_OK
    chef.refresh_from_db()
    assert chef.check_password("N3w-secret-pass")
