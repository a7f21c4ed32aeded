import pytest
from rest_framework import status

from recipes import social
from recipes.models import Comment, Photo, Rating

pytestmark = pytest.mark.django_db

RECIPE_URL = "/api/v1/recipes/pasta/"


class TestComments:
    def test_add_and_list_newest_first(
        self, client_for, api_client, guest, pasta
    ):
        client = client_for(guest)
        for text in ("First", "Second"):
            response = client.post(
                f"{RECIPE_URL}comments/", {"content": text}, format="json"
            )
            assert response.status_code == status.HTTP_201_CREATED

        response = api_client.get(f"{RECIPE_URL}comments/")
        page = response.data["data"]
        assert page["total"] == 2
        assert page["per_page"] == 10
        assert [c["content"] for c in page["items"]] == ["Second", "First"]
        assert page["items"][0]["author"]["username"] == "guest"

    def test_blank_comment_is_rejected(self, client_for, guest, pasta):
        response = client_for(guest).post(
            f"{RECIPE_URL}comments/", {"content": "   "}, format="json"
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "content" in response.data["errors"]

    def test_anonymous_cannot_comment(self, api_client, pasta):
        response = api_client.post(
            f"{RECIPE_URL}comments/", {"content": "Hi"}, format="json"
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert not Comment.objects.exists()

    def test_comments_of_private_recipe_are_hidden(
        self, client_for, chef, guest, make_recipe
    ):
        make_recipe(chef, "Secret", is_public=False)
        response = client_for(guest).get("/api/v1/recipes/secret/comments/")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_edit_and_delete(self, client_for, chef, guest, pasta):
        comment = social.add_comment(pasta, guest, "Typo")
        url = f"/api/v1/comments/{comment.pk}/"

        response = client_for(chef).patch(
            url, {"content": "Hack"}, format="json"
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

        response = client_for(guest).patch(
            url, {"content": "Fixed"}, format="json"
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data["data"]["content"] == "Fixed"

        response = client_for(chef).delete(url)
        assert response.status_code == status.HTTP_200_OK
        assert not Comment.objects.exists()

    def test_missing_comment(self, client_for, guest, db):
        response = client_for(guest).delete("/api/v1/comments/999/")
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestRatings:
    def test_rate_once(self, client_for, guest, pasta):
        client = client_for(guest)
        response = client.post(
            f"{RECIPE_URL}ratings/", {"rating": 4}, format="json"
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["data"]["rating"]["rating"] == 4
        assert response.data["data"]["average_rating"] == 4.0
        assert response.data["data"]["ratings_count"] == 1

        response = client.post(
            f"{RECIPE_URL}ratings/", {"rating": 5}, format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["success"] is False
        assert Rating.objects.count() == 1

    @pytest.mark.parametrize("value", [0, 6, "abc"])
    def test_out_of_range(self, client_for, guest, pasta, value):
        response = client_for(guest).post(
            f"{RECIPE_URL}ratings/", {"rating": value}, format="json"
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "rating" in response.data["errors"]

    def test_my_rating(self, client_for, guest, pasta):
        client = client_for(guest)
        response = client.get(f"{RECIPE_URL}my-rating/")
        assert response.data["data"] == {"rating": None}

        social.add_rating(pasta, guest, 3)
        response = client.get(f"{RECIPE_URL}my-rating/")
        assert response.data["data"]["rating"]["rating"] == 3

    def test_listing_and_update(self, client_for, api_client, guest, pasta):
        rating = social.add_rating(pasta, guest, 2)
        response = api_client.get(f"{RECIPE_URL}ratings/")
        assert response.data["data"]["total"] == 1

        response = client_for(guest).put(
            f"/api/v1/ratings/{rating.pk}/", {"rating": 5}, format="json"
        )
        assert response.status_code == status.HTTP_200_OK
        detail = api_client.get(RECIPE_URL).data["data"]
        assert detail["average_rating"] == 5.0

    def test_delete_by_author_only(self, client_for, chef, guest, pasta):
        rating = social.add_rating(pasta, guest, 2)
        url = f"/api/v1/ratings/{rating.pk}/"
        assert client_for(chef).delete(url).status_code == 403
        assert client_for(guest).delete(url).status_code == 200
        assert not Rating.objects.exists()


class TestPhotos:
    def test_upload_and_cover(self, client_for, chef, pasta, png_image):
        client = client_for(chef)
        first = client.post(
            f"{RECIPE_URL}photos/",
            {"image": png_image, "is_cover": True},
            format="json",
        )
        assert first.status_code == status.HTTP_201_CREATED
        assert first.data["data"]["is_cover"] is True
        assert first.data["data"]["url"].startswith("http://testserver/media/")

        second = client.post(
            f"{RECIPE_URL}photos/", {"image": png_image}, format="json"
        )
        second_id = second.data["data"]["id"]
        response = client.post(f"/api/v1/photos/{second_id}/cover/")
        assert response.status_code == status.HTTP_200_OK
        assert list(
            Photo.objects.filter(is_cover=True).values_list("id", flat=True)
        ) == [second_id]

        listing = client.get("/api/v1/recipes/")
        cover = listing.data["data"]["items"][0]["cover_photo"]
        assert cover["id"] == second_id

    def test_invalid_image(self, client_for, chef, pasta):
        response = client_for(chef).post(
            f"{RECIPE_URL}photos/", {"image": "not-an-image"}, format="json"
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "image" in response.data["errors"]

    def test_stranger_cannot_upload_or_delete(
        self, client_for, chef, guest, pasta, png_image
    ):
        response = client_for(guest).post(
            f"{RECIPE_URL}photos/", {"image": png_image}, format="json"
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

        photo = client_for(chef).post(
            f"{RECIPE_URL}photos/", {"image": png_image}, format="json"
        )
        url = f"/api/v1/photos/{photo.data['data']['id']}/"
        assert client_for(guest).delete(url).status_code == 403
        assert client_for(chef).delete(url).status_code == 200
        assert not Photo.objects.exists()
