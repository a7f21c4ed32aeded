import threading
import time

import pytest
from django.core.files.base import ContentFile
from django.db import OperationalError, connection

from recipes import social
from recipes.exceptions import (
    Conflict,
    NotFound,
    Unauthenticated,
    Unauthorized,
    ValidationFailed,
)
from recipes.models import Favorite, Photo, Rating

pytestmark = pytest.mark.django_db


def image(name="photo.png"):
    return ContentFile(b"png", name=name)


class TestRatings:
    def test_second_rating_by_same_user_conflicts(self, pasta, guest):
        social.add_rating(pasta, guest, 4)
        with pytest.raises(Conflict):
            social.add_rating(pasta, guest, 5)
        assert Rating.objects.filter(recipe=pasta, author=guest).count() == 1
        assert Rating.objects.get().value == 4

    @pytest.mark.parametrize("value", [0, 6, -1, "5", True, None])
    def test_out_of_range_rating_is_rejected(self, pasta, guest, value):
        with pytest.raises(ValidationFailed) as exc_info:
            social.add_rating(pasta, guest, value)
        assert "rating" in exc_info.value.errors
        assert not Rating.objects.exists()

    def test_private_recipe_cannot_be_rated_by_others(
        self, chef, guest, make_recipe
    ):
        secret = make_recipe(chef, "Secret", is_public=False)
        with pytest.raises(NotFound):
            social.add_rating(secret, guest, 5)
        with pytest.raises(Unauthenticated):
            social.add_rating(secret, None, 5)

    def test_update_and_delete_by_author_only(self, pasta, chef, guest):
        rating = social.add_rating(pasta, guest, 3)
        with pytest.raises(Unauthorized):
            social.update_rating(rating, chef, 1)
        social.update_rating(rating, guest, 5)
        rating.refresh_from_db()
        assert rating.value == 5
        with pytest.raises(Unauthorized):
            social.delete_rating(rating, chef)
        social.delete_rating(rating, guest)
        assert not Rating.objects.exists()

    def test_user_rating_lookup(self, pasta, guest, chef):
        assert social.get_user_rating(pasta, guest) is None
        rating = social.add_rating(pasta, guest, 2)
        assert social.get_user_rating(pasta, guest) == rating
        assert social.get_user_rating(pasta, chef) is None


def rate_when_unlocked(recipe, user, value):
    # SQLite в общей памяти не ждет блокировку, а сразу отказывает.
    for _ in range(200):
        try:
            return social.add_rating(recipe, user, value)
        except OperationalError:
            time.sleep(0.01)
    raise AssertionError("База так и осталась заблокированной.")


@pytest.mark.django_db(transaction=True)
def test_concurrent_ratings_by_same_user_leave_one_row(pasta, guest):
    barrier = threading.Barrier(2)
    outcomes = []

    def rate(value):
        barrier.wait()
        try:
            outcomes.append(rate_when_unlocked(pasta, guest, value))
        except Conflict as exc:
            outcomes.append(exc)
        finally:
            connection.close()

    threads = [
        threading.Thread(target=rate, args=(value,)) for value in (4, 5)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(type(outcome).__name__ for outcome in outcomes) == [
        "Conflict",
        "Rating",
    ]
    assert Rating.objects.filter(recipe=pasta, author=guest).count() == 1


class TestComments:
    def test_content_is_stripped(self, pasta, guest):
        comment = social.add_comment(pasta, guest, "  Отлично!  ")
        assert comment.content == "Отлично!"

    @pytest.mark.parametrize("content", ["", "   ", "x" * 1001, None])
    def test_invalid_content_is_rejected(self, pasta, guest, content):
        with pytest.raises(ValidationFailed):
            social.add_comment(pasta, guest, content)

    def test_update_by_author_only(self, pasta, chef, guest):
        comment = social.add_comment(pasta, guest, "Hello")
        with pytest.raises(Unauthorized):
            social.update_comment(comment, chef, "Edited")
        social.update_comment(comment, guest, "Edited")
        comment.refresh_from_db()
        assert comment.content == "Edited"

    def test_recipe_author_may_delete_foreign_comment(
        self, pasta, chef, guest, make_user
    ):
        comment = social.add_comment(pasta, guest, "Spam")
        with pytest.raises(Unauthorized):
            social.delete_comment(comment, make_user("stranger"))
        social.delete_comment(comment, chef)
        assert not pasta.comments.exists()


class TestFavorites:
    def test_toggle_parity(self, pasta, guest):
        states = [social.toggle_favorite(pasta, guest) for _ in range(3)]
        assert states == [True, False, True]
        assert Favorite.objects.filter(user=guest, recipe=pasta).count() == 1
        assert social.is_favorite(pasta, guest)
        assert not social.is_favorite(pasta, None)

    def test_anonymous_cannot_toggle(self, pasta):
        with pytest.raises(Unauthenticated):
            social.toggle_favorite(pasta, None)


class TestPhotos:
    def test_single_cover_per_recipe(self, pasta, chef):
        first = social.add_photo(pasta, chef, image("a.png"), is_cover=True)
        second = social.add_photo(pasta, chef, image("b.png"), is_cover=True)
        first.refresh_from_db()
        assert not first.is_cover
        assert second.is_cover

        social.set_cover_photo(first, chef)
        covers = Photo.objects.filter(recipe=pasta, is_cover=True)
        assert list(covers) == [first]

    def test_only_recipe_author_manages_photos(self, pasta, chef, guest):
        with pytest.raises(Unauthorized):
            social.add_photo(pasta, guest, image())
        photo = social.add_photo(pasta, chef, image())
        with pytest.raises(Unauthorized):
            social.set_cover_photo(photo, guest)
        with pytest.raises(Unauthorized):
            social.delete_photo(photo, guest)

    def test_delete_photo_removes_file_after_commit(
        self, pasta, chef, django_capture_on_commit_callbacks
    ):
        photo = social.add_photo(pasta, chef, image())
        storage, name = photo.image.storage, photo.image.name
        with django_capture_on_commit_callbacks(execute=True):
            social.delete_photo(photo, chef)
        assert not Photo.objects.exists()
        assert not storage.exists(name)
