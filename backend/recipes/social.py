"""Комментарии, оценки, избранное и фото рецепта."""
import logging
from typing import Optional

from django.db import DatabaseError, IntegrityError, transaction

from recipes import guards
from recipes.constants import COMMENT_MAX_LEN, RATING_MAX, RATING_MIN
from recipes.exceptions import Conflict, InternalFailure, ValidationFailed
from recipes.models import Comment, Favorite, Photo, Rating, Recipe

logger = logging.getLogger(__name__)


def _clean_content(content: Optional[str]) -> str:
    content = (content or "").strip()
    if not content:
        raise ValidationFailed({"content": ["Комментарий не может быть пустым."]})
    if len(content) > COMMENT_MAX_LEN:
        raise ValidationFailed(
            {"content": [f"Не более {COMMENT_MAX_LEN} символов."]}
        )
    return content


def _clean_rating(value) -> int:
    if (
        isinstance(value, bool)
        or not isinstance(value, int)
        or not RATING_MIN <= value <= RATING_MAX
    ):
        raise ValidationFailed(
            {"rating": [f"Оценка от {RATING_MIN} до {RATING_MAX}."]}
        )
    return value


def add_comment(recipe: Recipe, actor, content: str) -> Comment:
    guards.ensure_can_interact(recipe, actor)
    content = _clean_content(content)
    comment = Comment.objects.create(
        recipe=recipe, author=actor, content=content
    )
    logger.info("Comment %s added to %s", comment.pk, recipe.slug)
    return comment


def update_comment(comment: Comment, actor, content: str) -> Comment:
    guards.ensure_is_author(comment, actor)
    comment.content = _clean_content(content)
    comment.save(update_fields=["content", "updated_at"])
    return comment


def delete_comment(comment: Comment, actor) -> None:
    guards.ensure_can_delete_comment(comment, actor)
    comment_id = comment.pk
    comment.delete()
    logger.info("Comment %s deleted by user %s", comment_id, actor.pk)


def add_rating(recipe: Recipe, actor, value: int) -> Rating:
    """Повторная оценка отсекается уникальным ограничением базы,
    а не предварительной проверкой: две параллельные вставки не пройдут."""
    guards.ensure_can_interact(recipe, actor)
    value = _clean_rating(value)
    try:
        with transaction.atomic():
            rating = Rating.objects.create(
                recipe=recipe, author=actor, value=value
            )
    except IntegrityError as exc:
        raise Conflict("Вы уже оценили этот рецепт.") from exc
    logger.info("Recipe %s rated %s by user %s", recipe.slug, value, actor.pk)
    return rating


def update_rating(rating: Rating, actor, value: int) -> Rating:
    guards.ensure_is_author(rating, actor)
    rating.value = _clean_rating(value)
    rating.save(update_fields=["value", "updated_at"])
    return rating


def delete_rating(rating: Rating, actor) -> None:
    guards.ensure_is_author(rating, actor)
    rating.delete()


def get_user_rating(recipe: Recipe, actor) -> Optional[Rating]:
    guards.ensure_can_interact(recipe, actor)
    return Rating.objects.filter(recipe=recipe, author=actor).first()


def toggle_favorite(recipe: Recipe, actor) -> bool:
    """Переключает избранное и возвращает итоговое состояние."""
    guards.ensure_can_interact(recipe, actor)
    deleted, _ = Favorite.objects.filter(user=actor, recipe=recipe).delete()
    if deleted:
        return False
    try:
        with transaction.atomic():
            Favorite.objects.create(user=actor, recipe=recipe)
    except IntegrityError:
        # Параллельный запрос уже добавил рецепт в избранное.
        logger.debug("Favorite %s/%s already exists", actor.pk, recipe.pk)
    return True


def is_favorite(recipe: Recipe, actor) -> bool:
    if not guards.is_authenticated(actor):
        return False
    return Favorite.objects.filter(user=actor, recipe=recipe).exists()


def add_photo(recipe: Recipe, actor, image, is_cover: bool = False) -> Photo:
    guards.ensure_can_modify_recipe(recipe, actor)
    try:
        with transaction.atomic():
            if is_cover:
                Photo.objects.filter(recipe=recipe, is_cover=True).update(
                    is_cover=False
                )
            photo = Photo.objects.create(
                recipe=recipe,
                author=actor,
                image=image,
                is_cover=is_cover,
            )
    except DatabaseError as exc:
        logger.exception("Photo for %s was not saved", recipe.slug)
        raise InternalFailure("Не удалось сохранить фото.") from exc
    return photo


def set_cover_photo(photo: Photo, actor) -> Photo:
    guards.ensure_can_modify_recipe(photo.recipe, actor)
    with transaction.atomic():
        Photo.objects.filter(recipe_id=photo.recipe_id, is_cover=True).exclude(
            pk=photo.pk
        ).update(is_cover=False)
        if not photo.is_cover:
            photo.is_cover = True
            photo.save(update_fields=["is_cover"])
    return photo


def delete_photo(photo: Photo, actor) -> None:
    guards.ensure_can_modify_recipe(photo.recipe, actor)
    image = photo.image
    with transaction.atomic():
        photo.delete()
        transaction.on_commit(lambda: image.delete(save=False))
