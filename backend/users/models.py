from django.contrib.auth.models import AbstractUser
from django.core.validators import EmailValidator
from django.db import models
from django.db.models.functions import Lower

from users.constants import (
    AVATAR_URL_MAX_LEN,
    BIO_MAX_LEN,
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    USERNAME_MAX_LEN,
)
from users.validators import USERNAME_VALIDATORS


class User(AbstractUser):
    username = models.CharField(
        "Имя пользователя",
        max_length=USERNAME_MAX_LEN,
        unique=True,
        help_text=(
            "Обязательное поле. До 50 символов. "
            "Только буквы, цифры и @/./+/-/_."
        ),
        validators=USERNAME_VALIDATORS,
        error_messages={
            "unique": "Пользователь с таким username уже существует.",
        },
    )
    email = models.EmailField(
        "Email",
        max_length=EMAIL_MAX_LEN,
        blank=False,
        null=False,
        validators=[EmailValidator()],
        db_index=True,
    )
    name = models.CharField("Отображаемое имя", max_length=NAME_MAX_LEN)
    bio = models.TextField("О себе", max_length=BIO_MAX_LEN, blank=True)
    avatar_url = models.URLField(
        "Ссылка на аватар",
        max_length=AVATAR_URL_MAX_LEN,
        blank=True,
    )

    REQUIRED_FIELDS = ["email", "name"]

    class Meta:
        verbose_name = "Пользователь"
        verbose_name_plural = "Пользователи"
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                Lower("email"),
                name="user_email_ci_unique",
                violation_error_message=(
                    "Пользователь с таким email уже существует."
                ),
            ),
        ]

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        return super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.username or self.email
