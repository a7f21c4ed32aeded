from rest_framework.authentication import TokenAuthentication


class BearerTokenAuthentication(TokenAuthentication):
    """Тот же токен DRF, но в заголовке ``Authorization: Bearer <key>``."""

    keyword = "Bearer"
