USERNAME_MAX_LEN = 50
NAME_MAX_LEN = 100
BIO_MAX_LEN = 500
EMAIL_MAX_LEN = 255
AVATAR_URL_MAX_LEN = 255

FORBIDDEN_USERNAMES = ("me", "admin", "login", "logout", "register")
