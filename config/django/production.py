from .base import *  # noqa

env.read_env(os.path.join(BASE_DIR, ".env.backend"))


def _flag(value) -> bool:
    # values coming from OpenBao are plain strings
    return str(value).strip().lower() in ("1", "true", "yes", "on")


DEBUG = _flag(env_get("DEBUG", default=False))

SECRET_KEY = env_get("DJANGO_SECRET_KEY")

# no usable default: the ledger transport is a deployment choice
BITXHUB_LEDGER_CLIENT = env_get("BITXHUB_LEDGER_CLIENT")

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=[])

CORS_ALLOW_ALL_ORIGINS = False

USE_X_FORWARDED_HOST = True
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_SSL_REDIRECT = _flag(env_get("SECURE_SSL_REDIRECT", default=True))
SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_CONTENT_TYPE_NOSNIFF = True
