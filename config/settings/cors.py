from config.env import env

# resolver endpoints only
CORS_URLS_REGEX = r"^/1\.0/.*$"
CORS_ALLOW_CREDENTIALS = False
CORS_ALLOW_METHODS = ("GET", "OPTIONS")

CORS_ALLOWED_ORIGINS = []
ENV_CORS_ALLOWED_ORIGINS = env.str("CORS_ALLOWED_ORIGINS", default="")
for origin in ENV_CORS_ALLOWED_ORIGINS.split(","):
    if origin.strip():
        CORS_ALLOWED_ORIGINS.append(f"{origin}".strip().lower())
