import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _csv(value: str) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # JSON files live next to the app unless DATA_DIR says otherwise
    DATA_DIR = os.getenv("DATA_DIR", BASE_DIR)
    BIRDS_FILE = os.getenv("BIRDS_FILE", "data.json")
    OPERATION_LOG_FILE = os.getenv("OPERATION_LOG_FILE", "operation_log.json")
    RATE_LIMIT_FILE = os.getenv("RATE_LIMIT_FILE", "ip_operations.json")

    # Bundled front-end and uploaded images
    PUBLIC_DIR = os.getenv("PUBLIC_DIR", os.path.join(BASE_DIR, "public"))
    IMAGE_DIR = os.getenv("IMAGE_DIR")  # defaults to <PUBLIC_DIR>/images

    # Upload limits: transport ceiling first, then the per-image rule
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024
    MAX_IMAGE_BYTES = 1024 * 1024

    # Catalog rules
    BIRDS_PAGE_SIZE = 48
    BIRD_NAME_MAX_LENGTH = 10

    # Sliding window limit for create/update/delete, per IP
    OPERATION_RATE_WINDOW_SECONDS = int(os.getenv("OPERATION_RATE_WINDOW_SECONDS", str(24 * 60 * 60)))
    OPERATION_RATE_MAX_REQUESTS = int(os.getenv("OPERATION_RATE_MAX_REQUESTS", "8"))

    # Operation log keeps 30 days
    OPERATION_LOG_RETENTION_DAYS = int(os.getenv("OPERATION_LOG_RETENTION_DAYS", "30"))

    API_CACHE_CONTROL = "public, max-age=3600, stale-while-revalidate=86400"

    # CORS
    CORS_ORIGINS = _csv(os.getenv("CORS_ORIGINS", "http://localhost:3000"))
    CORS_METHODS = "GET,HEAD,PUT,PATCH,POST,DELETE"
    CORS_HEADERS = "Content-Type, Authorization, X-Operation-Desc"

    # Number of reverse proxies whose X-Forwarded-For may be trusted (0 = none)
    TRUSTED_PROXIES = int(os.getenv("TRUSTED_PROXIES", "0"))

    # Logging
    LOG_JSON = os.getenv("LOG_JSON", "false").lower() == "true"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Basic app settings
    PORT = int(os.getenv("PORT", "3000"))
    DEBUG = False
