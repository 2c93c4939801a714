import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.environ.get("ACCOUNT_SERVICE_CONFIG", os.path.join(ROOT_PATH, "env.yaml"))

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./account.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Tokens
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    SESSION_TOKEN_TTL_SECONDS = int(data.get("SESSION_TOKEN_TTL_SECONDS", 3 * 60 * 60))
    RESET_TOKEN_TTL_SECONDS = int(data.get("RESET_TOKEN_TTL_SECONDS", 15 * 60))
    EMAIL_RESET_TOKEN_TTL_SECONDS = int(data.get("EMAIL_RESET_TOKEN_TTL_SECONDS", 10 * 60))

    # CSRF
    CSRF_SECRET = data.get("CSRF_SECRET", "dev-csrf-secret-change-in-production")
    CSRF_TOKEN_MAX_AGE_SECONDS = int(data.get("CSRF_TOKEN_MAX_AGE_SECONDS", 60 * 60))
    CSRF_PROTECTION_ENABLED = bool(data.get("CSRF_PROTECTION_ENABLED", True))
    COOKIE_SECURE = bool(data.get("COOKIE_SECURE", False))

    # Abuse mitigation
    SIGNUP_DELAY_SECONDS = float(data.get("SIGNUP_DELAY_SECONDS", 1.0))
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))
    SECURITY_LOG_MAX_ENTRIES = int(data.get("SECURITY_LOG_MAX_ENTRIES", 1000))
    RATE_LIMIT_CLEANUP_INTERVAL_SECONDS = int(data.get("RATE_LIMIT_CLEANUP_INTERVAL_SECONDS", 60 * 60))

    # Response headers
    ENABLE_SECURITY_HEADERS = bool(data.get("ENABLE_SECURITY_HEADERS", True))
    HSTS_ENABLED = bool(data.get("HSTS_ENABLED", False))
