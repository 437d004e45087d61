import os

SECRET_KEY = "test-secret"
JWT_SECRET = "test-jwt-secret-key-0123456789abcdef"
JWT_TTL_MINUTES = 60
COOKIE_SECURE = False

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "farm_hr_test"),
}

CORS_ORIGINS = ["http://localhost:3000"]

OPENAI_API_KEY = None
OPENAI_MODEL = "gpt-4o-mini"
OPENAI_BASE_URL = "https://api.openai.com/v1"
SUMMARY_TIMEOUT_SECONDS = 5

DEBUG = False
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
