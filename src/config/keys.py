import os

SECRET_KEY = os.environ.get("SECRET_KEY", "development")

DB_NAME = os.environ.get("DB_NAME", "cryptofolio")
DB_HOST = os.environ.get("DB_HOST", "")
DB_PORT = os.environ.get("DB_PORT", "5432")
DB_USER = os.environ.get("DB_USER", "")
DB_PASS = os.environ.get("DB_PASS", "")

REDIS_URL = os.environ.get("REDIS_URL", "")

SENTRY_DSN = os.environ.get("SENTRY_DSN", "")
