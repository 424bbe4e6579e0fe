import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-key-change-me")
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", "postgresql://localhost:5432/collectdesk"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "connect_args": {"connect_timeout": 5},
    }

    # Collector session tokens are signed with their own secret, never SECRET_KEY
    COLLECTOR_TOKEN_SECRET = os.environ.get("COLLECTOR_TOKEN_SECRET", "dev-collector-token-secret")
    COLLECTOR_TOKEN_TTL_HOURS = int(os.environ.get("COLLECTOR_TOKEN_TTL_HOURS", "24"))

    # Admin bearer tokens (seconds)
    ADMIN_TOKEN_MAX_AGE = int(os.environ.get("ADMIN_TOKEN_MAX_AGE", str(12 * 60 * 60)))

    COLLECTOR_MIN_PASSWORD_LENGTH = 4

    # Flask-Cors
    CORS_ORIGINS = os.environ.get("CORS_ALLOW_ORIGIN", "*")
    CORS_SEND_WILDCARD = True
    CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    COLLECTOR_TOKEN_SECRET = "test-collector-token-secret"
