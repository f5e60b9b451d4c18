"""Application settings, read from the environment with development defaults."""
import os

from app.models.store import DEFAULT_DATA_PATH


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
    DATA_PATH = os.getenv("DATA_PATH", str(DEFAULT_DATA_PATH))
    APP_ENV = os.getenv("APP_ENV", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Created on startup when the store holds no admin account
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "Admin123")


class TestConfig(Config):
    TESTING = True
    APP_ENV = "test"
    SECRET_KEY = "test"
    LOG_LEVEL = "WARNING"
