import os

from .base import BaseConfig, ConfigurationError
from .development import DevelopmentConfig
from .production import ProductionConfig
from .testing import TestingConfig


def get_config(env=None):
    """
    Resolve and return the correct configuration class
    based on the APP_ENV environment variable.

    Supported values:
    - development
    - production
    - testing
    """

    if env is None:
        env = os.getenv("APP_ENV", "development")
    env = env.lower()

    if env == "development":
        return DevelopmentConfig

    if env == "testing":
        return TestingConfig

    if env == "production":
        if not ProductionConfig.SECRET_KEY:
            raise ConfigurationError("SECRET_KEY is required in production")
        if not ProductionConfig.SQLALCHEMY_DATABASE_URI:
            raise ConfigurationError("DATABASE_URL is required in production")
        return ProductionConfig

    raise ConfigurationError(f"Invalid APP_ENV value: {env}")


__all__ = [
    "BaseConfig",
    "ConfigurationError",
    "DevelopmentConfig",
    "ProductionConfig",
    "TestingConfig",
    "get_config",
]
