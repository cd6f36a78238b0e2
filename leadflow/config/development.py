from .base import BaseConfig


class DevelopmentConfig(BaseConfig):
    """
    Development configuration.
    """

    DEBUG = True
    ENVIRONMENT = "development"

    SECRET_KEY = BaseConfig.SECRET_KEY or "dev-secret-key"

    CREATE_TABLES_ON_START = True
    LOG_LEVEL = "DEBUG"
