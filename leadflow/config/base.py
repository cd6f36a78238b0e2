import os


class ConfigurationError(Exception):
    """
    Raised when an invalid or unsupported configuration is requested.
    """
    pass


class BaseConfig:
    """
    Base configuration shared by all environments.
    """

    # Flask
    DEBUG = False
    TESTING = False
    SECRET_KEY = os.getenv("SECRET_KEY")
    ENVIRONMENT = "base"

    # Application
    APP_NAME = os.getenv("APP_NAME", "Leadflow CRM")

    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///leadflow.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {}
    CREATE_TABLES_ON_START = os.getenv("CREATE_TABLES_ON_START", "False").lower() == "true"

    # Redis / Celery
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    REDIS_ENABLED = os.getenv("REDIS_ENABLED", "True").lower() == "true"
    CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", REDIS_URL)
    CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", REDIS_URL)

    # Automation engine
    AUTOMATION_BATCH_SIZE = int(os.getenv("AUTOMATION_BATCH_SIZE", "100"))
    AUTOMATION_MAX_ATTEMPTS = int(os.getenv("AUTOMATION_MAX_ATTEMPTS", "1"))
    AUTOMATION_RETRY_BASE_DELAY = float(os.getenv("AUTOMATION_RETRY_BASE_DELAY", "2"))
    AUTOMATION_RUN_TOKEN = os.getenv("AUTOMATION_RUN_TOKEN")
    AUTOMATION_LOCK_TTL = int(os.getenv("AUTOMATION_LOCK_TTL", "300"))

    # WhatsApp transport
    WHATSAPP_API_KEY = os.getenv("WHATSAPP_API_KEY", "")
    WHATSAPP_BASE_URL = os.getenv("WHATSAPP_BASE_URL", "https://graph.facebook.com/v18.0")
    WHATSAPP_PHONE_NUMBER_ID = os.getenv("WHATSAPP_PHONE_NUMBER_ID", "")
    WHATSAPP_TIMEOUT_SECONDS = float(os.getenv("WHATSAPP_TIMEOUT_SECONDS", "10"))

    # Monitoring & logging
    METRICS_ENABLED = os.getenv("METRICS_ENABLED", "False").lower() == "true"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_REQUESTS = os.getenv("LOG_REQUESTS", "False").lower() == "true"
