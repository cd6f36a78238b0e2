from .base import BaseConfig


class TestingConfig(BaseConfig):
    """
    Testing configuration. In-memory database, no Redis, no retries.
    """

    TESTING = True
    ENVIRONMENT = "testing"
    SECRET_KEY = "test-secret-key"

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    REDIS_ENABLED = False
    METRICS_ENABLED = False

    AUTOMATION_MAX_ATTEMPTS = 1
    AUTOMATION_RETRY_BASE_DELAY = 0
    AUTOMATION_RUN_TOKEN = "test-run-token"

    WHATSAPP_API_KEY = "test-whatsapp-key"
    WHATSAPP_PHONE_NUMBER_ID = "1234567890"
