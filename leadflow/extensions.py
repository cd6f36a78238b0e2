"""
Flask extensions initialization module.
Handles initialization of the database, migrations and the optional Redis client.
"""

import logging
import sqlite3

import redis
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
redis_client = None

logger = logging.getLogger(__name__)


@event.listens_for(Engine, "connect")
def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores ON DELETE CASCADE unless foreign keys are enabled per connection."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_extensions(app):
    """Initialize all Flask extensions."""

    init_redis(app)

    db.init_app(app)
    logger.info("SQLAlchemy initialized")

    migrate.init_app(app, db)
    logger.info("Flask-Migrate initialized")

    if app.config.get("CREATE_TABLES_ON_START", False):
        create_tables(app)

    logger.info("All extensions initialized successfully")
    return app


def init_redis(app):
    """Initialize Redis connection used to serialize runner passes."""
    global redis_client

    if not app.config.get("REDIS_ENABLED", True):
        logger.info("Redis disabled by configuration")
        redis_client = None
        return

    try:
        redis_url = app.config.get("REDIS_URL", "redis://localhost:6379/0")
        redis_client = redis.from_url(
            redis_url,
            decode_responses=True,
            socket_timeout=5,
            socket_connect_timeout=5,
            retry_on_timeout=True,
            health_check_interval=30,
        )
        redis_client.ping()
        logger.info("Redis initialized successfully")

    except redis.ConnectionError as e:
        logger.error(f"Failed to connect to Redis: {e}")
        if app.config.get("ENVIRONMENT") == "production":
            raise
        logger.warning("Runner passes will not be serialized without Redis")
        redis_client = None


def create_tables(app):
    """Create database tables for all registered models."""
    with app.app_context():
        # Registers the models on db.metadata
        from leadflow import models  # noqa: F401
        from leadflow.automation import models as automation_models  # noqa: F401

        db.create_all()
        logger.info("Database tables created/verified")


def get_redis_client():
    """Get Redis client instance with health check."""
    if redis_client:
        try:
            redis_client.ping()
            return redis_client
        except redis.RedisError:
            logger.warning("Redis connection lost")
            return None
    return None


__all__ = ["db", "migrate", "redis_client", "init_extensions", "get_redis_client"]
