"""
Flask application factory for the leadflow CRM automation engine.
"""

import sys
from datetime import datetime
from typing import Optional

from flask import Flask, jsonify
from sqlalchemy import text

from leadflow.config import ConfigurationError, get_config
from leadflow.errors import register_error_handlers
from leadflow.extensions import db, get_redis_client, init_extensions
from leadflow.logging_config import setup_logging
from leadflow.observability.metrics import init_metrics


def register_routes(app: Flask) -> None:
    """Register all application blueprints"""
    from leadflow.automation_routes import bp as automation_bp

    app.register_blueprint(automation_bp)

    @app.route("/health", methods=["GET"])
    def health_check():
        health_status = {
            "status": "healthy",
            "timestamp": datetime.utcnow().isoformat(),
            "environment": app.config.get("ENVIRONMENT"),
            "checks": {},
        }

        try:
            db.session.execute(text("SELECT 1"))
            health_status["checks"]["database"] = "healthy"
        except Exception as e:
            health_status["checks"]["database"] = f"unhealthy: {str(e)}"
            health_status["status"] = "degraded"

        if app.config.get("REDIS_ENABLED"):
            health_status["checks"]["redis"] = "healthy" if get_redis_client() else "unavailable"

        return jsonify(health_status), 200 if health_status["status"] == "healthy" else 503

    app.logger.info("All routes registered")


def create_app(config_name: Optional[str] = None) -> Flask:
    """
    Application factory.

    Args:
        config_name: Configuration name (development, production, testing)

    Raises:
        ConfigurationError: If the configuration cannot be resolved
    """
    app = Flask(__name__)

    try:
        config = get_config(config_name)
        app.config.from_object(config)
    except ConfigurationError as e:
        print(f"CRITICAL: Configuration error: {str(e)}", file=sys.stderr)
        raise

    setup_logging(app)
    app.logger.info(f"Starting application initialization in {app.config.get('ENVIRONMENT')} mode...")

    # Registers the models on db.metadata
    from leadflow import models  # noqa: F401
    from leadflow.automation import models as automation_models  # noqa: F401

    init_extensions(app)
    init_metrics(app)
    register_error_handlers(app)
    register_routes(app)

    from leadflow.cli import automation_cli

    app.cli.add_command(automation_cli)

    app.logger.info("Application initialization completed")
    return app
