import logging
import traceback

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class DomainError(Exception):
    pass


class ValidationError(DomainError):
    pass


class NotFoundError(DomainError):
    pass


class AutomationError(DomainError):
    pass


class ActionError(AutomationError):
    """An automation action could not be performed. Always terminal for the job."""
    pass


class TransportError(ActionError):
    """The messaging provider was unreachable or rejected the request."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class InvalidStateTransition(AutomationError):
    pass


def register_error_handlers(app):
    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return jsonify({"error": "validation_error", "message": str(e), "status_code": 400}), 400

    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        return jsonify({"error": "not_found", "message": str(e), "status_code": 404}), 404

    @app.errorhandler(DomainError)
    def handle_domain_error(e):
        return jsonify({"error": "conflict", "message": str(e), "status_code": 409}), 409

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        """
        Handles known HTTP errors (404, 401, 403, etc.)
        """
        response = {
            "error": e.name,
            "message": e.description,
            "status_code": e.code,
        }
        return jsonify(response), e.code

    @app.errorhandler(Exception)
    def handle_exception(e):
        """
        Handles all unexpected server errors
        Prevents stack trace leakage in production
        """
        logger.error("Unhandled Exception:")
        logger.error(traceback.format_exc())

        response = {
            "error": "Internal Server Error",
            "message": "Something went wrong. Please try again later.",
            "status_code": 500,
        }
        return jsonify(response), 500
