import hmac
from functools import wraps

from flask import Blueprint, abort, current_app, jsonify, request

from leadflow.automation import outcome_log
from leadflow.automation.executor import run_pending_batch
from leadflow.automation.models import AutomationJob
from leadflow.errors import NotFoundError, ValidationError
from leadflow.extensions import db

bp = Blueprint("automation", __name__, url_prefix="/api/v1/automation")

DEFAULT_LOG_LIMIT = 50
MAX_LOG_LIMIT = 200


def require_run_token(fn):
    """Guard operator endpoints with the X-Automation-Token header."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        expected = current_app.config.get("AUTOMATION_RUN_TOKEN")
        if not expected:
            abort(403, description="Automation endpoints are disabled")

        provided = request.headers.get("X-Automation-Token", "")
        if not hmac.compare_digest(provided.encode(), expected.encode()):
            abort(401, description="Invalid automation token")

        return fn(*args, **kwargs)

    return wrapper


def _int_arg(name):
    value = request.args.get(name)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


@bp.route("/run", methods=["POST"])
@require_run_token
def run():
    result = run_pending_batch()
    return jsonify(result.to_dict()), 200


@bp.route("/jobs/<int:job_id>", methods=["GET"])
@require_run_token
def get_job(job_id):
    job = db.session.get(AutomationJob, job_id)
    if job is None:
        raise NotFoundError(f"Job {job_id} not found")
    return jsonify(job.to_dict()), 200


@bp.route("/logs", methods=["GET"])
@require_run_token
def list_logs():
    automation_id = _int_arg("automation_id")
    lead_id = _int_arg("lead_id")
    business_id = _int_arg("business_id")

    if automation_id is not None and lead_id is not None:
        entries = outcome_log.history(automation_id, lead_id)
    elif business_id is not None:
        limit = _int_arg("limit")
        if limit is None:
            limit = DEFAULT_LOG_LIMIT
        elif not 1 <= limit <= MAX_LOG_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_LOG_LIMIT}")
        entries = outcome_log.recent(business_id, limit=limit)
    else:
        raise ValidationError("automation_id and lead_id, or business_id, are required")

    return jsonify({"logs": [entry.to_dict() for entry in entries]}), 200
