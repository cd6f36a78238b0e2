import logging

from leadflow.extensions import db
from leadflow.models import Lead

from .automation_states import LogStatus
from .models import AutomationLog

audit_logger = logging.getLogger("audit")


def _entry(definition, lead, status, error_message=None, metadata=None):
    entry = AutomationLog(
        automation_id=definition.id,
        lead_id=lead.id,
        action_type=definition.action_type,
        action_value=definition.action_config,
        status=status,
        error_message=error_message,
        details=metadata,
    )
    db.session.add(entry)

    audit_logger.info(
        f"automation.{status}",
        extra={
            "automation_id": definition.id,
            "lead_id": lead.id,
            "action_type": definition.action_type,
            "error_message": error_message,
        },
    )
    return entry


def log_success(definition, lead, result, metadata=None):
    """Record a successful execution. Committed by the caller."""
    details = {"result": result}
    if metadata:
        details.update(metadata)
    return _entry(definition, lead, LogStatus.SUCCESS.value, metadata=details)


def log_failure(definition, lead, error_message, metadata=None):
    """Record a failed execution. Committed by the caller."""
    return _entry(definition, lead, LogStatus.FAILED.value, error_message=error_message, metadata=metadata)


def history(automation_id, lead_id):
    return (
        AutomationLog.query.filter_by(automation_id=automation_id, lead_id=lead_id)
        .order_by(AutomationLog.created_at.asc(), AutomationLog.id.asc())
        .all()
    )


def recent(business_id, limit=50):
    return (
        AutomationLog.query.join(Lead, AutomationLog.lead_id == Lead.id)
        .filter(Lead.business_id == business_id)
        .order_by(AutomationLog.created_at.desc(), AutomationLog.id.desc())
        .limit(limit)
        .all()
    )
