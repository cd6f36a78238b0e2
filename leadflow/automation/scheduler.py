import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from leadflow.extensions import db
from leadflow.observability.metrics import get_metrics

from .automation_states import JobStatus, TriggerType
from .matcher import match
from .models import AutomationJob

logger = logging.getLogger(__name__)


def schedule(lead, trigger_type, trigger_value=None, now=None):
    """
    Create one pending job per automation matching the event.

    Jobs for a single event are committed together. Repeated events
    schedule repeated jobs.
    """
    if isinstance(trigger_type, TriggerType):
        trigger_type = trigger_type.value

    definitions = match(lead.business_id, trigger_type, trigger_value, lead)
    if not definitions:
        return []

    now = now or datetime.utcnow()
    jobs = []

    try:
        for definition in definitions:
            job = AutomationJob(
                automation_id=definition.id,
                lead_id=lead.id,
                execute_at=now + timedelta(seconds=definition.delay_seconds or 0),
                status=JobStatus.PENDING.value,
                attempts=0,
            )
            db.session.add(job)
            jobs.append(job)

        db.session.commit()

    except SQLAlchemyError:
        db.session.rollback()
        logger.exception(
            "Failed to schedule automation jobs",
            extra={"lead_id": lead.id, "trigger_type": trigger_type},
        )
        raise

    metrics = get_metrics()
    for job in jobs:
        metrics.job_scheduled(trigger_type)
        logger.info(
            f"Scheduled automation job {job.id}",
            extra={
                "job_id": job.id,
                "automation_id": job.automation_id,
                "lead_id": job.lead_id,
                "trigger_type": trigger_type,
                "execute_at": job.execute_at.isoformat(),
            },
        )

    return jobs
