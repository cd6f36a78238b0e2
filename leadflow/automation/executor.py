import logging
from dataclasses import dataclass
from datetime import datetime

from flask import current_app

from leadflow.errors import ActionError, InvalidStateTransition
from leadflow.extensions import db
from leadflow.observability.metrics import get_metrics

from . import outcome_log
from .actions import ActionExecutor
from .automation_states import TERMINAL_STATUSES, JobStatus
from .models import AutomationJob
from .retry_policy import RetryPolicy

logger = logging.getLogger(__name__)

SUCCEEDED = "succeeded"
FAILED = "failed"
SKIPPED = "skipped"


@dataclass
class BatchResult:
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0

    def to_dict(self):
        return {
            "processed": self.processed,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
        }


class JobRunner:
    """
    Executes due automation jobs.

    A job moves pending -> running -> done|failed. Every transition is a
    conditional UPDATE on the current status, so a job is executed by at
    most one runner and never returns to pending.
    """

    def __init__(self, action_executor=None, retry_policy=None, batch_size=None):
        config = current_app.config
        self.action_executor = action_executor or ActionExecutor()
        self.retry_policy = retry_policy or RetryPolicy.from_config(config)
        self.batch_size = batch_size or config.get("AUTOMATION_BATCH_SIZE", 100)
        self.metrics = get_metrics()

    def fetch_due(self, limit=None, now=None):
        now = now or datetime.utcnow()
        return (
            AutomationJob.query.filter(
                AutomationJob.status == JobStatus.PENDING.value,
                AutomationJob.execute_at <= now,
            )
            .order_by(AutomationJob.execute_at.asc(), AutomationJob.id.asc())
            .limit(limit or self.batch_size)
            .all()
        )

    def claim(self, job):
        """Atomically move a pending job to running. True only for the winner."""
        # Status never returns to pending, so a non-pending view is final
        if not job.is_pending:
            return False

        now = datetime.utcnow()
        rows = AutomationJob.query.filter(
            AutomationJob.id == job.id,
            AutomationJob.status == JobStatus.PENDING.value,
        ).update(
            {
                AutomationJob.status: JobStatus.RUNNING.value,
                AutomationJob.started_at: now,
                AutomationJob.updated_at: now,
            },
            synchronize_session=False,
        )
        db.session.commit()
        return rows == 1

    def run(self, job):
        """Claim and execute a job. Returns True when the action succeeded."""
        return self._run(job) == SUCCEEDED

    def run_pending_batch(self, now=None):
        jobs = self.fetch_due(now=now)
        logger.info(f"Found {len(jobs)} pending jobs")

        result = BatchResult()
        for job in jobs:
            outcome = self._run(job)
            result.processed += 1
            setattr(result, outcome, getattr(result, outcome) + 1)

        logger.info(
            f"Success: {result.succeeded}, Failures: {result.failed}",
            extra=result.to_dict(),
        )
        return result

    def _run(self, job):
        job_id = job.id
        if not self.claim(job):
            logger.debug(f"Job {job_id} already claimed", extra={"job_id": job_id})
            return SKIPPED

        return self._execute_claimed(job)

    def _execute_claimed(self, job):
        definition = job.automation
        lead = job.lead
        if definition is None or lead is None:
            return self._fail_orphaned(job, definition)

        action_type = definition.action_type
        attempts = 0

        def operation():
            nonlocal attempts
            attempts += 1
            return self.action_executor.execute(definition, lead)

        try:
            with self.metrics.observe_job(action_type):
                result = self.retry_policy.call(operation)

        except Exception as e:
            # Partial side effects of the action are discarded
            db.session.rollback()
            error_message = str(e) or e.__class__.__name__

            if isinstance(e, ActionError):
                logger.warning(
                    f"Automation job {job.id} failed: {error_message}",
                    extra={"job_id": job.id, "action_type": action_type},
                )
            else:
                logger.exception(
                    f"Automation job {job.id} raised unexpectedly",
                    extra={"job_id": job.id, "action_type": action_type},
                )

            self._transition(
                job,
                JobStatus.FAILED,
                error_message=error_message,
                attempts=attempts,
            )
            outcome_log.log_failure(definition, lead, error_message)
            db.session.commit()

            self.metrics.job_executed(action_type, JobStatus.FAILED.value)
            return FAILED

        self._transition(job, JobStatus.DONE, result=result, attempts=attempts)
        outcome_log.log_success(definition, lead, result)
        db.session.commit()

        self.metrics.job_executed(action_type, JobStatus.DONE.value)
        logger.info(
            f"Automation job {job.id} done",
            extra={"job_id": job.id, "action_type": action_type, "attempts": attempts},
        )
        return SUCCEEDED

    def _fail_orphaned(self, job, definition):
        """Fail a job whose automation or lead row no longer exists."""
        missing = "automation" if definition is None else "lead"
        error_message = f"Job {job.id} references a missing {missing}"
        logger.error(error_message, extra={"job_id": job.id})

        self._transition(job, JobStatus.FAILED, error_message=error_message)
        db.session.commit()

        action_type = definition.action_type if definition is not None else "unknown"
        self.metrics.job_executed(action_type, JobStatus.FAILED.value)
        return FAILED

    def _transition(self, job, status, result=None, error_message=None, attempts=0):
        if status not in TERMINAL_STATUSES:
            raise InvalidStateTransition(f"{status.value} is not a terminal status")

        now = datetime.utcnow()
        values = {
            AutomationJob.status: status.value,
            AutomationJob.attempts: attempts,
            AutomationJob.finished_at: now,
            AutomationJob.updated_at: now,
        }
        if status == JobStatus.DONE:
            values[AutomationJob.result] = result
        else:
            values[AutomationJob.error_message] = error_message

        rows = AutomationJob.query.filter(
            AutomationJob.id == job.id,
            AutomationJob.status == JobStatus.RUNNING.value,
        ).update(values, synchronize_session=False)

        if rows != 1:
            db.session.rollback()
            raise InvalidStateTransition(f"Job {job.id} cannot move to {status.value}: not running")


def run_pending_batch(now=None, **kwargs):
    """Run one pass over due jobs with the default runner."""
    return JobRunner(**kwargs).run_pending_batch(now=now)
