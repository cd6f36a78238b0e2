from celery.utils.log import get_task_logger
from flask import current_app

from leadflow.automation.executor import run_pending_batch
from leadflow.extensions import get_redis_client
from leadflow.utils.redis_lock import LockNotAcquired, redis_lock

from .celery_app import celery

logger = get_task_logger(__name__)

LOCK_KEY = "leadflow:automation-runner"


@celery.task(name="leadflow.run_pending_automations")
def run_pending_automations():
    """One runner pass, serialized across workers when Redis is available."""
    client = get_redis_client()
    if client is None:
        logger.warning("Redis unavailable, running automation pass without lock")
        return run_pending_batch().to_dict()

    ttl = current_app.config.get("AUTOMATION_LOCK_TTL", 300)
    try:
        with redis_lock(client, LOCK_KEY, ttl=ttl):
            result = run_pending_batch()
    except LockNotAcquired:
        logger.info("Automation pass already in progress, skipping")
        return {"skipped": True}

    return result.to_dict()
