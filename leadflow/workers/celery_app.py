import os

from celery import Celery
from celery.schedules import crontab
from celery.signals import setup_logging

from leadflow.logging_config import configure_logging_for_worker

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

celery = Celery(
    "leadflow",
    broker=os.getenv("CELERY_BROKER_URL", REDIS_URL),
    backend=os.getenv("CELERY_RESULT_BACKEND", REDIS_URL),
    include=["leadflow.workers.automation_tasks"],
)

celery.conf.update(
    # Serialization
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],

    # Timezone
    timezone="UTC",
    enable_utc=True,

    # Reliability settings
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_reject_on_worker_lost=True,

    # Time limits
    task_time_limit=300,
    task_soft_time_limit=240,

    beat_schedule={
        "run-pending-automations-every-minute": {
            "task": "leadflow.run_pending_automations",
            "schedule": crontab(minute="*"),
        },
    },
)


def init_celery(app):
    celery.conf.update(
        broker_url=app.config["CELERY_BROKER_URL"],
        result_backend=app.config["CELERY_RESULT_BACKEND"],
    )

    class ContextTask(celery.Task):
        abstract = True

        def __call__(self, *args, **kwargs):
            with app.app_context():
                return super().__call__(*args, **kwargs)

    celery.Task = ContextTask
    return celery


@setup_logging.connect
def configure_worker_logging(**kwargs):
    configure_logging_for_worker()
