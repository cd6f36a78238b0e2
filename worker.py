"""
Celery entry point.

    celery -A worker.celery worker --beat --loglevel=info
"""

import os
from dotenv import load_dotenv

load_dotenv()

from leadflow import create_app
from leadflow.workers.celery_app import celery, init_celery
from leadflow.workers import automation_tasks  # noqa: F401

app = create_app(os.getenv("APP_ENV", "production"))
init_celery(app)
