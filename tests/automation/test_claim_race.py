import pytest

from leadflow import create_app
from leadflow.automation.actions import ActionExecutor
from leadflow.automation.automation_states import JobStatus
from leadflow.automation.executor import JobRunner
from leadflow.automation.models import AutomationJob, AutomationLog
from leadflow.automation.scheduler import schedule
from leadflow.config import testing as testing_config
from leadflow.extensions import db

pytestmark = pytest.mark.db


@pytest.fixture()
def app(tmp_path, monkeypatch):
    """File-backed database so each app context gets its own connection"""
    monkeypatch.setattr(
        testing_config.TestingConfig,
        "SQLALCHEMY_DATABASE_URI",
        f"sqlite:///{tmp_path / 'race.db'}",
    )
    app = create_app("testing")

    with app.app_context():
        db.create_all()

        yield app

        db.session.remove()
        db.drop_all()


def test_only_one_session_executes_a_contended_job(app, transport, make_lead, make_automation):
    make_automation(action_type="send_message", action_config={"message": "Only once"})
    schedule(make_lead(phone="5551234567"), "new_lead")
    first = JobRunner(action_executor=ActionExecutor(transport=transport))

    (job_seen_by_first,) = first.fetch_due()
    assert job_seen_by_first.is_pending

    with app.app_context():
        second = JobRunner(action_executor=ActionExecutor(transport=transport))
        (job_seen_by_second,) = second.fetch_due()
        assert second.run(job_seen_by_second) is True
        db.session.remove()

    # The first session still holds its stale pending copy
    assert job_seen_by_first.status == JobStatus.PENDING.value
    assert first.run(job_seen_by_first) is False

    assert transport.sent == [("5551234567", "Only once")]
    assert AutomationLog.query.count() == 1
    assert AutomationJob.query.one().status == JobStatus.DONE.value
