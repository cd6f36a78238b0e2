import pytest

from leadflow.automation import events
from leadflow.automation.automation_states import JobStatus
from leadflow.automation.models import AutomationJob, AutomationLog
from leadflow.extensions import db
from leadflow.services import lead_service


@pytest.mark.integration
def test_new_lead_is_tagged_welcomed(runner, business, make_automation):
    make_automation(trigger_type="new_lead", action_type="add_tag", action_config={"tag": "welcomed"})

    lead = lead_service.create_lead(business_id=business.id, payload={"name": "Ada Lovelace", "phone": "5551234567"})
    job = AutomationJob.query.filter_by(lead_id=lead.id).one()
    assert job.status == JobStatus.PENDING.value

    result = runner.run_pending_batch()

    assert result.succeeded == 1
    db.session.refresh(job)
    assert job.status == JobStatus.DONE.value
    db.session.expire_all()
    assert lead.tag_names == ["welcomed"]

    entry = AutomationLog.query.one()
    assert entry.status == "success"
    assert entry.automation_id == job.automation_id


@pytest.mark.integration
def test_repeated_tagging_does_not_duplicate(runner, business, make_automation):
    make_automation(trigger_type="new_lead", action_type="add_tag", action_config={"tag": "welcomed"})
    lead = lead_service.create_lead(business_id=business.id, payload={"name": "Grace Hopper"})
    runner.run_pending_batch()

    events.on_new_lead(lead)
    result = runner.run_pending_batch()

    assert result.succeeded == 1
    db.session.expire_all()
    assert lead.tag_names == ["welcomed"]


@pytest.mark.integration
def test_inbound_keyword_moves_lead_to_stage(runner, business, make_column, make_lead, make_automation):
    make_column(name="New", position=0)
    qualified = make_column(name="Qualified", position=1)
    make_automation(
        trigger_type="keyword",
        trigger_value={"keyword": "demo"},
        action_type="update_stage",
        action_config={"stage": "Qualified"},
    )
    lead = make_lead()

    lead_service.record_inbound_message(lead_id=lead.id, message_text="Can we get a DEMO?")
    runner.run_pending_batch()

    db.session.expire_all()
    assert lead.pipeline_column_id == qualified.id
    assert lead.last_message == "Can we get a DEMO?"


@pytest.mark.integration
def test_moving_lead_fires_stage_change(runner, transport, business, make_column, make_lead, make_automation):
    won = make_column(name="Won")
    make_automation(
        trigger_type="stage_change",
        trigger_value={"stage": "won"},
        action_type="send_message",
        action_config={"message": "Congratulations!"},
    )
    lead = make_lead(phone="5550001111")

    lead_service.move_lead_to_stage(lead_id=lead.id, stage="Won")
    runner.run_pending_batch()

    assert lead.pipeline_column_id == won.id
    assert transport.sent == [("5550001111", "Congratulations!")]


@pytest.mark.integration
def test_delayed_job_waits_for_its_time(runner, business, make_automation):
    make_automation(delay_seconds=3600)
    lead_service.create_lead(business_id=business.id, payload={"name": "Alan Turing"})

    result = runner.run_pending_batch()

    assert result.processed == 0
    assert AutomationJob.query.one().status == JobStatus.PENDING.value
