import pytest
from datetime import datetime
from faker import Faker

from leadflow import create_app
from leadflow.automation.actions import ActionExecutor
from leadflow.automation.automation_states import ActionType, TriggerType
from leadflow.automation.executor import JobRunner
from leadflow.automation.models import AutomationDefinition
from leadflow.errors import TransportError
from leadflow.extensions import db
from leadflow.models import Business, Lead, PipelineColumn

# Initialize Faker for generating test data
fake = Faker()


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "integration: mark test as spanning scheduling and execution"
    )
    config.addinivalue_line(
        "markers",
        "db: mark test as database-intensive"
    )


class FakeTransport:
    """Records outbound messages instead of calling the WhatsApp API."""

    def __init__(self):
        self.sent = []
        self.failures = []

    def fail_next(self, *errors):
        self.failures.extend(errors)

    def send_message(self, phone, message):
        if self.failures:
            raise self.failures.pop(0)
        self.sent.append((phone, message))
        return {
            "status": "sent",
            "message_id": f"wamid.{len(self.sent)}",
            "timestamp": datetime.utcnow().isoformat(),
        }


@pytest.fixture()
def app():
    """Create application for testing with a fresh in-memory database"""
    app = create_app("testing")

    with app.app_context():
        db.create_all()

        yield app

        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def transport():
    return FakeTransport()


@pytest.fixture()
def runner(app, transport):
    return JobRunner(action_executor=ActionExecutor(transport=transport))


@pytest.fixture()
def business(app):
    business = Business(name=fake.company())
    db.session.add(business)
    db.session.commit()
    return business


@pytest.fixture()
def make_column(business):
    def _make(name=None, position=0, business_id=None):
        column = PipelineColumn(
            business_id=business_id or business.id,
            name=name or fake.unique.word().title(),
            position=position,
        )
        db.session.add(column)
        db.session.commit()
        return column

    return _make


@pytest.fixture()
def make_lead(business):
    def _make(**overrides):
        fields = {
            "business_id": business.id,
            "name": fake.name(),
            "phone": fake.msisdn(),
        }
        fields.update(overrides)
        lead = Lead(**fields)
        db.session.add(lead)
        db.session.commit()
        return lead

    return _make


@pytest.fixture()
def make_automation(business):
    def _make(**overrides):
        fields = {
            "business_id": business.id,
            "name": fake.catch_phrase(),
            "trigger_type": TriggerType.NEW_LEAD.value,
            "trigger_value": None,
            "action_type": ActionType.ADD_TAG.value,
            "action_config": {"tag": "welcomed"},
            "delay_seconds": 0,
            "is_active": True,
        }
        fields.update(overrides)
        definition = AutomationDefinition(**fields)
        db.session.add(definition)
        db.session.commit()
        return definition

    return _make


@pytest.fixture()
def transport_error():
    return TransportError("WhatsApp API error: temporarily unavailable", status_code=503)
