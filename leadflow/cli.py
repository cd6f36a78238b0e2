import click
from flask.cli import AppGroup

from leadflow.automation.automation_states import ActionType, TriggerType
from leadflow.automation.executor import run_pending_batch
from leadflow.automation.models import AutomationDefinition
from leadflow.extensions import db
from leadflow.models import Business, PipelineColumn

automation_cli = AppGroup("automation", help="Automation engine commands")

DEMO_BUSINESS_NAME = "Demo Business"
DEMO_STAGES = ("New", "Contacted", "Qualified", "Won")


@automation_cli.command("run")
def run_command():
    """Execute all automation jobs that are due."""
    click.echo("Processing pending automation jobs...")

    result = run_pending_batch()

    click.echo(f"Found {result.processed} pending jobs")
    click.echo(f"Success: {result.succeeded}, Failures: {result.failed}")
    if result.skipped:
        click.echo(f"Skipped (claimed elsewhere): {result.skipped}")


@automation_cli.command("init-db")
def init_db_command():
    """Create all database tables."""
    db.create_all()
    click.echo("Database initialized successfully!")


@automation_cli.command("seed-demo")
def seed_demo_command():
    """Seed a demo business with pipeline stages and automations."""
    business = Business.query.filter_by(name=DEMO_BUSINESS_NAME).first()
    if business:
        click.echo("Demo business already exists. Skipping.")
        return

    business = Business(name=DEMO_BUSINESS_NAME)
    db.session.add(business)
    db.session.flush()

    for position, name in enumerate(DEMO_STAGES):
        db.session.add(PipelineColumn(business_id=business.id, name=name, position=position))

    db.session.add_all([
        AutomationDefinition(
            business_id=business.id,
            name="Welcome message",
            trigger_type=TriggerType.NEW_LEAD.value,
            action_type=ActionType.SEND_MESSAGE.value,
            action_config={"message": "Thanks for reaching out! We'll be in touch shortly."},
            delay_seconds=0,
            position=0,
        ),
        AutomationDefinition(
            business_id=business.id,
            name="Tag new leads",
            trigger_type=TriggerType.NEW_LEAD.value,
            action_type=ActionType.ADD_TAG.value,
            action_config={"tag": "welcomed"},
            delay_seconds=0,
            position=1,
        ),
        AutomationDefinition(
            business_id=business.id,
            name="Demo requests",
            trigger_type=TriggerType.KEYWORD.value,
            trigger_value={"keyword": "demo"},
            action_type=ActionType.UPDATE_STAGE.value,
            action_config={"stage": "Qualified"},
            delay_seconds=300,
            position=2,
        ),
    ])
    db.session.commit()

    click.echo(f"Demo business created with id {business.id}")
