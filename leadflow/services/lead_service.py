import logging

from leadflow.automation import events
from leadflow.automation.stages import normalize_stage
from leadflow.errors import NotFoundError, ValidationError
from leadflow.extensions import db
from leadflow.models import Lead, Tag

logger = logging.getLogger(__name__)


def get_lead(lead_id: int) -> Lead:
    lead = db.session.get(Lead, lead_id)
    if lead is None:
        raise NotFoundError(f"Lead {lead_id} not found")
    return lead


def create_lead(*, business_id: int, payload: dict) -> Lead:
    """Persist a new lead and schedule its new_lead automations."""
    name = (payload.get("name") or "").strip()
    if not name:
        raise ValidationError("Lead name is required")

    stage = payload.get("stage")
    pipeline_column_id = normalize_stage(business_id, stage) if stage is not None else None

    lead = Lead(
        business_id=business_id,
        name=name,
        phone=payload.get("phone"),
        notes=payload.get("notes"),
        pipeline_column_id=pipeline_column_id,
    )

    db.session.add(lead)
    db.session.commit()

    logger.info("Lead created", extra={"lead_id": lead.id, "business_id": business_id})
    events.on_new_lead(lead)

    return lead


def move_lead_to_stage(*, lead_id: int, stage) -> Lead:
    """Move a lead through the pipeline and fire stage_change automations."""
    lead = update_lead_stage(lead_id, stage)
    db.session.commit()

    events.on_stage_change(lead, lead.pipeline_column_id)
    return lead


def record_inbound_message(*, lead_id: int, message_text: str) -> Lead:
    lead = get_lead(lead_id)
    events.on_keyword_message(lead, message_text)
    return lead


def update_lead_stage(lead_id: int, new_stage) -> Lead:
    """
    Point the lead at another pipeline column of its business.

    Changes are flushed, not committed; the caller owns the transaction.
    """
    lead = get_lead(lead_id)
    column_id = normalize_stage(lead.business_id, new_stage)
    if column_id is None:
        raise ValidationError(f"Unknown stage: {new_stage}")

    lead.pipeline_column_id = column_id
    db.session.flush()
    return lead


def add_lead_tag(lead_id: int, tag_name: str) -> Lead:
    """
    Add a tag to the lead unless it already carries it.

    Changes are flushed, not committed; the caller owns the transaction.
    """
    name = (tag_name or "").strip()
    if not name:
        raise ValidationError("Tag name is required")

    lead = get_lead(lead_id)
    if not lead.has_tag(name):
        lead.tags.append(Tag(name=name))
        db.session.flush()
    return lead
