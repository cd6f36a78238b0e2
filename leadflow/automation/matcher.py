import logging

from .automation_states import TriggerType
from .models import AutomationDefinition
from .stages import normalize_stage

logger = logging.getLogger(__name__)

VALID_TRIGGERS = {trigger.value for trigger in TriggerType}


def _extract(trigger_value, key):
    # Accepts the raw value or a mapping holding it under ``key``
    if isinstance(trigger_value, dict):
        return trigger_value.get(key)
    return trigger_value


def keyword_matches(trigger_value, lead):
    keyword = _extract(trigger_value, "keyword")
    if not isinstance(keyword, (str, int, float)) or isinstance(keyword, bool):
        return False

    keyword = str(keyword).strip().lower()
    if not keyword:
        return False

    haystacks = (lead.name or "", lead.last_message or "")
    return any(keyword in text.lower() for text in haystacks)


def stage_matches(business_id, trigger_value, lead):
    target = _extract(trigger_value, "stage")
    if isinstance(target, (dict, list)):
        return False

    stage_id = normalize_stage(business_id, target)
    if stage_id is None:
        return False
    return lead.pipeline_column_id == stage_id


def matches_conditions(definition, lead):
    trigger_type = definition.trigger_type

    if trigger_type in (TriggerType.NEW_LEAD.value, TriggerType.TIMED.value):
        return True

    if trigger_type == TriggerType.KEYWORD.value:
        return keyword_matches(definition.trigger_value, lead)

    if trigger_type == TriggerType.STAGE_CHANGE.value:
        return stage_matches(definition.business_id, definition.trigger_value, lead)

    return False


def match(business_id, trigger_type, trigger_value, lead):
    """
    Return the active automations of a business that apply to an event.

    Candidates are selected by trigger type only. Each definition's own
    trigger_value decides the extra condition; the event's trigger_value
    is informational.
    """
    if isinstance(trigger_type, TriggerType):
        trigger_type = trigger_type.value

    if trigger_type not in VALID_TRIGGERS:
        raise ValueError(f"Unknown trigger type: {trigger_type}")

    candidates = AutomationDefinition.active_for(business_id, trigger_type).all()
    matched = [definition for definition in candidates if matches_conditions(definition, lead)]

    logger.debug(
        "Matched automations",
        extra={
            "business_id": business_id,
            "trigger_type": trigger_type,
            "event_value": trigger_value,
            "lead_id": lead.id,
            "candidates": len(candidates),
            "matched": len(matched),
        },
    )
    return matched
