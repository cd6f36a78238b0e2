import logging

from leadflow.errors import ActionError, DomainError
from leadflow.services import lead_service
from leadflow.services.whatsapp_service import WhatsAppClient

from .automation_states import ActionType
from .stages import normalize_stage

logger = logging.getLogger(__name__)

ACTION_HANDLERS = {}


def register_action(action_type):
    """Class decorator registering a handler for an action type."""

    def decorator(handler_cls):
        key = action_type.value if isinstance(action_type, ActionType) else action_type
        handler_cls.action_type = key
        ACTION_HANDLERS[key] = handler_cls
        return handler_cls

    return decorator


def _config_value(config, key):
    value = (config or {}).get(key) if isinstance(config, dict) else None
    if isinstance(value, str):
        value = value.strip()
    return value


class ActionHandler:
    action_type = None

    def __init__(self, transport=None):
        self.transport = transport

    def execute(self, definition, lead):
        raise NotImplementedError


@register_action(ActionType.SEND_MESSAGE)
class SendMessageAction(ActionHandler):
    def execute(self, definition, lead):
        message = _config_value(definition.action_config, "message")
        if not message:
            raise ActionError("Message content is required")
        if not lead.phone:
            raise ActionError(f"Lead {lead.id} has no phone number")

        transport = self.transport or WhatsAppClient.from_config()
        result = transport.send_message(lead.phone, message)

        return {
            "action": self.action_type,
            "message": message,
            "recipient": lead.phone,
            "result": result,
        }


@register_action(ActionType.UPDATE_STAGE)
class UpdateStageAction(ActionHandler):
    """Moves the lead without firing stage_change automations."""

    def execute(self, definition, lead):
        stage = _config_value(definition.action_config, "stage")
        if stage is None or stage == "":
            raise ActionError("Stage is required")

        new_stage = normalize_stage(lead.business_id, stage)
        if new_stage is None:
            raise ActionError(f"Unknown stage: {stage}")

        old_stage = lead.pipeline_column_id
        try:
            lead_service.update_lead_stage(lead.id, new_stage)
        except DomainError as e:
            raise ActionError(str(e)) from e

        return {
            "action": self.action_type,
            "old_stage": old_stage,
            "new_stage": new_stage,
            "lead_id": lead.id,
        }


@register_action(ActionType.ADD_TAG)
class AddTagAction(ActionHandler):
    def execute(self, definition, lead):
        tag = _config_value(definition.action_config, "tag")
        if not tag or not isinstance(tag, str):
            raise ActionError("Tag is required")

        try:
            lead = lead_service.add_lead_tag(lead.id, tag)
        except DomainError as e:
            raise ActionError(str(e)) from e

        return {
            "action": self.action_type,
            "tag": tag,
            "all_tags": lead.tag_names,
            "lead_id": lead.id,
        }


class ActionExecutor:
    """Dispatches an automation's action to its registered handler."""

    def __init__(self, transport=None):
        self.transport = transport

    def execute(self, definition, lead):
        handler_cls = ACTION_HANDLERS.get(definition.action_type)
        if handler_cls is None:
            raise ActionError(f"Unknown action type: {definition.action_type}")

        logger.debug(
            "Executing automation action",
            extra={
                "automation_id": definition.id,
                "lead_id": lead.id,
                "action_type": definition.action_type,
            },
        )
        return handler_cls(transport=self.transport).execute(definition, lead)
