from enum import Enum


class JobStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STATUSES = (JobStatus.DONE, JobStatus.FAILED)


class TriggerType(str, Enum):
    NEW_LEAD = "new_lead"
    STAGE_CHANGE = "stage_change"
    KEYWORD = "keyword"
    TIMED = "timed"


class ActionType(str, Enum):
    SEND_MESSAGE = "send_message"
    UPDATE_STAGE = "update_stage"
    ADD_TAG = "add_tag"


class LogStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


TRIGGER_LABELS = {
    TriggerType.NEW_LEAD.value: "New Lead",
    TriggerType.STAGE_CHANGE.value: "Stage Change",
    TriggerType.KEYWORD.value: "Keyword Match",
    TriggerType.TIMED.value: "Timed",
}

ACTION_LABELS = {
    ActionType.SEND_MESSAGE.value: "Send Message",
    ActionType.UPDATE_STAGE.value: "Update Stage",
    ActionType.ADD_TAG.value: "Add Tag",
}


def _title(value):
    return str(value or "").replace("_", " ").title()


def trigger_label(trigger_type):
    return TRIGGER_LABELS.get(trigger_type, _title(trigger_type))


def action_label(action_type):
    return ACTION_LABELS.get(action_type, _title(action_type))
