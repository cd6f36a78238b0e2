"""
Entry points for business events that can trigger automations.

Each function schedules jobs for the matching automations and returns them.
"""

from leadflow.extensions import db

from .automation_states import TriggerType
from .scheduler import schedule


def on_new_lead(lead, now=None):
    return schedule(lead, TriggerType.NEW_LEAD, None, now=now)


def on_stage_change(lead, new_stage, now=None):
    return schedule(lead, TriggerType.STAGE_CHANGE, new_stage, now=now)


def on_keyword_message(lead, message_text, now=None):
    lead.last_message = message_text
    db.session.add(lead)
    db.session.commit()
    return schedule(lead, TriggerType.KEYWORD, message_text, now=now)


def on_timed(lead, now=None):
    return schedule(lead, TriggerType.TIMED, None, now=now)
