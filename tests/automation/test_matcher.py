import pytest

from leadflow.automation.automation_states import ActionType, TriggerType
from leadflow.automation.matcher import match
from leadflow.automation.stages import normalize_stage
from leadflow.extensions import db
from leadflow.models import Business


def test_keyword_matches_last_message_case_insensitively(make_lead, make_automation):
    definition = make_automation(
        trigger_type=TriggerType.KEYWORD.value,
        trigger_value={"keyword": "demo"},
    )
    lead = make_lead(name="Jane Doe", last_message="Can we get a DEMO?")

    matched = match(lead.business_id, "keyword", "Can we get a DEMO?", lead)

    assert matched == [definition]


def test_keyword_matches_lead_name(make_lead, make_automation):
    definition = make_automation(trigger_type="keyword", trigger_value="vip")
    lead = make_lead(name="VIP Customer", last_message=None)

    assert match(lead.business_id, "keyword", None, lead) == [definition]


def test_keyword_does_not_match_unrelated_text(make_lead, make_automation):
    make_automation(trigger_type="keyword", trigger_value={"keyword": "demo"})
    lead = make_lead(name="Jane Doe", last_message="What are your prices?")

    assert match(lead.business_id, "keyword", None, lead) == []


@pytest.mark.parametrize("trigger_value", ["", "   ", {"keyword": ""}, {}, None, ["demo"]])
def test_empty_or_malformed_keyword_never_matches(make_lead, make_automation, trigger_value):
    make_automation(trigger_type="keyword", trigger_value=trigger_value)
    lead = make_lead(name="Demo Person", last_message="demo please")

    assert match(lead.business_id, "keyword", "demo please", lead) == []


def test_new_lead_and_timed_always_match(make_lead, make_automation):
    new_lead = make_automation(trigger_type="new_lead")
    timed = make_automation(trigger_type="timed")
    lead = make_lead()

    assert match(lead.business_id, TriggerType.NEW_LEAD, None, lead) == [new_lead]
    assert match(lead.business_id, TriggerType.TIMED, None, lead) == [timed]


def test_inactive_definitions_are_ignored(make_lead, make_automation):
    make_automation(trigger_type="new_lead", is_active=False)
    lead = make_lead()

    assert match(lead.business_id, "new_lead", None, lead) == []


def test_definitions_of_other_businesses_are_ignored(make_lead, make_automation):
    other = Business(name="Other Co")
    db.session.add(other)
    db.session.commit()
    make_automation(business_id=other.id, trigger_type="new_lead")
    lead = make_lead()

    assert match(lead.business_id, "new_lead", None, lead) == []


def test_stage_change_matches_only_current_column(make_lead, make_column, make_automation):
    qualified = make_column(name="Qualified", position=1)
    won = make_column(name="Won", position=2)
    to_qualified = make_automation(trigger_type="stage_change", trigger_value={"stage": qualified.id})
    make_automation(trigger_type="stage_change", trigger_value={"stage": won.id})
    lead = make_lead(pipeline_column_id=qualified.id)

    assert match(lead.business_id, "stage_change", qualified.id, lead) == [to_qualified]


def test_stage_change_accepts_column_name_and_numeric_string(make_lead, make_column, make_automation):
    qualified = make_column(name="Qualified")
    by_name = make_automation(trigger_type="stage_change", trigger_value=" qualified ", position=0)
    by_id = make_automation(trigger_type="stage_change", trigger_value=str(qualified.id), position=1)
    lead = make_lead(pipeline_column_id=qualified.id)

    assert match(lead.business_id, "stage_change", None, lead) == [by_name, by_id]


def test_stage_change_with_unknown_stage_does_not_match(make_lead, make_column, make_automation):
    column = make_column(name="New")
    make_automation(trigger_type="stage_change", trigger_value={"stage": "Nonexistent"})
    lead = make_lead(pipeline_column_id=column.id)

    assert match(lead.business_id, "stage_change", None, lead) == []


def test_results_are_ordered_by_position(make_lead, make_automation):
    second = make_automation(position=2)
    first = make_automation(position=1)
    lead = make_lead()

    assert match(lead.business_id, "new_lead", None, lead) == [first, second]


def test_unknown_trigger_type_raises(make_lead):
    lead = make_lead()

    with pytest.raises(ValueError, match="Unknown trigger type"):
        match(lead.business_id, "moon_phase", None, lead)


def test_normalize_stage_is_scoped_to_business(business, make_column):
    column = make_column(name="Contacted")
    other = Business(name="Other Co")
    db.session.add(other)
    db.session.commit()

    assert normalize_stage(business.id, column.id) == column.id
    assert normalize_stage(business.id, "CONTACTED") == column.id
    assert normalize_stage(other.id, column.id) is None
    assert normalize_stage(other.id, "Contacted") is None
    assert normalize_stage(business.id, "") is None
    assert normalize_stage(business.id, None) is None


def test_action_type_is_irrelevant_to_matching(make_lead, make_automation):
    definition = make_automation(action_type=ActionType.SEND_MESSAGE.value, action_config={})
    lead = make_lead()

    assert match(lead.business_id, "new_lead", None, lead) == [definition]
