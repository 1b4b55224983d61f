import asyncio
import random
from datetime import date, datetime

from app.schemas.adaptive_schemas import BadDayTriggerType
from app.schemas.checkin_schemas import CheckinCreateRequest
from app.schemas.crisis_schemas import CrisisSeverity, CrisisTriggerType
from app.schemas.plan_schemas import ActionCategory
from app.schemas.prediction_schemas import AlertType, TriggerDateCreateRequest
from app.services import alert_generator
from app.services.checkin_pipeline import process_checkin, request_support

NEUTRAL = dict(mood=7, stress=3, sleep=7, energy=7, focus=7, anxiety=3)


def _run(stores, now, user_id="user-1", seed=1, **fields):
    payload = CheckinCreateRequest(**{**NEUTRAL, **fields})
    return asyncio.run(process_checkin(stores, user_id, payload, now=now, rng=random.Random(seed)))


def test_ordinary_checkin(stores, morning):
    outcome = _run(stores, morning, journal_text="Quiet day, nice walk")

    assert outcome.crisis.detected is False
    assert outcome.crisis_event_id is None
    assert outcome.crisis_response is None
    assert outcome.plan.total_count == 3
    assert outcome.mode.active is False
    assert outcome.alert is None
    assert (outcome.crisis_error, outcome.plan_error, outcome.mode_error, outcome.alert_error) == (None,) * 4

    assert stores.plans.get_plan("user-1", morning.date()).id == outcome.plan.id
    assert stores.adherence.get("user-1").stats_for(ActionCategory.coping).total_assigned == 1


def test_crisis_checkin(stores, morning):
    outcome = _run(stores, morning, journal_text="I want to kill myself")

    assert outcome.crisis.severity == CrisisSeverity.high
    assert outcome.crisis_response.show_emergency is True

    event = stores.crisis_events.list_events("user-1")[0]
    assert event.id == outcome.crisis_event_id
    assert event.follow_up_scheduled is True
    assert len(event.resources_shown) == 5

    # High severity counts as SOS for the day
    assert outcome.mode.active is True
    assert outcome.mode.triggers[0].type == BadDayTriggerType.sos_used
    assert outcome.plan.total_count == 1


def test_cooldown_suppresses_the_second_event(stores, morning):
    _run(stores, morning, journal_text="feeling hopeless", mood=2)
    second = _run(stores, morning, journal_text="feeling hopeless", mood=2)

    assert second.crisis.detected is True
    assert second.crisis_event_id is None
    assert len(stores.crisis_events.list_events("user-1")) == 1


def test_low_mood_trims_the_plan(stores, morning):
    outcome = _run(stores, morning, mood=1)

    assert outcome.mode.active is True
    assert [t.type for t in outcome.mode.triggers] == [BadDayTriggerType.low_mood]
    assert outcome.plan.total_count == 1
    assert stores.plans.get_plan("user-1", morning.date()).total_count == 1


def test_repeat_checkin_replaces_the_days_plan(stores, morning):
    first = _run(stores, morning, seed=1)
    second = _run(stores, morning, seed=2)

    assert stores.plans.get_plan("user-1", morning.date()).id == second.plan.id != first.plan.id
    assert stores.adherence.get("user-1").stats_for(ActionCategory.coping).total_assigned == 2


def test_plan_failure_does_not_block_crisis_event(stores, morning, mocker):
    mocker.patch.object(stores.plans, "save_plan", side_effect=RuntimeError("disk full"))

    outcome = _run(stores, morning, journal_text="I can't go on")

    assert outcome.plan is None
    assert "disk full" in outcome.plan_error
    assert outcome.crisis_event_id is not None
    assert outcome.crisis_error is None


def test_crisis_store_failure_does_not_block_plan(stores, morning, mocker):
    mocker.patch.object(stores.crisis_events, "create_crisis_event", side_effect=RuntimeError("store down"))

    outcome = _run(stores, morning, journal_text="I can't go on")

    assert outcome.crisis.severity == CrisisSeverity.high
    assert outcome.crisis_response is not None
    assert "store down" in outcome.crisis_error
    assert outcome.plan is not None
    assert stores.plans.get_plan("user-1", morning.date()) is not None


def test_trigger_date_today_raises_alert_and_lightens_plan(stores, morning):
    stores.trigger_dates.create("user-1", TriggerDateCreateRequest(date=morning.date(), label="Anniversary"))

    outcome = _run(stores, morning)

    assert outcome.mode.active is True
    assert outcome.mode.triggers[0].type == BadDayTriggerType.trigger_date
    assert outcome.alert.type == AlertType.trigger_approaching
    assert outcome.alert.suggested_action == alert_generator.LIGHTER_PLAN_ACTIVE
    assert stores.alerts.get("user-1").type == AlertType.trigger_approaching


def test_support_request(stores, morning):
    outcome = request_support(stores, "user-1", now=morning)

    event = stores.crisis_events.list_events("user-1")[0]
    assert event.id == outcome.event_id
    assert event.trigger_type == CrisisTriggerType.explicit_request
    assert event.severity == CrisisSeverity.medium
    assert event.follow_up_scheduled is True
    assert outcome.response.show_emergency is False
    assert outcome.mode.active is True


def test_mode_check_follows_the_checkin_date(stores):
    # Evening west of UTC: the user's day is still June 12th
    day = date(2024, 6, 12)
    payload = CheckinCreateRequest(**{**NEUTRAL, "mood": 1, "date": day})
    outcome = asyncio.run(process_checkin(
        stores, "user-1", payload, now=datetime(2024, 6, 13, 0, 30), rng=random.Random(1),
    ))

    assert outcome.mode.active is True
    assert outcome.mode.activated_date == day
    assert [t.type for t in outcome.mode.triggers] == [BadDayTriggerType.low_mood]
    assert outcome.plan.total_count == 1
    assert stores.plans.get_plan("user-1", day).total_count == 1
