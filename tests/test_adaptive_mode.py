from datetime import date, datetime, timedelta

import pytest

from app.schemas.adaptive_schemas import AdaptiveModeState, BadDayTriggerType
from app.schemas.plan_schemas import ActionCategory, ActionStatus, DailyPlan, PlannedAction
from app.schemas.prediction_schemas import TriggerDate
from app.services import adaptive_mode_controller as controller

TODAY = date(2024, 6, 12)
MORNING = datetime(2024, 6, 12, 9, 0)
NIGHT = datetime(2024, 6, 12, 22, 0)


def _action(action_id, duration=5, simplified=False, anchor=None, status=ActionStatus.pending):
    return PlannedAction(
        id=action_id,
        title=f"Action {action_id}",
        category=ActionCategory.coping,
        duration=duration,
        simplified=simplified,
        anchor=anchor,
        status=status,
    )


def _plan(*actions):
    return DailyPlan(id="plan-1", user_id="user-1", date=TODAY, actions=list(actions))


def _check(state, checkin=None, sos=False, plan=None, triggers=(), now=MORNING, today=None):
    return controller.check_conditions(state, checkin, sos, plan, list(triggers), now, today=today)


class TestActivation:

    def test_normal_day_stays_normal(self, make_record):
        result = _check(AdaptiveModeState(), make_record(TODAY, mood=6))
        assert result.state.active is False
        assert result.activated is False

    def test_mood_below_two(self, make_record):
        result = _check(AdaptiveModeState(), make_record(TODAY, mood=1))
        assert result.activated is True
        assert result.state.activated_date == TODAY
        assert [t.type for t in result.state.triggers] == [BadDayTriggerType.low_mood]

    def test_mood_of_two_is_not_enough(self, make_record):
        assert _check(AdaptiveModeState(), make_record(TODAY, mood=2)).activated is False

    def test_records_every_reason(self, make_record):
        trigger = TriggerDate(id="t", date=TODAY, label="Hard anniversary")
        result = _check(AdaptiveModeState(), make_record(TODAY, mood=1), sos=True, triggers=[trigger])

        assert [t.type for t in result.state.triggers] == [
            BadDayTriggerType.low_mood,
            BadDayTriggerType.sos_used,
            BadDayTriggerType.trigger_date,
        ]

    def test_missed_actions_after_their_windows(self):
        plan = _plan(
            _action("a", anchor="After waking up"),
            _action("b", anchor="After lunch"),
            _action("c"),
        )
        assert _check(AdaptiveModeState(), plan=plan, now=MORNING).activated is False

        result = _check(AdaptiveModeState(), plan=plan, now=NIGHT)
        assert result.activated is True
        assert result.state.triggers[0].type == BadDayTriggerType.missed_actions

    def test_done_actions_are_not_missed(self):
        plan = _plan(
            _action("a", status=ActionStatus.completed),
            _action("b"),
            _action("c"),
        )
        assert controller.count_missed_actions(plan.actions, NIGHT) == 2

    def test_users_day_behind_the_server_clock(self, make_record):
        after_midnight_utc = datetime(2024, 6, 13, 0, 30)
        result = _check(AdaptiveModeState(), make_record(TODAY, mood=1), now=after_midnight_utc, today=TODAY)

        assert result.activated is True
        assert result.state.activated_date == TODAY

    def test_anchor_windows_only_apply_to_the_current_day(self):
        plan = _plan(_action("a"), _action("b"), _action("c"))
        next_night = NIGHT + timedelta(days=1)
        assert _check(AdaptiveModeState(), plan=plan, now=next_night, today=TODAY).activated is False


class TestRecovery:

    @pytest.fixture
    def active(self):
        return AdaptiveModeState(active=True, activated_date=TODAY, activated_at=MORNING)

    def test_same_day_recovery_needs_a_newer_checkin(self, active, make_record):
        stale = make_record(TODAY, mood=6, created_at=MORNING - timedelta(hours=1))
        assert _check(active, stale, now=MORNING + timedelta(hours=2)).deactivated is False

        fresh = make_record(TODAY, mood=6, created_at=MORNING + timedelta(hours=1))
        result = _check(active, fresh, now=MORNING + timedelta(hours=2))
        assert result.deactivated is True
        assert result.state.active is False

    def test_next_day_recovery(self, active, make_record):
        tomorrow = MORNING + timedelta(days=1)
        assert _check(active, make_record(tomorrow.date(), mood=2), now=tomorrow).deactivated is False
        assert _check(active, make_record(tomorrow.date(), mood=3), now=tomorrow).deactivated is True

    def test_lapses_after_more_than_a_day(self, active):
        result = _check(active, None, now=MORNING + timedelta(days=2))
        assert result.deactivated is True

    def test_stays_active_without_recovery(self, active, make_record):
        result = _check(active, make_record(TODAY, mood=1), now=MORNING + timedelta(hours=1))
        assert result.state.active is True
        assert result.activated is False
        assert result.deactivated is False

    def test_after_deactivation_old_signals_wait(self, make_record):
        deactivated = controller.deactivate(
            AdaptiveModeState(active=True, activated_date=TODAY, activated_at=MORNING),
            MORNING + timedelta(hours=3),
        )
        trigger = TriggerDate(id="t", date=TODAY, label="Anniversary")
        earlier_low = make_record(TODAY, mood=1, created_at=MORNING)

        result = _check(deactivated, earlier_low, triggers=[trigger], now=MORNING + timedelta(hours=4))
        assert result.activated is False

        newer_low = make_record(TODAY, mood=1, created_at=MORNING + timedelta(hours=5))
        assert _check(deactivated, newer_low, now=MORNING + timedelta(hours=6)).activated is True


class TestAdjustPlan:

    def test_keeps_the_simplified_action(self):
        plan = _plan(_action("a", duration=2), _action("b", duration=1, simplified=True), _action("c", duration=1))
        adjusted = controller.adjust_plan(plan)
        assert [a.id for a in adjusted.actions] == ["b"]
        assert len(plan.actions) == 3

    def test_falls_back_to_shortest_keeping_order(self):
        plan = _plan(_action("a", duration=10), _action("b", duration=2), _action("c", duration=2))
        assert [a.id for a in controller.adjust_plan(plan).actions] == ["b"]

    def test_dropped_actions_are_not_skipped(self):
        adjusted = controller.adjust_plan(_plan(_action("a"), _action("b")))
        assert adjusted.total_count == 1
        assert adjusted.actions[0].status == ActionStatus.pending


def test_manual_activation_and_deactivation():
    state = controller.activate_manually(AdaptiveModeState(), MORNING, "Rough night")
    assert state.active is True
    assert state.triggers[0].type == BadDayTriggerType.manual
    assert state.triggers[0].description == "Rough night"

    state = controller.deactivate(state, NIGHT)
    assert state.active is False
    assert state.deactivated_at == NIGHT
    assert state.triggers == []


def test_gentler_messaging():
    assert controller.get_config().max_actions == 1
    assert controller.get_gentler_message("unknown") == controller.GENTLER_MESSAGES["encouragement"]
    assert len(controller.get_support_prompts()) == len(controller.SUPPORT_PROMPTS)
