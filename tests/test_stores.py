from datetime import date, datetime, timedelta

import pytest
from sqlalchemy import text

from app.models.crisis_event import CrisisEventLog
from app.schemas.adaptive_schemas import AdaptiveModeState, BadDayTrigger, BadDayTriggerType
from app.schemas.crisis_schemas import CrisisDetectionResult, CrisisSeverity, CrisisTriggerType
from app.schemas.plan_schemas import ActionCategory, AdherenceState, DailyPlan, PlannedAction
from app.schemas.prediction_schemas import (
    AlertSeverity,
    AlertType,
    ProactiveAlert,
    TriggerDateCreateRequest,
    TriggerDateUpdateRequest,
)
from app.services.exceptions import CrisisEventNotFoundError, TriggerDateNotFoundError
from app.utils.encryption import decrypt_journal

TODAY = date(2024, 6, 12)

HIGH_VERDICT = CrisisDetectionResult(
    detected=True,
    severity=CrisisSeverity.high,
    trigger_type=CrisisTriggerType.keyword,
    detection_method="text_pattern",
    risk_factors=["Contains high-severity crisis language"],
)


def _plan(plan_id, day=TODAY, template_ids=("breathing-box",)):
    return DailyPlan(
        id=plan_id,
        user_id="user-1",
        date=day,
        actions=[
            PlannedAction(
                id=f"{plan_id}-{i}",
                template_id=template_id,
                title=template_id,
                category=ActionCategory.coping,
                duration=5,
            )
            for i, template_id in enumerate(template_ids)
        ],
    )


class TestCheckins:

    def test_journal_is_encrypted_at_rest(self, stores, db, make_metrics):
        stores.checkins.add("user-1", TODAY, make_metrics(), journal_text="a private thought")

        stored = db.execute(text("SELECT journal_text FROM checkins")).scalar_one()
        assert stored != "a private thought"
        assert decrypt_journal(stored) == "a private thought"

    def test_recent_keeps_latest_per_day(self, stores, make_metrics):
        base = datetime(2024, 6, 12, 8, 0)
        stores.checkins.add("user-1", TODAY, make_metrics(mood=3), created_at=base)
        stores.checkins.add("user-1", TODAY, make_metrics(mood=6), created_at=base + timedelta(hours=2))
        stores.checkins.add("user-1", TODAY - timedelta(days=1), make_metrics(mood=5))
        stores.checkins.add("user-1", TODAY - timedelta(days=40), make_metrics(mood=5))
        stores.checkins.add("someone-else", TODAY, make_metrics(mood=1))

        history = stores.checkins.get_recent_checkins("user-1", 30, today=TODAY)

        assert [r.date for r in history] == [TODAY, TODAY - timedelta(days=1)]
        assert history[0].mood == 6
        assert stores.checkins.get_for_date("user-1", TODAY).mood == 6

    def test_checkin_dates_and_active_users(self, stores, make_metrics):
        stores.checkins.add("user-1", TODAY, make_metrics())
        stores.checkins.add("user-1", TODAY, make_metrics())
        stores.checkins.add("user-2", TODAY - timedelta(days=10), make_metrics())

        assert stores.checkins.checkin_dates("user-1") == [TODAY]
        assert stores.checkins.active_user_ids(TODAY - timedelta(days=3)) == ["user-1"]


class TestCrisisEvents:

    def test_events_never_hold_text(self):
        assert not any("text" in column.name for column in CrisisEventLog.__table__.columns)

    def test_create_and_cooldown(self, stores):
        event_id = stores.crisis_events.create_crisis_event("user-1", None, HIGH_VERDICT, resources_shown=["988"])

        assert stores.crisis_events.has_recent_crisis_event("user-1", 24)
        later = datetime.utcnow() + timedelta(hours=25)
        assert not stores.crisis_events.has_recent_crisis_event("user-1", 24, now=later)

        event = stores.crisis_events.list_events("user-1")[0]
        assert event.id == event_id
        assert event.resources_shown == ["988"]
        assert event.acknowledged is False

    def test_only_detected_verdicts_are_recorded(self, stores):
        with pytest.raises(ValueError):
            stores.crisis_events.create_crisis_event(
                "user-1", None, CrisisDetectionResult.not_detected("none"),
            )

    def test_acknowledge(self, stores):
        event_id = stores.crisis_events.create_crisis_event("user-1", None, HIGH_VERDICT)
        assert stores.crisis_events.acknowledge("user-1", event_id).acknowledged is True

        with pytest.raises(CrisisEventNotFoundError):
            stores.crisis_events.acknowledge("someone-else", event_id)

    def test_sos_used_since(self, stores):
        since = datetime.utcnow() - timedelta(minutes=1)
        low = HIGH_VERDICT.model_copy(update={"severity": CrisisSeverity.low})
        stores.crisis_events.create_crisis_event("user-1", None, low)
        assert not stores.crisis_events.sos_used_since("user-1", since)

        stores.crisis_events.create_crisis_event("user-1", None, HIGH_VERDICT)
        assert stores.crisis_events.sos_used_since("user-1", since)


class TestTriggerDates:

    def test_crud(self, stores):
        created = stores.trigger_dates.create(
            "user-1", TriggerDateCreateRequest(date=TODAY, label="Anniversary", repeat_annually=True),
        )
        assert stores.trigger_dates.get("user-1", created.id).label == "Anniversary"

        updated = stores.trigger_dates.update("user-1", created.id, TriggerDateUpdateRequest(label="Hard day"))
        assert updated.label == "Hard day"
        assert updated.repeat_annually is True

        stores.trigger_dates.delete("user-1", created.id)
        assert stores.trigger_dates.list("user-1") == []

    def test_missing(self, stores):
        with pytest.raises(TriggerDateNotFoundError):
            stores.trigger_dates.get("user-1", "missing")
        with pytest.raises(TriggerDateNotFoundError):
            stores.trigger_dates.delete("user-1", "missing")


class TestPlans:

    def test_round_trip_keeps_order(self, stores):
        plan = _plan("p1", template_ids=("breathing-box", "lifestyle-walk-10", "connection-call"))
        saved = stores.plans.save_plan(plan)
        assert [a.template_id for a in saved.actions] == ["breathing-box", "lifestyle-walk-10", "connection-call"]
        assert stores.plans.get_plan("user-1", TODAY).total_count == 3

    def test_new_plan_replaces_the_days_plan(self, stores):
        stores.plans.save_plan(_plan("p1"))
        stores.plans.save_plan(_plan("p2", template_ids=("grounding-54321",)))

        plan = stores.plans.get_plan("user-1", TODAY)
        assert plan.id == "p2"
        assert [a.template_id for a in plan.actions] == ["grounding-54321"]

    def test_shrinking_a_plan_drops_actions(self, stores):
        plan = stores.plans.save_plan(_plan("p1", template_ids=("breathing-box", "lifestyle-walk-10")))
        stores.plans.save_plan(plan.model_copy(update={"actions": plan.actions[1:]}))
        assert [a.template_id for a in stores.plans.get_plan("user-1", TODAY).actions] == ["lifestyle-walk-10"]

    def test_recently_used(self, stores):
        stores.plans.save_plan(_plan("old", day=TODAY - timedelta(days=5), template_ids=("relaxation-pmr",)))
        stores.plans.save_plan(_plan("recent", day=TODAY - timedelta(days=2), template_ids=("breathing-box",)))
        stores.plans.save_plan(_plan("today", day=TODAY, template_ids=("grounding-54321",)))

        assert stores.plans.recently_used_template_ids("user-1", TODAY) == {"breathing-box"}


class TestUserState:

    def test_adaptive_mode_round_trip(self, stores):
        now = datetime(2024, 6, 12, 9, 0)
        state = AdaptiveModeState(
            active=True,
            activated_date=TODAY,
            activated_at=now,
            triggers=[BadDayTrigger(type=BadDayTriggerType.low_mood, description="Mood rating of 1", timestamp=now)],
        )
        stores.adaptive_mode.save("user-1", state)
        assert stores.adaptive_mode.get("user-1") == state
        assert stores.adaptive_mode.get("someone-else").active is False

    def test_adherence_round_trip(self, stores):
        adherence = AdherenceState()
        adherence.category_stats[ActionCategory.coping].consecutive_skips = 2
        adherence.category_stats[ActionCategory.coping].needs_simplification = True
        stores.adherence.save("user-1", adherence)

        loaded = stores.adherence.get("user-1")
        assert loaded.categories_needing_simplification() == [ActionCategory.coping]

    def test_alert_dismissal_resets_on_replace(self, stores):
        alert = ProactiveAlert(
            type=AlertType.recovery_mode,
            title="Recovery Support Active",
            message="...",
            severity=AlertSeverity.warning,
            actionable=True,
        )
        assert stores.alerts.dismiss("user-1") is False

        stores.alerts.replace("user-1", alert)
        assert stores.alerts.dismiss("user-1") is True
        assert stores.alerts.get("user-1").dismissed is True

        stores.alerts.replace("user-1", alert)
        assert stores.alerts.get("user-1").dismissed is False

        stores.alerts.replace("user-1", None)
        assert stores.alerts.get("user-1") is None

    def test_focus_areas_are_deduplicated(self, stores):
        stores.profiles.set_focus_areas("user-1", ["mindfulness", "gratitude", "mindfulness"])
        assert stores.profiles.focus_areas("user-1") == ["mindfulness", "gratitude"]
