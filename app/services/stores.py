# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
SQLAlchemy-backed storage for the engine.

Every store takes an open `Session`. Writes commit straight away and roll
back on failure, so one failed write never leaves another caller's work
half-flushed. Rows are converted to the pydantic records the engine works
with; nothing outside this module sees ORM objects.
"""

import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

from fastapi import Depends
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.action_template import ActionTemplateEntry
from app.models.checkin import Checkin
from app.models.crisis_event import CrisisEventLog
from app.models.daily_plan import DailyPlanEntry, PlannedActionEntry
from app.models.database import get_db
from app.models.trigger_date import TriggerDateEntry
from app.models.user_state import AdaptiveModeRecord, AdherenceRecord, LiveAlert, UserProfile
from app.models.weekly_summary import WeeklySummaryEntry
from app.schemas.adaptive_schemas import AdaptiveModeState, BadDayTrigger
from app.schemas.checkin_schemas import CheckinMetrics, CheckinRecord
from app.schemas.crisis_schemas import (
    CrisisDetectionResult,
    CrisisEvent,
    CrisisSeverity,
    CrisisTriggerType,
)
from app.schemas.plan_schemas import (
    ActionTemplate,
    AdherenceState,
    DailyPlan,
    PlannedAction,
)
from app.schemas.prediction_schemas import (
    ProactiveAlert,
    TriggerDate,
    TriggerDateCreateRequest,
    TriggerDateUpdateRequest,
)
from app.schemas.summary_schemas import WeeklySummary
from app.services.exceptions import CrisisEventNotFoundError, TriggerDateNotFoundError

logger = logging.getLogger(__name__)


def _commit(db: Session, what: str):
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("⚠️ Failed to save %s: %s", what, str(e))
        raise


# -------------------------------
# Check-ins (history provider)
# -------------------------------

def _to_record(row: Checkin) -> CheckinRecord:
    return CheckinRecord(
        id=row.id,
        user_id=row.user_id,
        date=row.date,
        mood=row.mood,
        stress=row.stress,
        sleep=row.sleep,
        energy=row.energy,
        focus=row.focus,
        anxiety=row.anxiety,
        created_at=row.created_at,
    )


def _latest_per_day(rows) -> List[CheckinRecord]:
    """Rows must arrive newest first; the first row seen for a date wins."""
    seen = set()
    records = []
    for row in rows:
        if row.date in seen:
            continue
        seen.add(row.date)
        records.append(_to_record(row))
    return records


class CheckinStore:
    def __init__(self, db: Session):
        self.db = db

    def add(
        self,
        user_id: str,
        day: date,
        metrics: CheckinMetrics,
        journal_text: Optional[str] = None,
        context_tags: Optional[List[str]] = None,
        created_at: Optional[datetime] = None,
    ) -> CheckinRecord:
        row = Checkin(
            user_id=user_id,
            date=day,
            journal_text=journal_text,
            context_tags=context_tags or [],
            created_at=created_at or datetime.utcnow(),
            **metrics.as_dict(),
        )
        self.db.add(row)
        _commit(self.db, "check-in")
        self.db.refresh(row)
        return _to_record(row)

    def get_recent_checkins(self, user_id: str, days: int, today: Optional[date] = None) -> List[CheckinRecord]:
        """One record per day for the last `days` days, most recent first."""
        today = today or datetime.utcnow().date()
        since = today - timedelta(days=days)
        rows = (
            self.db.query(Checkin)
            .filter(Checkin.user_id == user_id, Checkin.date > since, Checkin.date <= today)
            .order_by(Checkin.date.desc(), Checkin.created_at.desc())
            .all()
        )
        return _latest_per_day(rows)

    def get_between(self, user_id: str, start: date, end: date) -> List[CheckinRecord]:
        rows = (
            self.db.query(Checkin)
            .filter(Checkin.user_id == user_id, Checkin.date >= start, Checkin.date <= end)
            .order_by(Checkin.date.desc(), Checkin.created_at.desc())
            .all()
        )
        return _latest_per_day(rows)

    def get_for_date(self, user_id: str, day: date) -> Optional[CheckinRecord]:
        row = (
            self.db.query(Checkin)
            .filter(Checkin.user_id == user_id, Checkin.date == day)
            .order_by(Checkin.created_at.desc())
            .first()
        )
        return _to_record(row) if row else None

    def checkin_dates(self, user_id: str, limit: int = 365) -> List[date]:
        rows = (
            self.db.query(Checkin.date)
            .filter(Checkin.user_id == user_id)
            .distinct()
            .order_by(Checkin.date.desc())
            .limit(limit)
            .all()
        )
        return [r[0] for r in rows]

    def active_user_ids(self, since: date) -> List[str]:
        rows = self.db.query(Checkin.user_id).filter(Checkin.date >= since).distinct().all()
        return sorted(r[0] for r in rows)


# -------------------------------
# Crisis events (append-only)
# -------------------------------

def _to_event(row: CrisisEventLog) -> CrisisEvent:
    return CrisisEvent(
        id=row.id,
        user_id=row.user_id,
        checkin_id=row.checkin_id,
        severity=row.severity,
        trigger_type=row.trigger_type,
        detection_method=row.detection_method,
        resources_shown=row.resources_shown or [],
        acknowledged=bool(row.acknowledged),
        follow_up_scheduled=bool(row.follow_up_scheduled),
        created_at=row.created_at,
    )


class CrisisEventStore:
    def __init__(self, db: Session):
        self.db = db

    def has_recent_crisis_event(self, user_id: str, cooldown_hours: int, now: Optional[datetime] = None) -> bool:
        now = now or datetime.utcnow()
        since = now - timedelta(hours=cooldown_hours)
        return (
            self.db.query(CrisisEventLog.id)
            .filter(CrisisEventLog.user_id == user_id, CrisisEventLog.created_at >= since)
            .first()
            is not None
        )

    def create_crisis_event(
        self,
        user_id: str,
        checkin_id: Optional[str],
        result: CrisisDetectionResult,
        resources_shown: Optional[List[str]] = None,
        follow_up_scheduled: bool = False,
    ) -> str:
        """Persist detection metadata. Takes the verdict, never the journal text."""
        if not result.detected:
            raise ValueError("Only detected crises are recorded")

        row = CrisisEventLog(
            user_id=user_id,
            checkin_id=checkin_id,
            severity=result.severity,
            trigger_type=result.trigger_type,
            detection_method=result.detection_method,
            resources_shown=resources_shown or [],
            follow_up_scheduled=follow_up_scheduled,
            created_at=datetime.utcnow(),
        )
        self.db.add(row)
        _commit(self.db, "crisis event")
        logger.info("🚨 Crisis event %s recorded (%s)", row.id, result.severity.value)
        return row.id

    def acknowledge(self, user_id: str, event_id: str) -> CrisisEvent:
        row = (
            self.db.query(CrisisEventLog)
            .filter(CrisisEventLog.id == event_id, CrisisEventLog.user_id == user_id)
            .first()
        )
        if not row:
            raise CrisisEventNotFoundError(event_id)

        row.acknowledged = True
        _commit(self.db, "crisis acknowledgement")
        return _to_event(row)

    def list_events(self, user_id: str, limit: int = 50) -> List[CrisisEvent]:
        rows = (
            self.db.query(CrisisEventLog)
            .filter(CrisisEventLog.user_id == user_id)
            .order_by(CrisisEventLog.created_at.desc())
            .limit(limit)
            .all()
        )
        return [_to_event(r) for r in rows]

    def sos_used_since(self, user_id: str, since: datetime) -> bool:
        """An explicit support request, or a medium/high detection, since `since`."""
        return (
            self.db.query(CrisisEventLog.id)
            .filter(
                CrisisEventLog.user_id == user_id,
                CrisisEventLog.created_at >= since,
                or_(
                    CrisisEventLog.trigger_type == CrisisTriggerType.explicit_request,
                    CrisisEventLog.severity.in_([CrisisSeverity.medium, CrisisSeverity.high]),
                ),
            )
            .first()
            is not None
        )


# -------------------------------
# Trigger dates
# -------------------------------

def _to_trigger(row: TriggerDateEntry) -> TriggerDate:
    return TriggerDate(
        id=row.id,
        date=row.date,
        label=row.label,
        repeat_annually=bool(row.repeat_annually),
        created_at=row.created_at,
    )


class TriggerDateStore:
    def __init__(self, db: Session):
        self.db = db

    def _row(self, user_id: str, trigger_id: str) -> TriggerDateEntry:
        row = (
            self.db.query(TriggerDateEntry)
            .filter(TriggerDateEntry.id == trigger_id, TriggerDateEntry.user_id == user_id)
            .first()
        )
        if not row:
            raise TriggerDateNotFoundError(trigger_id)
        return row

    def list(self, user_id: str) -> List[TriggerDate]:
        rows = (
            self.db.query(TriggerDateEntry)
            .filter(TriggerDateEntry.user_id == user_id)
            .order_by(TriggerDateEntry.date.asc())
            .all()
        )
        return [_to_trigger(r) for r in rows]

    def get(self, user_id: str, trigger_id: str) -> TriggerDate:
        return _to_trigger(self._row(user_id, trigger_id))

    def create(self, user_id: str, payload: TriggerDateCreateRequest) -> TriggerDate:
        row = TriggerDateEntry(
            user_id=user_id,
            date=payload.date,
            label=payload.label,
            repeat_annually=payload.repeat_annually,
            created_at=datetime.utcnow(),
        )
        self.db.add(row)
        _commit(self.db, "trigger date")
        return _to_trigger(row)

    def update(self, user_id: str, trigger_id: str, payload: TriggerDateUpdateRequest) -> TriggerDate:
        row = self._row(user_id, trigger_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(row, field, value)
        _commit(self.db, "trigger date")
        return _to_trigger(row)

    def delete(self, user_id: str, trigger_id: str) -> None:
        row = self._row(user_id, trigger_id)
        self.db.delete(row)
        _commit(self.db, "trigger date removal")


# -------------------------------
# Plans
# -------------------------------

def _to_plan(row: DailyPlanEntry) -> DailyPlan:
    return DailyPlan(
        id=row.id,
        user_id=row.user_id,
        date=row.date,
        checkin_id=row.checkin_id,
        created_at=row.created_at,
        actions=[
            PlannedAction(
                id=a.id,
                template_id=a.template_id,
                title=a.title,
                description=a.description or "",
                category=a.category,
                duration=a.duration,
                status=a.status,
                anchor=a.anchor,
                simplified=bool(a.simplified),
                swapped_from=a.swapped_from,
                completed_at=a.completed_at,
            )
            for a in row.actions
        ],
    )


_ACTION_FIELDS = (
    "template_id", "title", "description", "category", "duration",
    "status", "anchor", "simplified", "swapped_from", "completed_at",
)


class PlanStore:
    def __init__(self, db: Session):
        self.db = db

    def _row(self, user_id: str, day: date) -> Optional[DailyPlanEntry]:
        return (
            self.db.query(DailyPlanEntry)
            .filter(DailyPlanEntry.user_id == user_id, DailyPlanEntry.date == day)
            .first()
        )

    def get_plan(self, user_id: str, day: date) -> Optional[DailyPlan]:
        row = self._row(user_id, day)
        return _to_plan(row) if row else None

    def save_plan(self, plan: DailyPlan) -> DailyPlan:
        """
        Write the plan's current contents. A different plan already
        stored for the same day is replaced.
        """
        try:
            row = self._row(plan.user_id, plan.date)
            if row is not None and row.id != plan.id:
                self.db.delete(row)
                self.db.flush()
                row = None

            if row is None:
                row = DailyPlanEntry(
                    id=plan.id,
                    user_id=plan.user_id,
                    date=plan.date,
                    checkin_id=plan.checkin_id,
                    created_at=plan.created_at or datetime.utcnow(),
                )
                self.db.add(row)

            existing = {a.id: a for a in row.actions}
            keep = []
            for position, action in enumerate(plan.actions):
                entry = existing.get(action.id) or PlannedActionEntry(id=action.id)
                for field in _ACTION_FIELDS:
                    setattr(entry, field, getattr(action, field))
                entry.position = position
                keep.append(entry)
            row.actions = keep

            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error("⚠️ Failed to save plan %s: %s", plan.id, str(e))
            raise

        self.db.refresh(row)
        return _to_plan(row)

    def recently_used_template_ids(self, user_id: str, today: date, days: int = 3) -> set:
        since = today - timedelta(days=days)
        rows = (
            self.db.query(PlannedActionEntry.template_id)
            .join(DailyPlanEntry, PlannedActionEntry.plan_id == DailyPlanEntry.id)
            .filter(
                DailyPlanEntry.user_id == user_id,
                DailyPlanEntry.date >= since,
                DailyPlanEntry.date < today,
            )
            .all()
        )
        return {r[0] for r in rows if r[0]}

    def plans_between(self, user_id: str, start: date, end: date) -> List[DailyPlan]:
        rows = (
            self.db.query(DailyPlanEntry)
            .filter(DailyPlanEntry.user_id == user_id, DailyPlanEntry.date >= start, DailyPlanEntry.date <= end)
            .order_by(DailyPlanEntry.date.asc())
            .all()
        )
        return [_to_plan(r) for r in rows]


# -------------------------------
# Action catalogue
# -------------------------------

class ActionCatalog:
    def __init__(self, db: Session):
        self.db = db

    def active_templates(self) -> List[ActionTemplate]:
        rows = (
            self.db.query(ActionTemplateEntry)
            .filter(ActionTemplateEntry.is_active.is_(True))
            .order_by(ActionTemplateEntry.id.asc())
            .all()
        )
        return [
            ActionTemplate(
                id=r.id,
                title=r.title,
                description=r.description or "",
                category=r.category,
                duration=r.duration,
                target_metrics=r.target_metrics or [],
                focus_modules=r.focus_modules or [],
                difficulty=r.difficulty,
                is_active=bool(r.is_active),
            )
            for r in rows
        ]

    def seed(self, templates: List[ActionTemplate]) -> int:
        """Insert templates that are not in the catalogue yet."""
        existing = {r[0] for r in self.db.query(ActionTemplateEntry.id).all()}
        added = 0
        for template in templates:
            if template.id in existing:
                continue
            data = template.model_dump(mode="json")
            self.db.add(ActionTemplateEntry(
                id=template.id,
                title=template.title,
                description=template.description,
                category=template.category,
                duration=template.duration,
                target_metrics=data["target_metrics"],
                focus_modules=template.focus_modules,
                difficulty=template.difficulty,
                is_active=template.is_active,
            ))
            added += 1
        _commit(self.db, "action catalogue")
        return added


# -------------------------------
# Per-user state
# -------------------------------

class AdaptiveModeStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> AdaptiveModeState:
        row = self.db.get(AdaptiveModeRecord, user_id)
        if not row:
            return AdaptiveModeState()
        return AdaptiveModeState(
            active=bool(row.active),
            activated_date=row.activated_date,
            activated_at=row.activated_at,
            deactivated_at=row.deactivated_at,
            triggers=[BadDayTrigger.model_validate(t) for t in (row.triggers or [])],
        )

    def save(self, user_id: str, state: AdaptiveModeState) -> AdaptiveModeState:
        row = self.db.get(AdaptiveModeRecord, user_id)
        if not row:
            row = AdaptiveModeRecord(user_id=user_id)
            self.db.add(row)
        row.active = state.active
        row.activated_date = state.activated_date
        row.activated_at = state.activated_at
        row.deactivated_at = state.deactivated_at
        row.triggers = [t.model_dump(mode="json") for t in state.triggers]
        _commit(self.db, "adaptive mode")
        return state


class AdherenceStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> AdherenceState:
        row = self.db.get(AdherenceRecord, user_id)
        if not row:
            return AdherenceState()
        return AdherenceState.model_validate({
            "category_stats": row.category_stats or {},
            "action_stats": row.action_stats or {},
        })

    def save(self, user_id: str, state: AdherenceState) -> AdherenceState:
        data = state.model_dump(mode="json")
        row = self.db.get(AdherenceRecord, user_id)
        if not row:
            row = AdherenceRecord(user_id=user_id)
            self.db.add(row)
        row.category_stats = data["category_stats"]
        row.action_stats = data["action_stats"]
        _commit(self.db, "adherence")
        return state


class AlertStore:
    """At most one live alert per user."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[ProactiveAlert]:
        row = self.db.get(LiveAlert, user_id)
        if not row or not row.payload:
            return None
        alert = ProactiveAlert.model_validate(row.payload)
        return alert.model_copy(update={"dismissed": bool(row.dismissed)})

    def replace(self, user_id: str, alert: Optional[ProactiveAlert]) -> None:
        row = self.db.get(LiveAlert, user_id)
        if not row:
            row = LiveAlert(user_id=user_id)
            self.db.add(row)
        row.payload = alert.model_dump(mode="json") if alert else None
        row.dismissed = False
        row.generated_at = (alert.generated_at if alert else None) or datetime.utcnow()
        _commit(self.db, "alert")

    def dismiss(self, user_id: str) -> bool:
        row = self.db.get(LiveAlert, user_id)
        if not row or not row.payload:
            return False
        row.dismissed = True
        _commit(self.db, "alert dismissal")
        return True


class ProfileStore:
    def __init__(self, db: Session):
        self.db = db

    def focus_areas(self, user_id: str) -> List[str]:
        row = self.db.get(UserProfile, user_id)
        return list(row.focus_areas or []) if row else []

    def set_focus_areas(self, user_id: str, focus_areas: List[str]) -> List[str]:
        row = self.db.get(UserProfile, user_id)
        if not row:
            row = UserProfile(user_id=user_id, created_at=datetime.utcnow())
            self.db.add(row)
        # Keep order, drop duplicates
        row.focus_areas = list(dict.fromkeys(focus_areas))
        _commit(self.db, "focus areas")
        return row.focus_areas


class WeeklySummaryStore:
    def __init__(self, db: Session):
        self.db = db

    def save(self, summary: WeeklySummary) -> WeeklySummary:
        data = summary.model_dump(mode="json")
        row = (
            self.db.query(WeeklySummaryEntry)
            .filter(
                WeeklySummaryEntry.user_id == summary.user_id,
                WeeklySummaryEntry.week_start == summary.week_start,
            )
            .first()
        )
        if not row:
            row = WeeklySummaryEntry(user_id=summary.user_id, week_start=summary.week_start)
            self.db.add(row)

        row.week_end = summary.week_end
        row.checkin_count = summary.checkin_count
        row.metrics = data["metrics"]
        row.completion_rate = summary.completion_rate
        row.checkin_streak = summary.checkin_streak
        row.longest_streak = summary.longest_streak
        row.top_actions = data["top_actions"]
        row.insights = summary.insights
        row.created_at = datetime.utcnow()
        _commit(self.db, "weekly summary")
        return summary.model_copy(update={"created_at": row.created_at})

    def latest(self, user_id: str) -> Optional[WeeklySummary]:
        row = (
            self.db.query(WeeklySummaryEntry)
            .filter(WeeklySummaryEntry.user_id == user_id)
            .order_by(WeeklySummaryEntry.week_start.desc())
            .first()
        )
        if not row:
            return None
        return WeeklySummary.model_validate({
            "user_id": row.user_id,
            "week_start": row.week_start,
            "week_end": row.week_end,
            "checkin_count": row.checkin_count or 0,
            "metrics": row.metrics or {},
            "completion_rate": row.completion_rate or 0,
            "checkin_streak": row.checkin_streak or 0,
            "longest_streak": row.longest_streak or 0,
            "top_actions": row.top_actions or [],
            "insights": row.insights or [],
            "created_at": row.created_at,
        })


class Stores:
    """All stores over one session."""

    def __init__(self, db: Session):
        self.db = db
        self.checkins = CheckinStore(db)
        self.crisis_events = CrisisEventStore(db)
        self.trigger_dates = TriggerDateStore(db)
        self.plans = PlanStore(db)
        self.catalog = ActionCatalog(db)
        self.adaptive_mode = AdaptiveModeStore(db)
        self.adherence = AdherenceStore(db)
        self.alerts = AlertStore(db)
        self.profiles = ProfileStore(db)
        self.summaries = WeeklySummaryStore(db)


def get_stores(db: Session = Depends(get_db)) -> Stores:
    return Stores(db)
