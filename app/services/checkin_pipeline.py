# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
What happens after a check-in is saved.

    {crisis branch, plan branch} -> adaptive mode check -> alert refresh

The two branches run side by side and fail independently: a broken plan
never stops a crisis event from being recorded, and the other way round.
Later steps use whatever the branches managed to produce.
"""

import asyncio
import logging
import random
from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel

from app.schemas.adaptive_schemas import AdaptiveModeState
from app.schemas.checkin_schemas import CheckinCreateRequest, CheckinRecord
from app.schemas.crisis_schemas import (
    CrisisDetectionResult,
    CrisisResponse,
    CrisisSeverity,
    CrisisTriggerType,
)
from app.schemas.plan_schemas import DailyPlan
from app.schemas.prediction_schemas import ProactiveAlert
from app.services import adaptive_mode_controller, adherence_tracker, crisis_detector, plan_generator
from app.services.prediction_service import refresh_predictions
from app.services.stores import Stores
from app.utils.config import CRISIS_COOLDOWN_HOURS, RECENT_HISTORY_DAYS
from app.utils.crisis_resources import EXPLICIT_REQUEST_RESOURCE_IDS, get_crisis_response, resource_ids_for

logger = logging.getLogger(__name__)

METHOD_USER_REQUEST = "user_request"


class CheckinOutcome(BaseModel):
    checkin: CheckinRecord
    crisis: CrisisDetectionResult
    crisis_event_id: Optional[str] = None
    crisis_response: Optional[CrisisResponse] = None
    plan: Optional[DailyPlan] = None
    mode: Optional[AdaptiveModeState] = None
    alert: Optional[ProactiveAlert] = None

    crisis_error: Optional[str] = None
    plan_error: Optional[str] = None
    mode_error: Optional[str] = None
    alert_error: Optional[str] = None


async def record_crisis(
    stores: Stores,
    user_id: str,
    checkin_id: Optional[str],
    verdict: CrisisDetectionResult,
    cooldown_hours: int = CRISIS_COOLDOWN_HOURS,
) -> Optional[str]:
    """Persist a detected crisis unless one was already recorded inside the cooldown."""
    if not verdict.detected:
        return None

    if stores.crisis_events.has_recent_crisis_event(user_id, cooldown_hours):
        logger.info("⏳ Crisis event for user %s suppressed by cooldown", user_id)
        return None

    return stores.crisis_events.create_crisis_event(
        user_id,
        checkin_id,
        verdict,
        resources_shown=resource_ids_for(verdict.severity),
        follow_up_scheduled=verdict.severity == CrisisSeverity.high,
    )


async def build_plan(
    stores: Stores,
    user_id: str,
    record: CheckinRecord,
    rng: Optional[random.Random] = None,
) -> DailyPlan:
    templates = stores.catalog.active_templates()
    focus_areas = stores.profiles.focus_areas(user_id)
    recently_used = stores.plans.recently_used_template_ids(user_id, record.date, days=plan_generator.RECENT_DAYS)
    adherence = stores.adherence.get(user_id)

    plan = plan_generator.generate_plan(
        user_id,
        record.date,
        record.metrics,
        templates,
        focus_areas=focus_areas,
        recently_used=recently_used,
        adherence=adherence,
        checkin_id=record.id,
        rng=rng,
    )
    plan, adherence = adherence_tracker.set_plan(plan, adherence)

    plan = stores.plans.save_plan(plan)
    stores.adherence.save(user_id, adherence)
    logger.info("🗒️ Plan %s with %s actions for user %s", plan.id, plan.total_count, user_id)
    return plan


def sos_window_start(state: AdaptiveModeState, day: date) -> datetime:
    """Start of `day`, or the last deactivation if that came later."""
    midnight = datetime.combine(day, time.min)
    if state.deactivated_at and state.deactivated_at > midnight:
        return state.deactivated_at
    return midnight


def run_mode_check(
    stores: Stores,
    user_id: str,
    now: datetime,
    sos_used_now: bool = False,
    day: Optional[date] = None,
) -> AdaptiveModeState:
    """
    One adaptive mode pass for the user's `day` (the check-in date; defaults
    to `now`'s date), saving any transition and trimming that day's plan.
    """
    today = day or now.date()
    state = stores.adaptive_mode.get(user_id)
    today_checkin = stores.checkins.get_for_date(user_id, today)
    plan = stores.plans.get_plan(user_id, today)
    trigger_dates = stores.trigger_dates.list(user_id)

    sos_used = sos_used_now or stores.crisis_events.sos_used_since(user_id, sos_window_start(state, today))

    result = adaptive_mode_controller.check_conditions(
        state, today_checkin, sos_used, plan, trigger_dates, now, today=today,
    )
    if result.activated or result.deactivated:
        stores.adaptive_mode.save(user_id, result.state)

    if result.state.active and plan is not None and plan.total_count > 1:
        stores.plans.save_plan(adaptive_mode_controller.adjust_plan(plan))

    return result.state


def _describe(error: BaseException) -> str:
    return f"{type(error).__name__}: {error}"


async def process_checkin(
    stores: Stores,
    user_id: str,
    payload: CheckinCreateRequest,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> CheckinOutcome:
    now = now or datetime.utcnow()
    day = payload.date or now.date()

    record = stores.checkins.add(
        user_id,
        day,
        payload.to_metrics(),
        journal_text=payload.journal_text,
        context_tags=payload.context_tags,
        created_at=now,
    )
    history = stores.checkins.get_recent_checkins(user_id, RECENT_HISTORY_DAYS, today=day)

    # Pure and cheap; the verdict survives even if saving it fails
    verdict = crisis_detector.detect(payload.journal_text, record.metrics, history)
    outcome = CheckinOutcome(checkin=record, crisis=verdict)
    if verdict.detected:
        outcome.crisis_response = get_crisis_response(verdict.severity)
        logger.warning("🚨 Crisis signal for user %s: %s via %s", user_id, verdict.severity.value, verdict.detection_method)

    crisis_result, plan_result = await asyncio.gather(
        record_crisis(stores, user_id, record.id, verdict),
        build_plan(stores, user_id, record, rng),
        return_exceptions=True,
    )

    if isinstance(crisis_result, BaseException):
        outcome.crisis_error = _describe(crisis_result)
        logger.error("⚠️ Crisis event not saved for user %s: %s", user_id, outcome.crisis_error)
    else:
        outcome.crisis_event_id = crisis_result

    if isinstance(plan_result, BaseException):
        outcome.plan_error = _describe(plan_result)
        logger.error("⚠️ Plan generation failed for user %s: %s", user_id, outcome.plan_error)
    else:
        outcome.plan = plan_result

    sos_now = verdict.detected and verdict.severity.rank >= CrisisSeverity.medium.rank
    try:
        outcome.mode = run_mode_check(stores, user_id, now, sos_used_now=sos_now, day=day)
        if outcome.plan is not None:
            outcome.plan = stores.plans.get_plan(user_id, day)
    except Exception as e:
        stores.db.rollback()
        outcome.mode_error = _describe(e)
        logger.error("⚠️ Adaptive mode check failed for user %s: %s", user_id, outcome.mode_error)

    try:
        outcome.alert = refresh_predictions(stores, user_id, today=day, now=now).alert
    except Exception as e:
        stores.db.rollback()
        outcome.alert_error = _describe(e)
        logger.error("⚠️ Alert refresh failed for user %s: %s", user_id, outcome.alert_error)

    return outcome


class SupportOutcome(BaseModel):
    event_id: str
    response: CrisisResponse
    mode: Optional[AdaptiveModeState] = None


def request_support(stores: Stores, user_id: str, now: Optional[datetime] = None) -> SupportOutcome:
    """
    The user asked for help. Always recorded, cooldown or not, and counts
    as SOS for today's mode check.
    """
    now = now or datetime.utcnow()
    verdict = CrisisDetectionResult(
        detected=True,
        severity=CrisisSeverity.medium,
        trigger_type=CrisisTriggerType.explicit_request,
        detection_method=METHOD_USER_REQUEST,
    )
    event_id = stores.crisis_events.create_crisis_event(
        user_id,
        None,
        verdict,
        resources_shown=list(EXPLICIT_REQUEST_RESOURCE_IDS),
        follow_up_scheduled=True,
    )
    response = get_crisis_response(CrisisSeverity.medium)
    outcome = SupportOutcome(event_id=event_id, response=response)

    try:
        outcome.mode = run_mode_check(stores, user_id, now, sos_used_now=True)
    except Exception as e:
        stores.db.rollback()
        logger.error("⚠️ Adaptive mode check failed for user %s: %s", user_id, _describe(e))

    return outcome
