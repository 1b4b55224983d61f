# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
Normal <-> reduced-load ("bad day") mode.

The per-user `AdaptiveModeState` is passed in and a new one handed back;
nothing here keeps state between calls or touches storage.
"""

import logging
from datetime import date, datetime
from typing import List, NamedTuple, Optional, Sequence

from app.schemas.adaptive_schemas import (
    AdaptiveModeState,
    BadDayModeConfig,
    BadDayTrigger,
    BadDayTriggerType,
)
from app.schemas.plan_schemas import ActionStatus, DailyPlan, PlannedAction
from app.utils.action_library import HABIT_ANCHORS
from app.utils.date_utils import matching_trigger

logger = logging.getLogger(__name__)

LOW_MOOD_ACTIVATION = 2      # strictly below
RECOVERED_MOOD = 3           # at or above
MISSED_ACTIONS_ACTIVATION = 3
MAX_ACTIVE_DAYS = 1          # more than this many full days and the mode lapses

# Hour of day by which an anchored action counts as missed
ANCHOR_DEADLINES = {
    "morning": 12,
    "afternoon": 17,
    "evening": 21,
}
END_OF_DAY_HOUR = 21

_ANCHOR_KEYWORDS = [
    (("morning", "waking", "breakfast"), "morning"),
    (("lunch", "afternoon"), "afternoon"),
    (("dinner", "evening", "bed"), "evening"),
]

GENTLER_MESSAGES = {
    "welcome": "Today feels hard. That's okay. We're keeping things simple.",
    "plan": "Here's one small thing that might help. No pressure.",
    "incomplete": "It's okay if you can't do this right now. Tomorrow is a new day.",
    "encouragement": "You're doing your best, and that's enough.",
}

SUPPORT_PROMPTS = [
    "Would you like to talk to someone from your safety plan?",
    "Remember: This feeling is temporary. You've gotten through hard days before.",
    "Consider reaching out to a friend or using the SOS resources.",
    "Your only job today is to take care of yourself.",
    "It's okay to rest. Recovery is not linear.",
]


class ModeCheckResult(NamedTuple):
    state: AdaptiveModeState
    activated: bool
    deactivated: bool


def get_config() -> BadDayModeConfig:
    return BadDayModeConfig()


def get_gentler_message(kind: str) -> str:
    return GENTLER_MESSAGES.get(kind, GENTLER_MESSAGES["encouragement"])


def get_support_prompts() -> List[str]:
    return list(SUPPORT_PROMPTS)


def _anchor_deadline(anchor: Optional[str]) -> int:
    if not anchor:
        return END_OF_DAY_HOUR

    label = anchor.lower()
    for keywords, window in _ANCHOR_KEYWORDS:
        if any(k in label for k in keywords):
            return ANCHOR_DEADLINES[window]

    known = next((a for a in HABIT_ANCHORS if a.label.lower() == label), None)
    if known:
        return ANCHOR_DEADLINES.get(known.time, END_OF_DAY_HOUR)
    return END_OF_DAY_HOUR


def count_missed_actions(actions: Sequence[PlannedAction], now: datetime) -> int:
    """Pending actions whose anchor window has already closed."""
    return sum(
        1 for action in actions
        if action.status == ActionStatus.pending and now.hour >= _anchor_deadline(action.anchor)
    )


def evaluate_activation(
    today_checkin,
    sos_used_today: bool,
    missed_count: int,
    trigger_label: Optional[str],
    now: datetime,
) -> List[BadDayTrigger]:
    """Every reason that applies right now; an empty list means stay normal."""
    triggers = []

    if today_checkin is not None and today_checkin.mood < LOW_MOOD_ACTIVATION:
        triggers.append(BadDayTrigger(
            type=BadDayTriggerType.low_mood,
            description=f"Mood rating of {today_checkin.mood}",
            timestamp=now,
        ))

    if sos_used_today:
        triggers.append(BadDayTrigger(
            type=BadDayTriggerType.sos_used,
            description="SOS support accessed",
            timestamp=now,
        ))

    if missed_count >= MISSED_ACTIONS_ACTIVATION:
        triggers.append(BadDayTrigger(
            type=BadDayTriggerType.missed_actions,
            description=f"{missed_count} actions not completed",
            timestamp=now,
        ))

    if trigger_label:
        triggers.append(BadDayTrigger(
            type=BadDayTriggerType.trigger_date,
            description=f"Difficult date: {trigger_label}",
            timestamp=now,
        ))

    return triggers


def should_deactivate(state: AdaptiveModeState, today_checkin, today: date) -> bool:
    if not state.active or state.activated_date is None:
        return False

    days_active = (today - state.activated_date).days
    if days_active > MAX_ACTIVE_DAYS:
        return True

    if today_checkin is None or today_checkin.mood < RECOVERED_MOOD:
        return False

    if days_active >= 1:
        return True

    # Same day: only a check-in made after activation shows recovery
    created = getattr(today_checkin, "created_at", None)
    if created is None or state.activated_at is None:
        return True
    return created > state.activated_at


def activate(
    state: AdaptiveModeState,
    triggers: List[BadDayTrigger],
    now: datetime,
    today: Optional[date] = None,
) -> AdaptiveModeState:
    if state.active:
        return state.model_copy(update={"triggers": state.triggers + triggers})

    return AdaptiveModeState(
        active=True,
        activated_date=today or now.date(),
        activated_at=now,
        deactivated_at=state.deactivated_at,
        triggers=triggers,
    )


def activate_manually(state: AdaptiveModeState, now: datetime, reason: Optional[str] = None) -> AdaptiveModeState:
    trigger = BadDayTrigger(
        type=BadDayTriggerType.manual,
        description=reason or "Turned on by you",
        timestamp=now,
    )
    return activate(state, [trigger], now)


def deactivate(state: AdaptiveModeState, now: datetime) -> AdaptiveModeState:
    return AdaptiveModeState(active=False, deactivated_at=now)


def check_conditions(
    state: AdaptiveModeState,
    today_checkin,
    sos_used_today: bool,
    plan: Optional[DailyPlan],
    trigger_dates: Sequence,
    now: datetime,
    today: Optional[date] = None,
) -> ModeCheckResult:
    """
    One pass of the state machine for the user's day `today` (defaults to
    `now`'s date). Anchor windows are read off `now`, so missed actions
    only count when `today` is `now`'s date.

    After a deactivation earlier today only fresh signals count: a new
    low check-in or a new SOS. Whole-day signals (trigger date, missed
    actions) wait until tomorrow.
    """
    today = today or now.date()

    if state.active:
        if should_deactivate(state, today_checkin, today):
            logger.info("🌤️ Reduced-load mode lifted (activated %s)", state.activated_date)
            return ModeCheckResult(deactivate(state, now), activated=False, deactivated=True)
        return ModeCheckResult(state, activated=False, deactivated=False)

    deactivated_today = state.deactivated_at is not None and state.deactivated_at.date() == today

    checkin = today_checkin
    if deactivated_today and checkin is not None:
        created = getattr(checkin, "created_at", None)
        if created is None or created <= state.deactivated_at:
            checkin = None

    missed = 0
    trigger_label = None
    if not deactivated_today:
        if plan is not None and today == now.date():
            missed = count_missed_actions(plan.actions, now)
        trigger = matching_trigger(today, trigger_dates)
        trigger_label = trigger.label if trigger else None

    triggers = evaluate_activation(checkin, sos_used_today, missed, trigger_label, now)
    if not triggers:
        return ModeCheckResult(state, activated=False, deactivated=False)

    logger.info("🌧️ Reduced-load mode on: %s", ", ".join(t.type.value for t in triggers))
    return ModeCheckResult(activate(state, triggers, now, today), activated=True, deactivated=False)


def adjust_plan(plan: DailyPlan, config: Optional[BadDayModeConfig] = None) -> DailyPlan:
    """
    Cut the plan down to its easiest action: a simplified one if there is
    one, else the shortest. The rest are dropped, not skipped.
    """
    config = config or get_config()
    if not plan.actions:
        return plan

    simplest = min(plan.actions, key=lambda a: (not a.simplified, a.duration))
    return plan.model_copy(update={"actions": [simplest][:config.max_actions]})
