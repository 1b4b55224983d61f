# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from app.schemas.crisis_schemas import CrisisSeverity
from app.schemas.prediction_schemas import (
    AlertSeverity,
    AlertType,
    MoodPrediction,
    ProactiveAlert,
    TriggerPattern,
)
from app.utils.date_utils import day_name, nearest_upcoming

TRIGGER_WINDOW_DAYS = 2
RECOVERY_WINDOW = 3
RECOVERY_LOW_MOOD = 2
RECOVERY_MIN_LOWS = 2
HARD_DAY_MOOD = 3
HARD_DAY_CONFIDENCE = 0.6

LIGHTER_PLAN_ACTIVE = "Your lighter plan is already in place"


def _trigger_alert(trigger, days: int) -> ProactiveAlert:
    if days == 0:
        message = f"Today is {trigger.label}. We're here for you with extra support."
    elif days == 1:
        message = f"Tomorrow is {trigger.label}. Would you like to prepare a lighter plan?"
    else:
        message = f"{trigger.label} is in {days} days. Let's prepare together."

    return ProactiveAlert(
        type=AlertType.trigger_approaching,
        title="Upcoming Difficult Date",
        message=message,
        severity=AlertSeverity.critical if days <= 1 else AlertSeverity.warning,
        actionable=True,
        suggested_action="Activate lighter plan for tomorrow",
        trigger_date=trigger.date,
        trigger_date_id=getattr(trigger, "id", None),
    )


def generate(
    prediction: Optional[MoodPrediction],
    patterns: Sequence[TriggerPattern],
    trigger_dates: Sequence,
    recent_history: Sequence,
    today: Optional[date] = None,
    mode_active: bool = False,
    now: Optional[datetime] = None,
) -> Optional[ProactiveAlert]:
    """
    Pick at most one alert, first match wins:
    upcoming trigger date, recovery, hard tomorrow, high-severity pattern.
    `now` stamps `generated_at`.
    """
    today = today or (now or datetime.utcnow()).date()
    alert = _pick_alert(prediction, patterns, trigger_dates, recent_history, today)
    if alert is None:
        return None

    if mode_active and alert.actionable:
        alert = alert.model_copy(update={"suggested_action": LIGHTER_PLAN_ACTIVE})

    return alert.model_copy(update={"generated_at": now})


def _pick_alert(prediction, patterns, trigger_dates, recent_history, today) -> Optional[ProactiveAlert]:
    # 1️⃣ Difficult date coming up
    upcoming = nearest_upcoming(trigger_dates, today, TRIGGER_WINDOW_DAYS)
    if upcoming:
        trigger, days = upcoming
        return _trigger_alert(trigger, days)

    # 2️⃣ Already struggling
    recent_lows = [r for r in list(recent_history)[:RECOVERY_WINDOW] if r.mood <= RECOVERY_LOW_MOOD]
    if len(recent_lows) >= RECOVERY_MIN_LOWS:
        return ProactiveAlert(
            type=AlertType.recovery_mode,
            title="Recovery Support Active",
            message=(
                "We noticed you've been having a tough time. Your plan is adjusted "
                "to focus on what matters most."
            ),
            severity=AlertSeverity.warning,
            actionable=True,
            suggested_action="Continue with lighter plan",
        )

    # 3️⃣ Forecast says tomorrow is hard
    if prediction and prediction.predicted_mood < HARD_DAY_MOOD and prediction.confidence > HARD_DAY_CONFIDENCE:
        tomorrow_name = day_name((today + timedelta(days=1)).weekday())
        return ProactiveAlert(
            type=AlertType.tomorrow_hard,
            title="Tomorrow Might Be Challenging",
            message=f"{tomorrow_name}s tend to be harder for you. Would you like a lighter, more manageable plan?",
            severity=AlertSeverity.info,
            actionable=True,
            suggested_action="Accept lighter plan for tomorrow",
        )

    # 4️⃣ Recurring pattern, only when there is no forecast to go on
    high_pattern = next((p for p in patterns if p.severity == CrisisSeverity.high), None)
    if high_pattern and prediction is None:
        return ProactiveAlert(
            type=AlertType.pattern_detected,
            title="Pattern Noticed",
            message=f"{high_pattern.description}. We can help you prepare for these times.",
            severity=AlertSeverity.info,
            actionable=False,
        )

    return None
