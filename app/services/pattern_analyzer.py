# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
Day-of-week statistics, next-day mood forecast and recurring trigger
patterns, all computed from a check-in history ordered most recent first.

Too little history is a normal state for new users, so every analysis
answers with an empty result instead of raising.
"""

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

from app.schemas.checkin_schemas import CheckinRecord
from app.schemas.crisis_schemas import CrisisSeverity
from app.schemas.prediction_schemas import (
    DayOfWeekPattern,
    MoodPrediction,
    TriggerPattern,
    TriggerPatternType,
)
from app.utils.date_utils import day_name

MIN_RECORDS_FOR_WEEKDAYS = 7
MIN_RECORDS_FOR_PREDICTION = 3
MIN_WEEKDAY_SAMPLES = 3

RECENT_WINDOW = 3
WEEKDAY_TREND_WEIGHT = 0.3
RECENT_TREND_WEIGHT = 0.5
TREND_THRESHOLD = 1
MAX_WEEKDAY_CONFIDENCE = 0.85
TREND_ONLY_CONFIDENCE = 0.5

# Forecasts stay in the lower half of the 1..10 scale
PREDICTION_MIN = 1
PREDICTION_MAX = 5

LOW_MOOD_DAY = 2
STRESS_SPIKE_LEVEL = 4
MIN_STRESS_SPIKES = 3


def analyze_day_of_week(history: Sequence[CheckinRecord]) -> List[DayOfWeekPattern]:
    if len(history) < MIN_RECORDS_FOR_WEEKDAYS:
        return []

    groups = defaultdict(list)
    for record in history:
        groups[record.date.weekday()].append(record)

    patterns = []
    for weekday in range(7):
        records = groups.get(weekday)
        if not records:
            continue

        avg_mood = sum(r.mood for r in records) / len(records)
        avg_stress = sum(r.stress for r in records) / len(records)

        patterns.append(DayOfWeekPattern(
            day_of_week=weekday,
            day_name=day_name(weekday),
            average_mood=round(avg_mood, 1),
            average_stress=round(avg_stress, 1),
            checkins_count=len(records),
            is_harder=avg_mood < 3 or avg_stress > 3,
        ))

    return patterns


def predict_tomorrow(history: Sequence[CheckinRecord], today: Optional[date] = None) -> Optional[MoodPrediction]:
    if len(history) < MIN_RECORDS_FOR_PREDICTION:
        return None

    today = today or datetime.utcnow().date()
    tomorrow_weekday = (today + timedelta(days=1)).weekday()

    day_patterns = analyze_day_of_week(history)
    tomorrow_pattern = next((p for p in day_patterns if p.day_of_week == tomorrow_weekday), None)

    recent = list(history[:RECENT_WINDOW])
    recent_avg = sum(r.mood for r in recent) / len(recent)
    trend = recent[0].mood - recent[-1].mood

    if tomorrow_pattern and tomorrow_pattern.checkins_count >= MIN_WEEKDAY_SAMPLES:
        predicted = tomorrow_pattern.average_mood
        based_on_trend = False
        if abs(trend) > TREND_THRESHOLD:
            predicted += trend * WEEKDAY_TREND_WEIGHT
            based_on_trend = True

        confidence = min(tomorrow_pattern.checkins_count / 10, MAX_WEEKDAY_CONFIDENCE)
        reasoning = f"Based on {tomorrow_pattern.checkins_count} {tomorrow_pattern.day_name}s"
        if based_on_trend:
            reasoning += " and recent trend"
        based_on_weekday = True
    else:
        predicted = recent_avg + trend * RECENT_TREND_WEIGHT
        confidence = TREND_ONLY_CONFIDENCE
        reasoning = "Based on recent check-ins"
        based_on_weekday = False
        based_on_trend = True

    predicted = max(PREDICTION_MIN, min(PREDICTION_MAX, predicted))

    return MoodPrediction(
        predicted_mood=round(predicted, 1),
        confidence=round(confidence, 2),
        reasoning=reasoning,
        based_on_day_of_week=based_on_weekday,
        based_on_recent_trend=based_on_trend,
    )


def _scaled(value: int, high_at: int, medium_at: int) -> CrisisSeverity:
    if value >= high_at:
        return CrisisSeverity.high
    if value >= medium_at:
        return CrisisSeverity.medium
    return CrisisSeverity.low


def _hard_weekday_pattern(history) -> Optional[TriggerPattern]:
    hard_days = [
        p for p in analyze_day_of_week(history)
        if p.is_harder and p.checkins_count >= MIN_WEEKDAY_SAMPLES
    ]
    if not hard_days:
        return None

    names = ", ".join(p.day_name for p in hard_days)
    verb = "tends" if len(hard_days) == 1 else "tend"
    return TriggerPattern(
        type=TriggerPatternType.day_of_week,
        description=f"{names} {verb} to be harder",
        severity=_scaled(len(hard_days), high_at=3, medium_at=2),
        occurrences=max(p.checkins_count for p in hard_days),
        affected_days=[p.day_of_week for p in hard_days],
    )


def _consecutive_low_pattern(history) -> Optional[TriggerPattern]:
    run = 0
    max_run = 0
    runs = 0
    last_low = None

    for record in history:
        if record.mood <= LOW_MOOD_DAY:
            run += 1
            max_run = max(max_run, run)
            if last_low is None:
                last_low = record.date
        else:
            if run >= 2:
                runs += 1
            run = 0
    if run >= 2:
        runs += 1

    if runs == 0:
        return None

    noun = "period" if runs == 1 else "periods"
    return TriggerPattern(
        type=TriggerPatternType.consecutive_low,
        description=f"{runs} {noun} of consecutive low mood days",
        severity=_scaled(max_run, high_at=4, medium_at=3),
        occurrences=runs,
        last_occurred=last_low,
        max_run=max_run,
    )


def _stress_spike_pattern(history) -> Optional[TriggerPattern]:
    spikes = [r for r in history if r.stress >= STRESS_SPIKE_LEVEL]
    if len(spikes) < MIN_STRESS_SPIKES:
        return None

    return TriggerPattern(
        type=TriggerPatternType.stress_spike,
        description=f"{len(spikes)} high stress days",
        severity=_scaled(len(spikes), high_at=7, medium_at=5),
        occurrences=len(spikes),
        last_occurred=spikes[0].date,
    )


def detect_trigger_patterns(history: Sequence[CheckinRecord]) -> List[TriggerPattern]:
    if len(history) < MIN_RECORDS_FOR_WEEKDAYS:
        return []

    detectors = (_hard_weekday_pattern, _consecutive_low_pattern, _stress_spike_pattern)
    return [p for p in (detector(history) for detector in detectors) if p is not None]
