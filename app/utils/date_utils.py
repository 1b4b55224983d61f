# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

from datetime import date, timedelta
from typing import Iterable, Optional, Tuple

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def day_name(weekday: int) -> str:
    return DAY_NAMES[weekday]


def matches_trigger_date(day: date, trigger) -> bool:
    """Exact match, or (month, day) match when the trigger repeats annually."""
    if day == trigger.date:
        return True
    if trigger.repeat_annually:
        return (day.month, day.day) == (trigger.date.month, trigger.date.day)
    return False


def matching_trigger(day: date, triggers: Iterable):
    return next((t for t in triggers if matches_trigger_date(day, t)), None)


def next_occurrence(trigger, today: date) -> Optional[date]:
    """
    The trigger's next date on or after `today`.

    One-off dates in the past have no next occurrence. A repeating
    Feb 29 only lands in leap years.
    """
    if not trigger.repeat_annually:
        return trigger.date if trigger.date >= today else None

    for year in range(today.year, today.year + 9):
        try:
            candidate = trigger.date.replace(year=year)
        except ValueError:
            continue  # Feb 29 outside a leap year
        if candidate >= today:
            return candidate
    return None


def days_until(trigger, today: date) -> Optional[int]:
    occurrence = next_occurrence(trigger, today)
    if occurrence is None:
        return None
    return (occurrence - today).days


def nearest_upcoming(triggers: Iterable, today: date, window_days: int) -> Optional[Tuple[object, int]]:
    """Closest trigger within [0, window_days] days, ties keep input order."""
    best = None
    for trigger in triggers:
        days = days_until(trigger, today)
        if days is None or days > window_days:
            continue
        if best is None or days < best[1]:
            best = (trigger, days)
    return best


def week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())
