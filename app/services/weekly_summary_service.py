# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
from collections import OrderedDict
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from app.models.database import SessionLocal
from app.schemas.checkin_schemas import INVERTED_METRICS, METRIC_NAMES
from app.schemas.plan_schemas import ActionStatus, DailyPlan
from app.schemas.summary_schemas import MetricSummary, MetricTrend, TopAction, WeeklySummary
from app.services.stores import Stores
from app.utils.date_utils import week_start as monday_of

logger = logging.getLogger(__name__)

TREND_THRESHOLD = 0.5
HIGH_COMPLETION = 80
LOW_COMPLETION = 50
LOW_MOOD_AVERAGE = 4
MAX_INSIGHTS = 3
MAX_TOP_ACTIONS = 5


def summarize_metric(metric: str, values: Sequence[int]) -> MetricSummary:
    """`values` oldest first. The trend compares the second half of the week with the first."""
    if not values:
        return MetricSummary(average=0, min=0, max=0)

    half = len(values) // 2
    first, second = values[:half], values[half:]
    first_avg = sum(first) / len(first) if first else 0
    second_avg = sum(second) / len(second)

    trend = MetricTrend.stable
    # A single check-in has nothing to compare against
    if first and abs(second_avg - first_avg) > TREND_THRESHOLD:
        better = second_avg < first_avg if metric in INVERTED_METRICS else second_avg > first_avg
        trend = MetricTrend.improving if better else MetricTrend.declining

    return MetricSummary(
        average=round(sum(values) / len(values), 1),
        min=min(values),
        max=max(values),
        trend=trend,
    )


def summarize_metrics(checkins: Sequence) -> Dict[str, MetricSummary]:
    ordered = sorted(checkins, key=lambda c: c.date)
    return {name: summarize_metric(name, [getattr(c, name) for c in ordered]) for name in METRIC_NAMES}


def completion_rate(plans: Sequence[DailyPlan]) -> int:
    total = sum(p.total_count for p in plans)
    if total == 0:
        return 0
    completed = sum(p.completed_count for p in plans)
    return round(completed / total * 100)


def checkin_streaks(dates: Sequence[date], as_of: date) -> Tuple[int, int]:
    """
    (current, longest) runs of consecutive check-in days. `dates` is most
    recent first. The current run counts only if it reaches `as_of` or the
    day before it.
    """
    days = sorted(set(dates), reverse=True)
    if not days:
        return 0, 0

    current = 0
    if days[0] in (as_of, as_of - timedelta(days=1)):
        current = 1
        for prev, day in zip(days, days[1:]):
            if prev - day != timedelta(days=1):
                break
            current += 1

    longest = run = 1
    for prev, day in zip(days, days[1:]):
        run = run + 1 if prev - day == timedelta(days=1) else 1
        longest = max(longest, run)

    return current, longest


def top_actions(plans: Sequence[DailyPlan], limit: int = MAX_TOP_ACTIONS) -> List[TopAction]:
    counts = OrderedDict()
    for plan in plans:
        for action in plan.actions:
            if action.status != ActionStatus.completed:
                continue
            key = action.template_id or action.title
            if key not in counts:
                counts[key] = TopAction(title=action.title, category=action.category.value, completed_count=0)
            counts[key].completed_count += 1

    ranked = sorted(counts.values(), key=lambda a: a.completed_count, reverse=True)
    return ranked[:limit]


def generate_insights(metrics: Dict[str, MetricSummary], rate: int) -> List[str]:
    insights = []

    for name, summary in metrics.items():
        if summary.trend == MetricTrend.improving:
            insights.append(f"Your {name} has been improving this week!")

    if rate >= HIGH_COMPLETION:
        insights.append("Great job completing your action plans!")
    elif 0 < rate < LOW_COMPLETION:
        insights.append("Try to complete more actions next week for better results.")

    mood = metrics.get("mood")
    if mood and mood.average <= LOW_MOOD_AVERAGE:
        insights.append("Your mood has been lower than usual. Consider reaching out for support.")

    return insights[:MAX_INSIGHTS]


def build_weekly_summary(
    stores: Stores,
    user_id: str,
    week_start: date,
    as_of: Optional[date] = None,
) -> Optional[WeeklySummary]:
    """Summarise Monday..Sunday of `week_start`'s week. `None` when the user never checked in that week."""
    week_start = monday_of(week_start)
    week_end = week_start + timedelta(days=6)
    as_of = as_of or week_end + timedelta(days=1)

    checkins = stores.checkins.get_between(user_id, week_start, week_end)
    if not checkins:
        return None

    plans = stores.plans.plans_between(user_id, week_start, week_end)
    metrics = summarize_metrics(checkins)
    rate = completion_rate(plans)
    current, longest = checkin_streaks(stores.checkins.checkin_dates(user_id), as_of)

    return WeeklySummary(
        user_id=user_id,
        week_start=week_start,
        week_end=week_end,
        checkin_count=len(checkins),
        metrics=metrics,
        completion_rate=rate,
        checkin_streak=current,
        longest_streak=longest,
        top_actions=top_actions(plans),
        insights=generate_insights(metrics, rate),
    )


def generate_weekly_summary(stores: Stores, user_id: str, week_start: date) -> Optional[WeeklySummary]:
    summary = build_weekly_summary(stores, user_id, week_start)
    if summary is None:
        logger.info("📭 No check-ins for user %s in week of %s, skipping summary", user_id, week_start)
        return None
    return stores.summaries.save(summary)


def generate_all_weekly_summaries():
    """Monday job: summarise last week for everyone who checked in during it."""
    db = SessionLocal()
    last_week = monday_of(datetime.utcnow().date()) - timedelta(days=7)
    successful = failed = 0
    try:
        stores = Stores(db)
        for user_id in stores.checkins.active_user_ids(last_week):
            try:
                if generate_weekly_summary(stores, user_id, last_week):
                    successful += 1
            except Exception as e:
                db.rollback()
                failed += 1
                logger.error("⚠️ Weekly summary failed for user %s: %s", user_id, str(e))

        logger.info("📊 Weekly summaries generated: %s successful, %s failed", successful, failed)
    finally:
        db.close()
