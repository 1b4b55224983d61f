# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
The only place plan contents change.

Each operation takes the day's plan and the user's `AdherenceState` and
returns updated copies; inputs are never mutated. Persisting the result
is up to the caller.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from app.schemas.plan_schemas import (
    ACTION_CATEGORIES,
    ActionStats,
    ActionStatus,
    AdherenceInsight,
    AdherenceState,
    CategoryStats,
    DailyPlan,
    HabitAnchor,
    InsightType,
    PlannedAction,
)
from app.services.exceptions import ActionNotFoundError
from app.utils.action_library import HABIT_ANCHORS, get_anchor

logger = logging.getLogger(__name__)

SKIP_THRESHOLD = 2
ENCOURAGE_MIN_COMPLETIONS = 3

CATEGORY_ANCHOR_TIME = {
    "coping": "morning",
    "lifestyle": "afternoon",
    "connection": "evening",
}


def _copy(plan: DailyPlan, adherence: AdherenceState) -> Tuple[DailyPlan, AdherenceState]:
    return plan.model_copy(deep=True), adherence.model_copy(deep=True)


def _locate(plan: DailyPlan, action_id: str) -> int:
    for index, action in enumerate(plan.actions):
        if action.id == action_id:
            return index
    raise ActionNotFoundError(action_id)


def _category(adherence: AdherenceState, category) -> CategoryStats:
    return adherence.category_stats.setdefault(category, CategoryStats())


def _action(adherence: AdherenceState, title: str) -> ActionStats:
    return adherence.action_stats.setdefault(title, ActionStats())


def set_plan(plan: DailyPlan, adherence: AdherenceState) -> Tuple[DailyPlan, AdherenceState]:
    """Record a freshly generated plan's assignments."""
    plan, adherence = _copy(plan, adherence)
    for action in plan.actions:
        _category(adherence, action.category).total_assigned += 1
        _action(adherence, action.title).times_assigned += 1
    return plan, adherence


def complete_action(
    plan: DailyPlan,
    adherence: AdherenceState,
    action_id: str,
    now: Optional[datetime] = None,
) -> Tuple[DailyPlan, AdherenceState]:
    """
    Mark an action done. Completing an already completed action toggles
    it back to pending, which is not a completion event.
    """
    plan, adherence = _copy(plan, adherence)
    index = _locate(plan, action_id)
    action = plan.actions[index]
    stats = _category(adherence, action.category)
    action_stats = _action(adherence, action.title)

    if action.status == ActionStatus.completed:
        stats.total_completed = max(0, stats.total_completed - 1)
        action_stats.times_completed = max(0, action_stats.times_completed - 1)
        plan.actions[index] = action.model_copy(update={"status": ActionStatus.pending, "completed_at": None})
        return plan, adherence

    if action.status == ActionStatus.skipped:
        stats.total_skipped = max(0, stats.total_skipped - 1)
        action_stats.times_skipped = max(0, action_stats.times_skipped - 1)

    now = now or datetime.utcnow()
    stats.total_completed += 1
    stats.consecutive_skips = 0
    stats.needs_simplification = False
    action_stats.times_completed += 1
    action_stats.last_completed = now

    plan.actions[index] = action.model_copy(update={"status": ActionStatus.completed, "completed_at": now})
    logger.info("✅ Action completed in %s", action.category.value)
    return plan, adherence


def skip_action(plan: DailyPlan, adherence: AdherenceState, action_id: str) -> Tuple[DailyPlan, AdherenceState]:
    plan, adherence = _copy(plan, adherence)
    index = _locate(plan, action_id)
    action = plan.actions[index]

    if action.status == ActionStatus.skipped:
        return plan, adherence

    stats = _category(adherence, action.category)
    action_stats = _action(adherence, action.title)

    if action.status == ActionStatus.completed:
        stats.total_completed = max(0, stats.total_completed - 1)
        action_stats.times_completed = max(0, action_stats.times_completed - 1)

    stats.total_skipped += 1
    stats.consecutive_skips += 1
    if stats.consecutive_skips >= SKIP_THRESHOLD:
        stats.needs_simplification = True
    action_stats.times_skipped += 1

    plan.actions[index] = action.model_copy(update={"status": ActionStatus.skipped, "completed_at": None})
    logger.info("⏭️ Action skipped in %s (%s in a row)", action.category.value, stats.consecutive_skips)
    return plan, adherence


def swap_action(plan: DailyPlan, action_id: str, replacement: PlannedAction) -> DailyPlan:
    """Put `replacement` in the swapped action's slot, keeping plan order."""
    plan = plan.model_copy(deep=True)
    index = _locate(plan, action_id)
    plan.actions[index] = replacement
    return plan


def set_anchor(plan: DailyPlan, action_id: str, anchor_id: str) -> DailyPlan:
    anchor = get_anchor(anchor_id)
    if anchor is None:
        raise ValueError(f"Unknown anchor '{anchor_id}'")

    plan = plan.model_copy(deep=True)
    index = _locate(plan, action_id)
    plan.actions[index] = plan.actions[index].model_copy(update={"anchor": anchor.label})
    return plan


def suggest_anchor(plan: DailyPlan, action_id: str) -> Optional[HabitAnchor]:
    """Coping fits mornings, lifestyle afternoons, connection evenings."""
    action = plan.actions[_locate(plan, action_id)]
    used = {a.anchor for a in plan.actions if a.anchor}
    unused = [a for a in HABIT_ANCHORS if a.label not in used]

    preferred_time = CATEGORY_ANCHOR_TIME.get(action.category.value)
    match = next((a for a in unused if a.time == preferred_time), None)
    if match:
        return match
    return unused[0] if unused else None


def check_adherence(plan: Optional[DailyPlan], adherence: AdherenceState) -> List[AdherenceInsight]:
    insights: List[AdherenceInsight] = []

    for category in ACTION_CATEGORIES:
        if adherence.stats_for(category).needs_simplification:
            insights.append(AdherenceInsight(
                type=InsightType.simplify,
                category=category,
                message=(
                    f"We noticed you've been skipping {category.value} actions. "
                    "Would you like to try a simpler version?"
                ),
            ))

    if plan is not None:
        unanchored = next(
            (a for a in plan.actions if a.status == ActionStatus.pending and not a.anchor),
            None,
        )
        if unanchored:
            insights.append(AdherenceInsight(
                type=InsightType.anchor,
                action_id=unanchored.id,
                message=f'Tip: Link "{unanchored.title}" to a daily routine for better follow-through.',
                suggested_anchor=suggest_anchor(plan, unanchored.id),
            ))

    going_well = next(
        (
            c for c in ACTION_CATEGORIES
            if adherence.stats_for(c).consecutive_skips == 0
            and adherence.stats_for(c).total_completed > ENCOURAGE_MIN_COMPLETIONS
        ),
        None,
    )
    if going_well:
        insights.append(AdherenceInsight(
            type=InsightType.encourage,
            category=going_well,
            message=f"Great job with your {going_well.value} actions! You're building a strong habit.",
        ))

    return insights
