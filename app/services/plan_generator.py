# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
Daily plan generation: one action per category, scored against today's
check-in. Randomness comes from an injected `random.Random` so callers
(and tests) decide how repeatable a pick is.
"""

import random
import uuid
from datetime import date, datetime
from typing import Collection, Iterable, List, Optional, Sequence, Tuple

from app.schemas.checkin_schemas import CheckinMetrics
from app.schemas.plan_schemas import (
    ACTION_CATEGORIES,
    ActionCategory,
    ActionDifficulty,
    ActionTemplate,
    AdherenceState,
    DailyPlan,
    PlannedAction,
    TargetCondition,
)
from app.utils.action_library import SIMPLIFIED_ACTIONS, SIMPLIFIED_DURATION

TOP_K = 3
RECENT_DAYS = 3


def _new_id() -> str:
    return uuid.uuid4().hex


def determine_difficulty(metrics: CheckinMetrics) -> ActionDifficulty:
    concerning = sum([
        metrics.energy <= 4,
        metrics.stress >= 7,
        metrics.mood <= 4,
    ])
    if concerning >= 2:
        return ActionDifficulty.easy
    if concerning == 1:
        return ActionDifficulty.medium
    return ActionDifficulty.hard


def score_template(template: ActionTemplate, metrics: CheckinMetrics) -> int:
    score = 0
    for target in template.target_metrics:
        value = metrics.value_of(target.metric)
        if target.condition == TargetCondition.low and value <= target.threshold:
            score += (target.threshold - value + 1) * 2
        elif target.condition == TargetCondition.high and value >= target.threshold:
            score += (value - target.threshold + 1) * 2
    return score


def _narrow(candidates: List[ActionTemplate], keep) -> List[ActionTemplate]:
    narrowed = [c for c in candidates if keep(c)]
    return narrowed or candidates


def rank_candidates(
    templates: Iterable[ActionTemplate],
    category: ActionCategory,
    metrics: CheckinMetrics,
    focus_areas: Collection[str] = (),
    recently_used: Collection[str] = (),
    exclude: Collection[str] = (),
) -> List[Tuple[ActionTemplate, int]]:
    """
    Filter and score one category. Every narrowing step falls back to the
    previous set when it would leave nothing. Ties keep catalogue order.
    """
    candidates = [
        t for t in templates
        if t.category == category and t.is_active and t.id not in exclude
    ]
    if not candidates:
        return []

    focus = set(focus_areas)
    difficulty = determine_difficulty(metrics)

    candidates = _narrow(candidates, lambda t: bool(focus.intersection(t.focus_modules)))
    candidates = _narrow(candidates, lambda t: t.difficulty == difficulty)
    candidates = _narrow(candidates, lambda t: t.id not in recently_used)

    scored = [(t, score_template(t, metrics)) for t in candidates]
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return scored


def select_for_category(
    templates: Iterable[ActionTemplate],
    category: ActionCategory,
    metrics: CheckinMetrics,
    focus_areas: Collection[str] = (),
    recently_used: Collection[str] = (),
    rng: Optional[random.Random] = None,
    exclude: Collection[str] = (),
) -> Optional[ActionTemplate]:
    ranked = rank_candidates(templates, category, metrics, focus_areas, recently_used, exclude)
    if not ranked:
        return None

    rng = rng or random.Random()
    top = ranked[:TOP_K]
    return rng.choice(top)[0]


def action_from_template(template: ActionTemplate) -> PlannedAction:
    return PlannedAction(
        id=_new_id(),
        template_id=template.id,
        title=template.title,
        description=template.description,
        category=template.category,
        duration=template.duration,
    )


def simplified_action(
    category: ActionCategory,
    taken_titles: Collection[str] = (),
    rng: Optional[random.Random] = None,
) -> PlannedAction:
    """A one-minute action for a category that keeps getting skipped."""
    rng = rng or random.Random()
    options = SIMPLIFIED_ACTIONS[category]
    available = [o for o in options if o["title"] not in taken_titles]
    choice = rng.choice(available) if available else options[0]

    return PlannedAction(
        id=_new_id(),
        template_id=choice["id"],
        title=choice["title"],
        description=choice["description"],
        category=category,
        duration=SIMPLIFIED_DURATION,
        simplified=True,
    )


def generate_plan(
    user_id: str,
    plan_date: date,
    metrics: CheckinMetrics,
    templates: Sequence[ActionTemplate],
    focus_areas: Collection[str] = (),
    recently_used: Collection[str] = (),
    adherence: Optional[AdherenceState] = None,
    checkin_id: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> DailyPlan:
    rng = rng or random.Random()
    flagged = set(adherence.categories_needing_simplification()) if adherence else set()

    actions: List[PlannedAction] = []
    for category in ACTION_CATEGORIES:
        if category in flagged:
            actions.append(simplified_action(category, [a.title for a in actions], rng))
            continue

        template = select_for_category(templates, category, metrics, focus_areas, recently_used, rng)
        if template is not None:
            actions.append(action_from_template(template))

    return DailyPlan(
        id=_new_id(),
        user_id=user_id,
        date=plan_date,
        checkin_id=checkin_id,
        actions=actions,
        created_at=datetime.utcnow(),
    )


def pick_replacement(
    plan: DailyPlan,
    action: PlannedAction,
    templates: Sequence[ActionTemplate],
    metrics: Optional[CheckinMetrics],
    focus_areas: Collection[str] = (),
    rng: Optional[random.Random] = None,
) -> Optional[PlannedAction]:
    """Another action of the same category that isn't already in the plan."""
    rng = rng or random.Random()
    in_plan = {a.template_id for a in plan.actions if a.template_id}
    in_plan.add(action.template_id)

    if action.simplified:
        titles = [a.title for a in plan.actions]
        options = [o for o in SIMPLIFIED_ACTIONS[action.category] if o["title"] not in titles]
        if not options:
            return None
        replacement = simplified_action(action.category, titles, rng)
    elif metrics is not None:
        template = select_for_category(
            templates, action.category, metrics, focus_areas, rng=rng, exclude=in_plan,
        )
        if template is None:
            return None
        replacement = action_from_template(template)
    else:
        options = [
            t for t in templates
            if t.category == action.category and t.is_active and t.id not in in_plan
        ]
        if not options:
            return None
        replacement = action_from_template(rng.choice(options))

    return replacement.model_copy(update={"swapped_from": action.id, "anchor": action.anchor})
