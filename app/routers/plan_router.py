# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.schemas.plan_schemas import (
    AdherenceInsight,
    AnchorRequest,
    DailyPlan,
    DailyPlanResponse,
    HabitAnchor,
)
from app.services import adherence_tracker, plan_generator
from app.services.exceptions import ActionNotFoundError, PlanNotFoundError
from app.services.stores import Stores, get_stores
from app.utils.action_library import HABIT_ANCHORS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Plans"])


def _load_plan(stores: Stores, user_id: str, plan_date: date) -> DailyPlan:
    plan = stores.plans.get_plan(user_id, plan_date)
    if plan is None:
        raise PlanNotFoundError(user_id, plan_date)
    return plan


def _not_found(e: LookupError):
    return HTTPException(status_code=404, detail=str(e))


@router.get("/anchors", response_model=List[HabitAnchor])
def list_anchors():
    return HABIT_ANCHORS


@router.get("/users/{user_id}/plans/{plan_date}", response_model=DailyPlanResponse)
def get_plan(user_id: str, plan_date: date, stores: Stores = Depends(get_stores)):
    try:
        return DailyPlanResponse.from_plan(_load_plan(stores, user_id, plan_date))
    except PlanNotFoundError as e:
        raise _not_found(e)


# ---------------------- ✅ COMPLETE / ⏭️ SKIP ----------------------
@router.post("/users/{user_id}/plans/{plan_date}/actions/{action_id}/complete", response_model=DailyPlanResponse)
def complete_action(user_id: str, plan_date: date, action_id: str, stores: Stores = Depends(get_stores)):
    try:
        plan = _load_plan(stores, user_id, plan_date)
        plan, adherence = adherence_tracker.complete_action(plan, stores.adherence.get(user_id), action_id)
    except (PlanNotFoundError, ActionNotFoundError) as e:
        raise _not_found(e)

    plan = stores.plans.save_plan(plan)
    stores.adherence.save(user_id, adherence)
    return DailyPlanResponse.from_plan(plan)


@router.post("/users/{user_id}/plans/{plan_date}/actions/{action_id}/skip", response_model=DailyPlanResponse)
def skip_action(user_id: str, plan_date: date, action_id: str, stores: Stores = Depends(get_stores)):
    try:
        plan = _load_plan(stores, user_id, plan_date)
        plan, adherence = adherence_tracker.skip_action(plan, stores.adherence.get(user_id), action_id)
    except (PlanNotFoundError, ActionNotFoundError) as e:
        raise _not_found(e)

    plan = stores.plans.save_plan(plan)
    stores.adherence.save(user_id, adherence)
    return DailyPlanResponse.from_plan(plan)


# ---------------------- 🔄 SWAP ----------------------
@router.post("/users/{user_id}/plans/{plan_date}/actions/{action_id}/swap", response_model=DailyPlanResponse)
def swap_action(user_id: str, plan_date: date, action_id: str, stores: Stores = Depends(get_stores)):
    try:
        plan = _load_plan(stores, user_id, plan_date)
    except PlanNotFoundError as e:
        raise _not_found(e)

    action = plan.find_action(action_id)
    if action is None:
        raise _not_found(ActionNotFoundError(action_id))

    checkin = stores.checkins.get_for_date(user_id, plan_date)
    replacement = plan_generator.pick_replacement(
        plan,
        action,
        stores.catalog.active_templates(),
        checkin.metrics if checkin else None,
        focus_areas=stores.profiles.focus_areas(user_id),
    )
    if replacement is None:
        raise HTTPException(status_code=409, detail="No other action available in this category.")

    plan = stores.plans.save_plan(adherence_tracker.swap_action(plan, action_id, replacement))
    logger.info("🔄 Swapped action %s for %s", action_id, replacement.id)
    return DailyPlanResponse.from_plan(plan)


# ---------------------- ⚓ ANCHOR ----------------------
@router.post("/users/{user_id}/plans/{plan_date}/actions/{action_id}/anchor", response_model=DailyPlanResponse)
def anchor_action(
    user_id: str,
    plan_date: date,
    action_id: str,
    payload: AnchorRequest,
    stores: Stores = Depends(get_stores),
):
    try:
        plan = adherence_tracker.set_anchor(_load_plan(stores, user_id, plan_date), action_id, payload.anchor_id)
    except (PlanNotFoundError, ActionNotFoundError) as e:
        raise _not_found(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return DailyPlanResponse.from_plan(stores.plans.save_plan(plan))


@router.get("/users/{user_id}/plans/{plan_date}/insights", response_model=List[AdherenceInsight])
def plan_insights(user_id: str, plan_date: date, stores: Stores = Depends(get_stores)):
    plan = stores.plans.get_plan(user_id, plan_date)
    return adherence_tracker.check_adherence(plan, stores.adherence.get(user_id))
