# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
from datetime import datetime

from fastapi import APIRouter, Depends

from app.schemas.adaptive_schemas import (
    AdaptiveModeResponse,
    AdaptiveModeState,
    ManualActivateRequest,
    ModeCheckRequest,
)
from app.services import adaptive_mode_controller as controller
from app.services.checkin_pipeline import run_mode_check
from app.services.stores import Stores, get_stores

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users/{user_id}/adaptive-mode", tags=["Adaptive mode"])


def _response(state: AdaptiveModeState) -> AdaptiveModeResponse:
    if not state.active:
        return AdaptiveModeResponse(state=state, config=controller.get_config())
    return AdaptiveModeResponse(
        state=state,
        config=controller.get_config(),
        message=controller.get_gentler_message("welcome"),
        support_prompts=controller.get_support_prompts(),
    )


@router.get("", response_model=AdaptiveModeResponse)
def get_mode(user_id: str, stores: Stores = Depends(get_stores)):
    return _response(stores.adaptive_mode.get(user_id))


@router.post("/check", response_model=AdaptiveModeResponse)
def check_mode(user_id: str, payload: ModeCheckRequest, stores: Stores = Depends(get_stores)):
    """Re-evaluate now, e.g. once anchor windows have passed during the day."""
    state = run_mode_check(stores, user_id, datetime.utcnow(), sos_used_now=payload.sos_used_today)
    return _response(state)


@router.post("/activate", response_model=AdaptiveModeResponse)
def activate_mode(user_id: str, payload: ManualActivateRequest, stores: Stores = Depends(get_stores)):
    now = datetime.utcnow()
    state = controller.activate_manually(stores.adaptive_mode.get(user_id), now, payload.reason)
    stores.adaptive_mode.save(user_id, state)

    plan = stores.plans.get_plan(user_id, now.date())
    if plan is not None and plan.total_count > 1:
        stores.plans.save_plan(controller.adjust_plan(plan))

    logger.info("🌧️ Reduced-load mode turned on manually for user %s", user_id)
    return _response(state)


@router.post("/deactivate", response_model=AdaptiveModeResponse)
def deactivate_mode(user_id: str, stores: Stores = Depends(get_stores)):
    state = stores.adaptive_mode.get(user_id)
    if state.active:
        state = stores.adaptive_mode.save(user_id, controller.deactivate(state, datetime.utcnow()))
        logger.info("🌤️ Reduced-load mode turned off manually for user %s", user_id)
    return _response(state)
