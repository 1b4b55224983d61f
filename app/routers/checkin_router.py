# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

from typing import List

from fastapi import APIRouter, Depends, Query, Request

from app.schemas.checkin_schemas import CheckinCreateRequest, CheckinRecord
from app.services.checkin_pipeline import CheckinOutcome, process_checkin
from app.services.stores import Stores, get_stores
from app.utils.config import CHECKIN_RATE_LIMIT, RECENT_HISTORY_DAYS
from app.utils.rate_limit_utils import limiter

router = APIRouter(tags=["Check-ins"])


# ---------------------- 📝 NEW CHECK-IN ----------------------
@router.post("/users/{user_id}/checkins", response_model=CheckinOutcome, status_code=201)
@limiter.limit(CHECKIN_RATE_LIMIT)
async def create_checkin(
    request: Request,
    user_id: str,
    payload: CheckinCreateRequest,
    stores: Stores = Depends(get_stores),
):
    """
    Saves the check-in, then runs crisis detection and plan generation
    side by side. A failure in either is reported in the outcome instead
    of failing the request.
    """
    return await process_checkin(stores, user_id, payload)


# ---------------------- 📚 HISTORY ----------------------
@router.get("/users/{user_id}/checkins", response_model=List[CheckinRecord])
def list_checkins(
    user_id: str,
    days: int = Query(RECENT_HISTORY_DAYS, ge=1, le=365),
    stores: Stores = Depends(get_stores),
):
    return stores.checkins.get_recent_checkins(user_id, days)
