# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from app.schemas.summary_schemas import WeeklySummary
from app.services.stores import Stores, get_stores
from app.services.weekly_summary_service import build_weekly_summary

router = APIRouter(tags=["Summaries"])


@router.get("/users/{user_id}/weekly-summary", response_model=WeeklySummary)
def weekly_summary(user_id: str, week_of: Optional[date] = None, stores: Stores = Depends(get_stores)):
    """
    Without `week_of`, the last summary the Monday job stored. With it, a
    summary of that week computed on the spot (not stored).
    """
    if week_of is None:
        summary = stores.summaries.latest(user_id)
    else:
        summary = build_weekly_summary(stores, user_id, week_of, as_of=datetime.utcnow().date())

    if summary is None:
        raise HTTPException(status_code=404, detail="No weekly summary available yet.")
    return summary
