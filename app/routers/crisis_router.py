# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.schemas.crisis_schemas import CrisisEvent, CrisisResource
from app.services.checkin_pipeline import SupportOutcome, request_support
from app.services.exceptions import CrisisEventNotFoundError
from app.services.stores import Stores, get_stores
from app.utils.crisis_resources import CRISIS_RESOURCES

router = APIRouter(tags=["Crisis support"])


@router.get("/crisis/resources", response_model=List[CrisisResource])
def crisis_resources():
    return CRISIS_RESOURCES


# ---------------------- 🆘 SUPPORT REQUEST ----------------------
@router.post("/users/{user_id}/crisis/support", response_model=SupportOutcome, status_code=201)
def crisis_support(user_id: str, stores: Stores = Depends(get_stores)):
    return request_support(stores, user_id)


@router.get("/users/{user_id}/crisis/events", response_model=List[CrisisEvent])
def crisis_events(user_id: str, stores: Stores = Depends(get_stores)):
    return stores.crisis_events.list_events(user_id)


@router.post("/users/{user_id}/crisis/events/{event_id}/acknowledge", response_model=CrisisEvent)
def acknowledge_event(user_id: str, event_id: str, stores: Stores = Depends(get_stores)):
    try:
        return stores.crisis_events.acknowledge(user_id, event_id)
    except CrisisEventNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
