# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from app.schemas.prediction_schemas import TriggerDate, TriggerDateCreateRequest, TriggerDateUpdateRequest
from app.services.exceptions import TriggerDateNotFoundError
from app.services.prediction_service import refresh_predictions
from app.services.stores import Stores, get_stores

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users/{user_id}/trigger-dates", tags=["Trigger dates"])


def _refresh_alert(stores: Stores, user_id: str):
    # The date itself is saved; a stale alert is fixed by the nightly refresh
    try:
        refresh_predictions(stores, user_id)
    except Exception as e:
        stores.db.rollback()
        logger.error("⚠️ Alert refresh after trigger date change failed for user %s: %s", user_id, str(e))


@router.get("", response_model=List[TriggerDate])
def list_trigger_dates(user_id: str, stores: Stores = Depends(get_stores)):
    return stores.trigger_dates.list(user_id)


@router.post("", response_model=TriggerDate, status_code=201)
def create_trigger_date(user_id: str, payload: TriggerDateCreateRequest, stores: Stores = Depends(get_stores)):
    created = stores.trigger_dates.create(user_id, payload)
    _refresh_alert(stores, user_id)
    return created


@router.get("/{trigger_id}", response_model=TriggerDate)
def get_trigger_date(user_id: str, trigger_id: str, stores: Stores = Depends(get_stores)):
    try:
        return stores.trigger_dates.get(user_id, trigger_id)
    except TriggerDateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{trigger_id}", response_model=TriggerDate)
def update_trigger_date(
    user_id: str,
    trigger_id: str,
    payload: TriggerDateUpdateRequest,
    stores: Stores = Depends(get_stores),
):
    try:
        updated = stores.trigger_dates.update(user_id, trigger_id, payload)
    except TriggerDateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    _refresh_alert(stores, user_id)
    return updated


@router.delete("/{trigger_id}", status_code=204)
def delete_trigger_date(user_id: str, trigger_id: str, stores: Stores = Depends(get_stores)):
    try:
        stores.trigger_dates.delete(user_id, trigger_id)
    except TriggerDateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    _refresh_alert(stores, user_id)
    return Response(status_code=204)
