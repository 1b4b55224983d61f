# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

from fastapi import APIRouter, Depends, HTTPException

from app.schemas.prediction_schemas import PredictionSnapshot
from app.services.prediction_service import get_predictions
from app.services.stores import Stores, get_stores

router = APIRouter(tags=["Predictions"])


@router.get("/users/{user_id}/predictions", response_model=PredictionSnapshot)
def predictions(user_id: str, stores: Stores = Depends(get_stores)):
    return get_predictions(stores, user_id)


@router.post("/users/{user_id}/alerts/dismiss")
def dismiss_alert(user_id: str, stores: Stores = Depends(get_stores)):
    if not stores.alerts.dismiss(user_id):
        raise HTTPException(status_code=404, detail="No live alert to dismiss.")
    return {"dismissed": True}
