# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

from fastapi import APIRouter, Depends

from app.schemas.plan_schemas import FocusAreasRequest
from app.services.stores import Stores, get_stores

router = APIRouter(tags=["Profile"])


@router.get("/users/{user_id}/focus-areas")
def get_focus_areas(user_id: str, stores: Stores = Depends(get_stores)):
    return {"focus_areas": stores.profiles.focus_areas(user_id)}


@router.put("/users/{user_id}/focus-areas")
def set_focus_areas(user_id: str, payload: FocusAreasRequest, stores: Stores = Depends(get_stores)):
    return {"focus_areas": stores.profiles.set_focus_areas(user_id, payload.focus_areas)}
