# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

import enum
from datetime import date, datetime
from typing import Optional, List

from pydantic import BaseModel, Field


class BadDayTriggerType(str, enum.Enum):
    low_mood = "low_mood"
    sos_used = "sos_used"
    missed_actions = "missed_actions"
    trigger_date = "trigger_date"
    manual = "manual"


class BadDayTrigger(BaseModel):
    type: BadDayTriggerType
    description: str
    timestamp: datetime


class AdaptiveModeState(BaseModel):
    active: bool = False
    activated_date: Optional[date] = None
    activated_at: Optional[datetime] = None
    deactivated_at: Optional[datetime] = None
    triggers: List[BadDayTrigger] = Field(default_factory=list)


class BadDayModeConfig(BaseModel):
    max_actions: int = 1
    gentler_messaging: bool = True
    extra_support_prompts: bool = True
    simplified_actions_only: bool = True


class ModeCheckRequest(BaseModel):
    sos_used_today: bool = False


class ManualActivateRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=200)


class AdaptiveModeResponse(BaseModel):
    state: AdaptiveModeState
    config: BadDayModeConfig
    message: Optional[str] = None
    support_prompts: List[str] = Field(default_factory=list)
