# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

import enum
from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field


class CrisisSeverity(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    CrisisSeverity.low: 1,
    CrisisSeverity.medium: 2,
    CrisisSeverity.high: 3,
}


class CrisisTriggerType(str, enum.Enum):
    keyword = "keyword"
    metric_pattern = "metric_pattern"
    consecutive_low = "consecutive_low"
    explicit_request = "explicit_request"


class CrisisDetectionResult(BaseModel):
    """Verdict of one detection layer, or of the combined detector."""

    model_config = ConfigDict(frozen=True)

    detected: bool
    severity: Optional[CrisisSeverity] = None
    trigger_type: Optional[CrisisTriggerType] = None
    detection_method: str
    risk_factors: List[str] = Field(default_factory=list)

    @classmethod
    def not_detected(cls, method: str) -> "CrisisDetectionResult":
        return cls(detected=False, detection_method=method)


class CrisisEvent(BaseModel):
    """Audit record of a detection. Never carries the journal text."""

    id: str
    user_id: str
    checkin_id: Optional[str] = None
    severity: CrisisSeverity
    trigger_type: CrisisTriggerType
    detection_method: str
    resources_shown: List[str] = Field(default_factory=list)
    acknowledged: bool = False
    follow_up_scheduled: bool = False
    created_at: datetime


class CrisisResource(BaseModel):
    id: str
    name: str
    description: str
    phone: Optional[str] = None
    text_line: Optional[str] = None
    website: Optional[str] = None
    available_24x7: bool = True


class CrisisResponse(BaseModel):
    title: str
    message: str
    show_resources: bool
    show_emergency: bool
    resources: List[CrisisResource] = Field(default_factory=list)
