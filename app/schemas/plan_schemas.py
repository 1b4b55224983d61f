# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

import enum
from datetime import date as dt_date, datetime
from typing import Optional, List, Dict

from pydantic import BaseModel, Field, field_validator

from app.schemas.checkin_schemas import METRIC_NAMES


class ActionCategory(str, enum.Enum):
    coping = "coping"
    lifestyle = "lifestyle"
    connection = "connection"


ACTION_CATEGORIES = (ActionCategory.coping, ActionCategory.lifestyle, ActionCategory.connection)


class ActionDifficulty(str, enum.Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


class TargetCondition(str, enum.Enum):
    low = "low"
    high = "high"


class ActionStatus(str, enum.Enum):
    pending = "pending"
    completed = "completed"
    skipped = "skipped"


class MetricTarget(BaseModel):
    metric: str
    condition: TargetCondition
    threshold: int = Field(..., ge=1, le=10)

    @field_validator("metric")
    @classmethod
    def _known_metric(cls, value: str) -> str:
        if value not in METRIC_NAMES:
            raise ValueError(f"Unknown metric '{value}'")
        return value


class ActionTemplate(BaseModel):
    id: str
    title: str
    description: str = ""
    category: ActionCategory
    duration: int = Field(..., ge=1)  # minutes
    target_metrics: List[MetricTarget] = Field(default_factory=list)
    focus_modules: List[str] = Field(default_factory=list)
    difficulty: ActionDifficulty = ActionDifficulty.easy
    is_active: bool = True


class PlannedAction(BaseModel):
    id: str
    template_id: Optional[str] = None
    title: str
    description: str = ""
    category: ActionCategory
    duration: int
    status: ActionStatus = ActionStatus.pending
    anchor: Optional[str] = None
    simplified: bool = False
    swapped_from: Optional[str] = None
    completed_at: Optional[datetime] = None


class DailyPlan(BaseModel):
    id: str
    user_id: str
    date: dt_date
    checkin_id: Optional[str] = None
    actions: List[PlannedAction] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    @property
    def completed_count(self) -> int:
        return sum(1 for a in self.actions if a.status == ActionStatus.completed)

    @property
    def total_count(self) -> int:
        return len(self.actions)

    def find_action(self, action_id: str) -> Optional[PlannedAction]:
        return next((a for a in self.actions if a.id == action_id), None)


class DailyPlanResponse(BaseModel):
    id: str
    date: dt_date
    actions: List[PlannedAction]
    completed_count: int
    total_count: int

    @classmethod
    def from_plan(cls, plan: DailyPlan) -> "DailyPlanResponse":
        return cls(
            id=plan.id,
            date=plan.date,
            actions=plan.actions,
            completed_count=plan.completed_count,
            total_count=plan.total_count,
        )


class CategoryStats(BaseModel):
    total_assigned: int = 0
    total_completed: int = 0
    total_skipped: int = 0
    consecutive_skips: int = 0
    needs_simplification: bool = False


class ActionStats(BaseModel):
    times_assigned: int = 0
    times_completed: int = 0
    times_skipped: int = 0
    last_completed: Optional[datetime] = None


def _empty_category_stats() -> Dict[ActionCategory, CategoryStats]:
    return {category: CategoryStats() for category in ACTION_CATEGORIES}


class AdherenceState(BaseModel):
    """Per-user counters that accumulate across days."""

    category_stats: Dict[ActionCategory, CategoryStats] = Field(default_factory=_empty_category_stats)
    action_stats: Dict[str, ActionStats] = Field(default_factory=dict)

    def stats_for(self, category: ActionCategory) -> CategoryStats:
        return self.category_stats.get(category, CategoryStats())

    def categories_needing_simplification(self) -> List[ActionCategory]:
        return [c for c in ACTION_CATEGORIES if self.stats_for(c).needs_simplification]


class InsightType(str, enum.Enum):
    simplify = "simplify"
    anchor = "anchor"
    encourage = "encourage"


class HabitAnchor(BaseModel):
    id: str
    label: str
    time: str  # morning / afternoon / evening
    description: str


class AdherenceInsight(BaseModel):
    type: InsightType
    message: str
    category: Optional[ActionCategory] = None
    action_id: Optional[str] = None
    suggested_anchor: Optional[HabitAnchor] = None


class AnchorRequest(BaseModel):
    anchor_id: str


class FocusAreasRequest(BaseModel):
    focus_areas: List[str] = Field(default_factory=list, max_length=10)
