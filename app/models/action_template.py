# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.


from sqlalchemy import Column, Integer, String, Boolean, JSON, Enum
from app.models.database import Base
from app.schemas.plan_schemas import ActionCategory, ActionDifficulty


class ActionTemplateEntry(Base):
    __tablename__ = "action_templates"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(String, default="")
    category = Column(Enum(ActionCategory), nullable=False, index=True)
    duration = Column(Integer, nullable=False)
    target_metrics = Column(JSON, default=list)   # [{"metric", "condition", "threshold"}]
    focus_modules = Column(JSON, default=list)
    difficulty = Column(Enum(ActionDifficulty), default=ActionDifficulty.easy)
    is_active = Column(Boolean, default=True)
