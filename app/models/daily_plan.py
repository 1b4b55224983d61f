# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.


from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from app.models.database import Base
from app.schemas.plan_schemas import ActionCategory, ActionStatus


class DailyPlanEntry(Base):
    __tablename__ = "daily_plans"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False)
    checkin_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    actions = relationship(
        "PlannedActionEntry",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="PlannedActionEntry.position",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_daily_plans_user_date"),
    )


class PlannedActionEntry(Base):
    __tablename__ = "planned_actions"

    id = Column(String, primary_key=True)
    plan_id = Column(String, ForeignKey("daily_plans.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    template_id = Column(String, nullable=True)
    title = Column(String, nullable=False)
    description = Column(String, default="")
    category = Column(Enum(ActionCategory), nullable=False)
    duration = Column(Integer, nullable=False)

    status = Column(Enum(ActionStatus), default=ActionStatus.pending, nullable=False)
    anchor = Column(String, nullable=True)
    simplified = Column(Boolean, default=False)
    swapped_from = Column(String, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    plan = relationship("DailyPlanEntry", back_populates="actions")
