# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.


import uuid
from datetime import datetime

from sqlalchemy import Column, Integer, String, Date, DateTime, JSON, UniqueConstraint
from app.models.database import Base


class WeeklySummaryEntry(Base):
    __tablename__ = "weekly_summaries"

    id = Column(String, primary_key=True, default=lambda: uuid.uuid4().hex)
    user_id = Column(String, nullable=False, index=True)
    week_start = Column(Date, nullable=False)
    week_end = Column(Date, nullable=False)

    checkin_count = Column(Integer, default=0)
    metrics = Column(JSON, default=dict)
    completion_rate = Column(Integer, default=0)  # percent
    checkin_streak = Column(Integer, default=0)
    longest_streak = Column(Integer, default=0)
    top_actions = Column(JSON, default=list)
    insights = Column(JSON, default=list)

    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "week_start", name="uq_weekly_summaries_user_week"),
    )
