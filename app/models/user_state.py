# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.


from datetime import datetime

from sqlalchemy import Column, String, Boolean, Date, DateTime, JSON
from app.models.database import Base


class UserProfile(Base):
    __tablename__ = "user_profiles"

    user_id = Column(String, primary_key=True)
    focus_areas = Column(JSON, default=list)
    created_at = Column(DateTime, default=datetime.utcnow)


# ✅ One row per user, replaced wholesale by the mode controller
class AdaptiveModeRecord(Base):
    __tablename__ = "adaptive_mode_states"

    user_id = Column(String, primary_key=True)
    active = Column(Boolean, default=False)
    activated_date = Column(Date, nullable=True)
    activated_at = Column(DateTime, nullable=True)
    deactivated_at = Column(DateTime, nullable=True)
    triggers = Column(JSON, default=list)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class AdherenceRecord(Base):
    __tablename__ = "adherence_states"

    user_id = Column(String, primary_key=True)
    category_stats = Column(JSON, default=dict)
    action_stats = Column(JSON, default=dict)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


# ✅ The single live alert; recomputing overwrites it
class LiveAlert(Base):
    __tablename__ = "proactive_alerts"

    user_id = Column(String, primary_key=True)
    payload = Column(JSON, nullable=True)
    dismissed = Column(Boolean, default=False)
    generated_at = Column(DateTime, default=datetime.utcnow)
