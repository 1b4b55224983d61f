# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.


import uuid
from datetime import datetime

from sqlalchemy import Column, String, Boolean, DateTime, JSON, Enum
from app.models.database import Base
from app.schemas.crisis_schemas import CrisisSeverity, CrisisTriggerType


class CrisisEventLog(Base):
    """Detection metadata only; journal text never lands in this table."""

    __tablename__ = "crisis_events"

    id = Column(String, primary_key=True, default=lambda: uuid.uuid4().hex)
    user_id = Column(String, nullable=False, index=True)
    checkin_id = Column(String, nullable=True)

    severity = Column(Enum(CrisisSeverity), nullable=False)
    trigger_type = Column(Enum(CrisisTriggerType), nullable=False)
    detection_method = Column(String, nullable=False)
    resources_shown = Column(JSON, default=list)

    acknowledged = Column(Boolean, default=False)
    follow_up_scheduled = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
