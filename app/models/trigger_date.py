# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.


import uuid
from datetime import datetime

from sqlalchemy import Column, String, Boolean, Date, DateTime
from app.models.database import Base


class TriggerDateEntry(Base):
    __tablename__ = "trigger_dates"

    id = Column(String, primary_key=True, default=lambda: uuid.uuid4().hex)
    user_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False)
    label = Column(String, nullable=False)
    repeat_annually = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
