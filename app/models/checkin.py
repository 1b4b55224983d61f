# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.


import uuid
from datetime import datetime

from sqlalchemy import Column, Integer, String, Date, DateTime, JSON, Index
from app.models.database import Base
from app.utils.encryption import EncryptedJournalText  # 🔐


def _uuid():
    return uuid.uuid4().hex


class Checkin(Base):
    __tablename__ = "checkins"

    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False)

    mood = Column(Integer, nullable=False)
    stress = Column(Integer, nullable=False)
    sleep = Column(Integer, nullable=False)
    energy = Column(Integer, nullable=False)
    focus = Column(Integer, nullable=False)
    anxiety = Column(Integer, nullable=False)

    journal_text = Column(EncryptedJournalText, nullable=True)  # 🔐 Never copied anywhere else
    context_tags = Column(JSON, default=list)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_checkins_user_date", "user_id", "date"),
    )

    def __repr__(self):
        return f"<Checkin id={self.id} user={self.user_id} date={self.date} mood={self.mood}>"
