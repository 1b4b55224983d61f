# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from app.models.database import SessionLocal
from app.schemas.prediction_schemas import PredictionSnapshot
from app.services import alert_generator, pattern_analyzer
from app.services.stores import Stores
from app.utils.config import RECENT_HISTORY_DAYS

logger = logging.getLogger(__name__)


def compute_snapshot(
    history: Sequence,
    trigger_dates: Sequence,
    today: date,
    mode_active: bool = False,
    now: Optional[datetime] = None,
) -> PredictionSnapshot:
    prediction = pattern_analyzer.predict_tomorrow(history, today)
    patterns = pattern_analyzer.detect_trigger_patterns(history)
    alert = alert_generator.generate(
        prediction,
        patterns,
        trigger_dates,
        history,
        today=today,
        mode_active=mode_active,
        now=now,
    )
    return PredictionSnapshot(
        day_patterns=pattern_analyzer.analyze_day_of_week(history),
        prediction=prediction,
        patterns=patterns,
        alert=alert,
    )


def refresh_predictions(
    stores: Stores,
    user_id: str,
    today: Optional[date] = None,
    now: Optional[datetime] = None,
) -> PredictionSnapshot:
    """Recompute and replace the user's live alert. `today` defaults to the UTC date."""
    now = now or datetime.utcnow()
    today = today or now.date()
    history = stores.checkins.get_recent_checkins(user_id, RECENT_HISTORY_DAYS, today=today)
    trigger_dates = stores.trigger_dates.list(user_id)
    mode = stores.adaptive_mode.get(user_id)

    snapshot = compute_snapshot(history, trigger_dates, today, mode_active=mode.active, now=now)
    stores.alerts.replace(user_id, snapshot.alert)

    if snapshot.alert:
        logger.info("🔔 Alert for user %s: %s", user_id, snapshot.alert.type.value)
    return snapshot


def get_predictions(stores: Stores, user_id: str, today: Optional[date] = None) -> PredictionSnapshot:
    """
    Fresh forecast and patterns with the stored live alert. A dismissed
    alert is hidden until the next recompute replaces it.
    """
    today = today or datetime.utcnow().date()
    history = stores.checkins.get_recent_checkins(user_id, RECENT_HISTORY_DAYS, today=today)
    trigger_dates = stores.trigger_dates.list(user_id)
    mode = stores.adaptive_mode.get(user_id)

    snapshot = compute_snapshot(history, trigger_dates, today, mode_active=mode.active)

    stored = stores.alerts.get(user_id)
    if stored is None:
        return snapshot
    return snapshot.model_copy(update={"alert": None if stored.dismissed else stored})


def refresh_all_predictions():
    """Nightly job: recompute alerts for everyone who checked in recently."""
    db = SessionLocal()
    now = datetime.utcnow()
    today = now.date()
    refreshed = failed = 0
    try:
        stores = Stores(db)
        user_ids = stores.checkins.active_user_ids(today - timedelta(days=RECENT_HISTORY_DAYS))

        for user_id in user_ids:
            try:
                refresh_predictions(stores, user_id, today, now)
                refreshed += 1
            except Exception as e:
                db.rollback()
                failed += 1
                logger.error("⚠️ Prediction refresh failed for user %s: %s", user_id, str(e))

        logger.info("🌙 Prediction refresh done: %s ok, %s failed", refreshed, failed)
    finally:
        db.close()
