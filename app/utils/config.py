# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

import os

from pytz import timezone

# ✅ Only load .env in local/dev
if os.environ.get("ENV") != "production":
    from dotenv import load_dotenv
    load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


CRISIS_COOLDOWN_HOURS = _int_env("CRISIS_COOLDOWN_HOURS", 24)
RECENT_HISTORY_DAYS = _int_env("RECENT_HISTORY_DAYS", 30)

CHECKIN_RATE_LIMIT = os.getenv("CHECKIN_RATE_LIMIT", "30/minute")
RATE_LIMIT_ENABLED = _bool_env("RATE_LIMIT_ENABLED", True)

SCHEDULER_TIMEZONE = timezone(os.getenv("SCHEDULER_TIMEZONE", "UTC"))
