# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.


from .checkin import Checkin
from .crisis_event import CrisisEventLog
from .trigger_date import TriggerDateEntry
from .daily_plan import DailyPlanEntry, PlannedActionEntry
from .action_template import ActionTemplateEntry
from .user_state import UserProfile, AdaptiveModeRecord, AdherenceRecord, LiveAlert
from .weekly_summary import WeeklySummaryEntry
