# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.


class EngineError(Exception):
    """Base class for errors raised by the companion engine."""


class PlanNotFoundError(EngineError, LookupError):
    def __init__(self, user_id: str, plan_date):
        self.user_id = user_id
        self.plan_date = plan_date
        super().__init__(f"No plan for user {user_id} on {plan_date}")


class ActionNotFoundError(EngineError, LookupError):
    def __init__(self, action_id: str):
        self.action_id = action_id
        super().__init__(f"Action {action_id} is not part of this plan")


class TriggerDateNotFoundError(EngineError, LookupError):
    def __init__(self, trigger_date_id: str):
        self.trigger_date_id = trigger_date_id
        super().__init__(f"Trigger date {trigger_date_id} not found")


class CrisisEventNotFoundError(EngineError, LookupError):
    def __init__(self, event_id: str):
        self.event_id = event_id
        super().__init__(f"Crisis event {event_id} not found")
