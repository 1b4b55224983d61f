# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.utils.config import RATE_LIMIT_ENABLED


def user_or_address(request: Request) -> str:
    """Limit per user id when the route has one, else per client address."""
    user_id = request.path_params.get("user_id")
    if user_id:
        return f"user:{user_id}"
    return get_remote_address(request)


limiter = Limiter(key_func=user_or_address, enabled=RATE_LIMIT_ENABLED)
