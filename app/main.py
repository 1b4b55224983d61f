# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.models import database
from app.models import *  # registers all models

from app.routers import checkin_router, plan_router, prediction_router
from app.routers import trigger_date_router, adaptive_mode_router
from app.routers import crisis_router, profile_router, summary_router
from app.routers import healthz_router

from app.services.prediction_service import refresh_all_predictions
from app.services.weekly_summary_service import generate_all_weekly_summaries

from app.utils.config import SCHEDULER_TIMEZONE
from app.utils.rate_limit_utils import limiter

logging.basicConfig(level=logging.INFO)


# Create DB tables in one go
database.Base.metadata.create_all(bind=database.engine)

# Scheduler setup
scheduler = BackgroundScheduler(job_defaults={"misfire_grace_time": 60})

@asynccontextmanager
async def lifespan(app: FastAPI):

    # 📊 Weekly summaries every Monday at 6 AM
    scheduler.add_job(generate_all_weekly_summaries, "cron", day_of_week="mon", hour=6, minute=0, timezone=SCHEDULER_TIMEZONE)

    # 🌙 Refresh forecasts and alerts every night at 1 AM
    scheduler.add_job(refresh_all_predictions, "cron", hour=1, minute=0, timezone=SCHEDULER_TIMEZONE)

    scheduler.start()
    yield
    scheduler.shutdown()

# Create FastAPI app with lifespan
app = FastAPI(
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    title="Neura Companion API",
    description="Check-ins, crisis detection, forecasts and adaptive daily plans",
    version="1.0"
)

app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

# Include routers
app.include_router(checkin_router.router)
app.include_router(plan_router.router)
app.include_router(prediction_router.router)
app.include_router(trigger_date_router.router)
app.include_router(adaptive_mode_router.router)
app.include_router(crisis_router.router)
app.include_router(profile_router.router)
app.include_router(summary_router.router)
app.include_router(healthz_router.router)


# ---------------------- ADDING EXCEPTION HANDLER ----------------------
@app.exception_handler(RateLimitExceeded)
async def rate_limit_exceeded_handler(request, exc):
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many requests. Please slow down."}
    )

@app.get("/")
def read_root():
    return {"message": "Welcome to Neura Companion backend Live. "
                       "Copyright (c) 2025 Shiladitya Mallick "
                       "This file is part of the Neura - Your Smart Assistant project. "
                       "Licensed under the MIT License - see the LICENSE file for details."}
