# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.models.action_template import ActionTemplateEntry
from app.models.database import get_db

router = APIRouter(tags=["Infra"])


@router.get("/healthz")
def health_check(db: Session = Depends(get_db)):
    result = {
        "db_connection": False,
        "action_catalog": False,
    }

    try:
        # ✅ Check DB read
        db.execute(text("SELECT 1"))
        result["db_connection"] = True

        # ✅ Plans need a seeded catalogue
        result["action_catalog"] = db.query(ActionTemplateEntry.id).first() is not None

        return {
            "status": "ok" if all(result.values()) else "partial",
            "details": result
        }

    except Exception as e:
        return {
            "status": "error",
            "error": str(e),
            "details": result
        }
