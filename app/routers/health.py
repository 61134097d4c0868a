# app/routers/health.py
"""Liveness + readiness: database reachable and warranty catalog seeded."""

from datetime import datetime
from fastapi import APIRouter, Depends
from sqlalchemy import func, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.warranty_component import WarrantyComponent
from app.services.warranty_catalog import DEFAULT_COMPONENTS

router = APIRouter()


@router.get("/health", summary="Service health check")
def health_check(db: Session = Depends(get_db)):
    """
    `status` is "degraded" when the database is unreachable or the
    component catalog has fewer entries than the default seed.
    """
    report = {
        "status": "ok",
        "checked_at": datetime.utcnow().isoformat(),
        "database": "unknown",
        "warranty_components": 0,
    }

    try:
        db.execute(text("SELECT 1"))
        report["database"] = "ok"
        report["warranty_components"] = db.query(func.count(WarrantyComponent.id)).scalar() or 0
    except SQLAlchemyError as e:
        db.rollback()
        report["database"] = f"error: {e}"
        report["status"] = "degraded"
        return report

    if report["warranty_components"] < len(DEFAULT_COMPONENTS):
        report["status"] = "degraded"
    return report
