# app/services/warranty_usage.py
"""
Warranty usage tracker — aggregates warranty-covered services from the ledger.
Read-only. If the ledger query fails, callers get zeros / empty history and a
warning in the log, so status pages still render.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.models.service import Service
from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class UsageSummary:
    services_used: int = 0
    total_covered: Decimal = Decimal("0.00")
    last_service_date: Optional[date] = None


def _to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(Decimal("0.01"))


def summarize_many(db: Session, vehicle_ids) -> dict[int, UsageSummary]:
    """Usage per vehicle id. Vehicles without covered services get an empty summary."""
    vehicle_ids = list(vehicle_ids)
    summaries = {vid: UsageSummary() for vid in vehicle_ids}
    if not vehicle_ids:
        return summaries

    try:
        rows = (
            db.query(
                Service.vehicle_id,
                func.count(Service.id),
                func.sum(Service.total_amount),
                func.max(Service.service_date),
            )
            .filter(Service.vehicle_id.in_(vehicle_ids), Service.warranty_used == True)  # noqa: E712
            .group_by(Service.vehicle_id)
            .all()
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"[Usage] Service ledger unavailable, reporting zero usage: {e}")
        return summaries

    for vehicle_id, count, total, last_date in rows:
        summaries[vehicle_id] = UsageSummary(
            services_used=count or 0,
            total_covered=_to_decimal(total),
            last_service_date=last_date,
        )
    return summaries


def summarize(db: Session, vehicle_id: int) -> UsageSummary:
    return summarize_many(db, [vehicle_id])[vehicle_id]


def service_history(db: Session, vehicle_id: int) -> list[Service]:
    """All services for a vehicle, newest first. Empty on ledger failure."""
    try:
        return (
            db.query(Service)
            .filter(Service.vehicle_id == vehicle_id)
            .order_by(Service.service_date.desc(), Service.id.desc())
            .all()
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"[Usage] Service history unavailable for vehicle {vehicle_id}: {e}")
        return []
