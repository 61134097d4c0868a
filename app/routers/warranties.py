# app/routers/warranties.py
"""Warranty listings — denormalized part rows with live status and usage aggregates."""

from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.services.warranty_views import list_warranties, warranties_for_vehicle

router = APIRouter()


@router.get("/warranties", summary="All assigned warranties — searchable, filterable, paginated")
def get_warranties(
    search: Optional[str] = None,
    status: Optional[str] = None,
    vehicle_id: Optional[int] = None,
    expiring_soon: bool = False,
    limit: Optional[int] = None,
    offset: int = 0,
    sort_by: str = "end_date",
    sort_order: str = "asc",
    db: Session = Depends(get_db),
):
    """
    `status` filters on live status (active | expiring_soon | expired) or on the
    administrative flag (suspended | cancelled). `search` matches customer name,
    plate number or model name.
    """
    return list_warranties(
        db, search=search, status=status, vehicle_id=vehicle_id, expiring_soon=expiring_soon,
        limit=limit, offset=offset, sort_by=sort_by, sort_order=sort_order,
    )


@router.get("/warranties/{vehicle_id}", summary="Warranties of one vehicle")
def get_vehicle_warranties(vehicle_id: int, db: Session = Depends(get_db)):
    return warranties_for_vehicle(db, vehicle_id)
