# app/routers/warranty_status.py
"""Live warranty status — recomputed from today's date and the vehicle odometer on every call."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.services.warranty_views import vehicle_warranty_status, warranty_status_summary

router = APIRouter()


@router.get("/warranty-status/vehicle/{vehicle_id}", summary="Per-component warranty status for a vehicle")
def get_vehicle_warranty_status(vehicle_id: int, db: Session = Depends(get_db)):
    """
    Returns:
    - vehicle_info (with customer and model)
    - warranty_status keyed by component (not_applicable for components never assigned)
    - usage: warranty-covered services, total covered, last service date
    - service_history, newest first
    """
    return vehicle_warranty_status(db, vehicle_id)


@router.get("/warranty-status/status", summary="Warranty status summary for all vehicles")
def get_warranty_status_summary(db: Session = Depends(get_db)):
    return warranty_status_summary(db)
