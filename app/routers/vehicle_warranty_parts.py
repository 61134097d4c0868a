# app/routers/vehicle_warranty_parts.py
"""Raw assigned warranty parts (no computed status), manual creation and administrative status changes."""

from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.warranty import ManualPartsCreate, PartStatusUpdate, VehicleWarrantyPartOut, part_out
from app.services.warranty_assignment import create_parts, list_parts, set_part_status, with_components

router = APIRouter()


@router.get("/vehicle_warranty_parts", response_model=list[VehicleWarrantyPartOut],
            summary="Assigned warranty parts for a vehicle")
def get_vehicle_warranty_parts(vehicle_id: Optional[int] = None, db: Session = Depends(get_db)):
    """Returns an empty list when no vehicle_id is given."""
    if not vehicle_id:
        return []
    return [part_out(part, component) for part, component in list_parts(db, vehicle_id)]


@router.post("/vehicle_warranty_parts", response_model=list[VehicleWarrantyPartOut],
             status_code=status.HTTP_201_CREATED, summary="Create warranty parts from explicit terms")
def create_vehicle_warranty_parts(body: ManualPartsCreate, db: Session = Depends(get_db)):
    """All parts are created in one transaction, or none are (409 if the vehicle already holds one)."""
    parts = create_parts(db, body.vehicle_id, body.start_date, body.warranty_parts)
    return [part_out(p, c) for p, c in with_components(db, parts)]


@router.put("/vehicle_warranty_parts/{part_id}/status", response_model=VehicleWarrantyPartOut,
            summary="Change a part's administrative status (e.g. cancel)")
def update_part_status(part_id: int, body: PartStatusUpdate, db: Session = Depends(get_db)):
    part = set_part_status(db, part_id, body.status)
    (part, component), = with_components(db, [part])
    return part_out(part, component)
