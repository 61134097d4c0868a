# app/routers/vehicles.py
"""Vehicles — registration (with automatic warranty assignment), lookup and odometer updates."""

from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.vehicle import OdometerUpdate, VehicleCreate, VehicleOut
from app.schemas.warranty import part_out
from app.services.vehicle_service import (
    create_vehicle, get_vehicle, list_vehicles, lookup_vehicle_by_plate, update_current_km,
)
from app.services.warranty_assignment import with_components
from app.utils.pagination import paginate

router = APIRouter()


@router.get("/vehicles", summary="List vehicles")
def get_vehicles(customer_id: Optional[int] = None, limit: Optional[int] = None, offset: int = 0,
                 db: Session = Depends(get_db)):
    page = paginate(list_vehicles(db, customer_id), limit, offset)
    page["rows"] = [VehicleOut.model_validate(v) for v in page["rows"]]
    return page


@router.post("/vehicles", status_code=status.HTTP_201_CREATED, summary="Register a vehicle")
def register_vehicle(body: VehicleCreate, db: Session = Depends(get_db)):
    """
    Registers a vehicle. When it resolves to a known model and
    auto_assign_warranty is true, warranties start at the purchase date.
    """
    vehicle, parts = create_vehicle(db, body)
    return {
        "vehicle": VehicleOut.model_validate(vehicle),
        "assigned_warranties": [part_out(p, c) for p, c in with_components(db, parts)],
    }


@router.get("/vehicles/lookup/{plate}", summary="Look up a plate number")
def lookup_vehicle(plate: str, db: Session = Depends(get_db)):
    vehicle = lookup_vehicle_by_plate(db, plate)
    if not vehicle:
        return {"plate": plate, "status": "unknown", "registered": False}
    return {"plate": plate, "status": "known", "registered": True,
            "vehicle": VehicleOut.model_validate(vehicle)}


@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Get one vehicle")
def get_one_vehicle(vehicle_id: int, db: Session = Depends(get_db)):
    return get_vehicle(db, vehicle_id)


@router.put("/vehicles/{vehicle_id}/odometer", response_model=VehicleOut, summary="Update odometer reading")
def set_odometer(vehicle_id: int, body: OdometerUpdate, db: Session = Depends(get_db)):
    return update_current_km(db, vehicle_id, body.current_km)
