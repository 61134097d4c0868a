# app/routers/vehicle_models.py
"""Vehicle model registry. Warranty terms per model live under /warranty-configuration."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.vehicle_model import VehicleModelCreate, VehicleModelOut
from app.services.model_config_service import create_model, list_models

router = APIRouter()


@router.get("/vehicle-models", response_model=list[VehicleModelOut], summary="List active vehicle models")
def get_vehicle_models(db: Session = Depends(get_db)):
    return list_models(db)


@router.post("/vehicle-models", response_model=VehicleModelOut, status_code=status.HTTP_201_CREATED,
             summary="Register a vehicle model")
def register_vehicle_model(body: VehicleModelCreate, db: Session = Depends(get_db)):
    """Every warranty component starts disabled until the model is configured."""
    return create_model(db, body)
