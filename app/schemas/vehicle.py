# app/schemas/vehicle.py
from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional


class VehicleCreate(BaseModel):
    plate_number: str
    customer_id: Optional[int] = None
    vehicle_model_id: Optional[int] = None
    model: Optional[str] = None              # model name, resolved when vehicle_model_id is absent
    vin_number: Optional[str] = None
    year: Optional[int] = None
    purchase_date: Optional[date] = None     # defaults to today
    current_km: int = Field(0, ge=0)
    auto_assign_warranty: bool = True


class VehicleOut(BaseModel):
    id: int
    plate_number: str
    customer_id: Optional[int]
    vehicle_model_id: Optional[int]
    vin_number: Optional[str]
    year: Optional[int]
    purchase_date: Optional[date]
    current_km: int
    warranty_start_date: Optional[date]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class OdometerUpdate(BaseModel):
    current_km: int = Field(ge=0)
