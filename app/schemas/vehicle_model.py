# app/schemas/vehicle_model.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class VehicleModelCreate(BaseModel):
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    has_hybrid_battery: bool = False


class VehicleModelOut(BaseModel):
    id: int
    name: str
    description: Optional[str]
    category: Optional[str]
    has_hybrid_battery: bool
    is_active: bool
    created_at: Optional[datetime]

    class Config:
        from_attributes = True
