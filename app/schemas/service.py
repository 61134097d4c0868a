# app/schemas/service.py
from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

ServiceStatus = Literal["pending", "in_progress", "completed", "cancelled"]


class ServiceCreate(BaseModel):
    vehicle_id: int
    service_date: date
    service_type: Optional[str] = None
    total_amount: Decimal = Field(Decimal("0.00"), ge=0)
    service_status: ServiceStatus = "pending"
    warranty_used: bool = False
    current_km: Optional[int] = Field(None, ge=0)   # also updates the vehicle odometer


class ServiceOut(BaseModel):
    id: int
    vehicle_id: int
    service_date: date
    service_type: Optional[str]
    total_amount: Decimal
    service_status: str
    warranty_used: bool
    current_km: Optional[int]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True
