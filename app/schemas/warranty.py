# app/schemas/warranty.py
from pydantic import BaseModel, Field, model_validator
from datetime import date, datetime
from typing import Literal, Optional
from app.services.warranty_catalog import BATTERY_HYBRID

PartStatus = Literal["active", "expired", "suspended", "cancelled"]


class WarrantyComponentOut(BaseModel):
    id: int
    name: str
    description: Optional[str]
    category: str
    is_active: bool
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class ComponentWarrantyTerms(BaseModel):
    years: int = Field(0, ge=0)
    km: int = Field(0, ge=0)
    applicable: Optional[bool] = None     # None → derived from years (and the hybrid flag)


class ModelWarrantyConfig(BaseModel):
    """Per-model warranty template, keyed by component name."""
    per_component: dict[str, ComponentWarrantyTerms] = Field(default_factory=dict)
    has_hybrid_battery: bool = False

    @model_validator(mode="after")
    def resolve_applicability(self):
        # Terms built without an explicit flag read back exactly as they will be stored
        for name, terms in list(self.per_component.items()):
            if terms.applicable is None:
                derived = terms.years > 0 and (name != BATTERY_HYBRID or self.has_hybrid_battery)
                self.per_component[name] = terms.model_copy(update={"applicable": derived})
        return self


class ModelWarrantyUpdate(BaseModel):
    """Flat request body for update-model. Battery fields are optional."""
    warranty_engine_years: int = Field(ge=0)
    warranty_engine_km: int = Field(ge=0)
    warranty_paint_years: int = Field(ge=0)
    warranty_paint_km: int = Field(ge=0)
    warranty_transmission_years: int = Field(ge=0)
    warranty_transmission_km: int = Field(ge=0)
    warranty_electrical_years: int = Field(ge=0)
    warranty_electrical_km: int = Field(ge=0)
    warranty_battery_years: Optional[int] = Field(None, ge=0)
    warranty_battery_km: Optional[int] = Field(None, ge=0)
    has_hybrid_battery: bool = False


class AutoAssignRequest(BaseModel):
    vehicle_id: int
    vehicle_model_id: int
    purchase_date: Optional[date] = None   # defaults to today


class ManualWarrantyPart(BaseModel):
    warranty_component_id: int
    warranty_years: int = Field(gt=0)
    warranty_kilometers: int = Field(gt=0)


class ManualPartsCreate(BaseModel):
    """Explicit part list for one vehicle, all starting on start_date."""
    vehicle_id: int
    start_date: date
    warranty_parts: list[ManualWarrantyPart] = Field(min_length=1)


class VehicleWarrantyPartOut(BaseModel):
    id: int
    vehicle_id: int
    warranty_component_id: int
    component_name: Optional[str] = None
    component_category: Optional[str] = None
    warranty_years: int
    warranty_km: int
    start_date: date
    end_date: date
    km_limit: int
    status: str
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class PartStatusUpdate(BaseModel):
    status: PartStatus


def part_out(part, component=None) -> VehicleWarrantyPartOut:
    """Serialize an assigned part, attaching its component name when known."""
    out = VehicleWarrantyPartOut.model_validate(part)
    if component is not None:
        out.component_name = component.name
        out.component_category = component.category
    return out
