# app/models/vehicle_model.py
"""
Vehicle models and their per-component warranty template.
vehicle_model_warranties holds one row per (model, component); rows are
replaced as a whole by model_config_service.update_config().
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean, ForeignKey, UniqueConstraint
from app.database import Base


class VehicleModel(Base):
    __tablename__ = "vehicle_models"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(Text)
    category = Column(String(50))
    has_hybrid_battery = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<VehicleModel {self.id} {self.name} hybrid={self.has_hybrid_battery}>"


class VehicleModelWarranty(Base):
    __tablename__ = "vehicle_model_warranties"
    __table_args__ = (
        UniqueConstraint("vehicle_model_id", "warranty_component_id", name="uq_model_component"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_model_id = Column(Integer, ForeignKey("vehicle_models.id"), nullable=False, index=True)
    warranty_component_id = Column(Integer, ForeignKey("warranty_components.id"), nullable=False)
    warranty_years = Column(Integer, default=0, nullable=False)
    warranty_km = Column(Integer, default=0, nullable=False)
    is_applicable = Column(Boolean, default=False, nullable=False)
    updated_at = Column(DateTime)

    def __repr__(self):
        return (f"<VehicleModelWarranty model={self.vehicle_model_id} "
                f"component={self.warranty_component_id} {self.warranty_years}y/{self.warranty_km}km>")
