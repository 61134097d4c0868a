# app/models/vehicle_warranty_part.py
"""
Assigned warranty parts — one dated warranty per (vehicle, component).
Created once by warranty_assignment.assign(); afterwards only `status` changes
(administrative action). Live status is computed on read, never stored here.
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, UniqueConstraint
from app.database import Base


class VehicleWarrantyPart(Base):
    __tablename__ = "vehicle_warranty_parts"
    __table_args__ = (
        UniqueConstraint("vehicle_id", "warranty_component_id", name="uq_vehicle_component"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    warranty_component_id = Column(Integer, ForeignKey("warranty_components.id"), nullable=False)
    warranty_years = Column(Integer, nullable=False)
    warranty_km = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    km_limit = Column(Integer, nullable=False)
    status = Column(String(20), default="active", nullable=False)  # active | expired | suspended | cancelled
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    def __repr__(self):
        return (f"<VehicleWarrantyPart {self.id} vehicle={self.vehicle_id} "
                f"component={self.warranty_component_id} until={self.end_date}>")
