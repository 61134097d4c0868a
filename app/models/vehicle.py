# app/models/vehicle.py
"""
Vehicles table.
purchase_date and current_km feed the warranty engine and status calculator.
warranty_start_date is stamped by the first warranty assignment.
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey
from app.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), index=True)
    vehicle_model_id = Column(Integer, ForeignKey("vehicle_models.id"), index=True)
    plate_number = Column(String(50), nullable=False, index=True)
    vin_number = Column(String(50))
    year = Column(Integer)
    purchase_date = Column(Date)
    current_km = Column(Integer, default=0, nullable=False)
    warranty_start_date = Column(Date)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<Vehicle {self.id} plate={self.plate_number} model={self.vehicle_model_id}>"
