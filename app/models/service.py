# app/models/service.py
"""
Service ledger table — one row per shop visit.
Rows with warranty_used=True are aggregated by warranty_usage.summarize().
The first row reaching service_status='completed' can trigger warranty assignment.
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric, Boolean, ForeignKey
from app.database import Base


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    service_date = Column(Date, nullable=False, index=True)
    service_type = Column(String(100))
    total_amount = Column(Numeric(12, 2), default=0, nullable=False)
    service_status = Column(String(20), default="pending", nullable=False)  # pending | in_progress | completed | cancelled
    warranty_used = Column(Boolean, default=False, nullable=False)
    current_km = Column(Integer)          # odometer at service time
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<Service {self.id} vehicle={self.vehicle_id} status={self.service_status}>"
