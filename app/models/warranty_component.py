# app/models/warranty_component.py
"""
Warranty components table — the coverable subsystems of a vehicle.
Reference data: seeded once by warranty_catalog.seed_components(), never
mutated by request handling.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean
from app.database import Base


class WarrantyComponent(Base):
    __tablename__ = "warranty_components"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(Text)
    category = Column(String(50), nullable=False)   # Engine | Body | Transmission | Electrical | Battery
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<WarrantyComponent {self.id} {self.name} category={self.category}>"
