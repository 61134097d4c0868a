# app/models/customer.py
"""Customers table. Read-only collaborator for the warranty views."""

from sqlalchemy import Column, Integer, String, DateTime, Text
from app.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, index=True)
    phone = Column(String(50))
    email = Column(String(200))
    address = Column(Text)
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<Customer {self.id} {self.name}>"
