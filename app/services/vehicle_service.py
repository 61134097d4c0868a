# app/services/vehicle_service.py
"""
Vehicle and customer lookup/management helpers.
Creating a vehicle that resolves to a known model triggers warranty assignment
(unless the caller opts out with auto_assign_warranty=False).
"""

from datetime import date, datetime
from typing import Optional
from sqlalchemy.orm import Session
from app.errors import NotFoundError
from app.models.customer import Customer
from app.models.vehicle import Vehicle
from app.schemas.customer import CustomerCreate
from app.schemas.vehicle import VehicleCreate
from app.services.model_config_service import find_model_by_name, get_model
from app.services.warranty_assignment import assign_for_new_vehicle
from app.utils.logger import get_logger

logger = get_logger(__name__)


def get_vehicle(db: Session, vehicle_id: int) -> Vehicle:
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
    if not vehicle:
        raise NotFoundError("Vehicle not found")
    return vehicle


def lookup_vehicle_by_plate(db: Session, plate_number: str) -> Optional[Vehicle]:
    """Find a vehicle by plate number. Returns None if not found."""
    return db.query(Vehicle).filter(Vehicle.plate_number == plate_number).first()


def list_vehicles(db: Session, customer_id: Optional[int] = None):
    q = db.query(Vehicle)
    if customer_id:
        q = q.filter(Vehicle.customer_id == customer_id)
    return q.order_by(Vehicle.id.desc())


def create_vehicle(db: Session, body: VehicleCreate):
    """Insert a vehicle, then auto-assign warranties. Returns (vehicle, parts)."""
    if body.customer_id is not None:
        get_customer(db, body.customer_id)

    model_id = None
    if body.vehicle_model_id is not None:
        model_id = get_model(db, body.vehicle_model_id).id
    elif body.model:
        model = find_model_by_name(db, body.model)
        model_id = model.id if model else None

    now = datetime.utcnow()
    vehicle = Vehicle(
        customer_id=body.customer_id,
        vehicle_model_id=model_id,
        plate_number=body.plate_number,
        vin_number=body.vin_number,
        year=body.year,
        purchase_date=body.purchase_date or date.today(),
        current_km=body.current_km,
        created_at=now,
        updated_at=now,
    )
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)
    logger.info(f"Vehicle registered: {vehicle.plate_number} (id={vehicle.id}, model={model_id})")

    parts = []
    if body.auto_assign_warranty and model_id:
        parts = assign_for_new_vehicle(db, vehicle)
        db.refresh(vehicle)
    return vehicle, parts


def update_current_km(db: Session, vehicle_id: int, current_km: int) -> Vehicle:
    vehicle = get_vehicle(db, vehicle_id)
    vehicle.current_km = current_km
    vehicle.updated_at = datetime.utcnow()
    db.commit()
    return vehicle


def get_customer(db: Session, customer_id: int) -> Customer:
    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise NotFoundError("Customer not found")
    return customer


def list_customers(db: Session):
    return db.query(Customer).order_by(Customer.name)


def create_customer(db: Session, body: CustomerCreate) -> Customer:
    customer = Customer(**body.model_dump(), created_at=datetime.utcnow())
    db.add(customer)
    db.commit()
    db.refresh(customer)
    return customer
