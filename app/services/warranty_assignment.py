# app/services/warranty_assignment.py
"""
Warranty assignment engine.

Turns a vehicle model's warranty template into dated per-component warranty
parts for one vehicle. Three triggers call into it:
  (a) auto_assign()                        — explicit admin action, strict
  (b) assign_for_new_vehicle()             — vehicle created with a known model
  (c) assign_on_first_completed_service()  — first completed service, start = service date

create_parts() is the manual variant: explicit per-component terms, strict.

Parts are written all-or-nothing in one transaction (the caller's, when
commit=False). The vehicle row is locked (SELECT ... FOR UPDATE) while
assigning, and the (vehicle_id, component_id) unique constraint makes a losing
concurrent writer a no-op (or a ConflictError when strict).

Calendar years use dateutil.relativedelta: a Feb 29 start landing on a
non-leap year is clamped to Feb 28.
"""

from datetime import date, datetime
from typing import Optional
from dateutil.relativedelta import relativedelta
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from app.errors import ConflictError, DependencyUnavailableError, NotFoundError, ValidationError
from app.models.service import Service
from app.models.vehicle import Vehicle
from app.models.vehicle_warranty_part import VehicleWarrantyPart
from app.models.warranty_component import WarrantyComponent
from app.schemas.warranty import ModelWarrantyConfig
from app.services.model_config_service import get_config, normalize_config
from app.services.warranty_catalog import BASE_COMPONENTS, BATTERY_HYBRID, find_by_name
from app.utils.logger import get_logger

logger = get_logger(__name__)

PART_STATUSES = ("active", "expired", "suspended", "cancelled")


def add_years(start: date, years: int) -> date:
    """Calendar-year addition. Feb 29 + 1 year → Feb 28."""
    return start + relativedelta(years=years)


def plan_components(config: ModelWarrantyConfig) -> list:
    """(component name, terms) pairs that should receive a warranty part."""
    config = normalize_config(config)
    names = list(BASE_COMPONENTS)
    if config.has_hybrid_battery:
        names.append(BATTERY_HYBRID)
    return [
        (name, config.per_component[name])
        for name in names
        if config.per_component[name].applicable
    ]


def _new_part(vehicle_id: int, component_id: int, years: int, km: int, start_date: date,
              now: datetime) -> VehicleWarrantyPart:
    return VehicleWarrantyPart(
        vehicle_id=vehicle_id,
        warranty_component_id=component_id,
        warranty_years=years,
        warranty_km=km,
        start_date=start_date,
        end_date=add_years(start_date, years),
        km_limit=km,
        status="active",
        created_at=now,
        updated_at=now,
    )


def _lock_vehicle(db: Session, vehicle_id: int) -> Vehicle:
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).with_for_update().first()
    if not vehicle:
        raise NotFoundError("Vehicle not found")
    return vehicle


def _assigned_component_ids(db: Session, vehicle_id: int) -> set:
    return {
        component_id for (component_id,) in
        db.query(VehicleWarrantyPart.warranty_component_id)
        .filter(VehicleWarrantyPart.vehicle_id == vehicle_id)
        .all()
    }


def _release(db: Session, commit: bool):
    # Drops the vehicle lock when this call owns the transaction
    if commit:
        db.rollback()


def _write_parts(db: Session, vehicle: Vehicle, parts: list, start_date: date,
                 strict: bool, commit: bool) -> list[VehicleWarrantyPart]:
    """
    Add `parts` and stamp the vehicle's warranty start. With commit=False the
    rows are only flushed and the caller commits them with its own writes.
    """
    try:
        db.add_all(parts)
        if vehicle.warranty_start_date is None:
            vehicle.warranty_start_date = start_date
            vehicle.updated_at = datetime.utcnow()
        if commit:
            db.commit()
        else:
            db.flush()
    except IntegrityError as e:
        db.rollback()
        if strict:
            raise ConflictError(f"Warranty already assigned to vehicle {vehicle.id}") from e
        logger.warning(f"[Warranty] Concurrent assignment for vehicle {vehicle.id} — this writer backs off")
        return []
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[Warranty] Assignment failed for vehicle {vehicle.id}: {e}")
        raise DependencyUnavailableError("Failed to persist warranty assignment") from e

    logger.info(
        f"[Warranty] Vehicle {vehicle.id}: assigned {len(parts)} part(s) starting {start_date.isoformat()}"
    )
    return parts


def assign(db: Session, vehicle_id: int, config: ModelWarrantyConfig, start_date: date,
           strict: bool = False, commit: bool = True) -> list[VehicleWarrantyPart]:
    """
    Create one warranty part per applicable component of `config`.
    Components missing from the catalog are skipped. Components the vehicle
    already holds are skipped, or raise ConflictError when strict.
    """
    vehicle = _lock_vehicle(db, vehicle_id)

    plan = plan_components(config)
    if not plan:
        logger.info(f"[Warranty] Vehicle {vehicle_id}: model config has no applicable components")
        _release(db, commit)
        return []

    already_assigned = _assigned_component_ids(db, vehicle_id)
    now = datetime.utcnow()
    parts = []
    for name, terms in plan:
        try:
            component = find_by_name(db, name)
        except NotFoundError:
            logger.warning(f"[Warranty] Component '{name}' not in catalog — skipped for vehicle {vehicle_id}")
            continue

        if component.id in already_assigned:
            if strict:
                db.rollback()
                raise ConflictError(f"Vehicle {vehicle_id} already has a '{name}' warranty")
            logger.info(f"[Warranty] Vehicle {vehicle_id} already holds '{name}' — skipped")
            continue

        parts.append(_new_part(vehicle_id, component.id, terms.years, terms.km, start_date, now))

    if not parts:
        _release(db, commit)
        return []
    return _write_parts(db, vehicle, parts, start_date, strict, commit)


def create_parts(db: Session, vehicle_id: int, start_date: date, terms) -> list[VehicleWarrantyPart]:
    """
    Manual assignment from explicit per-component terms
    (warranty_component_id, warranty_years, warranty_kilometers).
    Unknown components, repeated components and components the vehicle already
    holds reject the whole request; nothing is written unless every part is.
    """
    vehicle = _lock_vehicle(db, vehicle_id)
    if not terms:
        db.rollback()
        raise ValidationError("At least one warranty part is required")

    component_ids = [t.warranty_component_id for t in terms]
    if len(set(component_ids)) != len(component_ids):
        db.rollback()
        raise ValidationError("Each warranty component may appear only once")

    components = {
        c.id: c for c in
        db.query(WarrantyComponent).filter(WarrantyComponent.id.in_(component_ids)).all()
    }
    missing = [cid for cid in component_ids if cid not in components]
    if missing:
        db.rollback()
        raise NotFoundError(f"Warranty component(s) not found: {missing}")

    held = _assigned_component_ids(db, vehicle_id) & set(component_ids)
    if held:
        names = sorted(components[cid].name for cid in held)
        db.rollback()
        raise ConflictError(f"Vehicle {vehicle_id} already has warranties for: {', '.join(names)}")

    now = datetime.utcnow()
    parts = [
        _new_part(vehicle_id, t.warranty_component_id, t.warranty_years, t.warranty_kilometers, start_date, now)
        for t in terms
    ]
    return _write_parts(db, vehicle, parts, start_date, strict=True, commit=True)


def auto_assign(db: Session, vehicle_id: int, vehicle_model_id: int,
                purchase_date: Optional[date] = None) -> list[VehicleWarrantyPart]:
    """Explicit admin trigger. Duplicates surface as ConflictError."""
    config = get_config(db, vehicle_model_id)
    return assign(db, vehicle_id, config, purchase_date or date.today(), strict=True)


def assign_for_new_vehicle(db: Session, vehicle: Vehicle) -> list[VehicleWarrantyPart]:
    """Trigger on vehicle creation, when the vehicle resolves to a known model."""
    if not vehicle.vehicle_model_id:
        return []
    try:
        config = get_config(db, vehicle.vehicle_model_id)
    except NotFoundError:
        logger.info(f"[Warranty] Vehicle {vehicle.id}: model {vehicle.vehicle_model_id} unknown — no assignment")
        return []
    return assign(db, vehicle.id, config, vehicle.purchase_date or date.today())


def completed_service_count(db: Session, vehicle_id: int) -> int:
    return (
        db.query(func.count(Service.id))
        .filter(Service.vehicle_id == vehicle_id, Service.service_status == "completed")
        .scalar()
    ) or 0


def assign_on_first_completed_service(db: Session, vehicle: Vehicle, service_date: date,
                                      commit: bool = True) -> list[VehicleWarrantyPart]:
    """
    Trigger on a completed service. Fires only while the vehicle has no
    completed service recorded yet; call it before the new completion is stored.
    The service ledger passes commit=False and commits parts and service together.
    """
    if completed_service_count(db, vehicle.id) > 0:
        return []
    if not vehicle.vehicle_model_id:
        return []
    try:
        config = get_config(db, vehicle.vehicle_model_id)
    except NotFoundError:
        return []
    return assign(db, vehicle.id, config, service_date, commit=commit)


def list_parts(db: Session, vehicle_id: int) -> list:
    """(part, component) pairs for a vehicle, newest first."""
    return (
        db.query(VehicleWarrantyPart, WarrantyComponent)
        .join(WarrantyComponent, VehicleWarrantyPart.warranty_component_id == WarrantyComponent.id)
        .filter(VehicleWarrantyPart.vehicle_id == vehicle_id)
        .order_by(VehicleWarrantyPart.created_at.desc(), VehicleWarrantyPart.id.desc())
        .all()
    )


def set_part_status(db: Session, part_id: int, status: str) -> VehicleWarrantyPart:
    """Administrative change of the persisted status flag (e.g. cancel)."""
    if status not in PART_STATUSES:
        raise ValidationError(f"Invalid warranty status '{status}'")
    part = db.query(VehicleWarrantyPart).filter(VehicleWarrantyPart.id == part_id).first()
    if not part:
        raise NotFoundError("Warranty part not found")
    part.status = status
    part.updated_at = datetime.utcnow()
    db.commit()
    logger.info(f"[Warranty] Part {part_id} status → {status}")
    return part


def with_components(db: Session, parts) -> list:
    """Pair freshly assigned parts with their catalog component."""
    components = {c.id: c for c in db.query(WarrantyComponent).all()}
    return [(p, components.get(p.warranty_component_id)) for p in parts]
