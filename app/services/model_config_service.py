# app/services/model_config_service.py
"""
Per-vehicle-model warranty configuration.

Each model holds one vehicle_model_warranties row per catalog component.
update_config() is a full replace: components left out of the new config are
written back disabled (years=0), never kept from the previous config. The whole
replace happens in one transaction.

Applicability rules:
  - base components are applicable when their years > 0
  - Battery Hybrid additionally requires the model's has_hybrid_battery flag
  - an applicable component must have years > 0 and km > 0
Terms without an explicit `applicable` flag get the derived value when the
config is built, so an accepted config reads back from get_config() unchanged.
An explicit flag is validated against the same rules.
"""

from datetime import datetime
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from app.errors import ConflictError, DependencyUnavailableError, NotFoundError, ValidationError
from app.models.vehicle_model import VehicleModel, VehicleModelWarranty
from app.models.warranty_component import WarrantyComponent
from app.schemas.vehicle_model import VehicleModelCreate
from app.schemas.warranty import ComponentWarrantyTerms, ModelWarrantyConfig, ModelWarrantyUpdate
from app.services.warranty_catalog import (
    ALL_COMPONENTS, BATTERY_HYBRID, CAR_PAINT, ELECTRICAL_SYSTEM, ENGINE, TRANSMISSION,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Flat request/response field prefix → component name
FORM_FIELDS = {
    "engine": ENGINE,
    "paint": CAR_PAINT,
    "transmission": TRANSMISSION,
    "electrical": ELECTRICAL_SYSTEM,
    "battery": BATTERY_HYBRID,
}


def get_model(db: Session, model_id: int) -> VehicleModel:
    model = (
        db.query(VehicleModel)
        .filter(VehicleModel.id == model_id, VehicleModel.is_active == True)  # noqa: E712
        .first()
    )
    if not model:
        raise NotFoundError("Vehicle model not found")
    return model


def display_text(years: int, km: int, applicable: bool) -> str:
    return f"{years} Years / {km:,} km" if applicable else "N/A"


def normalize_config(config: ModelWarrantyConfig) -> ModelWarrantyConfig:
    """Fill omitted components with disabled defaults and validate applicability."""
    normalized = {}
    for name in ALL_COMPONENTS:
        terms = config.per_component.get(name) or ComponentWarrantyTerms()
        applicable = terms.applicable
        if applicable is None:
            applicable = terms.years > 0 and (name != BATTERY_HYBRID or config.has_hybrid_battery)

        if name == BATTERY_HYBRID and applicable and not config.has_hybrid_battery:
            raise ValidationError("Battery Hybrid cannot be applicable on a model without a hybrid battery")

        if applicable and (terms.years <= 0 or terms.km <= 0):
            raise ValidationError(f"{name}: warranty years and km must be positive when applicable")

        normalized[name] = ComponentWarrantyTerms(years=terms.years, km=terms.km, applicable=applicable)

    unknown = set(config.per_component) - set(ALL_COMPONENTS)
    if unknown:
        logger.warning(f"Ignoring unknown warranty components in config: {sorted(unknown)}")

    return ModelWarrantyConfig(per_component=normalized, has_hybrid_battery=config.has_hybrid_battery)


def config_from_form(form: ModelWarrantyUpdate) -> ModelWarrantyConfig:
    """Convert the flat update-model body into a ModelWarrantyConfig."""
    per_component = {}
    for prefix, name in FORM_FIELDS.items():
        years = getattr(form, f"warranty_{prefix}_years") or 0
        km = getattr(form, f"warranty_{prefix}_km") or 0
        per_component[name] = ComponentWarrantyTerms(years=years, km=km)
    return ModelWarrantyConfig(per_component=per_component, has_hybrid_battery=form.has_hybrid_battery)


def config_to_form(config: ModelWarrantyConfig) -> dict:
    """Flat warranty_<prefix>_years / _km view of a config."""
    flat = {"has_hybrid_battery": config.has_hybrid_battery}
    for prefix, name in FORM_FIELDS.items():
        terms = config.per_component.get(name) or ComponentWarrantyTerms()
        flat[f"warranty_{prefix}_years"] = terms.years
        flat[f"warranty_{prefix}_km"] = terms.km
    return flat


def _config_rows(db: Session, model_ids=None):
    q = (
        db.query(VehicleModelWarranty, WarrantyComponent)
        .join(WarrantyComponent, VehicleModelWarranty.warranty_component_id == WarrantyComponent.id)
    )
    if model_ids is not None:
        q = q.filter(VehicleModelWarranty.vehicle_model_id.in_(model_ids))
    return q.order_by(WarrantyComponent.category, WarrantyComponent.name).all()


def get_config(db: Session, model_id: int) -> ModelWarrantyConfig:
    model = get_model(db, model_id)
    per_component = {
        component.name: ComponentWarrantyTerms(
            years=row.warranty_years, km=row.warranty_km, applicable=row.is_applicable,
        )
        for row, component in _config_rows(db, [model.id])
    }
    return ModelWarrantyConfig(per_component=per_component, has_hybrid_battery=model.has_hybrid_battery)


def update_config(db: Session, model_id: int, config: ModelWarrantyConfig) -> ModelWarrantyConfig:
    """
    Replace every per-component row of the model in one transaction.
    Validation happens before any write; storage errors roll everything back.
    """
    model = get_model(db, model_id)
    normalized = normalize_config(config)
    components = {
        c.name: c for c in db.query(WarrantyComponent).filter(WarrantyComponent.name.in_(ALL_COMPONENTS)).all()
    }
    now = datetime.utcnow()

    try:
        db.query(VehicleModelWarranty).filter(
            VehicleModelWarranty.vehicle_model_id == model.id
        ).delete(synchronize_session=False)

        for name, terms in normalized.per_component.items():
            component = components.get(name)
            if not component:
                logger.warning(f"Component '{name}' not seeded — config row skipped for model {model.id}")
                continue
            db.add(VehicleModelWarranty(
                vehicle_model_id=model.id,
                warranty_component_id=component.id,
                warranty_years=terms.years,
                warranty_km=terms.km,
                is_applicable=terms.applicable,
                updated_at=now,
            ))

        model.has_hybrid_battery = normalized.has_hybrid_battery
        model.updated_at = now
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Warranty config update failed for model {model_id}: {e}")
        raise DependencyUnavailableError("Failed to update model warranty configuration") from e

    logger.info(f"Warranty config replaced for model {model.id} ({model.name})")
    return normalized


def model_detail(db: Session, model_id: int) -> dict:
    """Model info plus one entry per configured component, with display text."""
    model = get_model(db, model_id)
    warranties = [
        {
            "component_id": component.id,
            "component_name": component.name,
            "component_category": component.category,
            "warranty_years": row.warranty_years,
            "warranty_km": row.warranty_km,
            "is_applicable": row.is_applicable,
            "display_text": display_text(row.warranty_years, row.warranty_km, row.is_applicable),
        }
        for row, component in _config_rows(db, [model.id])
    ]
    return {
        "id": model.id,
        "name": model.name,
        "description": model.description,
        "category": model.category,
        "has_hybrid_battery": model.has_hybrid_battery,
        "warranties": warranties,
    }


def list_configs(db: Session) -> list[dict]:
    """All active models with their flat warranty configuration."""
    models = (
        db.query(VehicleModel)
        .filter(VehicleModel.is_active == True)  # noqa: E712
        .order_by(VehicleModel.name)
        .all()
    )
    by_model: dict[int, dict] = {m.id: {} for m in models}
    for row, component in _config_rows(db, list(by_model)):
        by_model[row.vehicle_model_id][component.name] = ComponentWarrantyTerms(
            years=row.warranty_years, km=row.warranty_km, applicable=row.is_applicable,
        )

    result = []
    for m in models:
        config = ModelWarrantyConfig(per_component=by_model[m.id], has_hybrid_battery=m.has_hybrid_battery)
        result.append({"id": m.id, "name": m.name, "category": m.category, **config_to_form(config)})
    return result


def list_models(db: Session) -> list[VehicleModel]:
    return (
        db.query(VehicleModel)
        .filter(VehicleModel.is_active == True)  # noqa: E712
        .order_by(VehicleModel.name)
        .all()
    )


def find_model_by_name(db: Session, name: str):
    """Active model called `name`, or None."""
    return (
        db.query(VehicleModel)
        .filter(VehicleModel.name == name, VehicleModel.is_active == True)  # noqa: E712
        .first()
    )


def create_model(db: Session, body: VehicleModelCreate) -> VehicleModel:
    """Register a vehicle model with every component disabled until configured."""
    if db.query(VehicleModel).filter(VehicleModel.name == body.name).first():
        raise ConflictError(f"Vehicle model '{body.name}' already exists")

    now = datetime.utcnow()
    model = VehicleModel(
        name=body.name,
        description=body.description,
        category=body.category,
        has_hybrid_battery=body.has_hybrid_battery,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    try:
        db.add(model)
        db.flush()
        for component in db.query(WarrantyComponent).filter(WarrantyComponent.name.in_(ALL_COMPONENTS)).all():
            db.add(VehicleModelWarranty(
                vehicle_model_id=model.id,
                warranty_component_id=component.id,
                warranty_years=0,
                warranty_km=0,
                is_applicable=False,
                updated_at=now,
            ))
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(f"Vehicle model '{body.name}' already exists") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Vehicle model creation failed: {e}")
        raise DependencyUnavailableError("Failed to create vehicle model") from e

    db.refresh(model)
    logger.info(f"Vehicle model registered: {model.name} (id={model.id})")
    return model
