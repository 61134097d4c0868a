# app/routers/warranty_configuration.py
"""
Warranty configuration endpoints, dispatched on ?action= like the shop UI expects.
GET  ?action=components        — warranty component catalog
GET  ?action=model&id=         — one model's warranty configuration
GET  (no action) / ?action=summary — every model's flat configuration
POST ?action=update-model&id=  — full replace of a model's configuration
POST ?action=auto-assign       — assign warranties to a vehicle from a model
"""

from typing import Optional
from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.warranty import AutoAssignRequest, ModelWarrantyUpdate, WarrantyComponentOut, part_out
from app.services.model_config_service import (
    config_from_form, get_config, get_model, list_configs, model_detail, update_config,
)
from app.services.warranty_assignment import auto_assign, with_components
from app.services.warranty_catalog import list_components
from app.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


def _parse(schema, body: dict):
    try:
        return schema.model_validate(body)
    except PydanticValidationError as e:
        raise RequestValidationError(e.errors())


@router.get("/warranty-configuration", summary="Warranty components and model configurations")
def get_warranty_configuration(action: Optional[str] = None, id: Optional[int] = None,
                               db: Session = Depends(get_db)):
    if action == "components":
        return [WarrantyComponentOut.model_validate(c) for c in list_components(db)]

    if action == "model":
        if id is None:
            raise HTTPException(status_code=400, detail="Model ID is required")
        return {**model_detail(db, id), "config": get_config(db, id)}

    if not action or action == "summary":
        return list_configs(db)

    raise HTTPException(status_code=400, detail="Invalid action")


@router.post("/warranty-configuration", summary="Update a model's configuration or auto-assign a vehicle")
def post_warranty_configuration(action: Optional[str] = None, id: Optional[int] = None,
                                body: dict = Body(...), db: Session = Depends(get_db)):
    if action == "update-model":
        if id is None:
            raise HTTPException(status_code=400, detail="Model ID is required")
        form = _parse(ModelWarrantyUpdate, body)
        config = update_config(db, id, config_from_form(form))
        return {"status": "updated", "model_id": id, "config": config}

    if action == "auto-assign":
        request = _parse(AutoAssignRequest, body)
        parts = auto_assign(db, request.vehicle_id, request.vehicle_model_id, request.purchase_date)
        model = get_model(db, request.vehicle_model_id)
        logger.info(f"Auto-assigned {len(parts)} warranty part(s) to vehicle {request.vehicle_id}")
        return {
            "vehicle_id": request.vehicle_id,
            "model_name": model.name,
            "purchase_date": parts[0].start_date if parts else request.purchase_date,
            "assigned_warranties": [part_out(p, c) for p, c in with_components(db, parts)],
        }

    raise HTTPException(status_code=400, detail="Invalid action")
