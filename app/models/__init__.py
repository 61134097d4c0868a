# Warranty service — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.warranty_component import WarrantyComponent                # noqa
from app.models.vehicle_model import VehicleModel, VehicleModelWarranty     # noqa
from app.models.customer import Customer                                    # noqa
from app.models.vehicle import Vehicle                                      # noqa
from app.models.service import Service                                      # noqa
from app.models.vehicle_warranty_part import VehicleWarrantyPart            # noqa
