# app/main.py
"""
FastAPI application entry point.
Includes security middleware, global error handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from app.routers import (
    customers, health, services, vehicle_models, vehicle_warranty_parts, vehicles,
    warranties, warranty_configuration, warranty_status,
)
from app.database import SessionLocal, create_tables
from app.config import settings
from app.errors import WarrantyError
from app.services.warranty_catalog import seed_components
from app.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Vehicle Warranty Service API",
    description="Warranty configuration, assignment and live status for a vehicle service shop.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (allow the shop dashboard to call the API) ─────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to dashboard origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}
        if request.url.path in open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Exception Handlers ───────────────────────────────────────────────────────
@app.exception_handler(WarrantyError)
async def warranty_error_handler(request: Request, exc: WarrantyError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(warranty_configuration.router, prefix="/api/v1", tags=["🛠️  Warranty Configuration"])
app.include_router(vehicle_warranty_parts.router, prefix="/api/v1", tags=["🧩 Warranty Parts"])
app.include_router(warranty_status.router,        prefix="/api/v1", tags=["📊 Warranty Status"])
app.include_router(warranties.router,             prefix="/api/v1", tags=["📋 Warranties"])
app.include_router(vehicles.router,               prefix="/api/v1", tags=["🚗 Vehicles"])
app.include_router(vehicle_models.router,         prefix="/api/v1", tags=["🏷️  Vehicle Models"])
app.include_router(customers.router,              prefix="/api/v1", tags=["👤 Customers"])
app.include_router(services.router,               prefix="/api/v1", tags=["🔧 Services"])
app.include_router(health.router,                 prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Warranty Backend starting up...")
    create_tables()
    db = SessionLocal()
    try:
        added = seed_components(db)
    finally:
        db.close()
    logger.info(f"✅ Database tables ready ({added} warranty component(s) seeded)")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Warranty Backend shutting down...")
