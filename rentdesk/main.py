"""
RentDesk API application

Wires the routers, middleware and global error handlers together. Schema
creation on startup is skipped when TESTING is set; tests own their engine.
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
import os
import time

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from rentdesk.api.routes import (
    auth_router,
    documents_router,
    maintenance_router,
    payments_router,
    properties_router,
    realtime_router,
    system_router,
    tenants_router,
    users_router,
)
from rentdesk.core.config import is_production, is_testing, settings
from rentdesk.database import close_db_connection, init_db, test_connection


logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Health checks are polled constantly; keep them out of the request log
_UNLOGGED_PATHS = {"/health", "/status", f"{settings.API_V1_STR}/health"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    mode = "production" if is_production() else "development"
    logger.info(f"[STARTUP] {settings.PROJECT_NAME} v{settings.VERSION} ({mode}, debug={settings.DEBUG})")

    if not test_connection():
        logger.warning("[STARTUP] Database unreachable, serving in degraded mode")
    elif not is_testing() and not init_db():
        logger.warning("[STARTUP] Table creation failed; run the Alembic migrations")

    yield

    logger.info("[SHUTDOWN] Closing database connections")
    close_db_connection()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.PROJECT_DESCRIPTION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=3600,
)


# ==================== ROUTERS ====================

api = settings.API_V1_STR
app.include_router(auth_router, prefix=f"{api}/auth", tags=["Authentication"])
app.include_router(users_router, prefix=f"{api}/users", tags=["Users"])
app.include_router(properties_router, prefix=f"{api}/properties", tags=["Properties"])
app.include_router(tenants_router, prefix=f"{api}/tenants", tags=["Tenants"])
app.include_router(maintenance_router, prefix=f"{api}/maintenance", tags=["Maintenance"])
app.include_router(payments_router, prefix=f"{api}/payments", tags=["Payments"])
app.include_router(documents_router, prefix=f"{api}/documents", tags=["Documents"])
app.include_router(realtime_router)
app.include_router(system_router)

os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


# ==================== ERROR HANDLERS ====================

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Every malformed payload or query gets the same 422 body"""
    errors = jsonable_encoder(exc.errors())
    logger.warning(f"[VALIDATION] {request.method} {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"success": False, "detail": "Validation error", "errors": errors},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"[ERROR] Unhandled exception on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "detail": str(exc) if settings.DEBUG else "Internal server error",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


# ==================== REQUEST LOGGING ====================

@app.middleware("http")
async def log_requests(request: Request, call_next):
    if request.url.path in _UNLOGGED_PATHS:
        return await call_next(request)

    started = time.perf_counter()
    logger.info(f">> {request.method} {request.url.path}")
    try:
        response = await call_next(request)
    except Exception:
        logger.error(f"<< {request.method} {request.url.path} - failed ({time.perf_counter() - started:.2f}s)")
        raise

    logger.info(f"<< {request.method} {request.url.path} - {response.status_code} ({time.perf_counter() - started:.2f}s)")
    return response
