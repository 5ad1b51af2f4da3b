# louage/main.py
"""
FastAPI application entry point.
Includes security middleware, domain + global error handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware
from louage.routers import auth, drivers, feed, fleet_settings, health, passengers, stats, trips, vehicles
from louage.database import create_tables
from louage.config import settings
from louage.exceptions import DataUnavailable, LouageError
from louage.services.session_gate import SessionGate
from louage.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Louage Fleet API",
    description="Seat bookings, trip settlement and fleet management for a shared-taxi route.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Logged-in sessions live here until logout or restart
app.state.session_gate = SessionGate()

# ── CORS (the dashboard is served from another origin) ───────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to the dashboard origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional static API key in front of the whole API.
    Set API_KEY in .env. Leave empty to disable.
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
@app.exception_handler(LouageError)
async def louage_error_handler(request: Request, exc: LouageError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database failure on {request.url.path}: {exc}", exc_info=True)
    unavailable = DataUnavailable()
    return JSONResponse(status_code=unavailable.status_code, content=unavailable.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(auth.router,           prefix="/api/v1", tags=["Auth"])
app.include_router(passengers.router,     prefix="/api/v1", tags=["Reservations"])
app.include_router(trips.router,          prefix="/api/v1", tags=["Trips"])
app.include_router(vehicles.router,       prefix="/api/v1", tags=["Fleet"])
app.include_router(drivers.router,        prefix="/api/v1", tags=["Drivers"])
app.include_router(fleet_settings.router, prefix="/api/v1", tags=["Settings"])
app.include_router(stats.router,          prefix="/api/v1", tags=["Stats"])
app.include_router(feed.router,           prefix="/api/v1", tags=["Live feed"])
app.include_router(health.router,         prefix="/api/v1", tags=["Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("Louage backend starting up...")
    create_tables()
    logger.info("Database tables ready")
    logger.info(f"Route: {settings.ROUTE_ORIGIN} ⇄ {settings.ROUTE_DESTINATION}, "
                f"{settings.SEAT_CAPACITY} seats per leg")
    logger.info(f"Listening on http://{settings.BACKEND_HOST}:{settings.BACKEND_PORT} (docs at /docs)")


@app.on_event("shutdown")
async def shutdown():
    app.state.session_gate.clear()
    logger.info("Louage backend shutting down...")
