import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from sqlalchemy.exc import IntegrityError
from app.api.routes import router
from app.config import settings
from app.modules.ship_errors import BadShipIdError, ShipNotFoundError, ShipValidationError

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the target database and optionally create tables at startup."""
    from app.database import engine, init_db

    logger.info("CosmoPort starting (database: %s)", engine.url.render_as_string(hide_password=True))
    if settings.INIT_DB_ON_STARTUP:
        init_db()
    yield


app = FastAPI(
    title="CosmoPort",
    description="Registry of space ships with filtered search, pagination and derived ratings.",
    version=settings.VERSION,
    lifespan=lifespan,
)

# CORS origins from settings (supports comma-separated env var)
cors_origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.RATE_LIMIT])
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.include_router(router, prefix="/api/v1")


# ── Structured error handlers ─────────────────────────────────────────────────

@app.exception_handler(ShipValidationError)
async def ship_validation_error_handler(request: Request, exc: ShipValidationError):
    return JSONResponse(status_code=400, content={"error": "Validation error", "detail": exc.problems})


@app.exception_handler(BadShipIdError)
async def bad_ship_id_handler(request: Request, exc: BadShipIdError):
    return JSONResponse(status_code=400, content={"error": "Bad identifier", "detail": str(exc)})


@app.exception_handler(ShipNotFoundError)
async def ship_not_found_handler(request: Request, exc: ShipNotFoundError):
    return JSONResponse(status_code=404, content={"error": "Not found", "detail": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # Malformed ids, bodies and query parameters are client errors, reported as 400
    detail = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Bad request", "detail": detail})


@app.exception_handler(OverflowError)
async def overflow_error_handler(request: Request, exc: OverflowError):
    # Epoch-ms dates outside the calendar, page offsets past the database integer range
    return JSONResponse(status_code=400, content={"error": "Bad request", "detail": "Value out of range"})


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    return JSONResponse(status_code=409, content={"error": "Conflict", "detail": str(exc.orig) if exc.orig else str(exc)})


@app.exception_handler(Exception)
async def general_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s %s:\n%s", request.method, request.url.path, traceback.format_exc())
    return JSONResponse(status_code=500, content={"error": "Internal server error", "detail": "An unexpected error occurred."})


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "version": settings.VERSION}
