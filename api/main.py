"""
Courier Booking — FastAPI Backend
Parcel booking, payment, tracking and feedback service
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config import settings
from db.database import create_tables, engine
from routers import auth, bookings, feedback, payments
from services.errors import CourierError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    if settings.AUTO_CREATE_TABLES:
        await create_tables()
    logger.info("Courier API starting...")
    yield
    # Shutdown
    await engine.dispose()
    logger.info("Courier API shut down.")


app = FastAPI(
    title="Courier Booking API",
    description="Parcel booking, payment, tracking and feedback backend",
    version="1.0.0",
    lifespan=lifespan,
)

# ── CORS ───────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Error envelope ─────────────────────────────────────────

def _envelope(status_code: int, message: str, data=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "data": data},
    )


@app.exception_handler(CourierError)
async def courier_error_handler(request: Request, exc: CourierError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _envelope(exc.status_code, exc.message, exc.data)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return _envelope(422, "Validation failed", errors)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _envelope(500, "An unexpected error occurred")


# ── Routers ────────────────────────────────────────────────
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(bookings.router, prefix="/api/bookings", tags=["Bookings"])
app.include_router(payments.router, prefix="/api/payments", tags=["Payments"])
app.include_router(feedback.router, prefix="/api/feedback", tags=["Feedback"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "Courier Booking API"}


@app.get("/health/db")
async def health_db():
    """Verify the database is reachable and the schema is in place."""
    try:
        async with engine.connect() as conn:
            count_row = (await conn.execute(text("SELECT COUNT(*) FROM customers"))).first()
            customer_count = count_row[0] if count_row else 0
        return {"status": "ok", "customers_count": customer_count}
    except Exception as e:
        logger.warning("Database health check failed: %s", e)
        return {"status": "error", "detail": str(e)}
