import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shiftplan.core.config import settings
from shiftplan.core.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from shiftplan.core.logging import configure_logging
from shiftplan.routers.auth import router as auth_router
from shiftplan.routers.employees import router as employees_router
from shiftplan.routers.restaurants import router as restaurants_router
from shiftplan.routers.roles import router as roles_router
from shiftplan.routers.scheduled_shifts import router as scheduled_shifts_router
from shiftplan.routers.schedules import router as schedules_router
from shiftplan.routers.shift_templates import router as shift_templates_router

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Shiftplan API")

# Comma-separated list, e.g.:
# CORS_ORIGINS="http://localhost:3000,https://shiftplan.example.com"
allow_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]

# Safe fallback for local dev if env var not set
if not allow_origins:
    allow_origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DomainError)
def handle_domain_error(request: Request, exc: DomainError):
    if isinstance(exc, NotFoundError):
        return JSONResponse(status_code=404, content={"detail": exc.message})
    if isinstance(exc, ConflictError):
        return JSONResponse(status_code=400, content={"detail": exc.message, "code": exc.code})
    if isinstance(exc, ValidationError):
        return JSONResponse(status_code=400, content={"detail": exc.message})
    if isinstance(exc, PersistenceError):
        logger.error("%s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=500, content={"detail": "Database error"})
    logger.error("unhandled domain error on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=500, content={"detail": exc.message})


app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(restaurants_router, prefix="/restaurants", tags=["restaurants"])
app.include_router(roles_router, prefix="/restaurants/{restaurant_id}/roles", tags=["roles"])
app.include_router(employees_router, prefix="/restaurants/{restaurant_id}/employees", tags=["employees"])
app.include_router(
    shift_templates_router,
    prefix="/restaurants/{restaurant_id}/shift-templates",
    tags=["shift-templates"],
)
app.include_router(schedules_router, prefix="/restaurants/{restaurant_id}/schedules", tags=["schedules"])
app.include_router(
    scheduled_shifts_router,
    prefix="/restaurants/{restaurant_id}/schedules/{schedule_id}/shifts",
    tags=["scheduled-shifts"],
)


@app.get("/health")
def health():
    return {"status": "ok"}
