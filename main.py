"""FastAPI entry point for the School Admin service."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import get_settings
from errors import EntityNotFoundError
from services.middleware import RequestIdMiddleware
from services.school_store import get_school_store

logger = logging.getLogger(__name__)

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Seed the in-memory store from fixtures before serving requests."""
    store = get_school_store()
    logger.info("School data store ready: %s", store.sizes())
    yield


app = FastAPI(
    title="School Admin Service",
    description="In-memory school administration data service with reports",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Middleware stack (outermost first) ─────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIdMiddleware)


@app.exception_handler(EntityNotFoundError)
async def entity_not_found_handler(request: Request, exc: EntityNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


# ── Register routers ────────────────────────────────────────
from api.attendance import router as attendance_router  # noqa: E402
from api.calendar import router as calendar_router  # noqa: E402
from api.classes import router as classes_router  # noqa: E402
from api.grades import router as grades_router  # noqa: E402
from api.health import router as health_router  # noqa: E402
from api.reports import router as reports_router  # noqa: E402
from api.students import router as students_router  # noqa: E402

app.include_router(health_router)
app.include_router(students_router)
app.include_router(classes_router)
app.include_router(calendar_router)
app.include_router(grades_router)
app.include_router(attendance_router)
app.include_router(reports_router)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.service_port,
        reload=settings.debug,
    )
