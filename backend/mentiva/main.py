"""Main FastAPI application for the Mentiva backend."""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from mentiva.api.routes.enfoques import router as enfoques_router
from mentiva.api.routes.missions import router as missions_router
from mentiva.api.routes.north_star import router as north_star_router
from mentiva.api.routes.profile import router as profile_router
from mentiva.api.routes.progress import router as progress_router
from mentiva.api.routes.tasks import router as tasks_router
from mentiva.api.routes.weekly_plan import router as weekly_plan_router
from mentiva.core.config import settings
from mentiva.core.errors import (
    MentivaError,
    http_exception_handler,
    mentiva_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from mentiva.core.logging import configure_logging
from mentiva.core.middleware import RequestIDMiddleware
from mentiva.observability.client import init_opik
from mentiva.observability.tracing import trace

configure_logging(log_level=settings.log_level)

app = FastAPI(title=settings.app_name, version="0.1.0", debug=settings.debug)
app.add_middleware(RequestIDMiddleware)
app.add_exception_handler(MentivaError, mentiva_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)
app.include_router(missions_router)
app.include_router(north_star_router)
app.include_router(enfoques_router)
app.include_router(tasks_router)
app.include_router(weekly_plan_router)
app.include_router(profile_router)
app.include_router(progress_router)


@app.on_event("startup")
async def startup_observability() -> None:
    """Initialize observability backends after the event loop starts."""
    init_opik()


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can probe the API."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
