from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from timetable_checker.api.routes import conflicts, graph, health, timeslots
from timetable_checker.core.config import Settings, get_settings
from timetable_checker.core.exceptions import AppError
from timetable_checker.core.logging import configure_logging
from timetable_checker.core.middleware import RequestSizeLimitMiddleware, SecurityHeadersMiddleware
from timetable_checker.services.assignment_loader import AssignmentLoader
from timetable_checker.services.conflict_graph import ConflictGraph


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "details": exc.details},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.project_name)
    app.state.settings = settings
    app.state.graph = ConflictGraph(
        settings.conflict_free_policy,
        record_blocked_slots=settings.record_blocked_slot_edges,
    )
    app.state.loader = AssignmentLoader()
    app.add_exception_handler(AppError, app_error_handler)

    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_request_size_bytes)
    app.add_middleware(SecurityHeadersMiddleware, settings=settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
    app.include_router(conflicts.router, prefix=f"{settings.api_prefix}/conflicts", tags=["conflicts"])
    app.include_router(graph.router, prefix=f"{settings.api_prefix}/graph", tags=["graph"])
    app.include_router(timeslots.router, prefix=f"{settings.api_prefix}/timeslots", tags=["timeslots"])
    return app


app = create_app()
