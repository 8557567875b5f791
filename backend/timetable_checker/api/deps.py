from fastapi import Request

from timetable_checker.core.config import Settings, get_settings
from timetable_checker.core.exceptions import ConfigurationError
from timetable_checker.services.assignment_loader import AssignmentLoader
from timetable_checker.services.conflict_graph import ConflictGraph


def get_app_settings(request: Request) -> Settings:
    # The settings the app was built with, which may differ from the cached defaults.
    return getattr(request.app.state, "settings", None) or get_settings()


def get_graph(request: Request) -> ConflictGraph:
    graph = getattr(request.app.state, "graph", None)
    if graph is None:
        raise ConfigurationError("Conflict graph is not configured")
    return graph


def get_loader(request: Request) -> AssignmentLoader:
    loader = getattr(request.app.state, "loader", None)
    if loader is None:
        raise ConfigurationError("Assignment loader is not configured")
    return loader
