"""Process-wide singletons handed to routers through ``Depends``."""

from fastapi import Request

from .services.day_store import InMemoryDayAttributeStore
from .services.panchanga_service import PanchangaService


def get_panchanga_service(request: Request) -> PanchangaService:
    return request.app.state.panchanga_service


def get_day_store(request: Request) -> InMemoryDayAttributeStore:
    return request.app.state.day_store
