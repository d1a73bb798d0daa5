"""FastAPI routers and dependencies."""

from termsite.api.deps import (
    get_component_factory,
    get_engine,
    get_scheduler,
    get_storages,
)
from termsite.api.ingest import router as ingest_router
from termsite.api.pages import router as pages_router

__all__ = [
    "get_component_factory",
    "get_engine",
    "get_scheduler",
    "get_storages",
    "ingest_router",
    "pages_router",
]
