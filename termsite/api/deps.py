"""FastAPI dependencies for dependency injection."""

import logging

from fastapi import Depends, Request

from termsite.core.factory import ComponentFactory, Storages
from termsite.scheduler import Scheduler
from termsite.strategies.template_engine import TemplateEngine

logger = logging.getLogger(__name__)


def get_component_factory(request: Request) -> ComponentFactory:
    """Return the factory attached to the running application."""
    return request.app.state.factory


def get_storages(factory: ComponentFactory = Depends(get_component_factory)) -> Storages:
    return factory.get_storages()


def get_engine(factory: ComponentFactory = Depends(get_component_factory)) -> TemplateEngine:
    return factory.get_template_engine()


def get_scheduler(factory: ComponentFactory = Depends(get_component_factory)) -> Scheduler:
    return factory.get_scheduler()
