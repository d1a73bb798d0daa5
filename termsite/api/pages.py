"""Page API routes.

Renders templates on demand against the live stores and exposes the
scheduler's generation cycle.
"""

import asyncio
import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from termsite.api.deps import get_component_factory, get_engine, get_scheduler
from termsite.api.schemas import (
    CacheClearResponse,
    GenerateResponse,
    TaskListResponse,
    TaskMetricsResponse,
)
from termsite.core.factory import ComponentFactory
from termsite.interfaces.template import (
    TemplateError,
    TemplateNotFoundError,
    TemplateParseError,
)
from termsite.scheduler import Scheduler
from termsite.strategies.template_engine import TemplateEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pages", tags=["pages"])


def _task_responses(scheduler: Scheduler) -> list[TaskMetricsResponse]:
    return [TaskMetricsResponse.model_validate(m) for m in scheduler.task_metrics()]


@router.get("/tasks", response_model=TaskListResponse)
async def list_tasks(scheduler: Scheduler = Depends(get_scheduler)) -> TaskListResponse:
    """Return execution counters for every scheduled task."""
    return TaskListResponse(
        running=scheduler.is_running,
        interval_seconds=scheduler.interval_seconds,
        tasks=_task_responses(scheduler),
    )


@router.post("/generate", response_model=GenerateResponse)
async def generate_pages(scheduler: Scheduler = Depends(get_scheduler)) -> GenerateResponse:
    """Run one generation cycle immediately."""
    logger.info("Manual generation cycle requested")
    succeeded = await scheduler.run_once()
    tasks = _task_responses(scheduler)
    return GenerateResponse(succeeded=succeeded, total=len(tasks), tasks=tasks)


@router.post("/cache/clear", response_model=CacheClearResponse)
async def clear_template_cache(engine: TemplateEngine = Depends(get_engine)) -> CacheClearResponse:
    """Drop every cached template so the next render re-reads the files."""
    cleared = engine.cached_names()
    engine.clear_cache()
    return CacheClearResponse(cleared=cleared)


@router.get("/{name}")
async def render_page(
    name: str,
    output_format: Literal["html", "text"] = Query(
        default="html", alias="format", description="Output format"
    ),
    factory: ComponentFactory = Depends(get_component_factory),
) -> Response:
    """Render a template with the current telemetry.

    Raises:
        HTTPException: 404 for an unknown template, 422 for malformed markup,
            500 for any other template failure.
    """
    engine = factory.get_template_engine()
    renderer = factory.get_renderer(output_format)
    context = factory.get_home_generator().build_context()

    try:
        content = await asyncio.to_thread(engine.render, name, context, renderer)
    except TemplateNotFoundError as e:
        logger.warning(f"Page not found: {name}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except TemplateParseError as e:
        logger.warning(f"Template '{name}' failed to parse: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        ) from e
    except TemplateError as e:
        logger.error(f"Failed to render page '{name}': {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from e

    return Response(content=content, media_type=renderer.media_type)
