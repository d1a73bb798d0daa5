"""Ingestion API routes.

Appends metrics, log entries and trace spans to the in-memory stores. The
next generation cycle picks them up.
"""

import logging

from fastapi import APIRouter, Depends, status

from termsite.api.deps import get_storages
from termsite.api.schemas import IngestResponse
from termsite.core.factory import Storages
from termsite.models.records import LogEntryRecord, MetricRecord, TraceRecord

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ingest", tags=["ingestion"])


@router.post("/metrics", response_model=IngestResponse, status_code=status.HTTP_201_CREATED)
async def ingest_metrics(
    metrics: list[MetricRecord],
    storages: Storages = Depends(get_storages),
) -> IngestResponse:
    """Store metric records."""
    accepted = storages.metrics.extend(metrics)
    logger.info(f"Ingested {accepted} metrics")
    return IngestResponse(accepted=accepted, total=storages.metrics.count())


@router.post("/logs", response_model=IngestResponse, status_code=status.HTTP_201_CREATED)
async def ingest_logs(
    logs: list[LogEntryRecord],
    storages: Storages = Depends(get_storages),
) -> IngestResponse:
    """Store log records."""
    accepted = storages.logs.extend(logs)
    logger.info(f"Ingested {accepted} log entries")
    return IngestResponse(accepted=accepted, total=storages.logs.count())


@router.post("/traces", response_model=IngestResponse, status_code=status.HTTP_201_CREATED)
async def ingest_traces(
    traces: list[TraceRecord],
    storages: Storages = Depends(get_storages),
) -> IngestResponse:
    """Store trace spans."""
    accepted = storages.traces.extend(traces)
    logger.info(f"Ingested {accepted} traces")
    return IngestResponse(accepted=accepted, total=storages.traces.count())
