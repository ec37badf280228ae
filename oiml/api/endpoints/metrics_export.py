"""Prometheus scrape endpoint plus the in-process named counters."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from oiml.core.observability.metrics import snapshot_named

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
def prometheus_metrics() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get("/metrics/named", include_in_schema=False)
def named_counters():
    return {"counters": snapshot_named()}
