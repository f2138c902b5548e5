from fastapi import APIRouter, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

router = APIRouter(prefix="/metrics", tags=["metrics"])


@router.get("", summary="Prometheus scrape endpoint (export counters and timings)")
def metrics_root():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
