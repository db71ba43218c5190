"""Prometheus metrics endpoint.

Returns the current value of every metric in vc_demo/core/metrics.py in
Prometheus text exposition format (not JSON), e.g.

  credentials_issued_total 3.0
  disclosures_total{outcome="refused_revoked"} 1.0
  zk_proofs_generated_total{type="AgeVerification",status="verified"} 2.0

Left open for the demo; restrict it in any shared deployment.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
