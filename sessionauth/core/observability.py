"""Operational endpoints: Prometheus metrics and the liveness check."""

from __future__ import annotations

from fastapi import FastAPI
from prometheus_client import CollectorRegistry
from prometheus_fastapi_instrumentator import Instrumentator


async def health() -> dict[str, bool]:
    return {"ok": True}


def install_observability(app: FastAPI, registry: CollectorRegistry | None = None) -> Instrumentator:
    """Instrument ``app`` and expose ``/metrics`` and ``/health``.

    Must run before the app starts serving. ``registry`` defaults to the
    process-wide Prometheus registry.
    """

    instrumentator = Instrumentator(registry=registry)
    instrumentator.instrument(app).expose(app, include_in_schema=False)
    app.add_api_route("/health", health, methods=["GET"], tags=["ops"])
    return instrumentator
