"""Telemetry bootstrap helpers for OpenTelemetry tracing."""

from __future__ import annotations

import logging
import os
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor, SpanExporter
from opentelemetry.sdk.trace.sampling import (
    ALWAYS_OFF,
    ALWAYS_ON,
    ParentBased,
    Sampler,
    TraceIdRatioBased,
)

from config import SETTINGS, WizardSettings

LOGGER = logging.getLogger("membership.telemetry")

_INITIALISED = False


def _coerce_ratio(raw: str, *, default: float) -> float:
    """Convert ``raw`` to a float ratio within [0.0, 1.0]."""

    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        LOGGER.warning("Invalid OTEL_TRACES_SAMPLER_ARG '%s'; using default %.2f", raw, default)
        return default
    return max(0.0, min(1.0, value))


def _build_sampler() -> Sampler:
    """Create a sampler based on environment configuration."""

    sampler_name = os.getenv("OTEL_TRACES_SAMPLER", "").strip().lower()
    sampler_arg = os.getenv("OTEL_TRACES_SAMPLER_ARG", "").strip()

    if sampler_name in {"", "parentbased_traceidratio"}:
        return ParentBased(TraceIdRatioBased(_coerce_ratio(sampler_arg, default=1.0)))
    if sampler_name == "traceidratio":
        return TraceIdRatioBased(_coerce_ratio(sampler_arg, default=1.0))
    if sampler_name == "always_on":
        return ALWAYS_ON
    if sampler_name == "always_off":
        return ALWAYS_OFF

    LOGGER.warning("Unknown OTEL_TRACES_SAMPLER '%s'; defaulting to parentbased_traceidratio", sampler_name)
    return ParentBased(TraceIdRatioBased(1.0))


def _create_exporter(settings: WizardSettings) -> Optional[SpanExporter]:
    if settings.trace_console:
        return ConsoleSpanExporter()
    return None


def setup_tracing(settings: WizardSettings = SETTINGS, *, force: bool = False) -> bool:
    """Configure the global tracer provider if telemetry is enabled.

    Returns:
        ``True`` when a provider was installed by this call.
    """

    global _INITIALISED
    if _INITIALISED and not force:
        return False

    exporter = _create_exporter(settings)
    if exporter is None:
        LOGGER.debug("No span exporter configured; skipping telemetry bootstrap")
        return False

    service_name = os.getenv("OTEL_SERVICE_NAME", "membership-wizard")
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}), sampler=_build_sampler())
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    _INITIALISED = True
    LOGGER.info("OpenTelemetry tracing initialised for service '%s'", service_name)
    return True


__all__ = ["setup_tracing"]
