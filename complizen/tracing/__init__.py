"""Tracing and logging for Complizen."""

from .logger import EngineEvent, EngineTracer, get_tracer, log_engine_event, setup_tracing

__all__ = [
    "EngineEvent",
    "EngineTracer",
    "setup_tracing",
    "get_tracer",
    "log_engine_event",
]
