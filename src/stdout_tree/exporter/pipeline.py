"""Tracer provider bootstrap with the tree exporter attached."""

from __future__ import annotations

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import Tracer, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor
from rich.console import Console

from stdout_tree.config.settings import Settings
from stdout_tree.exporter.exporter import StdoutTreeExporter

TRACER_NAME = "stdout-tree"


def new_provider(
    settings: Settings | None = None,
    *,
    batch: bool = False,
    service_name: str = "stdout-tree",
    console: Console | None = None,
) -> TracerProvider:
    """Build a tracer provider that prints finished traces.

    A simple processor exports span by span, so the exporter holds spans
    until each trace's root has ended. A batch processor exports in the
    background and only holds spans when the settings ask for it.
    """
    settings = settings or Settings.get_instance()
    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)

    if batch:
        exporter = StdoutTreeExporter(console=console, settings=settings)
        provider.add_span_processor(BatchSpanProcessor(exporter))
    else:
        exporter = StdoutTreeExporter(
            console=console, settings=settings, hold_incomplete_traces=True
        )
        provider.add_span_processor(SimpleSpanProcessor(exporter))
    return provider


def install(
    settings: Settings | None = None,
    *,
    batch: bool = False,
    service_name: str = "stdout-tree",
    console: Console | None = None,
) -> tuple[Tracer, TracerProvider]:
    """Register a printing tracer provider globally.

    Call ``provider.shutdown()`` before exit to print traces still held.
    """
    provider = new_provider(
        settings, batch=batch, service_name=service_name, console=console
    )
    trace.set_tracer_provider(provider)
    from stdout_tree import __version__

    return provider.get_tracer(TRACER_NAME, __version__), provider
