"""OpenTelemetry tracing helpers for the question answering service.

The service opens spans through `get_tracer`; until `configure_tracing` is
called the global no-op provider is used and spans cost nothing.

Usage with an OTLP backend (for example a local Arize Phoenix instance):

    from pdf_chat.tracing import configure_tracing

    configure_tracing(endpoint="http://localhost:6006/v1/traces", service_name="pdf-chat")

Usage in tests:

    exporter = InMemorySpanExporter()
    configure_tracing(exporter=exporter)
"""
from __future__ import annotations

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor, SpanExporter

# OpenInference semantic-convention attribute names
ATTR_INPUT_VALUE = "input.value"
ATTR_OUTPUT_VALUE = "output.value"
ATTR_LLM_MODEL_NAME = "llm.model_name"
ATTR_RETRIEVAL_DOCUMENTS = "retrieval.documents"
ATTR_STORE_SEGMENTS = "store.segments"
ATTR_STORE_GENERATION = "store.generation"

_provider: TracerProvider | None = None


def configure_tracing(
    endpoint: str | None = None,
    service_name: str = "pdf-chat",
    exporter: SpanExporter | None = None,
) -> TracerProvider:
    """Create and register a TracerProvider for this process.

    Args:
        endpoint: OTLP HTTP endpoint to export to. When None and no
            `exporter` is given, spans are printed to stdout.
        service_name: Label identifying this service in the backend.
        exporter: Pre-built exporter; takes precedence over `endpoint`.

    Returns:
        The configured provider, also used by `get_tracer`.
    """
    global _provider

    provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: service_name}))

    if exporter is not None:
        chosen_exporter: SpanExporter = exporter
    elif endpoint is not None:
        try:
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
        except ImportError as exc:  # pragma: no cover
            raise ImportError(
                "opentelemetry-exporter-otlp-proto-http is required to export traces to an OTLP endpoint. "
                "Install it with:\n  pip install opentelemetry-exporter-otlp-proto-http"
            ) from exc
        chosen_exporter = OTLPSpanExporter(endpoint=endpoint)
    else:
        chosen_exporter = ConsoleSpanExporter()

    provider.add_span_processor(SimpleSpanProcessor(chosen_exporter))
    trace.set_tracer_provider(provider)
    _provider = provider
    return provider


def get_tracer(name: str) -> trace.Tracer:
    """Return a tracer from the configured provider, or the global one."""
    if _provider is not None:
        return _provider.get_tracer(name)
    return trace.get_tracer(name)
