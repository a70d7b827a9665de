from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

_configured = False


def setup_tracing(service_name: str, service_version: str = "0.1.0") -> None:
    """Registers a global tracer provider exporting spans over OTLP/gRPC."""
    global _configured
    if _configured:
        return

    resource = Resource(
        attributes={SERVICE_NAME: service_name, SERVICE_VERSION: service_version}
    )
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))

    trace.set_tracer_provider(provider)
    _configured = True


def get_tracer(module_name: str) -> trace.Tracer:
    """Gets a tracer for a module. Spans are no-ops until setup_tracing runs."""
    return trace.get_tracer(module_name)
