import logging
from typing import Optional, Sequence

import uvicorn
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import ReadableSpan, TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    SpanExporter,
    SpanExportResult,
)
from prometheus_client import Info
from prometheus_fastapi_instrumentator import Instrumentator

from cors_relay.relay import Relay, RelayConfig
from cors_relay.relay.route import register_relay_route
from cors_relay.vars import (
    LOG_LEVEL,
    METRICS_ENABLED,
    METRICS_PATH,
    OTLP_ENDPOINT,
    OTLP_HEADERS,
    SERVICE_NAME,
)

logger = logging.getLogger("uvicorn.error")


class FilteringSpanExporter(SpanExporter):
    """
    Wrapper exporter that drops the per-chunk ASGI body spans, which would
    otherwise outnumber the relay spans in every trace.
    """

    def __init__(self, exporter: SpanExporter):
        self.exporter = exporter

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        filtered_spans = [
            span
            for span in spans
            if not (
                span.attributes
                and span.attributes.get("asgi.event.type") == "http.response.body"
            )
        ]
        if filtered_spans:
            return self.exporter.export(filtered_spans)
        return SpanExportResult.SUCCESS

    def shutdown(self):
        return self.exporter.shutdown()

    def force_flush(self, timeout_millis: int = 30000):
        return self.exporter.force_flush(timeout_millis)


def configure_tracing() -> None:
    trace.set_tracer_provider(
        TracerProvider(resource=Resource.create({"service.name": SERVICE_NAME}))
    )
    if OTLP_ENDPOINT:
        otlp_exporter = OTLPSpanExporter(
            endpoint=OTLP_ENDPOINT,
            headers=OTLP_HEADERS.split(",") if OTLP_HEADERS else None,
        )
        trace.get_tracer_provider().add_span_processor(
            BatchSpanProcessor(FilteringSpanExporter(otlp_exporter))
        )


def create_app(config: Optional[RelayConfig] = None) -> FastAPI:
    """Build the relay application; the config defaults to the environment."""
    config = config or RelayConfig.from_env()

    app = FastAPI(title=SERVICE_NAME)
    app.state.relay = Relay(config)

    # Registered before the catch-all relay route so it is not shadowed
    if METRICS_ENABLED:
        Instrumentator().instrument(app).expose(app, endpoint=METRICS_PATH)

    FastAPIInstrumentor.instrument_app(app, excluded_urls="")
    register_relay_route(app)

    logger.info(
        f"Relaying to {config.upstream_url} (max redirects: {config.max_redirects}, "
        f"timeout: {config.upstream_timeout or 'none'})"
    )
    return app


configure_tracing()

app_info = Info("fastapi_app_info", "Application Info")
app_info.info({"app_name": SERVICE_NAME})

app = create_app()


def main() -> None:
    """Run the relay with uvicorn on the configured host and port."""
    config = app.state.relay.config
    logger.info(
        f"CORS relay running at http://{config.listen_host}:{config.listen_port}"
    )
    uvicorn.run(
        app,
        host=config.listen_host,
        port=config.listen_port,
        log_level=LOG_LEVEL,
    )


if __name__ == "__main__":
    main()
