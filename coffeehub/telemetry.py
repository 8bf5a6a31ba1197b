import os

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.flask import FlaskInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from models import db

TRACER_NAME = "coffeehub"


def get_tracer():
    return trace.get_tracer(TRACER_NAME)


def init_tracing(app):
    """Export spans for requests, queries and checkout."""
    resource = Resource.create({
        "service.name": app.config.get("OTEL_SERVICE_NAME", "coffeehub-backend"),
        "deployment.environment": os.getenv("APP_ENV", "development"),
    })
    provider = TracerProvider(resource=resource)
    if app.config.get("TESTING"):
        exporter = ConsoleSpanExporter()
    else:
        exporter = OTLPSpanExporter(endpoint=app.config.get("OTEL_EXPORTER_OTLP_ENDPOINT"))
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    set_global_textmap(TraceContextTextMapPropagator())

    FlaskInstrumentor().instrument_app(app)
    with app.app_context():
        SQLAlchemyInstrumentor().instrument(engine=db.engine)
