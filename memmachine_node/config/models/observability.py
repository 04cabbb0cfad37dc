"""Observability configuration."""

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["json", "console"]
TraceFormat = Literal["json", "human"]
TraceVerbosity = Literal["minimal", "normal", "verbose"]


class ObservabilityConfig(BaseModel):
    """Logging and operation tracing settings."""

    log_level: LogLevel = Field(default="INFO", description="Logging level")
    log_format: LogFormat = Field(default="json", description="Log renderer")
    redact_pii: bool = Field(default=True, description="Redact PII from logs")
    tracing_enabled: bool = Field(
        default=False, description="Collect operation traces in node output"
    )
    trace_format: TraceFormat = Field(default="json", description="Trace output format")
    trace_verbosity: TraceVerbosity = Field(
        default="normal", description="Detail level of trace output"
    )
    export_to_jaeger: bool = Field(
        default=False, description="Export collected traces over OTLP/HTTP"
    )
    jaeger_endpoint: str = Field(
        default="http://jaeger:4318/v1/traces",
        description="OTLP HTTP endpoint for trace export",
    )
