"""Observability: structured logging, operation tracing, metrics.

structlog for logging, OpenTelemetry for span export and Prometheus
for request metrics.
"""
