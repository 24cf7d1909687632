"""
Shared utilities for the Lessons Proxy.

This package aggregates common building blocks consumed by services:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request and trace correlation
- metrics: Prometheus metrics helpers
- tracing: OpenTelemetry tracing config
- errors: Canonical error types and the {message} envelope
- base_service: FastAPI app skeleton with health, metrics and error handlers

Do not import from service packages into shared/.
"""
