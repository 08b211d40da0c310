"""
Shared Infrastructure
=====================

Cross-cutting technical concerns:
- Structured JSON logging with correlation IDs
- Service telemetry (spans and observers)
- Grafana OTLP latency export
"""
