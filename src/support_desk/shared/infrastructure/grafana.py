"""
Grafana OTLP Metrics Exporter
==============================

Pushes service operation latency to Grafana Cloud via OTLP.

Metrics exported:
- support_operation_latency_ms: latency of a case/person service operation,
  tagged with the operation name, outcome and span tags
"""

import base64
import time
from typing import Optional, Dict, Any

import httpx

from support_desk.config import get_settings
from support_desk.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class GrafanaOTLPExporter:
    """
    Export operation metrics to Grafana Cloud via OTLP HTTP endpoint.

    Uses OpenTelemetry Protocol (OTLP) JSON format for metrics.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        api_key: Optional[str] = None,
        instance_id: Optional[str] = None,
        timeout_seconds: float = 10.0
    ):
        settings = get_settings()
        self._host = host or settings.grafana_host
        self._api_key = api_key or settings.grafana_api_key
        self._instance_id = instance_id or settings.grafana_instance_id
        self._timeout = timeout_seconds
        self._service_name = settings.app_name
        self._service_version = settings.app_version
        self._environment = settings.environment
        self._enabled = bool(self._host and self._api_key and self._instance_id)

        if self._enabled:
            auth_pair = f"{self._instance_id}:{self._api_key}"
            self._auth_encoded = base64.b64encode(auth_pair.encode()).decode()
            # Don't double-append the path if host already includes it
            if "/otlp/v1/metrics" not in self._host:
                self._url = f"{self._host}/otlp/v1/metrics"
            else:
                self._url = self._host
            logger.info(
                "Grafana OTLP exporter initialized",
                extra={"host": self._host, "instance_id": self._instance_id}
            )
        else:
            logger.info(
                "Grafana OTLP exporter not configured - metrics will not be exported",
                extra={
                    "host_configured": bool(self._host),
                    "api_key_configured": bool(self._api_key),
                    "instance_id_configured": bool(self._instance_id)
                }
            )

    def is_enabled(self) -> bool:
        """Check if exporter is properly configured."""
        return self._enabled

    def build_payload(
        self,
        operation: str,
        latency_ms: int,
        status: str,
        attributes: Optional[Dict[str, Any]] = None
    ) -> dict:
        """Build the OTLP gauge payload for one operation measurement."""
        timestamp_ns = int(time.time() * 1_000_000_000)

        metric_attributes = [
            {"key": "operation", "value": {"stringValue": operation}},
            {"key": "status", "value": {"stringValue": status}},
            {"key": "service", "value": {"stringValue": self._service_name}},
        ]
        for key, value in (attributes or {}).items():
            metric_attributes.append({
                "key": key,
                "value": {"stringValue": str(value)}
            })

        return {
            "resourceMetrics": [
                {
                    "resource": {
                        "attributes": [
                            {"key": "service.name", "value": {"stringValue": self._service_name}},
                            {"key": "service.version", "value": {"stringValue": self._service_version}},
                            {"key": "deployment.environment", "value": {"stringValue": self._environment}},
                        ]
                    },
                    "scopeMetrics": [
                        {
                            "metrics": [
                                {
                                    "name": "support_operation_latency_ms",
                                    "unit": "ms",
                                    "description": "Support desk service operation latency",
                                    "gauge": {
                                        "dataPoints": [
                                            {
                                                "asInt": latency_ms,
                                                "timeUnixNano": timestamp_ns,
                                                "attributes": metric_attributes
                                            }
                                        ]
                                    }
                                }
                            ]
                        }
                    ]
                }
            ]
        }

    async def export_operation_latency(
        self,
        operation: str,
        latency_ms: int,
        status: str = "ok",
        attributes: Optional[Dict[str, Any]] = None
    ) -> bool:
        """
        Export the latency of one service operation.

        Args:
            operation: Span/operation name (e.g., "SupportPersonService.create_person")
            latency_ms: Operation latency in milliseconds
            status: "ok" or "error"
            attributes: Span tags to attach to the data point

        Returns:
            True if export succeeded, False otherwise
        """
        if not self._enabled:
            return False

        payload = self.build_payload(operation, latency_ms, status, attributes)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Basic {self._auth_encoded}",
            "X-Grafana-Org-Id": str(self._instance_id)
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(self._url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.error(
                "Error exporting operation latency to Grafana",
                extra={"error": str(e), "operation": operation}
            )
            return False

        if response.status_code in (200, 202):
            return True

        logger.warning(
            "Failed to export metrics to Grafana",
            extra={
                "status_code": response.status_code,
                "response": response.text[:500],
                "url": self._url
            }
        )
        return False
