"""OpenTelemetry export of agent and workflow spans.

Backends:
- disabled: no export (default)
- local: OTLP gRPC, e.g. an Aspire dashboard or a collector
- appinsights: Azure Application Insights
"""

import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)

TRACING_BACKENDS = ("disabled", "local", "appinsights")


def _local_exporters(otlp_endpoint: str) -> list[Any]:
    from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
    from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

    return [
        OTLPSpanExporter(endpoint=otlp_endpoint),
        OTLPLogExporter(endpoint=otlp_endpoint),
        OTLPMetricExporter(endpoint=otlp_endpoint),
    ]


def _appinsights_exporters(connection_string: str) -> list[Any]:
    # Exporters only; configure_azure_monitor() pulls in slow auto-instrumentation.
    from azure.monitor.opentelemetry.exporter import (
        AzureMonitorLogExporter,
        AzureMonitorMetricExporter,
        AzureMonitorTraceExporter,
    )

    return [
        AzureMonitorTraceExporter(connection_string=connection_string),
        AzureMonitorLogExporter(connection_string=connection_string),
        AzureMonitorMetricExporter(connection_string=connection_string),
    ]


def configure_tracing(
    backend: str,
    appinsights_connection_string: Optional[str] = None,
    otlp_endpoint: str = "http://localhost:4317",
    enable_sensitive_data: bool = False,
) -> bool:
    """Configure OpenTelemetry providers for the selected backend.

    Args:
        backend: "disabled", "local" or "appinsights"
        appinsights_connection_string: Required for the appinsights backend
        otlp_endpoint: Collector endpoint for the local backend
        enable_sensitive_data: Record prompts and replies in spans. Leave off
            unless PII masking is enabled.

    Returns:
        True when export was configured
    """
    if backend not in TRACING_BACKENDS:
        logger.warning(f"Unknown tracing backend: {backend}, tracing disabled")
        return False
    if backend == "disabled":
        logger.info("Tracing is disabled")
        return False

    if backend == "local":
        exporters = _local_exporters(otlp_endpoint)
        target = otlp_endpoint
    else:
        if not appinsights_connection_string:
            logger.warning("App Insights connection string not provided, tracing disabled")
            return False
        exporters = _appinsights_exporters(appinsights_connection_string)
        target = "Azure Application Insights"

    from agent_framework.observability import configure_otel_providers

    configure_otel_providers(exporters=exporters, enable_sensitive_data=enable_sensitive_data)
    logger.info(f"Tracing configured for {target}")
    return True
