# MIT License
# Copyright (c) 2025 Hashborn

"""
Prometheus Metrics

Lifecycle metrics in Prometheus format. The node agent runs each command as a
short-lived process, so metrics are written to a textfile-collector file
rather than served over HTTP.

Metrics:
- Lifecycle operations by outcome
- Time spent waiting for the store process to exit
- Symlink switches
"""

import logging
import time
from contextlib import contextmanager

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, write_to_textfile

logger = logging.getLogger(__name__)

# Create registry for metrics
metrics_registry = CollectorRegistry()

# ═══════════════════════════════════════════════════════════════════
# LIFECYCLE METRICS
# ═══════════════════════════════════════════════════════════════════

operations_total = Counter(
    'metastore_operations_total',
    'Lifecycle operations run on this node',
    ['operation', 'outcome'],
    registry=metrics_registry
)

operation_duration_seconds = Histogram(
    'metastore_operation_duration_seconds',
    'Duration of lifecycle operations',
    ['operation'],
    buckets=[0.1, 0.5, 1, 5, 15, 60, 300, 900],
    registry=metrics_registry
)

last_operation_timestamp = Gauge(
    'metastore_last_operation_timestamp_seconds',
    'Unix time the last lifecycle operation finished',
    ['operation'],
    registry=metrics_registry
)

# ═══════════════════════════════════════════════════════════════════
# SERVICE / FILESYSTEM METRICS
# ═══════════════════════════════════════════════════════════════════

process_wait_seconds = Histogram(
    'metastore_process_wait_seconds',
    'Time spent waiting for the store process to exit',
    buckets=[0.1, 0.5, 1, 5, 15, 60, 300],
    registry=metrics_registry
)

version_switches_total = Counter(
    'metastore_version_switches_total',
    'Symlink switches performed',
    ['kind'],
    registry=metrics_registry
)


@contextmanager
def track_operation(operation: str):
    """Count an operation and its outcome ("success" or "error")."""
    started = time.monotonic()
    try:
        yield
    except Exception:
        operations_total.labels(operation=operation, outcome="error").inc()
        raise
    else:
        operations_total.labels(operation=operation, outcome="success").inc()
    finally:
        operation_duration_seconds.labels(operation=operation).observe(time.monotonic() - started)
        last_operation_timestamp.labels(operation=operation).set_to_current_time()


def write_metrics(path: str):
    """Write the registry in textfile-collector format."""
    write_to_textfile(path, metrics_registry)
    logger.debug(f"Wrote metrics to {path}")
