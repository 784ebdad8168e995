# MIT License
# Copyright (c) 2025 Hashborn

"""
Observability Module

Provides metrics for the node lifecycle flows.
"""

from .metrics import metrics_registry, track_operation, write_metrics

__all__ = ['metrics_registry', 'track_operation', 'write_metrics']
