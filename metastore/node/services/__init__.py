# MIT License
# Copyright (c) 2025 Hashborn

"""
Service control for the store units.
"""

from .controller import ServiceController
from .process import ProcessLister, ProcessWatcher, PsutilProcessLister
from .systemd import ServiceManager, SystemdServiceManager, UnitStatus

__all__ = [
    "ServiceController",
    "ProcessLister",
    "ProcessWatcher",
    "PsutilProcessLister",
    "ServiceManager",
    "SystemdServiceManager",
    "UnitStatus",
]
