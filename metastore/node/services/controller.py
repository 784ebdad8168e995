# MIT License
# Copyright (c) 2025 Hashborn

"""
Service Controller

Thin facade over the service manager for the store units.
"""

import logging

from .process import ProcessWatcher
from .systemd import ServiceManager
from ..core.deadline import Deadline
from ..core.errors import BadParameterError, LifecycleError
from ...protocol.types.jobs import ServiceDescriptor

logger = logging.getLogger(__name__)


def _unit_name(service) -> str:
    if isinstance(service, ServiceDescriptor):
        return service.name
    return service


class ServiceController:
    """
    Disable/enable store units and query unit state.

    Args:
        manager: Service manager backend
        watcher: Process watcher used to confirm shutdown
        process_name: Executable name of the store process
    """

    def __init__(self, manager: ServiceManager, watcher: ProcessWatcher, process_name: str = "etcd"):
        self.manager = manager
        self.watcher = watcher
        self.process_name = process_name

    def disable(self, service, deadline: Deadline):
        """
        Mask and stop a unit, then wait for the store process to exit.

        Stop returns once the process has been told to shut down, so the
        process table is polled before the caller may touch the data directory.
        """
        unit = _unit_name(service)
        self.manager.mask(unit, timeout=deadline.remaining())
        self.manager.stop(unit, timeout=deadline.remaining())
        self.watcher.wait_for_stopped(self.process_name, deadline)
        logger.info(f"Disabled {unit}")

    def enable(self, service, deadline: Deadline):
        """Unmask and start a unit without waiting for readiness."""
        unit = _unit_name(service)
        self.manager.unmask(unit, timeout=deadline.remaining())
        self.manager.start(unit, timeout=deadline.remaining())
        logger.info(f"Enabled {unit}")

    def status(self, service) -> str:
        """
        Active state of exactly one unit.

        Raises:
            BadParameterError: If the lookup doesn't return exactly one unit
        """
        unit = _unit_name(service)
        units = self.manager.list_units([unit])
        if len(units) != 1:
            raise BadParameterError(f"unexpected number of status results when checking service {unit!r}: {len(units)}")
        return units[0].active_state

    def try_restart(self, service, deadline: Deadline):
        """Request a restart; failures are logged, not raised."""
        unit = _unit_name(service)
        try:
            self.manager.restart(unit, timeout=deadline.remaining())
        except LifecycleError as e:
            logger.warning(f"error attempting to restart service {unit}: {e}")
