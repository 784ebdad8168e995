# MIT License
# Copyright (c) 2025 Hashborn

"""
Upgrade Manager

Selects the store version on this node and moves it between versions.

Upgrade and rollback are the same re-entrant procedure with the paths
reversed. Every step checks what a previous run already did, so the procedure
can be repeated after a crash at any point and converges on the same state.
"""

import logging
import os
from typing import Optional

from .registry import read_desired_version, read_version_record, write_version_record
from .symlinks import SymlinkSwitcher
from ..core.deadline import Deadline
from ..core.environment import NodeEnvironment
from ..core.errors import BadParameterError, LifecycleError, NotFoundError
from ..core.filesystem import remove_all
from ..observability.metrics import track_operation
from ..services.controller import ServiceController
from ...protocol.config.params import ENV_ETCD_PROXY, ETCD_PROXY_ON, SAFE_UNIT_STATES, LifecycleConfig
from ...protocol.types.jobs import ServiceDescriptor, ServiceRole
from ...protocol.types.version import Version, VersionRecord

logger = logging.getLogger(__name__)


class UpgradeManager:
    """
    Manages the store version of this node.

    Responsibilities:
    - Detect the version to run and point the symlinks at it (init)
    - Upgrade to the release's version, keeping the old one as backup
    - Roll back to the backup version
    - Disable/enable the primary and upgrade-shadow units
    """

    def __init__(
        self,
        config: LifecycleConfig,
        services: ServiceController,
        switcher: Optional[SymlinkSwitcher] = None,
    ):
        """
        Initialize upgrade manager.

        Args:
            config: Lifecycle configuration
            services: Service controller for the store units
            switcher: Symlink switcher (default: built from config)
        """
        self.config = config
        self.services = services
        self.switcher = switcher or SymlinkSwitcher(config)

    @property
    def primary_service(self) -> ServiceDescriptor:
        return ServiceDescriptor(name=self.config.etcd_service, role=ServiceRole.PRIMARY)

    @property
    def upgrade_service(self) -> ServiceDescriptor:
        return ServiceDescriptor(name=self.config.etcd_upgrade_service, role=ServiceRole.UPGRADE_SHADOW)

    def _deadline(self) -> Deadline:
        return Deadline(self.config.upgrade_timeout)

    def is_proxy(self) -> bool:
        env = NodeEnvironment.read(self.config.environment_file)
        return env.get(ENV_ETCD_PROXY) == ETCD_PROXY_ON

    def desired_version(self) -> Version:
        return read_desired_version(self.config.release_file, self.config.legacy_version)

    def read_record(self) -> VersionRecord:
        """
        Version record of this node.

        A missing record means the install predates version tracking.
        """
        try:
            return read_version_record(self.config.version_file, self.config.legacy_version)
        except NotFoundError:
            return VersionRecord(current=Version.legacy(self.config.legacy_version))

    # ─── init ────────────────────────────────────────────────────────────

    def init(self) -> Version:
        """
        Point the binary and data symlinks at the current version.

        Without a version record and without legacy data, the node is a new
        install and starts directly on the desired version.

        Returns:
            The version the symlinks now point at
        """
        with track_operation("init"):
            desired = self.desired_version()
            logger.info(f"Desired etcd version: {desired}")

            try:
                current = read_version_record(self.config.version_file, self.config.legacy_version).current
            except NotFoundError:
                current = Version.legacy(self.config.legacy_version)
                if not os.path.lexists(self.config.legacy_data_dir):
                    logger.info(f"New installation detected, using etcd version: {desired}")
                    write_version_record(self.config.version_file, desired)
                    current = desired
            logger.info(f"Current etcd version: {current}")

            self.switcher.switch_binaries(current)
            self.switcher.switch_data(current)
            return current

    # ─── upgrade / rollback ──────────────────────────────────────────────

    def upgrade(self) -> Optional[VersionRecord]:
        """
        Record the desired version as current, keeping the old one as backup.

        Returns:
            The resulting record, or None on a proxy node
        """
        with track_operation("upgrade"):
            return self._update(rollback=False)

    def rollback(self) -> Optional[VersionRecord]:
        """
        Record the backup version as current.

        Returns:
            The resulting record, or None on a proxy node
        """
        with track_operation("rollback"):
            return self._update(rollback=True)

    def _update(self, rollback: bool) -> Optional[VersionRecord]:
        """
        Shared body of upgrade and rollback.

        Only the member subdirectory of a version directory is purged. Other
        entries directly under <base>/<version> are left in place.
        """
        logger.info("Updating etcd")

        if self.is_proxy():
            logger.info("etcd is in proxy mode, nothing to do")
            return None

        self.check_services_stopped()

        desired = self.desired_version()
        logger.info(f"Desired etcd version: {desired}")
        record = self.read_record()
        logger.info(f"Current etcd version: {record.current}")
        logger.info(f"Backup etcd version: {record.backup or ''}")

        if rollback:
            # The next init switches the symlinks back to the restored version
            if record.backup is not None:
                record = write_version_record(self.config.version_file, record.backup)
        else:
            if record.current != desired:
                displaced = record.backup
                record = write_version_record(self.config.version_file, desired, record.current)
                # Data of the backup version being replaced is no longer reachable
                if displaced is not None and displaced != record.backup:
                    self._purge_data(displaced)

            # Data left by a previous attempt at this upgrade
            self._purge_data(desired)
            self.switcher.ensure_version_dir(desired)

        self._restart_consumer()
        logger.info("Upgrade complete")
        return record

    def check_services_stopped(self):
        """
        Require both store units to be stopped.

        Raises:
            BadParameterError: If a unit is in any state other than inactive or failed
        """
        logger.info("Checking etcd service status")
        for service in (self.primary_service, self.upgrade_service):
            try:
                status = self.services.status(service)
            except LifecycleError as e:
                logger.warning(f"Failed to query status of service {service.name}. Continuing upgrade. Error: {e}")
                continue
            logger.info(f"{service.name} service status: {status}")
            if status not in SAFE_UNIT_STATES:
                raise BadParameterError(
                    f"{service.name} must be disabled in order to run the upgrade. current status: {status}"
                )

    def _purge_data(self, version: Version):
        path = self.switcher.data_dir(version)
        if not os.path.lexists(path):
            return
        logger.info(f"Removing etcd data for version {version}: {path}")
        remove_all(path)

    def _restart_consumer(self):
        """Restart the API server so it picks up new store settings, if it's running."""
        unit = self.config.apiserver_service
        try:
            status = self.services.status(unit)
        except LifecycleError as e:
            logger.warning(f"Failed to query status of service {unit}: {e}")
            return
        if status == "active":
            self.services.try_restart(unit, self._deadline())

    # ─── enable / disable ────────────────────────────────────────────────

    def disable(self, upgrade_service: bool = False):
        """Stop a store unit and wait for the store process to exit."""
        service = self.upgrade_service if upgrade_service else self.primary_service
        with track_operation("disable"):
            self.services.disable(service, self._deadline())

    def enable(self, upgrade_service: bool = False):
        """
        Start a store unit.

        The upgrade-shadow unit is left alone on a proxy node, which holds no
        data to restore into it.
        """
        with track_operation("enable"):
            if not upgrade_service:
                self.services.enable(self.primary_service, self._deadline())
                return
            if self.is_proxy():
                logger.info("etcd is in proxy mode, nothing to do")
                return
            self.services.enable(self.upgrade_service, self._deadline())
