# MIT License
# Copyright (c) 2025 Hashborn

"""
Backup/Restore Orchestrator

Builds backup and restore jobs for the upgrade procedure:
- backup reads the production store
- restore writes into the temporary store run by the upgrade-shadow unit
"""

import logging
import os
from typing import Optional

from .engine import BackupEngine, CommandBackupEngine
from ..core.errors import convert_system_error
from ...protocol.config.params import LifecycleConfig
from ...protocol.types.jobs import BackupJob, RestoreJob

logger = logging.getLogger(__name__)


class BackupOrchestrator:
    """
    Submits backup/restore jobs to the external engine.
    """

    def __init__(self, config: LifecycleConfig, engine: Optional[BackupEngine] = None):
        """
        Initialize orchestrator.

        Args:
            config: Lifecycle configuration (endpoints, TLS paths, timeouts)
            engine: Backup engine (default: etcd-backup executable)
        """
        self.config = config
        self.engine = engine or CommandBackupEngine(config.backup_command)

    def backup(self, file_path: str) -> BackupJob:
        """
        Back up the whole production key space to file_path.

        A backup file left over from a previous attempt is deleted first.
        """
        if os.path.exists(file_path):
            logger.info(f"Removing backup from previous attempt: {file_path}")
            try:
                os.remove(file_path)
            except OSError as e:
                raise convert_system_error(e, f"failed to remove stale backup {file_path}")

        job = BackupJob(
            endpoints=list(self.config.endpoints),
            cert_file=self.config.cert_file,
            key_file=self.config.key_file,
            ca_file=self.config.ca_file,
            include_prefixes=list(self.config.backup_prefixes),
            file_path=file_path,
            deadline=self.config.upgrade_timeout,
        )
        logger.info(f"BackupJob: {job.model_dump()}")
        self.engine.backup(job)
        logger.info("Backup complete")
        return job

    def restore(self, file_path: str) -> RestoreJob:
        """
        Restore file_path into the temporary upgrade store.

        Keys under the migrate prefixes are rewritten for the new storage
        backend. The duration depends on the data size, so no deadline is set.
        """
        logger.info("Restoring backup to temporary etcd")
        job = RestoreJob(
            endpoints=list(self.config.upgrade_endpoints),
            cert_file=self.config.cert_file,
            key_file=self.config.key_file,
            ca_file=self.config.ca_file,
            include_prefixes=list(self.config.backup_prefixes),
            migrate_prefixes=list(self.config.migrate_prefixes),
            file_path=file_path,
            deadline=None,
        )
        logger.info(f"RestoreJob: {job.model_dump()}")
        self.engine.restore(job)
        logger.info("Restore complete")
        return job
