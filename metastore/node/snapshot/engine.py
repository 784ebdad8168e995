# MIT License
# Copyright (c) 2025 Hashborn

"""
Backup Engine

The byte-level backup/restore of the store is done by an external engine.
This module only hands job descriptors over to it.
"""

import logging
from typing import List

from ..services.systemd import run_command
from ...protocol.types.jobs import BackupJob, RestoreJob

logger = logging.getLogger(__name__)


class BackupEngine:
    """Job submission interface of the external backup engine."""

    def backup(self, job: BackupJob):
        """Write the store contents selected by job to job.file_path."""
        raise NotImplementedError

    def restore(self, job: RestoreJob):
        """Load job.file_path into the store at job.endpoints."""
        raise NotImplementedError


class CommandBackupEngine(BackupEngine):
    """
    Runs the etcd-backup executable.

    The job deadline becomes the command timeout; a job without a deadline
    runs until the engine exits.
    """

    def __init__(self, executable: str = "etcd-backup"):
        self.executable = executable

    def _common_args(self, job: BackupJob) -> List[str]:
        args = [
            f"--etcd-servers={','.join(job.endpoints)}",
            f"--etcd-certfile={job.cert_file}",
            f"--etcd-keyfile={job.key_file}",
            f"--etcd-cafile={job.ca_file}",
            f"--file={job.file_path}",
        ]
        for prefix in job.include_prefixes:
            args.append(f"--prefix={prefix}")
        return args

    def backup(self, job: BackupJob):
        command = [self.executable, "backup", *self._common_args(job)]
        run_command(command, f"backup etcd to {job.file_path}", timeout=job.deadline)

    def restore(self, job: RestoreJob):
        command = [self.executable, "restore", *self._common_args(job)]
        for prefix in job.migrate_prefixes:
            command.append(f"--migrate-prefix={prefix}")
        run_command(command, f"restore etcd from {job.file_path}", timeout=job.deadline)
