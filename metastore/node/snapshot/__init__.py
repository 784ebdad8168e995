# MIT License
# Copyright (c) 2025 Hashborn

"""
Backup/Restore

Hands store backups and restores over to the external backup engine.
"""

from .engine import BackupEngine, CommandBackupEngine
from .orchestrator import BackupOrchestrator

__all__ = ["BackupEngine", "CommandBackupEngine", "BackupOrchestrator"]
