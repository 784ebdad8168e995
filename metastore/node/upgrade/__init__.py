# MIT License
# Copyright (c) 2025 Hashborn

"""
Version Upgrade

Version record, symlink switching and the upgrade/rollback procedure.
"""

from .manager import UpgradeManager
from .registry import read_desired_version, read_version_record, write_version_record
from .symlinks import SymlinkSwitcher

__all__ = [
    "UpgradeManager",
    "SymlinkSwitcher",
    "read_desired_version",
    "read_version_record",
    "write_version_record",
]
