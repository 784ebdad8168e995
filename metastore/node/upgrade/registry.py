# MIT License
# Copyright (c) 2025 Hashborn

"""
Version Registry

Reads and writes the version record (current/backup version and the derived
storage backend tag) and the desired version from the release descriptor.
"""

import logging
import os
from typing import Optional, Tuple

from ..core.environment import parse_env_lines
from ..core.errors import BadParameterError, convert_system_error
from ...protocol.config.params import (
    ASSUMED_ETCD_VERSION,
    ENV_ETCD_PREV_VERSION,
    ENV_ETCD_VERSION,
    ENV_STORAGE_BACKEND,
)
from ...protocol.types.version import Version, VersionRecord

logger = logging.getLogger(__name__)


def _read_labels(path: str) -> Tuple[str, str]:
    try:
        with open(path, "r") as f:
            values = dict(parse_env_lines(f))
    except OSError as e:
        raise convert_system_error(e, f"failed to read {path}")

    current = values.get(ENV_ETCD_VERSION, "").strip()
    if not current:
        raise BadParameterError(f"unable to parse etcd version from {path}")
    return current, values.get(ENV_ETCD_PREV_VERSION, "").strip()


def read_version_record(path: str, legacy_label: str = ASSUMED_ETCD_VERSION) -> VersionRecord:
    """
    Read the version record.

    Args:
        path: Version record file
        legacy_label: On-disk label of the untracked version

    Returns:
        VersionRecord with backup=None when no previous version is recorded

    Raises:
        NotFoundError: If the file doesn't exist
        BadParameterError: If the current version key is missing
    """
    current, backup = _read_labels(path)
    return VersionRecord(
        current=Version.parse(current, legacy_label),
        backup=Version.parse(backup, legacy_label) if backup else None,
    )


def read_desired_version(path: str, legacy_label: str = ASSUMED_ETCD_VERSION) -> Version:
    """Read the desired version from the release descriptor."""
    current, _ = _read_labels(path)
    return Version.parse(current, legacy_label)


def write_version_record(path: str, current: Version, backup: Optional[Version] = None) -> VersionRecord:
    """
    Truncate and rewrite the version record.

    Repeating the call with the same arguments leaves identical contents.
    """
    record = VersionRecord(current=current, backup=backup)
    lines = [f"{ENV_ETCD_VERSION}={current}\n"]
    if backup is not None:
        lines.append(f"{ENV_ETCD_PREV_VERSION}={backup}\n")
    lines.append(f"{ENV_STORAGE_BACKEND}={record.storage_backend.value}\n")

    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w") as f:
            f.writelines(lines)
    except OSError as e:
        raise convert_system_error(e, f"failed to write version record {path}")

    logger.info(f"Recorded etcd version: current={current} backup={backup or ''} backend={record.storage_backend.value}")
    return record
