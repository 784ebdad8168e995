# MIT License
# Copyright (c) 2025 Hashborn

"""
Version Types
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class StorageBackend(str, Enum):
    """Storage engine generation, written as the backend tag of a record."""
    LEGACY = "etcd2"
    MODERN = "etcd3"


@dataclass(frozen=True)
class Version:
    """
    Store version label.

    The legacy version is a tagged value: it marks an install that predates
    version tracking and never compares equal to a real label, even one with
    the same text.
    """
    label: str
    is_legacy: bool = False

    def __str__(self) -> str:
        return self.label

    @classmethod
    def legacy(cls, label: str) -> "Version":
        """Sentinel for installs that predate version tracking."""
        return cls(label=label, is_legacy=True)

    @classmethod
    def parse(cls, value: str, legacy_label: str) -> "Version":
        """
        Parse a label read from disk.

        Args:
            value: Label text
            legacy_label: Serialized form of the legacy sentinel
        """
        value = value.strip()
        if not value:
            raise ValueError("empty version label")
        if value == legacy_label:
            return cls.legacy(value)
        return cls(label=value)


class VersionRecord(BaseModel):
    """
    Versions recorded on this node.

    backup is only set while an upgrade is in flight or awaiting rollback.
    """
    current: Version = Field(..., description="Version currently in use")
    backup: Optional[Version] = Field(default=None, description="Version to roll back to")

    @property
    def storage_backend(self) -> StorageBackend:
        if self.current.is_legacy:
            return StorageBackend.LEGACY
        return StorageBackend.MODERN
