# MIT License
# Copyright (c) 2025 Hashborn

"""
Backup/Restore Job Descriptors
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ServiceRole(str, Enum):
    PRIMARY = "primary"
    UPGRADE_SHADOW = "upgrade-shadow"


class ServiceDescriptor(BaseModel):
    """Addresses one store unit in the service manager."""
    name: str = Field(..., description="Unit name (e.g. 'etcd.service')")
    role: ServiceRole = Field(default=ServiceRole.PRIMARY, description="Role of the unit")


class BackupJob(BaseModel):
    """
    Job submitted to the external backup engine.
    """
    endpoints: List[str] = Field(..., description="Store endpoints to read from")
    cert_file: str = Field(..., description="Client certificate path")
    key_file: str = Field(..., description="Client key path")
    ca_file: str = Field(..., description="Certificate authority path")
    include_prefixes: List[str] = Field(default_factory=lambda: ["/"], description="Key prefixes to include")
    file_path: str = Field(..., description="Backup file")
    deadline: Optional[float] = Field(default=None, description="Seconds allowed for the job, None for unbounded")


class RestoreJob(BackupJob):
    """
    Job that loads a backup file into a store instance.
    """
    migrate_prefixes: List[str] = Field(default_factory=list, description="Key prefixes rewritten for the new storage backend")
