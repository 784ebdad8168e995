# MIT License
# Copyright (c) 2025 Hashborn

from .jobs import BackupJob, RestoreJob, ServiceDescriptor, ServiceRole
from .version import StorageBackend, Version, VersionRecord
