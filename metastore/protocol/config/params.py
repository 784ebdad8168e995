# MIT License
# Copyright (c) 2025 Hashborn

"""
Node lifecycle parameters.

Every path, unit name and endpoint the lifecycle flows touch lives here so that
tests can point the flows at a temporary directory tree.
"""

import os
from typing import List

from pydantic import BaseModel, Field

# Environment keys (release descriptor, version record, node environment)
ENV_ETCD_VERSION = "ETCD_VER"
ENV_ETCD_PREV_VERSION = "ETCD_PREV_VER"
ENV_STORAGE_BACKEND = "KUBE_STORAGE_BACKEND"
ENV_ETCD_PROXY = "ETCD_PROXY"
ENV_ETCD_MEMBER_NAME = "ETCD_MEMBER_NAME"
ENV_ETCD_INITIAL_CLUSTER = "ETCD_INITIAL_CLUSTER"
ENV_ETCD_INITIAL_CLUSTER_STATE = "ETCD_INITIAL_CLUSTER_STATE"

ETCD_PROXY_ON = "on"
ETCD_PROXY_OFF = "off"

# Last store release that predates version tracking
ASSUMED_ETCD_VERSION = "2.3.8"

# Unit states that allow the data directories to be touched
SAFE_UNIT_STATES = ("inactive", "failed")

# Root-relative path fields rebased by LifecycleConfig.with_root
_PATH_FIELDS = (
    "release_file",
    "version_file",
    "environment_file",
    "store_base",
    "proxy_dir",
    "etcd_binary",
    "etcdctl_binary",
    "cert_file",
    "key_file",
    "ca_file",
)


class LifecycleConfig(BaseModel):
    """
    Paths, unit names and timeouts used by the lifecycle flows.
    """
    # Files
    release_file: str = Field(default="/etc/planet-release", description="Release descriptor with the desired version")
    version_file: str = Field(default="/ext/etcd/etcd-version.txt", description="Persisted version record")
    environment_file: str = Field(default="/etc/container-environment", description="Node environment file")

    # Storage layout
    store_base: str = Field(default="/ext/etcd", description="Base storage directory")
    proxy_dir: str = Field(default="/ext/etcd/proxy", description="Proxy-mode data directory")
    latest_link_name: str = Field(default="latest", description="Name of the active data symlink")
    data_dir_name: str = Field(default="member", description="Data directory inside a version directory")

    # Binaries
    etcd_binary: str = Field(default="/usr/bin/etcd", description="Store executable symlink")
    etcdctl_binary: str = Field(default="/usr/bin/etcdctl", description="Store client symlink")
    process_name: str = Field(default="etcd", description="Executable name of a running store process")
    backup_command: str = Field(default="etcd-backup", description="External backup engine executable")

    # Units
    etcd_service: str = Field(default="etcd.service", description="Primary store unit")
    etcd_upgrade_service: str = Field(default="etcd-upgrade.service", description="Upgrade-shadow store unit")
    apiserver_service: str = Field(default="kube-apiserver.service", description="Consumer of the store")
    agent_service: str = Field(default="planet-agent.service", description="Node health agent")
    systemctl: str = Field(default="/bin/systemctl", description="Service manager executable")

    # Endpoints and TLS
    endpoints: List[str] = Field(default_factory=lambda: ["https://127.0.0.1:2379"], description="Production store endpoints")
    upgrade_endpoints: List[str] = Field(default_factory=lambda: ["https://127.0.0.2:2379"], description="Temporary store endpoints used during upgrade")
    cert_file: str = Field(default="/var/state/etcd.cert", description="Client certificate")
    key_file: str = Field(default="/var/state/etcd.key", description="Client key")
    ca_file: str = Field(default="/var/state/root.cert", description="Certificate authority")

    # Versions and timing
    legacy_version: str = Field(default=ASSUMED_ETCD_VERSION, description="On-disk label of the untracked version")
    backup_prefixes: List[str] = Field(default_factory=lambda: ["/"], description="Key prefixes covered by backup/restore")
    migrate_prefixes: List[str] = Field(default_factory=lambda: ["/registry"], description="Key prefixes migrated on restore")
    upgrade_timeout: float = Field(default=15 * 60, description="Deadline for upgrade steps (seconds)")
    poll_interval: float = Field(default=0.1, description="Process table polling interval (seconds)")

    @property
    def latest_link(self) -> str:
        return os.path.join(self.store_base, self.latest_link_name)

    @property
    def legacy_data_dir(self) -> str:
        """Data directory of an install that predates version tracking."""
        return os.path.join(self.store_base, self.data_dir_name)

    def with_root(self, root: str) -> "LifecycleConfig":
        """
        Return a copy with every filesystem path rebased under root.

        Args:
            root: New filesystem root (e.g. a temporary directory)
        """
        if not root or root == "/":
            return self.model_copy()

        updates = {}
        for name in _PATH_FIELDS:
            value = getattr(self, name)
            updates[name] = os.path.join(root, value.lstrip("/"))
        return self.model_copy(update=updates)


DEFAULT_CONFIG = LifecycleConfig()


def load_config(rootfs: str = None) -> LifecycleConfig:
    """Build the runtime configuration, honouring METASTORE_ROOTFS."""
    root = rootfs or os.environ.get("METASTORE_ROOTFS", "")
    return DEFAULT_CONFIG.with_root(root)
