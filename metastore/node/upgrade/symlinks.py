# MIT License
# Copyright (c) 2025 Hashborn

"""
Symlink Switcher

Points the store binaries and the "latest" data symlink at a version.
Upgrade and rollback only change which version is recorded; switching the
symlinks is what makes the node run that version's binaries and data.
"""

import logging
import os

from ..core.errors import convert_system_error
from ..observability.metrics import version_switches_total
from ...protocol.config.params import LifecycleConfig
from ...protocol.types.version import Version

logger = logging.getLogger(__name__)


def _remove_link(path: str):
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        raise convert_system_error(e, f"failed to remove {path}")


class SymlinkSwitcher:
    """
    Switches version-scoped symlinks.

    Layout:
    - <bin>          -> <bin>-<version>   (store executable and client tool)
    - <base>/latest  -> <base>/<version>  (or <base> itself for the legacy version)
    """

    def __init__(self, config: LifecycleConfig):
        self.config = config

    def resolve_path(self, version: Version) -> str:
        """Directory holding the data of a version."""
        if version.is_legacy:
            return self.config.store_base
        return os.path.join(self.config.store_base, version.label)

    def data_dir(self, version: Version) -> str:
        """Store data directory inside the version directory."""
        return os.path.join(self.resolve_path(version), self.config.data_dir_name)

    def ensure_version_dir(self, version: Version) -> str:
        """
        Create the directory of a version if missing.

        A new directory gets mode 0700 and the owner of the base directory.
        """
        dest = self.resolve_path(version)
        if os.path.isdir(dest):
            return dest
        try:
            os.makedirs(dest, mode=0o700, exist_ok=True)
            st = os.stat(self.config.store_base)
            os.chown(dest, st.st_uid, st.st_gid)
        except OSError as e:
            raise convert_system_error(e, f"failed to create data directory {dest}")
        logger.info(f"Created data directory {dest}")
        return dest

    def switch_binaries(self, version: Version):
        for path in (self.config.etcd_binary, self.config.etcdctl_binary):
            target = f"{path}-{version}"
            _remove_link(path)
            try:
                os.symlink(target, path)
            except OSError as e:
                raise convert_system_error(e, f"failed to link {path} to {target}")
            logger.info(f"Linked {path} -> {target}")

        version_switches_total.labels(kind="binaries").inc()

    def switch_data(self, version: Version):
        latest = self.config.latest_link

        _remove_link(latest)
        dest = self.ensure_version_dir(version)

        try:
            os.symlink(dest, latest)
        except OSError as e:
            raise convert_system_error(e, f"failed to link {latest} to {dest}")
        logger.info(f"Linked {latest} -> {dest}")

        version_switches_total.labels(kind="data").inc()
