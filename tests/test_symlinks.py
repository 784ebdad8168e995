import os
import stat

import pytest

from metastore.node.core.errors import LifecycleError
from metastore.node.upgrade.symlinks import SymlinkSwitcher
from metastore.protocol.types.version import Version

LEGACY = Version.legacy("2.3.8")


@pytest.fixture
def switcher(config):
    return SymlinkSwitcher(config)


def test_resolve_path(switcher, config):
    assert switcher.resolve_path(LEGACY) == config.store_base
    assert switcher.resolve_path(Version("3.3.12")) == os.path.join(config.store_base, "3.3.12")
    assert switcher.data_dir(Version("3.3.12")) == os.path.join(config.store_base, "3.3.12", "member")


def test_switch_binaries_creates_links(switcher, config):
    switcher.switch_binaries(Version("3.3.12"))

    assert os.readlink(config.etcd_binary) == config.etcd_binary + "-3.3.12"
    assert os.readlink(config.etcdctl_binary) == config.etcdctl_binary + "-3.3.12"


def test_switch_binaries_replaces_existing_links(switcher, config):
    switcher.switch_binaries(Version("3.3.9"))
    switcher.switch_binaries(LEGACY)

    assert os.readlink(config.etcd_binary) == config.etcd_binary + "-2.3.8"


def test_switch_data_creates_directory(switcher, config):
    switcher.switch_data(Version("3.3.12"))

    dest = os.path.join(config.store_base, "3.3.12")
    assert os.path.isdir(dest)
    assert stat.S_IMODE(os.stat(dest).st_mode) & 0o077 == 0
    assert os.stat(dest).st_uid == os.stat(config.store_base).st_uid
    assert os.readlink(config.latest_link) == dest


def test_switch_data_keeps_existing_directory(switcher, config):
    dest = os.path.join(config.store_base, "3.3.9")
    os.makedirs(os.path.join(dest, "member"))

    switcher.switch_data(Version("3.3.12"))
    switcher.switch_data(Version("3.3.9"))

    assert os.path.isdir(os.path.join(dest, "member"))
    assert os.readlink(config.latest_link) == dest


def test_switch_data_legacy_points_at_base(switcher, config):
    switcher.switch_data(LEGACY)

    assert os.readlink(config.latest_link) == config.store_base


def test_filesystem_errors_propagate(config, tmp_path):
    broken = config.model_copy(update={"etcd_binary": str(tmp_path / "missing" / "etcd")})

    with pytest.raises(LifecycleError):
        SymlinkSwitcher(broken).switch_binaries(Version("3.3.12"))
