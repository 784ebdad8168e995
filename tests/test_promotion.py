import os

import pytest

from metastore.node.core.environment import NodeEnvironment
from metastore.node.core.errors import CommandError
from metastore.node.membership.promotion import PromotionOutcome

from helpers import read_file, write_file

CLUSTER = "node-1=https://10.0.0.1:2380,node-2=https://10.0.0.2:2380"


@pytest.fixture
def proxy_node(node, config):
    NodeEnvironment({
        "KUBE_APISERVER": "10.0.0.1",
        "ETCD_PROXY": "on",
    }).write(config.environment_file)
    write_file(os.path.join(config.proxy_dir, "proxy", "cluster"), "{}")
    return node


def test_promote_noop_when_not_proxy(node, config, manager):
    before = read_file(config.environment_file)
    mtime = os.stat(config.environment_file).st_mtime_ns

    outcome = node.promoter.promote("node-2", CLUSTER, "existing")

    assert outcome == PromotionOutcome.ALREADY_MEMBER
    assert read_file(config.environment_file) == before
    assert os.stat(config.environment_file).st_mtime_ns == mtime
    assert manager.calls == []


def test_promote_proxy(proxy_node, config, manager):
    outcome = proxy_node.promoter.promote("node-2", CLUSTER, "existing")

    assert outcome == PromotionOutcome.PROMOTED

    env = NodeEnvironment.read(config.environment_file)
    assert env.get("ETCD_PROXY") == "off"
    assert env.get("ETCD_MEMBER_NAME") == "node-2"
    assert env.get("ETCD_INITIAL_CLUSTER") == CLUSTER
    assert env.get("ETCD_INITIAL_CLUSTER_STATE") == "existing"
    assert env.get("KUBE_APISERVER") == "10.0.0.1"

    assert not os.path.exists(config.proxy_dir)
    assert manager.calls == [
        ("stop", "etcd.service"),
        ("daemon-reload", None),
        ("start", "etcd.service"),
        ("restart", "planet-agent.service"),
    ]
    # Symlinks set up for the member's version
    assert os.readlink(config.latest_link) == os.path.join(config.store_base, "3.3.12")


def test_promote_twice_second_is_noop(proxy_node, config, manager):
    proxy_node.promoter.promote("node-2", CLUSTER, "existing")
    calls = list(manager.calls)

    outcome = proxy_node.promoter.promote("node-2", CLUSTER, "existing")

    assert outcome == PromotionOutcome.ALREADY_MEMBER
    assert manager.calls == calls


def test_promote_without_proxy_dir(proxy_node, config, manager):
    os.rename(config.proxy_dir, config.proxy_dir + ".old")

    assert proxy_node.promoter.promote("node-2", CLUSTER, "new") == PromotionOutcome.PROMOTED


def test_promote_unlinks_symlinked_proxy_dir(proxy_node, config, tmp_path):
    moved = str(tmp_path / "proxy-data")
    os.rename(config.proxy_dir, moved)
    os.symlink(moved, config.proxy_dir)

    assert proxy_node.promoter.promote("node-2", CLUSTER, "new") == PromotionOutcome.PROMOTED

    assert not os.path.lexists(config.proxy_dir)
    assert os.path.exists(os.path.join(moved, "proxy", "cluster"))


def test_promote_aborts_on_command_failure(proxy_node, config, manager):
    manager.fail("stop", "etcd.service", output="Failed to stop etcd.service: Unit etcd.service not loaded.")

    with pytest.raises(CommandError) as exc_info:
        proxy_node.promoter.promote("node-2", CLUSTER, "existing")

    assert "not loaded" in str(exc_info.value)
    assert manager.calls == [("stop", "etcd.service")]
    assert os.path.exists(config.proxy_dir)
