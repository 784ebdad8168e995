import os

import pytest

from metastore.node.cli.node_cli import Node
from metastore.node.core.environment import NodeEnvironment
from metastore.protocol.config.params import LifecycleConfig

from helpers import FakeBackupEngine, FakeProcessLister, FakeServiceManager, write_file


@pytest.fixture
def config(tmp_path):
    cfg = LifecycleConfig().with_root(str(tmp_path)).model_copy(update={
        "upgrade_timeout": 5.0,
        "poll_interval": 0.01,
    })
    os.makedirs(cfg.store_base)
    os.makedirs(os.path.dirname(cfg.etcd_binary))
    write_file(cfg.release_file, "ETCD_VER=3.3.12\n")
    NodeEnvironment({"ETCD_PROXY": "off"}).write(cfg.environment_file)
    return cfg


@pytest.fixture
def manager():
    return FakeServiceManager({
        "etcd.service": "inactive",
        "etcd-upgrade.service": "failed",
        "kube-apiserver.service": "inactive",
    })


@pytest.fixture
def lister():
    return FakeProcessLister([])


@pytest.fixture
def engine():
    return FakeBackupEngine()


@pytest.fixture
def node(config, manager, lister, engine):
    return Node(config, manager=manager, lister=lister, engine=engine)
