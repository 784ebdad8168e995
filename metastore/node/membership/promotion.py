# MIT License
# Copyright (c) 2025 Hashborn

"""
Proxy Promotion

Turns a store proxy on this node into a full voting member, using the name,
initial cluster and cluster state produced by the 'member add' command.
"""

import logging
from enum import Enum

from ..core.environment import NodeEnvironment
from ..core.filesystem import remove_all
from ..observability.metrics import track_operation
from ..services.systemd import ServiceManager
from ..upgrade.manager import UpgradeManager
from ...protocol.config.params import (
    ENV_ETCD_INITIAL_CLUSTER,
    ENV_ETCD_INITIAL_CLUSTER_STATE,
    ENV_ETCD_MEMBER_NAME,
    ENV_ETCD_PROXY,
    ETCD_PROXY_OFF,
    LifecycleConfig,
)

logger = logging.getLogger(__name__)


class PromotionOutcome(str, Enum):
    PROMOTED = "promoted"
    ALREADY_MEMBER = "already_member"


class Promoter:
    """
    Promotes a running proxy to a full member.

    Proxy mode is switched off in the node environment, the proxy's state
    directory is wiped (proxies hold no data) and the store is restarted with
    its new identity.
    """

    def __init__(self, config: LifecycleConfig, manager: ServiceManager, upgrades: UpgradeManager):
        self.config = config
        self.manager = manager
        self.upgrades = upgrades

    def promote(self, name: str, initial_cluster: str, initial_cluster_state: str) -> PromotionOutcome:
        """
        Promote this node's proxy to a member.

        Args:
            name: Member name
            initial_cluster: Initial cluster peer list
            initial_cluster_state: Initial cluster state ("new" or "existing")

        Returns:
            ALREADY_MEMBER when proxy mode is already off, PROMOTED otherwise

        Raises:
            CommandError: If a service manager command fails
        """
        with track_operation("promote"):
            env = NodeEnvironment.read(self.config.environment_file)
            if env.get(ENV_ETCD_PROXY) == ETCD_PROXY_OFF:
                logger.info("etcd is not running in proxy mode, nothing to do")
                return PromotionOutcome.ALREADY_MEMBER

            new_env = {
                ENV_ETCD_PROXY: ETCD_PROXY_OFF,
                ENV_ETCD_MEMBER_NAME: name,
                ENV_ETCD_INITIAL_CLUSTER: initial_cluster,
                ENV_ETCD_INITIAL_CLUSTER_STATE: initial_cluster_state,
            }
            logger.info(f"updating etcd environment: {new_env}")
            for key, value in new_env.items():
                env.upsert(key, value)
            env.write(self.config.environment_file)

            self.manager.stop(self.config.etcd_service, blocking=True)

            logger.info(f"removing {self.config.proxy_dir}")
            remove_all(self.config.proxy_dir)

            self.upgrades.init()

            self.manager.daemon_reload()
            self.manager.start(self.config.etcd_service, blocking=True)
            self.manager.restart(self.config.agent_service, blocking=True)
            return PromotionOutcome.PROMOTED
