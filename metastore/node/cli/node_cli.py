# MIT License
# Copyright (c) 2025 Hashborn

import argparse
import logging
import sys

from ..core.errors import LifecycleError
from ..membership.promotion import Promoter
from ..observability.metrics import write_metrics
from ..services.controller import ServiceController
from ..services.process import ProcessWatcher
from ..services.systemd import SystemdServiceManager
from ..snapshot.orchestrator import BackupOrchestrator
from ..upgrade.manager import UpgradeManager
from ...protocol.config.params import LifecycleConfig, load_config

logger = logging.getLogger(__name__)


class Node:
    """Lifecycle components of this node, wired together."""

    def __init__(self, config: LifecycleConfig, manager=None, lister=None, engine=None):
        self.config = config
        self.manager = manager or SystemdServiceManager(config.systemctl)
        watcher = ProcessWatcher(lister, interval=config.poll_interval)
        self.services = ServiceController(self.manager, watcher, config.process_name)
        self.upgrades = UpgradeManager(config, self.services)
        self.backups = BackupOrchestrator(config, engine)
        self.promoter = Promoter(config, self.manager, self.upgrades)


def cmd_init(node, args):
    """Point the store symlinks at the current version."""
    version = node.upgrades.init()
    print(f"etcd version: {version}")


def cmd_upgrade(node, args):
    record = node.upgrades.upgrade()
    if record is not None:
        print(f"current: {record.current} backup: {record.backup or ''}")


def cmd_rollback(node, args):
    record = node.upgrades.rollback()
    if record is not None:
        print(f"current: {record.current}")


def cmd_backup(node, args):
    node.backups.backup(args.file)


def cmd_restore(node, args):
    node.backups.restore(args.file)


def cmd_enable(node, args):
    node.upgrades.enable(upgrade_service=args.upgrade)


def cmd_disable(node, args):
    node.upgrades.disable(upgrade_service=args.upgrade)


def cmd_promote(node, args):
    outcome = node.promoter.promote(args.name, args.initial_cluster, args.initial_cluster_state)
    print(outcome.value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Metastore node lifecycle CLI")
    parser.add_argument("--rootfs", default=None, help="Filesystem root (default: $METASTORE_ROOTFS or /)")
    parser.add_argument("--metrics-file", default=None, help="Write Prometheus metrics to this file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="Select the etcd version and set up symlinks")
    init_parser.set_defaults(func=cmd_init)

    upgrade_parser = subparsers.add_parser("upgrade", help="Upgrade etcd to the release version")
    upgrade_parser.set_defaults(func=cmd_upgrade)

    rollback_parser = subparsers.add_parser("rollback", help="Roll etcd back to the backup version")
    rollback_parser.set_defaults(func=cmd_rollback)

    backup_parser = subparsers.add_parser("backup", help="Back up etcd data to a file")
    backup_parser.add_argument("file", help="Backup file")
    backup_parser.set_defaults(func=cmd_backup)

    restore_parser = subparsers.add_parser("restore", help="Restore a backup into the temporary etcd")
    restore_parser.add_argument("file", help="Backup file")
    restore_parser.set_defaults(func=cmd_restore)

    # Enable/Disable
    for name, func, help_text in (
        ("enable", cmd_enable, "Unmask and start etcd"),
        ("disable", cmd_disable, "Mask and stop etcd, waiting for it to exit"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--upgrade", action="store_true", help="Act on the upgrade service instead")
        sub.set_defaults(func=func)

    promote_parser = subparsers.add_parser("promote", help="Promote an etcd proxy to a full member")
    promote_parser.add_argument("--name", required=True, help="Member name")
    promote_parser.add_argument("--initial-cluster", required=True, help="Initial cluster peer list")
    promote_parser.add_argument("--initial-cluster-state", required=True, help="Initial cluster state")
    promote_parser.set_defaults(func=cmd_promote)

    return parser


def main(argv=None, node=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s %(levelname)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    if node is None:
        node = Node(load_config(args.rootfs))

    try:
        args.func(node, args)
    except LifecycleError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    finally:
        if args.metrics_file:
            write_metrics(args.metrics_file)
    return 0


if __name__ == "__main__":
    sys.exit(main())
