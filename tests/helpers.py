"""Test doubles and file helpers shared by the test modules."""

import os

from metastore.node.core.errors import CommandError
from metastore.node.services.process import ProcessLister
from metastore.node.services.systemd import ServiceManager, UnitStatus
from metastore.node.snapshot.engine import BackupEngine


class FakeServiceManager(ServiceManager):
    """Records service manager calls; unit states come from a dict."""

    def __init__(self, states=None):
        self.states = dict(states or {})
        self.calls = []
        self.failures = {}

    def fail(self, operation, unit=None, output="unit not found"):
        self.failures[(operation, unit)] = output

    def _call(self, operation, unit=None):
        self.calls.append((operation, unit))
        if (operation, unit) in self.failures:
            raise CommandError(f"failed to {operation} {unit}", ["systemctl", operation, unit or ""],
                               self.failures[(operation, unit)], 1)

    def mask(self, unit, blocking=False, timeout=None):
        self._call("mask", unit)

    def unmask(self, unit, blocking=False, timeout=None):
        self._call("unmask", unit)

    def start(self, unit, blocking=False, timeout=None):
        self._call("start", unit)
        self.states[unit] = "active"

    def stop(self, unit, blocking=False, timeout=None):
        self._call("stop", unit)
        self.states[unit] = "inactive"

    def restart(self, unit, blocking=False, timeout=None):
        self._call("restart", unit)

    def daemon_reload(self, timeout=None):
        self._call("daemon-reload")

    def list_units(self, names):
        return [UnitStatus(name=n, active_state=self.states[n]) for n in names if n in self.states]


class FakeProcessLister(ProcessLister):
    """Returns scripted process table snapshots, repeating the last one."""

    def __init__(self, *snapshots):
        self.snapshots = list(snapshots) or [[]]
        self.scans = 0

    def executables(self):
        index = min(self.scans, len(self.snapshots) - 1)
        self.scans += 1
        return self.snapshots[index]


class FakeBackupEngine(BackupEngine):
    def __init__(self):
        self.backups = []
        self.restores = []

    def backup(self, job):
        self.backups.append(job)

    def restore(self, job):
        self.restores.append(job)


def write_file(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w") as f:
        f.write(content)


def read_file(path):
    with open(path) as f:
        return f.read()


def tree(root):
    """Sorted listing of every path under root, with symlink targets."""
    entries = []
    for dirpath, dirnames, filenames in os.walk(root):
        for name in sorted(dirnames + filenames):
            path = os.path.join(dirpath, name)
            rel = os.path.relpath(path, root)
            if os.path.islink(path):
                entries.append(f"{rel} -> {os.readlink(path)}")
            else:
                entries.append(rel)
    return sorted(entries)
