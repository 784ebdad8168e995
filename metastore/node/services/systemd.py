# MIT License
# Copyright (c) 2025 Hashborn

"""
Local service manager backend (systemctl).
"""

import logging
import subprocess
from typing import List, Optional

from pydantic import BaseModel, Field

from ..core.errors import CommandError

logger = logging.getLogger(__name__)


class UnitStatus(BaseModel):
    """One row of the service manager's unit listing."""
    name: str = Field(..., description="Unit name")
    load_state: str = Field(default="", description="LOAD column")
    active_state: str = Field(..., description="ACTIVE column (active, inactive, failed, ...)")
    sub_state: str = Field(default="", description="SUB column")


class ServiceManager:
    """
    Operations the lifecycle flows need from the service manager.

    blocking=False submits the job without waiting for it to finish.
    """

    def mask(self, unit: str, blocking: bool = False, timeout: Optional[float] = None):
        raise NotImplementedError

    def unmask(self, unit: str, blocking: bool = False, timeout: Optional[float] = None):
        raise NotImplementedError

    def start(self, unit: str, blocking: bool = False, timeout: Optional[float] = None):
        raise NotImplementedError

    def stop(self, unit: str, blocking: bool = False, timeout: Optional[float] = None):
        raise NotImplementedError

    def restart(self, unit: str, blocking: bool = False, timeout: Optional[float] = None):
        raise NotImplementedError

    def daemon_reload(self, timeout: Optional[float] = None):
        raise NotImplementedError

    def list_units(self, names: List[str]) -> List[UnitStatus]:
        raise NotImplementedError


def run_command(command: List[str], description: str, timeout: Optional[float] = None) -> str:
    """
    Run an external command and return its combined output.

    Raises:
        CommandError: On non-zero exit, timeout or a missing executable
    """
    try:
        proc = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        output = e.output or ""
        if isinstance(output, bytes):
            output = output.decode(errors="replace")
        raise CommandError(f"timed out trying to {description}", command, output)
    except OSError as e:
        raise CommandError(f"failed to {description}", command, str(e))

    logger.info(f"{description}: {proc.stdout.strip()}")
    if proc.returncode != 0:
        raise CommandError(f"failed to {description}", command, proc.stdout, proc.returncode)
    return proc.stdout


class SystemdServiceManager(ServiceManager):
    """
    Drives systemd through the systemctl executable.

    systemctl is used rather than the D-Bus API because masking unit files
    over D-Bus has proven unreliable.
    """

    def __init__(self, systemctl: str = "/bin/systemctl"):
        self.systemctl = systemctl

    def _unit_command(self, operation: str, unit: str, blocking: bool, timeout: Optional[float]) -> str:
        command = [self.systemctl]
        if not blocking:
            command.append("--no-block")
        command.extend([operation, unit])
        return run_command(command, f"{operation} {unit}", timeout=timeout)

    def mask(self, unit, blocking=False, timeout=None):
        self._unit_command("mask", unit, blocking, timeout)

    def unmask(self, unit, blocking=False, timeout=None):
        self._unit_command("unmask", unit, blocking, timeout)

    def start(self, unit, blocking=False, timeout=None):
        self._unit_command("start", unit, blocking, timeout)

    def stop(self, unit, blocking=False, timeout=None):
        self._unit_command("stop", unit, blocking, timeout)

    def restart(self, unit, blocking=False, timeout=None):
        self._unit_command("restart", unit, blocking, timeout)

    def daemon_reload(self, timeout=None):
        run_command([self.systemctl, "daemon-reload"], "daemon-reload", timeout=timeout)

    def list_units(self, names: List[str]) -> List[UnitStatus]:
        command = [self.systemctl, "list-units", "--all", "--plain", "--no-legend", "--no-pager", *names]
        output = run_command(command, f"list units {' '.join(names)}")
        return parse_unit_listing(output)


def parse_unit_listing(output: str) -> List[UnitStatus]:
    """Parse `systemctl list-units --plain --no-legend` rows."""
    units = []
    for line in output.splitlines():
        fields = line.split(None, 4)
        if len(fields) < 4:
            continue
        units.append(UnitStatus(
            name=fields[0],
            load_state=fields[1],
            active_state=fields[2],
            sub_state=fields[3],
        ))
    return units
