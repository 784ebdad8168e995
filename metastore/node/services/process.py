# MIT License
# Copyright (c) 2025 Hashborn

"""
Process Watcher

A stopped unit state from the service manager only means the process was told
to shut down. The watcher confirms the process has actually left the process
table before its data directory is touched.
"""

import logging
import time
from typing import Iterable, Optional

import psutil

from ..core.deadline import Deadline
from ..observability.metrics import process_wait_seconds

logger = logging.getLogger(__name__)


class ProcessLister:
    """Lists executable names of running processes."""

    def executables(self) -> Iterable[str]:
        raise NotImplementedError


class PsutilProcessLister(ProcessLister):
    """Process table scan backed by psutil."""

    def executables(self) -> Iterable[str]:
        names = []
        for proc in psutil.process_iter(["name"]):
            name = proc.info.get("name")
            if name:
                names.append(name)
        return names


class ProcessWatcher:
    def __init__(self, lister: Optional[ProcessLister] = None, interval: float = 0.1):
        self.lister = lister or PsutilProcessLister()
        self.interval = interval

    def wait_for_stopped(self, executable: str, deadline: Deadline):
        """
        Block until no process named executable is running.

        Polls once per interval. Fails no later than one interval past the
        deadline and never returns while a matching process remains.

        Raises:
            DeadlineExceededError: If the deadline passes first
            CancelledError: If the deadline is cancelled
        """
        started = time.monotonic()
        polls = 0
        try:
            while True:
                deadline.sleep(self.interval)
                polls += 1
                if executable not in self.lister.executables():
                    logger.info(f"{executable} is no longer running (after {polls} polls)")
                    return
                logger.debug(f"{executable} still running, waiting")
        finally:
            process_wait_seconds.observe(time.monotonic() - started)
