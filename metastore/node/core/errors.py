# MIT License
# Copyright (c) 2025 Hashborn

"""
Lifecycle errors.

NotFoundError and BadParameterError also subclass the builtin exceptions callers
would naturally catch for a missing file or a bad value.
"""

from typing import List, Optional


class LifecycleError(Exception):
    pass


class NotFoundError(LifecycleError, FileNotFoundError):
    """Raised when a file or record is missing."""
    pass


class BadParameterError(LifecycleError, ValueError):
    """Raised for malformed records and violated preconditions. Never retried."""
    pass


class SystemFailureError(LifecycleError):
    """Raised when the OS refuses a filesystem operation."""
    pass


class DeadlineExceededError(LifecycleError, TimeoutError):
    pass


class CancelledError(LifecycleError):
    pass


class CommandError(LifecycleError):
    """
    Raised when an external command fails.

    Carries the combined stdout/stderr of the command for diagnosis.
    """

    def __init__(self, message: str, command: List[str], output: str = "", returncode: Optional[int] = None):
        super().__init__(f"{message}: {output.strip()}" if output.strip() else message)
        self.command = command
        self.output = output
        self.returncode = returncode


def convert_system_error(err: OSError, context: str) -> LifecycleError:
    """
    Map an OSError to the lifecycle error kinds.

    Args:
        err: Original error
        context: What was being attempted

    Returns:
        NotFoundError for missing files, SystemFailureError otherwise
    """
    if isinstance(err, FileNotFoundError):
        converted = NotFoundError(f"{context}: {err}")
    else:
        converted = SystemFailureError(f"{context}: {err}")
    converted.__cause__ = err
    return converted
