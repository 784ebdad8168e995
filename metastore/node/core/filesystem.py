# MIT License
# Copyright (c) 2025 Hashborn

"""
Filesystem helpers shared by the upgrade and promotion flows.
"""

import os
import shutil

from .errors import convert_system_error


def remove_all(path: str):
    """
    Remove path and everything below it.

    A symlink is unlinked without touching its target. A missing path is not
    an error.

    Raises:
        SystemFailureError: On any other OS error
    """
    try:
        if os.path.islink(path):
            os.unlink(path)
        else:
            shutil.rmtree(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        raise convert_system_error(e, f"failed to remove {path}")
