# MIT License
# Copyright (c) 2025 Hashborn

"""
Node environment file (KEY="value" lines).
"""

import logging
import os
from typing import Dict, Iterator, Optional, Tuple

from .errors import convert_system_error

logger = logging.getLogger(__name__)


def parse_env_lines(lines) -> Iterator[Tuple[str, str]]:
    """
    Yield (key, value) pairs from KEY=value lines.

    Blank lines, comments and lines without '=' are skipped. Surrounding
    double or single quotes are stripped from values.
    """
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key.startswith("export "):
            key = key[len("export "):].strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
            value = value[1:-1].replace('\\"', '"')
        yield key, value


class NodeEnvironment:
    """
    Ordered key/value configuration of this node.

    Read and rewritten by the promotion and upgrade flows to branch on proxy
    mode and to record the voting-member identity.
    """

    def __init__(self, values: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(values or {})

    def get(self, key: str, default: str = "") -> str:
        return self._values.get(key, default)

    def upsert(self, key: str, value: str):
        self._values[key] = value

    def __eq__(self, other) -> bool:
        if not isinstance(other, NodeEnvironment):
            return False
        return self._values == other._values

    def __repr__(self) -> str:
        return f"NodeEnvironment({self._values!r})"

    @classmethod
    def read(cls, path: str) -> "NodeEnvironment":
        """
        Load an environment file.

        Raises:
            NotFoundError: If the file doesn't exist
            SystemFailureError: On other I/O errors
        """
        try:
            with open(path, "r") as f:
                return cls(dict(parse_env_lines(f)))
        except OSError as e:
            raise convert_system_error(e, f"failed to read environment {path}")

    def write(self, path: str):
        """Rewrite the environment file with the current values."""
        try:
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
            with open(path, "w") as f:
                for key, value in self._values.items():
                    escaped = value.replace('"', '\\"')
                    f.write(f'{key}="{escaped}"\n')
        except OSError as e:
            raise convert_system_error(e, f"failed to write environment {path}")
        logger.debug(f"Wrote {len(self._values)} keys to {path}")
