# MIT License
# Copyright (c) 2025 Hashborn

"""
Metastore node lifecycle: version selection, upgrade/rollback and proxy
promotion for the cluster's embedded key-value store.
"""

__version__ = "0.1.0"
