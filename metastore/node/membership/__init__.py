# MIT License
# Copyright (c) 2025 Hashborn

"""
Membership

Promotion of a store proxy to a voting member.
"""

from .promotion import Promoter, PromotionOutcome

__all__ = ["Promoter", "PromotionOutcome"]
