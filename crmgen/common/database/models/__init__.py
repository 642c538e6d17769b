"""
Database models package.
Each table model is defined in its own file for better organization.
"""

#  Copyright (C) 2010-2026 Evolveum and contributors
#
#  Licensed under the EUPL-1.2 or later.

from .base import Base, utc_now
from .mapping_cache import MappingCache

__all__ = [
    "Base",
    "utc_now",
    "MappingCache",
]
