"""
MappingCache model - stores the normalized field list of one entity between runs.
"""

#  Copyright (C) 2010-2026 Evolveum and contributors
#
#  Licensed under the EUPL-1.2 or later.

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utc_now


class MappingCache(Base):
    """Field cache table - one row per entity, fields kept as serialized records."""

    __tablename__ = "mapping_cache"

    entity_logical_name: Mapped[str] = mapped_column(String(255), primary_key=True)
    schema_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    state_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    fields: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )

    __table_args__ = (Index("idx_mapping_cache_updated_at", "updated_at"),)
