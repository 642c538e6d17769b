#  Copyright (C) 2010-2026 Evolveum and contributors
#
#  Licensed under the EUPL-1.2 or later.

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ....modules.mapping.schema import FieldRecord, MappingEntity
from ..models import MappingCache

logger = logging.getLogger(__name__)


class MappingCacheRepository:
    """Repository for cached entity field lists."""

    def __init__(self, db: AsyncSession):
        """
        Initialize repository with database session.

        :param db: SQLAlchemy AsyncSession
        """
        self.db = db

    async def _get_row(self, logical_name: str) -> Optional[MappingCache]:
        query = select(MappingCache).where(MappingCache.entity_logical_name == logical_name)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def entity_exists(self, logical_name: str) -> bool:
        """
        Check whether a field cache exists for an entity.

        :param logical_name: Entity logical name
        :return: True if cached
        """
        return await self._get_row(logical_name) is not None

    async def get_entity(self, logical_name: str) -> Optional[MappingEntity]:
        """
        Load the cached entity with its field records (back-references restored).

        :param logical_name: Entity logical name
        :return: MappingEntity or None if never cached
        """
        row = await self._get_row(logical_name)
        if row is None:
            logger.info("No cached fields for entity: %s", logical_name)
            return None

        fields = [FieldRecord.model_validate(item) for item in row.fields or []]
        return MappingEntity(
            logical_name=row.entity_logical_name,
            schema_name=row.schema_name,
            state_name=row.state_name,
            fields=fields,
        )

    async def save_entity(self, entity: MappingEntity) -> None:
        """
        Insert or replace the cached field list of an entity.

        :param entity: Entity to persist
        """
        payload = [record.model_dump(mode="json", by_alias=True) for record in entity.fields]
        row = await self._get_row(entity.logical_name)

        if row is None:
            row = MappingCache(entity_logical_name=entity.logical_name)
            self.db.add(row)
        else:
            row.updated_at = datetime.now(timezone.utc)

        row.schema_name = entity.schema_name
        row.state_name = entity.state_name
        row.fields = payload
        await self.db.flush()
        logger.info("Cached %d fields for entity: %s", len(payload), entity.logical_name)

    async def list_entities(self) -> List[str]:
        """
        List logical names of all cached entities.

        :return: Sorted logical names
        """
        result = await self.db.execute(select(MappingCache.entity_logical_name).order_by(MappingCache.entity_logical_name))
        return list(result.scalars().all())
