#  Copyright (C) 2010-2026 Evolveum and contributors
#
#  Licensed under the EUPL-1.2 or later.

import logging
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from ...common.database.repositories.mapping_cache_repository import MappingCacheRepository
from ...config import config
from .core.normalizer import normalize_field
from .core.reconciler import reconcile_fields
from .schema import (
    AttributeMetadata,
    EntityContext,
    EntityFieldsResponse,
    FieldRecord,
    MappingEntity,
    ReconcileResponse,
)

logger = logging.getLogger(__name__)


def _title_case(flag: Optional[bool]) -> bool:
    return config.mapping.use_title_case_logical_names if flag is None else flag


def normalize_single(
    context: EntityContext,
    attribute: AttributeMetadata,
    existing: Optional[FieldRecord] = None,
    use_title_case_logical_names: Optional[bool] = None,
) -> FieldRecord:
    """
    Normalize one descriptor against a transient entity built from the request context.
    """
    entity = MappingEntity(
        logical_name=context.logical_name,
        schema_name=context.schema_name,
        state_name=context.state_name,
    )
    record = normalize_field(attribute, entity, existing, _title_case(use_title_case_logical_names))
    entity.fields.append(record)
    return record


async def reconcile_entity(
    db: AsyncSession,
    logical_name: str,
    attributes: Sequence[AttributeMetadata],
    *,
    schema_name: Optional[str] = None,
    state_name: Optional[str] = None,
    use_title_case_logical_names: Optional[bool] = None,
) -> ReconcileResponse:
    """
    Refresh the cached field list of an entity against a fetched batch and persist the result.
    An entity seen for the first time starts with an empty field list.
    """
    repo = MappingCacheRepository(db)
    entity = await repo.get_entity(logical_name)
    if entity is None:
        logger.info("[Mapping:Service] Starting new field cache for %s", logical_name)
        entity = MappingEntity(logical_name=logical_name)

    if schema_name is not None:
        entity.schema_name = schema_name
    if state_name is not None:
        entity.state_name = state_name

    summary = reconcile_fields(entity, attributes, _title_case(use_title_case_logical_names))
    await repo.save_entity(entity)

    return ReconcileResponse(
        logical_name=entity.logical_name,
        updated=summary.updated,
        appended=summary.appended,
        untouched=summary.untouched,
        fields=entity.fields,
    )


async def get_entity_fields(db: AsyncSession, logical_name: str) -> Optional[EntityFieldsResponse]:
    """Cached fields of an entity, or None when it was never reconciled."""
    entity = await MappingCacheRepository(db).get_entity(logical_name)
    if entity is None:
        return None
    return EntityFieldsResponse(logical_name=entity.logical_name, state_name=entity.state_name, fields=entity.fields)
