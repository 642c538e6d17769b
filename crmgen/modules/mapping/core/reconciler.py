#  Copyright (C) 2010-2026 Evolveum and contributors
#
#  Licensed under the EUPL-1.2 or later.

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from ....config import config
from ..schema import AttributeMetadata, FieldRecord, MappingEntity
from ..utils.parallel import map_in_parallel
from .normalizer import normalize_field

logger = logging.getLogger(__name__)


@dataclass
class ReconcileSummary:
    updated: int = 0
    appended: int = 0
    untouched: int = 0


def index_by_identity(
    attributes: Sequence[AttributeMetadata], policy: str = "first"
) -> Dict[UUID, AttributeMetadata]:
    """
    Map metadata ids to descriptors. Descriptors without an id are not indexed.
    With policy 'first' the earliest duplicate wins, with 'last' the latest.
    """
    by_id: Dict[UUID, AttributeMetadata] = {}
    duplicates: List[UUID] = []
    for attribute in attributes:
        metadata_id = attribute.metadata_id
        if metadata_id is None:
            continue
        if metadata_id in by_id:
            duplicates.append(metadata_id)
            if policy != "last":
                continue
        by_id[metadata_id] = attribute

    if duplicates:
        logger.warning(
            "[Mapping:Reconcile] Batch repeats %d metadata ids, keeping the %s occurrence: %s",
            len(duplicates),
            policy,
            sorted({str(d) for d in duplicates}),
        )
    return by_id


def reconcile_fields(
    entity: MappingEntity,
    attributes: Sequence[AttributeMetadata],
    is_title_case_logical_name: Optional[bool] = None,
    *,
    max_workers: Optional[int] = None,
    duplicate_policy: Optional[str] = None,
) -> ReconcileSummary:
    """
    Refresh an entity's cached field records against a freshly fetched attribute batch.

    Records whose metadata id appears in the batch are refreshed in place (in parallel);
    descriptors with an unseen id are normalized into new records appended in batch order;
    every other record is left as it was. Nothing is ever removed.

    :param entity: Entity owning the field collection; its `fields` list is mutated.
    :param attributes: Raw attribute descriptors fetched from the catalog.
    :param is_title_case_logical_name: Naming flag; defaults to the configured value.
    :param max_workers: Thread pool size for the refresh phase; defaults to the configured value.
    :param duplicate_policy: 'first' or 'last' for repeated ids; defaults to the configured value.
    :return: Counts of updated, appended and untouched records.
    """
    title_case = (
        config.mapping.use_title_case_logical_names
        if is_title_case_logical_name is None
        else is_title_case_logical_name
    )
    workers = max_workers or config.mapping.max_workers
    by_id = index_by_identity(attributes, duplicate_policy or config.mapping.duplicate_identity_policy)

    # update modified fields
    modified: List[Tuple[FieldRecord, AttributeMetadata]] = [
        (record, by_id[record.metadata_id])
        for record in entity.fields
        if record.metadata_id is not None and record.metadata_id in by_id
    ]

    def _refresh(pair: Tuple[FieldRecord, AttributeMetadata]) -> FieldRecord:
        record, attribute = pair
        return normalize_field(attribute, entity, record, title_case)

    map_in_parallel(modified, _refresh, max_workers=workers, logger_scope="Mapping:Reconcile")

    # add new attributes, in batch order
    known_ids = {record.metadata_id for record in entity.fields if record.metadata_id is not None}
    appended = 0
    for attribute in attributes:
        metadata_id = attribute.metadata_id
        if metadata_id is not None:
            if metadata_id in known_ids or by_id.get(metadata_id) is not attribute:
                continue
            known_ids.add(metadata_id)
        entity.fields.append(normalize_field(attribute, entity, None, title_case))
        appended += 1

    summary = ReconcileSummary(
        updated=len(modified),
        appended=appended,
        untouched=len(entity.fields) - len(modified) - appended,
    )
    logger.info(
        "[Mapping:Reconcile] %s: %d updated, %d appended, %d untouched",
        entity.logical_name,
        summary.updated,
        summary.appended,
        summary.untouched,
    )
    return summary
