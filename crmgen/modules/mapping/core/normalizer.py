#  Copyright (C) 2010-2026 Evolveum and contributors
#
#  Licensed under the EUPL-1.2 or later.

"""
Field normalizer: turns one raw attribute descriptor into a FieldRecord, or refreshes an existing one in place.
"""

import logging
from typing import List, Optional

from ....common.enums import AttributeKind, AttributeRequiredLevel, AttributeTypeCode
from ....common.naming import (
    get_entity_property_private_name,
    get_friendly_name,
    get_proper_hybrid_field_name,
    get_proper_variable_name,
)
from ..schema import AttributeMetadata, CrmPropertyAttribute, FieldRecord, MappingEntity
from ..utils.merges import CopyRule, apply_copy_rules, merge_if_present
from .constraints import attribute_kind, extract_constraints
from .option_sets import normalize_option_set, project_labels, user_label
from .target_type import resolve_target_type

logger = logging.getLogger(__name__)

# Straight copies; a missing source value leaves the record untouched
COPY_RULES: List[CopyRule] = [
    ("metadata_id", "metadata_id"),
    ("logical_name", "logical_name"),
    ("attribute_of", "attribute_of"),
    ("is_valid_for_create", "is_valid_for_create"),
    ("is_valid_for_read", "is_valid_for_read"),
    ("is_valid_for_update", "is_valid_for_update"),
    ("deprecated_version", "deprecated_version"),
    ("is_primary_id", "is_primary_key"),
    ("schema_name", "schema_name"),
]

LOOKUP_TYPE_CODES = (AttributeTypeCode.lookup, AttributeTypeCode.owner, AttributeTypeCode.customer)
ENUM_KINDS = (AttributeKind.enum, AttributeKind.boolean)


def _classify_type(attribute: AttributeMetadata, result: FieldRecord) -> None:
    if attribute.attribute_type is None:
        return
    result.field_type = attribute.attribute_type
    result.is_activity_party = attribute.attribute_type == AttributeTypeCode.party_list
    result.is_state_code = attribute.attribute_type == AttributeTypeCode.state


def _apply_deprecation(attribute: AttributeMetadata, result: FieldRecord) -> None:
    if attribute.deprecated_version is not None:
        result.is_deprecated = bool(attribute.deprecated_version.strip())


def _apply_names(attribute: AttributeMetadata, result: FieldRecord, is_title_case_logical_name: bool) -> None:
    if attribute.schema_name is None:
        return
    if attribute.logical_name is not None:
        result.display_name = get_proper_variable_name(
            attribute.schema_name, attribute.logical_name, is_title_case_logical_name
        )
    result.private_property_name = get_entity_property_private_name(attribute.schema_name)


def _apply_labels(attribute: AttributeMetadata, result: FieldRecord) -> None:
    description = user_label(attribute.description)
    if attribute.description is not None and attribute.description.user_localized_label is not None:
        result.description = description or ""

    # Translations and the active-locale label are refreshed independently
    merge_if_present(result, "localized_labels", project_labels(attribute.display_name))
    if attribute.display_name is not None and attribute.display_name.user_localized_label is not None:
        result.label = user_label(attribute.display_name)
        merge_if_present(result, "friendly_name", get_friendly_name(result.label))


def _apply_required_level(attribute: AttributeMetadata, result: FieldRecord) -> None:
    if attribute.required_level is not None:
        result.is_required = attribute.required_level == AttributeRequiredLevel.application_required


def _build_property_attribute(attribute: AttributeMetadata, result: FieldRecord) -> None:
    if attribute.attribute_type is None:
        return
    is_lookup = attribute.attribute_type in LOOKUP_TYPE_CODES
    single_target = result.lookup_data.single_target_type if result.lookup_data is not None else None
    result.attribute = CrmPropertyAttribute(
        logical_name=attribute.logical_name,
        is_lookup=is_lookup,
        is_image=attribute_kind(attribute) == AttributeKind.image,
        is_multi_typed=is_lookup and not single_target,
    )


def normalize_field(
    attribute: AttributeMetadata,
    entity: Optional[MappingEntity],
    result: Optional[FieldRecord] = None,
    is_title_case_logical_name: bool = False,
) -> FieldRecord:
    """
    Normalize a raw attribute descriptor into a field record.

    :param attribute: Raw descriptor from the metadata catalog.
    :param entity: Owning entity; its state name types 'statecode' fields.
    :param result: Record to refresh in place; a new one is allocated when None.
    :param is_title_case_logical_name: Derive display names from the title-cased logical name.
    :return: The refreshed record (the same object as `result` when given).
    """
    result = result if result is not None else FieldRecord()
    result.bind_entity(entity)

    apply_copy_rules(attribute, result, COPY_RULES)
    _classify_type(attribute, result)
    _apply_deprecation(attribute, result)

    if attribute_kind(attribute) in ENUM_KINDS:
        result.enum_data = normalize_option_set(attribute, result.enum_data, is_title_case_logical_name)

    # Lookup resolution runs here, before the property attribute reads it
    extract_constraints(attribute, result)

    _apply_names(attribute, result, is_title_case_logical_name)
    _apply_labels(attribute, result)
    _apply_required_level(attribute, result)
    _build_property_attribute(attribute, result)

    result.hybrid_name = get_proper_hybrid_field_name(result.display_name, result.attribute)

    result.target_type = resolve_target_type(result)
    result.field_type_string = result.target_type

    logger.debug(
        "[Mapping:Normalize] %s -> %s (%s)", result.logical_name, result.target_type, attribute_kind(attribute).value
    )
    return result
