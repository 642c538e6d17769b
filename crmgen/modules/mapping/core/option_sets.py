#  Copyright (C) 2010-2026 Evolveum and contributors
#
#  Licensed under the EUPL-1.2 or later.

from typing import List, Optional, Set

from ....common.naming import get_enum_item_name, get_proper_variable_name
from ..schema import (
    AttributeMetadata,
    EnumData,
    EnumItem,
    LabelSet,
    LocalizedLabelRecord,
    OptionMetadata,
)
from ..utils.merges import merge_if_present


def project_labels(labels: Optional[LabelSet]) -> Optional[List[LocalizedLabelRecord]]:
    """Flatten a label set into (languageCode, label) records; None when the set carries no translations."""
    if labels is None or labels.localized_labels is None:
        return None
    return [
        LocalizedLabelRecord(language_code=entry.language_code, label=entry.label) for entry in labels.localized_labels
    ]


def user_label(labels: Optional[LabelSet]) -> Optional[str]:
    if labels is None or labels.user_localized_label is None:
        return None
    return labels.user_localized_label.label


def _collect_options(attribute: AttributeMetadata) -> Optional[List[OptionMetadata]]:
    option_set = getattr(attribute, "option_set", None)
    if option_set is None:
        return None
    if hasattr(option_set, "options"):
        return option_set.options
    # Boolean option sets: false first, matching the 0/1 values
    pair = [option for option in (option_set.false_option, option_set.true_option) if option is not None]
    return pair or None


def _build_items(options: List[OptionMetadata]) -> List[EnumItem]:
    items: List[EnumItem] = []
    used: Set[str] = set()
    for option in options:
        label = user_label(option.label)
        name = get_enum_item_name(label, option.value)
        if name in used:
            name = f"{name}_{option.value}".replace("-", "Minus")
        used.add(name)
        items.append(
            EnumItem(value=option.value, name=name, label=label, localized_labels=project_labels(option.label) or [])
        )
    return items


def normalize_option_set(
    attribute: AttributeMetadata, existing: Optional[EnumData], is_title_case_logical_name: bool = False
) -> Optional[EnumData]:
    """
    Build or refresh the option-set record of an enum or boolean attribute.
    The item list is replaced only when the descriptor carries options.
    """
    option_set = getattr(attribute, "option_set", None)
    if option_set is None and attribute.logical_name is None and attribute.schema_name is None:
        return existing

    result = existing or EnumData()

    merge_if_present(result, "logical_name", attribute.logical_name)
    if attribute.schema_name is not None or attribute.logical_name is not None:
        result.display_name = get_proper_variable_name(
            attribute.schema_name, attribute.logical_name, is_title_case_logical_name
        )

    if option_set is not None:
        merge_if_present(result, "is_global", option_set.is_global)
        if result.is_global:
            merge_if_present(result, "global_name", option_set.name)

        options = _collect_options(attribute)
        if options is not None:
            result.items = _build_items(options)

    return result
