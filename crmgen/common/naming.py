#  Copyright (C) 2010-2026 Evolveum and contributors
#
#  Licensed under the EUPL-1.2 or later.

"""
Naming helpers used when turning platform metadata into identifiers for generated code.
"""

import re
from typing import TYPE_CHECKING, Optional
from xml.sax.saxutils import escape

if TYPE_CHECKING:
    from ..modules.mapping.schema import CrmPropertyAttribute

_INVALID_CHARS = re.compile(r"[^A-Za-z0-9_]")
_WORD_SPLIT = re.compile(r"[^A-Za-z0-9]+")

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def clean_name(name: Optional[str]) -> str:
    """
    Strip characters that cannot appear in an identifier.
    A leading digit gets an underscore prefix.
    """
    if not name:
        return ""
    cleaned = _INVALID_CHARS.sub("", name.strip())
    if cleaned and cleaned[0].isdigit():
        cleaned = "_" + cleaned
    return cleaned


def _title_case(logical_name: str) -> str:
    return "_".join(part[:1].upper() + part[1:] for part in logical_name.split("_"))


def get_proper_variable_name(
    schema_name: Optional[str], logical_name: Optional[str], is_title_case_logical_name: bool = False
) -> str:
    """
    Derive the public property name of a field.

    :param schema_name: Schema name of the attribute (preferred source).
    :param logical_name: Logical name of the attribute.
    :param is_title_case_logical_name: Build the name from the title-cased logical name instead.
    :return: Identifier-safe display name.
    """
    if is_title_case_logical_name and logical_name:
        return clean_name(_title_case(logical_name))
    return clean_name(schema_name or logical_name)


def get_entity_property_private_name(schema_name: Optional[str]) -> str:
    """Backing-field name for a property, e.g. 'AccountNumber' -> '_accountNumber'."""
    cleaned = clean_name(schema_name).lstrip("_")
    if not cleaned:
        return ""
    return "_" + cleaned[0].lower() + cleaned[1:]


def get_proper_hybrid_field_name(
    display_name: Optional[str], attribute: Optional["CrmPropertyAttribute"]
) -> Optional[str]:
    """
    Combine the display name with the attribute's logical name when the two diverge,
    so that renamed fields still carry their platform identity.
    """
    if not display_name:
        return display_name
    if attribute is None or not attribute.logical_name:
        return display_name
    if display_name.lower() == attribute.logical_name.lower():
        return display_name
    return f"{display_name}_{clean_name(attribute.logical_name)}"


def get_friendly_name(label: Optional[str]) -> Optional[str]:
    """PascalCase identifier from a human label ('Account Number' -> 'AccountNumber')."""
    if not label:
        return None
    words = [w for w in _WORD_SPLIT.split(label) if w]
    if not words:
        return None
    return clean_name("".join(w[:1].upper() + w[1:] for w in words))


def get_enum_item_name(label: Optional[str], value: int) -> str:
    """Identifier for an option-set item; falls back to the numeric value."""
    return get_friendly_name(label) or f"Value{value}".replace("-", "Minus")


def xml_escape(text: Optional[str]) -> str:
    """Escape text for embedding in XML doc comments."""
    if text is None:
        return ""
    return escape(text, _XML_ENTITIES)
