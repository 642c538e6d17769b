#  Copyright (C) 2010-2026 Evolveum and contributors
#
#  Licensed under the EUPL-1.2 or later.

from typing import TYPE_CHECKING, Dict

from ....common.enums import AttributeTypeCode

if TYPE_CHECKING:
    from ..schema import FieldRecord


class TargetType:
    """Property type tokens understood by the rendering stage."""

    guid = "Guid?"
    option_set_value = "OptionSetValue"
    int64 = "long?"
    int32 = "int?"
    boolean = "bool?"
    date_time = "DateTime?"
    decimal = "decimal?"
    money = "Money"
    double = "double?"
    entity_reference = "EntityReference"
    string = "string"
    activity_party_array = "ActivityParty[]"
    boolean_managed_property = "BooleanManagedProperty"
    generic_object = "object"


_TARGET_TYPES: Dict[AttributeTypeCode, str] = {
    AttributeTypeCode.picklist: TargetType.option_set_value,
    AttributeTypeCode.status: TargetType.option_set_value,
    AttributeTypeCode.big_int: TargetType.int64,
    AttributeTypeCode.integer: TargetType.int32,
    AttributeTypeCode.boolean: TargetType.boolean,
    AttributeTypeCode.datetime: TargetType.date_time,
    AttributeTypeCode.decimal: TargetType.decimal,
    AttributeTypeCode.money: TargetType.money,
    AttributeTypeCode.double: TargetType.double,
    AttributeTypeCode.uniqueidentifier: TargetType.guid,
    AttributeTypeCode.lookup: TargetType.entity_reference,
    AttributeTypeCode.owner: TargetType.entity_reference,
    AttributeTypeCode.customer: TargetType.entity_reference,
    AttributeTypeCode.memo: TargetType.string,
    AttributeTypeCode.virtual: TargetType.string,
    AttributeTypeCode.entity_name: TargetType.string,
    AttributeTypeCode.string: TargetType.string,
    AttributeTypeCode.party_list: TargetType.activity_party_array,
    AttributeTypeCode.managed_property: TargetType.boolean_managed_property,
}


def state_target_type(state_name: str) -> str:
    return f"{state_name}?"


def resolve_target_type(field: "FieldRecord") -> str:
    """
    Map a field's type code to the property type used in generated code.
    Unknown codes fall back to 'object'; state fields use the owning entity's state enum.
    """
    if field.is_primary_key:
        return TargetType.guid

    if field.field_type == AttributeTypeCode.state:
        entity = field.entity
        if entity is not None and entity.state_name:
            return state_target_type(entity.state_name)
        return TargetType.generic_object

    if field.field_type is None:
        return TargetType.generic_object

    return _TARGET_TYPES.get(field.field_type, TargetType.generic_object)
