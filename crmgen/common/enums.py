#  Copyright (C) 2010-2026 Evolveum and contributors
#
#  Licensed under the EUPL-1.2 or later.

from enum import Enum
from typing import Optional

# Centralized enums for the micro-service


class AttributeTypeCode(str, Enum):
    """Attribute type codes as reported by the platform metadata catalog. Values match the wire names."""

    boolean = "Boolean"
    customer = "Customer"
    datetime = "DateTime"
    decimal = "Decimal"
    double = "Double"
    integer = "Integer"
    lookup = "Lookup"
    memo = "Memo"
    money = "Money"
    owner = "Owner"
    party_list = "PartyList"
    picklist = "Picklist"
    state = "State"
    status = "Status"
    string = "String"
    uniqueidentifier = "Uniqueidentifier"
    calendar_rules = "CalendarRules"
    virtual = "Virtual"
    big_int = "BigInt"
    managed_property = "ManagedProperty"
    entity_name = "EntityName"
    # Anything the catalog reports that is not listed above
    unknown = "Unknown"

    @classmethod
    def _missing_(cls, value: object) -> Optional["AttributeTypeCode"]:
        # Accept "integer", "PARTYLIST", "party_list" and friends
        if isinstance(value, str):
            wanted = value.replace("_", "").lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return None


class AttributeKind(str, Enum):
    """Closed set of raw attribute descriptor kinds. Drives constraint extraction."""

    string = "string"
    memo = "memo"
    integer = "integer"
    decimal = "decimal"
    money = "money"
    double = "double"
    boolean = "boolean"
    datetime = "datetime"
    image = "image"
    lookup = "lookup"
    enum = "enum"
    other = "other"


class DateTimeBehavior(int, Enum):
    UserLocal = 1
    DateOnly = 2
    TimeZoneIndependent = 3


class AttributeRequiredLevel(str, Enum):
    none = "None"
    system_required = "SystemRequired"
    application_required = "ApplicationRequired"
    recommended = "Recommended"

    @classmethod
    def _missing_(cls, value: object) -> Optional["AttributeRequiredLevel"]:
        if isinstance(value, str):
            wanted = value.replace("_", "").lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return None
