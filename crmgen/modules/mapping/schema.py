#  Copyright (C) 2010-2026 Evolveum and contributors
#
#  Licensed under the EUPL-1.2 or later.

import logging
import weakref
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Annotated, Any, List, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Discriminator, Field, PrivateAttr, Tag, computed_field, field_validator

from ...common.enums import AttributeKind, AttributeRequiredLevel, AttributeTypeCode, DateTimeBehavior
from ...common.naming import xml_escape

logger = logging.getLogger(__name__)


def _unwrap_managed_value(v: Any) -> Any:
    """The platform wraps some scalars as {"value": ...} (managed properties); accept both shapes."""
    if isinstance(v, dict):
        return v.get("value", v.get("Value"))
    return v


# --- Labels ---
class LocalizedLabel(BaseModel):
    """Single label text in one language."""

    model_config = {"populate_by_name": True}

    label: Optional[str] = None
    language_code: Optional[int] = Field(default=None, alias="languageCode")


class LabelSet(BaseModel):
    """All translations of a label plus the one in the active (user) locale."""

    model_config = {"populate_by_name": True}

    localized_labels: Optional[List[LocalizedLabel]] = Field(default=None, alias="localizedLabels")
    user_localized_label: Optional[LocalizedLabel] = Field(default=None, alias="userLocalizedLabel")


# --- Labels ---


# --- Raw attribute metadata (inbound) ---
class OptionMetadata(BaseModel):
    model_config = {"populate_by_name": True}

    value: int
    label: Optional[LabelSet] = None


class OptionSetMetadata(BaseModel):
    model_config = {"populate_by_name": True}

    name: Optional[str] = None
    is_global: Optional[bool] = Field(default=None, alias="isGlobal")
    display_name: Optional[LabelSet] = Field(default=None, alias="displayName")
    options: Optional[List[OptionMetadata]] = None


class BooleanOptionSetMetadata(BaseModel):
    model_config = {"populate_by_name": True}

    name: Optional[str] = None
    is_global: Optional[bool] = Field(default=None, alias="isGlobal")
    display_name: Optional[LabelSet] = Field(default=None, alias="displayName")
    true_option: Optional[OptionMetadata] = Field(default=None, alias="trueOption")
    false_option: Optional[OptionMetadata] = Field(default=None, alias="falseOption")


class AttributeMetadata(BaseModel):
    """
    Raw attribute descriptor as fetched from the platform metadata catalog.
    Every property is optional: partial (delta) descriptors leave the cached values alone.
    """

    model_config = {"populate_by_name": True}

    kind: str = "other"
    metadata_id: Optional[UUID] = Field(default=None, alias="metadataId")
    logical_name: Optional[str] = Field(default=None, alias="logicalName")
    schema_name: Optional[str] = Field(default=None, alias="schemaName")
    attribute_of: Optional[str] = Field(default=None, alias="attributeOf")
    attribute_type: Optional[AttributeTypeCode] = Field(default=None, alias="attributeType")
    is_valid_for_create: Optional[bool] = Field(default=None, alias="isValidForCreate")
    is_valid_for_read: Optional[bool] = Field(default=None, alias="isValidForRead")
    is_valid_for_update: Optional[bool] = Field(default=None, alias="isValidForUpdate")
    is_primary_id: Optional[bool] = Field(default=None, alias="isPrimaryId")
    required_level: Optional[AttributeRequiredLevel] = Field(default=None, alias="requiredLevel")
    deprecated_version: Optional[str] = Field(default=None, alias="deprecatedVersion")
    description: Optional[LabelSet] = None
    display_name: Optional[LabelSet] = Field(default=None, alias="displayName")

    @field_validator("attribute_type", mode="before")
    @classmethod
    def _tolerate_unknown_type(cls, v):
        v = _unwrap_managed_value(v)
        if v is None or isinstance(v, AttributeTypeCode):
            return v
        try:
            return AttributeTypeCode(v)
        except ValueError:
            logger.warning("[Mapping:Schema] Unrecognized attribute type %r, typing the field as generic", v)
            return AttributeTypeCode.unknown

    @field_validator("required_level", mode="before")
    @classmethod
    def _unwrap_required_level(cls, v):
        v = _unwrap_managed_value(v)
        if v is None or isinstance(v, AttributeRequiredLevel):
            return v
        try:
            return AttributeRequiredLevel(v)
        except ValueError:
            # Unknown level: leave the cached flag alone
            logger.warning("[Mapping:Schema] Ignoring unrecognized required level %r", v)
            return None


class GenericAttributeMetadata(AttributeMetadata):
    """Fallback for kinds without dedicated constraints, including kinds this service does not know."""

    kind: str = "other"


class StringAttributeMetadata(AttributeMetadata):
    kind: Literal["string"] = "string"
    max_length: Optional[int] = Field(default=None, alias="maxLength")


class MemoAttributeMetadata(AttributeMetadata):
    kind: Literal["memo"] = "memo"
    max_length: Optional[int] = Field(default=None, alias="maxLength")


class IntegerAttributeMetadata(AttributeMetadata):
    kind: Literal["integer"] = "integer"
    min_value: Optional[int] = Field(default=None, alias="minValue")
    max_value: Optional[int] = Field(default=None, alias="maxValue")


class DecimalAttributeMetadata(AttributeMetadata):
    kind: Literal["decimal"] = "decimal"
    min_value: Optional[Decimal] = Field(default=None, alias="minValue")
    max_value: Optional[Decimal] = Field(default=None, alias="maxValue")


class MoneyAttributeMetadata(AttributeMetadata):
    kind: Literal["money"] = "money"
    min_value: Optional[float] = Field(default=None, alias="minValue")
    max_value: Optional[float] = Field(default=None, alias="maxValue")


class DoubleAttributeMetadata(AttributeMetadata):
    kind: Literal["double"] = "double"
    min_value: Optional[float] = Field(default=None, alias="minValue")
    max_value: Optional[float] = Field(default=None, alias="maxValue")


class ImageAttributeMetadata(AttributeMetadata):
    kind: Literal["image"] = "image"
    can_store_full_image: Optional[bool] = Field(default=None, alias="canStoreFullImage")
    max_width: Optional[int] = Field(default=None, alias="maxWidth")
    max_height: Optional[int] = Field(default=None, alias="maxHeight")
    max_size_in_kb: Optional[int] = Field(default=None, alias="maxSizeInKB")


class DateTimeAttributeMetadata(AttributeMetadata):
    kind: Literal["datetime"] = "datetime"
    date_time_behavior: Optional[str] = Field(default=None, alias="dateTimeBehavior")

    @field_validator("date_time_behavior", mode="before")
    @classmethod
    def _unwrap_behavior(cls, v):
        v = _unwrap_managed_value(v)
        # Numeric behaviors are parsed later like their names
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class LookupAttributeMetadata(AttributeMetadata):
    kind: Literal["lookup"] = "lookup"
    targets: Optional[List[str]] = None


class EnumAttributeMetadata(AttributeMetadata):
    kind: Literal["enum"] = "enum"
    option_set: Optional[OptionSetMetadata] = Field(default=None, alias="optionSet")


class BooleanAttributeMetadata(AttributeMetadata):
    kind: Literal["boolean"] = "boolean"
    option_set: Optional[BooleanOptionSetMetadata] = Field(default=None, alias="optionSet")


_KNOWN_KINDS = {kind.value for kind in AttributeKind}


def _attribute_kind(v: Any) -> str:
    kind = v.get("kind") if isinstance(v, dict) else getattr(v, "kind", None)
    return kind if isinstance(kind, str) and kind in _KNOWN_KINDS else "other"


RawAttribute = Annotated[
    Union[
        Annotated[StringAttributeMetadata, Tag("string")],
        Annotated[MemoAttributeMetadata, Tag("memo")],
        Annotated[IntegerAttributeMetadata, Tag("integer")],
        Annotated[DecimalAttributeMetadata, Tag("decimal")],
        Annotated[MoneyAttributeMetadata, Tag("money")],
        Annotated[DoubleAttributeMetadata, Tag("double")],
        Annotated[BooleanAttributeMetadata, Tag("boolean")],
        Annotated[DateTimeAttributeMetadata, Tag("datetime")],
        Annotated[ImageAttributeMetadata, Tag("image")],
        Annotated[LookupAttributeMetadata, Tag("lookup")],
        Annotated[EnumAttributeMetadata, Tag("enum")],
        Annotated[GenericAttributeMetadata, Tag("other")],
    ],
    Discriminator(_attribute_kind),
]


# --- Raw attribute metadata (inbound) ---


# --- Field records (outbound) ---
class LocalizedLabelRecord(BaseModel):
    model_config = {"populate_by_name": True}

    language_code: Optional[int] = Field(
        default=None, validation_alias="languageCode", serialization_alias="languageCode"
    )
    label: Optional[str] = None


class ImageData(BaseModel):
    model_config = {"populate_by_name": True}

    can_store_full_image: Optional[bool] = Field(
        default=None, validation_alias="canStoreFullImage", serialization_alias="canStoreFullImage"
    )
    max_width: Optional[int] = Field(default=None, validation_alias="maxWidth", serialization_alias="maxWidth")
    max_height: Optional[int] = Field(default=None, validation_alias="maxHeight", serialization_alias="maxHeight")
    max_size_in_kb: Optional[int] = Field(
        default=None, validation_alias="maxSizeInKb", serialization_alias="maxSizeInKb"
    )


class LookupData(BaseModel):
    """Relationship target of a lookup. An empty single target means the lookup is polymorphic."""

    model_config = {"populate_by_name": True}

    single_target_type: Optional[str] = Field(
        default=None, validation_alias="singleTargetType", serialization_alias="singleTargetType"
    )


class EnumItem(BaseModel):
    model_config = {"populate_by_name": True}

    value: int
    name: str
    label: Optional[str] = None
    localized_labels: List[LocalizedLabelRecord] = Field(
        default_factory=list, validation_alias="localizedLabels", serialization_alias="localizedLabels"
    )


class EnumData(BaseModel):
    """Option set (choice list) backing an enum or boolean attribute."""

    model_config = {"populate_by_name": True}

    logical_name: Optional[str] = Field(default=None, validation_alias="logicalName", serialization_alias="logicalName")
    display_name: Optional[str] = Field(default=None, validation_alias="displayName", serialization_alias="displayName")
    is_global: bool = Field(default=False, validation_alias="isGlobal", serialization_alias="isGlobal")
    global_name: Optional[str] = Field(default=None, validation_alias="globalName", serialization_alias="globalName")
    items: List[EnumItem] = Field(default_factory=list)


class CrmPropertyAttribute(BaseModel):
    """Descriptor emitted as an attribute on the generated property."""

    model_config = {"populate_by_name": True}

    logical_name: Optional[str] = Field(default=None, validation_alias="logicalName", serialization_alias="logicalName")
    is_lookup: bool = Field(default=False, validation_alias="isLookup", serialization_alias="isLookup")
    is_image: bool = Field(default=False, validation_alias="isImage", serialization_alias="isImage")
    is_multi_typed: bool = Field(default=False, validation_alias="isMultiTyped", serialization_alias="isMultiTyped")


class FieldRecord(BaseModel):
    """
    Normalized, fully resolved field of an entity, ready for templating.

    Records are mutated in place on every refresh; anything holding a reference keeps seeing
    the current state. The owning entity is referenced weakly and never serialized.
    """

    model_config = {"populate_by_name": True}

    metadata_id: Optional[UUID] = Field(
        default=None,
        validation_alias="metadataId",
        serialization_alias="metadataId",
        description="Stable identity of the attribute; the reconciliation key.",
    )
    field_type: Optional[AttributeTypeCode] = Field(
        default=None, validation_alias="fieldType", serialization_alias="fieldType"
    )
    target_type: Optional[str] = Field(
        default=None,
        validation_alias="targetType",
        serialization_alias="targetType",
        description="Property type token for generated code. Always derived from fieldType.",
    )
    field_type_string: Optional[str] = Field(
        default=None,
        validation_alias="fieldTypeString",
        serialization_alias="fieldTypeString",
        description="Legacy mirror of targetType.",
    )

    is_valid_for_create: bool = Field(
        default=False, validation_alias="isValidForCreate", serialization_alias="isValidForCreate"
    )
    is_valid_for_read: bool = Field(
        default=False, validation_alias="isValidForRead", serialization_alias="isValidForRead"
    )
    is_valid_for_update: bool = Field(
        default=False, validation_alias="isValidForUpdate", serialization_alias="isValidForUpdate"
    )
    is_activity_party: bool = Field(
        default=False, validation_alias="isActivityParty", serialization_alias="isActivityParty"
    )
    is_state_code: bool = Field(default=False, validation_alias="isStateCode", serialization_alias="isStateCode")
    is_primary_key: bool = Field(default=False, validation_alias="isPrimaryKey", serialization_alias="isPrimaryKey")
    is_deprecated: bool = Field(default=False, validation_alias="isDeprecated", serialization_alias="isDeprecated")
    deprecated_version: Optional[str] = Field(
        default=None, validation_alias="deprecatedVersion", serialization_alias="deprecatedVersion"
    )
    is_required: bool = Field(default=False, validation_alias="isRequired", serialization_alias="isRequired")

    max_length: Optional[int] = Field(default=None, validation_alias="maxLength", serialization_alias="maxLength")
    min: Optional[Decimal] = None
    max: Optional[Decimal] = None

    enum_data: Optional[EnumData] = Field(default=None, validation_alias="enumData", serialization_alias="enumData")
    image_data: Optional[ImageData] = Field(default=None, validation_alias="imageData", serialization_alias="imageData")
    lookup_data: Optional[LookupData] = Field(
        default=None, validation_alias="lookupData", serialization_alias="lookupData"
    )

    logical_name: Optional[str] = Field(default=None, validation_alias="logicalName", serialization_alias="logicalName")
    schema_name: Optional[str] = Field(default=None, validation_alias="schemaName", serialization_alias="schemaName")
    attribute_of: Optional[str] = Field(default=None, validation_alias="attributeOf", serialization_alias="attributeOf")
    private_property_name: Optional[str] = Field(
        default=None, validation_alias="privatePropertyName", serialization_alias="privatePropertyName"
    )
    display_name: Optional[str] = Field(default=None, validation_alias="displayName", serialization_alias="displayName")
    hybrid_name: Optional[str] = Field(default=None, validation_alias="hybridName", serialization_alias="hybridName")
    friendly_name: Optional[str] = Field(
        default=None, validation_alias="friendlyName", serialization_alias="friendlyName"
    )
    label: Optional[str] = None
    localized_labels: Optional[List[LocalizedLabelRecord]] = Field(
        default=None, validation_alias="localizedLabels", serialization_alias="localizedLabels"
    )
    description: str = ""

    attribute: Optional[CrmPropertyAttribute] = None
    date_time_behavior: Optional[DateTimeBehavior] = Field(
        default=None, validation_alias="dateTimeBehavior", serialization_alias="dateTimeBehavior"
    )

    _entity_ref: Any = PrivateAttr(default=None)

    @field_validator("description", mode="before")
    @classmethod
    def _description_never_null(cls, v):
        return "" if v is None else v

    @computed_field(alias="descriptionXmlSafe")  # type: ignore[prop-decorator]
    @property
    def description_xml_safe(self) -> str:
        return xml_escape(self.description)

    @property
    def entity(self) -> Optional["MappingEntity"]:
        return self._entity_ref() if self._entity_ref is not None else None

    def bind_entity(self, entity: Optional["MappingEntity"]) -> None:
        self._entity_ref = weakref.ref(entity) if entity is not None else None


# --- Field records (outbound) ---


# --- Entity container ---
@dataclass(eq=False)
class MappingEntity:
    """
    Owner of an ordered field collection. Compared by identity: it is a container, not a value.
    """

    logical_name: str
    schema_name: Optional[str] = None
    state_name: Optional[str] = None
    fields: List[FieldRecord] = field(default_factory=list)

    def __post_init__(self) -> None:
        for record in self.fields:
            record.bind_entity(self)


# --- Entity container ---


# --- API models ---
class EntityContext(BaseModel):
    model_config = {"populate_by_name": True}

    logical_name: str = Field(..., validation_alias="logicalName", serialization_alias="logicalName")
    schema_name: Optional[str] = Field(default=None, validation_alias="schemaName", serialization_alias="schemaName")
    state_name: Optional[str] = Field(
        default=None,
        validation_alias="stateName",
        serialization_alias="stateName",
        description="Name of the generated state enum, used as the type of 'statecode'.",
    )


class NormalizeRequest(BaseModel):
    model_config = {"populate_by_name": True}

    entity: EntityContext
    attribute: RawAttribute
    existing: Optional[FieldRecord] = None
    use_title_case_logical_names: Optional[bool] = Field(
        default=None, validation_alias="useTitleCaseLogicalNames", serialization_alias="useTitleCaseLogicalNames"
    )


class ReconcileRequest(BaseModel):
    model_config = {"populate_by_name": True}

    schema_name: Optional[str] = Field(default=None, validation_alias="schemaName", serialization_alias="schemaName")
    state_name: Optional[str] = Field(default=None, validation_alias="stateName", serialization_alias="stateName")
    attributes: List[RawAttribute] = Field(default_factory=list)
    use_title_case_logical_names: Optional[bool] = Field(
        default=None, validation_alias="useTitleCaseLogicalNames", serialization_alias="useTitleCaseLogicalNames"
    )


class ReconcileResponse(BaseModel):
    model_config = {"populate_by_name": True}

    logical_name: str = Field(..., validation_alias="logicalName", serialization_alias="logicalName")
    updated: int = 0
    appended: int = 0
    untouched: int = 0
    fields: List[FieldRecord] = Field(default_factory=list)


class EntityFieldsResponse(BaseModel):
    model_config = {"populate_by_name": True}

    logical_name: str = Field(..., validation_alias="logicalName", serialization_alias="logicalName")
    state_name: Optional[str] = Field(default=None, validation_alias="stateName", serialization_alias="stateName")
    fields: List[FieldRecord] = Field(default_factory=list)
