# Copyright (C) 2010-2026 Evolveum and contributors
#
# Licensed under the EUPL-1.2 or later.

"""Unit tests for inbound descriptor parsing: malformed attributes must not reject a batch."""

import logging
from uuid import uuid4

from crmgen.common.enums import AttributeTypeCode, DateTimeBehavior
from crmgen.modules.mapping.core.reconciler import reconcile_fields
from crmgen.modules.mapping.schema import (
    DateTimeAttributeMetadata,
    GenericAttributeMetadata,
    IntegerAttributeMetadata,
    MappingEntity,
    ReconcileRequest,
    StringAttributeMetadata,
)


def _batch(*attributes):
    return ReconcileRequest.model_validate({"attributes": list(attributes)})


def test_unknown_type_code_is_kept_in_batch(caplog):
    with caplog.at_level(logging.WARNING):
        request = _batch(
            {"kind": "integer", "metadataId": str(uuid4()), "logicalName": "priority", "attributeType": "Integer"},
            {"kind": "string", "metadataId": str(uuid4()), "logicalName": "new_file", "attributeType": "File"},
        )

    assert isinstance(request.attributes[1], StringAttributeMetadata)
    assert request.attributes[1].attribute_type == AttributeTypeCode.unknown
    assert "File" in caplog.text


def test_unknown_kind_parses_as_generic():
    request = _batch({"kind": "file", "logicalName": "new_contract", "attributeType": "String"})

    attribute = request.attributes[0]
    assert isinstance(attribute, GenericAttributeMetadata)
    assert attribute.kind == "file"


def test_numeric_date_time_behavior_is_accepted():
    wrapped = DateTimeAttributeMetadata.model_validate({"attributeType": "DateTime", "dateTimeBehavior": {"value": 2}})
    bare = DateTimeAttributeMetadata.model_validate({"attributeType": "DateTime", "dateTimeBehavior": 3})

    assert wrapped.date_time_behavior == "2"
    assert bare.date_time_behavior == "3"


def test_unknown_required_level_is_ignored():
    request = _batch({"kind": "string", "logicalName": "name", "requiredLevel": {"value": "Mandatory"}})
    assert request.attributes[0].required_level is None


def test_malformed_attributes_do_not_abort_reconcile():
    """Every attribute of a batch with odd entries still produces a record."""
    request = _batch(
        {"kind": "integer", "metadataId": str(uuid4()), "logicalName": "priority", "attributeType": "Integer"},
        {"kind": "string", "metadataId": str(uuid4()), "logicalName": "new_file", "attributeType": "File"},
        {"kind": "file", "metadataId": str(uuid4()), "logicalName": "new_contract", "attributeType": "String"},
        {
            "kind": "datetime",
            "metadataId": str(uuid4()),
            "logicalName": "birthdate",
            "attributeType": "DateTime",
            "dateTimeBehavior": {"value": 2},
        },
    )
    entity = MappingEntity(logical_name="contact")

    summary = reconcile_fields(entity, request.attributes, max_workers=1)

    assert summary.appended == 4
    assert [r.target_type for r in entity.fields] == ["int?", "object", "string", "DateTime?"]
    assert entity.fields[3].date_time_behavior == DateTimeBehavior.DateOnly


def test_known_kinds_still_discriminate():
    request = _batch({"kind": "integer", "minValue": 1}, {"logicalName": "statecode"})

    assert isinstance(request.attributes[0], IntegerAttributeMetadata)
    assert isinstance(request.attributes[1], GenericAttributeMetadata)
    assert request.attributes[1].kind == "other"
