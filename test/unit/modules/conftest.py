"""Shared test fixtures for all modules."""

# Copyright (C) 2010-2026 Evolveum and contributors
#
# Licensed under the EUPL-1.2 or later.

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from crmgen.app import api
from crmgen.common.enums import AttributeTypeCode
from crmgen.modules.mapping.schema import (
    IntegerAttributeMetadata,
    LabelSet,
    LocalizedLabel,
    LookupAttributeMetadata,
    MappingEntity,
    StringAttributeMetadata,
)

# Common fixtures


@pytest.fixture
def test_client():
    """Create a test client for the FastAPI app."""
    return TestClient(api)


def labels(text, language_code=1033, *translations):
    """Label set with the active-locale label plus optional (code, text) translations."""
    localized = [LocalizedLabel(label=text, language_code=language_code)]
    localized.extend(LocalizedLabel(label=t, language_code=c) for c, t in translations)
    active = LocalizedLabel(label=text, language_code=language_code)
    return LabelSet(localized_labels=localized, user_localized_label=active)


@pytest.fixture
def make_labels():
    """Factory for label sets, see labels()."""
    return labels


@pytest.fixture
def account_entity():
    """Empty account entity with a state enum name."""
    return MappingEntity(logical_name="account", schema_name="Account", state_name="AccountState")


@pytest.fixture
def string_attribute():
    """Fully populated string attribute descriptor."""
    return StringAttributeMetadata(
        metadata_id=uuid4(),
        logical_name="accountnumber",
        schema_name="AccountNumber",
        attribute_type=AttributeTypeCode.string,
        is_valid_for_create=True,
        is_valid_for_read=True,
        is_valid_for_update=True,
        required_level="None",
        max_length=20,
        description=labels("Type an ID number for the account."),
        display_name=labels("Account Number", 1033, (1036, "Numéro de compte")),
    )


@pytest.fixture
def integer_attribute():
    """Integer attribute with a range."""
    return IntegerAttributeMetadata(
        metadata_id=uuid4(),
        logical_name="priority",
        schema_name="Priority",
        attribute_type=AttributeTypeCode.integer,
        min_value=0,
        max_value=100,
    )


@pytest.fixture
def polymorphic_lookup():
    """Lookup attribute allowed to point at two entity types."""
    return LookupAttributeMetadata(
        metadata_id=uuid4(),
        logical_name="parentcustomerid",
        schema_name="ParentCustomerId",
        attribute_type=AttributeTypeCode.customer,
        targets=["account", "contact"],
    )
