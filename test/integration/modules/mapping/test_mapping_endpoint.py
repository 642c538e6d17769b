# Copyright (C) 2010-2026 Evolveum and contributors
#
# Licensed under the EUPL-1.2 or later.


from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from crmgen.app import api
from crmgen.common.database.config import get_db
from crmgen.modules.mapping.router import get_entity_fields, reconcile_entity_fields
from crmgen.modules.mapping.schema import EntityFieldsResponse, FieldRecord, ReconcileRequest, ReconcileResponse

BASE_URL = "/api/v1/mapping"


# NORMALIZE
def test_normalize_integer_attribute():
    """Test normalizing a raw integer descriptor over HTTP."""
    client = TestClient(api)
    payload = {
        "entity": {"logicalName": "account", "stateName": "AccountState"},
        "attribute": {
            "kind": "integer",
            "metadataId": str(uuid4()),
            "logicalName": "priority",
            "schemaName": "Priority",
            "attributeType": "Integer",
            "minValue": 0,
            "maxValue": 100,
        },
    }

    response = client.post(f"{BASE_URL}/normalize", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["targetType"] == "int?"
    assert body["fieldTypeString"] == "int?"
    assert body["logicalName"] == "priority"
    assert body["displayName"] == "Priority"
    assert body["descriptionXmlSafe"] == ""


def test_normalize_descriptor_without_kind():
    """Descriptors without a kind are treated as generic attributes."""
    client = TestClient(api)
    payload = {
        "entity": {"logicalName": "account", "stateName": "AccountState"},
        "attribute": {"logicalName": "statecode", "attributeType": "State"},
    }

    response = client.post(f"{BASE_URL}/normalize", json=payload)

    assert response.status_code == 200
    assert response.json()["targetType"] == "AccountState?"


def test_normalize_refreshes_existing_record():
    client = TestClient(api)
    metadata_id = str(uuid4())
    payload = {
        "entity": {"logicalName": "account"},
        "attribute": {"kind": "string", "metadataId": metadata_id, "attributeType": "String"},
        "existing": {"metadataId": metadata_id, "logicalName": "name", "maxLength": 100},
    }

    response = client.post(f"{BASE_URL}/normalize", json=payload)

    assert response.status_code == 200
    assert response.json()["maxLength"] == 100
    assert response.json()["logicalName"] == "name"


def test_normalize_unknown_type_code_is_object():
    """Unrecognized type codes still normalize, typed as object."""
    client = TestClient(api)
    payload = {
        "entity": {"logicalName": "account"},
        "attribute": {"kind": "string", "logicalName": "new_file", "attributeType": "File", "maxLength": 10},
    }

    response = client.post(f"{BASE_URL}/normalize", json=payload)

    assert response.status_code == 200
    assert response.json()["targetType"] == "object"
    assert response.json()["fieldType"] == "Unknown"
    assert response.json()["maxLength"] == 10


def test_normalize_unknown_kind_is_generic():
    client = TestClient(api)
    payload = {
        "entity": {"logicalName": "account"},
        "attribute": {"kind": "file", "logicalName": "new_contract", "attributeType": "String", "maxSizeInKB": 32},
    }

    response = client.post(f"{BASE_URL}/normalize", json=payload)

    assert response.status_code == 200
    assert response.json()["targetType"] == "string"
    assert response.json()["imageData"] is None


def test_normalize_numeric_date_time_behavior():
    client = TestClient(api)
    payload = {
        "entity": {"logicalName": "contact"},
        "attribute": {
            "kind": "datetime",
            "logicalName": "birthdate",
            "attributeType": "DateTime",
            "dateTimeBehavior": {"value": 2},
        },
    }

    response = client.post(f"{BASE_URL}/normalize", json=payload)

    assert response.status_code == 200
    assert response.json()["dateTimeBehavior"] == 2
    assert response.json()["targetType"] == "DateTime?"


# RECONCILE
def test_reconcile_over_http():
    """Test the reconcile endpoint with the service and session mocked out."""
    fake_response = ReconcileResponse(logical_name="account", appended=1, fields=[FieldRecord(logical_name="name")])
    api.dependency_overrides[get_db] = lambda: MagicMock()
    try:
        with patch(
            "crmgen.modules.mapping.service.reconcile_entity", new_callable=AsyncMock, return_value=fake_response
        ) as mock_reconcile:
            response = TestClient(api).post(
                f"{BASE_URL}/entities/account/reconcile",
                json={
                    "stateName": "AccountState",
                    "attributes": [{"kind": "lookup", "logicalName": "parentaccountid", "targets": ["account"]}],
                },
            )
    finally:
        api.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json()["appended"] == 1
    assert response.json()["fields"][0]["logicalName"] == "name"
    attributes = mock_reconcile.await_args.args[2]
    assert attributes[0].kind == "lookup"
    assert attributes[0].targets == ["account"]
    assert mock_reconcile.await_args.kwargs["state_name"] == "AccountState"


@pytest.mark.asyncio
async def test_reconcile_entity_fields_delegates_to_service():
    db = MagicMock()
    request = ReconcileRequest(schema_name="Account", attributes=[])
    fake_response = ReconcileResponse(logical_name="account")

    with patch(
        "crmgen.modules.mapping.service.reconcile_entity", new_callable=AsyncMock, return_value=fake_response
    ) as mock_reconcile:
        response = await reconcile_entity_fields("account", request, db=db)

    assert response is fake_response
    mock_reconcile.assert_awaited_once_with(
        db,
        "account",
        [],
        schema_name="Account",
        state_name=None,
        use_title_case_logical_names=None,
    )


# FIELDS
@pytest.mark.asyncio
async def test_get_entity_fields_found():
    fake_result = EntityFieldsResponse(logical_name="account", fields=[FieldRecord(logical_name="name")])

    with patch(
        "crmgen.modules.mapping.service.get_entity_fields", new_callable=AsyncMock, return_value=fake_result
    ) as mock_get:
        response = await get_entity_fields("account", db=MagicMock())

    assert response is fake_result
    mock_get.assert_awaited_once()


@pytest.mark.asyncio
async def test_get_entity_fields_not_found():
    with patch("crmgen.modules.mapping.service.get_entity_fields", new_callable=AsyncMock, return_value=None):
        with pytest.raises(HTTPException) as exc_info:
            await get_entity_fields("account", db=MagicMock())

    assert exc_info.value.status_code == 404
    assert "account" in exc_info.value.detail
