# Copyright (c) 2025 Evolveum and contributors
#
# Licensed under the EUPL-1.2 or later.

"""
Mapping endpoints: normalize attribute metadata into field records and keep per-entity field caches.
"""

from fastapi import APIRouter, Body, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...common.database.config import get_db
from . import service
from .schema import EntityFieldsResponse, FieldRecord, NormalizeRequest, ReconcileRequest, ReconcileResponse

router = APIRouter()


@router.post(
    "/normalize",
    response_model=FieldRecord,
    response_model_by_alias=True,
    summary="Normalize a single attribute descriptor",
)
async def normalize_attribute(request: NormalizeRequest = Body(...)):
    """
    Normalize one raw attribute descriptor, optionally refreshing a previously returned record.
    """
    return service.normalize_single(
        request.entity,
        request.attribute,
        request.existing,
        request.use_title_case_logical_names,
    )


@router.post(
    "/entities/{logical_name}/reconcile",
    response_model=ReconcileResponse,
    response_model_by_alias=True,
    summary="Refresh the cached fields of an entity",
)
async def reconcile_entity_fields(
    logical_name: str = Path(..., description="Entity logical name"),
    request: ReconcileRequest = Body(...),
    db: AsyncSession = Depends(get_db),
):
    """
    Reconcile the entity's cached field list against a freshly fetched attribute batch.
    Known fields are refreshed in place, new ones appended, the rest left untouched.
    """
    return await service.reconcile_entity(
        db,
        logical_name,
        request.attributes,
        schema_name=request.schema_name,
        state_name=request.state_name,
        use_title_case_logical_names=request.use_title_case_logical_names,
    )


@router.get(
    "/entities/{logical_name}/fields",
    response_model=EntityFieldsResponse,
    response_model_by_alias=True,
    summary="Get cached fields of an entity",
)
async def get_entity_fields(
    logical_name: str = Path(..., description="Entity logical name"),
    db: AsyncSession = Depends(get_db),
):
    """
    Return the cached field records of an entity.
    """
    result = await service.get_entity_fields(db, logical_name)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No cached fields for entity {logical_name}. Please run /entities/{logical_name}/reconcile first.",
        )
    return result
