#  Copyright (C) 2010-2026 Evolveum and contributors
#
#  Licensed under the EUPL-1.2 or later.

from fastapi import APIRouter

from .modules.mapping.router import router as mapping_router

root_router = APIRouter()

"""
Root API router that aggregates all sub-module routers under their respective prefixes and tags.
"""

root_router.include_router(mapping_router, prefix="/mapping", tags=["Mapping"])
