# Copyright (c) 2025 Evolveum and contributors
#
# Licensed under the EUPL-1.2 or later.

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .common.database.config import close_db, init_db
from .config import config
from .router import root_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: make sure the field cache table exists
    await init_db()

    # Hand control to the app
    yield

    await close_db()


def create_api() -> FastAPI:
    """
    Initialize and configure the FastAPI application.

    :return: Configured FastAPI instance.
    """
    logging.getLogger().setLevel(config.logging.level.value.upper())

    app = FastAPI(title=config.app.title, version=config.app.version, lifespan=lifespan)

    app.include_router(root_router, prefix=f"{config.app.api_base_url}/v1")

    @app.get("/health")
    async def health() -> dict:
        """
        Health check endpoint to verify the service is running.
        """
        return {"message": "OK"}

    return app


api = create_api()
