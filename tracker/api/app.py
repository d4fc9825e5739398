"""
tracker/api/app.py
FastAPI application factory. Mounts middleware and routers.
This is the only place that wires the store to the HTTP layer.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from tracker.config import VERSION, get_data_file
from tracker.api.endpoint import ActivityEndpoint
from tracker.api.routes import activities
from tracker.store.document import DocumentStore

logger = logging.getLogger(__name__)


def create_app(data_file: Optional[Path] = None) -> FastAPI:
    store = DocumentStore(data_file or get_data_file())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.ensure()
        logger.info(f"Data file location: {store.path}")
        yield

    app = FastAPI(
        title="Ramadhan Activity Tracker API",
        version=VERSION,
        description="Whole-document read/replace store for dated activity records.",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.endpoint = ActivityEndpoint(store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(activities.router, tags=["Activities"])
    app.add_exception_handler(StarletteHTTPException, activities.method_not_allowed_handler)

    @app.get("/health")
    def health():
        return {"status": "ok", "version": VERSION}

    return app
