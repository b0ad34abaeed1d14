#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Painkiller Habits - Dashboard API
FastAPI application exposing habits, their calendar, streaks and advice
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from painkiller import __version__
from painkiller.config import config
from painkiller.core.ai_service import AdvisoryCoordinator, AdvisoryService
from painkiller.core.database import HabitRepository, create_repository
from painkiller.core.models import ValidationError

from .api import advice, habits
from .schemas import HealthCheck

logger = logging.getLogger(__name__)


def create_app(repository: Optional[HabitRepository] = None,
               advisory: Optional[AdvisoryService] = None) -> FastAPI:
    """Build the API around a repository and an advisory service"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Painkiller dashboard API...")
        if getattr(app.state, "repository", None) is None:
            app.state.repository = create_repository()
        if getattr(app.state, "coordinator", None) is None:
            app.state.coordinator = AdvisoryCoordinator(advisory or AdvisoryService())
        logger.info(f"Dashboard ready with {len(app.state.repository.list())} habits")
        yield
        logger.info("Dashboard API stopped")

    app = FastAPI(
        title="Painkiller Habits",
        description="Habit tracking with streaks, a yearly heatmap and motivational advice",
        version=__version__,
        debug=config.server.debug_mode,
        lifespan=lifespan,
    )

    app.state.repository = repository
    app.state.coordinator = AdvisoryCoordinator(advisory) if advisory else None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.get("/health", response_model=HealthCheck)
    async def health_check(request: Request):
        coordinator = request.app.state.coordinator
        return {
            "status": "healthy",
            "service": "painkiller-dashboard",
            "version": __version__,
            "timestamp": time.time(),
            "storage": request.app.state.repository.get_stats(),
            "advisory": coordinator.service.get_health_status() if coordinator else {},
        }

    app.include_router(habits.router)
    app.include_router(advice.router)

    return app


def run(host: Optional[str] = None, port: Optional[int] = None,
        repository: Optional[HabitRepository] = None) -> None:
    import uvicorn

    uvicorn.run(
        create_app(repository=repository),
        host=host or config.server.host,
        port=port or config.server.port,
        log_config=None,
    )
