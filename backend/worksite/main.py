"""
FastAPI application entry point.

Configures logging, middleware, routes, and exception handlers.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from worksite.core.config import settings
from worksite.core.dependencies import close_redis
from worksite.core.error_handler import register_error_handlers
from worksite.core.logging import setup_logging
from worksite.routers import (
    categories,
    expenses,
    organizations,
    otp,
    parties,
    payments,
    projects,
    roles,
    stages,
    tasks,
    team,
    users,
)

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    logger.info("Starting Worksite API in %s mode", settings.ENVIRONMENT)
    yield
    await close_redis()
    logger.info("Shutting down Worksite API")


app = FastAPI(
    title="Worksite API",
    description="Multi-tenant construction project management",
    version=API_VERSION,
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
    openapi_url="/api/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "version": API_VERSION,
    }


app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(organizations.router, prefix="/api/organizations", tags=["Organizations"])
app.include_router(roles.router, prefix="/api/roles", tags=["Roles"])
app.include_router(team.router, prefix="/api/team", tags=["Team"])
app.include_router(projects.router, prefix="/api/projects", tags=["Projects"])
app.include_router(stages.router, prefix="/api/stages", tags=["Stages"])
app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])
app.include_router(parties.router, prefix="/api/parties", tags=["Parties"])
app.include_router(categories.router, prefix="/api/categories", tags=["Categories"])
app.include_router(expenses.router, prefix="/api/expenses", tags=["Expenses"])
app.include_router(payments.router, prefix="/api/payments", tags=["Payments"])
app.include_router(otp.router, prefix="/api/otp", tags=["OTP"])
