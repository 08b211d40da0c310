"""
Support Desk - Main Application
===============================

Support case and support staff management API.

Modules:
- Support Cases: case CRUD, assignment validation, legacy and filtered listing
- Support Persons: staff CRUD with soft delete, filtered/sorted listing

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities, validators and query builders
- Infrastructure: Entity store (in-memory or PostgreSQL)
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

# Configuration and Core
from support_desk.config import Settings, StorageBackend, get_settings
from support_desk.core import RepositoryException

# Infrastructure
from support_desk.infrastructure.database import (
    close_database, get_database, init_database
)
from support_desk.infrastructure.store import EntityStore, InMemoryEntityStore, build_entity_store

# Case module (used for seeding)
from support_desk.cases.application import SupportCaseService
from support_desk.cases.infrastructure import (
    StorePersonDirectory, StoreSupportCaseRepository, seed_sample_cases
)

# Module Routers
from support_desk.cases.interfaces import cases_router
from support_desk.persons.interfaces import persons_router

# Shared API glue
from support_desk.shared.api import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    ResponseTimeMiddleware,
    register_exception_handlers,
)

# Logging and telemetry
from support_desk.shared.infrastructure.grafana import GrafanaOTLPExporter
from support_desk.shared.infrastructure.logging import get_logger, log_latency, setup_logging
from support_desk.shared.infrastructure.telemetry import (
    NULL_OBSERVER, GrafanaObserver, ServiceObserver
)

logger = get_logger(__name__)


def build_observer(settings: Settings) -> ServiceObserver:
    """Grafana observer when credentials are configured, otherwise the null observer."""
    exporter = GrafanaOTLPExporter(
        host=settings.grafana_host,
        api_key=settings.grafana_api_key,
        instance_id=settings.grafana_instance_id
    )
    if exporter.is_enabled():
        return GrafanaObserver(exporter)
    return NULL_OBSERVER


async def seed_demo_data(app: FastAPI) -> None:
    """Insert the sample cases into an empty case collection."""
    settings: Settings = app.state.settings

    async def _seed(store: EntityStore) -> None:
        service = SupportCaseService(
            StoreSupportCaseRepository(store),
            StorePersonDirectory(store),
            observer=app.state.observer
        )
        with log_latency(logger, "seed_sample_cases"):
            await seed_sample_cases(service)

    try:
        if settings.storage_backend == StorageBackend.POSTGRES:
            async with get_database().session() as session:
                await _seed(build_entity_store(settings.storage_backend, session=session))
        else:
            await _seed(app.state.memory_store)
    except (RepositoryException, SQLAlchemyError, OSError) as e:
        logger.warning(f"Sample data not inserted - entity store unavailable: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Initialize the database (postgres backend only)
    3. Configure the telemetry observer
    4. Seed sample cases

    SHUTDOWN:
    1. Flush pending telemetry exports
    2. Close database connections
    """
    settings: Settings = app.state.settings

    # === STARTUP ===
    setup_logging(settings.log_level, settings.environment)
    logger.info("Starting Support Desk", extra={
        "version": settings.app_version,
        "environment": settings.environment,
        "storage_backend": settings.storage_backend
    })

    if settings.storage_backend == StorageBackend.POSTGRES:
        logger.info("Initializing database")
        database = init_database(settings)
        # If the database is not reachable the server still starts;
        # store-backed endpoints answer 503 until it is
        try:
            await database.create_tables()
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database not available - running in degraded mode: {e}")

    app.state.observer = build_observer(settings)

    if settings.seed_demo_data:
        await seed_demo_data(app)

    logger.info("Support Desk started successfully")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down Support Desk")

    if isinstance(app.state.observer, GrafanaObserver):
        await app.state.observer.drain()

    if settings.storage_backend == StorageBackend.POSTGRES:
        await close_database()

    logger.info("Support Desk shutdown complete")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application for the given settings."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Support Desk API",
        description="""
    ## Support Case Management

    Tracks support cases and the support staff they are assigned to.

    **Support Cases** - `/{subscription_id}/{resource_group}/{resource_id}/cases`
    - Assignment must target an existing, active support person
    - Assignment reasoning is limited to 2000 characters and screened for personal data
    - Legacy paging (`page_number`) or filtered listing (`assigned_to`, `unassigned`, `limit`, `offset`)

    **Support Persons** - `/{subscription_id}/{resource_group}/{resource_id}/supportpersons`
    - Alias and email unique among active persons
    - Soft delete, refused while cases reference the person
    - Filter by specialization, seniority, availability; sort by name, seniority, workload, rating
    """,
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.observer = NULL_OBSERVER
    app.state.memory_store = (
        InMemoryEntityStore() if settings.storage_backend == StorageBackend.MEMORY else None
    )

    # === CORS Middleware ===
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # === Custom Middleware (from shared) ===
    app.add_middleware(ResponseTimeMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(CorrelationIDMiddleware)
    register_exception_handlers(app)

    # === Include Module Routers ===
    app.include_router(cases_router)
    app.include_router(persons_router)

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint for load balancers and orchestrators."""
        state = request.app.state
        return {
            "status": "healthy",
            "version": state.settings.app_version,
            "environment": state.settings.environment,
            "checks": {
                "storage_backend": state.settings.storage_backend,
                "telemetry": "grafana" if isinstance(state.observer, GrafanaObserver) else "disabled"
            }
        }

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "service": "Support Desk",
            "version": settings.app_version,
            "architecture": "Clean Architecture / Modular Monolith",
            "docs": "/docs",
            "health": "/health",
            "modules": {
                "cases": {
                    "prefix": "/{subscription_id}/{resource_group}/{resource_id}/cases",
                    "endpoints": [
                        "GET /cases - List cases (paged or filtered)",
                        "GET /cases/{id} - Get a case",
                        "POST /cases - Create a case",
                        "PUT /cases/{id} - Replace a case",
                        "DELETE /cases/{id} - Delete a case"
                    ]
                },
                "persons": {
                    "prefix": "/{subscription_id}/{resource_group}/{resource_id}/supportpersons",
                    "endpoints": [
                        "GET /supportpersons - List active persons",
                        "GET /supportpersons/{alias} - Get a person",
                        "POST /supportpersons - Create a person",
                        "PUT /supportpersons/{alias} - Replace a person",
                        "DELETE /supportpersons/{alias} - Deactivate a person"
                    ]
                }
            }
        }

    return app


app = create_app()


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "support_desk.main:app",
        host=_settings.host,
        port=_settings.port,
        reload=_settings.environment == "development",
        log_level="info"
    )
