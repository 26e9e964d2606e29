import logging
from textwrap import dedent
from typing import Optional

import pydantic
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from storage_gateway.adapters import BackendFactory, Backends
from storage_gateway.config.settings import Settings
from storage_gateway.errors import (
    AggregationError,
    handle_aggregation_errors,
    handle_broad_exceptions,
    handle_pydantic_validation_errors,
)
from storage_gateway.routers.contracts import router as contracts_router
from storage_gateway.routers.customers import router as customers_router
from storage_gateway.routers.health import router as health_router
from storage_gateway.routers.images import router as images_router
from storage_gateway.routers.queue import router as queue_router
from storage_gateway.routers.stats import router as stats_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(settings: Optional[Settings] = None, backends: Optional[Backends] = None) -> FastAPI:
    """Create a FastAPI application.

    The storage collaborators are built once here (or passed in) and shared
    by every request through ``app.state.backends``.
    """
    settings = settings or Settings()
    configure_logging(settings)

    app = FastAPI(
        title="Storage Gateway API",
        summary="Product images, contracts, order notifications and customer profiles",
        version="v1",
        description=dedent(
            """\
        | Operation | Backend | Notes |
        | --- | --- | --- |
        | Images | object store | keys get a random prefix, never overwritten |
        | Contracts | file share | stored under the original name, re-uploads replace |
        | Queue messages | FIFO queue | sent verbatim |
        | Customers | record table | one partition, a new row per add |
        """
        ),
        docs_url="/",  # its easier to find the docs when they live on the base url
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.backends = backends or BackendFactory.create(settings)
    logger.info(f"Storage gateway created in {settings.deployment_mode} mode")

    app.include_router(images_router, prefix="/api", tags=["images"])
    app.include_router(contracts_router, prefix="/api", tags=["contracts"])
    app.include_router(queue_router, prefix="/api", tags=["queue"])
    app.include_router(customers_router, prefix="/api", tags=["customers"])
    app.include_router(stats_router, prefix="/api", tags=["stats"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=AggregationError,
        handler=handle_aggregation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    app = create_app()
    uvicorn.run(app, host="0.0.0.0", port=8000)
