# cli.py
import asyncio
import json
import logging

import click

from storage_gateway.adapters import BackendFactory
from storage_gateway.config.settings import get_settings
from storage_gateway.errors import AggregationError
from storage_gateway.main import configure_logging
from storage_gateway.services import StatsService

# Configure logging
logger = logging.getLogger(__name__)


@click.group()
def cli():
    """CLI commands for the Storage Gateway"""
    pass


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    print("Current Configuration:")
    for key, value in settings.get_environment_dict().items():
        print(f"  {key}: {value}")


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True, help="Interface to bind")
@click.option("--port", default=8000, show_default=True, type=int, help="Port to listen on")
def serve(host, port):
    """Run the HTTP API with uvicorn"""
    import uvicorn

    from storage_gateway.main import create_app

    app = create_app(get_settings())
    uvicorn.run(app, host=host, port=port)


@cli.command()
def stats():
    """Print a storage statistics report as JSON"""
    settings = get_settings()
    configure_logging(settings)
    service = StatsService(BackendFactory.create(settings))

    try:
        report = asyncio.run(service.get_storage_stats())
    except AggregationError as e:
        raise click.ClickException(f"Error getting storage statistics: {e}")

    print(json.dumps(report.model_dump(mode="json", by_alias=True), indent=2))


if __name__ == "__main__":
    cli()
