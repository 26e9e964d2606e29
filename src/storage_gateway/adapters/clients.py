"""boto3 client construction for the AWS-backed collaborators."""

import logging
from typing import Any

import boto3
from botocore.config import Config

from storage_gateway.config.settings import Settings

logger = logging.getLogger(__name__)


def create_client(service_name: str, capability: str, settings: Settings) -> Any:
    """Create a boto3 client for ``service_name`` using the credential resolved for ``capability``.

    Timeouts are the client's concern, so they are set here rather than in
    the handlers.
    """
    connection = settings.connection_for(capability)
    client_kwargs = connection.client_kwargs()
    client_kwargs["config"] = Config(
        connect_timeout=settings.client_connect_timeout,
        read_timeout=settings.client_read_timeout,
    )

    try:
        client = boto3.client(service_name, **client_kwargs)
    except Exception as e:
        logger.error(f"Error creating {service_name} client: {str(e)}")
        raise

    logger.debug(f"Created {service_name} client for {capability}")
    logger.debug(f"  Endpoint: {connection.endpoint_url}")
    logger.debug(f"  Region: {connection.region}")
    return client
