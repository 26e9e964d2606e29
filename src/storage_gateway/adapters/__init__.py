"""
Adapter layer for the Storage Gateway.

Contains the capability contracts and their mode-aware implementations:
object store (local/S3), file share (mounted directory), queue (local/SQS)
and record table (SQLite/DynamoDB).
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from storage_gateway.adapters.base import FileShare, MessageQueue, ObjectStore, RecordTable
from storage_gateway.adapters.clients import create_client
from storage_gateway.adapters.file_share import MountedFileShare
from storage_gateway.adapters.object_store import LocalObjectStore, S3ObjectStore
from storage_gateway.adapters.queue import LocalQueue, SQSQueue
from storage_gateway.adapters.table import DynamoDBTable, SQLiteTable
from storage_gateway.config.settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Backends:
    """The four collaborators, built once at process start."""
    images: ObjectStore
    contracts: FileShare
    orders: MessageQueue
    customers: RecordTable


def _local_backends(settings: Settings) -> Backends:
    return Backends(
        images=LocalObjectStore(settings.storage_dir, public_base_url=settings.public_base_url),
        contracts=MountedFileShare(settings.share_root),
        orders=LocalQueue(settings.storage_dir),
        customers=SQLiteTable(str(Path(settings.storage_dir) / "tables.db")),
    )


def _aws_backends(settings: Settings) -> Backends:
    connection = settings.connection_for("object_store")
    return Backends(
        images=S3ObjectStore(
            create_client("s3", "object_store", settings),
            region=connection.region or settings.aws_region,
            endpoint_url=connection.endpoint_url,
            public_base_url=settings.public_base_url,
        ),
        contracts=MountedFileShare(settings.share_root),
        orders=SQSQueue(create_client("sqs", "queue", settings)),
        customers=DynamoDBTable(create_client("dynamodb", "table", settings)),
    )


class BackendFactory:
    """Factory to build the right collaborators for the deployment mode"""

    @staticmethod
    def create(settings: Settings) -> Backends:
        builders = {
            "local-dev": _local_backends,
            "aws-mock": _aws_backends,
            "aws-prod": _aws_backends,
        }

        deployment_mode = settings.deployment_mode
        if deployment_mode not in builders:
            raise ValueError(
                f"Invalid deployment_mode: {deployment_mode}. "
                f"Choose from {list(builders.keys())}"
            )

        logger.info(f"Creating storage backends for mode: {deployment_mode}")
        return builders[deployment_mode](settings)
