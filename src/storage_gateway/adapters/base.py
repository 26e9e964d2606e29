"""Capability contracts the gateway depends on.

Each backend exposes ``create_if_not_exists`` plus the few put, list and
get-properties calls the operation handlers need. Implementations raise
``BackendError`` for any failure of the underlying service.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Callable, Dict, List, Optional, TypeVar

from storage_gateway.errors import BackendError
from storage_gateway.schemas import QueueProperties, ShareEntry

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ObjectStore(ABC):
    """Flat key-addressed blob container."""

    name: str

    @abstractmethod
    async def create_if_not_exists(self) -> None:
        raise NotImplementedError

    @abstractmethod
    async def upload(self, key: str, stream: BinaryIO, length: int, content_type: Optional[str] = None) -> str:
        """Write ``stream`` under ``key``, overwriting, and return its locator."""
        raise NotImplementedError

    @abstractmethod
    async def list_names(self) -> List[str]:
        """Keys in backend-native order."""
        raise NotImplementedError

    @abstractmethod
    def url_for(self, key: str) -> str:
        raise NotImplementedError


class FileShare(ABC):
    """Directory-structured file storage addressed by path."""

    name: str

    @abstractmethod
    async def create_if_not_exists(self) -> None:
        raise NotImplementedError

    @abstractmethod
    async def upload(self, file_name: str, stream: BinaryIO, length: int) -> None:
        """Write ``stream`` to ``file_name`` in the share root, replacing any existing file."""
        raise NotImplementedError

    @abstractmethod
    async def list_entries(self) -> List[ShareEntry]:
        """Entries of the share root, files and directories alike."""
        raise NotImplementedError


class MessageQueue(ABC):
    """FIFO message transport."""

    name: str

    @abstractmethod
    async def create_if_not_exists(self) -> None:
        raise NotImplementedError

    @abstractmethod
    async def send_message(self, body: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def get_properties(self) -> QueueProperties:
        raise NotImplementedError


class RecordTable(ABC):
    """Partition/row keyed schemaless record store."""

    name: str

    @abstractmethod
    async def create_if_not_exists(self) -> None:
        raise NotImplementedError

    @abstractmethod
    async def add_entity(self, entity: Dict[str, Any]) -> None:
        """Insert a new record; fails if the PartitionKey/RowKey pair exists."""
        raise NotImplementedError

    @abstractmethod
    async def query_partition(self, partition_key: str) -> List[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    async def count_entities(self) -> int:
        """Row count over a full table scan."""
        raise NotImplementedError


async def call_backend(operation: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking SDK call in a worker thread and normalise its failures.

    Any exception from the collaborator surfaces as ``BackendError`` with the
    original exception chained.
    """
    try:
        return await asyncio.to_thread(func, *args, **kwargs)
    except BackendError:
        raise
    except Exception as e:
        logger.error(f"Backend call failed during {operation}: {str(e)}")
        raise BackendError(operation, e) from e
