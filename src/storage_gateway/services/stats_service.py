"""
Storage statistics across all four backends.

The four counts are independent read-only queries and run concurrently. A
failure in any one of them aborts the whole report; partial counts are never
returned.
"""

import asyncio
import logging
from datetime import datetime, timezone

from storage_gateway.adapters import Backends
from storage_gateway.errors import AggregationError, BackendError
from storage_gateway.schemas import StorageStatsReport
from storage_gateway.utils.decorators import async_log_execution_time

logger = logging.getLogger(__name__)


class StatsService:
    """Aggregates cheap count-producing calls into one report"""

    def __init__(self, backends: Backends):
        self.backends = backends

    async def count_customers(self) -> int:
        table = self.backends.customers
        await table.create_if_not_exists()
        return await table.count_entities()

    async def count_images(self) -> int:
        store = self.backends.images
        await store.create_if_not_exists()
        return len(await store.list_names())

    async def count_queued_messages(self) -> int:
        # Backend-reported and approximate
        queue = self.backends.orders
        await queue.create_if_not_exists()
        properties = await queue.get_properties()
        return properties.approximate_message_count

    async def count_contracts(self) -> int:
        share = self.backends.contracts
        await share.create_if_not_exists()
        entries = await share.list_entries()
        return sum(1 for entry in entries if not entry.is_directory)

    @async_log_execution_time
    async def get_storage_stats(self) -> StorageStatsReport:
        """Build a fresh report. Raises AggregationError if any backend fails."""
        logger.info("GetStorageStats triggered.")
        results = await asyncio.gather(
            self.count_customers(),
            self.count_images(),
            self.count_queued_messages(),
            self.count_contracts(),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BackendError):
                logger.error(f"Error getting storage statistics: {str(result)}")
                raise AggregationError(str(result)) from result
            if isinstance(result, BaseException):
                raise result
        customer_count, image_count, queue_count, contract_count = results

        return StorageStatsReport(
            customer_count=customer_count,
            image_count=image_count,
            queue_message_count=queue_count,
            contract_count=contract_count,
            generated_at=datetime.now(timezone.utc),
        )
