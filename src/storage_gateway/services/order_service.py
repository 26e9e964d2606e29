import logging
from typing import Optional, Union

from storage_gateway.adapters.base import MessageQueue
from storage_gateway.errors import BackendError
from storage_gateway.schemas import DetailedFailure, OpaqueFailure, UploadResult
from storage_gateway.utils.decorators import async_log_execution_time

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "Queue message must not be empty."


class OrderService:
    """Sends order notifications to the order queue"""

    def __init__(self, queue: MessageQueue):
        self.queue = queue

    @async_log_execution_time
    async def send_order_message(self, message: Optional[str]) -> Union[UploadResult, DetailedFailure, OpaqueFailure]:
        """
        Hand ``message`` to the queue verbatim.

        The text is not inspected beyond being non-empty; any transport
        encoding is the queue's business. Backend failures are reported
        without detail.
        """
        logger.info("SendQueueMessage triggered.")
        if not message:
            return DetailedFailure(EMPTY_MESSAGE)

        try:
            await self.queue.create_if_not_exists()
            await self.queue.send_message(message)
        except BackendError as e:
            logger.error(f"Error sending queue message: {str(e)}")
            return OpaqueFailure()

        logger.info(f"Queue message sent: {message}")
        return UploadResult(success=True, message=f"Queue message sent: {message}")
