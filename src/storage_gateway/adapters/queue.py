import json
import logging
import os
import time
import uuid
from pathlib import Path
from typing import Optional

from storage_gateway.adapters.base import MessageQueue, call_backend
from storage_gateway.config.settings import ORDER_QUEUE_NAME
from storage_gateway.schemas import QueueProperties

logger = logging.getLogger(__name__)


class LocalQueue(MessageQueue):
    """Handles local queue using file system for IPC"""
    def __init__(self, storage_dir: str, queue_name: str = ORDER_QUEUE_NAME):
        self.name = queue_name
        self.queue_dir = Path(storage_dir) / "queue_data" / queue_name
        logger.info("LocalQueue initialized at: %s", self.queue_dir)

    def _create_dir(self) -> None:
        self.queue_dir.mkdir(parents=True, exist_ok=True)

    def _write_message(self, body: str) -> str:
        # Timestamp prefix keeps FIFO order when the directory is listed
        filename = f"{time.time_ns()}_{os.getpid()}_{uuid.uuid4().hex[:8]}.json"
        filepath = self.queue_dir / filename
        with open(filepath, "w") as f:
            json.dump({"body": body}, f)
        return filename

    def _count_messages(self) -> int:
        return sum(1 for _ in self.queue_dir.glob("*.json"))

    async def create_if_not_exists(self) -> None:
        await call_backend("create queue directory", self._create_dir)

    async def send_message(self, body: str) -> None:
        filename = await call_backend("send message", self._write_message, body)
        logger.info("Added message to queue: %s", filename)

    async def get_properties(self) -> QueueProperties:
        count = await call_backend("get queue properties", self._count_messages)
        return QueueProperties(approximate_message_count=count)


class SQSQueue(MessageQueue):
    """Handles AWS SQS queue"""
    def __init__(self, sqs_client, queue_name: str = ORDER_QUEUE_NAME):
        self.sqs = sqs_client
        self.name = queue_name
        self.queue_url: Optional[str] = None
        logger.info(f"SQSQueue initialized for queue: {queue_name}")

    def _create_queue(self) -> None:
        # CreateQueue returns the existing queue when the attributes match
        response = self.sqs.create_queue(QueueName=self.name)
        self.queue_url = response["QueueUrl"]

    def _resolve_url(self) -> str:
        if self.queue_url is None:
            self.queue_url = self.sqs.get_queue_url(QueueName=self.name)["QueueUrl"]
        return self.queue_url

    def _send(self, body: str) -> Optional[str]:
        response = self.sqs.send_message(QueueUrl=self._resolve_url(), MessageBody=body)
        return response.get("MessageId")

    def _approximate_count(self) -> int:
        response = self.sqs.get_queue_attributes(
            QueueUrl=self._resolve_url(),
            AttributeNames=["ApproximateNumberOfMessages"],
        )
        return int(response["Attributes"]["ApproximateNumberOfMessages"])

    async def create_if_not_exists(self) -> None:
        await call_backend("create queue", self._create_queue)

    async def send_message(self, body: str) -> None:
        message_id = await call_backend("send message", self._send, body)
        logger.info(f"Message added to SQS queue with ID: {message_id}")

    async def get_properties(self) -> QueueProperties:
        count = await call_backend("get queue attributes", self._approximate_count)
        return QueueProperties(approximate_message_count=count)
