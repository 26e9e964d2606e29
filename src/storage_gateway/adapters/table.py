"""
Record table collaborators.

DynamoDB backs the aws modes. local-dev keeps each record as a JSON document
in SQLite, keyed by the same PartitionKey/RowKey pair.
"""

import json
import logging
import re
import sqlite3
from pathlib import Path
from typing import Any, Dict, List

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import ClientError

from storage_gateway.adapters.base import RecordTable, call_backend
from storage_gateway.config.settings import CUSTOMER_TABLE_NAME

logger = logging.getLogger(__name__)

PARTITION_KEY = "PartitionKey"
ROW_KEY = "RowKey"


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


class DynamoDBTable(RecordTable):
    """Record table stored in DynamoDB with a PartitionKey hash key and RowKey range key."""

    def __init__(self, dynamodb_client, table_name: str = CUSTOMER_TABLE_NAME):
        self.dynamodb = dynamodb_client
        self.name = table_name
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    def _create_table(self) -> None:
        try:
            self.dynamodb.describe_table(TableName=self.name)
            return
        except ClientError as e:
            if _error_code(e) != "ResourceNotFoundException":
                raise

        try:
            self.dynamodb.create_table(
                TableName=self.name,
                KeySchema=[
                    {"AttributeName": PARTITION_KEY, "KeyType": "HASH"},
                    {"AttributeName": ROW_KEY, "KeyType": "RANGE"},
                ],
                AttributeDefinitions=[
                    {"AttributeName": PARTITION_KEY, "AttributeType": "S"},
                    {"AttributeName": ROW_KEY, "AttributeType": "S"},
                ],
                BillingMode="PAY_PER_REQUEST",
            )
            logger.info(f"Created DynamoDB table: {self.name}")
        except ClientError as e:
            # Created concurrently by another request
            if _error_code(e) != "ResourceInUseException":
                raise

        self.dynamodb.get_waiter("table_exists").wait(TableName=self.name)

    def _put(self, entity: Dict[str, Any]) -> None:
        item = {key: self._serializer.serialize(value) for key, value in entity.items()}
        self.dynamodb.put_item(
            TableName=self.name,
            Item=item,
            ConditionExpression="attribute_not_exists(PartitionKey) AND attribute_not_exists(RowKey)",
        )

    def _query(self, partition_key: str) -> List[Dict[str, Any]]:
        records = []
        paginator = self.dynamodb.get_paginator("query")
        pages = paginator.paginate(
            TableName=self.name,
            KeyConditionExpression="PartitionKey = :pk",
            ExpressionAttributeValues={":pk": {"S": partition_key}},
        )
        for page in pages:
            for item in page.get("Items", []):
                records.append({key: self._deserializer.deserialize(value) for key, value in item.items()})
        return records

    def _count(self) -> int:
        paginator = self.dynamodb.get_paginator("scan")
        return sum(page["Count"] for page in paginator.paginate(TableName=self.name, Select="COUNT"))

    async def create_if_not_exists(self) -> None:
        await call_backend("create table", self._create_table)

    async def add_entity(self, entity: Dict[str, Any]) -> None:
        await call_backend("add entity", self._put, entity)

    async def query_partition(self, partition_key: str) -> List[Dict[str, Any]]:
        return await call_backend("query entities", self._query, partition_key)

    async def count_entities(self) -> int:
        return await call_backend("count entities", self._count)


class SQLiteTable(RecordTable):
    """Record table kept as JSON documents in a SQLite file."""

    def __init__(self, db_path: str, table_name: str = CUSTOMER_TABLE_NAME):
        if not re.fullmatch(r"[A-Za-z][A-Za-z0-9]*", table_name):
            raise ValueError(f"Invalid table name: {table_name!r}")
        self.db_path = db_path
        self.name = table_name
        self._sql_table = f"{table_name}_docs"

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _create_table(self) -> None:
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = self._get_connection()
        try:
            conn.execute(f'''
                CREATE TABLE IF NOT EXISTS {self._sql_table} (
                    partition_key TEXT NOT NULL,
                    row_key TEXT NOT NULL,
                    document TEXT NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY (partition_key, row_key)
                )
            ''')
            conn.commit()
        finally:
            conn.close()

    def _insert(self, entity: Dict[str, Any]) -> None:
        conn = self._get_connection()
        try:
            conn.execute(
                f"INSERT INTO {self._sql_table} (partition_key, row_key, document) VALUES (?, ?, ?)",
                (entity[PARTITION_KEY], entity[ROW_KEY], json.dumps(entity)),
            )
            conn.commit()
        finally:
            conn.close()

    def _select_partition(self, partition_key: str) -> List[Dict[str, Any]]:
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                f"SELECT document FROM {self._sql_table} WHERE partition_key = ? ORDER BY row_key",
                (partition_key,),
            )
            return [json.loads(row["document"]) for row in cursor.fetchall()]
        finally:
            conn.close()

    def _count(self) -> int:
        conn = self._get_connection()
        try:
            return conn.execute(f"SELECT COUNT(*) FROM {self._sql_table}").fetchone()[0]
        finally:
            conn.close()

    async def create_if_not_exists(self) -> None:
        await call_backend("create table", self._create_table)

    async def add_entity(self, entity: Dict[str, Any]) -> None:
        await call_backend("add entity", self._insert, entity)

    async def query_partition(self, partition_key: str) -> List[Dict[str, Any]]:
        return await call_backend("query entities", self._select_partition, partition_key)

    async def count_entities(self) -> int:
        return await call_backend("count entities", self._count)
