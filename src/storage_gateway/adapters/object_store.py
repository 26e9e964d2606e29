"""Object store collaborators: S3 buckets and a local directory for local-dev."""

import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, List, Optional
from urllib.parse import quote

from botocore.exceptions import ClientError

from storage_gateway.adapters.base import ObjectStore, call_backend
from storage_gateway.config.settings import IMAGE_CONTAINER_NAME

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class S3ObjectStore(ObjectStore):
    """Handles an S3 bucket used as a flat blob container."""

    def __init__(
        self,
        s3_client: "S3Client",
        bucket_name: str = IMAGE_CONTAINER_NAME,
        region: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        public_base_url: Optional[str] = None,
    ):
        self.s3 = s3_client
        self.name = bucket_name
        self.region = region
        self.endpoint_url = endpoint_url
        self.public_base_url = public_base_url

    def _create_bucket(self) -> None:
        kwargs = {"Bucket": self.name}
        if self.region != "us-east-1":
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": self.region}
        try:
            self.s3.create_bucket(**kwargs)
            logger.info(f"Created S3 bucket: {self.name}")
        except ClientError as e:
            # Another request may have won the race
            if e.response.get("Error", {}).get("Code") in ("BucketAlreadyOwnedByYou", "BucketAlreadyExists"):
                return
            raise

    def _put_object(self, key: str, stream: BinaryIO, length: int, content_type: Optional[str]) -> None:
        self.s3.put_object(
            Bucket=self.name,
            Key=key,
            Body=stream,
            ContentLength=length,
            ContentType=content_type or DEFAULT_CONTENT_TYPE,
        )

    def _list_keys(self) -> List[str]:
        keys = []
        paginator = self.s3.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self.name):
            keys.extend(item["Key"] for item in page.get("Contents", []))
        return keys

    async def create_if_not_exists(self) -> None:
        await call_backend("create bucket", self._create_bucket)

    async def upload(self, key: str, stream: BinaryIO, length: int, content_type: Optional[str] = None) -> str:
        await call_backend("put object", self._put_object, key, stream, length, content_type)
        return self.url_for(key)

    async def list_names(self) -> List[str]:
        return await call_backend("list objects", self._list_keys)

    def url_for(self, key: str) -> str:
        quoted_key = quote(key)
        base_url = self.public_base_url or self.endpoint_url
        if base_url:
            return f"{base_url.rstrip('/')}/{self.name}/{quoted_key}"
        return f"https://{self.name}.s3.{self.region}.amazonaws.com/{quoted_key}"


class LocalObjectStore(ObjectStore):
    """Handles a blob container kept as a directory on the local file system."""

    def __init__(self, storage_dir: str, container_name: str = IMAGE_CONTAINER_NAME, public_base_url: Optional[str] = None):
        self.root = Path(storage_dir) / container_name
        self.name = container_name
        self.public_base_url = public_base_url

    def _create_dir(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def _write(self, key: str, stream: BinaryIO) -> None:
        if Path(key).name != key:
            raise ValueError(f"Object key must not contain path separators: {key!r}")
        with open(self.root / key, "wb") as f:
            shutil.copyfileobj(stream, f)

    def _list_keys(self) -> List[str]:
        return sorted(p.name for p in self.root.iterdir() if p.is_file())

    async def create_if_not_exists(self) -> None:
        await call_backend("create container directory", self._create_dir)

    async def upload(self, key: str, stream: BinaryIO, length: int, content_type: Optional[str] = None) -> str:
        await call_backend("write object", self._write, key, stream)
        logger.info(f"Stored {length} bytes at {self.root / key}")
        return self.url_for(key)

    async def list_names(self) -> List[str]:
        return await call_backend("list objects", self._list_keys)

    def url_for(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{self.name}/{quote(key)}"
        return (self.root / key).resolve().as_uri()
