"""
Image service for product images kept in the object store.
Every stored key gets a random prefix, so uploads never overwrite each other.
"""

import logging
from typing import List, Union

from storage_gateway.adapters.base import ObjectStore
from storage_gateway.errors import BackendError
from storage_gateway.schemas import DetailedFailure, TargetKind, UploadRequest, UploadResult
from storage_gateway.services.naming import object_key
from storage_gateway.services.validation import validate_upload
from storage_gateway.utils.decorators import async_log_execution_time

logger = logging.getLogger(__name__)


class ImageService:
    """Upload and list product images"""

    def __init__(self, store: ObjectStore):
        self.store = store

    @async_log_execution_time
    async def upload_image(self, upload: UploadRequest) -> Union[UploadResult, DetailedFailure]:
        logger.info("UploadImage triggered.")

        outcome = validate_upload(TargetKind.IMAGE, upload.file_name, upload.declared_length)
        if not outcome.ok:
            logger.info(f"Rejected image {upload.file_name!r}: {outcome.reason}")
            return DetailedFailure(outcome.reason)

        try:
            await self.store.create_if_not_exists()
            key = object_key(upload.file_name)
            url = await self.store.upload(key, upload.stream, upload.declared_length, upload.content_type)
        except BackendError as e:
            logger.error(f"Error uploading image to object storage: {str(e)}")
            return DetailedFailure(f"Error uploading image: {str(e)}")

        logger.info(f"Image {upload.file_name} uploaded successfully. URL: {url}")
        return UploadResult(
            success=True,
            message=f"Image {upload.file_name} uploaded successfully.",
            url=url,
        )

    @async_log_execution_time
    async def list_images(self) -> Union[List[str], DetailedFailure]:
        logger.info("GetImages triggered.")
        try:
            await self.store.create_if_not_exists()
            names = await self.store.list_names()
        except BackendError as e:
            logger.error(f"Error retrieving images: {str(e)}")
            return DetailedFailure(f"Error retrieving images: {str(e)}")

        return [self.store.url_for(name) for name in names]
