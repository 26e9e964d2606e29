"""
Contract service for documents kept in the file share.

Contracts are stored under their original name. Uploading a second file with
the same name replaces the first; no locator is returned because the share
has no public URL.
"""

import logging
from typing import List, Union

from storage_gateway.adapters.base import FileShare
from storage_gateway.errors import BackendError
from storage_gateway.schemas import DetailedFailure, TargetKind, UploadRequest, UploadResult
from storage_gateway.services.naming import share_file_name
from storage_gateway.services.validation import validate_upload
from storage_gateway.utils.decorators import async_log_execution_time

logger = logging.getLogger(__name__)


class ContractService:
    """Upload and list contract documents"""

    def __init__(self, share: FileShare):
        self.share = share

    @async_log_execution_time
    async def upload_contract(self, upload: UploadRequest) -> Union[UploadResult, DetailedFailure]:
        logger.info("UploadContract triggered.")

        outcome = validate_upload(TargetKind.DOCUMENT, upload.file_name, upload.declared_length)
        if not outcome.ok:
            logger.info(f"Rejected contract {upload.file_name!r}: {outcome.reason}")
            return DetailedFailure(outcome.reason)

        try:
            await self.share.create_if_not_exists()
            await self.share.upload(share_file_name(upload.file_name), upload.stream, upload.declared_length)
        except BackendError as e:
            logger.error(f"Error uploading contract to file storage: {str(e)}")
            return DetailedFailure(f"Error uploading contract: {str(e)}")

        logger.info(f"Contract {upload.file_name} uploaded successfully.")
        return UploadResult(success=True, message=f"Contract {upload.file_name} uploaded successfully.")

    @async_log_execution_time
    async def list_contracts(self) -> Union[List[str], DetailedFailure]:
        logger.info("GetContracts triggered.")
        try:
            await self.share.create_if_not_exists()
            entries = await self.share.list_entries()
        except BackendError as e:
            logger.error(f"Error retrieving contracts: {str(e)}")
            return DetailedFailure(f"Error retrieving contracts: {str(e)}")

        return [entry.name for entry in entries if not entry.is_directory]
