"""
Customer service for profile records in the customer table.
All customers share one partition; every add creates a new row.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from storage_gateway.adapters.base import RecordTable
from storage_gateway.config.settings import CUSTOMER_PARTITION_KEY
from storage_gateway.errors import BackendError
from storage_gateway.schemas import CustomerProfile, OpaqueFailure, UploadResult
from storage_gateway.services.naming import new_unique_token
from storage_gateway.utils.decorators import async_log_execution_time

logger = logging.getLogger(__name__)


class CustomerService:
    """Service for adding and listing customer profiles"""

    def __init__(self, table: RecordTable):
        self.table = table

    @staticmethod
    def build_profile(name: Optional[str], email: Optional[str], phone: Optional[str]) -> CustomerProfile:
        """Create a new profile with a fresh row key. Raises ValueError on a missing field."""
        fields = {"name": name, "email": email, "phone": phone}
        missing = [field for field, value in fields.items() if not value]
        if missing:
            raise ValueError(f"Missing required customer fields: {', '.join(missing)}")

        return CustomerProfile(
            partition_key=CUSTOMER_PARTITION_KEY,
            row_key=new_unique_token(),
            name=name,
            email=email,
            phone=phone,
            timestamp=datetime.now(timezone.utc),
        )

    @async_log_execution_time
    async def add_customer(
        self,
        name: Optional[str],
        email: Optional[str],
        phone: Optional[str],
    ) -> Union[UploadResult, OpaqueFailure]:
        logger.info("AddCustomer triggered.")
        try:
            customer = self.build_profile(name, email, phone)
        except ValueError as e:
            logger.error(f"Error adding customer: {str(e)}")
            return OpaqueFailure()

        try:
            await self.table.create_if_not_exists()
            await self.table.add_entity(customer.to_entity())
        except BackendError as e:
            logger.error(f"Error adding customer to table storage: {str(e)}")
            return OpaqueFailure()

        logger.info(f"Customer {customer.name} added successfully.")
        return UploadResult(success=True, message=f"Customer {customer.name} added successfully.")

    @async_log_execution_time
    async def list_customers(self) -> Union[List[Dict[str, Any]], OpaqueFailure]:
        logger.info("GetCustomers triggered.")
        try:
            await self.table.create_if_not_exists()
            entities = await self.table.query_partition(CUSTOMER_PARTITION_KEY)
            return [CustomerProfile.model_validate(entity).to_public() for entity in entities]
        except BackendError as e:
            logger.error(f"Error retrieving customers: {str(e)}")
            return OpaqueFailure()
        except ValidationError as e:
            # The table is schemaless; a row written elsewhere may lack profile fields
            logger.error(f"Malformed customer record: {str(e)}")
            return OpaqueFailure()
