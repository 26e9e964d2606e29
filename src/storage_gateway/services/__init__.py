"""
Operation handlers for the Storage Gateway.
Each service composes validation, naming and one backend capability call.
"""

from storage_gateway.services.contract_service import ContractService
from storage_gateway.services.customer_service import CustomerService
from storage_gateway.services.image_service import ImageService
from storage_gateway.services.order_service import OrderService
from storage_gateway.services.stats_service import StatsService

__all__ = [
    "ContractService",
    "CustomerService",
    "ImageService",
    "OrderService",
    "StatsService",
]
