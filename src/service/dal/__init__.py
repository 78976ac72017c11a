"""
Data Access Layer (DAL) for the upstream order API.

This module provides the data access interface and factory function used by the
logic layer to reach the third-party order-management API.
"""

from typing import Protocol, runtime_checkable

from service.models.config import ServiceConfig
from service.models.input import PageRequest
from service.models.order import OrderDetail
from service.models.upstream import UpstreamOrderPage


@runtime_checkable
class OrdersApi(Protocol):
    """Protocol defining the upstream order API interface."""

    def list_orders(self, page_request: PageRequest) -> UpstreamOrderPage:
        """Fetch one page of orders from the list endpoint."""
        ...

    def get_order_detail(self, order_id: str) -> OrderDetail:
        """Fetch one order from the detail endpoint."""
        ...


def get_orders_api(config: ServiceConfig) -> OrdersApi:
    """
    Factory function to get the upstream order API handler.

    Args:
        config: Service configuration with upstream URL, key and timeout

    Returns:
        Upstream API handler instance
    """
    # Import here to avoid circular imports
    from service.dal.orders_api_handler import OrdersApiHandler

    return OrdersApiHandler(config)


__all__ = [
    'OrdersApi',
    'get_orders_api',
]
