"""
Service Models Package

This package contains all Pydantic models used throughout the service,
including configuration, request resolution, upstream adapters and response models.
"""

from .config import ServiceConfig
from .input import PageRequest, resolve_page_request
from .order import DURATION_SENTINEL, DurationField, EnrichedOrder, OrderDetail, OrderStatus, OrderSummary
from .output import (
    HealthCheckOutput,
    OrderDetailResponse,
    OrderListData,
    OrderListItem,
    OrderListResponse,
    Pagination,
)
from .upstream import UpstreamOrderPage

__all__ = [
    # Configuration
    "ServiceConfig",

    # Input models
    "PageRequest",
    "resolve_page_request",

    # Output models
    "HealthCheckOutput",
    "OrderDetailResponse",
    "OrderListData",
    "OrderListItem",
    "OrderListResponse",
    "Pagination",

    # Domain models
    "DURATION_SENTINEL",
    "DurationField",
    "EnrichedOrder",
    "OrderDetail",
    "OrderStatus",
    "OrderSummary",
    "UpstreamOrderPage",
]
