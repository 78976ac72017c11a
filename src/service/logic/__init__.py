"""
Business Logic Layer Module.

The logic layer runs the order query pipeline: it fetches a page from the
upstream API, enriches completed orders with their completion time through
batched detail lookups, and composes the public response.
"""

from service.logic.order_service import OrderService, format_duration, parse_timestamp

__all__ = [
    "OrderService",
    "format_duration",
    "parse_timestamp",
]
