"""
Order Query Service Module.

This package contains the core service implementation following the three-layer
architecture pattern:

- handlers: API handlers and entry points
- logic: fetch, enrich and compose pipeline
- dal: access to the upstream order API
- models: Data models and schemas

Requests are stateless: configuration is built once per container and every
invocation reconstructs its data from the upstream API.
"""

__version__ = "1.0.0"
__description__ = "Paginated, enriched proxy for an upstream order API"

# Re-export commonly used classes for convenience
from service.models.config import ServiceConfig
from service.models.input import PageRequest, resolve_page_request
from service.models.order import EnrichedOrder, OrderDetail, OrderSummary
from service.models.output import OrderListResponse
from service.handlers.utils.observability import logger, tracer, metrics

__all__ = [
    "ServiceConfig",
    "PageRequest",
    "resolve_page_request",
    "EnrichedOrder",
    "OrderDetail",
    "OrderSummary",
    "OrderListResponse",
    "logger",
    "tracer",
    "metrics",
]
