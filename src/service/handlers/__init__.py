"""
AWS Lambda Handlers Module.

This module contains the Lambda function handlers that serve as entry points
for the order query service. The handlers use AWS Lambda Powertools for:
- Structured logging with correlation IDs
- Distributed tracing with X-Ray
- Custom metrics collection
- API Gateway routing and OpenAPI documentation
"""

__version__ = "1.0.0"

# Re-export handler utilities for convenience
from service.handlers.utils.observability import logger, tracer, metrics
from service.handlers.utils.rest_api_resolver import app, ORDERS_PATH, ORDER_DETAIL_PATH, HEALTH_PATH

__all__ = [
    "logger",
    "tracer",
    "metrics",
    "app",
    "ORDERS_PATH",
    "ORDER_DETAIL_PATH",
    "HEALTH_PATH",
]
