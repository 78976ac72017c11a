"""
Environment variable models for type-safe configuration.

This module defines the Pydantic model for the environment variables read by the
order query handlers. The variables are parsed once per container and turned
into a ``ServiceConfig`` that is passed explicitly to the logic and upstream layers.
"""

from typing import Annotated, Optional

from aws_lambda_env_modeler import BaseModel, get_environment_variables
from pydantic import Field

from service.models.config import ServiceConfig


class OrdersHandlerEnvVars(BaseModel):
    """Environment variables for the order query handlers."""

    # Upstream API credential, sent as X-Api-Key
    API_KEY: Annotated[str, Field(
        description='API key for the upstream order API',
        min_length=1
    )]

    UPSTREAM_BASE_URL: Annotated[str, Field(
        default='https://bulkprovider.com/adminapi/v2',
        description='Base URL of the upstream order API'
    )] = 'https://bulkprovider.com/adminapi/v2'

    # Origin used for pagination links; falls back to the request Host header
    PUBLIC_BASE_URL: Annotated[Optional[str], Field(
        default=None,
        description='Public origin used to build pagination links'
    )] = None

    ENVIRONMENT: Annotated[str, Field(
        default='dev',
        description='Deployment environment name',
        pattern=r'^(dev|test|staging|prod)$'
    )] = 'dev'

    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        default='order-query-service',
        description='Service name for AWS Powertools'
    )] = 'order-query-service'

    LOG_LEVEL: Annotated[str, Field(
        default='INFO',
        description='Log level for application logging',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'

    DEFAULT_LIMIT: Annotated[int, Field(
        default=100,
        description='Page size used when the caller omits limit',
        ge=1,
        le=1000
    )] = 100

    DETAIL_CONCURRENCY: Annotated[int, Field(
        default=5,
        description='Maximum concurrent detail lookups per batch',
        ge=1,
        le=50
    )] = 5

    UPSTREAM_TIMEOUT_SECONDS: Annotated[float, Field(
        default=30.0,
        description='Timeout in seconds for every upstream call',
        gt=0,
        le=900
    )] = 30.0

    ENRICH_DETAILS: Annotated[str, Field(
        default='true',
        description='Fetch order details to compute durations (true/false)',
        pattern=r'^(true|false)$'
    )] = 'true'

    ENRICH_ALL_STATUSES: Annotated[str, Field(
        default='false',
        description='Compute average_time for orders that are not completed (true/false)',
        pattern=r'^(true|false)$'
    )] = 'false'

    FORCE_COMPLETED_STATUS: Annotated[str, Field(
        default='false',
        description='Always request order_status=completed upstream (true/false)',
        pattern=r'^(true|false)$'
    )] = 'false'

    def to_service_config(self) -> ServiceConfig:
        """Build the immutable configuration passed to the service layers."""
        return ServiceConfig(
            api_key=self.API_KEY,
            upstream_base_url=self.UPSTREAM_BASE_URL,
            public_base_url=self.PUBLIC_BASE_URL or None,
            default_limit=self.DEFAULT_LIMIT,
            detail_concurrency=self.DETAIL_CONCURRENCY,
            upstream_timeout_seconds=self.UPSTREAM_TIMEOUT_SECONDS,
            enrich_details=self.ENRICH_DETAILS == 'true',
            enrich_all_statuses=self.ENRICH_ALL_STATUSES == 'true',
            force_completed_status=self.FORCE_COMPLETED_STATUS == 'true',
        )


def get_handler_env_vars() -> OrdersHandlerEnvVars:
    """
    Get typed environment variables for the handlers.

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=OrdersHandlerEnvVars)
