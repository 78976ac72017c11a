"""
REST API resolver utility for the order query handlers.

This module provides a configured API Gateway REST resolver with OpenAPI documentation
support and the path constants of the exposed endpoints.
"""

from aws_lambda_powertools.event_handler import APIGatewayRestResolver, CORSConfig
from aws_lambda_powertools.event_handler.openapi.models import Tag

# API path constants
ORDERS_PATH = '/orders'
ORDER_BY_ID_PATH = '/orders/<order_id>'
ORDER_DETAIL_PATH = '/order-detail'
HEALTH_PATH = '/health'

# OpenAPI tags for documentation
ORDERS_TAG = Tag(name='Orders', description='Read-only order queries proxied to the upstream API')
HEALTH_TAG = Tag(name='Health', description='Health check operations')

# Configure CORS, any origin may read the order endpoints
cors_config = CORSConfig(
    allow_origin='*',
    max_age=600,
)

# Configure API Gateway REST resolver with OpenAPI support
app = APIGatewayRestResolver(
    cors=cors_config,
    enable_validation=True,
    debug=False,
)

# Configure OpenAPI documentation
app.enable_swagger(
    path='/swagger',
    title='Order Query Service API',
    version='1.0.0',
    description='Paginated, enriched read access to the upstream order-management API',
    tags=[ORDERS_TAG, HEALTH_TAG],
)
