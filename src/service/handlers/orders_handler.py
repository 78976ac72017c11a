"""
Orders Handler - Lambda function for the order query API.

This module implements the handler layer of the order query service: it resolves
the request, delegates to the logic layer and maps service errors to HTTP
responses. Configuration is read from the environment once per container and
passed explicitly to the service layers.
"""

import functools
import json
from typing import Any, Dict, Optional

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from service.dal import get_orders_api
from service.handlers.models.env_vars import get_handler_env_vars
from service.handlers.utils.errors import (
    BaseServiceError,
    ErrorContext,
    InternalError,
    MissingParameterError,
    create_api_response,
    create_error_context,
    format_error_response,
    get_http_status_code,
    log_error_metrics,
)
from service.handlers.utils.observability import logger, metrics, tracer
from service.handlers.utils.rest_api_resolver import (
    HEALTH_PATH,
    ORDER_BY_ID_PATH,
    ORDER_DETAIL_PATH,
    ORDERS_PATH,
    app,
)
from service.logic.order_service import OrderService
from service.models.input import resolve_page_request
from service.models.output import HealthCheckOutput

SERVICE_VERSION = '1.0.0'

# Initialize service dependencies once per container
env_vars = get_handler_env_vars()
service_config = env_vars.to_service_config()
order_service = OrderService(orders_api=get_orders_api(service_config), config=service_config)


def handle_service_errors(func):
    """Decorator to handle service errors and convert to HTTP responses."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except BaseServiceError as e:
            log_error_metrics(e)
            return create_api_response(
                status_code=get_http_status_code(e),
                body=format_error_response(e),
            )
        except Exception as e:
            logger.exception("Unexpected error in handler", extra={
                "error": str(e),
                "function_name": func.__name__,
            })
            metrics.add_metric(name="UnexpectedError", unit=MetricUnit.Count, value=1)

            internal_error = InternalError(message=str(e) or e.__class__.__name__)
            return create_api_response(
                status_code=500,
                body=format_error_response(internal_error),
            )

    return wrapper


def _current_request_id() -> str:
    request_context = app.current_event.request_context
    return (request_context.request_id if request_context else None) or "unknown"


def _request_header(name: str) -> Optional[str]:
    headers = app.current_event.headers or {}
    for key, value in headers.items():
        if key.lower() == name.lower():
            return value
    return None


def _base_path() -> str:
    """Stage or base path mapping that API Gateway strips from ``path``."""
    request_context = app.current_event.raw_event.get("requestContext") or {}
    full_path = request_context.get("path") or ""
    path = app.current_event.path
    if full_path != path and full_path.endswith(path):
        return full_path[: -len(path)].rstrip("/")
    return ""


def _request_origin() -> Optional[str]:
    """Origin of the inbound request, used when PUBLIC_BASE_URL is not set."""
    host = _request_header("Host")
    if not host:
        return None
    proto = _request_header("X-Forwarded-Proto") or "https"
    return f"{proto}://{host}{_base_path()}"


@app.get(HEALTH_PATH)
@tracer.capture_method
@handle_service_errors
def health_check():
    """
    Health check endpoint.

    Returns:
        Health status information
    """
    logger.info("Health check requested")
    metrics.add_metric(name="HealthCheckSuccess", unit=MetricUnit.Count, value=1)

    health = HealthCheckOutput(
        status="healthy",
        version=SERVICE_VERSION,
        environment=env_vars.ENVIRONMENT,
        upstream_base_url=service_config.upstream_base_url,
        enrich_details=service_config.enrich_details,
        detail_concurrency=service_config.detail_concurrency,
    )

    return create_api_response(status_code=200, body=health.model_dump_json())


@app.get(ORDERS_PATH)
@tracer.capture_method
@handle_service_errors
def list_orders():
    """
    List orders with filtering, enrichment and pagination.

    Returns:
        Page of projected orders with previous/next links
    """
    logger.info("List orders request received")

    context = create_error_context(
        request_id=_current_request_id(),
        operation="list_orders",
    )

    page_request = resolve_page_request(
        app.current_event.query_string_parameters,
        config=service_config,
    )

    tracer.put_annotation("limit", page_request.limit)
    tracer.put_annotation("offset", page_request.offset)
    tracer.put_annotation("order_status_filter", page_request.order_status or "all")

    response = order_service.list_orders(
        page_request=page_request,
        path=app.current_event.path,
        origin=_request_origin(),
        context=context,
    )

    logger.info("Orders listed successfully", extra={
        "orders_count": response.data.count,
        "offset": page_request.offset,
        "limit": page_request.limit,
    })

    return create_api_response(
        status_code=200,
        body=response.model_dump_json(),
    )


@app.get(ORDER_DETAIL_PATH)
@tracer.capture_method
@handle_service_errors
def get_order_detail():
    """
    Get a single order by the ``id`` query parameter.

    Returns:
        Order detail with its derived duration
    """
    query_params = app.current_event.query_string_parameters or {}
    order_id = (query_params.get("id") or "").strip()

    context = create_error_context(
        request_id=_current_request_id(),
        operation="get_order_detail",
        resource_id=order_id or None,
    )

    if not order_id:
        metrics.add_metric(name="MissingParameter", unit=MetricUnit.Count, value=1)
        raise MissingParameterError("id", context=context)

    return _order_detail_response(order_id, context)


@app.get(ORDER_BY_ID_PATH)
@tracer.capture_method
@handle_service_errors
def get_order(order_id: str):
    """
    Get a single order by path parameter.

    Args:
        order_id: Order identifier

    Returns:
        Order detail with its derived duration
    """
    context = create_error_context(
        request_id=_current_request_id(),
        operation="get_order",
        resource_id=order_id,
    )
    return _order_detail_response(order_id, context)


def _order_detail_response(order_id: str, context: ErrorContext) -> Response:
    logger.info("Get order request received", extra={"order_id": order_id})

    response = order_service.get_order_detail(order_id=order_id, context=context)

    return create_api_response(
        status_code=200,
        body=response.model_dump_json(),
    )


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Main Lambda handler function.

    Args:
        event: Lambda event payload
        context: Lambda context object

    Returns:
        API Gateway response
    """
    try:
        metrics.add_metric(name="RequestCount", unit=MetricUnit.Count, value=1)

        tracer.put_annotation("service", "order-query-service")
        tracer.put_annotation("environment", env_vars.ENVIRONMENT)

        response = app.resolve(event, context)

        if response.get("statusCode", 500) < 400:
            metrics.add_metric(name="RequestSuccess", unit=MetricUnit.Count, value=1)
        else:
            metrics.add_metric(name="RequestError", unit=MetricUnit.Count, value=1)

        return response

    except Exception as e:
        metrics.add_metric(name="RequestError", unit=MetricUnit.Count, value=1)

        logger.exception("Unhandled error in lambda handler", extra={
            "error": str(e),
            "path": event.get("path"),
        })

        # Raw proxy response, the resolver itself failed
        internal_error = InternalError(message=str(e) or e.__class__.__name__)
        return {
            "statusCode": 500,
            "headers": {
                "Content-Type": "application/json",
                "Access-Control-Allow-Origin": "*",
            },
            "body": json.dumps(format_error_response(internal_error)),
        }
