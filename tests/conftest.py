"""
Pytest configuration and shared fixtures for the order query service.

This module provides common test fixtures and configuration used across
unit and integration tests. The environment is populated at import time
because the handler module reads its configuration when it is imported.
"""

import json
import os
import threading
import time
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

os.environ.update({
    "AWS_DEFAULT_REGION": "us-east-1",
    "API_KEY": "test-api-key",
    "UPSTREAM_BASE_URL": "https://upstream.test/adminapi/v2",
    "ENVIRONMENT": "test",
    "POWERTOOLS_SERVICE_NAME": "test-order-query-service",
    "POWERTOOLS_METRICS_NAMESPACE": "TestOrderQueryService",
    "LOG_LEVEL": "INFO",
    "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
})
os.environ.pop("PUBLIC_BASE_URL", None)

from service.handlers.utils.errors import UpstreamError  # noqa: E402
from service.handlers.utils.observability import metrics  # noqa: E402
from service.models.config import ServiceConfig  # noqa: E402
from service.models.input import PageRequest  # noqa: E402
from service.models.order import OrderDetail, OrderSummary  # noqa: E402
from service.models.upstream import UpstreamOrderPage  # noqa: E402

UPSTREAM_BASE_URL = "https://upstream.test/adminapi/v2"
PUBLIC_BASE_URL = "https://orders.example.com"
BROWSER_ORIGIN = "https://app.example.com"


def make_order(order_id: Any, status: str = "completed", **fields: Any) -> Dict[str, Any]:
    """Upstream order payload with sensible defaults."""
    order = {
        "id": order_id,
        "service_id": "42",
        "service_name": "Instagram Followers",
        "status": status,
        "quantity": 1000,
        "created": "2024-01-01T00:00:00Z",
        "last_update": "2024-01-01T00:05:30Z",
        "user": "alice",
        "link": "https://instagram.com/alice",
    }
    order.update(fields)
    return order


class FakeOrdersApi:
    """In-memory stand-in for the upstream API handler, recording every call."""

    def __init__(
        self,
        orders: List[Dict[str, Any]],
        details: Optional[Dict[str, Dict[str, Any]]] = None,
        failing_ids: Optional[set] = None,
        delay: float = 0.0,
    ) -> None:
        self.orders = orders
        self.details = details if details is not None else {str(o["id"]): o for o in orders}
        self.failing_ids = {str(i) for i in (failing_ids or set())}
        self.delay = delay
        self.list_calls: List[PageRequest] = []
        self.detail_calls: List[str] = []
        self.events: List[tuple] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def list_orders(self, page_request: PageRequest) -> UpstreamOrderPage:
        self.list_calls.append(page_request)
        return UpstreamOrderPage(orders=[OrderSummary.model_validate(o) for o in self.orders])

    def get_order_detail(self, order_id: str) -> OrderDetail:
        with self._lock:
            self.detail_calls.append(order_id)
            self.events.append(("start", order_id))
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            if order_id in self.failing_ids:
                raise UpstreamError(message="Detail API Error: 502", status=502, body="bad gateway")
            return OrderDetail.model_validate(self.details[order_id])
        finally:
            with self._lock:
                self.active -= 1
                self.events.append(("end", order_id))


class UpstreamStub:
    """httpx MockTransport backend emulating the upstream order API."""

    def __init__(
        self,
        orders: List[Dict[str, Any]],
        details: Optional[Dict[str, Dict[str, Any]]] = None,
        failing_ids: Optional[set] = None,
        list_status: int = 200,
        list_body: Optional[Any] = None,
    ) -> None:
        self.orders = orders
        self.details = details if details is not None else {str(o["id"]): o for o in orders}
        self.failing_ids = {str(i) for i in (failing_ids or set())}
        self.list_status = list_status
        self.list_body = list_body
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        prefix = "/adminapi/v2/orders"

        if path == prefix:
            if self.list_status != 200:
                return httpx.Response(self.list_status, text="upstream exploded")
            body = self.list_body if self.list_body is not None else {
                "data": {"list": self.orders, "count": len(self.orders)}
            }
            return httpx.Response(200, json=body)

        if path.startswith(prefix + "/"):
            order_id = path[len(prefix) + 1:]
            if order_id in self.failing_ids or order_id not in self.details:
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(200, json={"data": self.details[order_id]})

        return httpx.Response(404, text="unknown resource")

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))

    @property
    def detail_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path != "/adminapi/v2/orders"]


@pytest.fixture
def service_config() -> ServiceConfig:
    """Configuration with a fixed public origin."""
    return ServiceConfig(
        api_key="test-api-key",
        upstream_base_url=UPSTREAM_BASE_URL,
        public_base_url=PUBLIC_BASE_URL,
        default_limit=100,
        detail_concurrency=5,
        upstream_timeout_seconds=5.0,
    )


@pytest.fixture
def api_gateway_event() -> Callable[..., Dict[str, Any]]:
    """Factory for API Gateway REST proxy events sent by a browser client."""

    def _make(
        path: str,
        query: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
        method: str = "GET",
        request_path: Optional[str] = None,
    ) -> Dict[str, Any]:
        request_headers = {
            "Accept": "application/json",
            "Host": "api.example.com",
            "Origin": BROWSER_ORIGIN,
            "User-Agent": "pytest/test-agent",
            "X-Forwarded-Proto": "https",
        }
        request_headers.update(headers or {})
        return {
            "resource": path,
            "path": path,
            "httpMethod": method,
            "headers": request_headers,
            "multiValueHeaders": {k: [v] for k, v in request_headers.items()},
            "queryStringParameters": query,
            "multiValueQueryStringParameters": {k: [v] for k, v in query.items()} if query else None,
            "pathParameters": None,
            "stageVariables": None,
            "requestContext": {
                "requestId": "test-request-id-123",
                "accountId": "123456789012",
                "stage": "test",
                "resourcePath": path,
                "httpMethod": method,
                "path": request_path if request_path is not None else f"/test{path}",
                "protocol": "HTTP/1.1",
                "requestTimeEpoch": 1704110400000,
                "identity": {
                    "sourceIp": "127.0.0.1",
                    "userAgent": "pytest/test-agent",
                },
            },
            "body": None,
            "isBase64Encoded": False,
        }

    return _make


class _LambdaContext:
    function_name = "test-order-query-function"
    function_version = "$LATEST"
    invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-order-query-function"
    memory_limit_in_mb = 512
    aws_request_id = "test-request-id-123"
    log_group_name = "/aws/lambda/test-order-query-function"
    log_stream_name = "2024/01/01/[$LATEST]test123"

    @staticmethod
    def get_remaining_time_in_millis() -> int:
        return 30000


@pytest.fixture
def lambda_context() -> _LambdaContext:
    """Lambda context for handler tests."""
    return _LambdaContext()


def response_header(response: Dict[str, Any], name: str) -> Optional[str]:
    """Read a header from a proxy response, single or multi-value."""
    for key, value in (response.get("headers") or {}).items():
        if key.lower() == name.lower():
            return value
    for key, values in (response.get("multiValueHeaders") or {}).items():
        if key.lower() == name.lower():
            return values[0] if values else None
    return None


def response_body(response: Dict[str, Any]) -> Dict[str, Any]:
    return json.loads(response["body"])


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Drop metrics accumulated outside a decorated handler."""
    metrics.clear_metrics()
    yield
    metrics.clear_metrics()
