"""
HTTP implementation of the Data Access Layer for the upstream order API.

Every call is attempted exactly once. Non-success statuses, transport failures
and payloads that do not match the documented envelope all surface as
``UpstreamError``.
"""

from typing import Any, Optional

import httpx
from pydantic import BaseModel, ValidationError

from service.handlers.utils.errors import UpstreamError
from service.handlers.utils.observability import logger, tracer
from service.models.config import ServiceConfig
from service.models.input import PageRequest
from service.models.order import OrderDetail
from service.models.upstream import UpstreamDetailEnvelope, UpstreamListEnvelope, UpstreamOrderPage

API_KEY_HEADER = 'X-Api-Key'
ORDERS_RESOURCE = '/orders'


class OrdersApiHandler:
    """httpx-backed client for the upstream order API."""

    def __init__(self, config: ServiceConfig, client: Optional[httpx.Client] = None) -> None:
        """
        Initialize the upstream handler.

        Args:
            config: Service configuration with upstream URL, key and timeout
            client: Preconfigured httpx client, mainly for tests
        """
        self.base_url = config.upstream_base_url.rstrip('/')
        self.client = client or httpx.Client(
            timeout=config.upstream_timeout_seconds,
        )
        self.client.headers[API_KEY_HEADER] = config.api_key
        logger.debug(f'Upstream handler initialized for {self.base_url}')

    @tracer.capture_method
    def list_orders(self, page_request: PageRequest) -> UpstreamOrderPage:
        """
        Fetch one page of orders from the list endpoint.

        Args:
            page_request: Resolved list parameters

        Returns:
            Orders of the page and the upstream paging metadata

        Raises:
            UpstreamError: On non-success status, transport failure or bad payload
        """
        params = page_request.upstream_params()
        tracer.put_metadata('upstream_params', params)

        payload = self._get_json(ORDERS_RESOURCE, params=params)
        envelope = self._parse(UpstreamListEnvelope, payload, operation='list')
        page = UpstreamOrderPage.from_envelope(envelope)

        logger.info('Fetched upstream order page', extra={
            'order_count': len(page.orders),
            'upstream_metadata': page.metadata,
        })
        return page

    @tracer.capture_method
    def get_order_detail(self, order_id: str) -> OrderDetail:
        """
        Fetch one order from the detail endpoint.

        Args:
            order_id: Upstream order identifier

        Returns:
            Order detail

        Raises:
            UpstreamError: On non-success status, transport failure or bad payload
        """
        payload = self._get_json(f'{ORDERS_RESOURCE}/{order_id}')
        envelope = self._parse(UpstreamDetailEnvelope, payload, operation='detail')
        return envelope.data

    def _get_json(self, resource: str, params: Optional[dict] = None) -> Any:
        url = f'{self.base_url}{resource}'
        try:
            response = self.client.get(url, params=params)
        except httpx.HTTPError as e:
            logger.warning(f'Upstream request failed: {resource}', extra={'error': str(e)})
            raise UpstreamError(message=f'Upstream API request failed: {e}', body=str(e)) from e

        if not response.is_success:
            raise UpstreamError(
                message=f'Upstream API Error {response.status_code}: {response.text}',
                status=response.status_code,
                body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                message='Upstream API returned invalid JSON',
                status=response.status_code,
                body=response.text,
            ) from e

    @staticmethod
    def _parse(model: type[BaseModel], payload: Any, operation: str) -> Any:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise UpstreamError(
                message=f'Unexpected upstream {operation} payload: {e.error_count()} validation error(s)',
                body=str(e),
            ) from e
