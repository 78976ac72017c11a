"""
Business Logic Layer for the order query pipeline.

This module fetches a page of orders from the upstream API, enriches the
selected orders with a duration computed from their detail records, and
composes the public response with pagination links.
"""

import re
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlencode

from aws_lambda_powertools.metrics import MetricUnit

from service.dal import OrdersApi
from service.handlers.utils.errors import ErrorContext
from service.handlers.utils.observability import logger, metrics, tracer
from service.models.config import ServiceConfig
from service.models.input import PageRequest
from service.models.order import DURATION_SENTINEL, EnrichedOrder, OrderDetail, OrderSummary, is_completed
from service.models.output import OrderDetailResponse, OrderListData, OrderListItem, OrderListResponse, Pagination

FALLBACK_ORIGIN = 'http://localhost'
EPOCH_SECONDS_PATTERN = re.compile(r'^\d{9,}(\.\d+)?$')


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an upstream timestamp.

    Accepts ISO 8601 strings (``Z`` suffix, offsets, space or ``T`` separator)
    and epoch seconds as numbers or strings of nine or more digits. Naive
    values are UTC.

    Returns:
        Timezone-aware datetime, or None when missing or unparseable
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    text = str(value).strip()
    if not text:
        return None

    # shorter digit runs such as 20240101 are ISO basic dates, not epochs
    if EPOCH_SECONDS_PATTERN.match(text):
        try:
            return datetime.fromtimestamp(float(text), tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_duration(created: Any, last_update: Any) -> str:
    """
    Format the time elapsed between two upstream timestamps.

    Returns:
        ``"<m> Minutes <s> Seconds"``, or the sentinel when a timestamp is
        missing or unparseable or the elapsed time is not positive
    """
    start = parse_timestamp(created)
    end = parse_timestamp(last_update)
    if start is None or end is None:
        return DURATION_SENTINEL

    elapsed_ms = int((end - start).total_seconds() * 1000)
    if elapsed_ms <= 0:
        return DURATION_SENTINEL

    minutes = elapsed_ms // 60000
    seconds = (elapsed_ms % 60000) // 1000
    return f'{minutes} Minutes {seconds} Seconds'


def build_page_href(origin: str, path: str, params: Dict[str, str], offset: int) -> str:
    """Absolute URL for a page of the list endpoint."""
    query = urlencode({**params, 'offset': str(offset)})
    return f'{origin.rstrip("/")}{path}?{query}'


class OrderService:
    """Service class for the order list and detail operations."""

    def __init__(self, orders_api: OrdersApi, config: ServiceConfig) -> None:
        """
        Initialize the order service.

        Args:
            orders_api: Upstream order API handler
            config: Service configuration
        """
        self.orders_api = orders_api
        self.config = config

    @tracer.capture_method
    def list_orders(
        self,
        page_request: PageRequest,
        path: str,
        origin: Optional[str] = None,
        context: Optional[ErrorContext] = None,
    ) -> OrderListResponse:
        """
        Run the fetch, enrich and compose pipeline for one list request.

        Args:
            page_request: Resolved list parameters
            path: Request path used in pagination links
            origin: Origin derived from the request, used when no public base URL is configured
            context: Error context for logging

        Returns:
            Public list response

        Raises:
            UpstreamError: If the list endpoint fails
        """
        logger.info('Listing orders', extra={
            'limit': page_request.limit,
            'offset': page_request.offset,
            'operation': context.operation if context else 'list_orders',
        })

        page = self.orders_api.list_orders(page_request)
        orders = self.filter_orders(page.orders, page_request)
        enriched = self.enrich_orders(orders)
        response = self.compose_page(enriched, page_request, path=path, origin=origin)

        metrics.add_metric(name='OrdersReturned', unit=MetricUnit.Count, value=response.data.count)
        return response

    @tracer.capture_method
    def get_order_detail(self, order_id: str, context: Optional[ErrorContext] = None) -> OrderDetailResponse:
        """
        Fetch a single order and add its derived duration.

        Args:
            order_id: Upstream order identifier
            context: Error context for logging

        Returns:
            Upstream detail fields plus the status-selected duration field

        Raises:
            UpstreamError: If the detail endpoint fails
        """
        tracer.put_annotation('order_id', order_id)
        detail = self.orders_api.get_order_detail(order_id)

        data = detail.model_dump(mode='json')
        data[detail.duration_field.value] = format_duration(detail.created, detail.last_update)

        logger.info('Order detail retrieved', extra={
            'order_id': order_id,
            'status': detail.status,
            'request_id': context.request_id if context else None,
        })
        return OrderDetailResponse(data=data)

    def filter_orders(self, orders: Sequence[OrderSummary], page_request: PageRequest) -> List[OrderSummary]:
        """Apply the client-side service_id filter."""
        if page_request.service_id is None:
            return list(orders)

        target = page_request.service_id.strip()
        return [order for order in orders if (order.service_id or '').strip() == target]

    def needs_enrichment(self, order: OrderSummary) -> bool:
        """Check if an order's detail must be fetched."""
        if not self.config.enrich_details:
            return False
        return self.config.enrich_all_statuses or is_completed(order.status)

    @tracer.capture_method
    def enrich_orders(self, orders: Sequence[OrderSummary]) -> List[EnrichedOrder]:
        """
        Enrich orders with durations computed from their detail records.

        Detail lookups run in sequential batches of at most
        ``detail_concurrency`` concurrent requests. A failed lookup leaves its
        order unenriched with the sentinel duration.

        Args:
            orders: Orders in upstream order

        Returns:
            Enriched orders in the same relative order
        """
        results: List[EnrichedOrder] = [EnrichedOrder(order=order) for order in orders]
        pending = [(index, order) for index, order in enumerate(orders) if self.needs_enrichment(order)]
        if not pending:
            return results

        batch_size = self.config.detail_concurrency
        failures = 0

        for start in range(0, len(pending), batch_size):
            batch = pending[start:start + batch_size]
            with ThreadPoolExecutor(max_workers=len(batch)) as executor:
                outcomes = list(executor.map(self._enrich_one, [order for _, order in batch]))

            for (index, _), (enriched, failed) in zip(batch, outcomes):
                results[index] = enriched
                failures += failed

        metrics.add_metric(name='DetailLookupSuccess', unit=MetricUnit.Count, value=len(pending) - failures)
        if failures:
            metrics.add_metric(name='DetailLookupFailure', unit=MetricUnit.Count, value=failures)

        logger.info('Orders enriched', extra={
            'enrichment_candidates': len(pending),
            'failed_lookups': failures,
            'batch_size': batch_size,
        })
        return results

    def _enrich_one(self, order: OrderSummary) -> Tuple[EnrichedOrder, bool]:
        try:
            detail: OrderDetail = self.orders_api.get_order_detail(order.id)
        except Exception as e:
            logger.warning('Order detail lookup failed, passing order through unenriched', extra={
                'order_id': order.id,
                'error': str(e),
            })
            return EnrichedOrder(order=order), True

        duration = format_duration(detail.created, detail.last_update)
        return EnrichedOrder(order=order, detail=detail, duration=duration), False

    def compose_page(
        self,
        enriched: Sequence[EnrichedOrder],
        page_request: PageRequest,
        path: str,
        origin: Optional[str] = None,
    ) -> OrderListResponse:
        """
        Project enriched orders and compute the pagination links.

        Args:
            enriched: Enriched orders
            page_request: Resolved list parameters
            path: Request path used in pagination links
            origin: Origin derived from the request

        Returns:
            Public list response
        """
        items = [self.project(entry) for entry in enriched]

        base = self.config.public_base_url or origin or FALLBACK_ORIGIN
        link_params = page_request.link_params()
        offset, limit = page_request.offset, page_request.limit

        prev_offset = max(0, offset - limit)
        prev_page_href = '' if prev_offset == offset else build_page_href(base, path, link_params, prev_offset)
        next_page_href = build_page_href(base, path, link_params, offset + limit)

        return OrderListResponse(
            data=OrderListData(count=len(items), list=items),
            pagination=Pagination(
                prev_page_href=prev_page_href,
                next_page_href=next_page_href,
                offset=offset,
                limit=limit,
            ),
        )

    @staticmethod
    def project(entry: EnrichedOrder) -> OrderListItem:
        """Public shape of one enriched order."""
        order = entry.order
        duration = {entry.duration_field.value: entry.duration}
        return OrderListItem(
            order_id=order.id,
            service_id=order.service_id,
            service_name=order.service_name,
            status=order.status,
            quantity=order.quantity,
            order_created=entry.created,
            order_updated=entry.last_update,
            username=order.user,
            **duration,
        )
