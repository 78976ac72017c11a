"""
Input models for the order list query.

``PageRequest`` holds the resolved query parameters of a list request and
``resolve_page_request`` builds one from the raw API Gateway query string,
applying defaults instead of rejecting malformed values.
"""

from datetime import datetime, timedelta, timezone
from typing import Annotated, Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from service.models.config import ServiceConfig
from service.models.order import OrderStatus

CREATED_FROM_LOOKBACK = timedelta(days=90)
DEFAULT_SORT = 'date-desc'

# Optional filters forwarded upstream only when supplied, in forwarding order
PASS_THROUGH_FILTERS = (
    'created_to',
    'order_status',
    'mode',
    'service_ids',
    'creation_type',
    'user',
    'provider',
    'ip_address',
    'link',
)


class PageRequest(BaseModel):
    """Resolved query parameters of an order list request."""

    model_config = ConfigDict(frozen=True)

    created_from: Annotated[str, Field(
        description='Lower creation bound, epoch seconds',
        examples=['1704067200']
    )]

    created_to: Optional[str] = None
    order_status: Optional[str] = None
    mode: Optional[str] = None
    service_ids: Optional[str] = None
    creation_type: Optional[str] = None
    user: Optional[str] = None
    provider: Optional[str] = None
    ip_address: Optional[str] = None
    link: Optional[str] = None

    service_id: Annotated[Optional[str], Field(
        default=None,
        description='Client-side filter on the service identifier'
    )] = None

    limit: Annotated[int, Field(gt=0, description='Page size')] = 100
    offset: Annotated[int, Field(ge=0, description='Page start')] = 0
    sort: str = DEFAULT_SORT

    def upstream_params(self) -> Dict[str, str]:
        """Query parameters for the upstream list endpoint."""
        params = {'created_from': self.created_from}
        for name in PASS_THROUGH_FILTERS:
            value = getattr(self, name)
            if value is not None:
                params[name] = value
        params['limit'] = str(self.limit)
        params['offset'] = str(self.offset)
        params['sort'] = self.sort
        return params

    def link_params(self) -> Dict[str, str]:
        """Filters re-serialized into pagination links, without the offset."""
        params = self.upstream_params()
        del params['offset']
        if self.service_id is not None:
            params['service_id'] = self.service_id
        return params


def default_created_from(now: Optional[datetime] = None) -> str:
    """Epoch seconds of the moment 90 days before ``now``."""
    now = now or datetime.now(timezone.utc)
    return str(int((now - CREATED_FROM_LOOKBACK).timestamp()))


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _parse_int(value: Any, default: int, minimum: int) -> int:
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= minimum else default


def resolve_page_request(
    query_params: Optional[Mapping[str, Any]],
    config: ServiceConfig,
    now: Optional[datetime] = None,
) -> PageRequest:
    """
    Resolve raw query-string parameters into a PageRequest.

    Unparseable or out-of-range ``limit``/``offset`` values fall back to their
    defaults and blank filters are dropped, so resolution never fails.

    Args:
        query_params: Raw query string mapping, may be None
        config: Service configuration providing the default page size
        now: Reference time for the default ``created_from``

    Returns:
        Resolved PageRequest
    """
    raw = query_params or {}

    filters = {name: _clean(raw.get(name)) for name in PASS_THROUGH_FILTERS}
    if config.force_completed_status:
        filters['order_status'] = OrderStatus.COMPLETED.value

    return PageRequest(
        created_from=_clean(raw.get('created_from')) or default_created_from(now),
        service_id=_clean(raw.get('service_id')),
        limit=_parse_int(raw.get('limit'), config.default_limit, minimum=1),
        offset=_parse_int(raw.get('offset'), 0, minimum=0),
        sort=_clean(raw.get('sort')) or DEFAULT_SORT,
        **filters,
    )
