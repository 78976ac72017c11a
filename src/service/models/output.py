"""
Output models for API responses using Pydantic.

This module defines the public response shapes of the order query endpoints.
"""

from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, SerializerFunctionWrapHandler, model_serializer


class OrderListItem(BaseModel):
    """Public projection of an enriched order."""

    order_id: Annotated[str, Field(
        description='Upstream order identifier',
        examples=['1043321']
    )]

    service_id: Optional[str] = None

    service_name: Optional[str] = None

    status: Optional[str] = None

    quantity: Optional[Union[int, float, str]] = None

    completed_time: Annotated[Optional[str], Field(
        default=None,
        description='Elapsed time of a completed order',
        examples=['5 Minutes 30 Seconds', 'N/A']
    )] = None

    average_time: Annotated[Optional[str], Field(
        default=None,
        description='Elapsed time of an order that is not completed',
        examples=['12 Minutes 0 Seconds', 'N/A']
    )] = None

    order_created: Optional[Union[int, float, str]] = None

    order_updated: Optional[Union[int, float, str]] = None

    username: Optional[str] = None

    @model_serializer(mode='wrap')
    def drop_unused_duration(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        """Emit only the duration field selected by the order's status."""
        data = handler(self)
        for name in ('completed_time', 'average_time'):
            if data.get(name) is None:
                data.pop(name, None)
        return data


class OrderListData(BaseModel):
    """Projected orders of one page."""

    count: Annotated[int, Field(ge=0, description='Number of orders in list')]
    list: List[OrderListItem]


class Pagination(BaseModel):
    """Links to the neighbouring pages."""

    prev_page_href: Annotated[str, Field(
        description='Previous page URL, empty on the first page'
    )]

    next_page_href: Annotated[str, Field(description='Next page URL')]

    offset: int

    limit: int


class OrderListResponse(BaseModel):
    """Response model for the order list endpoint."""

    data: OrderListData
    pagination: Pagination


class OrderDetailResponse(BaseModel):
    """Response model for the single order lookup."""

    data: Dict[str, Any]


class HealthCheckOutput(BaseModel):
    """Response model for the health endpoint."""

    status: Annotated[str, Field(examples=['healthy'])]
    version: str
    environment: str
    upstream_base_url: str
    enrich_details: bool
    detail_concurrency: int
