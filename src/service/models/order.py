"""
Order domain models for the upstream order API.

``OrderSummary`` mirrors an entry of the upstream list endpoint and ``OrderDetail``
the payload of the detail endpoint. Both keep unknown upstream fields so they can
be passed through to callers untouched. ``EnrichedOrder`` pairs a summary with
its derived duration.
"""

from enum import Enum
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

DURATION_SENTINEL = 'N/A'


class OrderStatus(str, Enum):
    """Order statuses the service reasons about."""

    COMPLETED = 'completed'


class DurationField(str, Enum):
    """Name of the derived duration field, chosen by the order's own status."""

    COMPLETED_TIME = 'completed_time'
    AVERAGE_TIME = 'average_time'


def is_completed(status: Optional[str]) -> bool:
    """Check if an upstream status string means completed (case-insensitive)."""
    return (status or '').strip().lower() == OrderStatus.COMPLETED.value


class OrderSummary(BaseModel):
    """Order entry returned by the upstream list endpoint."""

    # pass-through text fields accept numbers
    model_config = ConfigDict(extra='allow', frozen=True, coerce_numbers_to_str=True)

    id: Annotated[str, Field(
        description='Upstream order identifier',
        examples=['1043321']
    )]

    service_id: Annotated[Optional[str], Field(
        default=None,
        description='Identifier of the ordered service'
    )] = None

    service_name: Annotated[Optional[str], Field(
        default=None,
        description='Display name of the ordered service'
    )] = None

    status: Annotated[Optional[str], Field(
        default=None,
        description='Upstream order status',
        examples=['completed', 'in progress']
    )] = None

    quantity: Annotated[Optional[Union[int, float, str]], Field(
        default=None,
        description='Ordered quantity'
    )] = None

    created: Annotated[Optional[Union[int, float, str]], Field(
        default=None,
        description='Creation timestamp (ISO 8601 or epoch seconds)'
    )] = None

    last_update: Annotated[Optional[Union[int, float, str]], Field(
        default=None,
        description='Last update timestamp (ISO 8601 or epoch seconds)'
    )] = None

    user: Annotated[Optional[str], Field(
        default=None,
        description='Username of the order owner'
    )] = None

    link: Annotated[Optional[str], Field(
        default=None,
        description='Target link of the order'
    )] = None

    @field_validator('id', 'service_id', mode='before')
    @classmethod
    def coerce_identifier(cls, v: Any) -> Any:
        """Upstream identifiers may arrive as numbers."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def duration_field(self) -> DurationField:
        """Derived field name selected by this order's status."""
        if is_completed(self.status):
            return DurationField.COMPLETED_TIME
        return DurationField.AVERAGE_TIME


class OrderDetail(OrderSummary):
    """Order payload returned by the upstream detail endpoint."""


class EnrichedOrder(BaseModel):
    """An order summary together with its derived duration."""

    model_config = ConfigDict(frozen=True)

    order: OrderSummary
    detail: Optional[OrderDetail] = None
    duration: str = DURATION_SENTINEL

    @property
    def duration_field(self) -> DurationField:
        return self.order.duration_field

    @property
    def created(self) -> Optional[Union[int, float, str]]:
        if self.detail is not None and self.detail.created is not None:
            return self.detail.created
        return self.order.created

    @property
    def last_update(self) -> Optional[Union[int, float, str]]:
        if self.detail is not None and self.detail.last_update is not None:
            return self.detail.last_update
        return self.order.last_update
