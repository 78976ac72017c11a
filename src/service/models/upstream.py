"""
Adapter models for upstream order API payloads.

The list endpoint answers ``{"data": {"list": [...], ...}}`` and the detail
endpoint ``{"data": {...}}``. Any other shape is rejected.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from service.models.order import OrderDetail, OrderSummary


class UpstreamListData(BaseModel):
    """``data`` object of the list endpoint."""

    model_config = ConfigDict(extra='allow')

    list: List[OrderSummary]


class UpstreamListEnvelope(BaseModel):
    """Top-level body of the list endpoint."""

    data: UpstreamListData


class UpstreamDetailEnvelope(BaseModel):
    """Top-level body of the detail endpoint."""

    data: OrderDetail


class UpstreamOrderPage(BaseModel):
    """Orders of one upstream page and the upstream's own paging metadata."""

    orders: List[OrderSummary]
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_envelope(cls, envelope: UpstreamListEnvelope) -> 'UpstreamOrderPage':
        return cls(
            orders=envelope.data.list,
            metadata=dict(envelope.data.model_extra or {}),
        )
