"""
Service configuration model.

``ServiceConfig`` is built once per container from the environment and handed to
every component that needs it.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field


class ServiceConfig(BaseModel):
    """Immutable configuration for the order query pipeline."""

    model_config = ConfigDict(frozen=True)

    api_key: Annotated[str, Field(min_length=1, description='Upstream API key')]

    upstream_base_url: Annotated[str, Field(
        description='Base URL of the upstream order API'
    )] = 'https://bulkprovider.com/adminapi/v2'

    public_base_url: Annotated[Optional[str], Field(
        description='Origin for pagination links, None to derive it from the request'
    )] = None

    default_limit: Annotated[int, Field(gt=0)] = 100

    detail_concurrency: Annotated[int, Field(gt=0)] = 5

    upstream_timeout_seconds: Annotated[float, Field(gt=0)] = 30.0

    enrich_details: bool = True

    enrich_all_statuses: bool = False

    force_completed_status: bool = False
