"""
Error taxonomy and response helpers for the order query handlers.

Every failure the handlers can report is a ``BaseServiceError`` subclass carrying
a stable error code. ``get_http_status_code`` maps codes to HTTP statuses and
``create_api_response`` builds the JSON API Gateway response; CORS headers
are added by the resolver's ``CORSConfig``.
"""

import json
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.metrics import MetricUnit
from pydantic import BaseModel, Field

from service.handlers.utils.observability import logger, metrics, tracer


class ErrorSeverity(str, Enum):
    """Error severity levels for classification."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    EXTERNAL_SERVICE = "EXTERNAL_SERVICE"
    INFRASTRUCTURE = "INFRASTRUCTURE"


class ErrorContext(BaseModel):
    """Context information for errors."""

    request_id: str = Field(description="Unique request identifier")
    operation: str = Field(description="Operation being performed")
    resource_id: Optional[str] = Field(default=None, description="Resource identifier")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    additional_data: Dict[str, Any] = Field(default_factory=dict)


class BaseServiceError(Exception):
    """Base exception class for service errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.INFRASTRUCTURE,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.context = context
        self.error_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "error_id": self.error_id,
            "error_code": self.error_code,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "context": self.context.model_dump(mode="json") if self.context else None,
        }


class ValidationError(BaseServiceError):
    """Raised when a parameter cannot be coerced and has no safe default."""

    def __init__(
        self,
        message: str,
        field_errors: Optional[List[Dict[str, str]]] = None,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            context=context,
        )
        self.field_errors = field_errors or []


class MissingParameterError(BaseServiceError):
    """Raised when the caller omitted a required identifier."""

    def __init__(self, parameter: str, context: Optional[ErrorContext] = None):
        super().__init__(
            message=f"Missing required parameter: {parameter}",
            error_code="MISSING_PARAMETER",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            context=context,
        )
        self.parameter = parameter


class UpstreamError(BaseServiceError):
    """Raised when the upstream order API fails or returns an unexpected payload."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        body: str = "",
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code="UPSTREAM_ERROR",
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.EXTERNAL_SERVICE,
            context=context,
        )
        self.status = status
        self.body = body


class InternalError(BaseServiceError):
    """Raised for unexpected failures while parsing or composing a response."""

    def __init__(self, message: str, context: Optional[ErrorContext] = None):
        super().__init__(
            message=message,
            error_code="INTERNAL_SERVER_ERROR",
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.INFRASTRUCTURE,
            context=context,
        )


def create_error_context(
    request_id: str,
    operation: str,
    resource_id: Optional[str] = None,
    **additional_data: Any,
) -> ErrorContext:
    """Create an error context for consistent error handling."""
    return ErrorContext(
        request_id=request_id,
        operation=operation,
        resource_id=resource_id,
        additional_data=additional_data,
    )


@tracer.capture_method
def log_error_metrics(error: BaseServiceError) -> None:
    """Log error metrics for monitoring and alerting."""
    metrics.add_metric(name="ErrorCount", unit=MetricUnit.Count, value=1)
    metrics.add_metric(name=f"Error{error.category.value}Count", unit=MetricUnit.Count, value=1)
    if isinstance(error, UpstreamError):
        metrics.add_metric(name="UpstreamError", unit=MetricUnit.Count, value=1)

    tracer.put_annotation("error_code", error.error_code)
    tracer.put_metadata("error_details", error.to_dict())

    logger.error(
        "Service error occurred",
        extra={
            "error_id": error.error_id,
            "error_code": error.error_code,
            "error_severity": error.severity.value,
            "error_category": error.category.value,
            "error_message": error.message,
            "context": error.context.model_dump(mode="json") if error.context else None,
        }
    )


def format_error_response(error: BaseServiceError) -> Dict[str, Any]:
    """Format error for API response."""
    response: Dict[str, Any] = {
        "error": error.message,
        "error_code": error.error_code,
        "error_id": error.error_id,
    }

    if isinstance(error, UpstreamError) and error.status is not None:
        response["upstream_status"] = error.status

    if isinstance(error, ValidationError) and error.field_errors:
        response["field_errors"] = error.field_errors

    return response


def get_http_status_code(error: BaseServiceError) -> int:
    """Get appropriate HTTP status code for error."""
    status_mapping = {
        "VALIDATION_ERROR": 400,
        "MISSING_PARAMETER": 400,
        "UPSTREAM_ERROR": 500,
        "INTERNAL_SERVER_ERROR": 500,
    }

    return status_mapping.get(error.error_code, 500)


def create_api_response(
    status_code: int,
    body: Any,
    headers: Optional[Dict[str, str]] = None,
) -> Response:
    """Create standardized API Gateway JSON response; CORS headers are added by the resolver."""
    return Response(
        status_code=status_code,
        content_type="application/json",
        body=body if isinstance(body, str) else json.dumps(body),
        headers=headers,
    )
