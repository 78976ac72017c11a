"""
Order Detail Lambda Function - Entry point for single order lookups.

Serves ``GET /order-detail?id=<order_id>`` and ``GET /orders/<order_id>``
through the shared orders handler.
"""

import os
import sys
from typing import Any, Dict

# Add the service module to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from aws_lambda_powertools.utilities.typing import LambdaContext
from service.handlers.orders_handler import lambda_handler as orders_handler


def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lambda function entry point for the single order lookups.

    Args:
        event: Lambda event payload (API Gateway event)
        context: Lambda context object

    Returns:
        API Gateway response dictionary
    """
    return orders_handler(event, context)
