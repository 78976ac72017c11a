"""
Order Query Service - Source Package

This package contains the serverless handlers that proxy the upstream
order-management API with pagination and completion-time enrichment, built
on AWS Lambda Powertools.
"""

__version__ = "1.0.0"

# Package metadata
__all__ = [
    "__version__",
]
