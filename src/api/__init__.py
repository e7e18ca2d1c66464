"""
API Package
Contains FastAPI routes and models
"""

from api.routes import router
from api.models import (
    ParseResponse,
    ScanResponse,
    CompareResponse,
    HealthResponse,
    ErrorResponse
)

__all__ = [
    'router',
    'ParseResponse',
    'ScanResponse',
    'CompareResponse',
    'HealthResponse',
    'ErrorResponse'
]
