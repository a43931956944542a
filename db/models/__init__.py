"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.platform_response import PlatformResponse
from db.models.platform_result import PlatformResult
from db.models.scan import Scan
from db.models.scan_query import ScanQuery

__all__ = [
    "Scan",
    "ScanQuery",
    "PlatformResponse",
    "PlatformResult",
]
