"""
Repository layer exports.
"""

from db.repositories.scan_repository import ScanRepository

__all__ = [
    "ScanRepository",
]
