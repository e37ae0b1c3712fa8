"""
Persistence facade used by the ingestion pipeline.
"""

from .gov_database import GovDatabase

__all__ = [
    "GovDatabase",
]
