"""
Governance state projection for a Cosmos chain indexer.
"""

from govindexer.indexer import GovDatabase
from govindexer.services import make_encoding_config

__version__ = "0.1.0"

__all__ = [
    "GovDatabase",
    "make_encoding_config",
    "__version__",
]
