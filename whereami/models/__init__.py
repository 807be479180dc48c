"""
Wire models for external services.
"""

from whereami.models.ip_api import IpApiResponse
from whereami.models.custom_search import SearchItem, SearchResults

__all__ = [
    "IpApiResponse",
    "SearchItem",
    "SearchResults",
]
