"""
Data models for the whereami location service.

This module defines the core data structures used throughout the system.
Outcomes are tagged values: a status enum plus the payload that goes with it.
None of them are mutated after construction.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class LocationStatus(Enum):
    """Result of running the location resolution pipeline."""
    RESOLVED = "resolved"
    UNKNOWN = "unknown"


class ImageStatus(Enum):
    """Result of the image lookup for a resolved location."""
    FOUND = "found"
    FAILED = "failed"


class ImageFailure(Enum):
    """Why no image could be attached to the page."""
    MISSING_CONFIG = "missing_config"  # cx / key not configured
    NO_IMAGE = "no_image"  # search returned nothing usable
    TRANSPORT_ERROR = "transport_error"  # network, status or parse failure


@dataclass(frozen=True)
class Geo:
    """
    Approximate geographic location.

    city and country are always present. region_name is only set when a
    finer-grained subdivision exists (US states, Canadian provinces, ...).
    """
    city: str
    region_name: Optional[str]
    country: str
    country_code: str

    def __post_init__(self):
        if not self.city:
            raise ValueError("Geo requires a city")
        if not self.country:
            raise ValueError("Geo requires a country")

    def search_string(self) -> str:
        """Query used for the image search, e.g. 'Council Bluffs, Iowa'."""
        if self.region_name:
            return f"{self.city}, {self.region_name}"
        return f"{self.city}, {self.country}"


@dataclass(frozen=True)
class ZoneTableEntry:
    """Maps a cloud region prefix (e.g. 'us-central1') to a fixed Geo."""
    region_prefix: str
    geo: Geo


@dataclass(frozen=True)
class LocationOutcome:
    """Tagged result of location resolution: resolved(geo) or unknown."""
    status: LocationStatus
    geo: Optional[Geo] = None
    source: Optional[str] = None  # name of the resolver that succeeded

    @classmethod
    def resolved(cls, geo: Geo, source: Optional[str] = None) -> "LocationOutcome":
        return cls(status=LocationStatus.RESOLVED, geo=geo, source=source)

    @classmethod
    def unknown(cls) -> "LocationOutcome":
        return cls(status=LocationStatus.UNKNOWN)

    @property
    def is_resolved(self) -> bool:
        return self.status is LocationStatus.RESOLVED


@dataclass(frozen=True)
class ImageOutcome:
    """Tagged result of image lookup: found(url) or failed(reason)."""
    status: ImageStatus
    url: Optional[str] = None
    reason: Optional[ImageFailure] = None
    detail: Optional[str] = None

    @classmethod
    def found(cls, url: str) -> "ImageOutcome":
        return cls(status=ImageStatus.FOUND, url=url)

    @classmethod
    def failed(cls, reason: ImageFailure, detail: Optional[str] = None) -> "ImageOutcome":
        return cls(status=ImageStatus.FAILED, reason=reason, detail=detail)

    @property
    def is_found(self) -> bool:
        return self.status is ImageStatus.FOUND


@dataclass(frozen=True)
class RenderModel:
    """
    Everything the index page needs for one request.

    Only built when the location resolved. The image outcome is always
    attached, whether or not the lookup succeeded.
    """
    geo: Geo
    image: ImageOutcome


@dataclass(frozen=True)
class ImageSearchConfig:
    """Custom Search credentials: search engine id (cx) and API key."""
    cx: str
    key: str
