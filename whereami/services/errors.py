"""
Error taxonomy for location and image resolution.

Every error here is recoverable: resolver errors move the pipeline on to the
next stage, image errors are folded into ImageOutcome.failed.
"""

from typing import Optional

from data_models import ImageFailure


class WhereamiError(Exception):
    """Base class for all service errors."""


class LocationError(WhereamiError):
    """A single resolver stage could not produce a Geo."""


class MetadataUnavailable(LocationError):
    """Instance metadata server unreachable, timed out or answered non-2xx."""


class UnknownRegion(LocationError):
    """The reported zone has no entry in the zone table."""

    def __init__(self, zone: str):
        super().__init__(f"Could not determine region for zone '{zone}'")
        self.zone = zone


class IpLookupFailed(LocationError):
    """Public IP echo or geo-IP lookup failed."""


class ImageLookupError(WhereamiError):
    """Image search could not produce a usable URL."""

    reason: ImageFailure = ImageFailure.TRANSPORT_ERROR

    def __init__(self, message: str, reason: Optional[ImageFailure] = None):
        super().__init__(message)
        if reason is not None:
            self.reason = reason


class MissingConfig(ImageLookupError):
    reason = ImageFailure.MISSING_CONFIG


class NoImage(ImageLookupError):
    reason = ImageFailure.NO_IMAGE


class TransportError(ImageLookupError):
    reason = ImageFailure.TRANSPORT_ERROR
