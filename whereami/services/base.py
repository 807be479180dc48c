"""
Base Location Resolver Abstract Class.

Every stage of the location pipeline implements this interface.

RESPONSIBILITIES:
- Produce a Geo, or raise a LocationError saying why not

NOT RESPONSIBLE FOR:
- Falling back to other sources
- Retrying
"""

from abc import ABC, abstractmethod

from data_models import Geo


class LocationResolver(ABC):
    """Abstract base class for a single location source."""

    def __init__(self, name: str):
        """
        Initialize resolver.

        Args:
            name: Short name used in logs and in LocationOutcome.source
        """
        self.name = name

    @abstractmethod
    async def resolve(self) -> Geo:
        """
        Resolve the current location.

        Returns:
            Geo for this source

        Raises:
            LocationError: If this source cannot determine the location
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
