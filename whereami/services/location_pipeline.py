"""
Location Resolution Pipeline.

Runs an ordered list of resolvers and returns the first success. If every
stage fails the outcome is UNKNOWN. No retries, no racing.
"""

from typing import List, Optional, Sequence
import logging

import requests

from data_models import LocationOutcome
from whereami.config import RuntimeEnvironment, Settings
from whereami.services.base import LocationResolver
from whereami.services.errors import LocationError
from whereami.services.instance_resolver import InstanceLocationResolver
from whereami.services.ip_resolver import PublicIpLocationResolver
from whereami.services.metadata_client import MetadataClient
from whereami.services.zone_table import DEFAULT_ZONE_TABLE, GeoZoneTable

logger = logging.getLogger(__name__)


class LocationResolutionPipeline:
    """Strict fallback chain over location resolvers."""

    def __init__(self, resolvers: Sequence[LocationResolver]):
        if not resolvers:
            raise ValueError("Location pipeline needs at least one resolver")
        self.resolvers: List[LocationResolver] = list(resolvers)

    async def resolve(self) -> LocationOutcome:
        """
        Try each resolver in order.

        Returns:
            LocationOutcome.resolved for the first stage that succeeds,
            LocationOutcome.unknown if all of them fail
        """
        for resolver in self.resolvers:
            try:
                geo = await resolver.resolve()
            except LocationError as e:
                logger.info(f"Location source '{resolver.name}' failed, trying next: {e}")
                continue
            except Exception:
                logger.exception(f"Unexpected error in location source '{resolver.name}', trying next")
                continue
            return LocationOutcome.resolved(geo, source=resolver.name)

        logger.warning("Could not determine location from any source")
        return LocationOutcome.unknown()


def build_resolver_chain(environment: RuntimeEnvironment, settings: Settings,
                         metadata: Optional[MetadataClient] = None,
                         session: Optional[requests.Session] = None,
                         zone_table: GeoZoneTable = DEFAULT_ZONE_TABLE) -> List[LocationResolver]:
    """
    Resolver chain for the detected environment.

    On Google Cloud the instance metadata comes first, with the public IP
    lookup as fallback. Elsewhere only the public IP lookup is used.
    """
    chain: List[LocationResolver] = []
    if environment is RuntimeEnvironment.GOOGLE_CLOUD:
        if metadata is None:
            metadata = MetadataClient(settings.metadata_url, settings.metadata_timeout, session=session)
        chain.append(InstanceLocationResolver(metadata, zone_table))
    chain.append(PublicIpLocationResolver(settings.http_timeout, session=session))

    logger.debug(f"Location resolver chain for {environment.value}: {[r.name for r in chain]}")
    return chain
