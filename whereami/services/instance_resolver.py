"""
Instance Location Resolver.

Uses the instance zone from the metadata server and the static zone table.
Only meaningful when running on Google Cloud.
"""

import asyncio
import logging

from data_models import Geo
from whereami.services.base import LocationResolver
from whereami.services.errors import UnknownRegion
from whereami.services.metadata_client import MetadataClient
from whereami.services.zone_table import DEFAULT_ZONE_TABLE, GeoZoneTable, region_from_zone

logger = logging.getLogger(__name__)


class InstanceLocationResolver(LocationResolver):
    """Location of the hosting instance, from its zone."""

    def __init__(self, metadata: MetadataClient, zone_table: GeoZoneTable = DEFAULT_ZONE_TABLE):
        super().__init__("instance-metadata")
        self.metadata = metadata
        self.zone_table = zone_table

    async def resolve(self) -> Geo:
        """
        Raises:
            MetadataUnavailable: Metadata server unreachable
            UnknownRegion: Zone is not in the zone table
        """
        zone_path = await asyncio.to_thread(self.metadata.zone)
        region = region_from_zone(zone_path)

        geo = self.zone_table.lookup(region)
        if geo is None:
            raise UnknownRegion(zone_path)

        logger.info(f"Instance region '{region}' resolved to {geo.search_string()}")
        return geo
