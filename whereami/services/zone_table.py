"""
Cloud Zone Table.

Maps Google Cloud region prefixes to a fixed geographic location.
Pure data, no I/O.
"""

from typing import Dict, Iterable, List, Optional
import logging

from data_models import Geo, ZoneTableEntry

logger = logging.getLogger(__name__)


# https://cloud.google.com/compute/docs/regions-zones/
GCP_REGIONS: List[ZoneTableEntry] = [
    ZoneTableEntry("asia-east1", Geo("Xianxi Township", "Changhua County", "Taiwan", "TWN")),
    ZoneTableEntry("asia-east2", Geo("Hong Kong", None, "Hong Kong", "HK")),
    ZoneTableEntry("asia-northeast1", Geo("Tokyo", None, "Japan", "JP")),
    ZoneTableEntry("asia-south1", Geo("Mumbai", None, "India", "IN")),
    ZoneTableEntry("asia-southeast1", Geo("Jurong West", None, "Singapore", "SG")),
    ZoneTableEntry("australia-southeast1", Geo("Sydney", None, "Australia", "AU")),
    ZoneTableEntry("europe-north1", Geo("Hamina", None, "Finland", "FI")),
    ZoneTableEntry("europe-west1", Geo("St. Ghislain", None, "Belgium", "BE")),
    ZoneTableEntry("europe-west2", Geo("London", None, "England", "GB")),
    ZoneTableEntry("europe-west3", Geo("Frankfurt", None, "Germany", "DE")),
    ZoneTableEntry("europe-west4", Geo("Eemshaven", None, "Netherlands", "NL")),
    ZoneTableEntry("northamerica-northeast1", Geo("Montréal", "Québec", "Canada", "CA")),
    ZoneTableEntry("southamerica-east1", Geo("São Paulo", None, "Brazil", "BR")),
    ZoneTableEntry("us-central1", Geo("Council Bluffs", "Iowa", "United States", "US")),
    ZoneTableEntry("us-east1", Geo("Moncks Corner", "South Carolina", "United States", "US")),
    ZoneTableEntry("us-east4", Geo("Ashburn", "Virginia", "United States", "US")),
    ZoneTableEntry("us-west1", Geo("The Dalles", "Oregon", "United States", "US")),
    ZoneTableEntry("us-west2", Geo("Los Angeles", "California", "United States", "US")),
]


def region_from_zone(zone_path: str) -> str:
    """
    Reduce a metadata zone path to its region.

    'projects/123/zones/us-central1-a' -> 'us-central1'

    Args:
        zone_path: Zone as reported by the metadata server (may be a bare zone)

    Returns:
        Region identifier. Input without a zone suffix is returned unchanged.
    """
    zone = zone_path.strip().rstrip("/").split("/")[-1]
    head, sep, suffix = zone.rpartition("-")
    if sep and head and len(suffix) == 1 and suffix.isalpha():
        return head
    return zone


class GeoZoneTable:
    """
    Region prefix -> Geo lookup.

    A prefix matches a zone id when the id equals it or continues it at a dash
    boundary ('us-central1' matches 'us-central1-a' but not 'us-central10').
    If several prefixes match, the longest one wins. Duplicate prefixes are rejected.
    """

    def __init__(self, entries: Iterable[ZoneTableEntry]):
        self._entries: Dict[str, Geo] = {}
        for entry in entries:
            if not entry.region_prefix:
                raise ValueError("Zone table prefix must not be empty")
            if entry.region_prefix in self._entries:
                raise ValueError(f"Duplicate zone table prefix: '{entry.region_prefix}'")
            self._entries[entry.region_prefix] = entry.geo

    def __len__(self) -> int:
        return len(self._entries)

    def regions(self) -> List[str]:
        """Registered prefixes in declaration order."""
        return list(self._entries)

    def lookup(self, zone_id: str) -> Optional[Geo]:
        """
        Find the Geo for a zone or region id.

        Args:
            zone_id: e.g. 'us-central1-a' or 'us-central1'

        Returns:
            Geo for the longest matching prefix, or None
        """
        matches = [
            prefix for prefix in self._entries
            if zone_id == prefix or zone_id.startswith(prefix + "-")
        ]
        if not matches:
            logger.debug(f"No zone table entry for '{zone_id}'")
            return None
        return self._entries[max(matches, key=len)]


DEFAULT_ZONE_TABLE = GeoZoneTable(GCP_REGIONS)
