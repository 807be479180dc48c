"""
Unit Tests for the cloud zone table.
"""

import pytest
from data_models import Geo, ZoneTableEntry
from whereami.services.zone_table import (
    DEFAULT_ZONE_TABLE, GCP_REGIONS, GeoZoneTable, region_from_zone
)


class TestGeoZoneTable:
    """Lookup behaviour of the region prefix table."""

    def setup_method(self):
        """Set up test fixtures."""
        self.table = DEFAULT_ZONE_TABLE
        self.broad = Geo("Somewhere", None, "Testland", "TL")
        self.narrow = Geo("Elsewhere", None, "Testland", "TL")

    def test_every_registered_region_returns_its_geo(self):
        """Each registered region id returns exactly its registered Geo."""
        for entry in GCP_REGIONS:
            assert self.table.lookup(entry.region_prefix) == entry.geo

    def test_table_has_all_regions(self):
        """All 18 regions are registered, in declaration order."""
        assert len(self.table) == 18
        assert self.table.regions()[0] == "asia-east1"
        assert self.table.regions()[-1] == "us-west2"

    def test_zone_resolves_to_region(self):
        """Zone us-central1-a resolves to Council Bluffs, Iowa."""
        geo = self.table.lookup("us-central1-a")
        assert geo == Geo("Council Bluffs", "Iowa", "United States", "US")
        assert geo.search_string() == "Council Bluffs, Iowa"

    def test_unregistered_returns_none(self):
        """Unknown ids, empty ids and mid-string matches return None."""
        assert self.table.lookup("mars-north1-a") is None
        assert self.table.lookup("") is None
        assert self.table.lookup("x-us-central1-a") is None

    @pytest.mark.parametrize("zone_id", ["europe-west10", "europe-west12", "europe-west10-a", "us-east10-b"])
    def test_region_with_longer_number_is_not_matched(self, zone_id):
        """europe-west1 must not claim europe-west10 or europe-west12."""
        assert self.table.lookup(zone_id) is None

    def test_longest_prefix_wins_regardless_of_order(self):
        """Nested prefixes resolve to the longest match in either declaration order."""
        for entries in (
            [ZoneTableEntry("test-east1", self.broad), ZoneTableEntry("test-east1-b", self.narrow)],
            [ZoneTableEntry("test-east1-b", self.narrow), ZoneTableEntry("test-east1", self.broad)],
        ):
            table = GeoZoneTable(entries)
            assert table.lookup("test-east1-b") == self.narrow
            assert table.lookup("test-east1-c") == self.broad

    def test_duplicate_prefix_rejected(self):
        """Registering the same prefix twice is a configuration error."""
        with pytest.raises(ValueError, match="Duplicate"):
            GeoZoneTable([ZoneTableEntry("test-east1", self.broad), ZoneTableEntry("test-east1", self.narrow)])


class TestRegionFromZone:
    """Zone path -> region reduction."""

    def test_full_metadata_path(self):
        """Metadata zone paths reduce to the region."""
        assert region_from_zone("projects/123456789/zones/us-central1-a") == "us-central1"

    def test_bare_zone(self):
        """A bare zone loses its letter suffix."""
        assert region_from_zone("europe-west4-c") == "europe-west4"

    def test_region_unchanged(self):
        """A region id without zone suffix is returned as is."""
        assert region_from_zone("europe-west4") == "europe-west4"
