"""
Unit Tests for request model assembly.

Partial success (location found, image not) is a normal, fully rendered
outcome.
"""

import asyncio

from data_models import Geo, ImageFailure, ImageOutcome, ImageSearchConfig, RenderModel
from fakes import FakeResponse, FakeSession, StubResolver
from whereami.services.image_service import CUSTOM_SEARCH_URL, ImageLookupService
from whereami.services.location_pipeline import LocationResolutionPipeline
from whereami.services.model_assembler import RequestModelAssembler

COUNCIL_BLUFFS = Geo("Council Bluffs", "Iowa", "United States", "US")
IMAGE_LINK = "https://upload.wikimedia.org/wikipedia/commons/c/c0/Council_Bluffs.jpg"


class RecordingImages:
    """Image service stand-in that remembers which geos it was asked about."""

    def __init__(self, outcome):
        self.outcome = outcome
        self.geos = []

    async def lookup(self, geo):
        self.geos.append(geo)
        return self.outcome


class TestRequestModelAssembler:
    """Location then image, with partial success."""

    def setup_method(self):
        """Set up test fixtures."""
        self.located = LocationResolutionPipeline([StubResolver("public-ip", geo=COUNCIL_BLUFFS)])
        self.unlocated = LocationResolutionPipeline([StubResolver("instance-metadata"), StubResolver("public-ip")])
        self.images = RecordingImages(ImageOutcome.found(IMAGE_LINK))

    def test_location_and_image(self):
        """Location and image both resolved give a full model."""
        model = asyncio.run(RequestModelAssembler(self.located, self.images).assemble())

        assert model == RenderModel(geo=COUNCIL_BLUFFS, image=ImageOutcome.found(IMAGE_LINK))
        assert self.images.geos == [COUNCIL_BLUFFS]

    def test_image_failure_keeps_location(self):
        """Image transport failure still yields the geo."""
        session = FakeSession({CUSTOM_SEARCH_URL: FakeResponse(status_code=500)})
        images = ImageLookupService(ImageSearchConfig("cx", "key"), timeout=3.0, session=session)

        model = asyncio.run(RequestModelAssembler(self.located, images).assemble())

        assert model.geo == COUNCIL_BLUFFS
        assert not model.image.is_found
        assert model.image.reason is ImageFailure.TRANSPORT_ERROR

    def test_missing_config_keeps_location(self):
        """Missing image config still yields the geo."""
        images = ImageLookupService(None, timeout=3.0, session=FakeSession())

        model = asyncio.run(RequestModelAssembler(self.located, images).assemble())

        assert model.geo == COUNCIL_BLUFFS
        assert model.image.reason is ImageFailure.MISSING_CONFIG

    def test_unknown_location_skips_image_lookup(self):
        """Unknown location returns None and never searches for an image."""
        assert asyncio.run(RequestModelAssembler(self.unlocated, self.images).assemble()) is None
        assert self.images.geos == []
