"""
Image Lookup Service.

Finds one public-domain image for a location with the Google Custom Search
API. Never raises: every failure becomes ImageOutcome.failed so the page can
still render the location.
"""

import asyncio
import logging
from typing import Optional

import requests
from pydantic import ValidationError

from data_models import Geo, ImageOutcome, ImageSearchConfig
from whereami.config import RuntimeEnvironment, Settings
from whereami.models.custom_search import SearchResults
from whereami.services.errors import ImageLookupError, MetadataUnavailable, MissingConfig, NoImage, TransportError
from whereami.services.http import create_session
from whereami.services.metadata_client import MetadataClient

logger = logging.getLogger(__name__)

CUSTOM_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"

# Fixed query parameters: one safe, public-domain image
SEARCH_PARAMS = {
    "num": 1,
    "safe": "active",
    "searchType": "image",
    "rights": "cc_publicdomain",
}

CX_ATTRIBUTE = "SEARCH_CX"
KEY_ATTRIBUTE = "SEARCH_KEY"


def resolve_image_search_config(settings: Settings,
                                metadata: Optional[MetadataClient] = None,
                                environment: RuntimeEnvironment = RuntimeEnvironment.LOCAL
                                ) -> Optional[ImageSearchConfig]:
    """
    Find Custom Search credentials.

    Sources, first complete pair wins:
    1. SEARCH_CX / SEARCH_KEY settings
    2. SEARCH_CX / SEARCH_KEY project attributes on the metadata server
       (Google Cloud only)

    Returns:
        ImageSearchConfig, or None when no source has both values
    """
    if settings.search_cx and settings.search_key:
        logger.info("Image search configured from settings")
        return ImageSearchConfig(cx=settings.search_cx, key=settings.search_key)

    if environment is RuntimeEnvironment.GOOGLE_CLOUD and metadata is not None:
        try:
            cx = metadata.attribute(CX_ATTRIBUTE)
            key = metadata.attribute(KEY_ATTRIBUTE)
        except MetadataUnavailable as e:
            logger.warning(f"Could not read image search attributes from metadata: {e}")
        else:
            if cx and key:
                logger.info("Image search configured from instance metadata attributes")
                return ImageSearchConfig(cx=cx, key=key)

    logger.info("Image search not configured, pages will render without an image")
    return None


class ImageLookupService:
    """One public-domain image per location."""

    def __init__(self, config: Optional[ImageSearchConfig], timeout: float,
                 session: Optional[requests.Session] = None, search_url: str = CUSTOM_SEARCH_URL):
        self.config = config
        self.timeout = timeout
        self.session = session if session is not None else create_session()
        self.search_url = search_url

    def _search(self, geo: Geo) -> str:
        params = dict(SEARCH_PARAMS)
        params.update({
            "q": geo.search_string(),
            "cx": self.config.cx,
            "key": self.config.key,
        })

        try:
            response = self.session.get(self.search_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            results = SearchResults.model_validate(response.json())
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Image search request failed: {e}") from e
        except (ValidationError, ValueError) as e:
            raise TransportError(f"Image search returned malformed data: {e}") from e

        if not results.items:
            raise NoImage("Image search returned no results")
        url = results.items[0].image_url()
        if url is None:
            raise NoImage(f"Image search result link is not a valid URL: {results.items[0].link!r}")
        return url

    async def lookup(self, geo: Geo) -> ImageOutcome:
        """
        Args:
            geo: Resolved location; geo.search_string() is the query

        Returns:
            ImageOutcome.found(url) or ImageOutcome.failed(reason)
        """
        try:
            if self.config is None:
                raise MissingConfig("Image search cx/key are not configured")
            url = await asyncio.to_thread(self._search, geo)
        except ImageLookupError as e:
            logger.error(f"Could not get image for {geo.search_string()}: {e}")
            return ImageOutcome.failed(e.reason, str(e))
        return ImageOutcome.found(url)
