"""
Request Model Assembler.

Builds the render model for one page request: location first, then the
image for that location. An image failure never drops the location.
"""

import logging
from typing import Optional

from data_models import RenderModel
from whereami.services.image_service import ImageLookupService
from whereami.services.location_pipeline import LocationResolutionPipeline

logger = logging.getLogger(__name__)


class RequestModelAssembler:
    """Resolves location and image on every call; nothing is cached."""

    def __init__(self, pipeline: LocationResolutionPipeline, images: ImageLookupService):
        self.pipeline = pipeline
        self.images = images

    async def assemble(self) -> Optional[RenderModel]:
        """
        Returns:
            RenderModel with the geo and the image outcome (found or failed),
            or None when the location is unknown
        """
        location = await self.pipeline.resolve()
        if not location.is_resolved:
            return None

        image = await self.images.lookup(location.geo)
        if not image.is_found:
            logger.info(f"Rendering {location.geo.search_string()} without an image ({image.reason.value})")
        return RenderModel(geo=location.geo, image=image)
