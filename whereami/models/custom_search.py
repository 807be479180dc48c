"""
Custom Search Models.

Only the fields of https://www.googleapis.com/customsearch/v1 that the
image lookup reads.
"""

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter, ValidationError
from typing import List, Optional


_HTTP_URL = TypeAdapter(HttpUrl)


class SearchItem(BaseModel):
    """A single search result."""
    model_config = ConfigDict(extra="ignore")

    link: Optional[str] = Field(None, description="URL of the result (the image itself for image searches)")

    def image_url(self) -> Optional[str]:
        """Return the link if it is a well-formed http(s) URL, else None."""
        if not self.link:
            return None
        try:
            _HTTP_URL.validate_python(self.link)
        except ValidationError:
            return None
        return self.link


class SearchResults(BaseModel):
    """Search response. 'items' is omitted entirely when nothing matched."""
    model_config = ConfigDict(extra="ignore")

    items: List[SearchItem] = Field(default_factory=list)
