"""
Geo-IP Lookup Models.

Represents the JSON document returned by http://ip-api.com/json/{ip}.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Literal

from data_models import Geo


class IpApiResponse(BaseModel):
    """Geographic data for a single IP address."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    status: Literal["success", "fail"] = Field("success", description="Lookup status reported by ip-api")
    message: Optional[str] = Field(None, description="Failure reason when status is 'fail'")
    query: Optional[str] = Field(None, description="IP address the lookup was made for")
    city: Optional[str] = Field(None, description="City name")
    region: Optional[str] = Field(None, description="Region code (e.g., 'IA')")
    region_name: Optional[str] = Field(None, alias="regionName", description="Region name (e.g., 'Iowa')")
    country: Optional[str] = Field(None, description="Country name")
    country_code: Optional[str] = Field(None, alias="countryCode", description="ISO 3166-1 alpha-2 country code")
    lat: Optional[float] = Field(None, description="Latitude")
    lon: Optional[float] = Field(None, description="Longitude")

    def to_geo(self) -> Geo:
        """
        Convert to a Geo.

        Raises:
            ValueError: If the lookup failed or city/country are missing
        """
        if self.status != "success":
            raise ValueError(f"ip-api lookup failed: {self.message or 'no reason given'}")
        return Geo(
            city=self.city or "",
            region_name=self.region_name or None,
            country=self.country or "",
            country_code=self.country_code or "",
        )
