"""
Public IP Location Resolver.

Fallback source: asks an IP echo service for our public address, then a
geo-IP service for where that address is.
"""

import asyncio
import logging
from typing import Optional

import requests
from pydantic import ValidationError

from data_models import Geo
from whereami.models.ip_api import IpApiResponse
from whereami.services.base import LocationResolver
from whereami.services.errors import IpLookupFailed
from whereami.services.http import create_session

logger = logging.getLogger(__name__)

IPIFY_URL = "https://api.ipify.org"
IP_API_URL = "http://ip-api.com/json/{ip}"


class PublicIpLocationResolver(LocationResolver):
    """Location of our public IP address."""

    def __init__(self, timeout: float, session: Optional[requests.Session] = None,
                 ip_echo_url: str = IPIFY_URL, geo_ip_url: str = IP_API_URL):
        super().__init__("public-ip")
        self.timeout = timeout
        self.session = session if session is not None else create_session()
        self.ip_echo_url = ip_echo_url
        self.geo_ip_url = geo_ip_url

    def _public_ip(self) -> str:
        try:
            response = self.session.get(self.ip_echo_url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise IpLookupFailed(f"Public IP lookup failed: {e}") from e

        ip = response.text.strip()
        if not ip:
            raise IpLookupFailed("Public IP lookup returned an empty body")
        return ip

    def _geo_for_ip(self, ip: str) -> Geo:
        url = self.geo_ip_url.format(ip=ip)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise IpLookupFailed(f"Geo-IP lookup for {ip} failed: {e}") from e
        except ValueError as e:
            raise IpLookupFailed(f"Geo-IP lookup for {ip} returned malformed JSON: {e}") from e

        try:
            return IpApiResponse.model_validate(data).to_geo()
        except (ValidationError, ValueError) as e:
            raise IpLookupFailed(f"Geo-IP lookup for {ip} returned unusable data: {e}") from e

    async def lookup_ip(self, ip: str) -> Geo:
        """
        Geo for a given IP address.

        Raises:
            IpLookupFailed: Network error, non-2xx, malformed or failed lookup
        """
        return await asyncio.to_thread(self._geo_for_ip, ip)

    async def resolve(self) -> Geo:
        """
        Raises:
            IpLookupFailed: If either call fails. No partial result.
        """
        ip = await asyncio.to_thread(self._public_ip)
        geo = await self.lookup_ip(ip)
        logger.info(f"Public IP {ip} resolved to {geo.search_string()}")
        return geo
