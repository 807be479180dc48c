"""
Instance Metadata Client.

Talks to the Google Cloud metadata server. Outside Google Cloud the host does
not resolve, which is the normal way for this client to fail.
"""

import os
from typing import Mapping, Optional
import logging

import requests

from whereami.config import RuntimeEnvironment, Settings
from whereami.services.errors import MetadataUnavailable
from whereami.services.http import create_session

logger = logging.getLogger(__name__)

METADATA_HEADERS = {"Metadata-Flavor": "Google"}
DMI_PRODUCT_NAME = "/sys/class/dmi/id/product_name"

# Set by Cloud Run, App Engine and explicit metadata host overrides
GOOGLE_CLOUD_ENV_VARS = ("K_SERVICE", "GAE_ENV", "GAE_SERVICE", "GCE_METADATA_HOST")


class MetadataClient:
    """Plain-text reads from the metadata server."""

    def __init__(self, base_url: str, timeout: float, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else create_session()

    def _get(self, path: str) -> requests.Response:
        url = f"{self.base_url}/{path}"
        try:
            return self.session.get(url, headers=METADATA_HEADERS, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise MetadataUnavailable(f"Metadata server unreachable at {url}: {e}") from e

    def zone(self) -> str:
        """
        Zone of this instance, e.g. 'projects/123456/zones/us-central1-a'.

        Raises:
            MetadataUnavailable: On transport errors, timeouts, non-2xx or empty body
        """
        response = self._get("instance/zone")
        if not response.ok:
            raise MetadataUnavailable(f"Metadata server answered {response.status_code} for instance/zone")
        zone = response.text.strip()
        if not zone:
            raise MetadataUnavailable("Metadata server returned an empty zone")
        return zone

    def attribute(self, key: str) -> Optional[str]:
        """
        Project attribute value, or None when the attribute is not set.

        Raises:
            MetadataUnavailable: On transport errors, timeouts or non-2xx other than 404
        """
        response = self._get(f"project/attributes/{key}")
        if response.status_code == 404:
            return None
        if not response.ok:
            raise MetadataUnavailable(
                f"Metadata server answered {response.status_code} for project attribute '{key}'"
            )
        return response.text.strip() or None


def _dmi_product_name(path: str = DMI_PRODUCT_NAME) -> str:
    try:
        with open(path, encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return ""


def detect_environment(settings: Settings, environ: Optional[Mapping[str, str]] = None,
                       dmi_path: str = DMI_PRODUCT_NAME) -> RuntimeEnvironment:
    """
    Decide whether we are running on Google Cloud.

    An explicit WHEREAMI_ENVIRONMENT setting wins. Otherwise Cloud Run
    (K_SERVICE), App Engine (GAE_ENV / GAE_SERVICE), an explicit metadata host
    (GCE_METADATA_HOST) or a Google DMI product name ('Google Compute Engine') mean Google Cloud.
    """
    if settings.environment is not None:
        return settings.environment

    if environ is None:
        environ = os.environ

    if any(environ.get(name) for name in GOOGLE_CLOUD_ENV_VARS):
        return RuntimeEnvironment.GOOGLE_CLOUD
    if "Google" in _dmi_product_name(dmi_path):
        return RuntimeEnvironment.GOOGLE_CLOUD
    return RuntimeEnvironment.LOCAL
