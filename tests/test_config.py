"""
Unit Tests for settings loading and environment detection.
"""

import pytest
from whereami.config import DEFAULT_METADATA_URL, RuntimeEnvironment, Settings, load_settings
from whereami.services.location_pipeline import build_resolver_chain
from whereami.services.instance_resolver import InstanceLocationResolver
from whereami.services.metadata_client import detect_environment


class TestLoadSettings:
    """Environment variables -> Settings."""

    def test_defaults(self):
        """An empty environment gives the documented defaults."""
        settings = load_settings({})
        assert settings.port == 8080
        assert settings.search_cx is None
        assert settings.search_key is None
        assert settings.environment is None
        assert settings.http_timeout == 3.0
        assert settings.metadata_timeout == 1.0
        assert settings.metadata_url == DEFAULT_METADATA_URL

    def test_values_from_environment(self):
        """Every setting is read and normalised from its variable."""
        settings = load_settings({
            "PORT": "9090",
            "SEARCH_CX": "cx",
            "SEARCH_KEY": "key",
            "WHEREAMI_ENVIRONMENT": "Google_Cloud",
            "WHEREAMI_HTTP_TIMEOUT": "5",
            "WHEREAMI_METADATA_URL": "http://localhost:8000/v1/",
            "WHEREAMI_LOG_LEVEL": "debug",
        })
        assert settings.port == 9090
        assert (settings.search_cx, settings.search_key) == ("cx", "key")
        assert settings.environment is RuntimeEnvironment.GOOGLE_CLOUD
        assert settings.http_timeout == 5.0
        assert settings.metadata_url == "http://localhost:8000/v1"
        assert settings.log_level == "DEBUG"

    def test_empty_values_are_unset(self):
        """Blank values fall back to defaults."""
        settings = load_settings({"PORT": "", "SEARCH_CX": "  "})
        assert settings.port == 8080
        assert settings.search_cx is None

    @pytest.mark.parametrize("environ", [
        {"PORT": "eighty"},
        {"WHEREAMI_HTTP_TIMEOUT": "soon"},
        {"WHEREAMI_HTTP_TIMEOUT": "0"},
        {"WHEREAMI_ENVIRONMENT": "aws"},
    ])
    def test_malformed_values_rejected(self, environ):
        """Malformed numbers and unknown environments raise ValueError."""
        with pytest.raises(ValueError):
            load_settings(environ)


class TestDetectEnvironment:
    """Runtime environment detection."""

    @pytest.fixture(autouse=True)
    def missing_dmi(self, tmp_path):
        self.missing_dmi = str(tmp_path / "product_name")

    def test_explicit_setting_wins(self):
        """WHEREAMI_ENVIRONMENT overrides every other signal."""
        settings = Settings(environment=RuntimeEnvironment.LOCAL)
        assert detect_environment(settings, {"K_SERVICE": "whereami"}, self.missing_dmi) is RuntimeEnvironment.LOCAL

    @pytest.mark.parametrize("environ", [
        {"K_SERVICE": "whereami"},
        {"GAE_ENV": "standard"},
        {"GAE_SERVICE": "default"},
        {"GCE_METADATA_HOST": "169.254.169.254"},
    ])
    def test_platform_variables_mean_google_cloud(self, environ):
        """Cloud Run, App Engine and metadata host variables mean Google Cloud."""
        assert detect_environment(Settings(), environ, self.missing_dmi) is RuntimeEnvironment.GOOGLE_CLOUD

    def test_app_engine_keeps_instance_stage(self):
        """On App Engine the instance metadata stage stays first in the chain."""
        environment = detect_environment(Settings(), {"GAE_ENV": "standard"}, self.missing_dmi)
        chain = build_resolver_chain(environment, Settings())
        assert isinstance(chain[0], InstanceLocationResolver)

    def test_compute_engine_dmi(self, tmp_path):
        """A Google DMI product name means Google Cloud."""
        product = tmp_path / "dmi_product_name"
        product.write_text("Google Compute Engine\n")
        assert detect_environment(Settings(), {}, str(product)) is RuntimeEnvironment.GOOGLE_CLOUD

    def test_local(self):
        """No signal at all means local."""
        assert detect_environment(Settings(), {}, self.missing_dmi) is RuntimeEnvironment.LOCAL
