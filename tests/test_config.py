"""
Tests for configuration module.
"""

import pytest
from pydantic import ValidationError


class TestFeatureFlags:
    """Feature flags tests."""

    def test_default_features_enabled(self):
        """Test all features are enabled by default."""
        from chartchat.config import FeatureFlags

        flags = FeatureFlags()
        assert flags.charts is True
        assert flags.chat is True

    def test_env_disables_feature(self, monkeypatch):
        from chartchat.config import FeatureFlags

        monkeypatch.setenv("FEATURE_CHAT", "false")
        assert FeatureFlags().to_dict() == {"charts": True, "chat": False}


class TestSettings:
    """Nested settings tests."""

    def test_host_defaults(self, monkeypatch):
        from chartchat.config import HostSettings

        monkeypatch.delenv("HOST_MODE", raising=False)
        monkeypatch.delenv("HOST_TIMEOUT_SECONDS", raising=False)
        host = HostSettings()
        assert host.mode == "memory"
        assert host.timeout_seconds == 10.0

    def test_host_mode_is_validated(self, monkeypatch):
        from chartchat.config import HostSettings

        monkeypatch.setenv("HOST_MODE", "carrier-pigeon")
        with pytest.raises(ValidationError):
            HostSettings()

    def test_timeout_must_be_positive(self, monkeypatch):
        from chartchat.config import HostSettings

        monkeypatch.setenv("HOST_TIMEOUT_SECONDS", "0")
        with pytest.raises(ValidationError):
            HostSettings()

    def test_is_production(self, monkeypatch):
        from chartchat.config import Settings

        monkeypatch.setenv("APP_ENV", "production")
        assert Settings().is_production is True


class TestExceptions:
    """Exception tests."""

    def test_feature_disabled_exception(self):
        from chartchat.exceptions import FeatureDisabledException

        exc = FeatureDisabledException("charts")
        assert exc.status_code == 503
        assert exc.code == "FEATURE_DISABLED"
        assert "charts" in exc.message

    def test_host_errors_share_a_base(self):
        from chartchat.exceptions import (
            HostException,
            HostTimeoutException,
            NothingToRemoveException,
            RoleUnavailableException,
        )

        assert issubclass(RoleUnavailableException, HostException)
        assert issubclass(NothingToRemoveException, HostException)
        assert issubclass(HostTimeoutException, HostException)

    def test_role_unavailable_exception(self):
        from chartchat.exceptions import RoleUnavailableException

        exc = RoleUnavailableException("Legend", "pieChart")
        assert exc.code == "ROLE_UNAVAILABLE"
        assert exc.details == {"role": "Legend", "visual_type": "pieChart"}

    def test_host_timeout_exception(self):
        from chartchat.exceptions import HostTimeoutException

        exc = HostTimeoutException("changeType(barChart)", 2.5)
        assert exc.status_code == 504
        assert "2.5s" in exc.message

    def test_visual_not_found_exception(self):
        from chartchat.exceptions import VisualNotFoundException

        exc = VisualNotFoundException("Could not find a chart visual to update.", ["card"])
        assert exc.status_code == 404
        assert exc.code == "NOT_FOUND"
        assert exc.details["available_types"] == ["card"]

    def test_mandatory_assignment_exception(self):
        from chartchat.exceptions import MandatoryAssignmentException

        exc = MandatoryAssignmentException("Y", "Sales.TotalSales", "rejected")
        assert exc.code == "MANDATORY_ASSIGNMENT_FAILED"
        assert "Sales.TotalSales" in exc.message
