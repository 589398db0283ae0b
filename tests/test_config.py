"""Tests for wren.config — ApiConfig defaults and environment."""

import dataclasses

import pytest

from wren.config import DETAIL_POLICIES, ApiConfig
from wren.errors import ConfigurationError


class TestApiConfigDefaults:
    def test_routing_defaults(self) -> None:
        config = ApiConfig()
        assert config.api_prefix == "api"
        assert config.default_format == "JSON"

    def test_token_defaults(self) -> None:
        config = ApiConfig()
        assert config.access_token_header == "X-Access-Token"
        assert config.access_token_param == "accessToken"
        assert config.accept_bearer_header is True

    def test_cors_defaults(self) -> None:
        config = ApiConfig()
        assert config.cors_allow_origin == "*"
        assert config.cors_allow_methods == ("GET", "PUT", "POST", "DELETE", "OPTIONS")
        assert config.cors_allow_headers == ("X-Access-Token", "content", "origin", "content-type")
        assert config.cors_allow_credentials is True
        assert config.cors_max_age == 86400

    def test_log_defaults(self) -> None:
        config = ApiConfig()
        assert config.log_dir is None
        assert config.log_name_pattern == "api-%Y-%m-%d.log"
        assert config.exception_detail == "superuser_or_environment"

    def test_frozen(self) -> None:
        config = ApiConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.port = 9000  # type: ignore[misc]


class TestEnvironment:
    def test_defaults_to_development(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("WREN_ENV", raising=False)
        config = ApiConfig()
        assert config.environment == "development"
        assert not config.is_production

    def test_read_from_environment_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WREN_ENV", "Production")
        assert ApiConfig().is_production

    def test_explicit_value_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WREN_ENV", "production")
        assert not ApiConfig(environment="staging").is_production

    def test_is_production_ignores_case(self) -> None:
        assert ApiConfig(environment="PRODUCTION").is_production


class TestExceptionDetailPolicy:
    @pytest.mark.parametrize("policy", DETAIL_POLICIES)
    def test_known_policies_accepted(self, policy: str) -> None:
        assert ApiConfig(exception_detail=policy).exception_detail == policy  # type: ignore[arg-type]

    def test_unknown_policy_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="exception_detail must be one of"):
            ApiConfig(exception_detail="always")  # type: ignore[arg-type]
