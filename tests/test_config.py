"""Tests for environment-driven settings."""

import pytest
from ymca_advisory.config import AdvisorySettings, load_settings
from ymca_advisory.errors import ConfigurationError

ENV_VARS = [
    "ENABLE_AI_ADVISORS",
    "AZURE_OPENAI_ENDPOINT",
    "AZURE_OPENAI_API_KEY",
    "AZURE_OPENAI_DEPLOYMENT",
    "AZURE_OPENAI_DEPLOYMENT_NAME",
    "AZURE_OPENAI_API_VERSION",
    "ADVISOR_MODEL",
    "MAX_TOKENS",
    "TEMPERATURE",
    "AI_REQUEST_TIMEOUT_SECONDS",
    "ENABLE_AI_CACHING",
    "ANALYSIS_CACHE_TTL_SECONDS",
    "AI_LOG_LEVEL",
    "METRIC_RUBRIC_PATH",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        # setenv first so values loaded from a .env file are undone after the test
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


class TestFromEnv:
    def test_defaults(self, clean_env):
        settings = AdvisorySettings.from_env()
        assert settings.enable_ai_advisors is True
        assert settings.azure_api_version == "2024-02-15-preview"
        assert settings.max_tokens == 2000
        assert settings.temperature == 0.3
        assert settings.request_timeout_seconds == 60
        assert settings.cache_ttl_seconds == 300
        assert settings.enable_caching is True
        assert settings.log_level == "INFO"
        assert settings.rubric_path is None

    def test_azure_values(self, clean_env):
        clean_env.setenv("AZURE_OPENAI_ENDPOINT", "https://example.openai.azure.com")
        clean_env.setenv("AZURE_OPENAI_API_KEY", "secret")
        clean_env.setenv("AZURE_OPENAI_DEPLOYMENT", "advisor-gpt4")
        clean_env.setenv("MAX_TOKENS", "1500")
        clean_env.setenv("TEMPERATURE", "0.7")
        clean_env.setenv("AI_LOG_LEVEL", "debug")
        settings = AdvisorySettings.from_env()
        assert settings.uses_azure
        assert settings.litellm_model == "azure/advisor-gpt4"
        assert settings.max_tokens == 1500
        assert settings.temperature == 0.7
        assert settings.log_level == "DEBUG"
        settings.validate()

    def test_legacy_deployment_name(self, clean_env):
        clean_env.setenv("AZURE_OPENAI_DEPLOYMENT_NAME", "legacy")
        assert AdvisorySettings.from_env().azure_deployment == "legacy"

    @pytest.mark.parametrize("value,expected", [("false", False), ("0", False), ("no", False), ("TRUE", True)])
    def test_boolean_flags(self, clean_env, value, expected):
        clean_env.setenv("ENABLE_AI_ADVISORS", value)
        clean_env.setenv("ENABLE_AI_CACHING", value)
        settings = AdvisorySettings.from_env()
        assert settings.enable_ai_advisors is expected
        assert settings.enable_caching is expected

    def test_non_numeric_value(self, clean_env):
        clean_env.setenv("MAX_TOKENS", "lots")
        with pytest.raises(ConfigurationError, match="MAX_TOKENS must be numeric"):
            AdvisorySettings.from_env()

    def test_rubric_path(self, clean_env, tmp_path):
        clean_env.setenv("METRIC_RUBRIC_PATH", str(tmp_path / "rubric.yaml"))
        assert AdvisorySettings.from_env().rubric_path == tmp_path / "rubric.yaml"

    def test_load_settings_reads_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("ENABLE_AI_ADVISORS=false\nANALYSIS_CACHE_TTL_SECONDS=60\n")
        settings = load_settings(str(env_file))
        assert settings.enable_ai_advisors is False
        assert settings.cache_ttl_seconds == 60


class TestValidate:
    def test_nothing_configured(self):
        with pytest.raises(ConfigurationError, match="AZURE_OPENAI_ENDPOINT or ADVISOR_MODEL"):
            AdvisorySettings().validate()

    def test_disabled_needs_no_credentials(self):
        AdvisorySettings(enable_ai_advisors=False).validate()

    def test_plain_model_is_enough(self):
        settings = AdvisorySettings(advisor_model="gpt-4o-mini")
        settings.validate()
        assert settings.litellm_model == "gpt-4o-mini"

    def test_partial_azure(self):
        settings = AdvisorySettings(azure_deployment="advisor-gpt4")
        assert settings.missing_credentials() == ["AZURE_OPENAI_ENDPOINT", "AZURE_OPENAI_API_KEY"]

    @pytest.mark.parametrize(
        "field,value",
        [("request_timeout_seconds", 0), ("cache_ttl_seconds", -1), ("max_tokens", 0)],
    )
    def test_non_positive_numbers(self, field, value):
        settings = AdvisorySettings(enable_ai_advisors=False, **{field: value})
        with pytest.raises(ConfigurationError, match="must be positive"):
            settings.validate()
