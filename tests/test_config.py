"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest

from readwise_reader.config import (
    Config,
    ConfigValidationError,
    ReaderConfig,
    RetryConfig,
    create_default_config,
    load_config,
)

ENV_VARS = [
    "READWISE_TOKEN",
    "READWISE_BASE_URL",
    "READWISE_MAX_RETRIES",
    "READWISE_BASE_DELAY_MS",
    "READWISE_MAX_DELAY_MS",
    "JINA_READER_URL",
    "JINA_API_KEY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestRetryConfig:
    def test_backoff_doubles_and_clamps(self):
        retry = RetryConfig(base_delay_ms=1000, max_delay_ms=5000)
        assert [retry.backoff_ms(a) for a in range(5)] == [1000, 2000, 4000, 5000, 5000]

    def test_delay_takes_larger_of_hint_and_backoff(self):
        retry = RetryConfig(base_delay_ms=1000, max_delay_ms=60000)
        assert retry.delay_ms(attempt=0, retry_after_seconds=5) == 5000
        assert retry.delay_ms(attempt=4, retry_after_seconds=5) == 16000

    def test_delay_never_exceeds_max(self):
        retry = RetryConfig(base_delay_ms=1000, max_delay_ms=3000)
        for attempt in range(6):
            for hint in (0, 1, 10, 600):
                assert retry.delay_ms(attempt, hint) <= 3000


class TestLoadConfig:
    def test_missing_file_uses_defaults(self, tmp_path: Path):
        config = load_config(tmp_path / "missing.yaml")

        assert config.reader.base_url == "https://readwise.io/api/v3"
        assert config.retry.max_retries == 3
        assert config.retry.base_delay_ms == 1000
        assert config.retry.max_delay_ms == 60000
        assert config.bulk.concurrency == 5
        assert config.validate() == ["reader.token is required (or set READWISE_TOKEN)"]

    def test_reads_yaml(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "reader:\n"
            "  token: abc\n"
            "  base_url: https://proxy.local/api/v3/\n"
            "retry:\n"
            "  max_retries: 5\n"
            "content:\n"
            "  api_key: jina\n"
            "bulk:\n"
            "  concurrency: 3\n"
        )

        config = load_config(path)

        assert config.reader.token == "abc"
        assert config.reader.base_url == "https://proxy.local/api/v3"
        assert config.retry.max_retries == 5
        assert config.content.api_key == "jina"
        assert config.bulk.concurrency == 3
        assert config.validate() == []

    def test_environment_overrides(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("reader:\n  token: from-file\nretry:\n  max_retries: 5\n")
        monkeypatch.setenv("READWISE_TOKEN", "from-env")
        monkeypatch.setenv("READWISE_MAX_RETRIES", "1")
        monkeypatch.setenv("JINA_API_KEY", "env-key")

        config = load_config(path)

        assert config.reader.token == "from-env"
        assert config.retry.max_retries == 1
        assert config.content.api_key == "env-key"

    def test_bad_integer_env(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("READWISE_MAX_DELAY_MS", "soon")

        with pytest.raises(ConfigValidationError):
            load_config(tmp_path / "missing.yaml")

    def test_default_config_roundtrip(self, tmp_path: Path):
        path = tmp_path / "nested" / "config.yaml"
        create_default_config(path)

        config = load_config(path)

        assert config.reader.token == "YOUR_READWISE_TOKEN"
        assert config.content.reader_url == "https://r.jina.ai/"
        assert config.validate() == []


class TestValidate:
    def test_inconsistent_retry_settings(self):
        config = Config(
            reader=ReaderConfig(token="t"),
            retry=RetryConfig(max_retries=-1, base_delay_ms=5000, max_delay_ms=1000),
        )

        errors = config.validate()

        assert "retry.max_retries must be >= 0" in errors
        assert "retry.max_delay_ms must be >= retry.base_delay_ms" in errors
        with pytest.raises(ConfigValidationError):
            config.require_valid()
