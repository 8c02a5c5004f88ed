"""
Configuration management (SSOT).

This module defines ALL configuration for the Reader bridge.
All config keys are defined here; no other module should invent config keys.

Key invariants:
- The token is a static credential; no auth flow is performed
- Retry delays are always clamped to retry.max_delay_ms
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass
class ReaderConfig:
    """Readwise Reader API configuration.

    - base_url: v3 API root used for document and tag endpoints
    - auth_url: v2 endpoint used only for token validation
    """

    token: str
    base_url: str = "https://readwise.io/api/v3"
    auth_url: str = "https://readwise.io/api/v2/auth/"
    # Request timeout (seconds)
    timeout_seconds: float = 30.0


@dataclass
class RetryConfig:
    """Retry policy for rate-limited (HTTP 429) requests."""

    max_retries: int = 3
    base_delay_ms: int = 1000
    max_delay_ms: int = 60000

    def backoff_ms(self, attempt: int) -> int:
        """Exponential backoff for a zero-based attempt, clamped."""
        return min(self.base_delay_ms * (2**attempt), self.max_delay_ms)

    def delay_ms(self, attempt: int, retry_after_seconds: int) -> int:
        """Wait before the next attempt.

        The larger of the server hint and the exponential backoff, never
        more than max_delay_ms.
        """
        server_ms = min(retry_after_seconds * 1000, self.max_delay_ms)
        return max(server_ms, self.backoff_ms(attempt))


@dataclass
class ContentConfig:
    """URL-to-text conversion (Jina Reader) settings."""

    reader_url: str = "https://r.jina.ai/"
    # Optional API key for a higher Jina rate limit
    api_key: str | None = None
    timeout_seconds: float = 60.0


@dataclass
class BulkConfig:
    """Bulk operation settings."""

    # Maximum deletions in flight per batch
    concurrency: int = 5


@dataclass
class Config:
    """Application configuration (SSOT)."""

    reader: ReaderConfig
    retry: RetryConfig = field(default_factory=RetryConfig)
    content: ContentConfig = field(default_factory=ContentConfig)
    bulk: BulkConfig = field(default_factory=BulkConfig)

    def validate(self) -> list[str]:
        """Validate configuration completeness and consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []

        if not self.reader.token:
            errors.append("reader.token is required (or set READWISE_TOKEN)")
        if not self.reader.base_url:
            errors.append("reader.base_url is required")

        if self.retry.max_retries < 0:
            errors.append("retry.max_retries must be >= 0")
        if self.retry.base_delay_ms < 0:
            errors.append("retry.base_delay_ms must be >= 0")
        if self.retry.max_delay_ms < self.retry.base_delay_ms:
            errors.append("retry.max_delay_ms must be >= retry.base_delay_ms")

        if self.bulk.concurrency < 1:
            errors.append("bulk.concurrency must be >= 1")

        return errors

    def require_valid(self) -> "Config":
        """Raise ConfigValidationError if validate() reports problems."""
        errors = self.validate()
        if errors:
            raise ConfigValidationError("; ".join(errors))
        return self


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    if not raw:
        return int(default)
    try:
        return int(raw)
    except ValueError:
        raise ConfigValidationError(f"{name} must be an integer, got {raw!r}")


def load_config(config_path: Path) -> Config:
    """
    Load configuration from YAML file.

    Environment variables can override config values:
    - READWISE_TOKEN
    - READWISE_BASE_URL
    - READWISE_MAX_RETRIES
    - READWISE_BASE_DELAY_MS
    - READWISE_MAX_DELAY_MS
    - JINA_READER_URL
    - JINA_API_KEY
    """
    if config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    else:
        data = {}

    reader_data = data.get("reader", {})
    reader = ReaderConfig(
        token=os.environ.get("READWISE_TOKEN", reader_data.get("token", "")),
        base_url=os.environ.get(
            "READWISE_BASE_URL", reader_data.get("base_url", "https://readwise.io/api/v3")
        ).rstrip("/"),
        auth_url=reader_data.get("auth_url", "https://readwise.io/api/v2/auth/"),
        timeout_seconds=float(reader_data.get("timeout_seconds", 30.0)),
    )

    retry_data = data.get("retry", {})
    retry = RetryConfig(
        max_retries=_int_env("READWISE_MAX_RETRIES", retry_data.get("max_retries", 3)),
        base_delay_ms=_int_env("READWISE_BASE_DELAY_MS", retry_data.get("base_delay_ms", 1000)),
        max_delay_ms=_int_env("READWISE_MAX_DELAY_MS", retry_data.get("max_delay_ms", 60000)),
    )

    content_data = data.get("content", {})
    content = ContentConfig(
        reader_url=os.environ.get(
            "JINA_READER_URL", content_data.get("reader_url", "https://r.jina.ai/")
        ),
        api_key=os.environ.get("JINA_API_KEY", content_data.get("api_key")),
        timeout_seconds=float(content_data.get("timeout_seconds", 60.0)),
    )

    bulk_data = data.get("bulk", {})
    bulk = BulkConfig(concurrency=int(bulk_data.get("concurrency", 5)))

    return Config(reader=reader, retry=retry, content=content, bulk=bulk)


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    default_config = """# Readwise Reader bridge configuration
#
# The token can also be supplied via READWISE_TOKEN.

reader:
  token: "YOUR_READWISE_TOKEN"
  base_url: "https://readwise.io/api/v3"
  auth_url: "https://readwise.io/api/v2/auth/"
  timeout_seconds: 30

# Rate-limit (HTTP 429) handling
retry:
  max_retries: 3          # Retries after the first attempt
  base_delay_ms: 1000     # Backoff doubles per attempt from here
  max_delay_ms: 60000     # Hard ceiling for any single wait

# URL-to-text conversion for full-content listings
content:
  reader_url: "https://r.jina.ai/"
  api_key: null           # Optional, raises the Jina rate limit
  timeout_seconds: 60

bulk:
  concurrency: 5          # Deletions in flight per batch
"""

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        f.write(default_config)
