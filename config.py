"""Configuration management for the docdigest daily report.

This module provides centralized configuration for all pipeline components.
All settings are loaded from environment variables with sensible defaults.

Environment Variables:
    Sources:
        GITHUB_REPO: Repository to watch, as owner/name
        GITHUB_API_URL: Base URL of the GitHub REST API
        DOCS_INDEX_URL: Documentation index page to scan for /docs/ links
        DOCS_BASE_URL: Base URL joined with each discovered doc path
        RELEASE_NOTES_URL: Platform release notes page

    Pipeline Behavior:
        REQUEST_TIMEOUT: Per-request timeout in seconds

    Output:
        OUTPUT_DIR: Root directory for daily/<YYYY>/<MM>/<DD> reports
        REPORT_EXT: Report file extension (default: md)
        LOG_DIR: Directory for log files

    Optional Features:
        ENABLE_LOGFIRE: Enable Logfire/OpenTelemetry tracing

    Logging:
        LOG_LEVEL: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_BACKUP_COUNT: Number of rotated log files to keep
        LOG_MAX_BYTES: Max log file size in bytes (0 = time-based rotation)
        LOG_FORMAT: Log format ('text' or 'json' for structured logging)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_GITHUB_REPO = "anthropics/claude-code"
DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_DOCS_INDEX_URL = "https://code.claude.com/docs"
DEFAULT_DOCS_BASE_URL = "https://code.claude.com/docs"
DEFAULT_RELEASE_NOTES_URL = "https://platform.claude.com/docs/en/release-notes/overview"


def _env(key: str, default: str = "") -> str:
    """Get string environment variable with optional default.

    Args:
        key: Environment variable name
        default: Value to return if not set

    Returns:
        Environment variable value or default
    """
    return os.environ.get(key, default)


def _env_int(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name
        default: Value to return if not set

    Returns:
        Parsed integer or default value

    Raises:
        ValueError: If value is set but cannot be parsed as integer
    """
    val = os.environ.get(key)
    if not val:
        return default
    try:
        return int(val)
    except ValueError:
        raise ValueError(f"Invalid integer value for {key}: '{val}'")


def _env_bool(key: str, default: bool = False) -> bool:
    """Get boolean environment variable with default.

    Recognizes truthy values: '1', 'true', 'yes', 'on'
    Recognizes falsy values: '0', 'false', 'no', 'off'

    Args:
        key: Environment variable name
        default: Value to return if not set or unrecognized

    Returns:
        Parsed boolean or default value
    """
    val = os.environ.get(key, "").lower()
    if val in ("1", "true", "yes", "on"):
        return True
    if val in ("0", "false", "no", "off"):
        return False
    return default


@dataclass
class Config:
    """Application configuration loaded from environment variables.

    Constructed once at process start and passed explicitly to every
    fetcher, so tests can point any source at a substitute endpoint.

    Example:
        >>> config = Config.load()
        >>> if error := config.validate():
        ...     print(f"Config error: {error}")
    """

    # === Sources ===
    github_repo: str = DEFAULT_GITHUB_REPO  # GITHUB_REPO - owner/name
    github_api_url: str = DEFAULT_GITHUB_API_URL  # GITHUB_API_URL
    docs_index_url: str = DEFAULT_DOCS_INDEX_URL  # DOCS_INDEX_URL - page scanned for links
    docs_base_url: str = DEFAULT_DOCS_BASE_URL  # DOCS_BASE_URL - prefix for doc paths
    release_notes_url: str = DEFAULT_RELEASE_NOTES_URL  # RELEASE_NOTES_URL

    # === Pipeline Behavior ===
    request_timeout: int = 30  # REQUEST_TIMEOUT - seconds per HTTP request

    # === Output ===
    output_dir: Path = field(default_factory=lambda: Path("daily"))  # OUTPUT_DIR
    report_ext: str = "md"  # REPORT_EXT
    log_dir: Path = field(default_factory=lambda: Path("log"))  # LOG_DIR

    # === Logging Configuration ===
    log_level: str = "INFO"  # LOG_LEVEL - DEBUG, INFO, WARNING, ERROR
    log_backup_count: int = 30  # LOG_BACKUP_COUNT - Number of rotated logs to keep
    log_max_bytes: int = 0  # LOG_MAX_BYTES - Max file size (0 = time-based rotation)
    log_format: str = "text"  # LOG_FORMAT - 'text' or 'json' for structured logging

    # === Optional: Observability ===
    # Requires: pip install logfire
    enable_logfire: bool = False  # ENABLE_LOGFIRE - Enable distributed tracing
    logfire_token: str = ""  # LOGFIRE_TOKEN - Authentication token

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            github_repo=_env("GITHUB_REPO", DEFAULT_GITHUB_REPO),
            github_api_url=_env("GITHUB_API_URL", DEFAULT_GITHUB_API_URL).rstrip("/"),
            docs_index_url=_env("DOCS_INDEX_URL", DEFAULT_DOCS_INDEX_URL),
            docs_base_url=_env("DOCS_BASE_URL", DEFAULT_DOCS_BASE_URL).rstrip("/"),
            release_notes_url=_env("RELEASE_NOTES_URL", DEFAULT_RELEASE_NOTES_URL),
            request_timeout=_env_int("REQUEST_TIMEOUT", 30),
            output_dir=Path(_env("OUTPUT_DIR", "daily")),
            report_ext=_env("REPORT_EXT", "md").lstrip("."),
            log_dir=Path(_env("LOG_DIR", "log")),
            log_level=_env("LOG_LEVEL", "INFO").upper(),
            log_backup_count=_env_int("LOG_BACKUP_COUNT", 30),
            log_max_bytes=_env_int("LOG_MAX_BYTES", 0),
            log_format=_env("LOG_FORMAT", "text").lower(),
            enable_logfire=_env_bool("ENABLE_LOGFIRE", False),
            logfire_token=_env("LOGFIRE_TOKEN"),
        )

    def validate(self) -> str | None:
        """Validate configuration for required fields and valid values.

        Returns:
            Error message string if invalid, None if valid.
        """
        owner, _, name = self.github_repo.partition("/")
        if not owner or not name or "/" in name:
            return f"Invalid GITHUB_REPO '{self.github_repo}' - must be 'owner/name'"
        for key, url in (
            ("GITHUB_API_URL", self.github_api_url),
            ("DOCS_INDEX_URL", self.docs_index_url),
            ("DOCS_BASE_URL", self.docs_base_url),
            ("RELEASE_NOTES_URL", self.release_notes_url),
        ):
            if not url.startswith(("http://", "https://")):
                return f"Invalid {key} '{url}' - must be an http(s) URL"
        if self.request_timeout <= 0:
            return "REQUEST_TIMEOUT must be positive"
        if not self.report_ext:
            return "REPORT_EXT must not be empty"
        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            return f"Invalid LOG_LEVEL '{self.log_level}' - must be DEBUG, INFO, WARNING, ERROR, or CRITICAL"
        if self.log_format not in ("text", "json"):
            return f"Invalid LOG_FORMAT '{self.log_format}' - must be 'text' or 'json'"
        if self.log_backup_count < 0:
            return "LOG_BACKUP_COUNT must be non-negative"
        if self.log_max_bytes < 0:
            return "LOG_MAX_BYTES must be non-negative"
        return None
