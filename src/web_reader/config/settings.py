"""
Pydantic settings models for web-reader.

All configuration is defined here with defaults matching the behaviour
of the command-line tool when no configuration file is present.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


APP_HOME = Path.home() / ".web-reader"


def _expand_path(v: str | Path | None) -> Path | None:
    """Convert strings to Path objects and expand '~'."""
    if v is None:
        return None
    return Path(v).expanduser()


class BrowserSettings(BaseModel):
    """Playwright browser configuration."""

    browser_type: Literal["firefox", "chromium", "webkit"] = Field(
        default="firefox",
        description="Browser engine to use",
    )
    headless: bool = Field(
        default=True,
        description="Run browser in headless mode",
    )
    executable_path: Path | None = Field(
        default=None,
        description="Explicit browser executable. None uses the managed build.",
    )
    timeout_ms: int = Field(
        default=30000,
        ge=1000,
        le=120000,
        description="Default timeout for page operations in milliseconds",
    )
    navigation_timeout_ms: int = Field(
        default=60000,
        ge=1000,
        le=180000,
        description="Timeout for page navigation in milliseconds",
    )
    user_agent: str | None = Field(
        default=None,
        description="Custom user agent string. None uses browser default.",
    )
    viewport_width: int = Field(
        default=1280,
        ge=320,
        le=3840,
        description="Browser viewport width in pixels",
    )
    viewport_height: int = Field(
        default=720,
        ge=240,
        le=2160,
        description="Browser viewport height in pixels",
    )
    ignore_https_errors: bool = Field(
        default=False,
        description="Whether to ignore HTTPS certificate errors",
    )

    @field_validator("executable_path", mode="before")
    @classmethod
    def convert_executable_path(cls, v: str | Path | None) -> Path | None:
        """Convert string paths to Path objects."""
        return _expand_path(v)


class InstallSettings(BaseModel):
    """Browser build acquisition."""

    browsers_path: Path = Field(
        default=APP_HOME / "browsers",
        description="Directory where downloaded browser builds are cached",
    )
    auto_install: bool = Field(
        default=True,
        description="Download the browser build when it is not cached",
    )

    @field_validator("browsers_path", mode="before")
    @classmethod
    def convert_browsers_path(cls, v: str | Path) -> Path:
        """Convert string paths to Path objects."""
        return _expand_path(v)


class ProfileSettings(BaseModel):
    """Persistent browser profile storage."""

    root: Path = Field(
        default=APP_HOME / "profiles",
        description="Directory holding one sub-directory per named profile",
    )
    default_profile: str = Field(
        default="default",
        min_length=1,
        description="Profile used when none is given on the command line",
    )

    @field_validator("root", mode="before")
    @classmethod
    def convert_root(cls, v: str | Path) -> Path:
        """Convert string paths to Path objects."""
        return _expand_path(v)


class FrameworkSettings(BaseModel):
    """DOM markers of the Phoenix LiveView framework."""

    marker_attribute: str = Field(
        default="data-phx-session",
        description="Attribute whose presence marks a LiveView page",
    )
    connected_class: str = Field(
        default="phx-connected",
        description="CSS class set once the LiveView socket is connected",
    )
    submit_loading_class: str = Field(
        default="phx-submit-loading",
        description="CSS class present while a form submit is processed",
    )
    change_loading_class: str = Field(
        default="phx-change-loading",
        description="CSS class present while a change event is processed",
    )


class WaitSettings(BaseModel):
    """Timeouts for the bounded polls performed during a run."""

    connect_timeout_ms: int = Field(
        default=10000,
        ge=0,
        le=120000,
        description="Wait for the LiveView connected class",
    )
    submit_loading_timeout_ms: int = Field(
        default=10000,
        ge=0,
        le=120000,
        description="Wait for the submit-loading class to clear",
    )
    change_loading_timeout_ms: int = Field(
        default=5000,
        ge=0,
        le=120000,
        description="Wait for the change-loading class to clear",
    )
    submit_grace_ms: int = Field(
        default=500,
        ge=0,
        le=10000,
        description="Pause after clicking a button on a plain form",
    )
    submit_navigation_timeout_ms: int = Field(
        default=5000,
        ge=0,
        le=120000,
        description="Wait for the URL to change after clicking a button",
    )
    script_navigation_timeout_ms: int = Field(
        default=5000,
        ge=0,
        le=120000,
        description="Default wait for navigation after injected script",
    )
    ready_state_timeout_ms: int = Field(
        default=3000,
        ge=0,
        le=120000,
        description="Wait for document.readyState to become 'complete'",
    )
    field_timeout_ms: int = Field(
        default=5000,
        ge=100,
        le=120000,
        description="Time allowed to locate a form field",
    )
    click_timeout_ms: int = Field(
        default=5000,
        ge=100,
        le=120000,
        description="Time allowed to locate and click a button",
    )
    poll_interval_ms: int = Field(
        default=100,
        ge=1,
        le=5000,
        description="Interval between condition checks",
    )


class OutputSettings(BaseModel):
    """Result text formatting."""

    truncate_after: int = Field(
        default=100000,
        ge=1,
        description="Default character limit before truncation",
    )
    header: bool = Field(
        default=True,
        description="Frame rendered output with the fetched URL",
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Minimum logging level",
    )
    format: str = Field(
        default="%(levelname)s: %(message)s",
        description="Log message format string",
    )
    date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Date format for log timestamps",
    )
    stream: Literal["stdout", "stderr"] = Field(
        default="stderr",
        description="Console stream for log output",
    )
    file_path: Path | None = Field(
        default=None,
        description="Path to log file. None means console only.",
    )
    max_file_size_mb: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum log file size before rotation",
    )
    backup_count: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Number of backup log files to keep",
    )
    log_to_console: bool = Field(
        default=True,
        description="Whether to output logs to console",
    )

    @field_validator("file_path", mode="before")
    @classmethod
    def convert_file_path(cls, v: str | Path | None) -> Path | None:
        """Convert string paths to Path objects."""
        return _expand_path(v)


class Settings(BaseModel):
    """
    Root configuration model containing all subsystem settings.

    Settings are loaded from YAML with environment variable overrides.
    """

    browser: BrowserSettings = Field(
        default_factory=BrowserSettings,
        description="Browser/Playwright settings",
    )
    install: InstallSettings = Field(
        default_factory=InstallSettings,
        description="Browser acquisition settings",
    )
    profiles: ProfileSettings = Field(
        default_factory=ProfileSettings,
        description="Persistent profile settings",
    )
    framework: FrameworkSettings = Field(
        default_factory=FrameworkSettings,
        description="LiveView marker settings",
    )
    waits: WaitSettings = Field(
        default_factory=WaitSettings,
        description="Polling timeouts",
    )
    output: OutputSettings = Field(
        default_factory=OutputSettings,
        description="Output formatting settings",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    model_config = {
        "extra": "forbid",
        "validate_default": True,
    }
