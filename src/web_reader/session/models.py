"""
Data models for a single page-reading session.

SessionConfig is the immutable input to one run; SessionResult is what
the run produced. ConsoleLog collects browser console messages while
the page is alive.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from web_reader.browser.profiles import validate_profile_name
from web_reader.core.exceptions import ConfigurationError

DEFAULT_PROFILE = "default"
DEFAULT_TRUNCATE_AFTER = 100000


def ensure_protocol(url: str) -> str:
    """
    Prefix a URL with http:// unless it already names a scheme.

    Args:
        url: URL as typed by the caller, e.g. "localhost:4000/login"

    Returns:
        URL with an explicit scheme
    """
    url = url.strip()
    if url.startswith(("http://", "https://")) or "://" in url:
        return url
    if url.startswith(("about:", "data:")):
        return url
    return f"http://{url}"


@dataclass(frozen=True)
class FieldFill:
    """A form field to fill, addressed by its name attribute."""

    name: str
    value: str = ""


@dataclass(frozen=True)
class ButtonChoice:
    """
    A button to click instead of the generic submit.

    An empty value means "match by name alone"; a non-empty value must
    match the button's value attribute exactly.
    """

    name: str
    value: str = ""

    @property
    def matches_value(self) -> bool:
        """Whether the value attribute takes part in matching."""
        return self.value != ""


@dataclass(frozen=True)
class SessionConfig:
    """
    Immutable description of one run.

    Constructed once from caller input; read-only thereafter.
    The URLs are normalised and the invariants checked on creation.
    """

    url: str
    profile: str = DEFAULT_PROFILE
    raw: bool = False
    truncate_after: int = DEFAULT_TRUNCATE_AFTER
    screenshot_path: Path | None = None
    form_id: str | None = None
    inputs: tuple[FieldFill, ...] = ()
    button: ButtonChoice | None = None
    after_submit_url: str | None = None
    script: str | None = None
    wait_for_navigation: bool = False
    navigation_timeout_ms: int | None = None

    def __post_init__(self) -> None:
        if not self.url or not self.url.strip():
            raise ConfigurationError("A URL is required")
        if self.truncate_after <= 0:
            raise ConfigurationError(
                "Truncation limit must be positive",
                details={"truncate_after": self.truncate_after},
            )
        if self.navigation_timeout_ms is not None and self.navigation_timeout_ms < 0:
            raise ConfigurationError(
                "Navigation timeout cannot be negative",
                details={"navigation_timeout_ms": self.navigation_timeout_ms},
            )
        validate_profile_name(self.profile)

        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "url", ensure_protocol(self.url))
        object.__setattr__(self, "inputs", tuple(self.inputs))
        if self.after_submit_url:
            object.__setattr__(
                self, "after_submit_url", ensure_protocol(self.after_submit_url))
        if self.screenshot_path is not None:
            object.__setattr__(
                self, "screenshot_path", Path(self.screenshot_path))

    @property
    def wants_form_submission(self) -> bool:
        """True when a form is named and there is something to do in it."""
        return bool(self.form_id) and (bool(self.inputs) or self.button is not None)

    @property
    def has_orphan_form_options(self) -> bool:
        """True when inputs or a button were given without a form."""
        return not self.form_id and (bool(self.inputs) or self.button is not None)


@dataclass(frozen=True)
class ConsoleRecord:
    """A browser console message."""

    level: str
    text: str
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc))

    def format(self) -> str:
        """Render as "[LEVEL] text"."""
        return f"[{self.level.upper()}] {self.text}"


class ConsoleLog:
    """
    Append-only, thread-safe collection of console records.

    Playwright delivers console events from its dispatcher while the
    main sequence is running, so appends and snapshots share a lock.
    """

    def __init__(self) -> None:
        self._records: list[ConsoleRecord] = []
        self._lock = threading.Lock()

    def append(self, record: ConsoleRecord) -> None:
        """Add a record at the end of the log."""
        with self._lock:
            self._records.append(record)

    def snapshot(self) -> list[ConsoleRecord]:
        """Return a copy of the records in arrival order."""
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[ConsoleRecord]:
        return iter(self.snapshot())


@dataclass
class SessionResult:
    """
    Outcome of one run.

    Attributes:
        url: The requested URL after normalisation
        final_url: Page URL when content was extracted
        content: Extracted markup or rendered text, possibly truncated
        truncated: Whether truncation was applied
        original_length: Length of the content before truncation
        console: Console records in emission order
        warnings: Messages of the recoverable problems met on the way
        error: Message of the fatal problem that stopped the run
        failed_stage: Name of the stage that failed fatally
        framework_active: Whether the page was detected as LiveView
        screenshot_path: Where the screenshot was written, if any
    """

    url: str
    final_url: str | None = None
    content: str = ""
    truncated: bool = False
    original_length: int = 0
    console: list[ConsoleRecord] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    error: str | None = None
    failed_stage: str | None = None
    framework_active: bool = False
    screenshot_path: Path | None = None

    @property
    def ok(self) -> bool:
        """True when the run completed without a fatal error."""
        return self.error is None
