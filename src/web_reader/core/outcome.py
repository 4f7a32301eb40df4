"""
Tagged result of a single run stage.

Each stage reports one of three severities: it went fine, it went
through with warnings, or it failed and the run must stop.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class StageStatus(str, Enum):
    """Severity of a stage outcome."""

    OK = "ok"
    WARNING = "warning"
    FATAL = "fatal"


@dataclass
class StageOutcome:
    """
    Result of one stage of the run.

    Attributes:
        stage: Stage name, e.g. "navigate" or "submit-form"
        status: Severity
        messages: Warning texts, or the single fatal message
        value: Optional payload handed to later stages
    """

    stage: str
    status: StageStatus = StageStatus.OK
    messages: list[str] = field(default_factory=list)
    value: Any = None

    @classmethod
    def ok(cls, stage: str, value: Any = None) -> "StageOutcome":
        return cls(stage=stage, value=value)

    @classmethod
    def warning(cls, stage: str, message: str, value: Any = None) -> "StageOutcome":
        return cls(stage=stage, status=StageStatus.WARNING, messages=[message], value=value)

    @classmethod
    def fatal(cls, stage: str, message: str) -> "StageOutcome":
        return cls(stage=stage, status=StageStatus.FATAL, messages=[message])

    @property
    def is_fatal(self) -> bool:
        return self.status is StageStatus.FATAL

    def warn(self, message: str) -> None:
        """Record a warning; a fatal outcome stays fatal."""
        self.messages.append(message)
        if self.status is StageStatus.OK:
            self.status = StageStatus.WARNING

    @property
    def warnings(self) -> list[str]:
        """Warning messages (empty for fatal outcomes)."""
        if self.status is StageStatus.WARNING:
            return list(self.messages)
        return []

    @property
    def error(self) -> str | None:
        """The fatal message, if any."""
        if self.is_fatal:
            return self.messages[0] if self.messages else self.stage
        return None
