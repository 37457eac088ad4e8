"""Structured diagnostics returned by provider operations."""

from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single error or warning produced while reconciling a resource.

    Attributes:
        severity: ERROR aborts the operation, WARNING is only reported
        summary: Short description
        detail: Optional longer explanation (usually the API message)
    """

    severity: Severity
    summary: str
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.severity.value}: {self.summary}: {self.detail}"
        return f"{self.severity.value}: {self.summary}"


class Diagnostics(list):
    """List of Diagnostic with helpers to split errors from warnings."""

    def error(self, summary: str, detail: str = "") -> None:
        self.append(Diagnostic(Severity.ERROR, summary, detail))

    def warning(self, summary: str, detail: str = "") -> None:
        self.append(Diagnostic(Severity.WARNING, summary, detail))

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self if d.severity is Severity.WARNING]

    def has_error(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self)

    @classmethod
    def from_error(cls, err: BaseException) -> "Diagnostics":
        """Wrap an exception into a single error diagnostic."""
        diagnostics = cls()
        diagnostics.error(str(err))
        return diagnostics
