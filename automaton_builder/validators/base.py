"""Base classes for validation results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(str, Enum):
    """Severity level of a validation issue."""

    ERROR = "error"
    WARNING = "warning"


@dataclass
class ValidationIssue:
    """A single validation finding."""

    code: str
    message: str
    severity: Severity
    state: str | None = None
    symbol: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def location(self) -> str:
        """The state and symbol an issue points at, e.g. ``[q1, 'a']``."""
        if self.state is not None and self.symbol is not None:
            return f"[{self.state}, {self.symbol!r}]"
        if self.state is not None:
            return f"[{self.state}]"
        if self.symbol is not None:
            return f"[{self.symbol!r}]"
        return ""

    def __str__(self) -> str:
        location = f" {self.location}" if self.location else ""
        return f"{self.severity.value.upper()}: {self.code}{location} - {self.message}"


@dataclass
class ValidationResult:
    """Findings collected from one or more validators."""

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        """Get all error-level issues."""
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        """Get all warning-level issues."""
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def is_valid(self) -> bool:
        """Check if the automaton is a valid DFA (no errors)."""
        return not self.has_errors

    def with_code(self, code: str) -> list[ValidationIssue]:
        """Get all issues carrying the given code."""
        return [i for i in self.issues if i.code == code]

    def add_issue(self, issue: ValidationIssue) -> None:
        self.issues.append(issue)

    def add_error(
        self,
        code: str,
        message: str,
        state: str | None = None,
        symbol: str | None = None,
        **details: Any,
    ) -> None:
        """Add an error issue."""
        self.issues.append(
            ValidationIssue(
                code=code,
                message=message,
                severity=Severity.ERROR,
                state=state,
                symbol=symbol,
                details=details,
            )
        )

    def add_warning(
        self,
        code: str,
        message: str,
        state: str | None = None,
        symbol: str | None = None,
        **details: Any,
    ) -> None:
        """Add a warning issue."""
        self.issues.append(
            ValidationIssue(
                code=code,
                message=message,
                severity=Severity.WARNING,
                state=state,
                symbol=symbol,
                details=details,
            )
        )

    def merge(self, other: "ValidationResult") -> None:
        """Merge another result into this one."""
        self.issues.extend(other.issues)
