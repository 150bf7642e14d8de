"""
Diagnostics reporting for target validation and planning.

Generation-time failures are exceptions internally and diagnostics
externally: the engine catches them per target and reports them to a sink,
so a failing target never stops its siblings.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol

from ...logging_config import get_logger

logger = get_logger(__name__)


class Severity(Enum):
    """Diagnostic severity levels."""

    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


@dataclass(frozen=True)
class Diagnostic:
    """A single message attached to a target."""

    severity: Severity
    message: str
    target: Optional[str] = None

    def __str__(self) -> str:
        where = f"{self.target}: " if self.target else ""
        return f"{where}{self.severity.value}: {self.message}"


class DiagnosticsSink(Protocol):
    """Anything that accepts ``(severity, message, target)`` reports."""

    def report(
        self, severity: Severity, message: str, target: Optional[str] = None
    ) -> None: ...


class DiagnosticCollector:
    """Append-only, thread-safe diagnostics sink that also logs each report."""

    _log_levels = {
        Severity.ERROR: logging.ERROR,
        Severity.WARNING: logging.WARNING,
        Severity.NOTE: logging.INFO,
    }

    def __init__(self):
        self._lock = threading.Lock()
        self._diagnostics: List[Diagnostic] = []

    def report(
        self, severity: Severity, message: str, target: Optional[str] = None
    ) -> None:
        diagnostic = Diagnostic(severity, message, target)
        with self._lock:
            self._diagnostics.append(diagnostic)
        logger.log(self._log_levels[severity], f"{diagnostic}")

    @property
    def diagnostics(self) -> List[Diagnostic]:
        with self._lock:
            return list(self._diagnostics)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.WARNING]

    def has_errors(self) -> bool:
        return bool(self.errors)

    def for_target(self, target: str) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.target == target]

    def __len__(self) -> int:
        with self._lock:
            return len(self._diagnostics)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    def __init__(self, message: str, target: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.target = target


class InvalidTargetShape(GeneratorError):
    """The target is not a valid field contract."""


class BuilderReturnTypeMismatch(GeneratorError):
    """A declared ``builder()`` accessor does not return the derived builder type."""


class UnresolvedType(GeneratorError):
    """A field type could not be resolved."""

    def __init__(self, type_name: str, field: Optional[str] = None,
                 target: Optional[str] = None):
        where = f" for field '{field}'" if field else ""
        super().__init__(f"Unresolved type {type_name}{where}", target)
        self.type_name = type_name
        self.field = field
