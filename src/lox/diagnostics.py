"""Stage-tagged collection of static and runtime diagnostics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .tokens import Token


STATIC = "static"
RUNTIME = "runtime"


@dataclass(frozen=True)
class Diagnostic:
    """One reported error. line is None for runtime faults without a token.

    fault names the exception class behind a runtime diagnostic, so a driver
    can tell a ZeroDivisionFault from other faults without parsing messages.
    """

    kind: str
    stage: str
    line: int | None
    message: str
    fault: str | None = None

    def __str__(self) -> str:
        line = "?" if self.line is None else str(self.line)
        return f"[line {line}] Error: {self.message} (stage {self.stage})"


@dataclass
class Diagnostics:
    """Shared by the scanner, parser, and interpreter of one run.

    Nothing resets it implicitly; a driver running independent inputs
    through the same instance calls clear() in between.
    """

    stage: str = "initial"
    static: list[Diagnostic] = field(default_factory=list)
    runtime: list[Diagnostic] = field(default_factory=list)

    def set_stage(self, label: str) -> None:
        self.stage = label

    def report_static(self, line: int, message: str) -> None:
        self.static.append(Diagnostic(STATIC, self.stage, line, message))

    def report_runtime(
        self, token: Token | None, message: str, fault: str | None = None
    ) -> None:
        line = None if token is None else token.line
        self.runtime.append(Diagnostic(RUNTIME, self.stage, line, message, fault))

    def has_static_errors(self) -> bool:
        return len(self.static) > 0

    def has_runtime_errors(self) -> bool:
        return len(self.runtime) > 0

    def clear(self) -> None:
        self.static.clear()
        self.runtime.clear()
