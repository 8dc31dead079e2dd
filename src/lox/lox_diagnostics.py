"""
Diagnostics collection for the Lox front end.

A `Diagnostics` instance is created per compilation unit and shared by the
lexer and the parser of that unit. Every syntax violation becomes one
`Diagnostic` (line, location, message). Reports are forwarded to an optional
sink the moment they are recorded, so a driver can print them as they occur,
and are kept so the caller can inspect them after the parse.

`had_error` replaces a process-wide error flag: the driver decides its exit
code from the collector it created, never from global state.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lox.lox_constants import EOF

if TYPE_CHECKING:
    from lox.lox_lexer import Token


@dataclass(frozen=True)
class Diagnostic:
    line: int
    where: str  # "", " at end", or " at '<lexeme>'"
    message: str

    def format(self) -> str:
        return f"[line {self.line}] Error{self.where}: {self.message}"


Sink = Callable[[Diagnostic], None]


@dataclass
class Diagnostics:
    """Ordered collection of the diagnostics reported for one compilation unit.

    Attributes:
        sink: Optional callback invoked with each diagnostic as it is reported.
        reports: Every diagnostic reported so far, in detection order.
    """

    sink: Sink | None = None
    reports: list[Diagnostic] = field(default_factory=list)

    @property
    def had_error(self) -> bool:
        return bool(self.reports)

    def report(self, line: int, where: str, message: str) -> Diagnostic:
        diagnostic = Diagnostic(line, where, message)
        self.reports.append(diagnostic)
        if self.sink is not None:
            self.sink(diagnostic)
        return diagnostic

    def error(self, line: int, message: str) -> Diagnostic:
        """Reports an error that has a line but no token, as the lexer does."""
        return self.report(line, "", message)

    def error_at(self, token: "Token", message: str) -> Diagnostic:
        if token.type == EOF:
            return self.report(token.line, " at end", message)
        return self.report(token.line, f" at '{token.lexeme}'", message)

    def messages(self) -> list[str]:
        return [d.message for d in self.reports]

    def __len__(self) -> int:
        return len(self.reports)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.reports)
