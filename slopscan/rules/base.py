"""Base rule protocol and finding model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from tree_sitter import Node, Tree


class Severity(str, Enum):
    """Reporting importance of a finding, ordered info < warn < error."""

    ERROR = "error"
    WARN = "warn"
    INFO = "info"

    @property
    def level(self) -> int:
        """Return the numeric rank used for threshold comparison."""
        ordering = {
            Severity.ERROR: 2,
            Severity.WARN: 1,
            Severity.INFO: 0,
        }
        return ordering[self]

    @property
    def label(self) -> str:
        """Return the human-facing label used by the terminal reporter."""
        labels = {
            Severity.ERROR: "error",
            Severity.WARN: "warning",
            Severity.INFO: "info",
        }
        return labels[self]


@dataclass(slots=True)
class Finding:
    """A single comment-quality finding emitted by a rule."""

    rule_id: str
    message: str
    severity: Severity
    file: str
    line: int
    column: int
    span: tuple[int, int]
    suggestion: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "rule_id": self.rule_id,
            "message": self.message,
            "severity": self.severity.value,
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "span": {"start": self.span[0], "end": self.span[1]},
        }
        if self.suggestion is not None:
            payload["suggestion"] = self.suggestion
        return payload


class Rule(Protocol):
    """Protocol for comment-quality rules."""

    rule_id: str
    name: str
    description: str
    severity: Severity

    def check(self, source: bytes, tree: Tree, file_path: str) -> list[Finding]:
        """Inspect one parsed file and return findings."""


def finding_at(
    node: Node,
    *,
    file_path: str,
    message: str,
    suggestion: str | None,
    end_byte: int | None = None,
) -> Finding:
    """Build an unstamped finding positioned at the start of ``node``.

    ``rule_id`` stays empty; the engine fills it in along with the rule's
    severity.
    """
    row, column = node.start_point
    return Finding(
        rule_id="",
        message=message,
        severity=Severity.WARN,
        file=file_path,
        line=row + 1,
        column=column + 1,
        span=(node.start_byte, node.end_byte if end_byte is None else end_byte),
        suggestion=suggestion,
    )
