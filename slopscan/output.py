"""Output rendering."""

from __future__ import annotations

import json
from typing import Any

import click

from slopscan.rules import RuleInfo
from slopscan.rules.base import Finding, Severity

DEFAULT_LABEL = "comment restates the adjacent code"

_SEVERITY_STYLES = {
    Severity.ERROR: ("error", "red"),
    Severity.WARN: ("warning", "yellow"),
    Severity.INFO: ("advice", "cyan"),
}


class ReportError(RuntimeError):
    """Raised when findings cannot be rendered."""


def render_json(findings: list[Finding]) -> str:
    """Render findings as one pretty-printed JSON array."""
    try:
        return json.dumps([item.to_dict() for item in findings], indent=2, sort_keys=True)
    except (TypeError, ValueError) as exc:
        raise ReportError(f"Failed to serialize findings: {exc}") from exc


def render_terminal(findings: list[Finding], sources: dict[str, bytes]) -> str:
    """Render findings grouped by file against their source text."""
    by_file: dict[str, list[Finding]] = {}
    for finding in findings:
        by_file.setdefault(finding.file, []).append(finding)

    blocks: list[str] = []
    for file_path in sorted(by_file):
        source = sources.get(file_path)
        if source is None:
            raise ReportError(f"Missing source for {file_path}")
        for finding in by_file[file_path]:
            blocks.append(_render_finding(finding, source))
    return "\n\n".join(blocks)


def render_summary(findings: list[Finding], *, files_scanned: int) -> str:
    if not findings:
        return click.style(f"No issues found in {files_scanned} file(s).", fg="green", bold=True)
    files = len({finding.file for finding in findings})
    return click.style(
        f"Found {len(findings)} issue(s) in {files} of {files_scanned} file(s).",
        fg="yellow",
        bold=True,
    )


def render_rules_human(rule_info: list[RuleInfo], active_ids: set[str]) -> str:
    lines = [
        f"{'ID':<10} {'Name':<24} {'Severity':<10} {'Status':<10} Description",
        "-" * 90,
    ]
    for item in rule_info:
        status = "enabled" if item.rule_id in active_ids else "disabled"
        lines.append(
            f"{item.rule_id:<10} {item.name:<24} {item.severity.label:<10} "
            f"{status:<10} {item.description}"
        )
    return "\n".join(lines)


def build_rules_payload(
    rule_info: list[RuleInfo], active_ids: set[str], *, config_source: str | None
) -> dict[str, Any]:
    return {
        "rules": [
            {
                "rule_id": item.rule_id,
                "name": item.name,
                "severity": item.severity.value,
                "description": item.description,
                "enabled": item.rule_id in active_ids,
            }
            for item in rule_info
        ],
        "meta": {"config_source": config_source},
    }


def _render_finding(finding: Finding, source: bytes) -> str:
    kind, color = _SEVERITY_STYLES[finding.severity]
    label = finding.suggestion or DEFAULT_LABEL
    header = click.style(f"{kind}[{finding.rule_id}]", fg=color, bold=True)
    lines = [
        f"{header}: {click.style(finding.message, bold=True)}",
        f"  --> {finding.file}:{finding.line}:{finding.column}",
    ]

    covered = _covered_lines(source, finding.span)
    gutter = len(str(covered[-1][0])) if covered else 1
    lines.append(f"{' ' * gutter} |")
    for index, (lineno, content, start, end) in enumerate(covered):
        lines.append(f"{lineno:>{gutter}} | {content}")
        underline = " " * start + click.style("^" * max(end - start, 1), fg=color)
        if index == len(covered) - 1:
            underline += " " + click.style(label, fg=color)
        lines.append(f"{' ' * gutter} | {underline}")
    return "\n".join(lines)


def _covered_lines(source: bytes, span: tuple[int, int]) -> list[tuple[int, str, int, int]]:
    """Return ``(lineno, content, start_col, end_col)`` for each line a byte span touches.

    Columns are character offsets into the decoded line.
    """
    span_start, span_end = span
    result: list[tuple[int, str, int, int]] = []
    offset = 0
    for lineno, raw_line in enumerate(source.split(b"\n"), start=1):
        line_start = offset
        line_end = offset + len(raw_line)
        offset = line_end + 1
        if line_end < span_start:
            continue
        if line_start >= span_end and result:
            break
        local_start = max(span_start, line_start) - line_start
        local_end = min(span_end, line_end) - line_start
        content = raw_line.decode("utf-8", errors="replace").rstrip("\r")
        start_col = len(raw_line[:local_start].decode("utf-8", errors="replace"))
        end_col = len(raw_line[:local_end].decode("utf-8", errors="replace"))
        result.append((lineno, content, start_col, min(end_col, len(content))))
    return result
