"""Scan orchestration: read, parse and analyze each file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from slopscan.engine import RuleEngine, filter_by_severity, sort_findings
from slopscan.parsers import ParseError, ParserRegistry, ParserUnavailableError
from slopscan.rules import all_rules
from slopscan.rules.base import Finding, Rule, Severity

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ScanResult:
    """Findings for a whole scan plus the source bytes they point into."""

    findings: list[Finding]
    sources: dict[str, bytes] = field(default_factory=dict)
    files_scanned: int = 0
    files_skipped: int = 0


def scan_files(
    files: list[Path],
    *,
    rules: list[Rule] | None = None,
    threshold: Severity = Severity.INFO,
    registry: ParserRegistry | None = None,
) -> ScanResult:
    """Analyze ``files`` one at a time and return globally ordered findings.

    Unreadable or non-UTF-8 files, unsupported extensions and parse failures
    are logged and skipped.
    """
    engine = RuleEngine(rules if rules is not None else all_rules())
    parsers = registry or ParserRegistry()

    collected: list[Finding] = []
    sources: dict[str, bytes] = {}
    skipped = 0

    for file_path in files:
        path = str(file_path)
        try:
            source = file_path.read_bytes()
        except OSError as exc:
            logger.warning("Error reading %s: %s", path, exc)
            skipped += 1
            continue

        try:
            source.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("%s is not valid UTF-8, skipping", path)
            skipped += 1
            continue

        try:
            parser = parsers.parser_for(file_path.suffix)
        except ParserUnavailableError as exc:
            logger.error("Error initializing parser for %s: %s", path, exc)
            skipped += 1
            continue
        if parser is None:
            logger.debug("No parser for %s, skipping", path)
            skipped += 1
            continue

        try:
            tree = parser.parse(source)
        except ParseError as exc:
            logger.warning("Parse error in %s: %s", path, exc)
            skipped += 1
            continue

        collected.extend(engine.analyze(source, tree, path))
        sources[path] = source

    findings = filter_by_severity(sort_findings(collected), threshold)
    return ScanResult(
        findings=findings,
        sources=sources,
        files_scanned=len(sources),
        files_skipped=skipped,
    )
