"""Rule dispatch, global ordering and severity filtering."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from tree_sitter import Tree

from slopscan.rules.base import Finding, Rule, Severity

logger = logging.getLogger(__name__)


class RuleEngine:
    """Runs an ordered set of rules against parsed files."""

    def __init__(self, rules: Iterable[Rule] | None = None) -> None:
        self._rules: list[Rule] = list(rules or [])

    @property
    def rules(self) -> tuple[Rule, ...]:
        return tuple(self._rules)

    def register(self, rule: Rule) -> None:
        self._rules.append(rule)

    def analyze(self, source: bytes, tree: Tree, file_path: str) -> list[Finding]:
        """Run every rule and stamp each finding with its rule's identity.

        Findings are concatenated in rule order; ordering by position is the
        caller's job once every file has been analyzed.
        """
        findings: list[Finding] = []
        for rule in self._rules:
            try:
                rule_findings = rule.check(source, tree, file_path)
            except Exception:
                logger.exception("Rule %s failed on %s", rule.rule_id, file_path)
                continue

            for finding in rule_findings:
                finding.rule_id = rule.rule_id
                finding.severity = rule.severity
                finding.message = f"{rule.name}: {finding.message}"
            findings.extend(rule_findings)
        return findings


def sort_findings(findings: Iterable[Finding]) -> list[Finding]:
    """Stable sort by line, then column, across the whole result set."""
    return sorted(findings, key=lambda item: (item.line, item.column))


def severity_passes(severity: Severity, threshold: Severity) -> bool:
    return severity.level >= threshold.level


def filter_by_severity(findings: Iterable[Finding], threshold: Severity) -> list[Finding]:
    """Keep findings at or above ``threshold``, preserving order."""
    return [finding for finding in findings if severity_passes(finding.severity, threshold)]
