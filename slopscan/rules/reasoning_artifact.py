"""Reasoning-artifact rule: leftover chain-of-thought in comments."""

from __future__ import annotations

from tree_sitter import Tree

from slopscan.rules.base import Finding, Severity, finding_at
from slopscan.syntax import decode_source, first_line_with_prefix, iter_comments, node_text

REASONING_PATTERNS = (
    "wait —",
    "wait -",
    "wait,",
    "actually,",
    "actually —",
    "actually -",
    "hmm,",
    "hmm.",
    "let me think",
    "let me reconsider",
    "let's be precise",
    "let's try",
    "on second thought",
    "i think we should",
    "i believe this",
    "i'm not sure",
    "that doesn't work",
    "let me re-read",
    "let me re-examine",
)


class ReasoningArtifactRule:
    """Finds comment lines that open with a mid-thought phrase."""

    rule_id = "slop-002"
    name = "Reasoning Artifact"
    description = "Detects leftover reasoning traces such as 'wait,' or 'let me think'"
    severity = Severity.WARN

    def check(self, source: bytes, tree: Tree, file_path: str) -> list[Finding]:
        if decode_source(source, file_path) is None:
            return []

        findings: list[Finding] = []
        for node in iter_comments(tree):
            text = node_text(node, source)
            if first_line_with_prefix(text, REASONING_PATTERNS) is None:
                continue
            findings.append(
                finding_at(
                    node,
                    file_path=file_path,
                    message="comment contains AI reasoning trace",
                    suggestion=(
                        "Remove this comment: it appears to be an AI chain-of-thought artifact."
                    ),
                )
            )
        return findings
