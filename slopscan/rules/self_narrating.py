"""Self-narrating comment rule."""

from __future__ import annotations

from tree_sitter import Tree

from slopscan.rules.base import Finding, Severity, finding_at
from slopscan.syntax import (
    decode_source,
    first_line_with_prefix,
    is_doc_comment,
    iter_comments,
    node_text,
)

NARRATING_PATTERNS = (
    "here we",
    "we need to",
    "we should",
    "we have to",
    "let's make sure",
    "let's ensure",
    "this is where we",
    "this handles",
    "this is necessary",
    "this function",
    "this method",
    "this block",
    "the following code",
    "below we",
)


class SelfNarratingRule:
    """Flags comments that narrate the code in first person instead of explaining why."""

    rule_id = "slop-005"
    name = "Self-Narrating Comment"
    description = (
        "Detects comments that narrate or describe code in first person instead of explaining why"
    )
    severity = Severity.WARN

    def check(self, source: bytes, tree: Tree, file_path: str) -> list[Finding]:
        if decode_source(source, file_path) is None:
            return []

        findings: list[Finding] = []
        for node in iter_comments(tree):
            text = node_text(node, source)
            if is_doc_comment(text):
                continue
            if first_line_with_prefix(text, NARRATING_PATTERNS) is None:
                continue
            findings.append(
                finding_at(
                    node,
                    file_path=file_path,
                    message="comment uses self-narrating language",
                    suggestion=(
                        "Rewrite to explain why, not narrate what, "
                        "or remove it if the code is self-explanatory."
                    ),
                )
            )
        return findings
