"""Redundant-comment rule: comments that restate the adjacent code."""

from __future__ import annotations

from tree_sitter import Node, Tree

from slopscan.rules.base import Finding, Severity, finding_at
from slopscan.syntax import (
    COMMENT_KIND,
    decode_source,
    is_doc_comment,
    iter_comments,
    iter_nodes,
    node_text,
)
from slopscan.tokens import extract_code_tokens, extract_comment_tokens, overlap_ratio

OVERLAP_THRESHOLD = 0.7
MIN_COMMENT_TOKENS = 3

DIRECTIVE_PATTERNS = (
    "todo",
    "fixme",
    "hack",
    "xxx",
    "note:",
    "bug",
    "eslint-disable",
    "eslint-enable",
    "@ts-ignore",
    "@ts-expect-error",
    "@ts-nocheck",
    "prettier-ignore",
    "istanbul ignore",
    "c8 ignore",
    "@param",
    "@returns",
    "@return",
    "@type",
    "@typedef",
    "@template",
    "@see",
    "@deprecated",
    "@example",
    "@throws",
)

IDENTIFIER_KINDS = frozenset(
    {
        "identifier",
        "property_identifier",
        "shorthand_property_identifier",
        "shorthand_property_identifier_pattern",
        "type_identifier",
    }
)


class RedundantCommentRule:
    """Detects comments whose words mostly repeat the identifiers of the code they annotate."""

    rule_id = "slop-001"
    name = "Redundant Comment"
    description = "Detects comments that restate what the adjacent code already says"
    severity = Severity.WARN

    def check(self, source: bytes, tree: Tree, file_path: str) -> list[Finding]:
        if decode_source(source, file_path) is None:
            return []

        findings: list[Finding] = []
        for node in iter_comments(tree):
            if self._restates_code(node, source):
                findings.append(
                    finding_at(
                        node,
                        file_path=file_path,
                        message="comment restates the adjacent code",
                        suggestion=(
                            "Remove this comment: it restates the code without adding context."
                        ),
                    )
                )
        return findings

    def _restates_code(self, node: Node, source: bytes) -> bool:
        text = node_text(node, source)
        if is_doc_comment(text):
            return False

        lowered = text.lower()
        if any(pattern in lowered for pattern in DIRECTIVE_PATTERNS):
            return False

        comment_tokens = extract_comment_tokens(text)
        if len(comment_tokens) < MIN_COMMENT_TOKENS:
            return False

        code_node = find_adjacent_code(node)
        if code_node is None:
            return False

        identifiers = collect_identifiers(code_node, source)
        if not identifiers:
            return False

        code_tokens = extract_code_tokens(identifiers)
        return overlap_ratio(comment_tokens, code_tokens) >= OVERLAP_THRESHOLD


def find_adjacent_code(comment: Node) -> Node | None:
    """Return the code node a comment annotates.

    A trailing comment binds to the preceding sibling that ends on its line;
    otherwise the comment binds to the next non-comment sibling.
    """
    comment_row = comment.start_point[0]

    sibling = comment.prev_named_sibling
    while sibling is not None:
        if sibling.type != COMMENT_KIND:
            if sibling.end_point[0] == comment_row:
                return sibling
            break
        sibling = sibling.prev_named_sibling

    sibling = comment.next_named_sibling
    while sibling is not None:
        if sibling.type != COMMENT_KIND:
            return sibling
        sibling = sibling.next_named_sibling

    return None


def collect_identifiers(node: Node, source: bytes) -> list[str]:
    return [
        node_text(child, source) for child in iter_nodes(node) if child.type in IDENTIFIER_KINDS
    ]
