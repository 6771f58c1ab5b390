"""Commented-out code rule."""

from __future__ import annotations

from tree_sitter import Node, Tree

from slopscan.rules.base import Finding, Severity, finding_at
from slopscan.syntax import (
    comment_lines,
    decode_source,
    is_doc_comment,
    iter_comments,
    line_comment_content,
    node_text,
)

CODE_KEYWORDS = (
    "function",
    "const",
    "let",
    "var",
    "if",
    "else",
    "for",
    "while",
    "return",
    "import",
    "export",
    "class",
    "switch",
    "case",
    "break",
    "continue",
    "throw",
    "try",
    "catch",
    "finally",
    "new",
    "async",
    "await",
)

CODE_LINE_THRESHOLD = 0.6

CODE_TERMINATORS = (";", "{", "}", ")")
ASSIGNMENT_OPERATORS = (" = ", " += ", " => ", " -= ")

SUGGESTION = "Remove commented-out code and rely on version control to preserve old code."


class CommentedOutCodeRule:
    """Groups adjacent line comments and block comments and flags those that read as code."""

    rule_id = "slop-004"
    name = "Commented-Out Code"
    description = "Detects blocks of commented-out code that should be removed"
    severity = Severity.WARN

    def check(self, source: bytes, tree: Tree, file_path: str) -> list[Finding]:
        if decode_source(source, file_path) is None:
            return []

        comments = [(node, node_text(node, source)) for node in iter_comments(tree)]
        findings: list[Finding] = []

        index = 0
        while index < len(comments):
            node, text = comments[index]

            if text.startswith("/*"):
                if not is_exempt_block(text) and _block_is_code(text):
                    findings.append(
                        finding_at(
                            node,
                            file_path=file_path,
                            message="block comment contains commented-out code",
                            suggestion=SUGGESTION,
                        )
                    )
                index += 1
                continue

            if is_exempt_line(line_comment_content(text)):
                index += 1
                continue

            group_end = _group_end(comments, index)
            group = comments[index:group_end]
            if len(group) == 1:
                if looks_like_statement(line_comment_content(text)):
                    findings.append(
                        finding_at(
                            node,
                            file_path=file_path,
                            message="comment contains commented-out code",
                            suggestion=SUGGESTION,
                        )
                    )
            elif _group_is_code([line_comment_content(item_text) for _, item_text in group]):
                last_node = group[-1][0]
                findings.append(
                    finding_at(
                        node,
                        file_path=file_path,
                        message="comment group contains commented-out code",
                        suggestion=SUGGESTION,
                        end_byte=last_node.end_byte,
                    )
                )

            index = group_end

        return findings


def _group_end(comments: list[tuple[Node, str]], start: int) -> int:
    """Return the exclusive end index of the ``//`` run beginning at ``start``."""
    end = start + 1
    while end < len(comments):
        prev_node, prev_text = comments[end - 1]
        curr_node, curr_text = comments[end]
        if not prev_text.startswith("//") or not curr_text.startswith("//"):
            break
        if curr_node.start_point[0] != prev_node.start_point[0] + 1:
            break
        if is_exempt_line(line_comment_content(curr_text)):
            break
        end += 1
    return end


def is_exempt_block(text: str) -> bool:
    return is_doc_comment(text) or "spdx-" in text.lower()


def is_exempt_line(line: str) -> bool:
    """Annotation, fixture ``expect:`` and SPDX lines are never code."""
    trimmed = line.strip()
    return (
        trimmed.startswith("@")
        or trimmed.startswith("expect:")
        or trimmed.lower().startswith("spdx-")
    )


def looks_like_code(line: str) -> bool:
    trimmed = line.strip()
    if not trimmed or is_exempt_line(trimmed):
        return False

    if trimmed.endswith(CODE_TERMINATORS):
        return True

    lowered = trimmed.lower()
    for keyword in CODE_KEYWORDS:
        if lowered.startswith(keyword) and trimmed[len(keyword) : len(keyword) + 1] in {
            " ",
            "(",
            "{",
        }:
            return True

    if any(operator in trimmed for operator in ASSIGNMENT_OPERATORS):
        return True

    return ".(" in trimmed or ("(" in trimmed and "." in trimmed)


def looks_like_statement(content: str) -> bool:
    """A lone ``//`` comment counts as code only when it reads as one full statement."""
    if not content or is_exempt_line(content):
        return False
    if not content.endswith(";"):
        return False
    lowered = content.lower()
    return "(" in content or "=" in content or lowered.startswith(CODE_KEYWORDS)


def code_line_ratio(lines: list[str]) -> float:
    if not lines:
        return 0.0
    code_lines = sum(1 for line in lines if looks_like_code(line))
    return code_lines / len(lines)


def _group_is_code(contents: list[str]) -> bool:
    non_empty = [line for line in contents if line]
    if len(non_empty) < 2:
        return False
    return code_line_ratio(non_empty) >= CODE_LINE_THRESHOLD


def _block_is_code(text: str) -> bool:
    if not text.endswith("*/"):
        return False
    lines = [line for line in comment_lines(text.strip()) if line]
    if len(lines) < 2:
        return False
    return code_line_ratio(lines) >= CODE_LINE_THRESHOLD
