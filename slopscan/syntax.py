"""Syntax-tree traversal and comment text helpers shared by rules."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator

from tree_sitter import Node, Tree

logger = logging.getLogger(__name__)

COMMENT_KIND = "comment"


def iter_nodes(root: Node) -> Iterator[Node]:
    """Yield every node under ``root`` depth-first, pre-order, in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def iter_comments(tree: Tree) -> Iterator[Node]:
    """Yield every comment node of ``tree`` in document order."""
    for node in iter_nodes(tree.root_node):
        if node.type == COMMENT_KIND:
            yield node


def walk_comments(tree: Tree, visitor: Callable[[Node], None]) -> None:
    """Invoke ``visitor`` on each comment node of ``tree`` in document order."""
    for node in iter_comments(tree):
        visitor(node)


def decode_source(source: bytes, file_path: str) -> str | None:
    """Return ``source`` as text, or ``None`` when it is not valid UTF-8."""
    try:
        return source.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug("%s is not valid UTF-8, skipping", file_path)
        return None


def node_text(node: Node, source: bytes) -> str:
    """Return the verbatim text covered by ``node``."""
    return source[node.start_byte : node.end_byte].decode("utf-8")


def is_doc_comment(text: str) -> bool:
    return text.startswith("/**")


def strip_comment_markers(text: str) -> str:
    """Remove the leading ``//`` or ``/*`` and the trailing ``*/`` of a comment."""
    cleaned = text.strip()
    if cleaned.startswith("//") or cleaned.startswith("/*"):
        cleaned = cleaned[2:]
    return cleaned.removesuffix("*/")


def comment_lines(text: str) -> list[str]:
    """Split a comment into trimmed content lines without ``*`` continuation markers."""
    lines: list[str] = []
    for line in strip_comment_markers(text).splitlines():
        lines.append(line.strip().removeprefix("*").strip())
    return lines


def line_comment_content(text: str) -> str:
    """Return the trimmed content of a ``//`` comment."""
    return text.removeprefix("//").strip()


def first_line_with_prefix(text: str, prefixes: tuple[str, ...]) -> str | None:
    """Return the first comment line starting with one of ``prefixes`` (case-insensitive)."""
    for line in comment_lines(text):
        lowered = line.lower()
        if lowered.startswith(prefixes):
            return line
    return None
