"""tree-sitter parser registry keyed by file extension."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from tree_sitter import Language, Parser, Tree

logger = logging.getLogger(__name__)


class ParseError(RuntimeError):
    """Raised when a source file cannot be turned into a syntax tree."""


class ParserUnavailableError(RuntimeError):
    """Raised when a grammar cannot be loaded for an extension."""


def _javascript_language() -> Language:
    import tree_sitter_javascript

    return Language(tree_sitter_javascript.language())


def _typescript_language() -> Language:
    import tree_sitter_typescript

    return Language(tree_sitter_typescript.language_typescript())


def _tsx_language() -> Language:
    import tree_sitter_typescript

    return Language(tree_sitter_typescript.language_tsx())


GRAMMARS: dict[str, Callable[[], Language]] = {
    "javascript": _javascript_language,
    "typescript": _typescript_language,
    "tsx": _tsx_language,
}

EXTENSION_GRAMMARS: dict[str, str] = {
    "js": "javascript",
    "jsx": "javascript",
    "mjs": "javascript",
    "cjs": "javascript",
    "ts": "typescript",
    "mts": "typescript",
    "cts": "typescript",
    "tsx": "tsx",
}

SUPPORTED_EXTENSIONS = frozenset(EXTENSION_GRAMMARS)


class LanguageParser:
    """A reusable parser for one grammar.

    tree-sitter parsers carry mutable parse state, so ``parse`` is serialized
    per instance.
    """

    def __init__(self, grammar: str, language: Language) -> None:
        self.grammar = grammar
        self._parser = Parser(language)
        self._lock = threading.Lock()

    def parse(self, source: bytes) -> Tree:
        with self._lock:
            tree = self._parser.parse(source)
        if tree is None:
            raise ParseError(f"Failed to parse {self.grammar} source")
        return tree


class ParserRegistry:
    """Builds parsers lazily and caches one instance per extension."""

    def __init__(self, grammars: dict[str, Callable[[], Language]] | None = None) -> None:
        self._grammars = grammars if grammars is not None else GRAMMARS
        self._parsers: dict[str, LanguageParser] = {}
        self._failed: set[str] = set()

    def parser_for(self, extension: str) -> LanguageParser | None:
        """Return the parser for ``extension``, or ``None`` when unsupported.

        A grammar that fails to load raises ``ParserUnavailableError`` once;
        later lookups for that extension return ``None``.
        """
        ext = extension.lower().lstrip(".")
        cached = self._parsers.get(ext)
        if cached is not None:
            return cached
        if ext in self._failed:
            return None

        grammar = EXTENSION_GRAMMARS.get(ext)
        if grammar is None or grammar not in self._grammars:
            return None

        try:
            language = self._grammars[grammar]()
            parser = LanguageParser(grammar, language)
        except (ImportError, OSError, TypeError, ValueError) as exc:
            self._failed.add(ext)
            raise ParserUnavailableError(
                f"Failed to set {grammar} language for .{ext}: {exc}"
            ) from exc

        logger.debug("Loaded %s grammar for .%s", grammar, ext)
        self._parsers[ext] = parser
        return parser
