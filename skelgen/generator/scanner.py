"""Lexical mini-scanner for PHP source text.

Reflection does not expose import aliases, so they are recovered from the
raw source. The scanner only understands what it needs: names, comments,
string literals and a handful of punctuation marks.
"""

import re
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from skelgen.lib.errors import CodeExtractError
from skelgen.lib.logging import get_logger
from skelgen.reflection.models import short_name

if TYPE_CHECKING:
    from skelgen.generator.files import LocalFileSystem

logger = get_logger(__name__)

_TOKEN_RE = re.compile(
    r"""
      (?P<comment>//[^\n]*|\#(?!\[)[^\n]*|/\*.*?\*/)
    | (?P<string>'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*")
    | (?P<variable>\$[A-Za-z_]\w*)
    | (?P<name>\\?[A-Za-z_]\w*(?:\\[A-Za-z_]\w*)*\\?)
    | (?P<punct>::|[{},;()&])
    | (?P<other>\S)
    """,
    re.VERBOSE | re.DOTALL,
)

CLASS_LIKE_KEYWORDS = frozenset({"class", "interface", "trait", "enum"})


def tokenize(source: str) -> list[tuple[str, str]]:
    """Split source text into (kind, text) tokens, dropping comments and whitespace."""
    tokens: list[tuple[str, str]] = []
    for match in _TOKEN_RE.finditer(source):
        kind = match.lastgroup
        if kind is None or kind == "comment":
            continue
        tokens.append((kind, match.group()))
    return tokens


class ImportTable(Mapping[str, str]):
    """Immutable alias to fully qualified name table of one source file.

    Aliases are matched case-insensitively, as PHP does.
    """

    def __init__(self, entries: Iterable[tuple[str, str]] = ()) -> None:
        self._entries: dict[str, str] = {}
        self._aliases: dict[str, str] = {}
        for alias, full_name in entries:
            full_name = full_name.strip().lstrip("\\")
            self._entries[alias] = full_name
            self._aliases.setdefault(alias.lower(), full_name)

    def __getitem__(self, alias: str) -> str:
        return self._aliases[alias.lower()]

    def __contains__(self, alias: object) -> bool:
        return isinstance(alias, str) and alias.lower() in self._aliases

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ImportTable({self._entries!r})"

    def find_by_short_name(self, name: str) -> list[str]:
        """Return imported names whose last segment equals ``name``."""
        lowered = name.lower()
        return [full for full in self._entries.values() if short_name(full).lower() == lowered]

    def merged(self, *others: "ImportTable") -> "ImportTable":
        """Return a new table with entries of ``others`` added; earlier aliases win."""
        entries = list(self._entries.items())
        for other in others:
            entries.extend(other._entries.items())
        seen: set[str] = set()
        unique = []
        for alias, full_name in entries:
            if alias.lower() in seen:
                continue
            seen.add(alias.lower())
            unique.append((alias, full_name))
        return ImportTable(unique)


EMPTY_IMPORTS = ImportTable()


def _is_class_keyword(tokens: list[tuple[str, str]], index: int) -> bool:
    kind, text = tokens[index]
    if kind != "name" or text.lower() not in CLASS_LIKE_KEYWORDS:
        return False
    if index > 0:
        previous = tokens[index - 1][1].lower()
        # Foo::class constants and anonymous classes
        if previous in ("::", "new"):
            return False
    if text.lower() == "enum":
        return index + 1 < len(tokens) and tokens[index + 1][0] == "name"
    return True


def _parse_use_clause(clause: list[tuple[str, str]], prefix: str = "") -> tuple[str, str] | None:
    names = [text for kind, text in clause if kind == "name"]
    if not names:
        return None
    full_name = prefix + names[0].lstrip("\\")
    alias = short_name(full_name)
    if len(names) >= 3 and names[1].lower() == "as":
        alias = names[2]
    return alias, full_name


def _parse_use_statement(statement: list[tuple[str, str]]) -> list[tuple[str, str]]:
    if not statement:
        return []
    first = statement[0][1].lower()
    if first in ("function", "const"):
        return []

    # Group use: use A\B\{C, D as E};
    if "{" in (text for _, text in statement):
        brace = next(i for i, (_, text) in enumerate(statement) if text == "{")
        prefix = "".join(text for kind, text in statement[:brace] if kind == "name").lstrip("\\")
        if prefix and not prefix.endswith("\\"):
            prefix += "\\"
        inner = [token for token in statement[brace + 1 :] if token[1] != "}"]
        return _split_clauses(inner, prefix)

    return _split_clauses(statement)


def _split_clauses(tokens: list[tuple[str, str]], prefix: str = "") -> list[tuple[str, str]]:
    entries: list[tuple[str, str]] = []
    clause: list[tuple[str, str]] = []
    for token in [*tokens, ("punct", ",")]:
        if token[1] == ",":
            entry = _parse_use_clause(clause, prefix)
            if entry is not None:
                entries.append(entry)
            clause = []
        else:
            clause.append(token)
    return entries


def scan_imports(source: str) -> ImportTable:
    """
    Collect the ``use`` imports of a source file.

    Handles aliases, comma lists and group uses. ``use function`` and
    ``use const`` are ignored. Scanning stops at the first class-like
    declaration so that trait uses inside a class body are not imports.

    Args:
        source: PHP source text

    Returns:
        ImportTable for the file
    """
    tokens = tokenize(source)
    entries: list[tuple[str, str]] = []
    index = 0
    while index < len(tokens):
        kind, text = tokens[index]
        if _is_class_keyword(tokens, index):
            break
        if kind == "name" and text.lower() == "use":
            following = tokens[index + 1] if index + 1 < len(tokens) else None
            # Closure use ($x) is not an import
            if following is not None and following[1] == "(":
                index += 1
                continue
            end = index + 1
            while end < len(tokens) and tokens[end][1] != ";":
                end += 1
            entries.extend(_parse_use_statement(tokens[index + 1 : end]))
            index = end
        index += 1
    return ImportTable(entries)


def scan_method_names(source: str) -> list[str]:
    """Return every name declared with the ``function`` keyword, in order."""
    tokens = tokenize(source)
    names: list[str] = []
    for index, (kind, text) in enumerate(tokens):
        if kind != "name" or text.lower() != "function":
            continue
        # use function imports
        if index > 0 and tokens[index - 1][1].lower() == "use":
            continue
        cursor = index + 1
        if cursor < len(tokens) and tokens[cursor][1] == "&":
            cursor += 1
        if cursor < len(tokens) and tokens[cursor][0] == "name":
            names.append(tokens[cursor][1])
    return names


def scan_class_declaration(source: str) -> tuple[str, str] | None:
    """
    Find the first declared class-like of a file.

    Returns:
        Tuple of (namespace, short class name) or None when the file
        declares no class, interface, trait or enum
    """
    tokens = tokenize(source)
    namespace = ""
    for index, (kind, text) in enumerate(tokens):
        if kind != "name":
            continue
        if text.lower() == "namespace" and index + 1 < len(tokens) and tokens[index + 1][0] == "name":
            namespace = tokens[index + 1][1].strip("\\")
            continue
        if _is_class_keyword(tokens, index) and index + 1 < len(tokens):
            candidate_kind, candidate = tokens[index + 1]
            if candidate_kind == "name":
                return namespace, candidate
    return None


class SourceScanner:
    """Per-run cache of scanned source files."""

    def __init__(self, files: "LocalFileSystem") -> None:
        self._files = files
        self._imports: dict[str, ImportTable] = {}
        self._methods: dict[str, list[str]] = {}

    def _read(self, path: str | Path) -> str:
        try:
            return self._files.read_file(path)
        except UnicodeDecodeError as e:
            raise CodeExtractError(str(path), str(e)) from e

    def imports(self, path: str | Path | None) -> ImportTable:
        """Import table of a file, EMPTY_IMPORTS for internal classes."""
        if not path:
            return EMPTY_IMPORTS
        key = str(path)
        if key not in self._imports:
            self._imports[key] = scan_imports(self._read(path))
            logger.debug("imports_scanned", path=key, count=len(self._imports[key]))
        return self._imports[key]

    def method_names(self, path: str | Path) -> list[str]:
        """Method names declared in a file, cached until ``forget`` is called."""
        key = str(path)
        if key not in self._methods:
            self._methods[key] = scan_method_names(self._read(path))
        return self._methods[key]

    def forget(self, path: str | Path) -> None:
        """Drop cached results of a file after it was rewritten."""
        self._imports.pop(str(path), None)
        self._methods.pop(str(path), None)


__all__ = [
    "ImportTable",
    "EMPTY_IMPORTS",
    "SourceScanner",
    "tokenize",
    "scan_imports",
    "scan_method_names",
    "scan_class_declaration",
]
