"""PHP literal export, short array syntax."""

from typing import Any

INDENT = "    "


def quote(text: str) -> str:
    """Single-quoted PHP string literal."""
    return "'" + text.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _scalar(value: Any) -> str:
    if value is None:
        return "NULL"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        text = repr(value)
        return text if ("." in text or "e" in text or "inf" in text or "nan" in text) else text + ".0"
    return quote(str(value))


def _items(value: dict | list | tuple) -> list[tuple[Any, Any]]:
    if isinstance(value, dict):
        return list(value.items())
    return list(enumerate(value))


def _key(key: Any) -> str:
    if isinstance(key, bool):
        return "1" if key else "0"
    if isinstance(key, int):
        return str(key)
    return quote(str(key))


def export(value: Any, indent: int = 0) -> str:
    """
    Export a value the way ``var_export`` does, with short arrays.

    Lists and dicts become keyed, multi-line ``[...]`` blocks. Lines after
    the first are indented by ``indent`` levels.
    """
    if not isinstance(value, (dict, list, tuple)):
        return _scalar(value)
    items = _items(value)
    if not items:
        return "[]"
    pad = INDENT * indent
    lines = ["["]
    for key, item in items:
        lines.append(f"{pad}{INDENT}{_key(key)} => {export(item, indent + 1)},")
    lines.append(f"{pad}]")
    return "\n".join(lines)


def inline(value: Any) -> str:
    """
    Export a value on one line.

    Lists keep implicit keys, dicts are written with ``=>``.
    """
    if isinstance(value, dict):
        return "[" + ", ".join(f"{_key(key)} => {inline(item)}" for key, item in value.items()) + "]"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(inline(item) for item in value) + "]"
    return _scalar(value)


def method_map(names: list[str], value: Any) -> str:
    """One-line ``['name' => value, ...]`` map used by mock helper defaults."""
    return "[" + ", ".join(f"{quote(name)} => {inline(value)}" for name in names) + "]"


__all__ = ["export", "inline", "quote", "method_map"]
