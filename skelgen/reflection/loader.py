"""Reflection dump loader."""

import json
from pathlib import Path

from pydantic import ValidationError

from skelgen.lib.errors import CodeExtractError, FileNotExistsError
from skelgen.lib.logging import get_logger
from skelgen.reflection.models import ReflectionDump
from skelgen.reflection.registry import ClassRegistry

logger = get_logger(__name__)


def load_registry(path: str | Path) -> ClassRegistry:
    """
    Load a reflection dump file into a class registry.

    Args:
        path: Path to the JSON dump

    Returns:
        ClassRegistry with every dumped class

    Raises:
        FileNotExistsError: If the dump does not exist
        CodeExtractError: If the dump is not valid JSON or does not validate
    """
    dump_path = Path(path)
    if not dump_path.is_file():
        raise FileNotExistsError(str(dump_path))

    try:
        raw = json.loads(dump_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CodeExtractError(str(dump_path), str(e)) from e

    registry = registry_from_data(raw, source=str(dump_path))
    logger.info("reflection_loaded", path=str(dump_path), classes=len(registry))
    return registry


def registry_from_data(raw: object, source: str = "<memory>") -> ClassRegistry:
    """
    Build a registry from already decoded dump data.

    Accepts either the ``{"classes": [...]}`` document or a bare list.
    """
    if isinstance(raw, list):
        raw = {"classes": raw}
    try:
        dump = ReflectionDump.model_validate(raw)
    except ValidationError as e:
        raise CodeExtractError(source, f"Invalid reflection dump: {e}") from e
    return ClassRegistry(dump.classes)


__all__ = ["load_registry", "registry_from_data"]
