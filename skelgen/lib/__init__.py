"""Core library modules for skelgen."""

from skelgen.lib.config import GeneratorConfig, Settings, get_settings
from skelgen.lib.errors import SkelgenError
from skelgen.lib.logging import get_logger

__all__ = [
    "GeneratorConfig",
    "Settings",
    "SkelgenError",
    "get_settings",
    "get_logger",
]
