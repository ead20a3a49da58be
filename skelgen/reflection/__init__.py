"""Reflection data consumed by the generator."""

from skelgen.reflection.loader import load_registry, registry_from_data
from skelgen.reflection.models import (
    ReflectedClass,
    ReflectedMethod,
    ReflectedParameter,
    ReflectionDump,
)
from skelgen.reflection.registry import ClassRegistry

__all__ = [
    "ClassRegistry",
    "ReflectedClass",
    "ReflectedMethod",
    "ReflectedParameter",
    "ReflectionDump",
    "load_registry",
    "registry_from_data",
]
