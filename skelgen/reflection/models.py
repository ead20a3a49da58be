"""Reflection dump models.

A reflection dump is a JSON document exported on the PHP side from
``ReflectionClass`` data. These models mirror the parts of it the generator
consumes: modifiers, declared types, default values, doc comments and the
source location of each class.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def short_name(class_name: str) -> str:
    """Return the last segment of a namespaced name."""
    return class_name.rstrip("\\").rsplit("\\", 1)[-1]


def namespace_of(class_name: str) -> str:
    """Return the namespace part of a fully qualified name ('' for global)."""
    name = class_name.strip("\\")
    if "\\" not in name:
        return ""
    return name.rsplit("\\", 1)[0]


class ReflectedParameter(BaseModel):
    """One parameter of a reflected method."""

    model_config = ConfigDict(frozen=True)

    name: str
    position: int = 0
    type: str | None = None
    has_default: bool = False
    default: Any = None
    default_expression: str | None = Field(
        default=None,
        description="Raw PHP expression when the default is a constant",
    )


class ReflectedMethod(BaseModel):
    """One method as returned by ReflectionClass::getMethods()."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    declaring_class: str = Field(alias="class")
    return_type: str | None = None
    doc_comment: str | None = None
    is_public: bool = True
    is_protected: bool = False
    is_private: bool = False
    is_static: bool = False
    is_abstract: bool = False
    is_final: bool = False
    is_constructor: bool = False
    is_destructor: bool = False
    prototype: str | None = None
    parameters: tuple[ReflectedParameter, ...] = ()


class ReflectedClass(BaseModel):
    """One class, interface or trait of the host codebase."""

    model_config = ConfigDict(frozen=True)

    name: str
    file_name: str | None = None
    start_line: int | None = None
    is_abstract: bool = False
    is_final: bool = False
    is_interface: bool = False
    is_trait: bool = False
    is_internal: bool = False
    parent: str | None = None
    interfaces: tuple[str, ...] = ()
    traits: tuple[str, ...] = ()
    methods: tuple[ReflectedMethod, ...] = ()

    @property
    def short_name(self) -> str:
        return short_name(self.name)

    @property
    def namespace(self) -> str:
        return namespace_of(self.name)

    def get_method(self, name: str) -> ReflectedMethod | None:
        """Find a method by name (PHP method names are case-insensitive)."""
        lowered = name.lower()
        for method in self.methods:
            if method.name.lower() == lowered:
                return method
        return None

    @property
    def constructor(self) -> ReflectedMethod | None:
        for method in self.methods:
            if method.is_constructor:
                return method
        return None


class ReflectionDump(BaseModel):
    """Top level document of a reflection dump file."""

    classes: list[ReflectedClass] = Field(default_factory=list)


__all__ = [
    "ReflectedParameter",
    "ReflectedMethod",
    "ReflectedClass",
    "ReflectionDump",
    "short_name",
    "namespace_of",
]
