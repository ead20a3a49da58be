"""Resolved member types.

``ResolvedType`` is a closed union of four frozen variants. Every component
that branches on a type dispatches over these variants and raises
``TypeError`` for anything else.
"""

from dataclasses import dataclass
from enum import StrEnum

from skelgen.reflection.models import short_name


class PrimitiveKind(StrEnum):
    """Primitive kinds a member type can resolve to."""

    INT = "int"
    FLOAT = "float"
    STRING = "string"
    BOOL = "bool"
    ARRAY = "array"
    MIXED = "mixed"
    VOID = "void"
    OBJECT = "object"
    CALLABLE = "callable"
    CLOSURE = "closure"
    NULL = "null"


# Type spellings accepted in declarations and doc comments
PRIMITIVE_ALIASES: dict[str, PrimitiveKind] = {
    "int": PrimitiveKind.INT,
    "integer": PrimitiveKind.INT,
    "float": PrimitiveKind.FLOAT,
    "double": PrimitiveKind.FLOAT,
    "string": PrimitiveKind.STRING,
    "bool": PrimitiveKind.BOOL,
    "boolean": PrimitiveKind.BOOL,
    "true": PrimitiveKind.BOOL,
    "false": PrimitiveKind.BOOL,
    "array": PrimitiveKind.ARRAY,
    "iterable": PrimitiveKind.ARRAY,
    "mixed[]": PrimitiveKind.ARRAY,
    "array[]": PrimitiveKind.ARRAY,
    "mixed": PrimitiveKind.MIXED,
    "resource": PrimitiveKind.MIXED,
    "void": PrimitiveKind.VOID,
    "never": PrimitiveKind.VOID,
    "object": PrimitiveKind.OBJECT,
    "callable": PrimitiveKind.CALLABLE,
    "closure": PrimitiveKind.CLOSURE,
    "\\closure": PrimitiveKind.CLOSURE,
    "null": PrimitiveKind.NULL,
}

SELF_REFERENCES = frozenset({"self", "static", "$this"})

# Kinds whose value comes straight from the data provider
VALUE_KINDS = frozenset(
    {
        PrimitiveKind.INT,
        PrimitiveKind.FLOAT,
        PrimitiveKind.STRING,
        PrimitiveKind.BOOL,
        PrimitiveKind.ARRAY,
        PrimitiveKind.MIXED,
    }
)


@dataclass(frozen=True)
class Primitive:
    kind: PrimitiveKind


@dataclass(frozen=True)
class SelfReferential:
    """self, static or $this, bound to the declaring class."""

    class_name: str


@dataclass(frozen=True)
class Named:
    """A class or interface, fully qualified without the leading backslash."""

    name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", self.name.strip().lstrip("\\"))


@dataclass(frozen=True)
class ArrayOf:
    """Homogeneous list of ``element``. Never nests directly."""

    element: "ResolvedType"

    def __post_init__(self) -> None:
        if isinstance(self.element, ArrayOf):
            raise ValueError("ArrayOf cannot wrap another ArrayOf, use Primitive(array)")


ResolvedType = Primitive | SelfReferential | Named | ArrayOf

MIXED = Primitive(PrimitiveKind.MIXED)
VOID = Primitive(PrimitiveKind.VOID)


def primitive_kind(text: str) -> PrimitiveKind | None:
    """Map a type spelling to a primitive kind, or None for class names."""
    return PRIMITIVE_ALIASES.get(text.strip().lower())


def array_of(element: ResolvedType) -> ResolvedType:
    """Wrap ``element`` in ArrayOf, flattening nested arrays to Primitive(array)."""
    if isinstance(element, ArrayOf):
        return Primitive(PrimitiveKind.ARRAY)
    if isinstance(element, Primitive) and element.kind in (PrimitiveKind.ARRAY, PrimitiveKind.MIXED):
        return Primitive(PrimitiveKind.ARRAY)
    return ArrayOf(element)


def is_void(resolved: ResolvedType) -> bool:
    return isinstance(resolved, Primitive) and resolved.kind is PrimitiveKind.VOID


def class_name_of(resolved: ResolvedType) -> str | None:
    """Return the class a type refers to (element class for arrays)."""
    if isinstance(resolved, Named):
        return resolved.name
    if isinstance(resolved, SelfReferential):
        return resolved.class_name
    if isinstance(resolved, ArrayOf):
        return class_name_of(resolved.element)
    return None


def type_label(resolved: ResolvedType) -> str:
    """Short display label used in generated names, e.g. ``Int`` or ``UserArray``."""
    if isinstance(resolved, Primitive):
        return resolved.kind.value[0].upper() + resolved.kind.value[1:]
    if isinstance(resolved, SelfReferential):
        return short_name(resolved.class_name)
    if isinstance(resolved, Named):
        return short_name(resolved.name)
    if isinstance(resolved, ArrayOf):
        return type_label(resolved.element) + "Array"
    raise TypeError(f"Unhandled resolved type: {resolved!r}")


def type_key(resolved: ResolvedType) -> str:
    """Stable text form of a type, used as a cache key."""
    if isinstance(resolved, Primitive):
        return resolved.kind.value
    if isinstance(resolved, SelfReferential):
        return resolved.class_name
    if isinstance(resolved, Named):
        return resolved.name
    if isinstance(resolved, ArrayOf):
        return type_key(resolved.element) + "[]"
    raise TypeError(f"Unhandled resolved type: {resolved!r}")


__all__ = [
    "PrimitiveKind",
    "Primitive",
    "SelfReferential",
    "Named",
    "ArrayOf",
    "ResolvedType",
    "MIXED",
    "VOID",
    "VALUE_KINDS",
    "SELF_REFERENCES",
    "primitive_kind",
    "array_of",
    "is_void",
    "class_name_of",
    "type_label",
    "type_key",
]
