"""Descriptive test method names."""

from skelgen.generator.types import ResolvedType, class_name_of, is_void, type_label


def ucfirst(text: str) -> str:
    return text[:1].upper() + text[1:]


def lcfirst(text: str) -> str:
    return text[:1].lower() + text[1:]


def build_test_method_name(method_name: str, return_type: ResolvedType, parameter_names: list[str]) -> str:
    """
    Build a test method name from a method name and its return type.

    Rules are checked in order:
        create/make in the name   -> <m>ShouldInitializeAndReturn<Type>
        Event in the return type  -> <m>ShouldFire<Type>
        handle in the name        -> <m>ShouldProcess<Params>[AndReturn<Type>]
        anything else             -> <m>ShouldReturn<Type>

    Args:
        method_name: Original method name
        return_type: Resolved return type
        parameter_names: Parameter names in declaration order

    Returns:
        Test method name without a collision suffix
    """
    base = lcfirst(method_name)
    lowered = method_name.lower()
    label = type_label(return_type)
    full_type = class_name_of(return_type) or label

    if "create" in lowered or "make" in lowered:
        return f"{base}ShouldInitializeAndReturn{label}"
    if "Event" in full_type:
        return f"{base}ShouldFire{label}"
    if "handle" in lowered:
        name = base + "ShouldProcess" + "".join(ucfirst(param) for param in parameter_names)
        if is_void(return_type):
            return name
        return f"{name}AndReturn{label}"
    return f"{base}ShouldReturn{label}"


class NameCounter:
    """Disambiguate names within one generated class: name, name2, name3..."""

    def __init__(self) -> None:
        self._seen: dict[str, int] = {}

    def claim(self, name: str) -> str:
        count = self._seen.get(name, 0) + 1
        self._seen[name] = count
        if count == 1:
            return name
        claimed = f"{name}{count}"
        # A suffixed name can itself collide with a later plain name
        while claimed in self._seen:
            count += 1
            claimed = f"{name}{count}"
        self._seen[name] = count
        self._seen[claimed] = 1
        return claimed


__all__ = ["NameCounter", "lcfirst", "build_test_method_name", "ucfirst"]
