"""In-memory class registry standing in for runtime reflection."""

from collections.abc import Iterable, Iterator

from skelgen.lib.errors import InvalidClassNameError
from skelgen.reflection.models import ReflectedClass, ReflectedMethod


def _key(name: str) -> str:
    return name.strip().lstrip("\\").lower()


class ClassRegistry:
    """Case-insensitive lookup of reflected classes by fully qualified name."""

    def __init__(self, classes: Iterable[ReflectedClass] = ()) -> None:
        self._classes: dict[str, ReflectedClass] = {}
        for cls in classes:
            self.add(cls)

    def add(self, cls: ReflectedClass) -> None:
        """Register (or replace) a class."""
        normalized = cls.model_copy(update={"name": cls.name.lstrip("\\")})
        self._classes[_key(cls.name)] = normalized

    def __len__(self) -> int:
        return len(self._classes)

    def __iter__(self) -> Iterator[ReflectedClass]:
        return iter(self._classes.values())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.exists(name)

    def exists(self, name: str | None) -> bool:
        if not name:
            return False
        return _key(name) in self._classes

    def find(self, name: str | None) -> ReflectedClass | None:
        if not name:
            return None
        return self._classes.get(_key(name))

    def get(self, name: str | None) -> ReflectedClass:
        """
        Get a class by name.

        Raises:
            InvalidClassNameError: If the name is empty or unknown
        """
        if not name:
            raise InvalidClassNameError(name, "could not be empty")
        cls = self.find(name)
        if cls is None:
            raise InvalidClassNameError(name)
        return cls

    def is_class_like(self, name: str | None) -> bool:
        """True for known classes and interfaces (traits are not types)."""
        cls = self.find(name)
        return cls is not None and not cls.is_trait

    def methods(self, name: str) -> tuple[ReflectedMethod, ...]:
        return self.get(name).methods

    def method(self, class_name: str, method_name: str) -> ReflectedMethod | None:
        cls = self.find(class_name)
        if cls is None:
            return None
        return cls.get_method(method_name)

    def parent_chain(self, name: str) -> list[ReflectedClass]:
        """Return the known ancestors of a class, nearest first."""
        chain: list[ReflectedClass] = []
        seen = {_key(name)}
        current = self.find(name)
        while current is not None and current.parent:
            if _key(current.parent) in seen:
                break
            seen.add(_key(current.parent))
            parent = self.find(current.parent)
            if parent is None:
                break
            chain.append(parent)
            current = parent
        return chain

    def parent_classes_and_traits(self, name: str) -> tuple[list[str], list[str]]:
        """
        Return the parent class names and the traits of the topmost ancestor.

        Returns:
            Tuple of (parent class names, trait names)
        """
        chain = self.parent_chain(name)
        parents = [cls.name for cls in chain]
        top = chain[-1] if chain else self.find(name)
        traits = [trait.lstrip("\\") for trait in top.traits] if top else []
        return parents, traits


__all__ = ["ClassRegistry"]
