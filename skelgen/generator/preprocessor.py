"""Per-class hook that filters and rewrites generated test methods."""

from typing import Protocol, runtime_checkable

from skelgen.reflection.models import ReflectedClass, ReflectedMethod


@runtime_checkable
class TestPreprocessor(Protocol):
    """Hook registered for one class under test.

    ``should_be_tested`` can drop a method; ``process`` can rename the test
    method and inject extra statements after the call.
    """

    __test__ = False

    def should_be_tested(self, cls: ReflectedClass, method: ReflectedMethod) -> bool: ...

    def process(
        self,
        cls: ReflectedClass,
        method: ReflectedMethod,
        test_method_name: str,
        additional: str,
    ) -> tuple[str, str]: ...


class MethodFilterPreprocessor:
    """Preprocessor that limits generation to a set of method names."""

    def __init__(self, methods: list[str] | None = None, skip: list[str] | None = None) -> None:
        self.methods = {name.lower() for name in methods or []}
        self.skip = {name.lower() for name in skip or []}

    def should_be_tested(self, cls: ReflectedClass, method: ReflectedMethod) -> bool:
        name = method.name.lower()
        if name in self.skip:
            return False
        return not self.methods or name in self.methods

    def process(
        self,
        cls: ReflectedClass,
        method: ReflectedMethod,
        test_method_name: str,
        additional: str,
    ) -> tuple[str, str]:
        return test_method_name, additional


__all__ = ["MethodFilterPreprocessor", "TestPreprocessor"]
