"""Mocking library backends."""

from skelgen.generator.mock.base import MockBackend
from skelgen.generator.mock.mockery import MockeryBackend
from skelgen.generator.mock.phpunit import PhpUnitBackend
from skelgen.lib.errors import InvalidMockBackendError

BACKENDS: dict[str, type[MockBackend]] = {
    MockeryBackend.name: MockeryBackend,
    PhpUnitBackend.name: PhpUnitBackend,
}


def get_backend(name: str) -> MockBackend:
    """
    Create the backend registered under ``name``.

    Raises:
        InvalidMockBackendError: If no backend has this name
    """
    backend = BACKENDS.get(name.lower())
    if backend is None:
        raise InvalidMockBackendError(name, sorted(BACKENDS))
    return backend()


__all__ = ["BACKENDS", "MockBackend", "MockeryBackend", "PhpUnitBackend", "get_backend"]
