"""Error taxonomy for the generator with contextual error messages."""

from typing import Any


class SkelgenError(Exception):
    """Base exception for generator errors with context."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        """
        Initialize generator error.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            context: Additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "INTERNAL_ERROR"
        self.context = context or {}


class ReturnTypeNotFoundError(SkelgenError):
    """No declared or annotated type is available for a member in strict mode."""

    def __init__(self, class_name: str, method_name: str, parameter: str | None = None):
        if parameter:
            message = (
                f"Could not find type for parameter '{parameter}' "
                f"of method '{method_name}' in '{class_name}'."
            )
        else:
            message = f"Could not find return type of method '{method_name}' in '{class_name}'."
        super().__init__(
            message=message,
            error_code="RETURN_TYPE_NOT_FOUND",
            context={"class_name": class_name, "method": method_name, "parameter": parameter},
        )


class MockTargetNotResolvableError(SkelgenError):
    """A type requested for mocking does not resolve to a known class."""

    def __init__(self, type_name: str, parent_class: str, parent_method: str | None):
        super().__init__(
            message=(
                f"Class '{type_name}' does not exist, creating mock in parent class "
                f"'{parent_class}' for method '{parent_method}'."
            ),
            error_code="MOCK_TARGET_NOT_RESOLVABLE",
            context={
                "type_name": type_name,
                "parent_class": parent_class,
                "parent_method": parent_method,
            },
        )


class MockFinalClassError(SkelgenError):
    """A final class was requested for mocking without final bypass support."""

    def __init__(self, class_name: str):
        super().__init__(
            message=f"Final class '{class_name}' cannot be mocked, use interface instead.",
            error_code="MOCK_FINAL_CLASS",
            context={"class_name": class_name},
        )


class MockNotExistsError(SkelgenError):
    """A mock key was looked up before being registered."""

    def __init__(self, mock_key: str):
        super().__init__(
            message=f"Mock '{mock_key}' does not exist.",
            error_code="MOCK_NOT_EXISTS",
            context={"mock_key": mock_key},
        )


class InvalidClassNameError(SkelgenError):
    """A class name is empty or unknown to the reflection registry."""

    def __init__(self, class_name: str | None, reason: str = "is unknown"):
        super().__init__(
            message=f"Class name '{class_name}' {reason}.",
            error_code="INVALID_CLASS_NAME",
            context={"class_name": class_name},
        )


class FileNotExistsError(SkelgenError):
    """A source, dump or output file could not be found."""

    def __init__(self, path: str):
        super().__init__(
            message=f"File '{path}' does not exist.",
            error_code="FILE_NOT_EXISTS",
            context={"path": path},
        )


class CodeExtractError(SkelgenError):
    """Source text could not be read or tokenized."""

    def __init__(self, path: str, reason: str | None = None):
        message = f"Code can not be extracted from source '{path}'."
        if reason:
            message = f"{message} {reason}"
        super().__init__(
            message=message,
            error_code="CODE_EXTRACT_FAILURE",
            context={"path": path, "reason": reason},
        )


class InvalidMockBackendError(SkelgenError):
    """Unknown mocking framework selection."""

    def __init__(self, backend: str, supported: list[str]):
        super().__init__(
            message=f"Mock backend '{backend}' is not supported, use one of: {', '.join(supported)}.",
            error_code="INVALID_MOCK_BACKEND",
            context={"backend": backend, "supported": supported},
        )


class NotDirectoryError(SkelgenError):
    """A project source path is not a directory."""

    def __init__(self, path: str):
        super().__init__(
            message=f"Project source path '{path}' is not a directory.",
            error_code="NOT_A_DIRECTORY",
            context={"path": path},
        )


class ConfigurationError(SkelgenError):
    """Generator configuration file is unreadable or invalid."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message=message, error_code="CONFIG_ERROR", context=context)


__all__ = [
    "SkelgenError",
    "ReturnTypeNotFoundError",
    "MockTargetNotResolvableError",
    "MockFinalClassError",
    "MockNotExistsError",
    "InvalidClassNameError",
    "FileNotExistsError",
    "CodeExtractError",
    "InvalidMockBackendError",
    "NotDirectoryError",
    "ConfigurationError",
]
