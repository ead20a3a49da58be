"""CLI exit codes for consistent error reporting.

| Code | Meaning                    | Recommended Action                         |
|------|----------------------------|--------------------------------------------|
| 0    | Success                    | -                                          |
| 1    | General error              | Check logs                                 |
| 2    | Invalid arguments          | Check command syntax                       |
| 3    | Class not found            | Check the class name and reflection dump   |
| 4    | File not found             | Check the source or dump path              |
| 5    | Code extraction failed     | Check the source file declares a class     |
| 6    | Mock error                 | Check mocked types, finals and interfaces  |
| 7    | Type not found             | Annotate the member or use lenient mode    |
| 30   | Configuration error        | Check settings and the rules file          |
"""

from skelgen.lib.errors import SkelgenError


class ExitCode:
    """Standard exit codes for the skelgen CLI."""

    SUCCESS = 0
    """Command completed successfully."""

    ERROR = 1
    """General error occurred. Check logs for details."""

    INVALID_ARGS = 2
    """Invalid arguments provided. Check command syntax."""

    CLASS_NOT_FOUND = 3
    """Class is unknown to the reflection dump."""

    FILE_NOT_FOUND = 4
    """Source, dump or project path does not exist."""

    CODE_EXTRACT_FAILED = 5
    """Source file could not be read or declares no class."""

    MOCK_ERROR = 6
    """A type could not be mocked."""

    TYPE_NOT_FOUND = 7
    """A member type is missing in strict mode."""

    CONFIG_ERROR = 30
    """Configuration error."""


# Error codes raised by the generator mapped to process exit codes
ERROR_CODE_EXITS = {
    "INVALID_CLASS_NAME": ExitCode.CLASS_NOT_FOUND,
    "FILE_NOT_EXISTS": ExitCode.FILE_NOT_FOUND,
    "NOT_A_DIRECTORY": ExitCode.FILE_NOT_FOUND,
    "CODE_EXTRACT_FAILURE": ExitCode.CODE_EXTRACT_FAILED,
    "MOCK_TARGET_NOT_RESOLVABLE": ExitCode.MOCK_ERROR,
    "MOCK_FINAL_CLASS": ExitCode.MOCK_ERROR,
    "MOCK_NOT_EXISTS": ExitCode.MOCK_ERROR,
    "RETURN_TYPE_NOT_FOUND": ExitCode.TYPE_NOT_FOUND,
    "INVALID_MOCK_BACKEND": ExitCode.INVALID_ARGS,
    "CONFIG_ERROR": ExitCode.CONFIG_ERROR,
}


def exit_code_for(error: SkelgenError) -> int:
    return ERROR_CODE_EXITS.get(error.error_code, ExitCode.ERROR)


def get_exit_code_description(code: int) -> str:
    """
    Get a human-readable description for an exit code.

    Args:
        code: Exit code number

    Returns:
        Description string
    """
    descriptions = {
        0: "Success",
        1: "General error - check logs",
        2: "Invalid arguments - check command syntax",
        3: "Class not found - check the class name and reflection dump",
        4: "File not found - check the source or dump path",
        5: "Code extraction failed - check the source file declares a class",
        6: "Mock error - check mocked types, finals and interfaces",
        7: "Type not found - annotate the member or use lenient mode",
        30: "Configuration error",
    }
    return descriptions.get(code, f"Unknown exit code: {code}")


__all__ = ["ExitCode", "exit_code_for", "get_exit_code_description"]
