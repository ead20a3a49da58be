"""Mockery backend: ``\\Mockery::namedMock`` with ``shouldReceive`` expectations."""

from skelgen.generator.mock.base import MockBackend
from skelgen.generator.php import INDENT, quote


class MockeryBackend(MockBackend):
    name = "mockery"
    mock_interface = "Mockery\\MockInterface"

    def header(self, target: str, method_names: list[str]) -> list[str]:
        return [f"$mock = \\Mockery::namedMock('Mock\\{target}', \\{target}::class);"]

    def expectation(self, method_name: str) -> list[str]:
        times = f"$mockTimes[{quote(method_name)}]"
        return [
            f"$mockMethod = $mock->shouldReceive({quote(method_name)});",
            f"if (null === {times}) {{",
            f"{INDENT}$mockMethod->zeroOrMoreTimes();",
            f"}} elseif (is_array({times})) {{",
            f"{INDENT}$mockMethod->times({times}['times']);",
            "} else {",
            f"{INDENT}$mockMethod->times({times});",
            "}",
        ]

    def return_value(self, expression: str) -> str:
        return f"$mockMethod->andReturn({expression});"

    def return_null(self) -> str:
        return "$mockMethod->andReturnNull();"

    def return_self(self) -> str:
        return "$mockMethod->andReturnSelf();"
