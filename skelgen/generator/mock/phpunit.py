"""PHPUnit backend: ``getMockBuilder`` mocks with ``expects``/``willReturn``."""

from skelgen.generator.mock.base import MockBackend
from skelgen.generator.php import INDENT, quote


class PhpUnitBackend(MockBackend):
    name = "phpunit"
    mock_interface = "PHPUnit\\Framework\\MockObject\\MockObject"

    def header(self, target: str, method_names: list[str]) -> list[str]:
        only_methods = ", ".join(quote(name) for name in method_names)
        return [
            f"$mock = $this->getMockBuilder(\\{target}::class)",
            f"{INDENT}->disableOriginalConstructor()",
            f"{INDENT}->onlyMethods([{only_methods}])",
            f"{INDENT}->getMock();",
        ]

    def expectation(self, method_name: str) -> list[str]:
        times = f"$mockTimes[{quote(method_name)}]"
        return [
            f"if (null === {times}) {{",
            f"{INDENT}$expects = $this->any();",
            f"}} elseif (is_array({times})) {{",
            f"{INDENT}$expects = $this->exactly({times}['times']);",
            "} else {",
            f"{INDENT}$expects = $this->exactly({times});",
            "}",
            f"$mockMethod = $mock->expects($expects)->method({quote(method_name)});",
        ]

    def return_value(self, expression: str) -> str:
        return f"$mockMethod->willReturn({expression});"

    def return_self(self) -> str:
        return "$mockMethod->willReturnSelf();"
