"""Mock backend strategy.

A backend turns the per-method setup plans of one mocked type into the
statements of a ``create<Short>Mock`` helper body. The header that creates
``$mock``, the expectation on each method and the way a value is returned
differ per mocking library; the surrounding ``$mockTimes`` guard does not.
"""

from abc import ABC, abstractmethod

from skelgen.generator.models import MockMethodPlan, MockSetupKind
from skelgen.generator.php import INDENT, quote

# Indentation of statements inside a generated helper method body
BODY_INDENT = INDENT * 2


class MockBackend(ABC):
    """Base class of the mocking library backends."""

    name: str
    mock_interface: str

    @abstractmethod
    def header(self, target: str, method_names: list[str]) -> list[str]:
        """Statements creating ``$mock`` for ``target``."""

    @abstractmethod
    def expectation(self, method_name: str) -> list[str]:
        """Statements binding ``$mockMethod`` with its call count."""

    @abstractmethod
    def return_value(self, expression: str) -> str:
        """Statement making ``$mockMethod`` return a PHP expression."""

    @abstractmethod
    def return_self(self) -> str:
        """Statement making ``$mockMethod`` return the mock itself."""

    def return_null(self) -> str:
        return self.return_value("null")

    def returns(self, plan: MockMethodPlan) -> list[str]:
        """Statements answering a call, according to the plan kind."""
        slot = f"$mockArgs[{quote(plan.name)}]"
        times = f"$mockTimes[{quote(plan.name)}]"
        if plan.kind is MockSetupKind.VALUE:
            return [self.return_value(slot)]
        if plan.kind is MockSetupKind.NULL:
            return [self.return_null()]
        if plan.kind is MockSetupKind.VOID:
            return []
        if plan.kind is MockSetupKind.SELF:
            return [self.return_self()]
        if plan.kind is MockSetupKind.CALLABLE:
            return [self.return_value("function () { return true; }")]
        if plan.kind is MockSetupKind.OBJECT:
            return [self.return_value("new class {}")]
        if plan.kind is MockSetupKind.NESTED:
            variable = f"${plan.nested_short_name}"
            return [
                f"{variable} = $this->{plan.nested_method_name}({slot}, {times});",
                self.return_value(variable),
            ]
        if plan.kind is MockSetupKind.NESTED_ARRAY:
            variable = f"${plan.nested_short_name}"
            return [
                f"{variable}s = [];",
                f"foreach ({slot} as $i => {variable}) {{",
                f"{INDENT}{variable}s[] = $this->{plan.nested_method_name}({variable}, {times}['mockTimes'][$i]);",
                "}",
                self.return_value(f"{variable}s"),
            ]
        raise TypeError(f"Unhandled mock setup kind: {plan.kind!r}")

    def render_setup(self, target: str, plans: list[MockMethodPlan]) -> str:
        """
        Render the complete setup of one mock.

        The first line carries no indentation, the template places it;
        following lines are indented for a method body.
        """
        lines = self.header(target, [plan.name for plan in plans])
        for plan in plans:
            lines.append("")
            lines.append(f"if (array_key_exists({quote(plan.name)}, $mockTimes)) {{")
            lines.extend(INDENT + line for line in self.expectation(plan.name))
            lines.extend(INDENT + line for line in self.returns(plan))
            lines.append("}")
        first, *rest = lines
        return "\n".join([first, *(BODY_INDENT + line if line else "" for line in rest)])


__all__ = ["BODY_INDENT", "MockBackend"]
