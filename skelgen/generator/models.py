"""Generator data models.

Defines the records passed between the type resolver, the mock graph, the
data provider assembler and the test method synthesizer.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

from skelgen.generator.types import ResolvedType


class GenerationStatus(StrEnum):
    """Outcome of writing one generated file."""

    CREATED = "created"
    EXISTS = "exists"  # Soft skip, the target file is already there
    SKIPPED = "skipped"  # Abstract class or missing trait


class AssertionKind(StrEnum):
    """PHPUnit assertion suffix used by a test method."""

    EQUALS = "Equals"
    TRUE = "True"
    INSTANCE_OF = "InstanceOf"
    IS_CALLABLE = "IsCallable"
    IS_OBJECT = "IsObject"
    NULL = "Null"
    NONE = ""


class MethodTemplate(StrEnum):
    """Template used to render one test method."""

    DEFAULT = "TestMethod"
    BOOL = "TestMethodBool"
    VOID = "TestMethodVoid"


class MockSetupKind(StrEnum):
    """How a mocked method answers a call."""

    VALUE = "value"  # Value slot from $mockArgs
    NULL = "null"
    VOID = "void"  # Expectation only
    SELF = "self"
    CALLABLE = "callable"
    OBJECT = "object"
    NESTED = "nested"  # Another generated mock
    NESTED_ARRAY = "nested_array"  # List of generated mocks


@dataclass(frozen=True)
class GenerationResult:
    """Result of one generated file."""

    status: GenerationStatus
    path: Path
    class_name: str
    message: str = ""


@dataclass(frozen=True)
class TestTarget:
    """Names and locations of everything generated for one class.

    Attributes:
        class_name: Fully qualified class under test
        test_class_name: Fully qualified generated test class
        test_file: Path of the generated test file
        base_test_namespace: Namespace of the shared UnitTestCase
        project_namespace: Namespace prefix of project (non-vendor) classes
        data_provider_path: Root directory of data provider classes
        data_provider_namespace: Root namespace of data provider classes
        mock_path: Root directory of mock helper traits
        mock_namespace: Root namespace of mock helper traits
    """

    __test__ = False

    class_name: str
    test_class_name: str
    test_file: Path
    base_test_namespace: str
    project_namespace: str
    data_provider_path: Path
    data_provider_namespace: str
    mock_path: Path
    mock_namespace: str


@dataclass
class MockMethodPlan:
    """Setup decision for one method of a mocked type."""

    name: str
    kind: MockSetupKind
    nested_key: str | None = None
    nested_short_name: str | None = None
    nested_method_name: str | None = None


@dataclass
class MockDescriptor:
    """One generated mock helper.

    Attributes:
        target: Fully qualified mocked type
        mock_name: Unique name derived from the target
        short_name: Variable name used where the mock is instantiated
        method_name: Name of the create<Short>Mock helper method
        depth: Nesting depth at first discovery (1 = requested by the test)
        setup: Backend specific setup statements
        args: Method name to empty value placeholder
        times: Method name to repeat count placeholder
        plans: Setup decisions the setup text was rendered from
        is_back_reference: Placeholder standing in for a mock being built
    """

    target: str
    mock_name: str
    short_name: str
    method_name: str
    depth: int
    setup: str
    args: dict[str, str] = field(default_factory=dict)
    times: dict[str, int] = field(default_factory=dict)
    plans: list[MockMethodPlan] = field(default_factory=list)
    is_back_reference: bool = False


@dataclass
class DataSet:
    """One data set: values and repeat counts keyed by method or parameter."""

    values: dict[str, Any] = field(default_factory=dict)
    times: dict[str, Any] = field(default_factory=dict)

    def as_literal(self) -> list[dict[str, Any]]:
        return [self.values, self.times]


@dataclass(frozen=True)
class ProviderLocation:
    """Where the data provider class of one tested class lives."""

    file_path: Path
    namespace: str
    class_name: str
    full_class_name: str


@dataclass
class DataProviderEntry:
    """Accumulated data sets of one (tested class, provider method) pair."""

    test_class: str
    method_name: str
    data_sets: list[DataSet] = field(default_factory=list)


@dataclass
class TestMethodSpec:
    """Everything needed to render one test method."""

    __test__ = False

    orig_method_name: str
    method_name: str
    return_type: ResolvedType
    assertion: AssertionKind
    expected: str | None
    template: MethodTemplate
    method_comment: str
    arguments: str
    arguments_initialize: list[str]
    provider_method_name: str
    is_static: bool = False
    additional: str = ""
    mock_keys: list[str] = field(default_factory=list)


__all__ = [
    "GenerationStatus",
    "AssertionKind",
    "MethodTemplate",
    "MockSetupKind",
    "GenerationResult",
    "TestTarget",
    "MockMethodPlan",
    "MockDescriptor",
    "DataSet",
    "ProviderLocation",
    "DataProviderEntry",
    "TestMethodSpec",
]
