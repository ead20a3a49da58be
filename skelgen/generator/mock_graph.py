"""Mock graph builder.

Builds one mock helper per mocked type and keeps them in a registry keyed by
the fully qualified type name. Methods returning other classes or interfaces
get nested mocks, bounded by ``max_mock_depth``. A type requested again by
the mock it requested stores a back reference instead of being expanded.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from skelgen.generator.files import LocalFileSystem
from skelgen.generator.mock import MockBackend
from skelgen.generator.models import MockDescriptor, MockMethodPlan, MockSetupKind, TestTarget
from skelgen.generator.naming import lcfirst, ucfirst
from skelgen.generator.php import method_map
from skelgen.generator.scanner import ImportTable, SourceScanner
from skelgen.generator.templates import TemplateRenderer, timestamp
from skelgen.generator.type_resolver import TypeResolver
from skelgen.generator.types import (
    ArrayOf,
    Named,
    Primitive,
    PrimitiveKind,
    ResolvedType,
    SelfReferential,
)
from skelgen.lib.config import GeneratorConfig
from skelgen.lib.errors import MockFinalClassError, MockNotExistsError, MockTargetNotResolvableError
from skelgen.lib.logging import get_logger
from skelgen.reflection.models import ReflectedClass, ReflectedMethod
from skelgen.reflection.registry import ClassRegistry

logger = get_logger(__name__)

MOCK_SUFFIX = "Mock"
MOCK_METHOD_PREFIX = "create"
TRAIT_SUFFIX = "MockHelper"
VENDOR_FOLDER = "Vendor"
NATIVE_NAMESPACE = "Native"

PRIMITIVE_SETUP: dict[PrimitiveKind, MockSetupKind] = {
    PrimitiveKind.INT: MockSetupKind.VALUE,
    PrimitiveKind.FLOAT: MockSetupKind.VALUE,
    PrimitiveKind.STRING: MockSetupKind.VALUE,
    PrimitiveKind.BOOL: MockSetupKind.VALUE,
    PrimitiveKind.MIXED: MockSetupKind.VALUE,
    PrimitiveKind.ARRAY: MockSetupKind.VALUE,
    PrimitiveKind.NULL: MockSetupKind.NULL,
    PrimitiveKind.VOID: MockSetupKind.VOID,
    PrimitiveKind.CALLABLE: MockSetupKind.CALLABLE,
    PrimitiveKind.CLOSURE: MockSetupKind.CALLABLE,
    PrimitiveKind.OBJECT: MockSetupKind.OBJECT,
}


@dataclass(frozen=True)
class MockBucket:
    """Helper trait file collecting the mocks of one namespace pair."""

    file_path: Path
    namespace: str
    trait_name: str

    @property
    def full_name(self) -> str:
        return f"{self.namespace}\\{self.trait_name}"


def mock_bucket(class_name: str, target: TestTarget) -> MockBucket:
    """
    Locate the helper trait of a mocked type.

    Project types use the first two namespace segments after the project
    prefix, other types go under ``Vendor``, global names under ``Native``.
    """
    project = target.project_namespace
    path = target.mock_path
    namespace = target.mock_namespace
    if project and not class_name.startswith(project + "\\"):
        path = path / VENDOR_FOLDER
        namespace = f"{namespace}\\{VENDOR_FOLDER}"
        relative = class_name
    elif project:
        relative = class_name[len(project) + 1 :]
    else:
        relative = class_name

    if "\\" not in relative:
        relative = f"{NATIVE_NAMESPACE}\\{relative}"
    folder, group = relative.split("\\")[:2]
    return MockBucket(
        file_path=path / folder / f"{group}{TRAIT_SUFFIX}.php",
        namespace=f"{namespace}\\{folder}",
        trait_name=f"{group}{TRAIT_SUFFIX}",
    )


class MockGraphBuilder:
    """Registry of mock descriptors for one generation pass."""

    def __init__(
        self,
        registry: ClassRegistry,
        resolver: TypeResolver,
        backend: MockBackend,
        config: GeneratorConfig,
        target: TestTarget,
        files: LocalFileSystem,
        scanner: SourceScanner,
        renderer: TemplateRenderer,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.registry = registry
        self.resolver = resolver
        self.backend = backend
        self.config = config
        self.target = target
        self.files = files
        self.scanner = scanner
        self.renderer = renderer
        self.clock = clock
        self._mocks: dict[str, MockDescriptor] = {}

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    @property
    def descriptors(self) -> list[MockDescriptor]:
        return list(self._mocks.values())

    def __len__(self) -> int:
        return len(self._mocks)

    def __contains__(self, key: object) -> bool:
        return key in self._mocks

    def lookup(self, key: str) -> MockDescriptor:
        """
        Get a registered descriptor.

        Raises:
            MockNotExistsError: If nothing is registered under ``key``
        """
        descriptor = self._mocks.get(key)
        if descriptor is None:
            raise MockNotExistsError(key)
        return descriptor

    def names_for(self, class_name: str) -> tuple[str, str, str]:
        """
        Derive the names of a mock helper.

        Returns:
            Tuple of (mock name, short name, helper method name)
        """
        flat = class_name.replace("\\", "")
        mock_name = ucfirst(flat + MOCK_SUFFIX)
        relative = class_name
        project = self.target.project_namespace
        if project and class_name.startswith(project + "\\"):
            relative = class_name[len(project) :]
        short = lcfirst(relative.replace("\\", "") + MOCK_SUFFIX)
        return mock_name, short, MOCK_METHOD_PREFIX + ucfirst(short)

    # ------------------------------------------------------------------
    # Graph construction
    # ------------------------------------------------------------------

    def resolve_target(
        self,
        type_name: str,
        context_class: ReflectedClass,
        context_method: str | None,
        imports: ImportTable | None = None,
    ) -> ReflectedClass:
        """
        Find the reflected class behind a type name used in ``context_class``.

        Raises:
            MockTargetNotResolvableError: If the name matches no class or interface
        """
        name = type_name.strip()
        cls = self.registry.find(name)
        if cls is None:
            if imports is None:
                imports = self.resolver.imports_for(context_class.name, include_ancestors=True)
            cls = self.registry.find(self.resolver.qualify(name, context_class.name, imports))
        if cls is None or cls.is_trait:
            raise MockTargetNotResolvableError(name.lstrip("\\"), context_class.name, context_method)
        return cls

    def ensure_mock(
        self,
        type_name: str,
        context_class: ReflectedClass,
        context_method: str | None = None,
        imports: ImportTable | None = None,
        depth: int = 0,
        requester: str | None = None,
    ) -> str:
        """
        Return the registry key of the mock for a type, building it if needed.

        Args:
            type_name: Type to mock, fully qualified or as written in source
            context_class: Class whose member references the type
            context_method: Member referencing the type, for error messages
            imports: Import table used to qualify a partial name
            depth: Depth of the requesting mock (0 for the test class)
            requester: Class that requested ``context_class`` to be mocked

        Returns:
            Fully qualified name of the mocked type

        Raises:
            MockTargetNotResolvableError: If the type cannot be resolved
            MockFinalClassError: If the type is final and finals are not bypassed
        """
        depth += 1
        cls = self.resolve_target(type_name, context_class, context_method, imports)
        key = cls.name
        if key in self._mocks:
            return key

        mock_name, short, method_name = self.names_for(key)
        if requester is not None and requester.lower() == key.lower():
            self._mocks[key] = MockDescriptor(
                target=key,
                mock_name=mock_name,
                short_name=short,
                method_name=method_name,
                depth=depth,
                setup="$mock",
                is_back_reference=True,
            )
            logger.debug("mock_back_reference", target=key, requested_by=context_class.name)
            return key

        if cls.is_final and not self.config.bypass_finals:
            raise MockFinalClassError(key)

        plans = self._plan_methods(cls, depth, context_class.name)
        names = [plan.name for plan in plans]
        descriptor = MockDescriptor(
            target=key,
            mock_name=mock_name,
            short_name=short,
            method_name=method_name,
            depth=depth,
            setup=self.backend.render_setup(key, plans),
            args={name: "" for name in names},
            times={name: 0 for name in names},
            plans=plans,
        )
        self._mocks[key] = descriptor
        logger.debug("mock_registered", target=key, depth=depth, methods=len(plans))
        return key

    def is_mockable_method(self, cls: ReflectedClass, method: ReflectedMethod) -> bool:
        """Public, non-static, non-magic methods not excluded by the rules."""
        if method.is_constructor or method.is_destructor:
            return False
        if not method.is_public or method.is_static:
            return False
        rules = self.config.rules
        if rules.is_method_excluded(cls.name, method.name):
            return False
        return not rules.is_declaring_class_excluded(method.declaring_class)

    def _plan_methods(self, cls: ReflectedClass, depth: int, requester: str) -> list[MockMethodPlan]:
        parents, traits = self.registry.parent_classes_and_traits(cls.name)
        own_types = {name.lower() for name in [cls.name, *parents, *traits]}
        plans: list[MockMethodPlan] = []
        for method in cls.methods:
            if not self.is_mockable_method(cls, method):
                continue
            resolved = self.resolver.resolve_return_type(method)
            plans.append(self._plan_method(cls, method, resolved, depth, requester, own_types))
        return plans

    def _plan_method(
        self,
        cls: ReflectedClass,
        method: ReflectedMethod,
        resolved: ResolvedType,
        depth: int,
        requester: str,
        own_types: set[str],
    ) -> MockMethodPlan:
        if isinstance(resolved, Primitive):
            return MockMethodPlan(method.name, PRIMITIVE_SETUP[resolved.kind])
        if isinstance(resolved, SelfReferential):
            return MockMethodPlan(method.name, MockSetupKind.SELF)
        if isinstance(resolved, Named):
            if resolved.name.lower() in own_types:
                return MockMethodPlan(method.name, MockSetupKind.SELF)
            if depth >= self.config.max_mock_depth:
                return MockMethodPlan(method.name, MockSetupKind.VALUE)
            nested = self.lookup(self.ensure_mock(resolved.name, cls, method.name, depth=depth, requester=requester))
            return MockMethodPlan(
                method.name,
                MockSetupKind.NESTED,
                nested_key=nested.target,
                nested_short_name=nested.short_name,
                nested_method_name=nested.method_name,
            )
        if isinstance(resolved, ArrayOf):
            element = resolved.element
            if not isinstance(element, Named) or depth >= self.config.max_mock_depth:
                return MockMethodPlan(method.name, MockSetupKind.VALUE)
            if element.name.lower() in own_types or not self.registry.is_class_like(element.name):
                return MockMethodPlan(method.name, MockSetupKind.VALUE)
            nested = self.lookup(self.ensure_mock(element.name, cls, method.name, depth=depth, requester=requester))
            return MockMethodPlan(
                method.name,
                MockSetupKind.NESTED_ARRAY,
                nested_key=nested.target,
                nested_short_name=nested.short_name,
                nested_method_name=nested.method_name,
            )
        raise TypeError(f"Unhandled resolved type: {resolved!r}")

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def render_helper(self, descriptor: MockDescriptor) -> str:
        """Render the create<Short>Mock method of one descriptor."""
        setup = descriptor.setup
        if descriptor.is_back_reference:
            setup = self.backend.render_setup(descriptor.target, [])
        names = list(descriptor.args)
        return self.renderer.render_fragment(
            "MockMethod",
            {
                "target": descriptor.target,
                "mock_interface": self.backend.mock_interface,
                "mock_method_name": descriptor.method_name,
                "mock_args": method_map(names, ""),
                "mock_times": method_map(names, 0),
                "setup": setup,
            },
        )

    def flush(self) -> list[str]:
        """
        Write all registered mocks into their helper trait files.

        Helpers whose method name already exists in the target file are not
        written again. The registry is cleared afterwards.

        Returns:
            Fully qualified names of the helper traits in use, sorted
        """
        buckets: dict[Path, tuple[MockBucket, list[MockDescriptor]]] = {}
        for descriptor in self._mocks.values():
            bucket = mock_bucket(descriptor.target, self.target)
            buckets.setdefault(bucket.file_path, (bucket, []))[1].append(descriptor)

        traits: set[str] = set()
        for path, (bucket, descriptors) in buckets.items():
            traits.add(bucket.full_name)
            existing = set(self.scanner.method_names(path)) if self.files.exists(path) else set()
            methods: list[str] = []
            for descriptor in descriptors:
                if descriptor.method_name in existing:
                    continue
                existing.add(descriptor.method_name)
                methods.append(self.render_helper(descriptor))
            if not methods:
                continue

            def create(joined: str, bucket: MockBucket = bucket) -> str:
                return self.renderer.render(
                    "Trait",
                    {
                        "namespace": bucket.namespace,
                        "bucket": bucket.full_name,
                        "class_name": bucket.trait_name,
                        "methods": joined,
                        **timestamp(self.clock()),
                    },
                )

            created = self.files.save_methods(path, methods, create)
            self.scanner.forget(path)
            logger.info("mock_file_written", path=str(path), created=created, methods=len(methods))

        self._mocks.clear()
        return sorted(traits)


__all__ = ["MockBucket", "MockGraphBuilder", "mock_bucket"]
