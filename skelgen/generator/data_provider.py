"""Data provider assembler.

Collects fake argument and return values per (tested class, provider method)
and writes them as static PHPUnit data provider methods. Each data set is a
pair ``[values, times]``: ``values`` feeds ``$mockArgs`` and ``times`` feeds
``$mockTimes`` in the generated test.
"""

from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

from skelgen.generator import php
from skelgen.generator.fake_data import FakeDataSynthesizer
from skelgen.generator.files import LocalFileSystem
from skelgen.generator.models import DataProviderEntry, DataSet, ProviderLocation, TestTarget
from skelgen.generator.naming import ucfirst
from skelgen.generator.scanner import SourceScanner
from skelgen.generator.templates import TemplateRenderer, timestamp
from skelgen.generator.type_resolver import TypeResolver
from skelgen.generator.types import (
    MIXED,
    ArrayOf,
    Named,
    ResolvedType,
    SelfReferential,
    is_void,
    type_key,
)
from skelgen.lib.config import GeneratorConfig
from skelgen.lib.logging import get_logger
from skelgen.reflection.models import ReflectedClass, ReflectedMethod, ReflectedParameter, short_name
from skelgen.reflection.registry import ClassRegistry

logger = get_logger(__name__)

PROVIDER_SUFFIX = "DataProvider"
DEFAULT_ARGS = "defaultArgs"
COMMON_FOLDER = "Common"


def provider_method_name(method: ReflectedMethod) -> str:
    """``defaultArgs`` for constructors, ``getDataFor<Method>Method`` otherwise."""
    if method.is_constructor:
        return DEFAULT_ARGS
    return f"getDataFor{ucfirst(method.name)}Method"


def merge_defaults(defaults: list[DataSet], own: list[DataSet]) -> list[DataSet]:
    """Merge constructor defaults into a method's data sets, method keys win."""
    if all(not data_set.values and not data_set.times for data_set in own):
        return [DataSet(dict(data_set.values), dict(data_set.times)) for data_set in defaults]
    merged: list[DataSet] = []
    for index, data_set in enumerate(own):
        default = defaults[index] if index < len(defaults) else DataSet()
        merged.append(
            DataSet(
                values={**default.values, **data_set.values},
                times={**default.times, **data_set.times},
            )
        )
    return merged


class DataProviderAssembler:
    """Accumulate provider data sets during a pass and write them at the end."""

    def __init__(
        self,
        registry: ClassRegistry,
        resolver: TypeResolver,
        faker: FakeDataSynthesizer,
        config: GeneratorConfig,
        target: TestTarget,
        files: LocalFileSystem,
        scanner: SourceScanner,
        renderer: TemplateRenderer,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.registry = registry
        self.resolver = resolver
        self.faker = faker
        self.config = config
        self.target = target
        self.files = files
        self.scanner = scanner
        self.renderer = renderer
        self.clock = clock
        self._entries: dict[str, dict[str, DataProviderEntry]] = {}

    @property
    def data_set_count(self) -> int:
        return self.config.data_set_count

    def location(self, class_name: str) -> ProviderLocation:
        """
        Locate the provider class of a tested class.

        Project classes mirror their namespace below the provider root,
        other classes share the ``Common`` folder under a flattened name.
        """
        project = self.target.project_namespace
        root_path = self.target.data_provider_path
        root_namespace = self.target.data_provider_namespace
        if project and class_name.startswith(project + "\\"):
            segments = class_name[len(project) + 1 :].split("\\")
            folders, short = segments[:-1], segments[-1]
            provider_class = short + PROVIDER_SUFFIX
            file_path = root_path.joinpath(*folders, provider_class + ".php")
            namespace = "\\".join([root_namespace, *folders])
        else:
            provider_class = ucfirst(class_name.replace("\\", "")) + PROVIDER_SUFFIX
            file_path = root_path / COMMON_FOLDER / (provider_class + ".php")
            namespace = f"{root_namespace}\\{COMMON_FOLDER}"
        return ProviderLocation(
            file_path=file_path,
            namespace=namespace,
            class_name=provider_class,
            full_class_name=f"{namespace}\\{provider_class}",
        )

    def entry(self, class_name: str, method_name: str) -> DataProviderEntry | None:
        return self._entries.get(class_name, {}).get(method_name)

    @property
    def entries(self) -> list[DataProviderEntry]:
        return [entry for entries in self._entries.values() for entry in entries.values()]

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_method(self, cls: ReflectedClass, method: ReflectedMethod) -> str:
        """
        Register the provider method of one tested method.

        A new non-constructor entry receives the fake return value of the
        method under the method's own name.

        Returns:
            Provider method name
        """
        name = provider_method_name(method)
        entries = self._entries.setdefault(cls.name, {})
        if name in entries:
            return name

        entry = DataProviderEntry(
            test_class=cls.name,
            method_name=name,
            data_sets=[DataSet() for _ in range(self.data_set_count)],
        )
        entries[name] = entry
        if not method.is_constructor:
            for data_set in entry.data_sets:
                fake = self.return_value_data(method)
                if fake is None:
                    break
                key, value, times = fake
                data_set.values[key] = value
                data_set.times[key] = times
        logger.debug("provider_method_registered", class_name=cls.name, method=name)
        return name

    def add_method_argument(
        self,
        cls: ReflectedClass,
        method: ReflectedMethod,
        parameter: ReflectedParameter,
        provider_method: str,
        literal: bool = False,
    ) -> str:
        """
        Add fake data for one parameter to every data set of a provider method.

        Class typed parameters are stored under the class short name with
        nested mock data, literal ones under the parameter name. Keys already
        present are left alone. ``literal`` forces a plain value.

        Returns:
            Key the parameter data is stored under
        """
        resolved = MIXED if literal else self.resolver.resolve_param_type(method, parameter)
        entry = self._entries.setdefault(cls.name, {}).get(provider_method)
        if entry is None:
            entry = DataProviderEntry(
                test_class=cls.name,
                method_name=provider_method,
                data_sets=[DataSet() for _ in range(self.data_set_count)],
            )
            self._entries[cls.name][provider_method] = entry

        key = self.argument_key(parameter, resolved)
        for data_set in entry.data_sets:
            if key in data_set.values:
                break
            key, value, times = self.argument_data(parameter, resolved)
            data_set.values[key] = value
            data_set.times[key] = times
        return key

    def mockable_class(self, resolved: ResolvedType) -> str | None:
        """Class name of a Named or self type known to the registry as a class or interface."""
        if isinstance(resolved, (Named, SelfReferential)):
            name = resolved.name if isinstance(resolved, Named) else resolved.class_name
            cls = self.registry.find(name)
            if cls is not None and not cls.is_trait:
                return cls.name
        return None

    def argument_key(self, parameter: ReflectedParameter, resolved: ResolvedType) -> str:
        class_name = self.mockable_class(resolved)
        return short_name(class_name) if class_name else parameter.name

    def argument_data(self, parameter: ReflectedParameter, resolved: ResolvedType) -> tuple[str, Any, Any]:
        """Key, fake value and times of one parameter."""
        class_name = self.mockable_class(resolved)
        if class_name is not None:
            values, times = self.mocked_data(class_name, 1)
            return short_name(class_name), values, times

        if isinstance(resolved, ArrayOf):
            value = self.faker.value_for_name(parameter.name)
            if value is None:
                value = self.faker.value_for_type(resolved.element)
            return parameter.name, [] if value is None else [value], 0
        return parameter.name, self.faker.value(parameter.name, resolved), 0

    def return_value_data(self, method: ReflectedMethod) -> tuple[str, Any, Any] | None:
        """Key, fake value and times of a method's return value, None for void."""
        resolved = self.resolver.resolve_return_type(method)
        if is_void(resolved):
            return None

        is_array = isinstance(resolved, ArrayOf)
        base = resolved.element if isinstance(resolved, ArrayOf) else resolved
        class_name = self.mockable_class(base)
        if class_name is not None:
            values, times = self.mocked_data(class_name, 1)
            values["className"] = class_name
            times["className"] = class_name
            if is_array:
                return method.name, [values], [times]
            return method.name, values, times

        value = self.faker.value_for_name(method.name)
        if value is None:
            value = self.faker.value_for_type(base)
        if is_array:
            value = [] if value is None else [value]
        return method.name, value, 0

    def _data_method(self, cls: ReflectedClass, method: ReflectedMethod) -> bool:
        if method.is_constructor or method.is_destructor:
            return False
        if not method.is_public or method.is_static:
            return False
        rules = self.config.rules
        if method.name in rules.data_exclude_methods:
            return False
        return not rules.is_method_excluded(cls.name, method.name)

    def mocked_data(self, class_name: str, level: int) -> tuple[dict[str, Any], dict[str, Any]]:
        """
        Build the ``$mockArgs``/``$mockTimes`` pair for a mocked class.

        Values are cached per method name, self key and return type, so
        methods sharing a type share a value. Class-like return types recurse
        while ``level`` is below ``max_mock_depth``; the class's own type is
        skipped.

        Returns:
            Tuple of (values keyed by method, times keyed by method plus 'times')
        """
        cls = self.registry.get(class_name)
        values: dict[str, Any] = {}
        times: dict[str, Any] = {"times": 0}
        cached_values: dict[str, Any] = {}
        cached_times: dict[str, Any] = {}

        def reuse(cache_key: str, method_name: str) -> bool:
            if cache_key not in cached_values:
                return False
            values[method_name] = cached_values[cache_key]
            times[method_name] = cached_times[cache_key]
            return True

        for method in cls.methods:
            if not self._data_method(cls, method):
                continue
            name = method.name
            fake_key = name
            if reuse(fake_key, name):
                continue
            if name in self.config.rules.data_self_methods:
                fake_key = cls.name
                if reuse(fake_key, name):
                    continue

            resolved = self.resolver.resolve_return_type(method)
            is_array = isinstance(resolved, ArrayOf)
            base = resolved.element if isinstance(resolved, ArrayOf) else resolved
            if isinstance(base, SelfReferential):
                continue

            fake_value: Any = None
            fake_times: Any = 0
            nested = self.mockable_class(base)
            if nested is not None:
                if reuse(nested, name):
                    continue
                if nested.lower() == cls.name.lower():
                    continue
                if level < self.config.max_mock_depth:
                    fake_value, fake_times = self.mocked_data(nested, level + 1)
                    fake_key = nested

            if fake_value is None:
                fake_value = self.faker.value_for_name(fake_key)
            if fake_value is None:
                fake_key = type_key(base)
                if reuse(fake_key, name):
                    continue
                fake_value = self.faker.value_for_type(base)

            cached_values[fake_key] = fake_value
            cached_times[fake_key] = fake_times

            if is_array:
                fake_value = [fake_value]
                if isinstance(fake_times, dict):
                    rest = {key: value for key, value in fake_times.items() if key != "times"}
                    fake_times = {"times": fake_times.get("times", 0), "mockTimes": [rest]}
            values[name] = fake_value
            times[name] = fake_times
        return values, times

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def provider_data(self, class_name: str) -> dict[str, list[DataSet]]:
        """Data sets per provider method with constructor defaults merged in."""
        entries = self._entries.get(class_name, {})
        defaults = entries.get(DEFAULT_ARGS)
        result: dict[str, list[DataSet]] = {}
        for name, entry in entries.items():
            if name == DEFAULT_ARGS:
                continue
            data_sets = entry.data_sets
            if defaults is not None:
                data_sets = merge_defaults(defaults.data_sets, data_sets)
            result[name] = data_sets
        return result

    def render_method(self, class_name: str, name: str, data_sets: list[DataSet]) -> str:
        return self.renderer.render_fragment(
            "DataProviderMethod",
            {
                "test_class_name": class_name,
                "provider_method_name": name,
                "data": php.export([data_set.as_literal() for data_set in data_sets], indent=2),
            },
        )

    def finalize(self) -> list[Path]:
        """
        Write every accumulated provider method.

        Methods already present in an existing provider file are skipped.
        The accumulated entries are cleared afterwards.

        Returns:
            Provider files created or appended to
        """
        written: list[Path] = []
        for class_name in list(self._entries):
            location = self.location(class_name)
            path = location.file_path
            existing = set(self.scanner.method_names(path)) if self.files.exists(path) else set()
            methods = [
                self.render_method(class_name, name, data_sets)
                for name, data_sets in self.provider_data(class_name).items()
                if name not in existing
            ]
            if not methods:
                continue

            def create(joined: str, location: ProviderLocation = location, class_name: str = class_name) -> str:
                return self.renderer.render(
                    PROVIDER_SUFFIX,
                    {
                        "namespace": location.namespace,
                        "test_class_name": class_name,
                        "class_name": location.class_name,
                        "methods": joined,
                        **timestamp(self.clock()),
                    },
                )

            created = self.files.save_methods(path, methods, create)
            self.scanner.forget(path)
            written.append(path)
            logger.info("provider_file_written", path=str(path), created=created, methods=len(methods))

        self._entries.clear()
        return written


__all__ = [
    "DEFAULT_ARGS",
    "DataProviderAssembler",
    "merge_defaults",
    "provider_method_name",
]
