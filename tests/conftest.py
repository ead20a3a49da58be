"""Pytest configuration and fixtures."""

from datetime import datetime
from pathlib import Path

import pytest

from skelgen.generator.fake_data import FakeDataSynthesizer
from skelgen.generator.files import LocalFileSystem
from skelgen.generator.models import TestTarget
from skelgen.generator.templates import TemplateRenderer
from skelgen.generator.test_generator import TestGenerator
from skelgen.lib.config import ExclusionRules, GeneratorConfig
from skelgen.reflection.models import ReflectedClass, ReflectedMethod, ReflectedParameter, short_name
from skelgen.reflection.registry import ClassRegistry

FIXED_NOW = datetime(2024, 5, 6, 7, 8, 9)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock():
    """Clock frozen at FIXED_NOW."""
    return fixed_clock


@pytest.fixture
def faker():
    """Seeded fake data synthesizer."""
    return FakeDataSynthesizer(seed=1234)


@pytest.fixture
def config():
    """Default generator configuration."""
    return GeneratorConfig()


@pytest.fixture
def make_param():
    """Factory for reflected parameters."""

    def _make(name: str, type: str | None = None, position: int = 0, **kwargs) -> ReflectedParameter:
        return ReflectedParameter(name=name, type=type, position=position, **kwargs)

    return _make


@pytest.fixture
def make_method():
    """Factory for reflected methods; parameter positions follow list order."""

    def _make(
        name: str,
        declaring_class: str,
        return_type: str | None = None,
        parameters: list[ReflectedParameter] | None = None,
        **kwargs,
    ) -> ReflectedMethod:
        params = tuple(
            parameter.model_copy(update={"position": index}) for index, parameter in enumerate(parameters or [])
        )
        kwargs.setdefault("is_constructor", name == "__construct")
        return ReflectedMethod(
            name=name,
            declaring_class=declaring_class,
            return_type=return_type,
            parameters=params,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_class():
    """Factory for reflected classes."""

    def _make(name: str, methods: list[ReflectedMethod] | None = None, **kwargs) -> ReflectedClass:
        return ReflectedClass(name=name, methods=tuple(methods or []), **kwargs)

    return _make


@pytest.fixture
def make_target(tmp_path):
    """Factory for generation targets of App\\... classes under tmp_path."""

    def _make(class_name: str = "App\\Service\\Calculator", project_namespace: str = "App") -> TestTarget:
        unit_root = tmp_path / "tests" / "Unit"
        relative = class_name[len(project_namespace) + 1 :] if project_namespace else class_name
        folders = relative.split("\\")[:-1]
        base_namespace = "\\".join(part for part in [project_namespace, "Tests", "Unit"] if part)
        test_namespace = "\\".join([base_namespace, *folders])
        return TestTarget(
            class_name=class_name,
            test_class_name=f"{test_namespace}\\{short_name(class_name)}Test",
            test_file=unit_root.joinpath(*folders, f"{short_name(class_name)}Test.php"),
            base_test_namespace=base_namespace,
            project_namespace=project_namespace,
            data_provider_path=unit_root / "DataProvider",
            data_provider_namespace=f"{base_namespace}\\DataProvider",
            mock_path=unit_root / "Mock",
            mock_namespace=f"{base_namespace}\\Mock",
        )

    return _make


@pytest.fixture
def make_generator(make_target, faker, clock):
    """Factory for a TestGenerator over a registry."""

    def _make(
        registry: ClassRegistry,
        class_name: str = "App\\Service\\Calculator",
        rules: ExclusionRules | None = None,
        preprocessor=None,
        **config_values,
    ) -> TestGenerator:
        generator_config = GeneratorConfig(rules=rules or ExclusionRules(), **config_values)
        return TestGenerator(
            registry,
            generator_config,
            make_target(class_name),
            files=LocalFileSystem(),
            renderer=TemplateRenderer(),
            faker=faker,
            preprocessor=preprocessor,
            clock=clock,
        )

    return _make


@pytest.fixture
def calculator(make_class, make_method, make_param):
    """Calculator with a single add(int $a, int $b): int method."""
    return make_class(
        "App\\Service\\Calculator",
        [
            make_method(
                "add",
                "App\\Service\\Calculator",
                "int",
                [make_param("a", "int"), make_param("b", "int")],
            )
        ],
    )


@pytest.fixture
def user_classes(make_class, make_method):
    """UserInterface plus a UserService returning ?UserInterface."""
    user = make_class(
        "App\\Model\\UserInterface",
        [
            make_method("getName", "App\\Model\\UserInterface", "string"),
            make_method("isActive", "App\\Model\\UserInterface", "bool"),
        ],
        is_interface=True,
    )
    service = make_class(
        "App\\Service\\UserService",
        [make_method("getUser", "App\\Service\\UserService", "?App\\Model\\UserInterface")],
    )
    return [user, service]


@pytest.fixture
def php_source(tmp_path):
    """Write a PHP source file below tmp_path and return its path."""

    def _write(relative: str, source: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
        return path

    return _write
