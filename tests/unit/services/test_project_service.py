"""Tests for the project walker."""

import pytest

from skelgen.generator.models import GenerationStatus
from skelgen.lib.config import GeneratorConfig
from skelgen.lib.errors import InvalidClassNameError, NotDirectoryError
from skelgen.reflection.registry import ClassRegistry
from skelgen.services.test_class import TestClassService
from skelgen.services.test_project import TestProjectService


def class_source(namespace: str, name: str) -> str:
    return f"<?php\n\nnamespace {namespace};\n\nclass {name}\n{{\n}}\n"


@pytest.fixture
def project(tmp_path, php_source, make_class, make_method):
    """Project with Service and Model modules, a helper file and an excluded module."""
    classes = []
    for relative, class_name in [
        ("src/Service/Calculator.php", "App\\Service\\Calculator"),
        ("src/Model/User.php", "App\\Model\\User"),
        ("src/Legacy/Old.php", "App\\Legacy\\Old"),
    ]:
        namespace, _, name = class_name.rpartition("\\")
        path = php_source(relative, class_source(namespace, name))
        classes.append(
            make_class(class_name, [make_method("getId", class_name, "int")], file_name=str(path))
        )
    php_source("src/Service/helpers.php", "<?php\nfunction helper() {}\n")
    php_source("src/bootstrap.php", "<?php\n")
    return tmp_path, ClassRegistry(classes)


@pytest.fixture
def walker(project, faker, clock):
    _, registry = project
    service = TestClassService(registry, GeneratorConfig(), faker=faker, clock=clock)
    return TestProjectService(service, exclude_folders=["Legacy"])


class TestScan:
    """Tests for TestProjectService.scan()."""

    def test_modules_sorted_and_excluded(self, walker, project):
        """First-level folders should be scanned in name order, excluded ones skipped."""
        root, _ = project

        modules = walker.scan(root / "src")

        assert list(modules) == ["Model", "Service"]
        assert [path.name for path in modules["Service"]] == ["Calculator.php", "helpers.php"]

    def test_not_a_directory(self, walker, project):
        root, _ = project

        with pytest.raises(NotDirectoryError):
            walker.scan(root / "src" / "bootstrap.php")


class TestGenerateProject:
    """Tests for TestProjectService.generate()."""

    def test_generates_every_module(self, walker, project):
        """Classes should get tests, files without a class should be skipped."""
        root, _ = project

        results = walker.generate(root / "src")

        statuses = {result.path.name: result.status for result in results}
        assert statuses == {
            "UserTest.php": GenerationStatus.CREATED,
            "CalculatorTest.php": GenerationStatus.CREATED,
            "helpers.php": GenerationStatus.SKIPPED,
        }
        assert (root / "tests" / "Unit" / "Model" / "UserTest.php").is_file()
        assert not (root / "tests" / "Unit" / "Legacy").exists()

    def test_skipped_result_has_message(self, walker, project):
        root, _ = project

        results = walker.generate(root / "src")

        skipped = [result for result in results if result.status is GenerationStatus.SKIPPED]
        assert skipped[0].class_name == ""
        assert "No class declaration found." in skipped[0].message

    def test_class_missing_from_dump_stops_run(self, walker, project, php_source):
        """A declared class absent from the reflection dump should fail the whole run."""
        root, _ = project
        php_source("src/Model/Ghost.php", class_source("App\\Model", "Ghost"))

        with pytest.raises(InvalidClassNameError) as exc_info:
            walker.generate(root / "src")

        assert "App\\Model\\Ghost" in exc_info.value.message
        assert not (root / "tests" / "Unit" / "Service" / "CalculatorTest.php").exists()
