"""Tests for the base test case and phpunit.xml generators."""

from skelgen.generator.base_test import BaseTestGenerator
from skelgen.generator.models import GenerationStatus
from skelgen.generator.suite import SuiteConfigGenerator, collect_test_files


class TestBaseTestGenerator:
    """Tests for BaseTestGenerator."""

    def test_writes_base_class(self, tmp_path, clock):
        """The base test case should be written into the unit test root."""
        unit_root = tmp_path / "tests" / "Unit"

        result = BaseTestGenerator(clock=clock).write(unit_root, "App\\Tests\\Unit")

        code = (unit_root / "UnitTestCase.php").read_text()
        assert result.status is GenerationStatus.CREATED
        assert result.class_name == "App\\Tests\\Unit\\UnitTestCase"
        assert "namespace App\\Tests\\Unit;" in code
        assert "abstract class UnitTestCase extends TestCase" in code
        assert "Mockery::close();" in code
        assert "@generated 2024-05-06 07:08:09" in code

    def test_phpunit_backend_has_no_teardown(self, clock):
        """Without Mockery the tearDown hook should be left out."""
        code = BaseTestGenerator(clock=clock).generate("App\\Tests\\Unit", mockery=False)

        assert "Mockery" not in code
        assert "tearDown" not in code

    def test_existing_file_kept(self, tmp_path, clock):
        """An existing base test case should not be overwritten."""
        unit_root = tmp_path / "Unit"
        unit_root.mkdir()
        (unit_root / "UnitTestCase.php").write_text("custom")

        result = BaseTestGenerator(clock=clock).write(unit_root, "App\\Tests\\Unit")

        assert result.status is GenerationStatus.EXISTS
        assert (unit_root / "UnitTestCase.php").read_text() == "custom"


class TestCollectTestFiles:
    """Tests for collect_test_files()."""

    def test_groups_by_module(self, tmp_path):
        """Tests should be grouped by their first folder, support folders skipped."""
        unit_root = tmp_path / "tests" / "Unit"
        for relative in [
            "Service/CalculatorTest.php",
            "Service/Sub/ParserTest.php",
            "Model/UserTest.php",
            "RootTest.php",
            "Mock/Domain/UserMockHelperTest.php",
            "DataProvider/Service/CalculatorDataProvider.php",
            "Service/Helper.php",
        ]:
            path = unit_root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("<?php\n")

        modules = collect_test_files(unit_root, tmp_path)

        assert modules == {
            "Model": ["tests/Unit/Model/UserTest.php"],
            "Service": ["tests/Unit/Service/CalculatorTest.php", "tests/Unit/Service/Sub/ParserTest.php"],
            "Unit": ["tests/Unit/RootTest.php"],
        }

    def test_missing_root(self, tmp_path):
        assert collect_test_files(tmp_path / "missing", tmp_path) == {}


class TestSuiteConfigGenerator:
    """Tests for SuiteConfigGenerator."""

    def test_renders_suites(self, tmp_path, clock):
        """Each module should become one test suite listing its files."""
        modules = {"Service": ["tests/Unit/Service/CalculatorTest.php"], "Model": ["tests/Unit/Model/UserTest.php"]}

        result = SuiteConfigGenerator(clock=clock).write(tmp_path, modules)

        xml = (tmp_path / "phpunit.xml").read_text()
        assert result.status is GenerationStatus.CREATED
        assert '<phpunit bootstrap="vendor/autoload.php" colors="true">' in xml
        assert '<testsuite name="Model Test Suite">' in xml
        assert "<file>tests/Unit/Service/CalculatorTest.php</file>" in xml
        assert xml.index("Model Test Suite") < xml.index("Service Test Suite")

    def test_overwrite(self, tmp_path, clock):
        """An existing phpunit.xml should only be replaced with overwrite."""
        (tmp_path / "phpunit.xml").write_text("custom")
        generator = SuiteConfigGenerator(clock=clock)

        kept = generator.write(tmp_path, {})
        replaced = generator.write(tmp_path, {}, bootstrap="bootstrap.php", overwrite=True)

        assert kept.status is GenerationStatus.EXISTS
        assert replaced.status is GenerationStatus.CREATED
        assert 'bootstrap="bootstrap.php"' in (tmp_path / "phpunit.xml").read_text()
