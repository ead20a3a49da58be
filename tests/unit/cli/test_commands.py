"""Tests for the skelgen CLI commands."""

import json

import pytest
from typer.testing import CliRunner

from skelgen import __version__
from skelgen.cli.exit_codes import ExitCode, exit_code_for, get_exit_code_description
from skelgen.cli.main import app
from skelgen.lib.errors import ConfigurationError, InvalidClassNameError, SkelgenError

CALCULATOR_SOURCE = """<?php

namespace App\\Service;

class Calculator
{
    public function add(int $a, int $b): int
    {
        return $a + $b;
    }

    public function subtract(int $a, int $b): int
    {
        return $a - $b;
    }
}
"""


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def php_project(php_source, tmp_path):
    """Project with one class and the matching reflection dump."""
    source = php_source("project/src/Service/Calculator.php", CALCULATOR_SOURCE)
    dump = {
        "classes": [
            {
                "name": "App\\Service\\Calculator",
                "file_name": str(source),
                "methods": [
                    {
                        "name": "add",
                        "class": "App\\Service\\Calculator",
                        "return_type": "int",
                        "parameters": [
                            {"name": "a", "position": 0, "type": "int"},
                            {"name": "b", "position": 1, "type": "int"},
                        ],
                    },
                    {
                        "name": "subtract",
                        "class": "App\\Service\\Calculator",
                        "return_type": "int",
                        "parameters": [
                            {"name": "a", "position": 0, "type": "int"},
                            {"name": "b", "position": 1, "type": "int"},
                        ],
                    },
                ],
            }
        ]
    }
    reflection = tmp_path / "reflection.json"
    reflection.write_text(json.dumps(dump), encoding="utf-8")
    return tmp_path / "project", source, reflection


class TestMainApp:
    """Tests for the main application."""

    def test_version(self, runner):
        """--version should print the package version."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"skelgen version {__version__}" in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("class", "project", "base", "suite"):
            assert command in result.output


class TestClassCommand:
    """Tests for the class command."""

    def test_generates_test(self, runner, php_project):
        """The class command should write the test and its data provider."""
        root, source, reflection = php_project

        result = runner.invoke(app, ["class", str(source), "--reflection", str(reflection), "--seed", "1"])

        assert result.exit_code == 0, result.output
        assert "created" in result.output
        assert (root / "tests" / "Unit" / "Service" / "CalculatorTest.php").is_file()
        assert (root / "tests" / "Unit" / "DataProvider" / "Service" / "CalculatorDataProvider.php").is_file()

    def test_missing_dump(self, runner, php_project, tmp_path):
        """A missing reflection dump should exit with the file not found code."""
        _, source, _ = php_project

        result = runner.invoke(app, ["class", str(source), "-r", str(tmp_path / "missing.json")])

        assert result.exit_code == ExitCode.FILE_NOT_FOUND
        assert "Error:" in result.output

    def test_unknown_class(self, runner, php_project):
        _, _, reflection = php_project

        result = runner.invoke(app, ["class", "App\\Missing", "-r", str(reflection)])

        assert result.exit_code == ExitCode.CLASS_NOT_FOUND

    def test_skip_method(self, runner, php_project):
        """--skip-method should leave the named method without a test."""
        root, source, reflection = php_project

        result = runner.invoke(app, ["class", str(source), "-r", str(reflection), "--skip-method", "add"])

        assert result.exit_code == 0, result.output
        content = (root / "tests" / "Unit" / "Service" / "CalculatorTest.php").read_text()
        assert "function addShouldReturnInt" not in content
        assert "function subtractShouldReturnInt" in content

    def test_only_method(self, runner, php_project):
        """--only-method should limit generation to the named methods."""
        root, source, reflection = php_project

        result = runner.invoke(app, ["class", str(source), "-r", str(reflection), "-m", "subtract"])

        assert result.exit_code == 0, result.output
        content = (root / "tests" / "Unit" / "Service" / "CalculatorTest.php").read_text()
        assert "function subtractShouldReturnInt" in content
        assert "function addShouldReturnInt" not in content


class TestProjectCommand:
    """Tests for the project command."""

    def test_generates_project_with_suite(self, runner, php_project):
        """The project command should also write the base test case and phpunit.xml."""
        root, _, reflection = php_project

        result = runner.invoke(app, ["project", str(root / "src"), "-r", str(reflection), "--suite"])

        assert result.exit_code == 0, result.output
        assert "Summary:" in result.output
        assert (root / "tests" / "Unit" / "UnitTestCase.php").is_file()
        assert "<file>tests/Unit/Service/CalculatorTest.php</file>" in (root / "phpunit.xml").read_text()

    def test_not_a_directory(self, runner, php_project):
        _, source, reflection = php_project

        result = runner.invoke(app, ["project", str(source), "-r", str(reflection)])

        assert result.exit_code == ExitCode.FILE_NOT_FOUND


class TestBaseAndSuiteCommands:
    """Tests for the base and suite commands."""

    def test_base(self, runner, tmp_path):
        result = runner.invoke(app, ["base", str(tmp_path), "--namespace", "Acme"])

        code = (tmp_path / "tests" / "Unit" / "UnitTestCase.php").read_text()
        assert result.exit_code == 0, result.output
        assert "namespace Acme\\Tests\\Unit;" in code
        assert "Mockery::close();" in code

    def test_base_phpunit_backend(self, runner, tmp_path):
        runner.invoke(app, ["base", str(tmp_path), "-n", "Acme", "--mock-backend", "phpunit"])

        assert "Mockery" not in (tmp_path / "tests" / "Unit" / "UnitTestCase.php").read_text()

    def test_suite(self, runner, tmp_path):
        """The suite command should list existing tests by module."""
        test_file = tmp_path / "tests" / "Unit" / "Model" / "UserTest.php"
        test_file.parent.mkdir(parents=True)
        test_file.write_text("<?php\n")

        result = runner.invoke(app, ["suite", str(tmp_path), "--bootstrap", "tests/bootstrap.php"])

        xml = (tmp_path / "phpunit.xml").read_text()
        assert result.exit_code == 0, result.output
        assert '<testsuite name="Model Test Suite">' in xml
        assert 'bootstrap="tests/bootstrap.php"' in xml

    def test_suite_without_tests(self, runner, tmp_path):
        result = runner.invoke(app, ["suite", str(tmp_path)])

        assert result.exit_code == 0
        assert "No tests found" in result.output


class TestExitCodes:
    """Tests for error to exit code mapping."""

    def test_known_error_codes(self):
        assert exit_code_for(InvalidClassNameError("App\\X")) == ExitCode.CLASS_NOT_FOUND
        assert exit_code_for(ConfigurationError("broken")) == ExitCode.CONFIG_ERROR

    def test_unknown_error_code(self):
        assert exit_code_for(SkelgenError("boom")) == ExitCode.ERROR

    def test_descriptions(self):
        assert get_exit_code_description(4).startswith("File not found")
        assert get_exit_code_description(99) == "Unknown exit code: 99"
