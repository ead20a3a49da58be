"""Typer CLI application for skelgen."""

from pathlib import Path

import typer
from rich.console import Console

from skelgen import __version__
from skelgen.cli.exit_codes import exit_code_for
from skelgen.cli.formatters import format_result_line, format_results_table
from skelgen.generator.base_test import BaseTestGenerator
from skelgen.generator.fake_data import FakeDataSynthesizer
from skelgen.generator.naming import ucfirst
from skelgen.generator.preprocessor import MethodFilterPreprocessor
from skelgen.generator.suite import DEFAULT_BOOTSTRAP, SuiteConfigGenerator, collect_test_files
from skelgen.lib.config import get_settings
from skelgen.lib.errors import SkelgenError
from skelgen.lib.logging import configure_logging, get_logger
from skelgen.reflection.loader import load_registry
from skelgen.services.test_class import TestClassService, join_namespace
from skelgen.services.test_project import TestProjectService

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="skelgen",
    help="PHPUnit test skeleton, mock helper and data provider generator",
    no_args_is_help=True,
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"skelgen version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """skelgen - generate PHPUnit tests from a reflection dump."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_file)


def fail(error: SkelgenError) -> None:
    """Report a generator error and exit with its mapped code."""
    logger.error("command_failed", error_code=error.error_code, **error.context)
    console.print(f"[red]Error:[/red] {error.message}")
    raise typer.Exit(exit_code_for(error))


def build_class_service(
    reflection: Path,
    config_file: Path | None,
    mock_backend: str | None,
    data_sets: int | None,
    max_depth: int | None,
    strict: bool | None,
    seed: int | None,
    only_methods: list[str] | None = None,
    skip_methods: list[str] | None = None,
) -> TestClassService:
    """Assemble the class service from settings and command line overrides."""
    settings = get_settings()
    config = settings.generator_config(
        rules_file=config_file,
        mock_backend=mock_backend,
        data_set_count=data_sets,
        max_mock_depth=max_depth,
        strict_types=strict,
    )
    registry = load_registry(reflection)
    faker = FakeDataSynthesizer(
        seed=seed if seed is not None else settings.fake_seed,
        locale=settings.fake_locale,
    )
    logger.info(
        "run_configured",
        classes=len(registry),
        mock_backend=config.mock_backend,
        max_mock_depth=config.max_mock_depth,
        strict=config.strict_types,
    )
    service = TestClassService(
        registry,
        config,
        psr_namespace_type=settings.psr_namespace_type,
        test_folder=settings.test_folder,
        unit_test_folder=settings.unit_test_folder,
        faker=faker,
    )
    if only_methods or skip_methods:
        logger.info("method_filter_enabled", only=only_methods or [], skip=skip_methods or [])
        service.default_preprocessor = MethodFilterPreprocessor(only_methods, skip_methods)
    return service


REFLECTION_OPTION = typer.Option(
    ...,
    "--reflection",
    "-r",
    help="Reflection dump (JSON) of the PHP project",
)
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="YAML file with exclusion rules",
)
BACKEND_OPTION = typer.Option(
    None,
    "--mock-backend",
    "-b",
    help="Mocking library of generated helpers (mockery, phpunit)",
)
DATA_SETS_OPTION = typer.Option(None, "--data-sets", help="Data sets per provider method")
MAX_DEPTH_OPTION = typer.Option(None, "--max-depth", help="Maximum nested mock depth")
STRICT_OPTION = typer.Option(
    None,
    "--strict/--lenient",
    help="Fail on members without a type instead of using mixed",
)
SEED_OPTION = typer.Option(None, "--seed", help="Seed for fake values")
ONLY_METHODS_OPTION = typer.Option(
    None,
    "--only-method",
    "-m",
    help="Generate tests only for this method (repeatable)",
)
SKIP_METHODS_OPTION = typer.Option(
    None,
    "--skip-method",
    help="Do not generate a test for this method (repeatable)",
)


@app.command("class")
def class_(
    source: str = typer.Argument(..., help="PHP source file or fully qualified class name"),
    reflection: Path = REFLECTION_OPTION,
    config_file: Path = CONFIG_OPTION,
    mock_backend: str = BACKEND_OPTION,
    data_sets: int = DATA_SETS_OPTION,
    max_depth: int = MAX_DEPTH_OPTION,
    strict: bool = STRICT_OPTION,
    seed: int = SEED_OPTION,
    only_methods: list[str] = ONLY_METHODS_OPTION,
    skip_methods: list[str] = SKIP_METHODS_OPTION,
) -> None:
    """Generate the test of one class."""
    logger.info("class_command", source=source)
    try:
        service = build_class_service(
            reflection,
            config_file,
            mock_backend,
            data_sets,
            max_depth,
            strict,
            seed,
            only_methods,
            skip_methods,
        )
        result = service.generate(source)
    except SkelgenError as e:
        fail(e)
    format_result_line(result, console)


@app.command()
def project(
    source_dir: Path = typer.Argument(..., help="Source directory holding the module folders"),
    reflection: Path = REFLECTION_OPTION,
    config_file: Path = CONFIG_OPTION,
    mock_backend: str = BACKEND_OPTION,
    data_sets: int = DATA_SETS_OPTION,
    max_depth: int = MAX_DEPTH_OPTION,
    strict: bool = STRICT_OPTION,
    seed: int = SEED_OPTION,
    only_methods: list[str] = ONLY_METHODS_OPTION,
    skip_methods: list[str] = SKIP_METHODS_OPTION,
    exclude: list[str] = typer.Option(
        None,
        "--exclude",
        "-e",
        help="Module folder to skip (repeatable)",
    ),
    suite: bool = typer.Option(
        False,
        "--suite",
        "-s",
        help="Also write phpunit.xml with one test suite per module",
    ),
) -> None:
    """Generate tests for every class of a project."""
    logger.info("project_command", source_dir=str(source_dir), suite=suite)
    settings = get_settings()
    try:
        service = build_class_service(
            reflection,
            config_file,
            mock_backend,
            data_sets,
            max_depth,
            strict,
            seed,
            only_methods,
            skip_methods,
        )
        walker = TestProjectService(service, [*settings.exclude_folders, *(exclude or [])])
        results = walker.generate(source_dir)
    except SkelgenError as e:
        fail(e)

    format_results_table(results, console)

    layout = next(iter(service.layouts.values()), None)
    if layout is None:
        return
    base_result = BaseTestGenerator(files=service.files, renderer=service.renderer).write(
        layout.unit_test_root,
        layout.test_namespace_root,
        mockery=service.config.mock_backend == "mockery",
    )
    format_result_line(base_result, console)
    if suite:
        modules = collect_test_files(layout.unit_test_root, layout.project_root)
        written = SuiteConfigGenerator(files=service.files, renderer=service.renderer).write(
            layout.project_root,
            modules,
            overwrite=True,
        )
        format_result_line(written, console)


@app.command()
def base(
    project_root: Path = typer.Argument(Path("."), help="Project root holding the test folder"),
    namespace: str = typer.Option(
        ...,
        "--namespace",
        "-n",
        help="Project namespace prefix, e.g. App",
    ),
    mock_backend: str = BACKEND_OPTION,
) -> None:
    """Generate the shared UnitTestCase base class."""
    settings = get_settings()
    backend = mock_backend or settings.mock_backend
    unit_test_root = project_root / settings.test_folder / settings.unit_test_folder
    test_namespace = join_namespace(namespace.strip("\\"), ucfirst(settings.test_folder), settings.unit_test_folder)
    logger.info("base_command", path=str(unit_test_root), namespace=test_namespace)
    result = BaseTestGenerator().write(unit_test_root, test_namespace, mockery=backend == "mockery")
    format_result_line(result, console)


@app.command("suite")
def suite_(
    project_root: Path = typer.Argument(Path("."), help="Project root holding the test folder"),
    bootstrap: str = typer.Option(
        DEFAULT_BOOTSTRAP,
        "--bootstrap",
        help="Bootstrap file relative to the project root",
    ),
    overwrite: bool = typer.Option(
        False,
        "--overwrite",
        "-f",
        help="Replace an existing phpunit.xml",
    ),
) -> None:
    """Generate phpunit.xml listing the unit tests of every module."""
    settings = get_settings()
    unit_test_root = project_root / settings.test_folder / settings.unit_test_folder
    modules = collect_test_files(unit_test_root, project_root)
    if not modules:
        console.print(f"[yellow]No tests found under {unit_test_root}[/yellow]")
    logger.info("suite_command", path=str(project_root), modules=len(modules))
    result = SuiteConfigGenerator().write(project_root, modules, bootstrap, overwrite=overwrite)
    format_result_line(result, console)


if __name__ == "__main__":
    app()
