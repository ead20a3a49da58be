"""PHPUnit suite configuration generator."""

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from skelgen.generator.files import LocalFileSystem
from skelgen.generator.models import GenerationResult, GenerationStatus
from skelgen.generator.templates import TemplateRenderer, timestamp
from skelgen.lib.logging import get_logger

logger = get_logger(__name__)

SUITE_FILE = "phpunit.xml"
DEFAULT_BOOTSTRAP = "vendor/autoload.php"
# Support folders of the unit test root that hold no tests
SUPPORT_FOLDERS = frozenset({"DataProvider", "Mock"})


def collect_test_files(unit_test_root: Path, project_root: Path) -> dict[str, list[str]]:
    """
    Group the ``*Test.php`` files below a unit test root by module folder.

    Returns:
        Module name to test file paths relative to ``project_root``, sorted
    """
    modules: dict[str, list[str]] = {}
    if not unit_test_root.is_dir():
        return modules
    for path in sorted(unit_test_root.rglob("*Test.php")):
        relative = path.relative_to(unit_test_root)
        module = relative.parts[0] if len(relative.parts) > 1 else unit_test_root.name
        if module in SUPPORT_FOLDERS:
            continue
        modules.setdefault(module, []).append(path.relative_to(project_root).as_posix())
    return modules


class SuiteConfigGenerator:
    """Render ``phpunit.xml`` with one test suite per module."""

    def __init__(
        self,
        files: LocalFileSystem | None = None,
        renderer: TemplateRenderer | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.files = files or LocalFileSystem()
        self.renderer = renderer or TemplateRenderer()
        self.clock = clock

    def generate(self, modules: dict[str, list[str]], bootstrap: str = DEFAULT_BOOTSTRAP) -> str:
        return self.renderer.render(
            SUITE_FILE,
            {
                "bootstrap": bootstrap,
                "modules": dict(sorted(modules.items())),
                **timestamp(self.clock()),
            },
        )

    def write(
        self,
        project_root: Path,
        modules: dict[str, list[str]],
        bootstrap: str = DEFAULT_BOOTSTRAP,
        overwrite: bool = False,
    ) -> GenerationResult:
        """
        Write ``phpunit.xml`` into the project root.

        Returns:
            GenerationResult with the outcome
        """
        path = project_root / SUITE_FILE
        if self.files.exists(path) and not overwrite:
            return GenerationResult(GenerationStatus.EXISTS, path, SUITE_FILE, "Suite configuration already exists")

        self.files.make_dir(project_root)
        self.files.write_file(path, self.generate(modules, bootstrap))
        logger.info("suite_written", path=str(path), modules=len(modules))
        return GenerationResult(GenerationStatus.CREATED, path, SUITE_FILE)


__all__ = ["SuiteConfigGenerator", "collect_test_files"]
