"""Template rendering for generated PHP sources."""

from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound

from skelgen.lib.errors import FileNotExistsError

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_SUFFIX = ".j2"


class TemplateRenderer:
    """Render named templates with a variable map.

    Template ids are file names without the ``.j2`` suffix, e.g.
    ``TestClass`` or ``phpunit.xml``.
    """

    def __init__(self, template_dir: Path | None = None) -> None:
        self.template_dir = template_dir or TEMPLATE_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,
        )

    def render(self, template_id: str, variables: dict[str, Any]) -> str:
        """
        Render a complete file.

        Raises:
            FileNotExistsError: If no template has this id
        """
        try:
            template = self.env.get_template(template_id + TEMPLATE_SUFFIX)
        except TemplateNotFound as e:
            raise FileNotExistsError(str(self.template_dir / (template_id + TEMPLATE_SUFFIX))) from e
        return template.render(**variables)

    def render_fragment(self, template_id: str, variables: dict[str, Any]) -> str:
        """Render a method body meant to be joined with others (no trailing newline)."""
        return self.render(template_id, variables).rstrip("\n")


def timestamp(now: datetime) -> dict[str, str]:
    """Date and time variables stamped into every generated file."""
    return {"date": now.strftime("%Y-%m-%d"), "time": now.strftime("%H:%M:%S")}


__all__ = ["TemplateRenderer", "TEMPLATE_DIR", "timestamp"]
