"""Services wiring the generator to source files and project trees."""

from skelgen.services.test_class import ProjectLayout, TestClassService, derive_layout
from skelgen.services.test_project import TestProjectService

__all__ = ["ProjectLayout", "TestClassService", "TestProjectService", "derive_layout"]
