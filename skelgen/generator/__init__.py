"""PHPUnit test, mock helper and data provider generation."""

from skelgen.generator.base_test import BaseTestGenerator
from skelgen.generator.models import GenerationResult, GenerationStatus, TestTarget
from skelgen.generator.preprocessor import MethodFilterPreprocessor, TestPreprocessor
from skelgen.generator.suite import SuiteConfigGenerator
from skelgen.generator.test_generator import TestGenerator

__all__ = [
    "BaseTestGenerator",
    "GenerationResult",
    "GenerationStatus",
    "MethodFilterPreprocessor",
    "SuiteConfigGenerator",
    "TestGenerator",
    "TestPreprocessor",
    "TestTarget",
]
