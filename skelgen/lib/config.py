"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from skelgen.lib.errors import ConfigurationError
from skelgen.lib.logging import get_logger

logger = get_logger(__name__)

MockBackendName = Literal["mockery", "phpunit"]


class ExclusionRules(BaseModel):
    """Method and class exclusion lists shared by every generator component.

    Names in ``exclude_class_methods`` and ``only_class_methods`` are keyed by
    fully qualified class name without the leading backslash.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    exclude_methods: tuple[str, ...] = Field(
        default=(),
        description="Method names never mocked or given data",
    )
    exclude_classes: tuple[str, ...] = Field(
        default=(),
        description="Classes whose methods are never mocked",
    )
    exclude_class_methods: dict[str, tuple[str, ...]] = Field(
        default_factory=dict,
        description="Per class method names to skip",
    )
    only_class_methods: dict[str, tuple[str, ...]] = Field(
        default_factory=dict,
        description="Per class allow-list, every other method is skipped",
    )
    excluded_declaring_namespaces: tuple[str, ...] = Field(
        default=("Exception",),
        description="Top level namespaces whose declared methods are ignored",
    )
    magic_methods: tuple[str, ...] = Field(
        default=(
            "__call",
            "__get",
            "__set",
            "__isset",
            "__unset",
            "__sleep",
            "__wakeup",
            "__tostring",
        ),
        description="Lower-cased method names ignored everywhere",
    )
    self_returning_methods: tuple[str, ...] = Field(
        default=("fromNative",),
        description="Method names that always return an instance of their class",
    )
    data_exclude_methods: tuple[str, ...] = Field(
        default=("fromNative", "fromArray", "toReal", "toNatural", "toInteger", "__toString"),
        description="Methods skipped when building nested mock data",
    )
    data_self_methods: tuple[str, ...] = Field(
        default=("toNative", "generateAsString", "toString"),
        description="Methods whose data is shared with the owning class entry",
    )

    def is_method_excluded(self, class_name: str, method_name: str) -> bool:
        """Check the configured lists for one method of one class."""
        if class_name in self.exclude_classes or method_name in self.exclude_methods:
            return True
        if method_name in self.exclude_class_methods.get(class_name, ()):
            return True
        allowed = self.only_class_methods.get(class_name)
        if allowed is not None and method_name not in allowed:
            return True
        return method_name.lower() in self.magic_methods

    def is_declaring_class_excluded(self, declaring_class: str) -> bool:
        """Check whether methods declared by ``declaring_class`` are ignored."""
        top = declaring_class.lstrip("\\").split("\\")[0]
        return top in self.excluded_declaring_namespaces


class GeneratorConfig(BaseModel):
    """Immutable per-run configuration snapshot threaded through components."""

    model_config = ConfigDict(frozen=True)

    mock_backend: MockBackendName = "mockery"
    max_mock_depth: int = Field(default=4, ge=1)
    data_set_count: int = Field(default=1, ge=1)
    strict_types: bool = False
    bypass_finals: bool = False
    rules: ExclusionRules = Field(default_factory=ExclusionRules)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and .env file.

    Environment variables (prefixed with SKELGEN_) take precedence over
    .env file values.
    """

    model_config = SettingsConfigDict(
        env_prefix="SKELGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(default="WARNING", description="Logging level")
    log_file: str | None = Field(default=None, description="Optional rotating log file")

    # Generation settings
    mock_backend: MockBackendName = Field(
        default="mockery",
        description="Mocking library targeted by generated helpers",
    )
    max_mock_depth: int = Field(default=4, description="Maximum nested mock depth")
    data_set_count: int = Field(default=1, description="Data sets per provider method")
    strict_types: bool = Field(
        default=False,
        description="Fail when a member type cannot be found instead of using mixed",
    )
    bypass_finals: bool = Field(
        default=False,
        description="Host project can mock final classes (dg/bypass-finals)",
    )
    fake_seed: int | None = Field(default=None, description="Seed for fake values")
    fake_locale: str = Field(default="en_US", description="Locale for fake values")
    rules_file: str | None = Field(default=None, description="YAML exclusion rules file")

    # Layout settings
    psr_namespace_type: Literal["psr-1", "psr-4"] = Field(
        default="psr-4",
        description="How source directories map to namespaces",
    )
    source_folder: str = Field(default="src", description="Source folder name")
    test_folder: str = Field(default="tests", description="Test folder name")
    unit_test_folder: str = Field(default="Unit", description="Unit test folder name")
    exclude_folders: list[str] = Field(
        default_factory=list,
        description="Module folders skipped by project runs",
    )

    def generator_config(self, rules_file: str | Path | None = None, **overrides: object) -> GeneratorConfig:
        """
        Build the immutable generator snapshot for one run.

        Args:
            rules_file: YAML exclusion rules, defaults to ``self.rules_file``
            **overrides: Values that replace settings (None values are ignored)

        Returns:
            GeneratorConfig instance
        """
        values: dict[str, object] = {
            "mock_backend": self.mock_backend,
            "max_mock_depth": self.max_mock_depth,
            "data_set_count": self.data_set_count,
            "strict_types": self.strict_types,
            "bypass_finals": self.bypass_finals,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        path = rules_file or self.rules_file
        if path:
            values["rules"] = load_rules(path)
        try:
            return GeneratorConfig(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid generator configuration: {e}") from e


def load_rules(path: str | Path) -> ExclusionRules:
    """
    Load exclusion rules from a YAML file.

    Lists are accepted wherever tuples are declared. Missing keys keep
    their defaults.

    Args:
        path: Path to the YAML file

    Returns:
        ExclusionRules instance

    Raises:
        ConfigurationError: If the file is missing or does not validate
    """
    rules_path = Path(path)
    if not rules_path.is_file():
        raise ConfigurationError(
            f"Rules file not found: {rules_path}",
            context={"path": str(rules_path)},
        )

    try:
        with open(rules_path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in {rules_path}: {e}",
            context={"path": str(rules_path)},
        ) from e

    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"Rules file {rules_path} must contain a mapping",
            context={"path": str(rules_path)},
        )

    try:
        rules = ExclusionRules.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid rules in {rules_path}: {e}",
            context={"path": str(rules_path)},
        ) from e

    logger.debug("rules_loaded", path=str(rules_path), keys=sorted(raw))
    return rules


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings instance (cached for performance)
    """
    return Settings()


__all__ = [
    "ExclusionRules",
    "GeneratorConfig",
    "MockBackendName",
    "Settings",
    "get_settings",
    "load_rules",
]
