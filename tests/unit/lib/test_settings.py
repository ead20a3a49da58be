"""Tests for settings, exclusion rules and logging setup."""

import logging

import pytest

from skelgen.lib.config import ExclusionRules, GeneratorConfig, Settings, load_rules
from skelgen.lib.errors import ConfigurationError
from skelgen.lib.logging import configure_logging, get_logger


class TestSettings:
    """Tests for environment driven settings."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.mock_backend == "mockery"
        assert settings.max_mock_depth == 4
        assert settings.psr_namespace_type == "psr-4"
        assert settings.unit_test_folder == "Unit"

    def test_environment_prefix(self, monkeypatch):
        """SKELGEN_ variables should override defaults."""
        monkeypatch.setenv("SKELGEN_MOCK_BACKEND", "phpunit")
        monkeypatch.setenv("SKELGEN_DATA_SET_COUNT", "3")

        settings = Settings(_env_file=None)

        assert settings.mock_backend == "phpunit"
        assert settings.data_set_count == 3

    def test_generator_config_overrides(self):
        """Command line overrides should win, None values should be ignored."""
        config = Settings(_env_file=None).generator_config(max_mock_depth=2, strict_types=None)

        assert isinstance(config, GeneratorConfig)
        assert config.max_mock_depth == 2
        assert config.strict_types is False

    def test_generator_config_invalid(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Settings(_env_file=None).generator_config(max_mock_depth=0)

        assert exc_info.value.error_code == "CONFIG_ERROR"

    def test_generator_config_loads_rules(self, tmp_path):
        rules_file = tmp_path / "rules.yaml"
        rules_file.write_text("exclude_methods:\n  - getId\n")

        config = Settings(_env_file=None).generator_config(rules_file=rules_file)

        assert config.rules.exclude_methods == ("getId",)


class TestLoadRules:
    """Tests for YAML exclusion rules."""

    def test_valid_file(self, tmp_path):
        """Lists should be accepted and missing keys keep their defaults."""
        rules_file = tmp_path / "rules.yaml"
        rules_file.write_text(
            "exclude_classes:\n  - App\\Legacy\nexclude_class_methods:\n  App\\Repo:\n    - count\n"
        )

        rules = load_rules(rules_file)

        assert rules.exclude_classes == ("App\\Legacy",)
        assert rules.exclude_class_methods == {"App\\Repo": ("count",)}
        assert rules.self_returning_methods == ("fromNative",)

    def test_empty_file(self, tmp_path):
        rules_file = tmp_path / "rules.yaml"
        rules_file.write_text("")

        assert load_rules(rules_file) == ExclusionRules()

    @pytest.mark.parametrize(
        "content",
        ["exclude_methods: [unclosed", "- a\n- b\n", "unknown_key: 1\n"],
    )
    def test_invalid_file(self, tmp_path, content):
        """Broken YAML, non-mappings and unknown keys should be rejected."""
        rules_file = tmp_path / "rules.yaml"
        rules_file.write_text(content)

        with pytest.raises(ConfigurationError) as exc_info:
            load_rules(rules_file)

        assert exc_info.value.context["path"] == str(rules_file)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_rules(tmp_path / "missing.yaml")


class TestExclusionRules:
    """Tests for method exclusion checks."""

    def test_lists(self):
        rules = ExclusionRules(
            exclude_methods=("getId",),
            exclude_classes=("App\\Legacy",),
            exclude_class_methods={"App\\Repo": ("count",)},
            only_class_methods={"App\\Api": ("call",)},
        )

        assert rules.is_method_excluded("App\\User", "getId")
        assert rules.is_method_excluded("App\\Legacy", "anything")
        assert rules.is_method_excluded("App\\Repo", "count")
        assert not rules.is_method_excluded("App\\Repo", "find")
        assert rules.is_method_excluded("App\\Api", "other")
        assert not rules.is_method_excluded("App\\Api", "call")

    def test_magic_methods(self):
        """Magic methods should be excluded regardless of case."""
        assert ExclusionRules().is_method_excluded("App\\User", "__toString")

    def test_declaring_namespace(self):
        rules = ExclusionRules()

        assert rules.is_declaring_class_excluded("\\Exception")
        assert not rules.is_declaring_class_excluded("App\\Exception\\Failure")


class TestLogging:
    """Tests for structured logging setup."""

    def test_log_file(self, tmp_path):
        """configure_logging should install a file handler at the given level."""
        log_file = tmp_path / "logs" / "skelgen.log"
        try:
            configure_logging("INFO", str(log_file))
            get_logger("skelgen.test").info("mock_registered", target="App\\Repo")
            for handler in logging.getLogger().handlers:
                handler.flush()

            assert "mock_registered" in log_file.read_text()
            assert logging.getLogger().level == logging.INFO
        finally:
            configure_logging("WARNING")
