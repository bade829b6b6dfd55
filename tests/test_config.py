"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from articulation.config.policies import HierarchyPolicy, Policies, load_policies
from articulation.config.settings import PathsConfig, Settings


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    default = {
        "log_level": "INFO",
        "policies": {
            "hierarchy": {"indent": "  ", "export_format": "json"},
        },
    }
    testing = {
        "log_level": "WARNING",
        "policies": {"hierarchy": {"strict_merge_validation": True}},
    }
    (tmp_path / "default.yaml").write_text(yaml.safe_dump(default), encoding="utf-8")
    (tmp_path / "testing.yaml").write_text(yaml.safe_dump(testing), encoding="utf-8")
    return tmp_path


def test_hierarchy_policy_defaults() -> None:
    policy = HierarchyPolicy()
    assert policy.strict_merge_validation is False
    assert policy.log_chain is False
    assert policy.indent == "    "
    assert policy.export_format == "text"


@pytest.mark.parametrize("payload", [{"indent": ""}, {"indent": "\n"}, {"export_format": "xml"}])
def test_hierarchy_policy_rejects_invalid_values(payload: dict) -> None:
    with pytest.raises(ValidationError):
        HierarchyPolicy(**payload)


def test_load_policies_from_dict() -> None:
    policies = load_policies({"hierarchy": {"log_chain": True}})
    assert isinstance(policies, Policies)
    assert policies.hierarchy.log_chain is True


def test_configuration_models_only_carry_used_sections() -> None:
    assert set(Policies.model_fields) == {"hierarchy"}
    assert set(PathsConfig.model_fields) == {"logs_dir"}


def test_load_policies_from_file(tmp_path: Path) -> None:
    path = tmp_path / "policies.yaml"
    path.write_text(yaml.safe_dump({"hierarchy": {"indent": "\t"}}), encoding="utf-8")
    assert load_policies(path).hierarchy.indent == "\t"

    with pytest.raises(FileNotFoundError):
        load_policies(tmp_path / "absent.yaml")


def test_load_policies_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ARTICULATION_POLICY__HIERARCHY__STRICT_MERGE_VALIDATION", "true")
    policies = load_policies({})
    assert policies.hierarchy.strict_merge_validation is True


def test_settings_merge_default_and_environment_files(config_dir: Path) -> None:
    settings = Settings(config_dir=config_dir, environment="testing")

    assert settings.environment == "testing"
    assert settings.log_level == "WARNING"
    assert settings.policies.hierarchy.indent == "  "
    assert settings.policies.hierarchy.export_format == "json"
    assert settings.policies.hierarchy.strict_merge_validation is True


def test_settings_kwargs_take_precedence(config_dir: Path) -> None:
    settings = Settings(
        config_dir=config_dir,
        log_level="ERROR",
        policies={"hierarchy": {"export_format": "dot"}},
    )
    assert settings.log_level == "ERROR"
    assert settings.policies.hierarchy.export_format == "dot"
    assert settings.policies.hierarchy.indent == "  "


def test_settings_env_override(monkeypatch: pytest.MonkeyPatch, config_dir: Path, tmp_path: Path) -> None:
    logs_dir = tmp_path / "logs"
    monkeypatch.setenv("ARTICULATION_SETTINGS__LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("ARTICULATION_SETTINGS__PATHS__LOGS_DIR", str(logs_dir))

    settings = Settings(config_dir=config_dir)

    assert settings.log_level == "DEBUG"
    assert settings.log_file == logs_dir / "articulation.log"


def test_settings_create_dirs(tmp_path: Path, config_dir: Path) -> None:
    logs_dir = tmp_path / "logs"
    Settings(config_dir=config_dir, create_dirs=True, paths={"logs_dir": str(logs_dir)})
    assert logs_dir.is_dir()


def test_repository_configuration_loads() -> None:
    settings = Settings(environment="production")
    assert settings.log_to_file is True
    assert settings.policies.hierarchy.strict_merge_validation is False
