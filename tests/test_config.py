from __future__ import annotations

from pathlib import Path

import pytest

from funcstack.config import ProjectConfig, SessionMode, load_project_config


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "funcstack.yaml"
    path.write_text(text)
    return path


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    for var in (
        "FUNCSTACK_STAGE",
        "FUNCSTACK_MODE",
        "FUNCSTACK_ASSET_BUCKET",
        "FUNCSTACK_DEBUG_INCREASE_TIMEOUT",
    ):
        monkeypatch.delenv(var, raising=False)


def test_defaults():
    config = ProjectConfig(name="demo")
    assert config.stage == "dev"
    assert config.mode == SessionMode.DEPLOY
    assert config.ssm_prefix == "/sst/demo/dev/"


def test_load_yaml(tmp_path: Path):
    path = _write(tmp_path, "name: shop\nstage: prod\nmode: remove\n")

    config = load_project_config(path)

    assert config.name == "shop"
    assert config.stage == "prod"
    assert config.mode == SessionMode.REMOVE
    assert config.ssm_prefix == "/sst/shop/prod/"


def test_explicit_ssm_prefix_is_kept(tmp_path: Path):
    path = _write(tmp_path, "name: shop\nssm_prefix: /custom/\n")
    assert load_project_config(path).ssm_prefix == "/custom/"


def test_environment_overrides(tmp_path: Path, monkeypatch):
    path = _write(tmp_path, "name: shop\nstage: prod\n")
    monkeypatch.setenv("FUNCSTACK_STAGE", "alice")
    monkeypatch.setenv("FUNCSTACK_MODE", "dev")
    monkeypatch.setenv("FUNCSTACK_DEBUG_INCREASE_TIMEOUT", "true")

    config = load_project_config(path)

    assert config.stage == "alice"
    assert config.mode == SessionMode.DEV
    assert config.debug_increase_timeout is True
    assert config.ssm_prefix == "/sst/shop/alice/"


def test_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_project_config(tmp_path / "nope.yaml")
