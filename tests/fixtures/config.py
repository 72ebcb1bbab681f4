"""Configuration fixtures for depgate tests."""

from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from depgate.config import DepgateConfig, load_config


@pytest.fixture
def isolated_home(
    temp_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Point HOME at a temporary directory so no user config file is found."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def project_dir(
    clean_env: None, isolated_home: Path, temp_dir: Path
) -> Generator[Path, None, None]:
    """Change into an empty project directory for the duration of a test."""
    project = temp_dir / "project"
    project.mkdir()
    original_cwd = os.getcwd()
    try:
        os.chdir(project)
        yield project
    finally:
        os.chdir(original_cwd)


@pytest.fixture
def sample_config(
    project_dir: Path, sample_config_yaml: str
) -> DepgateConfig:
    """Load a DepgateConfig from the sample depgate.yaml.

    The sample declares:
    - shop_active: a required and an optional modules checker
    - shop_disabled: one functions checker
    """
    (project_dir / "depgate.yaml").write_text(sample_config_yaml)
    return load_config()
