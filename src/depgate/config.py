from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any, Literal, Self

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from depgate.constants import PROJECT_CONFIG_FILENAME
from depgate.dependencies.models import DependencyKind
from depgate.exceptions import ConfigError
from depgate.logging import get_logger

__all__ = [
    "DepgateConfig",
    "HandlerConfig",
    "CheckerConfig",
    "load_config",
    "get_user_config_path",
]

logger = get_logger(__name__)

# Project config path for the load_config() call in progress
_project_config_path: ContextVar[Path | None] = ContextVar(
    "depgate_project_config_path", default=None
)


class CheckerConfig(BaseModel):
    """One checker and its raw declarations.

    Attributes:
        id: Checker identity, used to group results and key reports.
        kind: Declaration kind the checker owns.
        optional: Whether failures must not block activation. When omitted,
            inferred from an "optional" marker in the id.
        dependencies: Raw declarations, validated by the checker. Either a
            list or a mapping of natural key to declaration fields.

    Example depgate.yaml:
        handlers:
          shop_active:
            checkers:
              - id: shop_modules
                kind: python_modules
                dependencies: [sqlite3, zlib]
              - id: shop_optional_settings
                kind: environment_settings
                dependencies:
                  SHOP_UPLOAD_LIMIT:
                    expected: 134217728
                    comparison: minimum
    """

    id: str = Field(min_length=1)
    kind: DependencyKind
    optional: bool | None = None
    dependencies: list[Any] | dict[str, Any] = Field(default_factory=list)


class HandlerConfig(BaseModel):
    """Settings for one dependencies handler.

    A handler with exactly one checker is built as a single-checker handler,
    anything else as a multi-checker handler.
    """

    checkers: list[CheckerConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_checker_ids(self) -> Self:
        seen: set[str] = set()
        for checker in self.checkers:
            if checker.id in seen:
                raise ValueError(f"Duplicate checker id '{checker.id}'")
            seen.add(checker.id)
        return self


class YamlConfigSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from YAML files."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            try:
                with open(yaml_file) as f:
                    loaded = yaml.safe_load(f)
                    if loaded is None:
                        logger.warning(
                            f"Config file {yaml_file} is empty, using defaults."
                        )
                    elif isinstance(loaded, dict):
                        self._config_data = loaded
                    else:
                        raise ConfigError(
                            message=f"Config file {yaml_file} must contain a mapping",
                            field=None,
                            value=type(loaded).__name__,
                        )
            except yaml.YAMLError as e:
                raise ConfigError(
                    message=f"Invalid YAML in {yaml_file}: {e}",
                    field=None,
                    value=None,
                ) from e

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        """Get value for a specific field from the YAML config."""
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return the complete config data."""
        return self._config_data


class DepgateConfig(BaseSettings):
    """Root configuration object containing all depgate settings.

    Attributes:
        registrant_name: Name used in user-facing messages about missing
            dependencies (e.g., "Shop").
        verbosity: Default log level for the CLI.
        handlers: Handler id to handler settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="DEPGATE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    registrant_name: str = "This component"
    verbosity: Literal["error", "warning", "info", "debug"] = "warning"
    handlers: dict[str, HandlerConfig] = Field(default_factory=dict)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources.

        Priority (highest to lowest):
        1. Init settings (explicit keyword arguments)
        2. Environment variables (DEPGATE_*)
        3. Project YAML config (./depgate.yaml or the path given to load_config)
        4. User YAML config (~/.config/depgate/config.yaml)
        """
        project_config_path = (
            _project_config_path.get() or Path.cwd() / PROJECT_CONFIG_FILENAME
        )

        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, project_config_path),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


def get_user_config_path() -> Path:
    """Get the path to the user configuration file.

    Returns:
        Path to ~/.config/depgate/config.yaml
    """
    return Path.home() / ".config" / "depgate" / "config.yaml"


def load_config(config_path: Path | None = None) -> DepgateConfig:
    """Load configuration with hierarchy: defaults -> user -> project -> env.

    Args:
        config_path: Optional path to project config file. Defaults to
            ./depgate.yaml

    Returns:
        DepgateConfig instance with merged configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    if config_path is None:
        config_path = Path.cwd() / PROJECT_CONFIG_FILENAME

    if not config_path.exists():
        logger.info("No project configuration found, using defaults.")

    token = _project_config_path.set(config_path)
    try:
        return DepgateConfig()
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
    finally:
        _project_config_path.reset(token)
