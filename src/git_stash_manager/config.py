from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from git_stash_manager.constants import (
    CONFIG_DIR_NAME,
    DEFAULT_DIFF_RENDERER,
    DEFAULT_PREVIEW_WINDOW,
    DEFAULT_SELECTOR_COMMAND,
    MIN_SELECTOR_VERSION,
    PREFERENCES_FILE_NAME,
    SETTINGS_FILE_NAME,
)
from git_stash_manager.exceptions import ConfigError
from git_stash_manager.logging import get_logger

__all__ = [
    "DiffConfig",
    "RenameStrategy",
    "SelectorConfig",
    "StashManagerConfig",
    "get_config_dir",
    "get_user_config_path",
    "load_config",
]

logger = get_logger(__name__)

_VERSION_PATTERN = re.compile(r"^\d+(\.\d+){0,2}$")


class RenameStrategy(str, Enum):
    """Order of the two backend calls that make up a rename.

    Values:
        STORE_FIRST: Store the new entry, then drop the original. A failed
            drop leaves both entries behind; nothing is lost.
        DROP_FIRST: Drop the original, then store. A failed store leaves the
            commit unreferenced; its id is reported so it can be recovered.
    """

    STORE_FIRST = "store-first"
    DROP_FIRST = "drop-first"


class SelectorConfig(BaseModel):
    """Settings for the fuzzy selector.

    Attributes:
        command: Selector executable (default: fzf).
        min_version: Oldest release the interactive controller accepts.
        preview_window: Preview pane placement (default: right:60%:wrap).
        enabled: Set to False to always use the numbered menu.
    """

    command: str = DEFAULT_SELECTOR_COMMAND
    min_version: str = MIN_SELECTOR_VERSION
    preview_window: str = DEFAULT_PREVIEW_WINDOW
    enabled: bool = True

    @field_validator("min_version")
    @classmethod
    def check_min_version(cls, v: str) -> str:
        if not _VERSION_PATTERN.match(v):
            raise ValueError(f"expected a dotted version like 0.45.0, got {v!r}")
        return v


class DiffConfig(BaseModel):
    """Settings for full-screen diff viewing and the preview pane.

    Attributes:
        renderer: Diff highlighter used when found on PATH (default: delta).
        pager: Pager for plain diffs. None means $PAGER, then less.
    """

    renderer: str | None = DEFAULT_DIFF_RENDERER
    pager: str | None = None


class YamlConfigSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from a YAML file."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = _read_yaml(yaml_file)

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        """Get value for a specific field from the YAML config."""
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._config_data


class StashManagerConfig(BaseSettings):
    """Root configuration object containing all git-stash-manager settings."""

    model_config = SettingsConfigDict(
        env_prefix="GIT_STASH_MANAGER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    selector: SelectorConfig = Field(default_factory=SelectorConfig)
    diff: DiffConfig = Field(default_factory=DiffConfig)
    rename_strategy: RenameStrategy = RenameStrategy.STORE_FIRST
    preferences_file: Path | None = None
    verbosity: Literal["error", "warning", "info", "debug"] = "warning"

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
        1. Environment variables (GIT_STASH_MANAGER_*)
        2. Explicit --config file (passed in as init settings)
        3. User YAML config (~/.config/git-stash-manager/settings.yaml)
        4. Defaults
        """
        return (
            env_settings,
            init_settings,
            YamlConfigSource(settings_cls, get_user_config_path()),
        )

    @property
    def preferences_path(self) -> Path:
        """Location of the ``default_action`` preference file."""
        if self.preferences_file is not None:
            return self.preferences_file.expanduser()
        return get_config_dir() / PREFERENCES_FILE_NAME


def _read_yaml(yaml_file: Path | None) -> dict[str, Any]:
    if yaml_file is None or not yaml_file.exists():
        return {}
    try:
        with open(yaml_file) as f:
            loaded = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {yaml_file}: {e}") from e
    if loaded is None:
        logger.warning("config_file_empty", path=str(yaml_file))
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(
            f"Expected a mapping at the top of {yaml_file}",
            value=type(loaded).__name__,
        )
    return loaded


def get_config_dir() -> Path:
    """Get the per-user configuration directory.

    Returns:
        Path to ~/.config/git-stash-manager
    """
    return Path.home() / ".config" / CONFIG_DIR_NAME


def get_user_config_path() -> Path:
    """Get the path to the user settings file.

    Returns:
        Path to ~/.config/git-stash-manager/settings.yaml
    """
    return get_config_dir() / SETTINGS_FILE_NAME


def load_config(config_path: Path | None = None) -> StashManagerConfig:
    """Load configuration with hierarchy: defaults -> user -> --config -> env.

    Args:
        config_path: Optional YAML file given on the command line.

    Returns:
        StashManagerConfig instance with merged configuration.

    Raises:
        ConfigError: If a file cannot be parsed or a value is invalid.
    """
    overrides: dict[str, Any] = {}
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(
                f"Config file not found: {config_path}",
                field="config",
                value=str(config_path),
            )
        overrides = _read_yaml(config_path)

    try:
        return StashManagerConfig(**overrides)
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
