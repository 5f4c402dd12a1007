from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any, ClassVar, Literal

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from testgate.exceptions import ConfigError
from testgate.logging import get_logger

__all__ = [
    "TestgateConfig",
    "load_config",
    "load_plugins",
    "get_user_config_path",
    "PROJECT_CONFIG_NAME",
]

logger = get_logger(__name__)

PROJECT_CONFIG_NAME = "testgate.yaml"


class YamlConfigSource(PydanticBaseSettingsSource):
    """Settings source that reads a YAML file, if it exists."""

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
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {yaml_file}: {e}") from e
            if loaded is None:
                logger.warning(f"Config file {yaml_file} is empty, using defaults.")
            elif not isinstance(loaded, dict):
                raise ConfigError(
                    f"Config file {yaml_file} must contain a mapping",
                    value=loaded,
                )
            else:
                self._config_data = loaded

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._config_data


class TestgateConfig(BaseSettings):
    """Root configuration object.

    Attributes:
        verbosity: Log level used when no -v/-q flag is given.
        plugins: Modules imported before a run so they can register
            checkers and preconditions.
        method_prefix: Name prefix of test methods found by the default host.

    Example testgate.yaml:
        verbosity: info
        plugins:
          - myproject.testing.checkers
        method_prefix: test
    """

    __test__ = False

    # None means ./testgate.yaml in the current directory.
    project_config_path: ClassVar[Path | None] = None

    model_config = SettingsConfigDict(
        env_prefix="TESTGATE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    verbosity: Literal["error", "warning", "info", "debug"] = "warning"
    plugins: list[str] = Field(default_factory=list)
    method_prefix: str = Field(default="test", min_length=1)

    @field_validator("method_prefix")
    @classmethod
    def check_method_prefix(cls, v: str) -> str:
        if not v.isidentifier():
            raise ValueError(f"method_prefix must be an identifier, got {v!r}")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Order settings sources, highest priority first.

        1. Explicit init arguments
        2. Environment variables (TESTGATE_*)
        3. Project YAML config (./testgate.yaml or the path given to
           load_config)
        4. User YAML config (~/.config/testgate/config.yaml)
        """
        project_config_path = cls.project_config_path or (
            Path.cwd() / PROJECT_CONFIG_NAME
        )
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, project_config_path),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


def get_user_config_path() -> Path:
    """Path to ~/.config/testgate/config.yaml."""
    return Path.home() / ".config" / "testgate" / "config.yaml"


def _with_project_config(config_path: Path) -> type[TestgateConfig]:
    """Settings class reading its project YAML from ``config_path``."""

    class ProjectTestgateConfig(TestgateConfig):
        project_config_path = config_path

    ProjectTestgateConfig.__name__ = TestgateConfig.__name__
    ProjectTestgateConfig.__qualname__ = TestgateConfig.__qualname__
    return ProjectTestgateConfig


def load_config(config_path: Path | None = None) -> TestgateConfig:
    """Load configuration: defaults -> user -> project -> env.

    Args:
        config_path: Project config file. Defaults to ./testgate.yaml.

    Returns:
        The merged configuration.

    Raises:
        ConfigError: If a config file is invalid YAML or a value fails
            validation.
    """
    if config_path is None:
        config_path = Path.cwd() / PROJECT_CONFIG_NAME

    if not config_path.exists():
        logger.info("No project configuration found, using defaults.")

    settings_cls = _with_project_config(config_path)
    try:
        return settings_cls()
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e


def load_plugins(config: TestgateConfig) -> list[str]:
    """Import every configured plugin module.

    Returns:
        The names of the imported modules.

    Raises:
        ConfigError: If a plugin module cannot be imported.
    """
    for module_name in config.plugins:
        try:
            importlib.import_module(module_name)
        except ImportError as e:
            raise ConfigError(
                f"Cannot import plugin '{module_name}': {e}",
                field="plugins",
                value=module_name,
            ) from e
        logger.debug("plugin_loaded", module=module_name)
    return list(config.plugins)
