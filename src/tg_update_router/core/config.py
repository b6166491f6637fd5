"""YAML-backed bot settings.

Settings files live in a config directory. Loading a file that does not exist yet
materializes it first (from a bundled template if one is given, otherwise from the
model's defaults), so a fresh deployment starts with an editable file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, ClassVar, Optional, TypeVar

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from tg_update_router.core.exceptions import ConfigError
from tg_update_router.core.kinds import UpdateKind, kind_from_name

TOKEN_ENV_VAR = "TELEGRAM_BOT_TOKEN"

SettingsT = TypeVar("SettingsT", bound="YamlSettings")


class YamlSettings(BaseModel):
    """Base for settings models stored as YAML; subclasses set `filename`."""

    filename: ClassVar[str] = "settings.yml"


class BotSettings(YamlSettings):
    filename: ClassVar[str] = "bot.yml"

    token: str = Field(default="", description=f"Bot API token; falls back to ${TOKEN_ENV_VAR}.")
    allowed_updates: list[str] = Field(
        default_factory=list,
        description="Bot API update types to request from the transport (empty = all).",
    )
    drop_pending_updates: bool = Field(default=False, description="Skip updates queued while offline.")
    log_level: str = Field(default="INFO", description="Root log level for the bot process.")
    handled_kinds: list[UpdateKind] = Field(
        default_factory=list,
        description="Kinds the application expects to handle; missing handlers are warned about at startup.",
    )

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level '{value}'.")
        return level

    @field_validator("handled_kinds", mode="before")
    @classmethod
    def parse_kinds(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        parsed = []
        for item in value:
            kind = kind_from_name(item) if isinstance(item, str) else item
            if kind is None:
                raise ValueError(f"Unknown update kind '{item}'.")
            parsed.append(kind)
        return parsed

    @model_validator(mode="after")
    def token_from_env(self) -> "BotSettings":
        if not self.token:
            self.token = os.getenv(TOKEN_ENV_VAR, "")
        return self


class YamlConfigManager:
    """Reads, validates and writes YamlSettings models in one config directory."""

    def __init__(
        self,
        config_dir: str | os.PathLike[str] = "configs",
        *,
        use_dotenv: bool = True,
        logger: logging.Logger | None = None,
    ) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._config_dir = Path(config_dir)
        if use_dotenv:
            load_dotenv()

    @property
    def config_dir(self) -> Path:
        return self._config_dir.absolute()

    @config_dir.setter
    def config_dir(self, directory: str | os.PathLike[str]) -> None:
        path = Path(directory)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigError("Config directory cannot be created", path=str(path)) from exc
        self._config_dir = path

    def path_for(self, model_cls: type[YamlSettings]) -> Path:
        return self.config_dir / model_cls.filename

    def load(self, model_cls: type[SettingsT], *, template: Optional[str | os.PathLike[str]] = None) -> SettingsT:
        """Load and validate `model_cls` from its YAML file, materializing it if missing."""
        path = self.path_for(model_cls)
        if not path.exists():
            self._materialize(model_cls, path, template)

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError("Config file could not be read", path=str(path)) from exc

        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a mapping", path=str(path))
        try:
            return model_cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(f"Invalid config: {exc}", path=str(path)) from exc

    def dump(self, settings: YamlSettings) -> Path:
        """Write `settings` to its YAML file and return the path."""
        path = self.path_for(type(settings))
        self._ensure_dir()
        data = settings.model_dump(mode="json")
        try:
            with open(path, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
        except OSError as exc:
            raise ConfigError("Config file could not be written", path=str(path)) from exc
        return path

    def _ensure_dir(self) -> None:
        if not self.config_dir.is_dir():
            self.config_dir = self._config_dir

    def _materialize(
        self, model_cls: type[YamlSettings], path: Path, template: Optional[str | os.PathLike[str]]
    ) -> None:
        self._ensure_dir()
        if template is not None:
            source = Path(template)
            if not source.is_file():
                raise ConfigError("Config template not found", path=str(source))
            path.write_text(source.read_text(encoding="utf-8"), encoding="utf-8")
            self._logger.info("Created %s from template %s", path, source)
            return
        if any(field.is_required() for field in model_cls.model_fields.values()):
            raise ConfigError(
                f"{model_cls.__name__} has required fields and no template was given",
                path=str(path),
            )
        # Built without validators so environment fallbacks (the token) stay out of the file.
        self.dump(model_cls.model_construct())
        self._logger.info("Created %s with default settings", path)
