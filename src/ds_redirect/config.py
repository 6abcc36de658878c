"""Configuration models and loading logic."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_SETTINGS_FILE = Path("configs/settings.yaml")
SETTINGS_FILE_ENV = "DS_REDIRECT_SETTINGS_FILE"

LinkMode = Literal["auto", "symlink", "copy"]


class ProjectConfig(BaseModel):
    """Project metadata settings."""

    name: str = "ds_redirect"
    env: str = "dev"


class PathsConfig(BaseModel):
    """Filesystem roots for dataset sources, synthetic trees and logs."""

    source_root: Path = Path("./sources")
    tmp_root: Path | None = None
    logs_root: Path = Path("./logs")

    def resolved(self, project_root: Path) -> "PathsConfig":
        """Return a copy with project-relative paths resolved to absolute paths."""

        updates: dict[str, Path] = {}
        for field_name in type(self).model_fields:
            value = getattr(self, field_name)
            if value is None:
                continue
            updates[field_name] = value if value.is_absolute() else (project_root / value).resolve()
        return self.model_copy(update=updates)


class RedirectConfig(BaseModel):
    """Defaults applied by redirect() and the synthetic tree builder."""

    link_others: bool = True
    link_mode: LinkMode = "auto"
    tree_prefix: str = Field(default="ds_redirect_", min_length=1)


class AppSettings(BaseSettings):
    """Top-level application settings."""

    _yaml_file_override: ClassVar[Path | None] = None

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    sources: dict[str, Path] = Field(default_factory=dict)
    redirect: RedirectConfig = Field(default_factory=RedirectConfig)

    model_config = SettingsConfigDict(
        env_prefix="DS_REDIRECT_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Use YAML defaults while allowing env vars to override values."""

        yaml_file = resolve_settings_file(cls._yaml_file_override)
        yaml_settings = YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            yaml_settings,
            file_secret_settings,
        )

    def as_dict(self) -> dict[str, object]:
        """Return settings as a standard nested dictionary."""

        return self.model_dump(mode="json")

    def source_folder_for(self, dataset_type: str) -> Path:
        """Return the statically configured source folder of a dataset type."""

        configured = self.sources.get(dataset_type)
        if configured is not None:
            return configured
        return self.paths.source_root / dataset_type


def find_project_root(start: Path | None = None) -> Path:
    """Locate the project root by traversing upward for config markers."""

    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / "configs/settings.yaml").exists():
            return candidate
    return current


def resolve_settings_file(override: Path | None = None) -> Path:
    """Resolve settings file from explicit override, env var, or default."""

    chosen = override
    if chosen is None:
        env_value = os.getenv(SETTINGS_FILE_ENV)
        if env_value:
            chosen = Path(env_value)
    if chosen is None:
        chosen = DEFAULT_SETTINGS_FILE

    if not chosen.is_absolute():
        chosen = (find_project_root() / chosen).resolve()
    return chosen


def load_settings(config_file: Path | None = None) -> AppSettings:
    """Load settings with YAML defaults and environment variable overrides."""

    settings_file = resolve_settings_file(config_file)
    project_root = settings_file.parent.parent.resolve()
    AppSettings._yaml_file_override = settings_file
    try:
        settings = AppSettings()
    finally:
        AppSettings._yaml_file_override = None
    resolved_paths = settings.paths.resolved(project_root=project_root)
    resolved_sources = {
        name: path if path.is_absolute() else (project_root / path).resolve()
        for name, path in settings.sources.items()
    }
    return settings.model_copy(update={"paths": resolved_paths, "sources": resolved_sources})


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return process-wide settings, loaded once.

    Call ``get_settings.cache_clear()`` after changing the settings file or
    environment so the next call reloads them.
    """

    return load_settings()
