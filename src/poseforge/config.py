"""Application configuration with pydantic-settings + TOML."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict, TomlConfigSettingsSource

from poseforge.models.animation import DEFAULT_LENGTH
from poseforge.models.enums import MismatchPolicy


def _default_config_dir() -> Path:
    return Path.home() / ".poseforge"


def _default_exports_dir() -> Path:
    return _default_config_dir() / "exports"


class EditorSettings(BaseSettings):
    """Authoring defaults."""

    model_config = SettingsConfigDict(env_prefix="POSEFORGE_EDITOR_")

    default_length: float = Field(default=DEFAULT_LENGTH, gt=0.0)
    export_filename: str = "animation.json"
    mismatch_policy: MismatchPolicy = MismatchPolicy.HOLD


class PlaybackSettings(BaseSettings):
    """Playback clock configuration."""

    model_config = SettingsConfigDict(env_prefix="POSEFORGE_PLAYBACK_")

    tick_rate: float = Field(default=60.0, gt=0.0)


class ShareSettings(BaseSettings):
    """Share link layout."""

    model_config = SettingsConfigDict(env_prefix="POSEFORGE_SHARE_")

    base_url: str = "http://localhost:5173/"
    animation_param: str = "animation"
    length_param: str = "length"


class StreamSettings(BaseSettings):
    """WebSocket pose stream for external renderers."""

    model_config = SettingsConfigDict(env_prefix="POSEFORGE_STREAM_")

    host: str = "localhost"
    port: int = Field(default=8770, ge=1, le=65535)

    @property
    def ws_url(self) -> str:
        return f"ws://{self.host}:{self.port}"


class AppConfig(BaseSettings):
    """Root application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="POSEFORGE_",
        env_nested_delimiter="__",
    )

    config_dir: Path = Field(default_factory=_default_config_dir)
    exports_dir: Path = Field(default_factory=_default_exports_dir)
    editor: EditorSettings = Field(default_factory=EditorSettings)
    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)
    share: ShareSettings = Field(default_factory=ShareSettings)
    stream: StreamSettings = Field(default_factory=StreamSettings)

    @classmethod
    def settings_customise_sources(cls, settings_cls, **kwargs):  # type: ignore[override]
        toml_path = _default_config_dir() / "config.toml"
        sources = (
            kwargs.get("init_settings"),
            kwargs.get("env_settings"),
        )
        if toml_path.exists():
            sources = (*sources, TomlConfigSettingsSource(settings_cls, toml_file=toml_path))
        return (*sources, kwargs.get("dotenv_settings"), kwargs.get("file_secret_settings"))

    def ensure_dirs(self) -> None:
        """Create config and export directories if they don't exist."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.exports_dir.mkdir(parents=True, exist_ok=True)


def load_config() -> AppConfig:
    """Load application config, creating defaults if needed."""
    config = AppConfig()
    config.ensure_dirs()
    return config
