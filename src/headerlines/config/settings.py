"""Unified settings — env vars and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — explicit overrides from the caller
  2. Env vars     — ``HEADERLINES_*`` prefix
  3. TOML file    — passed to :meth:`HeaderLinesSettings.load`
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import logging
import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from headerlines.config.logging import configure_logging
from headerlines.config.models import EncoderConfig
from headerlines.domain.errors import ConfigError


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from an explicit TOML file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path is None:
            return
        try:
            raw = toml_path.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Cannot read settings file {toml_path}: {exc}"
            raise ConfigError(msg) from exc
        try:
            self._data = tomllib.loads(raw)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {toml_path}: {exc}"
            raise ConfigError(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class HeaderLinesSettings(BaseSettings):
    """Settings for encoding and logging, frozen after construction.

    Attributes:
        verbose: Enable DEBUG logging for the ``headerlines`` logger.
        log_json: Render log records as JSON lines.
        encoder: Options passed to :class:`headerlines.encoder.Encoder`.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "HEADERLINES_",
        "env_nested_delimiter": "__",
    }

    verbose: bool = False
    log_json: bool = False
    encoder: EncoderConfig = Field(default_factory=EncoderConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(cls, config_path: Path | str | None = None, **overrides: Any) -> HeaderLinesSettings:
        """Construct settings, layering *overrides* over env vars and the TOML file."""
        _tls.toml_path = Path(config_path) if config_path is not None else None
        try:
            return cls(**overrides)
        finally:
            _tls.toml_path = None

    def configure_logging(self) -> logging.Logger:
        """Apply ``verbose`` and ``log_json`` to the ``headerlines`` logger."""
        return configure_logging(verbose=self.verbose, log_json=self.log_json)
