"""Configuration management for spdxtree."""

from __future__ import annotations

import os
import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import DefaultFileInformation, SpdxTreeConfig
from .resolver import (
    ENV_PREFIX,
    LIST_SETTINGS,
    SETTING_TYPES,
    expand_dotted,
    flatten_for_env,
    merge_settings,
    parse_env_overrides,
    parse_setting_value,
    resolve_with_precedence,
)

DEFAULT_CONFIG_PATH = Path("~/.spdxtree/config.yaml")
_CONFIG_HEADER = textwrap.dedent(
    """\
    # spdxtree configuration file
    # Manage with `spdxtree config edit` or `spdxtree config set KEY --value VALUE`.
    """
)


class ConfigManager:
    """Own the YAML configuration file and resolve the effective settings.

    Settings resolve as defaults, then the file, then ``SPDXTREE__`` environment
    variables, then CLI overrides.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
    ) -> SpdxTreeConfig:
        """Create the file when missing and return the effective configuration.

        Raises:
            ConfigError: If the file or any override layer is invalid.
        """
        self.ensure_exists()
        return resolve_with_precedence(
            defaults=SpdxTreeConfig(),
            file_overrides=self.load_file_overrides(),
            env_overrides=parse_env_overrides(self._env) if include_env else None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return the raw mapping stored in the configuration file."""
        if not self.config_path.exists():
            return {}
        try:
            raw = yaml.safe_load(self.config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw

    def save(self, data: Mapping[str, Any]) -> None:
        """Write ``data`` to the configuration file under a timestamped header."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(dict(data), sort_keys=False)
        self.config_path.write_text(
            f"{_CONFIG_HEADER}# Last updated: {stamp}\n{body}", encoding="utf-8"
        )

    def ensure_exists(self) -> Path:
        """Write the default configuration when no file exists yet."""
        if not self.config_path.exists():
            self.save(SpdxTreeConfig().model_dump(mode="python"))
        return self.config_path

    def read_text(self) -> str:
        """Return the configuration file contents, or an empty string."""
        if not self.config_path.exists():
            return ""
        return self.config_path.read_text(encoding="utf-8")


__all__ = [
    "ConfigManager",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "DefaultFileInformation",
    "ENV_PREFIX",
    "LIST_SETTINGS",
    "SETTING_TYPES",
    "SpdxTreeConfig",
    "expand_dotted",
    "flatten_for_env",
    "merge_settings",
    "parse_env_overrides",
    "parse_setting_value",
    "resolve_with_precedence",
]
