"""Merge configuration layers and translate them to and from environment variables.

Every layer (file, environment, CLI) is expanded to a nested mapping keyed like
``SpdxTreeConfig`` before it is merged over the defaults. Environment variables
are named ``SPDXTREE__SECTION__KEY``; list settings such as
``collection.exclude_patterns`` take a JSON array, or a single bare value that
becomes a one-item list.
"""

from __future__ import annotations

import json
from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, get_origin

import yaml
from pydantic import BaseModel, ValidationError

from .exceptions import ConfigError
from .models import SpdxTreeConfig

ENV_PREFIX = "SPDXTREE__"

SettingPath = Tuple[str, ...]


def _leaf_settings(
    model: type[BaseModel], prefix: SettingPath = ()
) -> Iterator[tuple[SettingPath, Any]]:
    for name, field in model.model_fields.items():
        annotation = field.annotation
        if (
            get_origin(annotation) is None
            and isinstance(annotation, type)
            and issubclass(annotation, BaseModel)
        ):
            yield from _leaf_settings(annotation, prefix + (name,))
        else:
            yield prefix + (name,), annotation


SETTING_TYPES: Dict[SettingPath, Any] = dict(_leaf_settings(SpdxTreeConfig))
LIST_SETTINGS = frozenset(path for path, kind in SETTING_TYPES.items() if get_origin(kind) is list)


def resolve_with_precedence(
    *,
    defaults: SpdxTreeConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> SpdxTreeConfig:
    """Layer file, environment, and CLI overrides over ``defaults``; later layers win.

    Raises:
        ConfigError: If a layer is malformed or the merged settings are invalid.
    """
    merged = defaults.model_dump(mode="python")
    for name, source in (
        ("file", file_overrides),
        ("environment", env_overrides),
        ("cli", cli_overrides),
    ):
        if source:
            merged = merge_settings(merged, expand_dotted(source, source_name=name))

    try:
        return SpdxTreeConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def expand_dotted(source: Mapping[str, Any], *, source_name: str) -> dict[str, Any]:
    """Turn ``{"a.b": 1}`` style keys into nested mappings.

    Raises:
        ConfigError: If ``source`` is not a mapping, a key is not a string, or a
            dotted key runs through a value that is not a mapping.
    """
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    expanded: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        *parents, leaf = key.split(".")
        node = expanded
        for segment in parents:
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                raise ConfigError(
                    f"{source_name.capitalize()} override {key} conflicts with the "
                    f"value of {segment}."
                )
            node = child
        if isinstance(value, MappingABC):
            value = expand_dotted(value, source_name=source_name)
            existing = node.get(leaf)
            if isinstance(existing, dict):
                value = merge_settings(existing, value)
        node[leaf] = value
    return expanded


def merge_settings(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``overrides`` merged in; nested mappings merge, lists replace."""
    merged = deepcopy(dict(base))
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(value, MappingABC) and isinstance(current, MappingABC):
            merged[key] = merge_settings(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


def parse_setting_value(path: SettingPath, raw: str) -> Any:
    """Parse a setting from its text form in environment variables and ``config set``.

    List settings accept a JSON array; any other text is a single list item, so a
    regular expression such as ``[._]git`` is never mistaken for YAML. Text
    settings keep the raw text, and ``null`` clears an optional one. The rest
    are parsed as YAML scalars or mappings and fall back to the raw text.
    """
    kind = SETTING_TYPES.get(path)
    if kind is str:
        return raw
    if kind == Optional[str]:
        return None if raw == "null" else raw
    if path in LIST_SETTINGS:
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            return [raw]
        return decoded if isinstance(decoded, list) else [raw]
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def parse_env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``SPDXTREE__`` variables from ``env`` into a nested override mapping."""
    overrides: dict[str, Any] = {}
    for key, raw in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        path = tuple(segment.lower() for segment in key[len(ENV_PREFIX) :].split("__") if segment)
        if path:
            overrides[".".join(path)] = parse_setting_value(path, raw)
    return expand_dotted(overrides, source_name="environment")


def flatten_for_env(config: SpdxTreeConfig) -> Dict[str, str]:
    """Render ``config`` as ``SPDXTREE__SECTION__KEY`` variables that parse back to it."""
    data = config.model_dump(mode="json")
    flat: Dict[str, str] = {}
    for path in SETTING_TYPES:
        value: Any = data
        for segment in path:
            value = value[segment]
        if isinstance(value, (list, dict)):
            rendered = json.dumps(value)
        elif isinstance(value, bool):
            rendered = "true" if value else "false"
        elif value is None:
            rendered = "null"
        else:
            rendered = str(value)
        flat[ENV_PREFIX + "__".join(segment.upper() for segment in path)] = rendered
    return flat


__all__ = [
    "ENV_PREFIX",
    "LIST_SETTINGS",
    "SETTING_TYPES",
    "expand_dotted",
    "flatten_for_env",
    "merge_settings",
    "parse_env_overrides",
    "parse_setting_value",
    "resolve_with_precedence",
]
