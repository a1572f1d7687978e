"""Layering of configuration sources into a validated ``TakeflowConfig``.

Every takeflow setting lives exactly one level deep (``section.field``), so each
source is normalized into a ``{section: {field: value}}`` layer before layers are
stacked over the defaults.
"""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from typing import Any, Dict, Mapping

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import TakeflowConfig

ENV_PREFIX = "TAKEFLOW__"

Layer = Dict[str, Any]


def resolve_with_precedence(
    *,
    defaults: TakeflowConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> TakeflowConfig:
    """Stack file, environment and CLI layers over ``defaults``; later layers win.

    Keys may be nested mappings (``{"ranking": {"substantial_bytes": 1}}``) or dotted
    (``{"ranking.substantial_bytes": 1}``).

    Raises:
        ConfigError: If a source is malformed or the result fails validation.
    """
    sections = defaults.model_dump(mode="python")
    for origin, source in (
        ("File", file_overrides),
        ("Environment", env_overrides),
        ("CLI", cli_overrides),
    ):
        if source is None:
            continue
        for section, fields in to_layer(source, origin=origin).items():
            current = sections.get(section)
            if isinstance(current, dict) and isinstance(fields, dict):
                sections[section] = {**current, **fields}
            else:
                sections[section] = fields

    try:
        return TakeflowConfig.model_validate(sections)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def to_layer(source: Mapping[str, Any], *, origin: str = "Config") -> Layer:
    """Normalize nested or dotted keys from ``source`` into a section layer."""
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{origin} overrides must be a mapping.")
    layer: Layer = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{origin} override keys must be strings.")
        assign(layer, key, value, origin=origin)
    return layer


def assign(layer: Layer, key: str, value: Any, *, origin: str = "Config") -> None:
    """Set dotted ``key`` (``section`` or ``section.field``) on ``layer`` in place."""
    section, _, field = key.partition(".")
    if not field and not isinstance(value, MappingABC):
        layer[section] = value
        return
    fields = layer.setdefault(section, {})
    if not isinstance(fields, dict):
        raise ConfigError(f"{origin} override for {key} conflicts with a non-mapping {section}.")
    if field:
        fields[field] = value
    else:
        fields.update(value)


def env_layer(env: Mapping[str, str]) -> Layer:
    """Collect ``TAKEFLOW__SECTION__FIELD`` variables; values are parsed as YAML."""
    layer: Layer = {}
    for key, raw_value in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        section, _, field = key[len(ENV_PREFIX) :].lower().partition("__")
        if not section or not field:
            continue
        try:
            value = yaml.safe_load(raw_value)
        except yaml.YAMLError:
            value = raw_value
        assign(layer, f"{section}.{field}", value, origin="Environment")
    return layer


__all__ = ["ENV_PREFIX", "assign", "env_layer", "resolve_with_precedence", "to_layer"]
