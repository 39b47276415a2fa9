"""Merging of configuration layers into a validated `FolderSortConfig`."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Iterator, Mapping

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import FolderSortConfig

ENV_PREFIX = "FOLDERSORT__"


def resolve_with_precedence(
    *,
    defaults: FolderSortConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> FolderSortConfig:
    """Merge configuration layers; later layers win: defaults < file < env < CLI.

    Layer keys may be nested mappings or dotted paths such as
    ``organization.size.small_max_mb``.

    Raises:
        ConfigError: If a layer is malformed or the merged result is invalid.
    """
    merged = defaults.model_dump(mode="python")
    layers = (("file", file_overrides), ("environment", env_overrides), ("cli", cli_overrides))
    for label, layer in layers:
        if layer:
            merged = merge_layers(merged, expand_dotted(layer, label=label))

    try:
        return FolderSortConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def overrides_from_env(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``FOLDERSORT__SECTION__KEY`` variables into a nested mapping.

    Values are parsed as YAML scalars, so ``true`` becomes a bool and ``4`` an
    int; unparsable values are kept as strings.
    """
    overrides: dict[str, Any] = {}
    for key, raw_value in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        segments = [segment.lower() for segment in key[len(ENV_PREFIX) :].split("__") if segment]
        if not segments:
            continue
        try:
            value = yaml.safe_load(raw_value)
        except yaml.YAMLError:
            value = raw_value
        set_path(overrides, segments, value, label="environment")
    return overrides


def set_path(target: dict[str, Any], segments: list[str], value: Any, *, label: str) -> None:
    """Assign ``value`` at the nested location named by ``segments``.

    Raises:
        ConfigError: If an intermediate key already holds a non-mapping value.
    """
    node = target
    for segment in segments[:-1]:
        child = node.setdefault(segment, {})
        if not isinstance(child, dict):
            joined = ".".join(segments)
            raise ConfigError(f"Cannot set {joined} from {label}: '{segment}' is not a mapping.")
        node = child
    node[segments[-1]] = value


def expand_dotted(source: Mapping[str, Any], *, label: str) -> dict[str, Any]:
    """Return ``source`` with dotted keys expanded into nested mappings."""
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{label.capitalize()} overrides must be a mapping.")

    expanded: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{label.capitalize()} override keys must be strings.")
        if isinstance(value, MappingABC):
            value = expand_dotted(value, label=label)
        for segment in reversed(key.split(".")):
            value = {segment: value}
        expanded = merge_layers(expanded, value)
    return expanded


def merge_layers(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Return a deep copy of ``base`` with ``overrides`` merged on top."""
    merged = deepcopy(dict(base))
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(value, MappingABC) and isinstance(current, MappingABC):
            merged[key] = merge_layers(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


def _leaves(prefix: tuple[str, ...], value: Any) -> Iterator[tuple[tuple[str, ...], Any]]:
    if isinstance(value, dict):
        for key, child in value.items():
            yield from _leaves(prefix + (str(key),), child)
    else:
        yield prefix, value


def _render_env_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, (list, tuple)):
        return yaml.safe_dump(list(value), default_flow_style=True).strip()
    return str(value)


def flatten_for_env(config: FolderSortConfig) -> dict[str, str]:
    """Render ``config`` as the ``FOLDERSORT__*`` variables that reproduce it."""
    return {
        ENV_PREFIX + "__".join(part.upper() for part in path): _render_env_value(value)
        for path, value in _leaves((), config.model_dump(mode="python"))
    }


def strategy_options(config: FolderSortConfig, kind: str) -> dict[str, Any]:
    """Return the configured options for the strategy named ``kind``.

    Args:
        config: Resolved configuration.
        kind: Normalized strategy name (``type``, ``date``, ``size``, ``content``,
            or ``last used``).

    Returns:
        dict[str, Any]: Keyword options accepted by the matching strategy model.
    """
    organization = config.organization
    if kind == "date":
        return {"granularity": organization.date_granularity}
    if kind == "size":
        return organization.size.model_dump(mode="python")
    if kind == "last used":
        return organization.recency.model_dump(mode="python")
    return {}


__all__ = [
    "ENV_PREFIX",
    "expand_dotted",
    "flatten_for_env",
    "merge_layers",
    "overrides_from_env",
    "resolve_with_precedence",
    "set_path",
    "strategy_options",
]
