"""Merge theme layers into one effective configuration.

Merge order, later overriding earlier:

    base theme -> selected preset -> user config -> CLI theme override

Every layer is sanitized field by field before merging. A malformed field is
reported as a ConfigError and dropped, which leaves the earlier layer's value
(ultimately the built-in default) in place.
"""

import copy

from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from ..types import ConfigError
from .defaults import get_default_layer
from .loader import load_theme_layer
from .schema import (
    OPTION_VALUE_ADAPTER,
    SEGMENT_FIELD_ADAPTERS,
    STYLE_FIELD_ADAPTERS,
    EffectiveTheme,
    SegmentId,
)

_NESTED_FIELDS = ("icon", "colors", "styles")
_SEGMENT_SCALARS = ("enabled", "separator")


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    return errors[0]["msg"] if errors else str(exc)


def _validate(
    adapter: Any, value: Any, source: str, path: str, errors: list[ConfigError]
) -> tuple[bool, Any]:
    try:
        validated = adapter.validate_python(value)
    except ValidationError as e:
        errors.append(ConfigError(source, path, _first_error(e)))
        return False, None
    return True, adapter.dump_python(validated, mode="json")


def _sanitize_segment(
    raw: Any, index: int, source: str, errors: list[ConfigError]
) -> Optional[dict[str, Any]]:
    where = f"segments[{index}]"
    if not isinstance(raw, dict):
        errors.append(ConfigError(source, where, "segment must be a mapping"))
        return None

    try:
        segment_id = SegmentId(raw.get("id"))
    except ValueError:
        errors.append(ConfigError(source, f"{where}.id", f"unknown segment id {raw.get('id')!r}"))
        return None

    where = f"segments.{segment_id.value}"
    clean: dict[str, Any] = {"id": segment_id.value}

    for key, value in raw.items():
        if key == "id":
            continue
        if key in _SEGMENT_SCALARS:
            ok, validated = _validate(
                SEGMENT_FIELD_ADAPTERS[key], value, source, f"{where}.{key}", errors
            )
            if ok:
                clean[key] = validated
        elif key in _NESTED_FIELDS:
            if not isinstance(value, dict):
                errors.append(ConfigError(source, f"{where}.{key}", "must be a mapping"))
                continue
            nested: dict[str, Any] = {}
            for sub_key, sub_value in value.items():
                adapter = SEGMENT_FIELD_ADAPTERS.get(f"{key}.{sub_key}")
                if adapter is None:
                    errors.append(
                        ConfigError(source, f"{where}.{key}.{sub_key}", "unknown field")
                    )
                    continue
                ok, validated = _validate(
                    adapter, sub_value, source, f"{where}.{key}.{sub_key}", errors
                )
                if ok:
                    nested[sub_key] = validated
            clean[key] = nested
        elif key == "options":
            if not isinstance(value, dict):
                errors.append(ConfigError(source, f"{where}.options", "must be a mapping"))
                continue
            options: dict[str, Any] = {}
            for option_key, option_value in value.items():
                ok, validated = _validate(
                    OPTION_VALUE_ADAPTER,
                    option_value,
                    source,
                    f"{where}.options.{option_key}",
                    errors,
                )
                if ok:
                    options[str(option_key)] = validated
            clean["options"] = options
        else:
            errors.append(ConfigError(source, f"{where}.{key}", "unknown field"))

    return clean


def sanitize_layer(raw: Any, source: str) -> tuple[dict[str, Any], list[ConfigError]]:
    """Drop and report every malformed field of a raw layer."""
    errors: list[ConfigError] = []
    if not raw:
        return {}, errors
    if not isinstance(raw, dict):
        return {}, [ConfigError(source, "", "layer must be a mapping")]

    clean: dict[str, Any] = {}
    for key, value in raw.items():
        if key == "theme":
            if isinstance(value, str) and value:
                clean["theme"] = value
            else:
                errors.append(ConfigError(source, "theme", "must be a non-empty string"))
        elif key == "style":
            if not isinstance(value, dict):
                errors.append(ConfigError(source, "style", "must be a mapping"))
                continue
            style: dict[str, Any] = {}
            for style_key, style_value in value.items():
                adapter = STYLE_FIELD_ADAPTERS.get(style_key)
                if adapter is None:
                    errors.append(ConfigError(source, f"style.{style_key}", "unknown field"))
                    continue
                ok, validated = _validate(
                    adapter, style_value, source, f"style.{style_key}", errors
                )
                if ok:
                    style[style_key] = validated
            clean["style"] = style
        elif key == "segments":
            if not isinstance(value, list):
                errors.append(ConfigError(source, "segments", "must be a list"))
                continue
            segments = []
            for index, raw_segment in enumerate(value):
                segment = _sanitize_segment(raw_segment, index, source, errors)
                if segment is not None:
                    segments.append(segment)
            clean["segments"] = segments
        else:
            errors.append(ConfigError(source, key, "unknown field"))

    return clean, errors


def _merge_segment(target: dict[str, Any], layer: dict[str, Any]) -> None:
    for key, value in layer.items():
        if key in _NESTED_FIELDS or key == "options":
            merged = dict(target.get(key) or {})
            merged.update(value)
            target[key] = merged
        else:
            target[key] = value


def order_segments(merged: dict[str, Any], listed: list[str]) -> dict[str, Any]:
    """Move listed segment ids to the front in the given order.

    The others keep their previous relative order.
    """
    by_id = {s["id"]: s for s in merged.get("segments", [])}
    first = [s for s in dict.fromkeys(listed) if s in by_id]
    rest = [s for s in by_id if s not in first]
    merged["segments"] = [by_id[s] for s in first + rest]
    return merged


def merge_layers(
    base: dict[str, Any], *layers: dict[str, Any], reorder: bool = True
) -> dict[str, Any]:
    """Merge sanitized layers onto a base, field by field.

    Segments are matched by id. With reorder, a layer that lists segments
    moves them to the front in its own order; without it, segment order is
    left as in the base.
    """
    merged = copy.deepcopy(base)
    segments = {s["id"]: s for s in merged.get("segments", [])}
    order = [s["id"] for s in merged.get("segments", [])]

    for layer in layers:
        if "theme" in layer:
            merged["theme"] = layer["theme"]
        if "style" in layer:
            style = dict(merged.get("style") or {})
            style.update(layer["style"])
            merged["style"] = style

        listed = []
        for segment_layer in layer.get("segments", []):
            segment_id = segment_layer["id"]
            target = segments.setdefault(segment_id, {"id": segment_id})
            _merge_segment(target, copy.deepcopy(segment_layer))
            if segment_id not in listed:
                listed.append(segment_id)
        if listed and reorder:
            order = listed + [s for s in order if s not in listed]

    merged["segments"] = [segments[s] for s in order]
    return merged


def resolve_effective_theme(
    user_layer: Optional[dict[str, Any]] = None,
    cli_theme: Optional[str] = None,
    themes_dir: Optional[Path] = None,
) -> tuple[EffectiveTheme, list[ConfigError]]:
    """Build the effective theme for this run.

    Args:
        user_layer: Raw user configuration (already parsed from disk)
        cli_theme: Theme name passed on the command line, if any
        themes_dir: Directory holding user theme files

    Returns:
        Tuple of (effective theme, configuration errors found on the way)
    """
    errors: list[ConfigError] = []
    user, user_errors = sanitize_layer(user_layer, "config")
    errors.extend(user_errors)

    layers: list[dict[str, Any]] = []

    preset_name = user.get("theme", "default")
    preset_raw, preset_errors = load_theme_layer(preset_name, themes_dir)
    errors.extend(preset_errors)
    if preset_raw is not None:
        preset, sanitize_errors = sanitize_layer(preset_raw, f"theme '{preset_name}'")
        errors.extend(sanitize_errors)
        layers.append(preset)

    layers.append(user)

    if cli_theme:
        cli_raw, cli_errors = load_theme_layer(cli_theme, themes_dir)
        errors.extend(cli_errors)
        if cli_raw is not None:
            cli_layer, sanitize_errors = sanitize_layer(cli_raw, f"theme '{cli_theme}'")
            errors.extend(sanitize_errors)
            cli_layer["theme"] = cli_theme
            layers.append(cli_layer)

    # Segment order comes from the user layer only
    merged = merge_layers(get_default_layer(), *layers, reorder=False)
    order_segments(merged, [s["id"] for s in user.get("segments", [])])
    return EffectiveTheme.model_validate(merged), errors
