from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError


def deep_merge(a: Mapping[str, Any], b: Mapping[str, Any]) -> dict[str, Any]:
    out = dict(a)
    for k, v in b.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def fold_keys(tree: Any) -> Any:
    """
    Return a copy of ``tree`` with every mapping key case-folded, so that
    ``"Name"`` and ``"name"`` from different layers land on the same entry.
    """
    if isinstance(tree, Mapping):
        return {str(k).casefold(): fold_keys(v) for k, v in tree.items()}
    if isinstance(tree, list):
        return [fold_keys(item) for item in tree]
    return tree


def render_scalar(value: Any) -> str | None:
    """
    Render a settings leaf as the string a reader hands out.

    Sections, lists and nulls are not values (None). Booleans use the JSON spelling.
    """
    if value is None or isinstance(value, (Mapping, list)):
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def validation_error_parser(error: ValidationError) -> list[dict[str, str]]:
    parsed_error = [
        {
            "component": "config.composition",
            "path": ".".join(map(str, err["loc"])),
            "message": err["msg"],
            "error_type": err["type"],
        }
        for err in error.errors()
    ]
    return parsed_error


def insert_path(tree: dict[str, Any], path: str, value: Any, delimiter: str = ":") -> None:
    """Populate ``tree`` with ``value`` located at the ``delimiter``-separated ``path``."""

    segments = [segment.strip() for segment in path.split(delimiter) if segment.strip()]
    if not segments:
        raise ValueError(f"Settings key {path!r} must contain at least one non-empty segment")

    cursor: dict[str, Any] = tree
    for segment in segments[:-1]:
        existing = cursor.get(segment)
        if existing is None:
            next_node: dict[str, Any] = {}
            cursor[segment] = next_node
            cursor = next_node
        elif isinstance(existing, dict):
            cursor = existing
        else:
            raise ValueError(
                f"Cannot place settings key '{path}': segment '{segment}' is already a value"
            )

    leaf = segments[-1]
    existing_leaf = cursor.get(leaf)
    if isinstance(existing_leaf, dict) and isinstance(value, dict):
        cursor[leaf] = deep_merge(existing_leaf, value)
    else:
        cursor[leaf] = value


def expand_paths(values: Mapping[str, Any], delimiter: str = ":") -> dict[str, Any]:
    """
    Turn flat ``"Section:Key"`` entries into nested sections, so that
    ``{"Vault:Url": u}`` and ``{"Vault": {"Url": u}}`` describe the same setting.
    """
    tree: dict[str, Any] = {}
    for key, value in values.items():
        insert_path(tree, str(key), value, delimiter)
    return tree
