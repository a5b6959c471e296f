"""JSON merge patch (RFC 7386) computation between two manifests."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any


def create_merge_patch(original: Mapping[str, Any], modified: Mapping[str, Any]) -> dict[str, Any]:
    """Return the merge patch turning ``original`` into ``modified``.

    Keys missing from ``modified`` become ``None`` (deletion); nested mappings
    recurse; anything else, lists included, is replaced whole. An empty result
    means there is nothing to write.
    """

    patch: dict[str, Any] = {}
    for key in original:
        if key not in modified:
            patch[key] = None
    for key, value in modified.items():
        if key not in original:
            patch[key] = copy.deepcopy(value)
            continue
        previous = original[key]
        if isinstance(previous, Mapping) and isinstance(value, Mapping):
            nested = create_merge_patch(previous, value)
            if nested:
                patch[key] = nested
        elif previous != value:
            patch[key] = copy.deepcopy(value)
    return patch


def apply_merge_patch(target: Mapping[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    """Apply ``patch`` to a copy of ``target`` and return the result."""

    result = copy.deepcopy(dict(target))
    for key, value in patch.items():
        if value is None:
            result.pop(key, None)
        elif isinstance(value, Mapping):
            current = result.get(key)
            base = current if isinstance(current, Mapping) else {}
            result[key] = apply_merge_patch(base, value)
        else:
            result[key] = copy.deepcopy(value)
    return result
