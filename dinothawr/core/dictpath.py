# dinothawr/core/dictpath.py
from __future__ import annotations
from typing import Any
from collections.abc import Mapping, MutableMapping

__all__ = ["getByPath", "setByPath", "deleteByPath"]



def _splitPath(path: str) -> list[str]:
    """
    Splits a dotted path into segments.

    Examples:
      - paths.bundle    -> ["paths", "bundle"]
      - overlay_enable  -> ["overlay_enable"]
    """
    if not isinstance(path, str) or not path:
        raise ValueError("Path must be a non-empty string")
    parts = path.split(".")
    if any(part == "" for part in parts):
        raise ValueError(f"Path '{path}' contains empty segment(s)")
    return parts



def getByPath(data: Mapping[str, Any] | None, path: str, default: Any = None) -> Any:
    """Returns the value at dotted `path`, or `default` when any segment is missing."""
    node: Any = data
    for part in _splitPath(path):
        if not isinstance(node, Mapping) or part not in node:
            return default
        node = node[part]
    return node



def setByPath(data: MutableMapping[str, Any], path: str, value: Any, *, createIfMissing: bool = True) -> None:
    parts = _splitPath(path)
    node: Any = data
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, MutableMapping):
            if not createIfMissing:
                raise KeyError(f"Path '{path}' does not exist (missing '{part}')")
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = value



def deleteByPath(data: MutableMapping[str, Any], path: str, *, pruneEmptyParents: bool = False) -> bool:
    """Removes the leaf at `path`. Returns False if nothing was there."""
    parts = _splitPath(path)
    chain: list[MutableMapping[str, Any]] = []
    node: Any = data
    for part in parts[:-1]:
        if not isinstance(node, MutableMapping) or part not in node:
            return False
        chain.append(node)
        node = node[part]
    if not isinstance(node, MutableMapping) or parts[-1] not in node:
        return False
    del node[parts[-1]]

    if pruneEmptyParents:
        # Walk back up and drop containers that became empty
        for parent, part in zip(reversed(chain), reversed(parts[:-1])):
            child = parent.get(part)
            if isinstance(child, MutableMapping) and not child:
                del parent[part]
            else:
                break
    return True
