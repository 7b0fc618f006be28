"""Path access over decoded response trees.

Decoded responses are nested dicts and lists in which any node may be
missing. `dig` walks a path and returns None at the first absent step.
A string key applied to a list reads the list's first element, and index 0
applied to a single node reads that node, so a path reads the same whether
the schema declares a field singular or repeated.
"""

from collections.abc import Iterator
from typing import Any


def dig(node: Any, *path: str | int) -> Any:
    for step in path:
        if isinstance(node, list) and isinstance(step, str):
            node = node[0] if node else None
        if isinstance(step, int):
            if step == 0 and isinstance(node, dict):
                continue
            if not isinstance(node, list) or not -len(node) <= step < len(node):
                return None
            node = node[step]
        elif isinstance(node, dict):
            node = node.get(step)
        else:
            return None
        if node is None:
            return None
    return node


def items(node: Any, *path: str | int) -> list:
    """Like `dig`, but always returns a list: a single node is wrapped, absence is []."""
    value = dig(node, *path)
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def walk(node: Any, *path: str | int) -> Iterator[Any]:
    """Yield every node reachable by `path`, fanning out over each list on the way."""
    if not path:
        if isinstance(node, list):
            yield from (item for item in node if item is not None)
        elif node is not None:
            yield node
        return
    step, rest = path[0], path[1:]
    if isinstance(node, list):
        for item in node:
            yield from walk(item, *path)
    elif isinstance(node, dict) and isinstance(step, str):
        yield from walk(node.get(step), *rest)


def text(node: Any, *path: str | int) -> str | None:
    """Read a text node: a plain string, `simpleText`, `content`, or joined `runs`."""
    value = dig(node, *path)
    if isinstance(value, str):
        return value or None
    if isinstance(value, dict):
        for key in ("simpleText", "content"):
            if isinstance(value.get(key), str) and value[key]:
                return value[key]
        runs = [run.get("text", "") for run in items(value, "runs") if isinstance(run, dict)]
        return "".join(runs) or None
    return None


def as_int(value: Any) -> int | None:
    """Coerce a numeric field; protobuf JSON renders 64-bit integers as strings."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None
