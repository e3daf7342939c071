"""Get/set values inside nested dicts and lists by path string.

A path is a dot-separated list of segments. Each segment is a key, optionally
followed by a bracketed list index: ``inputs.text``, ``widgets_values[0]``,
``_meta.title``. Writes happen in place; clone the target first if the caller
needs the original untouched.
"""
import re
from dataclasses import dataclass
from typing import Any, MutableMapping

from .errors import InvalidPathError

_SEGMENT_RE = re.compile(r"^(?P<name>[^.\[\]]+)(?:\[(?P<index>\d+)\])?$")


@dataclass(frozen=True)
class PathSegment:
    name: str
    index: int | None = None


def parse_path(path: str) -> tuple[PathSegment, ...]:
    if not path or not isinstance(path, str):
        raise InvalidPathError("Path must be a non-empty string")
    segments = []
    for part in path.split("."):
        match = _SEGMENT_RE.match(part)
        if match is None:
            raise InvalidPathError(f"Invalid path segment {part!r} in {path!r}")
        index = match.group("index")
        segments.append(PathSegment(match.group("name"), int(index) if index is not None else None))
    return tuple(segments)


def get_by_path(obj: Any, path: str, default: Any = None) -> Any:
    """Read the value at ``path``; ``default`` if anything along the way is missing."""
    try:
        segments = parse_path(path)
    except InvalidPathError:
        return default

    current = obj
    for segment in segments:
        if not isinstance(current, MutableMapping) or segment.name not in current:
            return default
        current = current[segment.name]
        if segment.index is not None:
            if not isinstance(current, list) or segment.index >= len(current):
                return default
            current = current[segment.index]
    return current


def _ensure_list(container: MutableMapping, name: str, index: int) -> list | None:
    seq = container.get(name)
    if seq is None:
        seq = container[name] = []
    elif not isinstance(seq, list):
        return None
    if len(seq) <= index:
        seq.extend([None] * (index + 1 - len(seq)))
    return seq


def set_by_path(obj: Any, path: str, value: Any) -> bool:
    """Write ``value`` at ``path``, creating missing dicts and lists on the way.

    Returns False when the path is empty or malformed, or when an existing
    intermediate value is not the container the path requires.
    """
    try:
        segments = parse_path(path)
    except InvalidPathError:
        return False

    current = obj
    last = len(segments) - 1
    for i, segment in enumerate(segments):
        if not isinstance(current, MutableMapping):
            return False

        if segment.index is None:
            if i == last:
                current[segment.name] = value
                return True
            if current.get(segment.name) is None:
                current[segment.name] = {}
            current = current[segment.name]
            continue

        seq = _ensure_list(current, segment.name, segment.index)
        if seq is None:
            return False
        if i == last:
            seq[segment.index] = value
            return True
        if seq[segment.index] is None:
            seq[segment.index] = {}
        current = seq[segment.index]

    return False
