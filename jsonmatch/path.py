"""Path grammar for addressing locations inside a JSON document.

Syntax:

- Object keys: ``user.name``; a literal dot in a key is written ``user\\.name``
- Array indices: ``items[0]``, chained as ``matrix[0][1]``
- Wildcards: ``items[*]`` (every array element), ``data.*`` (every object key)
- Literal brackets and asterisks in keys: ``key\\[0\\]``, ``\\*``

The root of the document is ``JSONPath.root``. It is never produced by
parsing: the empty string is a single empty key.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Union

logger = logging.getLogger(__name__)

_INDEX_PATTERN = re.compile(r"[0-9]+")


class PathComponent:
    """Base class for a single step in a JSONPath."""

    @property
    def is_wildcard(self) -> bool:
        return False

    @property
    def is_array_access(self) -> bool:
        return False

    @property
    def node_name(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class Key(PathComponent):
    """An object key."""
    name: str

    @property
    def node_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class Index(PathComponent):
    """An array index."""
    position: int

    def __post_init__(self):
        if isinstance(self.position, bool) or not isinstance(self.position, int):
            raise TypeError(f"Array index must be an int, got {type(self.position).__name__}")
        if self.position < 0:
            raise ValueError(f"Array index must be non-negative, got {self.position}")

    @property
    def is_array_access(self) -> bool:
        return True

    @property
    def node_name(self) -> str:
        return str(self.position)


@dataclass(frozen=True)
class WildcardKey(PathComponent):
    """Every key of an object."""

    @property
    def is_wildcard(self) -> bool:
        return True

    @property
    def node_name(self) -> str:
        return "*"


@dataclass(frozen=True)
class WildcardIndex(PathComponent):
    """Every index of an array."""

    @property
    def is_wildcard(self) -> bool:
        return True

    @property
    def is_array_access(self) -> bool:
        return True

    @property
    def node_name(self) -> str:
        return "[*]"


WILDCARD_KEY = WildcardKey()
WILDCARD_INDEX = WildcardIndex()


class JSONPath:
    """
    An immutable sequence of path components.

    Build one from a string (``JSONPath("items[*].id")``) or from
    components (``JSONPath([Key("items"), WILDCARD_INDEX, Key("id")])``).
    Paths with equal components are equal no matter how they were built.
    """

    root: JSONPath

    __slots__ = ("_components",)

    def __init__(self, path: Union[str, Iterable[PathComponent]] = ()):
        if isinstance(path, str):
            self._components = tuple(parse_components(path))
        else:
            components = tuple(path)
            for component in components:
                if not isinstance(component, PathComponent):
                    raise TypeError(f"Not a path component: {component!r}")
            self._components = components

    @property
    def components(self) -> tuple[PathComponent, ...]:
        return self._components

    @property
    def is_root(self) -> bool:
        return not self._components

    @property
    def parent(self) -> Optional[JSONPath]:
        """All components except the last, or None for the root."""
        if not self._components:
            return None
        return JSONPath(self._components[:-1])

    @property
    def last_component(self) -> Optional[PathComponent]:
        return self._components[-1] if self._components else None

    def appending(
        self,
        other: Union[PathComponent, JSONPath, str, Iterable[PathComponent]]
    ) -> JSONPath:
        """Return a new path with a component, path or component list appended."""
        if isinstance(other, PathComponent):
            return JSONPath(self._components + (other,))
        if isinstance(other, JSONPath):
            return JSONPath(self._components + other.components)
        if isinstance(other, str):
            return JSONPath(self._components + JSONPath(other).components)
        return JSONPath(self._components + tuple(other))

    def __iter__(self) -> Iterator[PathComponent]:
        return iter(self._components)

    def __len__(self) -> int:
        return len(self._components)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JSONPath):
            return NotImplemented
        return self._components == other._components

    def __hash__(self) -> int:
        return hash(self._components)

    def __repr__(self) -> str:
        return f"JSONPath({format_components(self._components)!r})"

    def __str__(self) -> str:
        if not self._components:
            return "<root>"
        return format_components(self._components)


JSONPath.root = JSONPath(())


def as_path(value: Union[str, JSONPath, Iterable[PathComponent]]) -> JSONPath:
    """Coerce a string, component list or path into a JSONPath."""
    if isinstance(value, JSONPath):
        return value
    return JSONPath(value)


def parse_components(text: str) -> list[PathComponent]:
    """
    Parse a path string into components.

    Never raises. Bracket content that is neither a non-negative integer nor
    ``*`` is dropped; the key before it is kept.
    """
    components: list[PathComponent] = []

    for segment in _split_segments(text):
        segment = segment.replace("\\.", ".")
        key, brackets = _split_brackets(segment)

        if key is not None:
            key = key.replace("\\[", "[").replace("\\]", "]")
            if key == "*":
                components.append(WILDCARD_KEY)
            else:
                components.append(Key(key.replace("\\*", "*")))

        for content in brackets:
            if content == "*":
                components.append(WILDCARD_INDEX)
            elif _INDEX_PATTERN.fullmatch(content):
                components.append(Index(int(content)))
            else:
                logger.debug(
                    "Dropping malformed array access [%s] in path %r", content, text
                )

    return components


def format_components(components: Iterable[PathComponent]) -> str:
    """Format components using the path grammar."""
    result = ""
    for position, component in enumerate(components):
        if isinstance(component, Key):
            if position > 0:
                result += "."
            result += _escape_key(component.name)
        elif isinstance(component, Index):
            result += f"[{component.position}]"
        elif isinstance(component, WildcardKey):
            if position > 0:
                result += "."
            result += "*"
        elif isinstance(component, WildcardIndex):
            result += "[*]"
    return result


def _escape_key(name: str) -> str:
    if name == "*":
        return "\\*"
    return name.replace(".", "\\.").replace("[", "\\[").replace("]", "\\]")


def _split_segments(text: str) -> list[str]:
    """
    Split on unescaped dots.

    Example: ``key0\\.key1.key2[1][2].key3`` -> ``["key0\\.key1", "key2[1][2]", "key3"]``
    """
    if not text:
        return [""]

    segments = []
    start = 0
    escaped = False

    for i, char in enumerate(text):
        if char == "\\":
            escaped = True
        elif char == "." and not escaped:
            segments.append(text[start:i])
            start = i + 1
        else:
            escaped = False

    segments.append(text[start:])
    return segments


def _is_escaped(text: str, index: int) -> bool:
    backslashes = 0
    i = index - 1
    while i >= 0 and text[i] == "\\":
        backslashes += 1
        i -= 1
    return backslashes % 2 == 1


def _split_brackets(segment: str) -> tuple[Optional[str], list[str]]:
    """
    Separate a segment into its key and trailing bracket contents.

    Example: ``key1[0][1]`` -> ``("key1", ["0", "1"])``. The key is None
    when the segment is made of brackets only.
    """
    brackets: list[str] = []
    end = len(segment)

    while end > 0 and segment[end - 1] == "]" and not _is_escaped(segment, end - 1):
        start = end - 2
        while start >= 0 and not (segment[start] == "[" and not _is_escaped(segment, start)):
            start -= 1
        if start < 0:
            break
        brackets.insert(0, segment[start + 1:end - 1])
        end = start

    if end == 0 and brackets:
        return None, brackets
    return segment[:end], brackets
