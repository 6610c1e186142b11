"""
Template path resolution.

A template path addresses a value inside the payload::

    path    := segment ("." segment)*
    segment := key ("[" index "]")*

``document.code`` walks mappings by key, ``participants.reviewers[1].name``
also indexes into a list. Index ``0`` applied to a mapping yields the mapping
itself, so a participant may be given either as a single object or as a list.
Missing keys, ``None`` values and out-of-range indexes resolve to ``None``;
resolution never raises.

Placeholders embed paths in text as ``{{ path }}``.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

_PLACEHOLDER = re.compile(r"\{\{([^}]+)\}\}")
_SEGMENT = re.compile(r"^([^.\[\]]+)((?:\[\d+\])*)$")
_INDEX = re.compile(r"\[(\d+)\]")
_FIRST_INDEX = re.compile(r"\[0\]")

Token = Union[str, int]


@lru_cache(maxsize=512)
def parse_path(path: str) -> Tuple[Token, ...]:
    """Split a template path into key and index tokens.

    Malformed segments produce an empty tuple, which resolves to ``None``.
    """
    tokens: List[Token] = []
    for segment in path.strip().split("."):
        match = _SEGMENT.match(segment.strip())
        if match is None:
            return ()
        tokens.append(match.group(1))
        tokens.extend(int(idx) for idx in _INDEX.findall(match.group(2)))
    return tuple(tokens)


def resolve_path(data: Any, path: str) -> Any:
    """Return the value at ``path`` inside ``data`` or ``None``."""
    tokens = parse_path(path)
    if not tokens:
        return None

    value = data
    for token in tokens:
        if value is None:
            return None
        if isinstance(token, int):
            if isinstance(value, Mapping):
                if token != 0:
                    return None
                continue
            if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
                value = value[token] if token < len(value) else None
            else:
                return None
        else:
            value = value.get(token) if isinstance(value, Mapping) else None
    return value


def _to_text(value: Any) -> str:
    if value is None or isinstance(value, (Mapping, list, tuple)):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def resolve_template(template: Optional[str], data: Any) -> str:
    """Replace every ``{{ path }}`` in ``template`` with its resolved value."""
    if not template:
        return ""
    return _PLACEHOLDER.sub(lambda match: _to_text(resolve_path(data, match.group(1))), template)


def is_placeholder(text: Optional[str]) -> bool:
    return bool(text) and "{{" in text and "}}" in text


def text_content(cell: Any, payload: Any) -> Optional[str]:
    """Text to draw for a cell: literal text, else its resolved source, else ``None``."""
    text = getattr(cell, "text", None)
    if text and not is_placeholder(text):
        return text
    source = getattr(cell, "source", None)
    if source:
        resolved = resolve_template(source, payload)
        if resolved and not is_placeholder(resolved):
            return resolved
    return None


def source_path(source: Optional[str]) -> Optional[str]:
    """Path of a source that is exactly one placeholder, e.g. ``{{a.b}}`` -> ``a.b``."""
    if not source:
        return None
    match = _PLACEHOLDER.fullmatch(source.strip())
    return match.group(1).strip() if match else None


def resolve_array(source: Optional[str], payload: Any) -> List[Any]:
    """Resolve a ``{{path}}`` source to a list of entries.

    A single mapping becomes a one element list; anything else is empty.
    """
    path = source_path(source) or (source or "").strip()
    if not path:
        return []
    value = resolve_path(payload, path)
    if isinstance(value, Mapping):
        return [value]
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def collection_path(source: Optional[str]) -> Optional[str]:
    """Path of the list a source indexes with ``[0]``.

    ``{{participants.reviewers[0].name}}`` -> ``participants.reviewers``.
    """
    path = source_path(source)
    if not path or "[0]" not in path:
        return None
    return path.split("[0]", 1)[0]


def reindex(source: str, index: int) -> str:
    """Rewrite the ``[0]`` indexes of a source to ``[index]``."""
    return _FIRST_INDEX.sub(f"[{index}]", source)
