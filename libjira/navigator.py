#!/usr/bin/env python
"""navigator.py – Parse response bodies and walk them by path.

Documents are plain ``json`` trees (dict / list / str / int / float / bool /
None). Nothing here validates a schema; a *path* such as
``fields/status/name`` is resolved one object key at a time and the leaf is
returned untouched, so callers decide what type they expect.

Arrays are never indexed by path: resolve the list, then walk each element
yourself.
"""
from __future__ import annotations

import json
from typing import Any, BinaryIO, Dict, List, Union

from .errors import DocumentError, NotAnObject, ResolutionFailed

__all__ = ["Node", "load_document", "resolve", "split_path"]

Node = Union[Dict[str, Any], List[Any], str, int, float, bool, None]

SEPARATOR = "/"


def load_document(raw: Union[bytes, str, BinaryIO]) -> Node:
    """Parse *raw* (bytes, text or a binary stream) into a generic tree."""
    if hasattr(raw, "read"):
        raw = raw.read()
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise DocumentError(f"Response is not valid JSON: {exc}") from exc


def split_path(path: str) -> List[str]:
    return path.split(SEPARATOR) if path else []


def resolve(path: str, document: Node) -> Any:
    """Return the value at *path* inside *document*.

    Raises :class:`NotAnObject` when a node that has to be descended into is
    not a dict. A missing key at the last segment yields ``None``, which is
    indistinguishable from an explicit JSON ``null``.
    """
    segments = split_path(path)
    node = document
    for i, segment in enumerate(segments):
        if not isinstance(node, dict):
            raise NotAnObject(path, segments[i - 1] if i else "")
        if i == len(segments) - 1:
            return node.get(segment)
        node = node.get(segment)
    raise ResolutionFailed(path)
