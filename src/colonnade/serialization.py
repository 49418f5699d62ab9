"""Tree serialization: JSON round-trip for Colonnade nodes.

Converts typed nodes to/from JSON-compatible dicts. Useful for:
- Caching parsed trees to disk
- Handing directive trees to tools in other languages
- Debugging and inspection

Every dict carries a ``type`` discriminator (``"container_directive"``,
``"paragraph"``, ...). Keys follow field order, and attribute mappings keep
their written order, so output is deterministic for a given tree.

Example:
    from colonnade import parse
    from colonnade.serialization import to_json, from_json

    doc = parse(":::note[Title]{.warning}\\nBody\\n:::")
    restored = from_json(to_json(doc))
    assert doc == restored

Thread Safety:
    All functions are pure and safe to call from any thread.

"""

import json
from collections.abc import Mapping
from dataclasses import fields
from typing import Any

from colonnade.location import SourceLocation
from colonnade.nodes import NODE_TYPES, Document, Node

_LOCATION = "location"


def to_dict(node: Node, *, locations: bool = True) -> dict[str, Any]:
    """Convert a node to a JSON-compatible dict.

    Args:
        node: Any Colonnade node.
        locations: Include ``location`` entries.

    Returns:
        Dict with ``type`` and all node fields.

    """
    result: dict[str, Any] = {"type": node.type}

    for f in fields(node):
        if f.name == _LOCATION and not locations:
            continue
        result[f.name] = _serialize_value(getattr(node, f.name), locations)

    return result


def _serialize_value(value: Any, locations: bool) -> Any:
    """Serialize a single field value."""
    if isinstance(value, Node):
        return to_dict(value, locations=locations)
    if isinstance(value, SourceLocation):
        return {f.name: getattr(value, f.name) for f in fields(value)}
    if isinstance(value, tuple):
        return [_serialize_value(item, locations) for item in value]
    if isinstance(value, Mapping):
        return {key: item for key, item in value.items()}
    # Primitives: str, int, bool, None
    return value


def from_dict(data: Mapping[str, Any]) -> Node:
    """Reconstruct a typed node from a dict.

    Args:
        data: Dict with ``type`` and node fields (as produced by to_dict).
            Missing fields take their defaults.

    Returns:
        Typed node (frozen dataclass).

    Raises:
        ValueError: If ``type`` is missing or unknown.

    """
    type_name = data.get("type")
    if type_name is None:
        msg = "Missing 'type' field in serialized node"
        raise ValueError(msg)

    node_cls = NODE_TYPES.get(type_name)
    if node_cls is None:
        msg = f"Unknown node type: {type_name!r}"
        raise ValueError(msg)

    kwargs: dict[str, Any] = {}
    for f in fields(node_cls):
        if f.name not in data:
            continue
        raw = data[f.name]
        if f.name == _LOCATION:
            kwargs[f.name] = SourceLocation(**raw)
        elif f.name == "attributes":
            kwargs[f.name] = dict(raw or {})
        elif isinstance(raw, list):
            kwargs[f.name] = tuple(from_dict(item) for item in raw)
        else:
            kwargs[f.name] = raw

    return node_cls(**kwargs)


def to_json(node: Node, *, indent: int | None = None, locations: bool = True) -> str:
    """Serialize a tree to a JSON string.

    Args:
        node: Root node to serialize (usually a Document).
        indent: JSON indentation level (None for compact).
        locations: Include ``location`` entries.

    Returns:
        JSON string.

    """
    return json.dumps(to_dict(node, locations=locations), indent=indent)


def from_json(data: str) -> Document:
    """Deserialize a Document from a JSON string.

    Raises:
        ValueError: If the JSON doesn't represent a Document.

    """
    node = from_dict(json.loads(data))
    if not isinstance(node, Document):
        msg = f"Expected Document, got {type(node).__name__}"
        raise ValueError(msg)
    return node


__all__ = ["from_dict", "from_json", "to_dict", "to_json"]
