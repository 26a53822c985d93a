"""Parser for sheet definitions in the SaintCoinach JSON format."""

from __future__ import annotations

import json
from collections.abc import Iterator
from functools import reduce
from typing import Any, Optional, Union

from .errors import SchemaError
from .lcs import longest_common_subsequence
from .schema import (
    ArrayNode,
    Node,
    Order,
    ReferenceCondition,
    ReferenceTarget,
    Scalar,
    ScalarKind,
    ScalarNode,
    Sheet,
    StructField,
    StructNode,
)

__all__ = ["parse_sheet_definition", "parse_sheet"]

_U32_MAX = 0xFFFFFFFF
_BOM = b"\xef\xbb\xbf"
_MISSING = object()


def _get(value: Any, key: str) -> Any:
    """Member of a JSON object, or ``_MISSING`` if absent or not an object."""
    if isinstance(value, dict):
        return value.get(key, _MISSING)
    return _MISSING


def _get_str(value: Any, key: str) -> Optional[str]:
    member = _get(value, key)
    return member if isinstance(member, str) else None


def _as_u32(member: Any) -> Optional[int]:
    if isinstance(member, bool) or not isinstance(member, int):
        return None
    return member if 0 <= member <= _U32_MAX else None


def _get_u32(value: Any, key: str) -> Optional[int]:
    return _as_u32(_get(value, key))


def _iter_field(value: Any, key: str) -> Iterator[Any]:
    member = _get(value, key)
    if isinstance(member, list):
        yield from member


def parse_sheet_definition(value: Any) -> StructNode:
    """Build the root struct node from a decoded SaintCoinach sheet definition."""
    fields = []
    for definition in _iter_field(value, "definitions"):
        index = _get_u32(definition, "index") or 0
        node, name = _parse_data_definition(definition)
        fields.append(
            StructField(
                offset=index,
                name=name if name is not None else f"Unnamed{index}",
                node=node,
            )
        )
    return StructNode(fields)


def _parse_data_definition(value: Any) -> tuple[Node, Optional[str]]:
    kind = _get_str(value, "type")
    if kind is None:
        return _parse_single(value)
    if kind == "group":
        return _parse_group(value)
    if kind == "repeat":
        return _parse_repeat(value)
    raise SchemaError(f"Unknown data type {kind}")


def _parse_single(value: Any) -> tuple[Node, Optional[str]]:
    name = _get_str(value, "name")
    converter = _get(value, "converter")
    if converter is _MISSING:
        return ScalarNode(), name

    kind = _get_str(converter, "type")
    if kind in ("color",):
        node: Node = ScalarNode(Scalar(ScalarKind.COLOR))
    elif kind in ("generic", "tomestone"):
        node = ScalarNode()
    elif kind == "icon":
        node = ScalarNode(Scalar(ScalarKind.ICON))
    elif kind == "multiref":
        node = _parse_multiref(converter)
    elif kind == "link":
        node = _parse_link(converter)
    elif kind == "complexlink":
        node = _parse_complex_link(converter)
    else:
        raise SchemaError(f"Unknown converter type {kind if kind is not None else '(none)'}")
    return node, name


def _parse_group(value: Any) -> tuple[Node, Optional[str]]:
    fields = []
    offset = 0
    for index, member in enumerate(_iter_field(value, "members")):
        node, name = _parse_data_definition(member)
        fields.append(
            StructField(
                offset=offset,
                name=name if name is not None else f"Unnamed{index}",
                node=node,
            )
        )
        offset += node.size()

    # Groups carry no name of their own; derive one from their members' names.
    common = reduce(longest_common_subsequence, (f.name for f in fields), "")
    if fields:
        common = reduce(longest_common_subsequence, (f.name for f in fields[1:]), fields[0].name)
    return StructNode(fields), common or None


def _parse_repeat(value: Any) -> tuple[Node, Optional[str]]:
    definition = _get(value, "definition")
    if definition is _MISSING:
        raise SchemaError("Repeat missing definition")
    count = _get_u32(value, "count")
    if count is None:
        raise SchemaError("Repeat missing count")
    node, name = _parse_data_definition(definition)
    return ArrayNode(count=count, node=node), name


def _parse_multiref(value: Any) -> Node:
    targets = tuple(
        ReferenceTarget(sheet) for sheet in _iter_field(value, "targets") if isinstance(sheet, str)
    )
    return ScalarNode(Scalar(ScalarKind.REFERENCE, targets))


def _parse_link(value: Any) -> Node:
    target = _get_str(value, "target")
    if target is None:
        raise SchemaError("Link missing target")
    return ScalarNode(Scalar(ScalarKind.REFERENCE, (ReferenceTarget(target),)))


def _parse_complex_link(value: Any) -> Node:
    targets: list[ReferenceTarget] = []
    for link in _iter_field(value, "links"):
        when = _get(link, "when")
        condition = None if when is _MISSING else _parse_when(when)
        selector = _get_str(link, "key")

        sheets = [_get_str(link, "sheet")]
        sheets.extend(s if isinstance(s, str) else None for s in _iter_field(link, "sheets"))
        targets.extend(
            ReferenceTarget(sheet, selector=selector, condition=condition)
            for sheet in sheets
            if sheet is not None
        )
    return ScalarNode(Scalar(ScalarKind.REFERENCE, tuple(targets)))


def _parse_when(value: Any) -> ReferenceCondition:
    selector = _get_str(value, "key")
    if selector is None:
        raise SchemaError("When clause missing key")
    condition_value = _get_u32(value, "value")
    if condition_value is None:
        raise SchemaError("When clause missing value")
    return ReferenceCondition(selector=selector, value=condition_value)


def parse_sheet(name: str, data: Union[bytes, str]) -> Sheet:
    """Parse a SaintCoinach JSON sheet definition file into a :class:`Sheet`."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    if data.startswith(_BOM):
        data = data[len(_BOM):]
    try:
        value = json.loads(data.decode("utf-8"))
    except ValueError as error:
        raise SchemaError(f"failed to parse sheet definition: {error}") from error

    return Sheet(name=name, order=Order.INDEX, node=parse_sheet_definition(value))