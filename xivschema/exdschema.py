"""Parser for sheet definitions in the EXDSchema YAML format."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional, Union

import yaml

from .errors import SchemaError
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

__all__ = ["parse"]

_U32_MAX = 0xFFFFFFFF


class _FieldKind(enum.Enum):
    SCALAR = "scalar"
    ARRAY = "array"
    ICON = "icon"
    MODEL_ID = "modelId"
    COLOR = "color"
    LINK = "link"


_SIMPLE_KINDS = {
    _FieldKind.SCALAR: ScalarKind.DEFAULT,
    _FieldKind.ICON: ScalarKind.ICON,
    _FieldKind.MODEL_ID: ScalarKind.MODEL,
    _FieldKind.COLOR: ScalarKind.COLOR,
}


@dataclass
class _Condition:
    switch: str
    cases: dict[int, list[str]]


@dataclass
class _Field:
    name: Optional[str]
    kind: _FieldKind
    count: Optional[int]
    fields: Optional[list["_Field"]]
    condition: Optional[_Condition]
    targets: Optional[list[str]]


def _malformed(detail: str) -> SchemaError:
    return SchemaError(f"failed to parse schema definition: {detail}")


def _optional_str(obj: dict, key: str) -> Optional[str]:
    value = obj.get(key)
    if value is not None and not isinstance(value, str):
        raise _malformed(f"{key}: expected a string, got {value!r}")
    return value


def _u32(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise _malformed(f"{what}: expected an unsigned integer, got {value!r}")
    if not 0 <= value <= _U32_MAX:
        raise _malformed(f"{what}: {value} is out of range for u32")
    return value


def _string_list(value: Any, what: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise _malformed(f"{what}: expected a sequence of strings, got {value!r}")
    return list(value)


def _decode_condition(value: Any) -> _Condition:
    if not isinstance(value, dict):
        raise _malformed(f"condition: expected a mapping, got {value!r}")
    switch = value.get("switch")
    if not isinstance(switch, str):
        raise _malformed("condition: missing field `switch`")
    cases = value.get("cases")
    if not isinstance(cases, dict):
        raise _malformed("condition: missing field `cases`")
    return _Condition(
        switch=switch,
        cases={
            _u32(key, "condition case"): _string_list(sheets, "condition case")
            for key, sheets in cases.items()
        },
    )


def _decode_field(value: Any) -> _Field:
    if not isinstance(value, dict):
        raise _malformed(f"field: expected a mapping, got {value!r}")

    raw_kind = value.get("type", _FieldKind.SCALAR.value)
    try:
        kind = _FieldKind(raw_kind)
    except ValueError:
        raise _malformed(f"type: unknown variant {raw_kind!r}") from None

    count = value.get("count")
    fields = value.get("fields")
    condition = value.get("condition")
    targets = value.get("targets")

    return _Field(
        name=_optional_str(value, "name"),
        kind=kind,
        count=None if count is None else _u32(count, "count"),
        fields=None if fields is None else _decode_fields(fields),
        condition=None if condition is None else _decode_condition(condition),
        targets=None if targets is None else _string_list(targets, "targets"),
    )


def _decode_fields(value: Any) -> list[_Field]:
    if not isinstance(value, list):
        raise _malformed(f"fields: expected a sequence, got {value!r}")
    return [_decode_field(item) for item in value]


def _map_struct(fields: list[_Field]) -> StructNode:
    struct_fields = []
    offset = 0
    for item in fields:
        if item.name is None:
            raise SchemaError("struct fields must have names")
        node = _map_field(item)
        struct_fields.append(StructField(offset=offset, name=item.name, node=node))
        offset += node.size()
    return StructNode(struct_fields)


def _map_field(item: _Field) -> Node:
    if item.kind in _SIMPLE_KINDS:
        return ScalarNode(Scalar(_SIMPLE_KINDS[item.kind]))

    if item.kind is _FieldKind.ARRAY and item.count is not None:
        if item.fields is None:
            inner: Node = ScalarNode()
        elif not item.fields:
            raise SchemaError("arrays must contain at least one field")
        elif len(item.fields) == 1:
            inner = _map_field(item.fields[0])
        else:
            inner = _map_struct(item.fields)
        return ArrayNode(count=item.count, node=inner)

    if item.kind is _FieldKind.LINK:
        if item.targets is not None and item.condition is None:
            return ScalarNode(
                Scalar(
                    ScalarKind.REFERENCE,
                    tuple(ReferenceTarget(sheet) for sheet in item.targets),
                )
            )
        if item.condition is not None and item.targets is None:
            condition = item.condition
            return ScalarNode(
                Scalar(
                    ScalarKind.REFERENCE,
                    tuple(
                        ReferenceTarget(
                            sheet,
                            condition=ReferenceCondition(condition.switch, value),
                        )
                        for value, sheets in condition.cases.items()
                        for sheet in sheets
                    ),
                )
            )

    raise SchemaError(f"invalid EXDSchema field declaration: {item!r}")


def parse(data: Union[bytes, str]) -> Sheet:
    """Parse an EXDSchema YAML sheet definition into a :class:`Sheet`."""
    try:
        document = yaml.safe_load(data)
    except yaml.YAMLError as error:
        raise _malformed(str(error)) from error

    if not isinstance(document, dict):
        raise _malformed(f"expected a mapping, got {document!r}")
    name = document.get("name")
    if not isinstance(name, str):
        raise _malformed("missing field `name`")
    if "fields" not in document:
        raise _malformed("missing field `fields`")

    return Sheet(
        name=name,
        order=Order.OFFSET,
        node=_map_struct(_decode_fields(document["fields"])),
    )