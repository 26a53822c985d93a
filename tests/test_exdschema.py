import pytest

from xivschema.errors import SchemaError
from xivschema.exdschema import parse
from xivschema.schema import (
    ArrayNode,
    Order,
    ReferenceCondition,
    ReferenceTarget,
    Scalar,
    ScalarKind,
    ScalarNode,
    StructNode,
)


def _assert_offsets_consistent(struct):
    running = 0
    for field in struct.fields:
        assert field.offset == running
        running += field.node.size()


def test_simple_kinds_and_order():
    sheet = parse(
        """
name: Item
displayField: Name
fields:
  - name: Name
  - name: Icon
    type: icon
  - name: Model
    type: modelId
  - name: Colour
    type: color
"""
    )
    assert sheet.name == "Item"
    assert sheet.order is Order.OFFSET
    assert [f.name for f in sheet.node.fields] == ["Name", "Icon", "Model", "Colour"]
    assert [f.node.scalar.kind for f in sheet.node.fields] == [
        ScalarKind.DEFAULT,
        ScalarKind.ICON,
        ScalarKind.MODEL,
        ScalarKind.COLOR,
    ]
    _assert_offsets_consistent(sheet.node)
    assert sheet.node.size() == len(sheet.node.fields)


def test_bytes_input_matches_str_input():
    text = "name: Action\nfields:\n  - name: Cost\n"
    assert parse(text.encode("utf-8")) == parse(text)


def test_array_without_fields_is_scalar_array():
    sheet = parse("name: S\nfields:\n  - name: Values\n    type: array\n    count: 7\n")
    assert sheet.node.fields[0].node == ArrayNode(count=7, node=ScalarNode())


def test_array_with_single_field_uses_that_field():
    sheet = parse(
        """
name: S
fields:
  - name: Icons
    type: array
    count: 4
    fields:
      - type: icon
"""
    )
    node = sheet.node.fields[0].node
    assert node == ArrayNode(count=4, node=ScalarNode(Scalar(ScalarKind.ICON)))


def test_array_with_multiple_fields_is_struct_array_and_offsets_follow():
    sheet = parse(
        """
name: S
fields:
  - name: Entries
    type: array
    count: 3
    fields:
      - name: Id
      - name: Amount
      - name: Nested
        type: array
        count: 2
  - name: After
"""
    )
    entries, after = sheet.node.fields
    assert isinstance(entries.node, ArrayNode)
    assert isinstance(entries.node.node, StructNode)
    assert [f.name for f in entries.node.node.fields] == ["Id", "Amount", "Nested"]
    _assert_offsets_consistent(entries.node.node)
    assert entries.node.size() == 3 * entries.node.node.size()
    assert after.offset == entries.node.size()
    _assert_offsets_consistent(sheet.node)


def test_array_with_empty_fields_is_error():
    with pytest.raises(SchemaError, match="arrays must contain at least one field"):
        parse("name: S\nfields:\n  - name: A\n    type: array\n    count: 2\n    fields: []\n")


def test_array_without_count_is_error():
    with pytest.raises(SchemaError, match="invalid EXDSchema field declaration"):
        parse("name: S\nfields:\n  - name: A\n    type: array\n")


def test_struct_field_without_name_is_error():
    with pytest.raises(SchemaError, match="struct fields must have names"):
        parse("name: S\nfields:\n  - type: icon\n")


def test_unconditional_link():
    sheet = parse(
        """
name: S
fields:
  - name: Target
    type: link
    targets: [Item, EventItem]
"""
    )
    scalar = sheet.node.fields[0].node.scalar
    assert scalar.kind is ScalarKind.REFERENCE
    assert scalar.targets == (ReferenceTarget("Item"), ReferenceTarget("EventItem"))


def test_conditional_link():
    sheet = parse(
        """
name: S
fields:
  - name: Target
    type: link
    condition:
      switch: Kind
      cases:
        1: [Item, Action]
        2: [Quest]
"""
    )
    scalar = sheet.node.fields[0].node.scalar
    assert scalar.kind is ScalarKind.REFERENCE
    assert set(scalar.targets) == {
        ReferenceTarget("Item", condition=ReferenceCondition("Kind", 1)),
        ReferenceTarget("Action", condition=ReferenceCondition("Kind", 1)),
        ReferenceTarget("Quest", condition=ReferenceCondition("Kind", 2)),
    }
    assert all(t.selector is None for t in scalar.targets)


@pytest.mark.parametrize(
    "field",
    [
        "  - name: A\n    type: link\n",
        "  - name: A\n    type: link\n    targets: [X]\n"
        "    condition:\n      switch: K\n      cases:\n        1: [Y]\n",
    ],
)
def test_invalid_link_declarations(field):
    with pytest.raises(SchemaError, match="invalid EXDSchema field declaration"):
        parse("name: S\nfields:\n" + field)


@pytest.mark.parametrize(
    "document",
    [
        "name: [unterminated",
        "fields: []\n",
        "name: S\n",
        "name: S\nfields:\n  - name: A\n    type: bogus\n",
        "name: S\nfields:\n  - name: A\n    type: array\n    count: -1\n",
        "- just\n- a list\n",
    ],
)
def test_malformed_documents(document):
    with pytest.raises(SchemaError, match="failed to parse schema definition"):
        parse(document)