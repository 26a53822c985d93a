# xivschema

Schema types and parsers that describe the shape and meaning of FFXIV Excel
sheets. The package reads two schema formats:

- **EXDSchema** YAML sheet definitions (`xivschema.exdschema`)
- **SaintCoinach** JSON sheet definitions (`xivschema.saint_coinach`)

Both formats are parsed into the same tree of nodes, defined in
`xivschema.schema`. A sheet is a `Sheet`. It has a `name`, a column `order`
(`Order.INDEX` or `Order.OFFSET`) and a root `node`. A node is one of three
kinds:

- `StructNode`: a list of `StructField`s. Each field has a `name`, an `offset`
  in columns within the struct, and a `node`.
- `ArrayNode`: `count` copies of a sub-node.
- `ScalarNode`: a single column. Its `Scalar` has a `ScalarKind`, which is one
  of `DEFAULT`, `REFERENCE`, `ICON`, `MODEL` or `COLOR`. A reference scalar
  holds `ReferenceTarget`s. Each target names a `sheet` and may have a
  `selector` and a `ReferenceCondition`.

Every node has a `size()` method that gives its width in columns.

## Installation

```
pip install xivschema
```

## Usage

Parse an EXDSchema definition with `xivschema.exdschema.parse`. It takes bytes
or a string:

```python
from xivschema.exdschema import parse

sheet = parse(b"""
name: Item
fields:
  - name: Name
  - name: Icon
    type: icon
  - name: BaseParam
    type: array
    count: 6
    fields:
      - type: link
        targets: [BaseParam]
""")

print(sheet.name)        # Item
print(sheet.order)       # Order.OFFSET
print(sheet.node.size()) # 8 columns
```

Parse a SaintCoinach definition file with
`xivschema.saint_coinach.parse_sheet(name, data)`:

```python
from xivschema.saint_coinach import parse_sheet

sheet = parse_sheet("Item", b'{"sheet": "Item", "definitions": [{"name": "Name"}]}')
print(sheet.order)       # Order.INDEX
```

A leading UTF-8 byte order mark is skipped. Use
`parse_sheet_definition(value)` to build the root `StructNode` from JSON you
have already decoded.

SaintCoinach groups do not name themselves. Each group is named after the
longest common subsequence of its members' names, which
`xivschema.lcs.longest_common_subsequence(a, b)` computes.

## Errors

All errors derive from `xivschema.errors.Error`:

- `SchemaError` is raised for malformed or invalid definitions.
- `NotFoundError` carries an `ErrorValue` that describes a missing sheet,
  version or other value.

## Serving sheets

`xivschema.schema.Schema` is an abstract base class with a single method,
`sheet(name)`. Subclass it to serve `Sheet`s from your own store.

## What this package does not do

The package parses definition data that you supply. It does not fetch, clone or
update schema repositories. It does not pick a schema version for a game
version. It does not list or cache sheets. Reading definition files and
choosing which version to use is left to the caller.

## Running the tests

```
pip install -e .[test]
pytest
```