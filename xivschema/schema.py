"""Schema types describing the shape and semantics of Excel sheets."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field
from typing import Optional, Union

__all__ = [
    "Schema",
    "Order",
    "ScalarKind",
    "ReferenceCondition",
    "ReferenceTarget",
    "Scalar",
    "ArrayNode",
    "ScalarNode",
    "StructNode",
    "StructField",
    "Sheet",
    "Node",
]


class Schema(abc.ABC):
    """A full Excel schema, able to describe individual sheets."""

    @abc.abstractmethod
    def sheet(self, name: str) -> "Sheet":
        """Return the schema for the named sheet."""


class Order(enum.Enum):
    """Ordering of column definitions."""

    INDEX = "index"
    """Ordered by index of definition within the Excel header file."""
    OFFSET = "offset"
    """Ordered by byte offset of columns within data."""


class ScalarKind(enum.Enum):
    """Semantics attached to a single column."""

    DEFAULT = "default"
    REFERENCE = "reference"
    ICON = "icon"
    MODEL = "model"
    COLOR = "color"


@dataclass(frozen=True)
class ReferenceCondition:
    """Selector/value pair limiting when a reference target applies."""

    selector: str
    value: int


@dataclass(frozen=True)
class ReferenceTarget:
    """A reference to a row in another sheet.

    ``selector`` of ``None`` means the row id is matched; ``condition`` of
    ``None`` means the target is always valid.
    """

    sheet: str
    selector: Optional[str] = None
    condition: Optional[ReferenceCondition] = None


@dataclass(frozen=True)
class Scalar:
    """Metadata for a single column; ``targets`` apply to references only."""

    kind: ScalarKind = ScalarKind.DEFAULT
    targets: tuple[ReferenceTarget, ...] = ()

    def __post_init__(self) -> None:
        targets = tuple(self.targets)
        if targets and self.kind is not ScalarKind.REFERENCE:
            raise ValueError(f"{self.kind.name} scalars cannot have reference targets")
        object.__setattr__(self, "targets", targets)


@dataclass
class ArrayNode:
    """An array of ``count`` copies of a sub-schema."""

    count: int
    node: "Node"

    def size(self) -> int:
        """Size of the node, in columns."""
        return self.count * self.node.size()


@dataclass
class ScalarNode:
    """A single column."""

    scalar: Scalar = field(default_factory=Scalar)

    def size(self) -> int:
        """Size of the node, in columns."""
        return 1


@dataclass
class StructField:
    """A named field of a struct, at an offset within that struct."""

    offset: int
    name: str
    node: "Node"


@dataclass
class StructNode:
    """A collection of named sub-schemas."""

    fields: list[StructField] = field(default_factory=list)

    def size(self) -> int:
        """Size of the node, in columns."""
        if not self.fields:
            return 0
        last = self.fields[-1]
        return last.offset + last.node.size()


Node = Union[ArrayNode, ScalarNode, StructNode]


@dataclass
class Sheet:
    """Schema and metadata for one sheet."""

    name: str
    order: Order
    node: Node