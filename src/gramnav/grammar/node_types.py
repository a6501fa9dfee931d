# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Models for tree-sitter `node-types.json` entries.

`node-types.json` describes the node kinds a compiled grammar actually produces, after
hidden rules are inlined and aliases applied. Its `children` and `fields` descriptors are the
ground truth for which kinds can appear under a parent; rule bodies only approximate that.

Each entry looks like:

```json
{
  "type": "selection_set",
  "named": true,
  "fields": {},
  "children": {"multiple": true, "required": true, "types": [{"type": "selection", "named": true}]}
}
```
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Annotated, Any

from pydantic import ConfigDict, Field, TypeAdapter

from gramnav._common import FrozenModel


class NodeTypeRef(FrozenModel):
    """A reference to a node kind inside a `children`, `fields` or `subtypes` descriptor."""

    model_config = FrozenModel.model_config | ConfigDict(extra="ignore")

    type: str
    named: bool


class ChildrenInfo(FrozenModel):
    """Cardinality and allowed kinds of a node's children (or of one of its fields)."""

    model_config = FrozenModel.model_config | ConfigDict(extra="ignore")

    multiple: Annotated[
        bool, Field(description="Whether more than one child of these kinds may be present.")
    ] = False
    required: Annotated[
        bool, Field(description="Whether at least one child of these kinds must be present.")
    ] = False
    types: tuple[NodeTypeRef, ...] = ()

    @property
    def named_types(self) -> tuple[str, ...]:
        """Names of the named kinds allowed here, in declaration order."""
        return tuple(ref.type for ref in self.types if ref.named)


class NodeType(FrozenModel):
    """One distinct syntax-tree node kind a compiled grammar can produce."""

    model_config = FrozenModel.model_config | ConfigDict(extra="ignore")

    type: str
    named: bool
    children: ChildrenInfo | None = None
    fields: dict[str, ChildrenInfo] | None = None
    subtypes: tuple[NodeTypeRef, ...] | None = None
    extra: bool = False
    root: bool = False

    @property
    def has_structure(self) -> bool:
        """Whether this entry describes any children, through `children` or `fields`."""
        return self.children is not None or bool(self.fields)

    @property
    def is_supertype(self) -> bool:
        """Whether this is an abstract kind (declared with `subtypes`)."""
        return bool(self.subtypes)

    def iter_child_refs(self) -> Iterator[NodeTypeRef]:
        """Yield every child reference, positional children first, then fields by name."""
        if self.children is not None:
            yield from self.children.types
        for _, info in sorted((self.fields or {}).items()):
            yield from info.types

    @property
    def named_child_types(self) -> tuple[str, ...]:
        """Names of every named kind that can appear directly under this node, de-duplicated."""
        return tuple(dict.fromkeys(ref.type for ref in self.iter_child_refs() if ref.named))


_node_types_adapter: TypeAdapter[tuple[NodeType, ...]] = TypeAdapter(tuple[NodeType, ...])


def parse_node_types(data: Any) -> tuple[NodeType, ...]:
    """Validate a parsed `node-types.json` list.

    Raises:
        pydantic.ValidationError: If an entry does not have the node-type shape.
    """
    return _node_types_adapter.validate_python(data)


__all__ = ("ChildrenInfo", "NodeType", "NodeTypeRef", "parse_node_types")
