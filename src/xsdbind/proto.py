"""
Proto tree: the intermediate representation of a parsed XML Schema.

Every node is a flat, immutable record. Type, base and ref fields hold names,
never objects; the generator resolves them lazily through
:class:`xsdbind.resolver.SymbolIndex`, so the tree may reference itself
cyclically without any special handling here.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class Attribute:
    name: str
    type: str = ""
    plural: bool = False
    optional: bool = False
    doc: str = ""


@dataclass(frozen=True)
class Element:
    name: str
    type: str = ""
    plural: bool = False
    nillable: bool = False
    doc: str = ""


@dataclass(frozen=True)
class AttributeGroup:
    name: str
    ref: str = ""
    attributes: Tuple[Attribute, ...] = ()
    doc: str = ""


@dataclass(frozen=True)
class Group:
    name: str
    ref: str = ""
    plural: bool = False
    elements: Tuple[Element, ...] = ()
    groups: Tuple["Group", ...] = ()
    doc: str = ""


@dataclass(frozen=True)
class SimpleType:
    """A named simple type.

    Exactly one shape applies: a plain alias of ``base``, a ``list`` of
    ``base`` values, or a ``union`` over ``member_types``. A member type left
    empty is resolved from the member name when the union is emitted.
    """

    name: str
    base: str = ""
    list: bool = False
    union: bool = False
    member_types: Dict[str, str] = field(default_factory=dict)
    doc: str = ""


@dataclass(frozen=True)
class ComplexType:
    name: str
    base: str = ""
    attributes: Tuple[Attribute, ...] = ()
    attribute_groups: Tuple[AttributeGroup, ...] = ()
    elements: Tuple[Element, ...] = ()
    groups: Tuple[Group, ...] = ()
    doc: str = ""


Node = Union[SimpleType, ComplexType, Group, AttributeGroup, Element, Attribute]

NODE_KINDS = (SimpleType, ComplexType, Group, AttributeGroup, Element, Attribute)


class ProtoTree:
    """Ordered, read-only sequence of top-level schema definitions."""

    def __init__(self, nodes: Sequence[Optional[Node]] = ()):
        self._nodes = tuple(nodes)

    def __iter__(self) -> Iterator[Optional[Node]]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __getitem__(self, index):
        return self._nodes[index]

    def __repr__(self) -> str:
        return f"ProtoTree({len(self._nodes)} nodes)"

    def simple_types(self) -> Iterator[SimpleType]:
        for node in self._nodes:
            if isinstance(node, SimpleType):
                yield node

    def definitions(self) -> Iterator[Node]:
        for node in self._nodes:
            if node is not None:
                yield node
