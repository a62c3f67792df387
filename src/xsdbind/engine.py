"""
Code generation engine.

:class:`CodeGenerator` walks a :class:`~xsdbind.proto.ProtoTree` in order and
dispatches each node to the emitter registered for its kind. Emitters resolve
and normalize the node into a :class:`~xsdbind.declarations.Declaration`,
hand it to the target for rendering, and record the result in the run's
:class:`GeneratorContext`.

All mutable state of a run (unique-name counters, the dedup store, usage
flags) lives in the context, so two generators never share anything.
"""
import logging
from typing import Callable, Dict, FrozenSet, List, Optional, Set, Tuple

from .declarations import (
    ALIAS,
    ANY,
    ATTRIBUTE,
    ATTRIBUTE_GROUP,
    ELEMENT,
    EMBEDDED,
    GROUP,
    IDENTITY,
    STRUCT,
    UNION_MEMBER,
    VALUE,
    Declaration,
    Member,
)
from .errors import UnresolvedReferenceError, UnsupportedNodeError
from .naming import NameRegistry, normalize_type
from .proto import (
    Attribute,
    AttributeGroup,
    ComplexType,
    Element,
    Group,
    Node,
    ProtoTree,
    SimpleType,
)
from .resolver import SymbolIndex, trim_ns_prefix
from .targets import Target

logger = logging.getLogger(__name__)


class GeneratorContext:
    """Run-scoped bookkeeping: names, dedup store, usage flags."""

    def __init__(self, strict: bool = False):
        self.strict = strict
        self.names = NameRegistry()
        # Dedup store: raw schema name -> rendered body. ``None`` while in progress.
        self.store: Dict[str, Optional[str]] = {}
        self.declarations: List[Declaration] = []
        self.flags: Set[str] = set()
        self.unresolved: List[Tuple[str, str]] = []

    def seen(self, name: str) -> bool:
        return name in self.store

    def reserve(self, name: str):
        self.store[name] = None

    def record(self, key: str, decl: Declaration, text: str, flags: FrozenSet[str]):
        self.store[key] = text
        self.declarations.append(decl)
        self.flags.update(flags)

    def bodies(self) -> List[str]:
        return [text for text in self.store.values() if text]


class CodeGenerator:
    def __init__(self, tree: ProtoTree, target: Target, context: Optional[GeneratorContext] = None):
        self.tree = tree
        self.target = target
        self.context = context if context is not None else GeneratorContext()
        self.index = SymbolIndex(tree)
        self._emitters: Dict[type, Callable[[Node], Optional[Declaration]]] = {
            SimpleType: self.emit_simple_type,
            ComplexType: self.emit_complex_type,
            Group: self.emit_group,
            AttributeGroup: self.emit_attribute_group,
            Element: self.emit_element,
            Attribute: self.emit_attribute,
        }

    def run(self) -> List[Declaration]:
        for node in self.tree:
            if node is None:
                continue
            self.emit(node)
        logger.debug(f"Emitted {len(self.context.declarations)} declarations for {len(self.tree)} nodes")
        return self.context.declarations

    def emit(self, node: Node) -> Optional[Declaration]:
        emitter = self._emitters.get(type(node))
        if emitter is None:
            raise UnsupportedNodeError(node)
        return emitter(node)

    # -------------------------------------------------------------------------
    # Type resolution
    # -------------------------------------------------------------------------

    def field_type(self, reference: str, owner: str) -> str:
        """Resolved, normalized target type for a type reference."""
        resolved = self.index.resolve(reference)
        if self.index.is_declared(resolved):
            return self.target.safe_name(normalize_type(resolved, self.target.builtins, self.target.any_type))
        builtin = self.target.map_builtin(resolved)
        if builtin is not None:
            return builtin
        if resolved:
            self._unresolved(resolved, owner)
        return normalize_type(resolved, self.target.builtins, self.target.any_type)

    def declaration_name(self, raw: str) -> str:
        return self.target.safe_name(self.context.names.declaration_name(raw))

    def _unresolved(self, reference: str, owner: str):
        if self.context.strict:
            raise UnresolvedReferenceError(reference, owner)
        logger.debug(f"Type reference '{reference}' in '{owner}' is neither declared nor builtin, passing through")
        self.context.unresolved.append((reference, owner))

    def is_value_base(self, base: str) -> bool:
        """True when a ComplexType base yields a scalar value member rather than an embedded one."""
        resolved = self.index.resolve(base)
        if resolved in self.index.complex_types:
            return False
        if self.index.lookup(resolved) is not None:
            return True
        return not self.index.is_declared(resolved) and self.target.map_builtin(resolved) is not None

    # -------------------------------------------------------------------------
    # Member builders
    # -------------------------------------------------------------------------

    def _identity(self, decl_name: str, raw_name: str) -> List[Member]:
        if decl_name != raw_name:
            return [Member(name="XMLName", type="", role=IDENTITY, wire_name=raw_name)]
        return []

    def _attribute_member(self, attribute: Attribute, owner: str) -> Member:
        return Member(
            name=self.context.names.field_name(attribute.name),
            type=self.field_type(attribute.type, owner),
            role=ATTRIBUTE,
            wire_name=attribute.name,
            plural=attribute.plural,
            optional=attribute.optional,
        )

    def _attribute_group_member(self, group: AttributeGroup, owner: str) -> Member:
        name = group.name or trim_ns_prefix(group.ref)
        return Member(
            name=self.context.names.field_name(name),
            type=self.field_type(group.ref or group.name, owner),
            role=ATTRIBUTE_GROUP,
        )

    def _group_member(self, group: Group, owner: str) -> Member:
        name = group.name or trim_ns_prefix(group.ref)
        return Member(
            name=self.context.names.field_name(name),
            type=self.field_type(group.ref or group.name, owner),
            role=GROUP,
            plural=group.plural,
        )

    def _element_member(self, element: Element, owner: str) -> Member:
        return Member(
            name=self.context.names.field_name(element.name),
            type=self.field_type(element.type, owner),
            role=ELEMENT,
            wire_name=element.name,
            plural=element.plural,
            pointer=element.nillable,
        )

    def _base_member(self, base: str, owner: str) -> Member:
        if self.is_value_base(base):
            return Member(name="Value", type=self.field_type(base, owner), role=VALUE)
        return Member(name="", type=self.field_type(base, owner), role=EMBEDDED, pointer=True)

    # -------------------------------------------------------------------------
    # Emitters
    # -------------------------------------------------------------------------

    def _finish(self, key: str, decl: Declaration) -> Declaration:
        if decl.kind == STRUCT:
            if not decl.members:
                decl.kind = ANY
            else:
                decl.members = unique_member_names(decl.members)
        text, flags = self.target.render(decl)
        self.context.record(key, decl, text, flags)
        logger.debug(f"Emitted {decl.source} '{key}' as {decl.kind} {decl.name}")
        return decl

    def emit_simple_type(self, node: SimpleType) -> Optional[Declaration]:
        if self.context.seen(node.name):
            return None
        self.context.reserve(node.name)
        name = self.declaration_name(node.name)

        if node.list:
            decl = Declaration(name=name, wire_name=node.name, kind=ALIAS, source="SimpleType", doc=node.doc,
                               alias_of=self.field_type(node.base, node.name), alias_plural=True)
            return self._finish(node.name, decl)

        if node.union and node.member_types:
            members = self._identity(name, node.name)
            for member_name, member_type in sorted(node.member_types.items()):
                members.append(Member(
                    name=self.context.names.field_name(member_name),
                    type=self.field_type(member_type or member_name, node.name),
                    role=UNION_MEMBER,
                ))
            decl = Declaration(name=name, wire_name=node.name, kind=STRUCT, source="SimpleType", doc=node.doc,
                               members=members)
            return self._finish(node.name, decl)

        decl = Declaration(name=name, wire_name=node.name, kind=ALIAS, source="SimpleType", doc=node.doc,
                           alias_of=self.field_type(node.base, node.name))
        return self._finish(node.name, decl)

    def emit_complex_type(self, node: ComplexType) -> Optional[Declaration]:
        if self.context.seen(node.name):
            return None
        self.context.reserve(node.name)
        name = self.declaration_name(node.name)

        members = self._identity(name, node.name)
        members.extend(self._attribute_group_member(group, node.name) for group in node.attribute_groups)
        members.extend(self._attribute_member(attribute, node.name) for attribute in node.attributes)
        members.extend(self._group_member(group, node.name) for group in node.groups)
        members.extend(self._element_member(element, node.name) for element in node.elements)
        if node.base:
            members.append(self._base_member(node.base, node.name))

        decl = Declaration(name=name, wire_name=node.name, kind=STRUCT, source="ComplexType", doc=node.doc,
                           members=members)
        return self._finish(node.name, decl)

    def emit_group(self, node: Group) -> Optional[Declaration]:
        if node.ref and not (node.elements or node.groups):
            return None
        if self.context.seen(node.name):
            return None
        self.context.reserve(node.name)
        name = self.declaration_name(node.name)

        members = self._identity(name, node.name)
        members.extend(self._element_member(element, node.name) for element in node.elements)
        members.extend(self._group_member(group, node.name) for group in node.groups)

        decl = Declaration(name=name, wire_name=node.name, kind=STRUCT, source="Group", doc=node.doc,
                           members=members)
        return self._finish(node.name, decl)

    def emit_attribute_group(self, node: AttributeGroup) -> Optional[Declaration]:
        if node.ref and not node.attributes:
            return None
        if self.context.seen(node.name):
            return None
        self.context.reserve(node.name)
        name = self.declaration_name(node.name)

        members = self._identity(name, node.name)
        members.extend(self._attribute_member(attribute, node.name) for attribute in node.attributes)

        decl = Declaration(name=name, wire_name=node.name, kind=STRUCT, source="AttributeGroup", doc=node.doc,
                           members=members)
        return self._finish(node.name, decl)

    def emit_element(self, node: Element) -> Optional[Declaration]:
        if self.context.seen(node.name):
            return None
        if trim_ns_prefix(node.name) == trim_ns_prefix(node.type):
            return None
        self.context.reserve(node.name)
        name = self.declaration_name(node.name)
        decl = Declaration(name=name, wire_name=node.name, kind=ALIAS, source="Element", doc=node.doc,
                           alias_of=self.field_type(node.type, node.name), alias_plural=node.plural)
        return self._finish(node.name, decl)

    def emit_attribute(self, node: Attribute) -> Optional[Declaration]:
        if self.context.seen(node.name):
            return None
        self.context.reserve(node.name)
        name = self.declaration_name(node.name)
        decl = Declaration(name=name, wire_name=node.name, kind=ALIAS, source="Attribute", doc=node.doc,
                           alias_of=self.field_type(node.type, node.name), alias_plural=node.plural)
        return self._finish(node.name, decl)


def unique_member_names(members: List[Member]) -> List[Member]:
    """Give repeated member names inside one declaration a numeric suffix.

    A suffixed name skips any name another member already carries, so
    ``Id, Id, Id2`` becomes ``Id, Id3, Id2``.
    """
    named = [member for member in members if member.role not in (IDENTITY, EMBEDDED)]
    taken: Set[str] = {member.name for member in named}
    seen: Set[str] = set()
    for member in named:
        if member.name not in seen:
            seen.add(member.name)
            continue
        count = 2
        while f"{member.name}{count}" in taken:
            count += 1
        member.name = f"{member.name}{count}"
        taken.add(member.name)
        seen.add(member.name)
    return members
