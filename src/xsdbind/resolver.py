import logging
from typing import Dict, Optional, Set

from .proto import Attribute, ComplexType, Element, ProtoTree, SimpleType

logger = logging.getLogger(__name__)


def trim_ns_prefix(name: Optional[str]) -> str:
    """Strip a ``prefix:`` or ``{uri}`` qualifier from a schema name."""
    if not name:
        return ""
    if "}" in name:
        return name.split("}")[-1]
    if ":" in name:
        return name.split(":")[-1]
    return name


class SymbolIndex:
    """Name lookups over one proto tree, built once per run.

    Only the first definition of a name is indexed, so earlier tree entries
    win ties exactly as a linear scan in tree order would.
    """

    def __init__(self, tree: ProtoTree):
        self.tree = tree
        self.simple_types: Dict[str, SimpleType] = {}
        self.complex_types: Dict[str, ComplexType] = {}
        self.declared: Set[str] = set()
        for node in tree.definitions():
            # Elements and attributes live outside the type symbol space.
            if not isinstance(node, (Element, Attribute)):
                self.declared.add(trim_ns_prefix(node.name))
            if isinstance(node, SimpleType):
                self.simple_types.setdefault(trim_ns_prefix(node.name), node)
            elif isinstance(node, ComplexType):
                self.complex_types.setdefault(trim_ns_prefix(node.name), node)

    def lookup(self, name: str) -> Optional[SimpleType]:
        return self.simple_types.get(trim_ns_prefix(name))

    def resolve_base(self, type_name: str) -> str:
        """Single hop: the base of the named SimpleType, or the name itself."""
        name = trim_ns_prefix(type_name)
        simple = self.simple_types.get(name)
        if simple is None:
            return name
        return simple.base

    def resolve(self, type_name: str) -> str:
        """Follow plain-alias SimpleTypes until a fixed point is reached.

        List and union SimpleTypes stop the walk because they own a
        declaration of their own. Names that are not SimpleTypes (builtins,
        complex types, unknown names) come back unchanged.
        """
        current = trim_ns_prefix(type_name)
        visited: Set[str] = set()
        while current not in visited:
            visited.add(current)
            simple = self.simple_types.get(current)
            if simple is None or simple.list or (simple.union and simple.member_types):
                return current
            current = trim_ns_prefix(simple.base)
        logger.warning(f"Alias cycle detected while resolving '{type_name}', stopping at '{current}'")
        return current

    def is_declared(self, name: str) -> bool:
        return trim_ns_prefix(name) in self.declared
