"""
Target-neutral views of what the generator decided to emit.

The engine resolves and normalizes every proto tree node into a
:class:`Declaration`; targets only turn these views into text.
"""
from dataclasses import dataclass, field
from typing import List

STRUCT = "struct"
ALIAS = "alias"
ANY = "any"

IDENTITY = "identity"
ATTRIBUTE = "attribute"
ATTRIBUTE_GROUP = "attribute_group"
GROUP = "group"
ELEMENT = "element"
VALUE = "value"
EMBEDDED = "embedded"
UNION_MEMBER = "union_member"


@dataclass
class Member:
    name: str
    type: str
    role: str
    wire_name: str = ""
    plural: bool = False
    # Nillable elements and embedded bases are held by reference.
    pointer: bool = False
    optional: bool = False


@dataclass
class Declaration:
    name: str
    wire_name: str
    kind: str
    source: str
    doc: str = ""
    members: List[Member] = field(default_factory=list)
    alias_of: str = ""
    alias_plural: bool = False

    def member(self, name: str) -> Member:
        for member in self.members:
            if member.name == name:
                return member
        raise KeyError(name)

    def roles(self) -> List[str]:
        return [member.role for member in self.members]
