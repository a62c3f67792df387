import keyword
from typing import Dict, FrozenSet, List, Optional

from ..declarations import (
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
from ..documentation import docstring
from .base import HEADER, Target

PYTHON_BUILTIN_TYPES = {
    "anyType": "Any",
    "anySimpleType": "str",
    "ENTITIES": "List[str]",
    "ENTITY": "str",
    "ID": "str",
    "IDREF": "str",
    "IDREFS": "List[str]",
    "NCName": "str",
    "NMTOKEN": "str",
    "NMTOKENS": "List[str]",
    "NOTATION": "List[str]",
    "Name": "str",
    "QName": "str",
    "anyURI": "str",
    "base64Binary": "bytes",
    "boolean": "bool",
    "byte": "int",
    "date": "date",
    "dateTime": "datetime",
    "decimal": "Decimal",
    "double": "float",
    "duration": "str",
    "float": "float",
    "gDay": "str",
    "gMonth": "str",
    "gMonthDay": "str",
    "gYear": "str",
    "gYearMonth": "str",
    "hexBinary": "bytes",
    "int": "int",
    "integer": "int",
    "language": "str",
    "long": "int",
    "negativeInteger": "int",
    "nonNegativeInteger": "int",
    "nonPositiveInteger": "int",
    "normalizedString": "str",
    "positiveInteger": "int",
    "short": "int",
    "string": "str",
    "time": "time",
    "token": "str",
    "unsignedByte": "int",
    "unsignedInt": "int",
    "unsignedLong": "int",
    "unsignedShort": "int",
}

ZERO_VALUES = {
    "int": "0",
    "float": "0.0",
    "str": '""',
    "bool": "False",
    "bytes": 'b""',
}

# Metadata "type" for each member role, read by serializers of the generated classes.
ROLE_KINDS = {
    ATTRIBUTE: "Attribute",
    ATTRIBUTE_GROUP: "AttributeGroup",
    ELEMENT: "Element",
    EMBEDDED: "Embedded",
    GROUP: "Group",
    UNION_MEMBER: "Union",
    VALUE: "Text",
}

IMPORT_ORDER = ("dataclasses", "datetime", "decimal", "typing")


def python_identifier(name: str) -> str:
    if keyword.iskeyword(name):
        return f"{name}_"
    if name[:1].isdigit():
        return f"_{name}"
    return name


class PythonTarget(Target):
    """Dataclasses whose field metadata carries the XML wire names."""

    name = "python"
    suffix = ".py"
    any_type = "Any"
    comment_prefix = "#"
    builtin_types = PYTHON_BUILTIN_TYPES
    extra_builtins = frozenset({"object"})
    reserved_names = frozenset({"Any", "Decimal", "List", "Optional", "TypeAlias"})
    flag_tokens = {
        "Any": "typing:Any",
        "List": "typing:List",
        "Optional": "typing:Optional",
        "TypeAlias": "typing:TypeAlias",
        "Decimal": "decimal:Decimal",
        "date": "datetime:date",
        "datetime": "datetime:datetime",
        "time": "datetime:time",
    }

    def sequence_of(self, type_name: str) -> str:
        return f"List[{type_name}]"

    def _has_zero(self, type_name: str) -> bool:
        return type_name in ZERO_VALUES or type_name.startswith("List[")

    def member_type(self, member: Member) -> str:
        if member.role == IDENTITY:
            return ""
        if member.plural:
            return self.sequence_of(member.type)
        if member.pointer or member.optional or not self._has_zero(member.type):
            return f"Optional[{member.type}]"
        return member.type

    def _default(self, member: Member) -> str:
        annotation = self.member_type(member)
        if annotation.startswith("List["):
            return "default_factory=list"
        if annotation.startswith("Optional["):
            return "default=None"
        return f"default={ZERO_VALUES[member.type]}"

    def _metadata(self, member: Member) -> str:
        items: Dict[str, object] = {}
        if member.wire_name:
            items["name"] = member.wire_name
        items["type"] = ROLE_KINDS[member.role]
        if member.role == ELEMENT and member.pointer:
            items["nillable"] = True
        if member.role == ATTRIBUTE and not member.optional:
            items["required"] = True
        return "{" + ", ".join(f"{key!r}: {value!r}".replace("'", '"') for key, value in items.items()) + "}"

    def _field(self, member: Member) -> str:
        # Embedded bases carry no member name; the field is named after the base.
        name = member.name or member.type
        return (
            f"    {python_identifier(name)}: {self.member_type(member)} = "
            f"field({self._default(member)}, metadata={self._metadata(member)})\n"
        )

    def _alias_value(self, type_name: str) -> str:
        if self.is_builtin(type_name):
            return type_name
        return f'"{type_name}"'

    def render_struct(self, decl: Declaration) -> str:
        text = f"\n\n@dataclass\nclass {python_identifier(decl.name)}:\n"
        text += docstring(decl.name, decl.doc)
        identity = [member for member in decl.members if member.role == IDENTITY]
        if identity:
            text += f'\n    class Meta:\n        name = "{identity[0].wire_name}"\n'
        fields = [member for member in decl.members if member.role != IDENTITY]
        if fields:
            text += "\n" + "".join(self._field(member) for member in fields)
        return text

    def render_alias(self, decl: Declaration) -> str:
        value = self._alias_value(decl.alias_of)
        if decl.alias_plural:
            value = self.sequence_of(value)
        return f"\n{self.comment(decl.name, decl.doc)}{python_identifier(decl.name)}: TypeAlias = {value}\n"

    def render_any(self, decl: Declaration) -> str:
        return f"\n{self.comment(decl.name, decl.doc)}{python_identifier(decl.name)}: TypeAlias = {self.any_type}\n"

    def declaration_flags(self, decl: Declaration) -> FrozenSet[str]:
        if decl.kind == STRUCT:
            if any(member.role != IDENTITY for member in decl.members):
                return frozenset({"dataclasses:dataclass", "dataclasses:field"})
            return frozenset({"dataclasses:dataclass"})
        return frozenset({"typing:TypeAlias"})

    def render_preamble(self, package: str, flags: FrozenSet[str], header: Optional[str] = None) -> str:
        lines: List[str] = [f"# {HEADER}"]
        if header:
            lines.append(f"# {header}")
        lines.append(f'"""Data-binding types for package {package or "schema"}."""')
        lines.append("from __future__ import annotations")
        lines.append("")
        grouped: Dict[str, List[str]] = {}
        for flag in flags:
            module, _, imported = flag.partition(":")
            grouped.setdefault(module, []).append(imported)
        for module in IMPORT_ORDER:
            if module in grouped:
                lines.append(f"from {module} import {', '.join(sorted(grouped[module]))}")
        return "\n".join(lines) + "\n"
