from typing import FrozenSet, List, Optional

from ..declarations import (
    ATTRIBUTE,
    ELEMENT,
    EMBEDDED,
    IDENTITY,
    UNION_MEMBER,
    Declaration,
    Member,
)
from .base import HEADER, Target

TS_BUILTIN_TYPES = {
    "anyType": "any",
    "anySimpleType": "string",
    "ENTITIES": "string[]",
    "ENTITY": "string",
    "ID": "string",
    "IDREF": "string",
    "IDREFS": "string[]",
    "NCName": "string",
    "NMTOKEN": "string",
    "NMTOKENS": "string[]",
    "NOTATION": "string[]",
    "Name": "string",
    "QName": "string",
    "anyURI": "string",
    "base64Binary": "Uint8Array",
    "boolean": "boolean",
    "byte": "number",
    "date": "Date",
    "dateTime": "Date",
    "decimal": "number",
    "double": "number",
    "duration": "string",
    "float": "number",
    "gDay": "string",
    "gMonth": "string",
    "gMonthDay": "string",
    "gYear": "string",
    "gYearMonth": "string",
    "hexBinary": "Uint8Array",
    "int": "number",
    "integer": "number",
    "language": "string",
    "long": "number",
    "negativeInteger": "number",
    "nonNegativeInteger": "number",
    "nonPositiveInteger": "number",
    "normalizedString": "string",
    "positiveInteger": "number",
    "short": "number",
    "string": "string",
    "time": "Date",
    "token": "string",
    "unsignedByte": "number",
    "unsignedInt": "number",
    "unsignedLong": "number",
    "unsignedShort": "number",
}


class TypeScriptTarget(Target):
    name = "typescript"
    suffix = ".ts"
    any_type = "any"
    builtin_types = TS_BUILTIN_TYPES
    extra_builtins = frozenset({"unknown", "bigint"})
    reserved_names = frozenset({"Array", "Boolean", "Date", "Number", "Object", "String", "Uint8Array"})

    def sequence_of(self, type_name: str) -> str:
        if " " in type_name:
            return f"({type_name})[]"
        return f"{type_name}[]"

    def member_type(self, member: Member) -> str:
        if member.role == IDENTITY:
            return f'"{member.wire_name}"'
        type_name = member.type
        if member.pointer and member.role == ELEMENT:
            type_name = f"{type_name} | null"
        if member.plural:
            type_name = self.sequence_of(type_name)
        return type_name

    def _field(self, member: Member) -> str:
        if member.role == IDENTITY:
            return f"\treadonly XMLName?: {self.member_type(member)};"
        optional = member.optional or member.pointer or member.role == UNION_MEMBER
        mark = "?" if optional else ""
        suffix = ""
        if member.role in (ATTRIBUTE, ELEMENT) and member.wire_name != member.name:
            suffix = f" // xml:\"{member.wire_name}\""
        return f"\t{member.name}{mark}: {self.member_type(member)};{suffix}"

    def render_struct(self, decl: Declaration) -> str:
        bases = [member.type for member in decl.members if member.role == EMBEDDED]
        extends = f" extends {', '.join(bases)}" if bases else ""
        fields = "\n".join(self._field(member) for member in decl.members if member.role != EMBEDDED)
        body = f"{fields}\n" if fields else ""
        return f"{self.comment(decl.name, decl.doc)}export interface {decl.name}{extends} {{\n{body}}}\n"

    def render_alias(self, decl: Declaration) -> str:
        alias_of = self.sequence_of(decl.alias_of) if decl.alias_plural else decl.alias_of
        return f"{self.comment(decl.name, decl.doc)}export type {decl.name} = {alias_of};\n"

    def render_any(self, decl: Declaration) -> str:
        return f"{self.comment(decl.name, decl.doc)}export type {decl.name} = {self.any_type};\n"

    def render_preamble(self, package: str, flags: FrozenSet[str], header: Optional[str] = None) -> str:
        lines: List[str] = [f"// {HEADER}"]
        if header:
            lines.append(f"// {header}")
        lines.append(f"// Module: {package or 'schema'}")
        return "\n".join(lines) + "\n"
