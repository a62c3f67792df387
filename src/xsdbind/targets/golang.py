from typing import FrozenSet, List, Optional

from ..declarations import (
    ATTRIBUTE,
    ELEMENT,
    EMBEDDED,
    IDENTITY,
    VALUE,
    Declaration,
    Member,
)
from .base import HEADER, Target

GO_BUILTIN_TYPES = {
    "anyType": "string",
    "anySimpleType": "string",
    "ENTITIES": "[]string",
    "ENTITY": "string",
    "ID": "string",
    "IDREF": "string",
    "IDREFS": "[]string",
    "NCName": "string",
    "NMTOKEN": "string",
    "NMTOKENS": "[]string",
    "NOTATION": "[]string",
    "Name": "string",
    "QName": "xml.Name",
    "anyURI": "string",
    "base64Binary": "[]byte",
    "boolean": "bool",
    "byte": "byte",
    "date": "time.Time",
    "dateTime": "time.Time",
    "decimal": "float64",
    "double": "float64",
    "duration": "string",
    "float": "float32",
    "gDay": "time.Time",
    "gMonth": "time.Time",
    "gMonthDay": "time.Time",
    "gYear": "time.Time",
    "gYearMonth": "time.Time",
    "hexBinary": "[]byte",
    "int": "int",
    "integer": "int",
    "language": "string",
    "long": "int64",
    "negativeInteger": "int",
    "nonNegativeInteger": "int",
    "nonPositiveInteger": "int",
    "normalizedString": "string",
    "positiveInteger": "int",
    "short": "int16",
    "string": "string",
    "time": "time.Time",
    "token": "string",
    "unsignedByte": "byte",
    "unsignedInt": "uint32",
    "unsignedLong": "uint64",
    "unsignedShort": "uint16",
}

TIME_PACKAGE = "time"
ENCODING_XML_PACKAGE = "encoding/xml"


class GoTarget(Target):
    name = "go"
    suffix = ".go"
    any_type = "interface{}"
    builtin_types = GO_BUILTIN_TYPES
    extra_builtins = frozenset({
        "[]bool",
        "[]interface{}",
        "complex128",
        "complex64",
        "int32",
        "int8",
        "interface",
        "uint",
        "uint8",
    })
    flag_tokens = {
        "time.Time": TIME_PACKAGE,
        "xml.Name": ENCODING_XML_PACKAGE,
    }

    def sequence_of(self, type_name: str) -> str:
        return f"[]{type_name}"

    def member_type(self, member: Member) -> str:
        if member.role == IDENTITY:
            return "xml.Name"
        type_name = member.type
        if member.pointer:
            type_name = f"*{type_name}"
        if member.plural:
            type_name = self.sequence_of(type_name)
        return type_name

    def _field(self, member: Member) -> str:
        if member.role == EMBEDDED:
            return f"\t*{member.type}"
        if member.role == IDENTITY:
            return f'\tXMLName\txml.Name\t`xml:"{member.wire_name}"`'
        if member.role == VALUE:
            return f'\t{member.name}\t{member.type}\t`xml:",chardata"`'
        if member.role == ATTRIBUTE:
            omit = ",omitempty" if member.optional else ""
            return f'\t{member.name}\t{self.member_type(member)}\t`xml:"{member.wire_name},attr{omit}"`'
        if member.role == ELEMENT:
            omit = ",omitempty" if member.pointer else ""
            return f'\t{member.name}\t{self.member_type(member)}\t`xml:"{member.wire_name}{omit}"`'
        return f"\t{member.name}\t{self.member_type(member)}"

    def render_struct(self, decl: Declaration) -> str:
        fields = "\n".join(self._field(member) for member in decl.members)
        return f"{self.comment(decl.name, decl.doc)}type {decl.name} struct {{\n{fields}\n}}\n"

    def render_alias(self, decl: Declaration) -> str:
        alias_of = self.sequence_of(decl.alias_of) if decl.alias_plural else decl.alias_of
        return f"{self.comment(decl.name, decl.doc)}type {decl.name} {alias_of}\n"

    def render_any(self, decl: Declaration) -> str:
        return f"{self.comment(decl.name, decl.doc)}type {decl.name} {self.any_type}\n"

    def render_preamble(self, package: str, flags: FrozenSet[str], header: Optional[str] = None) -> str:
        lines: List[str] = [f"// {HEADER}"]
        if header:
            lines.append(f"// {header}")
        preamble = "\n".join(lines) + f"\n\npackage {package or 'schema'}\n"
        imports = sorted(flag for flag in flags if flag in (TIME_PACKAGE, ENCODING_XML_PACKAGE))
        if imports:
            packages = "".join(f'\t"{package_path}"\n' for package_path in imports)
            preamble += f"\nimport (\n{packages})\n"
        return preamble
