import dataclasses
import decimal
import inspect
import typing
import xml.etree.ElementTree as ET

import pytest

from xsdbind.proto import Attribute, ComplexType, Element, SimpleType

SOAP_ENV = "http://schemas.xmlsoap.org/soap/envelope/"
TEMPURI = "http://tempuri.org/"
GXW = "http://schemas.datacontract.org/2004/07/GXW"

PREFIXED_REQUEST = (
    f'<soapenv:Envelope xmlns:soapenv="{SOAP_ENV}" xmlns:tem="{TEMPURI}" xmlns:gxw="{GXW}">'
    "<soapenv:Body>"
    "<tem:GetRecord>"
    "<tem:LD>"
    "<gxw:LogonType>0</gxw:LogonType>"
    "<gxw:Password>secret</gxw:Password>"
    "<gxw:UserName>admin</gxw:UserName>"
    "</tem:LD>"
    "<tem:nTableID>107</tem:nTableID>"
    "<tem:nParentID>1</tem:nParentID>"
    "<tem:nRecordID>0</tem:nRecordID>"
    "<tem:strXML></tem:strXML>"
    "<tem:nErrorCode>0</tem:nErrorCode>"
    "<tem:strErrorXML></tem:strErrorXML>"
    "</tem:GetRecord>"
    "</soapenv:Body>"
    "</soapenv:Envelope>"
)

DEFAULT_NS_REQUEST = (
    f'<Envelope xmlns="{SOAP_ENV}">'
    "<Body>"
    f'<GetRecord xmlns="{TEMPURI}">'
    "<LD>"
    f'<LogonType xmlns="{GXW}">0</LogonType>'
    f'<Password xmlns="{GXW}">secret</Password>'
    f'<UserName xmlns="{GXW}">admin</UserName>'
    "</LD>"
    "<nTableID>107</nTableID>"
    "<nParentID>1</nParentID>"
    "<nRecordID>0</nRecordID>"
    "<strXML/>"
    "<nErrorCode>0</nErrorCode>"
    "<strErrorXML/>"
    "</GetRecord>"
    "</Body>"
    "</Envelope>"
)

# Namespace of the child elements of each generated class.
CHILD_NAMESPACES = {"GetRecord": TEMPURI, "Logon": GXW}


def local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def to_element(obj, tag: str) -> ET.Element:
    uri = CHILD_NAMESPACES[type(obj).__name__]
    element = ET.Element(tag)
    for f in dataclasses.fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        child_tag = f"{{{uri}}}{f.metadata['name']}"
        if dataclasses.is_dataclass(value):
            element.append(to_element(value, child_tag))
        else:
            ET.SubElement(element, child_tag).text = str(value)
    return element


def from_element(cls, element: ET.Element):
    hints = typing.get_type_hints(cls)
    children = {local_name(child.tag): child for child in element}
    values = {}
    for f in dataclasses.fields(cls):
        child = children.get(f.metadata["name"])
        if child is None:
            continue
        hint = hints[f.name]
        nested = [arg for arg in typing.get_args(hint) if dataclasses.is_dataclass(arg)]
        if nested:
            values[f.name] = from_element(nested[0], child)
        else:
            values[f.name] = hint(child.text or "")
    return cls(**values)


def flatten(element: ET.Element):
    return [(node.tag, (node.text or "").strip()) for node in element.iter()]


@pytest.fixture
def logon_module(generate_source, load_python_module, logon_tree):
    return load_python_module(generate_source(logon_tree, language="python", package="gxw"), "gxw_types")


def test_preamble_and_imports(generate_source, logon_tree) -> None:
    source = generate_source(logon_tree, language="python", package="gxw")

    assert source.startswith(
        "# Code generated by xsdbind. DO NOT EDIT.\n"
        '"""Data-binding types for package gxw."""\n'
        "from __future__ import annotations\n"
        "\n"
        "from dataclasses import dataclass, field\n"
        "from typing import Optional\n"
    )
    assert source.count("class Logon:") == 1


def test_logon_dataclasses(logon_module) -> None:
    assert dataclasses.is_dataclass(logon_module.GetRecord)
    record_fields = {f.name: f for f in dataclasses.fields(logon_module.GetRecord)}

    assert list(record_fields) == [
        "LD", "NTableID", "NParentID", "NRecordID", "StrXML", "NErrorCode", "StrErrorXML",
    ]
    assert record_fields["LD"].metadata == {"name": "LD", "type": "Element", "nillable": True}
    assert record_fields["NTableID"].metadata == {"name": "nTableID", "type": "Element"}

    record = logon_module.GetRecord()
    assert record.LD is None
    assert record.NTableID == 0
    assert record.StrXML == ""


@pytest.mark.parametrize("request_text", [PREFIXED_REQUEST, DEFAULT_NS_REQUEST], ids=["prefixed", "default-ns"])
def test_request_styles_bind_to_the_same_values(logon_module, request_text) -> None:
    body = ET.fromstring(request_text).find(f"{{{SOAP_ENV}}}Body")
    request = from_element(logon_module.GetRecord, body[0])

    assert request.LD == logon_module.Logon(LogonType=0, Password="secret", UserName="admin")
    assert request.NTableID == 107
    assert request.NParentID == 1
    assert request.StrXML == ""


def test_request_styles_marshal_identically(logon_module) -> None:
    request = logon_module.GetRecord(
        LD=logon_module.Logon(LogonType=0, Password="secret", UserName="admin"),
        NTableID=107,
        NParentID=1,
    )
    marshalled = ET.fromstring(ET.tostring(to_element(request, f"{{{TEMPURI}}}GetRecord")))

    prefixed = ET.fromstring(PREFIXED_REQUEST).find(f"{{{SOAP_ENV}}}Body")[0]
    default_ns = ET.fromstring(DEFAULT_NS_REQUEST).find(f"{{{SOAP_ENV}}}Body")[0]

    assert flatten(marshalled) == flatten(prefixed) == flatten(default_ns)


def test_base64_tree_module(generate_source, load_python_module, base64_tree) -> None:
    source = generate_source(base64_tree, language="python")
    module = load_python_module(source, "base64_types")

    assert "from datetime import datetime\n" in source
    assert "from typing import List, Optional, TypeAlias\n" in source
    assert module.MyType2.Meta.name == "myType2"
    assert not hasattr(module.TopLevel, "Meta")

    value = {f.name: f for f in dataclasses.fields(module.MyType2)}["Value"]
    assert value.default == b""
    assert value.metadata == {"type": "Text"}

    top = {f.name: f for f in dataclasses.fields(module.TopLevel)}
    assert list(top) == ["Cost", "LastUpdated", "Nested", "Nested2", "MyType2", "MyString", "MyType6"]
    assert top["LastUpdated"].metadata == {"name": "LastUpdated", "type": "Attribute"}
    assert top["Nested"].metadata == {"name": "nested", "type": "Element", "nillable": True}
    assert top["MyType6"].metadata == {"type": "Embedded"}
    assert module.TopLevel().MyType2 == []
    assert module.TopLevel().MyType2 is not module.TopLevel().MyType2

    origin = {f.name: f for f in dataclasses.fields(module.MyType7)}["Origin"]
    assert origin.metadata == {"name": "origin", "type": "Attribute", "required": True}


def test_aliases(generate_source, load_python_module) -> None:
    source = generate_source(
        [
            ComplexType(name="Envelope", elements=(Element(name="body", type="xs:string"),)),
            Element(name="Wrapper", type="Envelope"),
            SimpleType(name="Codes", base="xs:token", list=True),
            SimpleType(name="Stamp", base="xs:dateTime", doc="When it happened."),
            ComplexType(name="Empty"),
        ],
        language="python",
    )
    module = load_python_module(source, "alias_types")

    assert '\n# Wrapper ...\nWrapper: TypeAlias = "Envelope"\n' in source
    assert "\nCodes: TypeAlias = List[str]\n" in source
    assert "\n# Stamp is When it happened.\nStamp: TypeAlias = datetime\n" in source
    assert "\nEmpty: TypeAlias = Any\n" in source
    assert module.Codes == typing.List[str]
    assert module.Empty is typing.Any


def test_identifiers_are_valid_python(generate_source, load_python_module) -> None:
    source = generate_source(
        [
            ComplexType(
                name="Item",
                attributes=(Attribute(name="none", type="xs:boolean", optional=True),),
                elements=(Element(name="1st", type="xs:string"),),
            ),
        ],
        language="python",
    )
    module = load_python_module(source, "identifier_types")

    item = module.Item()
    assert item.None_ is None
    assert item._1st == ""
    assert {f.name: f.metadata["name"] for f in dataclasses.fields(module.Item)} == {"None_": "none", "_1st": "1st"}


def test_documentation_with_quotes_and_backslashes(generate_source, load_python_module) -> None:
    text_element = (Element(name="text", type="xs:string"),)
    source = generate_source(
        [
            ComplexType(name="Quoted", doc='Set to "yes"', elements=text_element),
            ComplexType(name="WinPath", doc="Path like C:\\Users\\x", elements=text_element),
            ComplexType(name="Notes", doc='First line\nends with "quoted"', elements=text_element),
        ],
        language="python",
    )
    module = load_python_module(source, "documented_types")

    assert module.Quoted.__doc__ == 'Quoted is Set to "yes"'
    assert module.WinPath.__doc__ == "WinPath is Path like C:\\Users\\x"
    assert inspect.getdoc(module.Notes) == 'Notes is First line\n\nends with "quoted"'


def test_schema_names_do_not_shadow_imports(generate_source, load_python_module) -> None:
    source = generate_source(
        [
            ComplexType(name="List", elements=(Element(name="code", type="xs:string"),)),
            ComplexType(name="Holder", elements=(Element(name="entries", type="List"),)),
            SimpleType(name="Codes", base="xs:string", list=True),
            SimpleType(name="Decimal", base="xs:decimal"),
        ],
        language="python",
    )
    module = load_python_module(source, "reserved_types")

    assert "\nclass List_:\n" in source
    assert "\nDecimal_: TypeAlias = Decimal\n" in source
    assert module.List_.Meta.name == "List"
    assert module.Codes == typing.List[str]
    assert module.Decimal_ is decimal.Decimal
    assert typing.get_type_hints(module.Holder)["Entries"] == typing.Optional[module.List_]
    assert module.Holder().Entries is None
