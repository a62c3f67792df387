import importlib.util
import sys
from collections.abc import Callable
from pathlib import Path
from types import ModuleType

import pytest

from xsdbind import CodeGenerator, GeneratorContext, ProtoTree, assemble, get_target
from xsdbind.proto import Attribute, ComplexType, Element, SimpleType


@pytest.fixture
def generate_source() -> Callable[..., str]:
    def _generate_source(nodes, language: str = "go", package: str = "schema", strict: bool = False) -> str:
        generator = CodeGenerator(ProtoTree(nodes), get_target(language), GeneratorContext(strict=strict))
        generator.run()
        return assemble(generator, package)

    return _generate_source


@pytest.fixture
def make_generator() -> Callable[..., CodeGenerator]:
    def _make_generator(nodes, language: str = "go", strict: bool = False) -> CodeGenerator:
        return CodeGenerator(ProtoTree(nodes), get_target(language), GeneratorContext(strict=strict))

    return _make_generator


@pytest.fixture
def load_python_module(tmp_path: Path) -> Callable[[str, str], ModuleType]:
    loaded: list[str] = []

    def _load_python_module(source: str, module_name: str = "generated_schema") -> ModuleType:
        path = tmp_path / f"{module_name}.py"
        path.write_text(source, encoding="utf-8")
        spec = importlib.util.spec_from_file_location(module_name, path)
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        loaded.append(module_name)
        spec.loader.exec_module(module)
        return module

    yield _load_python_module

    for module_name in loaded:
        sys.modules.pop(module_name, None)


@pytest.fixture
def logon_tree() -> list:
    """SOAP GetRecord request with a nillable Logon reference."""
    return [
        ComplexType(
            name="Logon",
            elements=(
                Element(name="LogonType", type="xs:int"),
                Element(name="Password", type="xs:string"),
                Element(name="UserName", type="xs:string"),
            ),
        ),
        ComplexType(
            name="GetRecord",
            elements=(
                Element(name="LD", type="gxw:Logon", nillable=True),
                Element(name="nTableID", type="xs:int"),
                Element(name="nParentID", type="xs:int"),
                Element(name="nRecordID", type="xs:int"),
                Element(name="strXML", type="xs:string"),
                Element(name="nErrorCode", type="xs:int"),
                Element(name="strErrorXML", type="xs:string"),
            ),
        ),
        ComplexType(
            name="AddRecord",
            elements=(
                Element(name="LD", type="gxw:Logon", nillable=True),
                Element(name="nTableID", type="xs:int"),
                Element(name="nSiteID", type="xs:int"),
            ),
        ),
    ]


@pytest.fixture
def base64_tree() -> list:
    """Attributes, simple content and extension in one tree."""
    return [
        ComplexType(
            name="myType2",
            base="xs:base64Binary",
            attributes=(Attribute(name="length", type="xs:int", optional=True),),
        ),
        ComplexType(
            name="myType6",
            attributes=(
                Attribute(name="code", type="xs:string", optional=True),
                Attribute(name="identifier", type="xs:int", optional=True),
            ),
        ),
        ComplexType(
            name="myType7",
            base="xs:string",
            attributes=(Attribute(name="origin", type="xs:string"),),
        ),
        SimpleType(name="myString", base="xs:string"),
        ComplexType(
            name="TopLevel",
            base="myType6",
            attributes=(
                Attribute(name="cost", type="xs:double", optional=True),
                Attribute(name="LastUpdated", type="xs:dateTime", optional=True),
            ),
            elements=(
                Element(name="nested", type="myType7", nillable=True),
                Element(name="nested2", type="myType7"),
                Element(name="myType2", type="myType2", plural=True),
                Element(name="myString", type="myString", nillable=True),
            ),
        ),
    ]
