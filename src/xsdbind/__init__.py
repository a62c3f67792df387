"""Generate data-binding type declarations from XML Schema definitions."""
from .assembler import GenerationResult, assemble, generate, write_artifact
from .config import GeneratorConfig, load_config
from .engine import CodeGenerator, GeneratorContext
from .errors import (
    ArtifactWriteError,
    ConfigError,
    SchemaLoadError,
    UnresolvedReferenceError,
    UnsupportedNodeError,
    XsdBindError,
)
from .proto import (
    Attribute,
    AttributeGroup,
    ComplexType,
    Element,
    Group,
    ProtoTree,
    SimpleType,
)
from .resolver import SymbolIndex
from .targets import get_target

__version__ = "0.1.0"

__all__ = [
    "ArtifactWriteError",
    "Attribute",
    "AttributeGroup",
    "CodeGenerator",
    "ComplexType",
    "ConfigError",
    "Element",
    "GenerationResult",
    "GeneratorConfig",
    "GeneratorContext",
    "Group",
    "ProtoTree",
    "SchemaLoadError",
    "SimpleType",
    "SymbolIndex",
    "UnresolvedReferenceError",
    "UnsupportedNodeError",
    "XsdBindError",
    "assemble",
    "generate",
    "get_target",
    "load_config",
    "write_artifact",
]
