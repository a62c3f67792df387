from typing import Optional


class XsdBindError(Exception):
    """Base class for every error raised by xsdbind."""


class ConfigError(XsdBindError):
    def __init__(self, message: str, suggestion: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion


class SchemaLoadError(XsdBindError):
    """The XSD could not be parsed into a proto tree."""


class UnsupportedNodeError(XsdBindError):
    """A proto tree node has no emitter registered for its kind."""

    def __init__(self, node):
        super().__init__(f"No emitter registered for proto tree node of kind {type(node).__name__}")
        self.node = node


class UnresolvedReferenceError(XsdBindError):
    """A type reference matched nothing in the tree and is not a builtin (strict mode only)."""

    def __init__(self, reference: str, owner: str):
        super().__init__(f"Unresolved type reference '{reference}' in '{owner}'")
        self.reference = reference
        self.owner = owner


class ArtifactWriteError(XsdBindError):
    def __init__(self, path, cause: OSError):
        super().__init__(f"Failed writing generated source to {path}: {cause}")
        self.path = path
        self.cause = cause
