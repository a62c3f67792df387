"""
Build a proto tree from an XSD file with ``xmlschema``.

The loader is a thin front end: it walks the global components of the parsed
schema and records names only. Groups and attribute groups referenced inside
complex types are flattened by ``xmlschema`` into the type's own elements and
attributes; global group and attribute group definitions are still emitted as
declarations of their own.
"""
import logging
from typing import Dict, Iterator, List, Set, Tuple

import xmlschema
from xmlschema.validators import XsdAnyAttribute, XsdAnyElement, XsdGroup, XsdList, XsdUnion

from .documentation import component_doc
from .errors import SchemaLoadError
from .naming import make_first_upper
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

logger = logging.getLogger(__name__)

XSD_NAMESPACE = "http://www.w3.org/2001/XMLSchema"
XSD_ANY_TYPE = f"{{{XSD_NAMESPACE}}}anyType"


def local_name(name) -> str:
    if name is None:
        return ""
    text = str(name)
    if "}" in text:
        return text.split("}")[-1]
    if ":" in text:
        return text.split(":")[-1]
    return text


def is_plural(particle) -> bool:
    max_occurs = getattr(particle, "max_occurs", 1)
    return max_occurs is None or max_occurs > 1


def iter_particles(group, repeated: bool = False) -> Iterator[Tuple[object, bool]]:
    """Yield the element particles of a model group with their effective repetition.

    A particle repeats when it, or any model group enclosing it, may occur
    more than once.
    """
    if group.max_occurs == 0:
        return
    repeated = repeated or is_plural(group)
    for item in group:
        if isinstance(item, XsdGroup):
            yield from iter_particles(item, repeated)
        else:
            yield item, repeated or is_plural(item)


class ProtoTreeBuilder:
    def __init__(self, schema: xmlschema.XMLSchema):
        self.schema = schema
        self.nodes: List[Node] = []
        # id() of an anonymous type definition -> name given to it
        self._synthesized: Dict[int, str] = {}
        self._taken: Set[str] = {
            local_name(name)
            for components in (schema.types, schema.groups, schema.attribute_groups)
            for name in components
        }

    def build(self) -> ProtoTree:
        for name, type_def in self.schema.types.items():
            type_name = local_name(name)
            if type_def.is_complex():
                self.nodes.append(self.complex_type(type_name, type_def))
            else:
                self.nodes.append(self.simple_type(type_name, type_def))

        for name, group in self.schema.groups.items():
            self.nodes.append(Group(
                name=local_name(name),
                elements=tuple(self.elements(group, local_name(name))),
                doc=component_doc(group),
            ))

        for name, attribute_group in self.schema.attribute_groups.items():
            self.nodes.append(AttributeGroup(
                name=local_name(name),
                attributes=tuple(self.attributes(attribute_group, local_name(name))),
                doc=component_doc(attribute_group),
            ))

        for name, element in self.schema.elements.items():
            element_name = local_name(name)
            self.nodes.append(Element(
                name=element_name,
                type=self.type_ref(element.type, element_name),
                nillable=bool(getattr(element, "nillable", False)),
                doc=component_doc(element),
            ))

        for name, attribute in self.schema.attributes.items():
            attribute_name = local_name(name)
            self.nodes.append(Attribute(
                name=attribute_name,
                type=self.type_ref(attribute.type, attribute_name),
                optional=getattr(attribute, "use", "optional") != "required",
                doc=component_doc(attribute),
            ))

        logger.info(f"Built proto tree with {len(self.nodes)} nodes from {self.schema.url or 'schema source'}")
        return ProtoTree(self.nodes)

    def type_ref(self, type_def, owner_name: str, parent: str = "") -> str:
        """Name of a type, synthesizing a named definition for anonymous ones.

        ``owner_name`` is the element or attribute carrying the type and
        ``parent`` the definition it sits in; the parent qualifies the name
        when ``owner_name`` is already taken.
        """
        if type_def is None:
            return ""
        if type_def.name:
            return local_name(type_def.name)

        if type_def.is_complex() or isinstance(type_def, (XsdList, XsdUnion)):
            key = id(type_def)
            if key in self._synthesized:
                return self._synthesized[key]
            name = self.anonymous_name(owner_name, parent)
            self._synthesized[key] = name
            self._taken.add(name)
            if type_def.is_complex():
                self.nodes.append(self.complex_type(name, type_def))
            else:
                self.nodes.append(self.simple_type(name, type_def))
            return name

        # Anonymous restriction: the facets carry no structure, refer to the base.
        return self.type_ref(getattr(type_def, "base_type", None), owner_name, parent)

    def anonymous_name(self, owner_name: str, parent: str = "") -> str:
        candidates = [owner_name]
        if parent:
            candidates.append(f"{parent}{make_first_upper(owner_name)}")
        for candidate in candidates:
            if candidate not in self._taken:
                return candidate
        base = candidates[-1]
        count = 2
        while f"{base}{count}" in self._taken:
            count += 1
        return f"{base}{count}"

    def simple_type(self, name: str, type_def) -> SimpleType:
        doc = component_doc(type_def)
        if isinstance(type_def, XsdList):
            return SimpleType(name=name, base=self.type_ref(type_def.item_type, f"{name}Item"), list=True, doc=doc)
        if isinstance(type_def, XsdUnion):
            members: Dict[str, str] = {}
            for index, member in enumerate(type_def.member_types):
                member_name = self.type_ref(member, f"{name}Member{index + 1}")
                members[member_name] = member_name
            return SimpleType(name=name, union=True, member_types=members, doc=doc)
        return SimpleType(name=name, base=self.type_ref(getattr(type_def, "base_type", None), name), doc=doc)

    def complex_type(self, name: str, type_def) -> ComplexType:
        base = ""
        inherited_attributes: Set[str] = set()
        inherited_elements: Set[str] = set()
        base_type = getattr(type_def, "base_type", None)
        if base_type is not None and base_type.name != XSD_ANY_TYPE:
            if base_type.is_simple():
                base = self.type_ref(base_type, name)
            elif getattr(type_def, "derivation", None) == "extension" or type_def.has_simple_content():
                base = self.type_ref(base_type, f"{name}Base")
                inherited_attributes = {attr.name for attr in self.attributes(base_type.attributes)}
                base_parent = local_name(base_type.name) or base
                inherited_attributes = {attr.name for attr in self.attributes(base_type.attributes, base_parent)}
                inherited_elements = {elem.name for elem in self.elements(base_type.content, base_parent)}

        attributes = tuple(
            attr for attr in self.attributes(type_def.attributes, name)
            if attr.name not in inherited_attributes
        )
        elements = tuple(
            elem for elem in self.elements(getattr(type_def, "content", None), name)
            if elem.name not in inherited_elements
        )
        return ComplexType(name=name, base=base, attributes=attributes, elements=elements,
                           doc=component_doc(type_def))

    def elements(self, content, parent: str = "") -> List[Element]:
        # Simple content carries no particles.
        if not isinstance(content, XsdGroup):
            return []
        result: List[Element] = []
        for child, repeated in iter_particles(content):
            if isinstance(child, XsdAnyElement):
                logger.debug("Skipping xs:any wildcard")
                continue
            child_name = local_name(child.name)
            result.append(Element(
                name=child_name,
                type=self.type_ref(child.type, child_name, parent),
                plural=repeated,
                nillable=bool(getattr(child, "nillable", False)),
                doc=component_doc(child),
            ))
        return result

    def attributes(self, attribute_group, parent: str = "") -> List[Attribute]:
        if attribute_group is None:
            return []
        result: List[Attribute] = []
        for name, attribute in attribute_group.items():
            if name is None or isinstance(attribute, XsdAnyAttribute):
                logger.debug("Skipping xs:anyAttribute wildcard")
                continue
            attribute_name = local_name(name)
            result.append(Attribute(
                name=attribute_name,
                type=self.type_ref(attribute.type, attribute_name, parent),
                plural=False,
                optional=getattr(attribute, "use", "optional") != "required",
                doc=component_doc(attribute),
            ))
        return result


def load_schema(source) -> xmlschema.XMLSchema:
    try:
        return xmlschema.XMLSchema(source)
    except Exception as e:
        logger.error(f"Error parsing XML Schema {source}: {e}")
        raise SchemaLoadError(f"Failed to parse XML Schema {source}: {e}") from e


def load_proto_tree(source) -> ProtoTree:
    """Parse ``source`` (path, URL or file-like object) into a proto tree."""
    return ProtoTreeBuilder(load_schema(source)).build()


__all__ = ["ProtoTreeBuilder", "load_proto_tree", "load_schema", "local_name"]
