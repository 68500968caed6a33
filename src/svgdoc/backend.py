"""XML backend used by SvgDocument.

The document wrapper only needs three capabilities from an XML library:
parsing markup into a tree, reading and writing attributes on a node, and
serializing the tree back to text. ``XmlBackend`` describes that surface and
``ElementTreeBackend`` implements it on top of ``xml.etree.ElementTree``.

Attribute names are given as written in markup (``inkscape:version``,
``xml:space``) and resolved against the document's namespace declarations.
"""

import copy
from dataclasses import dataclass, field
from typing import Protocol
from xml.etree import ElementTree as ET

from .utils import (
    XmlDeclaration,
    parse_xml_declaration,
    prefixed_name,
    qualify_name,
    registered_namespaces,
)


@dataclass
class ParsedXml:
    """A parsed document plus the prolog details ElementTree does not keep."""

    tree: ET.ElementTree
    declaration: XmlDeclaration | None = None
    doctype: str | None = None
    namespaces: list[tuple[str, str]] = field(default_factory=list)

    @property
    def root(self) -> ET.Element:
        return self.tree.getroot()

    def qualify(self, name: str) -> str:
        """Resolve a ``prefix:local`` name to the key ElementTree stores."""
        return qualify_name(name, self.namespaces)

    def prefixed(self, key: str) -> str:
        """Inverse of ``qualify``."""
        return prefixed_name(key, self.namespaces)


class XmlBackend(Protocol):
    """Parse, attribute access and serialize operations."""

    def parse(self, markup: str) -> ParsedXml: ...

    def has_attribute(self, parsed: ParsedXml, node: ET.Element, name: str) -> bool: ...

    def get_attribute(self, parsed: ParsedXml, node: ET.Element, name: str) -> str: ...

    def set_attribute(
        self, parsed: ParsedXml, node: ET.Element, name: str, value: str
    ) -> None: ...

    def remove_attribute(self, parsed: ParsedXml, node: ET.Element, name: str) -> None: ...

    def serialize(self, parsed: ParsedXml) -> str: ...


def format_doctype(name: str, pubid: str | None, system: str | None) -> str:
    """Build a DOCTYPE declaration from its parts.

    Args:
        name: Document type name.
        pubid: Public identifier, if any.
        system: System identifier, if any.

    Returns:
        DOCTYPE declaration without internal subset.

    Example:
        >>> format_doctype("svg", None, "svg11.dtd")
        '<!DOCTYPE svg SYSTEM "svg11.dtd">'
    """
    if pubid:
        return f'<!DOCTYPE {name} PUBLIC "{pubid}" "{system or ""}">'
    if system:
        return f'<!DOCTYPE {name} SYSTEM "{system}">'
    return f"<!DOCTYPE {name}>"


class _DocumentTarget:
    """Parser target that builds the tree and records prolog details."""

    def __init__(self) -> None:
        self._builder = ET.TreeBuilder(insert_comments=True, insert_pis=True)
        self.namespaces: list[tuple[str, str]] = []
        self.doctype_decl: str | None = None

    def start(self, tag, attrib):
        return self._builder.start(tag, attrib)

    def end(self, tag):
        return self._builder.end(tag)

    def data(self, data):
        self._builder.data(data)

    def comment(self, text):
        return self._builder.comment(text)

    def pi(self, target, text=None):
        return self._builder.pi(target, text)

    def start_ns(self, prefix, uri):
        self.namespaces.append((prefix or "", uri))

    def doctype(self, name, pubid, system):
        self.doctype_decl = format_doctype(name, pubid, system)

    def close(self) -> ET.Element:
        return self._builder.close()


class ElementTreeBackend:
    """XmlBackend built on the standard library ElementTree.

    Output always starts with an XML declaration, mirroring the input
    prolog (``<?xml version="1.0"?>`` when the input declared nothing
    else), followed by the DOCTYPE if one was parsed.

    ElementTree does not keep everything a DOM round-trip would: namespace
    declarations are written on the outermost element and unused ones are
    dropped, and comments or processing instructions outside the root
    element are lost, as is a DOCTYPE internal subset.

    Args:
        pretty_print: Re-indent the tree when serializing. Indentation is
            applied to a copy, the parsed tree keeps its whitespace.
        indent: Indentation unit used when pretty printing.
    """

    def __init__(self, pretty_print: bool = True, indent: str = "  ") -> None:
        self.pretty_print = pretty_print
        self.indent = indent

    def parse(self, markup: str) -> ParsedXml:
        """Parse markup into a tree.

        Raises:
            ET.ParseError: If the markup is not well-formed XML.
        """
        target = _DocumentTarget()
        parser = ET.XMLParser(target=target)
        parser.feed(markup)
        root = parser.close()

        return ParsedXml(
            tree=ET.ElementTree(root),
            declaration=parse_xml_declaration(markup),
            doctype=target.doctype_decl,
            namespaces=target.namespaces,
        )

    def has_attribute(self, parsed: ParsedXml, node: ET.Element, name: str) -> bool:
        return parsed.qualify(name) in node.attrib

    def get_attribute(self, parsed: ParsedXml, node: ET.Element, name: str) -> str:
        return node.get(parsed.qualify(name), "")

    def set_attribute(
        self, parsed: ParsedXml, node: ET.Element, name: str, value: str
    ) -> None:
        node.set(parsed.qualify(name), value)

    def remove_attribute(self, parsed: ParsedXml, node: ET.Element, name: str) -> None:
        node.attrib.pop(parsed.qualify(name), None)

    def serialize(self, parsed: ParsedXml) -> str:
        """Serialize a parsed document, declaration line included."""
        root = parsed.root
        if self.pretty_print:
            root = copy.deepcopy(root)
            ET.indent(root, space=self.indent)

        with registered_namespaces(parsed.namespaces):
            body = ET.tostring(root, encoding="unicode")

        declaration = parsed.declaration or XmlDeclaration()
        lines = [declaration.to_string()]
        if parsed.doctype:
            lines.append(parsed.doctype)
        lines.append(body)
        return "\n".join(lines) + "\n"
