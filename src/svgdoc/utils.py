"""Utility functions for SVG parsing and serialization."""

import re
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable, Iterator
from xml.etree import ElementTree as ET

# SVG namespace mappings
SVG_NAMESPACES = {
    "svg": "http://www.w3.org/2000/svg",
    "inkscape": "http://www.inkscape.org/namespaces/inkscape",
    "sodipodi": "http://sodipodi.sourceforge.net/DTD/sodipodi-0.dtd",
    "xlink": "http://www.w3.org/1999/xlink",
}

# Bound to the "xml" prefix by definition, never declared
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

# Declaration line stripped from serialized output
XML_HEADER = '<?xml version="1.0"?>\n'

_DECLARATION_RE = re.compile(r"^\s*<\?xml\s+(.*?)\?>", re.DOTALL)
_PSEUDO_ATTR_RE = re.compile(r"([A-Za-z]+)\s*=\s*([\"'])(.*?)\2")
_RESERVED_PREFIX_RE = re.compile(r"ns\d+$")

# Guards ElementTree's process-wide prefix registry
_registry_lock = threading.Lock()


@dataclass
class XmlDeclaration:
    """Pseudo-attributes of an XML declaration."""

    version: str = "1.0"
    encoding: str | None = None
    standalone: str | None = None

    def to_string(self) -> str:
        """Render the declaration the way DOM serializers write it."""
        parts = [f'version="{self.version}"']
        if self.encoding:
            parts.append(f'encoding="{self.encoding}"')
        if self.standalone:
            parts.append(f'standalone="{self.standalone}"')
        return f"<?xml {' '.join(parts)}?>"


def register_namespace(prefix: str, uri: str) -> None:
    """Register a single prefix, ignoring ones ElementTree reserves."""
    if prefix == "xml" or _RESERVED_PREFIX_RE.match(prefix):
        return
    ET.register_namespace(prefix, uri)


def register_namespaces() -> None:
    """Register SVG namespaces to preserve prefixes when writing.

    The SVG namespace itself is registered as the default namespace so
    that ``<svg xmlns="...">`` round-trips without a prefix.
    """
    for prefix, uri in SVG_NAMESPACES.items():
        if prefix == "svg":
            prefix = ""
        register_namespace(prefix, uri)


@contextmanager
def registered_namespaces(namespaces: Iterable[tuple[str, str]]) -> Iterator[None]:
    """Register SVG and document prefixes for the duration of a block.

    The registry is locked while the block runs and restored on exit, so
    concurrent serializations do not see each other's prefixes.

    Args:
        namespaces: (prefix, uri) pairs declared by a document. Later pairs
            win over earlier ones for the same prefix or uri.
    """
    with _registry_lock:
        saved = dict(ET._namespace_map)
        try:
            register_namespaces()
            for prefix, uri in namespaces:
                register_namespace(prefix, uri)
            yield
        finally:
            ET._namespace_map.clear()
            ET._namespace_map.update(saved)


def qualify_name(name: str, namespaces: Iterable[tuple[str, str]]) -> str:
    """Turn a ``prefix:local`` attribute name into Clark notation.

    Prefixes are looked up in the document's declarations, then among the
    well-known SVG editor prefixes. Unprefixed and unknown names are
    returned unchanged.

    Example:
        >>> qualify_name("xml:space", [])
        '{http://www.w3.org/XML/1998/namespace}space'
    """
    prefix, sep, local = name.partition(":")
    if not sep or not prefix or not local or prefix == "xmlns":
        return name

    if prefix == "xml":
        return f"{{{XML_NAMESPACE}}}{local}"
    uri = dict(namespaces).get(prefix)
    if uri is None and prefix != "svg":
        uri = SVG_NAMESPACES.get(prefix)
    if uri is None:
        return name
    return f"{{{uri}}}{local}"


def prefixed_name(key: str, namespaces: Iterable[tuple[str, str]]) -> str:
    """Turn a Clark notation attribute key back into ``prefix:local``.

    Example:
        >>> prefixed_name("{http://www.w3.org/1999/xlink}href", [])
        'xlink:href'
    """
    if not key.startswith("{"):
        return key

    uri, local = key[1:].split("}", 1)
    if uri == XML_NAMESPACE:
        return f"xml:{local}"
    for prefix, ns_uri in reversed(list(namespaces)):
        if prefix and ns_uri == uri:
            return f"{prefix}:{local}"
    for prefix, ns_uri in SVG_NAMESPACES.items():
        if prefix != "svg" and ns_uri == uri:
            return f"{prefix}:{local}"
    return key


def get_local_name(tag: str) -> str:
    """Extract local name from a namespaced tag.

    Args:
        tag: Full tag name, possibly with namespace.

    Returns:
        Local name without namespace prefix.

    Example:
        >>> get_local_name("{http://www.w3.org/2000/svg}rect")
        'rect'
    """
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def find_svg_element(root: ET.Element) -> ET.Element | None:
    """Find the first ``svg`` element in document order.

    Args:
        root: Root element of a parsed tree.

    Returns:
        The first element whose local name is ``svg``, or None.
    """
    for elem in root.iter():
        # Comments and processing instructions carry callables as tags
        if isinstance(elem.tag, str) and get_local_name(elem.tag) == "svg":
            return elem
    return None


def parse_xml_declaration(markup: str) -> XmlDeclaration | None:
    """Read the XML declaration at the start of a document.

    Args:
        markup: Raw XML text.

    Returns:
        The declaration, or None if the document has none.
    """
    match = _DECLARATION_RE.match(markup)
    if match is None:
        return None

    attrs = {name: value for name, _, value in _PSEUDO_ATTR_RE.findall(match.group(1))}
    return XmlDeclaration(
        version=attrs.get("version", "1.0"),
        encoding=attrs.get("encoding"),
        standalone=attrs.get("standalone"),
    )


def strip_xml_header(svg: str) -> str:
    """Remove the leading ``<?xml version="1.0"?>`` line.

    Only the exact literal is removed. A declaration carrying an encoding,
    single quotes or no trailing newline is left in place.
    """
    return svg.removeprefix(XML_HEADER)
