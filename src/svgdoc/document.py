"""Fluent editing of the root ``<svg>`` element of an SVG document."""

import logging
import sys
from typing import TextIO
from xml.etree import ElementTree as ET

from .backend import ElementTreeBackend, ParsedXml, XmlBackend
from .utils import find_svg_element, strip_xml_header

logger = logging.getLogger(__name__)


class InvalidDocumentError(ValueError):
    """Raised when markup cannot be parsed or has no ``svg`` element."""


class SvgDocument:
    """Wrapper around a parsed SVG document.

    The first ``svg`` element of the tree is located once, at construction.
    Every mutator writes straight through to that element and returns the
    same instance, so calls can be chained::

        svg = SvgDocument(markup).set_id("logo").set_size(150, 150)
        text = svg.serialize()

    Args:
        svg: Raw SVG/XML markup.
        backend: XML backend to parse and serialize with. Defaults to a
            pretty-printing ElementTreeBackend.

    Raises:
        InvalidDocumentError: If the markup is not well-formed XML or
            contains no ``svg`` element.
    """

    def __init__(self, svg: str, backend: XmlBackend | None = None) -> None:
        self._backend = backend if backend is not None else ElementTreeBackend()

        try:
            self._xml: ParsedXml = self._backend.parse(svg)
        except ET.ParseError as e:
            raise InvalidDocumentError(f"Invalid SVG image: {e}") from e

        svg_tag = find_svg_element(self._xml.root)
        if svg_tag is None:
            raise InvalidDocumentError("Invalid SVG image: no <svg> element found")
        self._svg_tag = svg_tag

        logger.debug("Parsed SVG document, root attributes: %s", self.attributes)

    # Output

    def emit(self, stream: TextIO | None = None) -> "SvgDocument":
        """Write the serialized document to a stream.

        Args:
            stream: Text stream to write to. Defaults to standard output.
        """
        if stream is None:
            stream = sys.stdout
        stream.write(self.serialize())
        stream.flush()
        return self

    def serialize(self) -> str:
        """Return the serialized document without the XML header line."""
        return strip_xml_header(self._backend.serialize(self._xml))

    # Attribute primitives

    def has_attribute(self, attribute: str) -> bool:
        return self._backend.has_attribute(self._xml, self._svg_tag, attribute)

    def get_attribute(self, attribute: str) -> str:
        """Read an attribute of the svg element, ``""`` if it is not set."""
        return self._backend.get_attribute(self._xml, self._svg_tag, attribute)

    def set_attribute(self, attribute: str, value: str) -> "SvgDocument":
        """Set an attribute. Overwrites the attribute if it already exists."""
        self._backend.set_attribute(self._xml, self._svg_tag, attribute, value)
        return self

    def remove_attribute(self, attribute: str) -> "SvgDocument":
        """Remove an attribute. Does nothing if it is not set."""
        self._backend.remove_attribute(self._xml, self._svg_tag, attribute)
        return self

    @property
    def attributes(self) -> dict[str, str]:
        """Copy of the svg element's attributes, keyed ``prefix:local``."""
        return {self._xml.prefixed(k): v for k, v in self._svg_tag.attrib.items()}

    # Typed setters

    def set_id(self, id: str) -> "SvgDocument":
        return self.set_attribute("id", id)

    def set_width(self, width: int) -> "SvgDocument":
        return self.set_attribute("width", str(int(width)))

    def set_height(self, height: int) -> "SvgDocument":
        return self.set_attribute("height", str(int(height)))

    def set_size(self, width: int, height: int) -> "SvgDocument":
        """Set width, then height."""
        return self.set_width(width).set_height(height)

    def set_viewbox(
        self, minx: int, miny: int, width: int, height: int
    ) -> "SvgDocument":
        """Set the viewBox of the svg element.

        Args:
            minx: X offset of the visible area.
            miny: Y offset of the visible area.
            width: Width of the visible area.
            height: Height of the visible area.
        """
        values = (int(minx), int(miny), int(width), int(height))
        return self.set_attribute("viewBox", " ".join(str(v) for v in values))

    def set_class(self, class_: str) -> "SvgDocument":
        """Set the class attribute verbatim, replacing any previous value."""
        return self.set_attribute("class", class_)

    def set_name(self, name: str) -> "SvgDocument":
        return self.set_attribute("name", name)

    def set_dataset(self, key: str, data: str) -> "SvgDocument":
        """Set a ``data-{key}`` attribute."""
        return self.set_attribute(f"data-{key}", data)

    def set_fill(self, fill: str) -> "SvgDocument":
        """Set the fill colour. Besides colours this can be ``currentColor``."""
        return self.set_attribute("fill", fill)

    def set_stroke(self, stroke: str) -> "SvgDocument":
        """Set the stroke colour. Besides colours this can be ``currentColor``."""
        return self.set_attribute("stroke", stroke)

    def set_stroke_attribute(self, key: str, value: str) -> "SvgDocument":
        """Set a ``stroke-{key}`` attribute, e.g. ``width`` -> ``stroke-width``."""
        return self.set_attribute(f"stroke-{key}", value)

    # Class list

    @property
    def class_list(self) -> tuple[str, ...]:
        """Tokens of the class attribute, split on single spaces."""
        if not self.has_attribute("class"):
            return ()
        return tuple(self.get_attribute("class").split(" "))

    def add_to_classlist(self, class_: str) -> "SvgDocument":
        """Append an entry to the class list.

        The entry is appended to the existing value as-is, so irregular
        spacing in the original value is kept. Existing entries are left
        untouched.
        """
        if not self.has_attribute("class"):
            return self.set_attribute("class", class_)

        original_class = self.get_attribute("class")
        if class_ in original_class.split(" "):
            return self
        return self.set_attribute("class", f"{original_class} {class_}")

    def remove_from_classlist(self, class_: str) -> "SvgDocument":
        """Remove an entry from the class list.

        Remaining entries are de-duplicated and re-joined with single
        spaces. The attribute is removed when nothing is left.
        """
        classes = dict.fromkeys(self.get_attribute("class").split(" "))
        classes.pop(class_, None)
        final_class = " ".join(classes)

        if final_class == "":
            return self.remove_attribute("class")
        return self.set_attribute("class", final_class)
