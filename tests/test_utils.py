"""Tests for svgdoc.utils module."""

import pytest
from pathlib import Path
from xml.etree import ElementTree as ET

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from svgdoc.utils import (
    SVG_NAMESPACES,
    XML_NAMESPACE,
    XML_HEADER,
    XmlDeclaration,
    find_svg_element,
    get_local_name,
    parse_xml_declaration,
    prefixed_name,
    qualify_name,
    registered_namespaces,
    strip_xml_header,
)


class TestGetLocalName:
    """Tests for get_local_name function."""

    def test_with_namespace(self):
        assert get_local_name("{http://www.w3.org/2000/svg}svg") == "svg"

    def test_without_namespace(self):
        assert get_local_name("svg") == "svg"

    def test_empty_namespace(self):
        assert get_local_name("{}rect") == "rect"


class TestFindSvgElement:
    """Tests for find_svg_element function."""

    def test_root_is_svg(self):
        root = ET.fromstring(f'<svg xmlns="{SVG_NAMESPACES["svg"]}"/>')
        assert find_svg_element(root) is root

    def test_unnamespaced_svg(self):
        root = ET.fromstring("<svg/>")
        assert find_svg_element(root) is root

    def test_prefixed_svg(self):
        root = ET.fromstring(f'<s:svg xmlns:s="{SVG_NAMESPACES["svg"]}"/>')
        assert find_svg_element(root) is root

    def test_nested_svg_found(self):
        root = ET.fromstring('<html><body><svg id="inner"/></body></html>')
        found = find_svg_element(root)
        assert found is not None
        assert found.get("id") == "inner"

    def test_first_in_document_order(self):
        root = ET.fromstring('<svg id="outer"><svg id="inner"/></svg>')
        assert find_svg_element(root).get("id") == "outer"

    def test_no_svg(self):
        root = ET.fromstring("<html><body/></html>")
        assert find_svg_element(root) is None

    def test_skips_comments(self):
        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
        parser.feed("<root><!-- svg --><svg/></root>")
        root = parser.close()
        assert get_local_name(find_svg_element(root).tag) == "svg"

    def test_svgs_is_not_svg(self):
        root = ET.fromstring("<svgs/>")
        assert find_svg_element(root) is None


class TestXmlDeclaration:
    """Tests for XmlDeclaration and parse_xml_declaration."""

    def test_default_to_string(self):
        assert XmlDeclaration().to_string() == '<?xml version="1.0"?>'

    def test_full_to_string(self):
        decl = XmlDeclaration(version="1.0", encoding="UTF-8", standalone="no")
        assert (
            decl.to_string()
            == '<?xml version="1.0" encoding="UTF-8" standalone="no"?>'
        )

    def test_parse_none(self):
        assert parse_xml_declaration("<svg/>") is None

    def test_parse_version_only(self):
        decl = parse_xml_declaration('<?xml version="1.0"?>\n<svg/>')
        assert decl == XmlDeclaration(version="1.0")

    def test_parse_single_quotes(self):
        decl = parse_xml_declaration("<?xml version='1.1' encoding='utf-8'?><svg/>")
        assert decl.version == "1.1"
        assert decl.encoding == "utf-8"
        assert decl.standalone is None

    def test_parse_standalone(self):
        decl = parse_xml_declaration(
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?><svg/>'
        )
        assert decl.standalone == "yes"

    def test_other_processing_instruction_ignored(self):
        markup = '<?xml-stylesheet href="a.css"?><svg/>'
        assert parse_xml_declaration(markup) is None


class TestStripXmlHeader:
    """Tests for strip_xml_header function."""

    def test_strips_exact_header(self):
        assert strip_xml_header(XML_HEADER + "<svg/>") == "<svg/>"

    def test_keeps_header_with_encoding(self):
        text = '<?xml version="1.0" encoding="UTF-8"?>\n<svg/>'
        assert strip_xml_header(text) == text

    def test_keeps_single_quoted_header(self):
        text = "<?xml version='1.0'?>\n<svg/>"
        assert strip_xml_header(text) == text

    def test_keeps_header_without_newline(self):
        text = '<?xml version="1.0"?><svg/>'
        assert strip_xml_header(text) == text

    def test_only_leading_header_removed(self):
        text = "<svg/>\n" + XML_HEADER
        assert strip_xml_header(text) == text

    @pytest.mark.parametrize("text", ["", "<svg/>", "\n"])
    def test_no_header(self, text):
        assert strip_xml_header(text) == text


class TestQualifyName:
    """Tests for qualify_name and prefixed_name functions."""

    NAMESPACES = [("", SVG_NAMESPACES["svg"]), ("ink", "urn:example:ink")]

    def test_unprefixed(self):
        assert qualify_name("viewBox", self.NAMESPACES) == "viewBox"

    def test_declared_prefix(self):
        assert qualify_name("ink:label", self.NAMESPACES) == "{urn:example:ink}label"

    def test_xml_prefix(self):
        assert qualify_name("xml:lang", []) == f"{{{XML_NAMESPACE}}}lang"

    def test_well_known_prefix(self):
        assert (
            qualify_name("sodipodi:docname", [])
            == f"{{{SVG_NAMESPACES['sodipodi']}}}docname"
        )

    def test_declared_prefix_wins_over_well_known(self):
        namespaces = [("inkscape", "urn:example:custom")]
        assert qualify_name("inkscape:label", namespaces) == "{urn:example:custom}label"

    @pytest.mark.parametrize("name", ["unknown:attr", "svg:width", "xmlns:a", ":x", "a:"])
    def test_left_unchanged(self, name):
        assert qualify_name(name, self.NAMESPACES) == name

    def test_prefixed_name_declared(self):
        assert prefixed_name("{urn:example:ink}label", self.NAMESPACES) == "ink:label"

    def test_prefixed_name_xml(self):
        assert prefixed_name(f"{{{XML_NAMESPACE}}}space", []) == "xml:space"

    def test_prefixed_name_well_known(self):
        key = f"{{{SVG_NAMESPACES['xlink']}}}href"
        assert prefixed_name(key, []) == "xlink:href"

    def test_prefixed_name_unknown_uri(self):
        assert prefixed_name("{urn:example:x}a", []) == "{urn:example:x}a"

    def test_prefixed_name_plain(self):
        assert prefixed_name("width", self.NAMESPACES) == "width"


class TestRegisteredNamespaces:
    """Tests for registered_namespaces context manager."""

    def test_prefixes_active_inside_block(self):
        elem = ET.Element("{urn:example:ink}label")
        with registered_namespaces([("ink", "urn:example:ink")]):
            assert ET.tostring(elem, encoding="unicode").startswith("<ink:label")

    def test_registry_restored_on_exit(self):
        before = dict(ET._namespace_map)
        with registered_namespaces([("", "urn:example:d"), ("p", "urn:example:p")]):
            pass
        assert dict(ET._namespace_map) == before

    def test_registry_restored_on_error(self):
        before = dict(ET._namespace_map)
        with pytest.raises(RuntimeError):
            with registered_namespaces([("p", "urn:example:p")]):
                raise RuntimeError("boom")
        assert dict(ET._namespace_map) == before
