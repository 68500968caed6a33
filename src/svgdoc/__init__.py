"""svgdoc - Fluent editing of the root element of SVG documents."""

__version__ = "0.1.0"

from .backend import (
    ElementTreeBackend,
    ParsedXml,
    XmlBackend,
)
from .document import (
    InvalidDocumentError,
    SvgDocument,
)
from .edit import (
    AttributeChange,
    EditRule,
    apply_edit_rule,
    parse_edit_rule,
    parse_edit_rule_file,
)

__all__ = [
    # Document
    "InvalidDocumentError",
    "SvgDocument",
    # Backend
    "ElementTreeBackend",
    "ParsedXml",
    "XmlBackend",
    # Edit rules
    "AttributeChange",
    "EditRule",
    "apply_edit_rule",
    "parse_edit_rule",
    "parse_edit_rule_file",
]
