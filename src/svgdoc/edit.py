"""Declarative edits of the root svg element, loaded from YAML rules.

A rule file is a YAML mapping whose keys name the edits to apply::

    id: logo
    size: {width: 150, height: 150}
    viewbox: [0, 0, 100, 50]
    add_classes: [icon, icon-large]
    stroke_attributes: {width: "2", linecap: round}
    dataset: {role: decoration}
    remove_attributes: [style]

Edits are applied in a fixed order, see ``apply_edit_rule``.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .document import SvgDocument

logger = logging.getLogger(__name__)

STRING_KEYS = ("id", "name", "class", "fill", "stroke")
LIST_KEYS = ("add_classes", "remove_classes", "remove_attributes")
MAPPING_KEYS = ("attributes", "stroke_attributes", "dataset")
RULE_KEYS = frozenset(STRING_KEYS + LIST_KEYS + MAPPING_KEYS + ("size", "viewbox"))


@dataclass
class EditRule:
    """Edits to apply to the svg element. Unset fields are skipped."""

    attributes: dict[str, str] = field(default_factory=dict)
    id: str | None = None
    name: str | None = None
    width: int | None = None
    height: int | None = None
    viewbox: tuple[int, int, int, int] | None = None
    class_: str | None = None
    add_classes: list[str] = field(default_factory=list)
    remove_classes: list[str] = field(default_factory=list)
    fill: str | None = None
    stroke: str | None = None
    stroke_attributes: dict[str, str] = field(default_factory=dict)
    dataset: dict[str, str] = field(default_factory=dict)
    remove_attributes: list[str] = field(default_factory=list)


@dataclass
class AttributeChange:
    """Record of an attribute change. None means the attribute is absent."""

    name: str
    old_value: str | None
    new_value: str | None


def _to_int(value, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"'{key}' values must be integers, got {value!r}") from e


def parse_edit_rule(data: dict) -> EditRule:
    """Parse an edit rule from YAML data.

    Args:
        data: Rule dictionary.

    Returns:
        Parsed EditRule.

    Raises:
        ValueError: If the format is invalid.
    """
    if not isinstance(data, dict):
        raise ValueError("Rule file must be a YAML dictionary")

    unknown = sorted(str(key) for key in data if key not in RULE_KEYS)
    if unknown:
        raise ValueError(f"Unknown rule keys: {', '.join(unknown)}")

    rule = EditRule()

    for key in STRING_KEYS:
        if key in data:
            setattr(rule, "class_" if key == "class" else key, str(data[key]))

    for key in LIST_KEYS:
        if key in data:
            if not isinstance(data[key], list):
                raise ValueError(f"'{key}' must be a list")
            setattr(rule, key, [str(item) for item in data[key]])

    for key in MAPPING_KEYS:
        if key in data:
            if not isinstance(data[key], dict):
                raise ValueError(f"'{key}' must be a mapping")
            setattr(rule, key, {str(k): str(v) for k, v in data[key].items()})

    if "size" in data:
        size_data = data["size"]
        if not isinstance(size_data, dict):
            raise ValueError("'size' must be a mapping with width and/or height")
        if "width" in size_data:
            rule.width = _to_int(size_data["width"], "size")
        if "height" in size_data:
            rule.height = _to_int(size_data["height"], "size")

    if "viewbox" in data:
        values = data["viewbox"]
        if not isinstance(values, list) or len(values) != 4:
            raise ValueError("'viewbox' must be a list of 4 integers")
        minx, miny, width, height = (_to_int(v, "viewbox") for v in values)
        rule.viewbox = (minx, miny, width, height)

    return rule


def parse_edit_rule_file(rule_path: Path) -> EditRule:
    """Parse a YAML rule file.

    Args:
        rule_path: Path to the YAML rule file.

    Returns:
        Parsed EditRule.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
        ValueError: If the rule format is invalid.
    """
    with open(rule_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return parse_edit_rule(data)


def apply_edit_rule(document: SvgDocument, rule: EditRule) -> list[AttributeChange]:
    """Apply an edit rule to a document.

    Order: raw attributes, id, name, width, height, viewBox, class,
    added classes, removed classes, fill, stroke, stroke attributes,
    dataset, removed attributes.

    Args:
        document: Document to modify in place.
        rule: Edits to apply.

    Returns:
        Changed and added attributes in document order, then removed ones.
    """
    before = document.attributes

    for attribute, value in rule.attributes.items():
        document.set_attribute(attribute, value)

    if rule.id is not None:
        document.set_id(rule.id)
    if rule.name is not None:
        document.set_name(rule.name)
    if rule.width is not None:
        document.set_width(rule.width)
    if rule.height is not None:
        document.set_height(rule.height)
    if rule.viewbox is not None:
        document.set_viewbox(*rule.viewbox)

    if rule.class_ is not None:
        document.set_class(rule.class_)
    for class_ in rule.add_classes:
        document.add_to_classlist(class_)
    for class_ in rule.remove_classes:
        document.remove_from_classlist(class_)

    if rule.fill is not None:
        document.set_fill(rule.fill)
    if rule.stroke is not None:
        document.set_stroke(rule.stroke)
    for key, value in rule.stroke_attributes.items():
        document.set_stroke_attribute(key, value)
    for key, value in rule.dataset.items():
        document.set_dataset(key, value)

    for attribute in rule.remove_attributes:
        document.remove_attribute(attribute)

    after = document.attributes
    changes = [
        AttributeChange(name, before.get(name), value)
        for name, value in after.items()
        if before.get(name) != value
    ]
    changes.extend(
        AttributeChange(name, value, None)
        for name, value in before.items()
        if name not in after
    )
    logger.debug("Applied edit rule, %d attribute(s) changed", len(changes))
    return changes
