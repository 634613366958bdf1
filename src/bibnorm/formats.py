"""JSON and XML output of parsed BibTeX."""

import json
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from typing import Any

from .biblib import text
from .model import Entry, Item, Preamble


def to_records(items: Iterable[Item]) -> list[dict[str, Any]]:
    """Convert entries and preambles to plain data."""
    records: list[dict[str, Any]] = []
    for item in items:
        if isinstance(item, Entry):
            records.append(
                {
                    "type": item.entry_type,
                    "key": item.key,
                    "fields": [[field.name, text(field.value)] for field in item.fields],
                }
            )
        elif isinstance(item, Preamble):
            records.append({"type": "preamble", "value": text(item.value)})
    return records


def to_json(items: Iterable[Item], indent: int | None = 2) -> str:
    """Format entries and preambles as JSON."""
    return json.dumps(to_records(items), indent=indent, ensure_ascii=False)


def to_xml(items: Iterable[Item]) -> str:
    """Format entries and preambles as XML."""
    root = ET.Element("bibliography")
    for item in items:
        if isinstance(item, Entry):
            elem = ET.SubElement(root, "entry", type=item.entry_type, key=item.key)
            for field in item.fields:
                ET.SubElement(elem, "field", name=field.name).text = text(field.value)
        elif isinstance(item, Preamble):
            ET.SubElement(root, "preamble").text = text(item.value)
    ET.indent(root)
    return ET.tostring(root, encoding="unicode")
