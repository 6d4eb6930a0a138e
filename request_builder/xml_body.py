"""Dict-to-XML conversion for request bodies.

Converts the plain-data dump of a record into XML bytes so the builder can
attach XML entities. Element names are taken directly from dict keys.

Limitation: XML attributes and namespaces are not supported. Keys starting
with ``@`` are skipped; a ``#text`` key becomes the element's text.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any


def dict_to_xml(data: dict[str, Any]) -> bytes:
    """Convert a Python dict to compact XML bytes for use as an HTTP request body.

    The dict must have exactly one top-level key, which becomes the root
    element name.  Nested dicts become child elements.  Lists become
    repeated sibling elements with the same tag name.  ``None`` values are
    omitted.  Booleans become ``true``/``false``; other scalars use ``str()``.

    No XML declaration and no indentation are emitted.

    Args:
        data: Dict with exactly one top-level key (the root element name).

    Returns:
        UTF-8 encoded XML bytes.

    Raises:
        ValueError: If *data* does not have exactly one top-level key.
    """
    if not isinstance(data, dict) or len(data) != 1:
        raise ValueError(
            f"dict_to_xml expects a dict with exactly one top-level key "
            f"(the root element), got {type(data).__name__} with "
            f"{len(data) if isinstance(data, dict) else 'N/A'} keys"
        )

    root_tag = next(iter(data))
    root_element = _dict_to_element(root_tag, data[root_tag])
    return ET.tostring(root_element, encoding="utf-8", xml_declaration=False)


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _dict_to_element(tag: str, value: Any) -> ET.Element:
    """Recursively convert a tag + value pair into an XML Element.

    - dict → element with child sub-elements for each key
    - list → caller handles by creating repeated sibling elements
    - scalar → element with text content
    - None → empty element (only reachable for the root or list items)
    """
    element = ET.Element(tag)

    if value is None:
        pass
    elif isinstance(value, dict):
        for key, child_value in value.items():
            if key == "#text":
                element.text = _scalar_text(child_value)
                continue
            if key.startswith("@") or child_value is None:
                continue
            if isinstance(child_value, list):
                # List → repeated sibling elements with the same tag
                for item in child_value:
                    element.append(_dict_to_element(key, item))
            else:
                element.append(_dict_to_element(key, child_value))
    elif isinstance(value, list):
        for item in value:
            element.append(_dict_to_element("item", item))
    else:
        element.text = _scalar_text(value)

    return element
