"""Generic XML tree and text extraction.

Feed producers encode the same logical field in structurally different
ways: plain text, CDATA, attribute-only elements, repeated elements. The
tree below keeps those shapes as-is and `extract_text` is the one place
that collapses them back to a string.
"""

import xml.etree.ElementTree as ET
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from ..errors import ParseError

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"
TEXT_KEYS = ("text", "value", "content")
MAX_DEPTH = 256


class XmlNode:
    """Element with attributes, own text and named children.

    Elements without attributes and without child elements are stored as
    plain strings instead, so a field value is either `str`, `XmlNode` or a
    list of those when the element repeats.
    """

    __slots__ = ("tag", "attributes", "text", "children")

    def __init__(
        self,
        tag: str,
        attributes: Optional[Dict[str, str]] = None,
        text: str = "",
        children: Optional[Dict[str, List["Value"]]] = None,
    ) -> None:
        self.tag = tag
        self.attributes: Dict[str, str] = dict(attributes or {})
        self.text = text
        self.children: Dict[str, List[Value]] = children if children is not None else {}

    def add(self, name: str, value: "Value") -> None:
        self.children.setdefault(name, []).append(value)

    def get(self, name: str, default: Any = None) -> Any:
        """Return the child value, a list when it repeats, or `default`."""
        values = self.children.get(name)
        if not values:
            return default
        if len(values) == 1:
            return values[0]
        return list(values)

    def first(self, name: str) -> Optional["Value"]:
        values = self.children.get(name)
        return values[0] if values else None

    def all(self, name: str) -> List["Value"]:
        return list(self.children.get(name, []))

    def fields(self) -> Iterator[Tuple[str, Any]]:
        """Attributes (prefixed with @) then children, in declaration order."""
        for name, value in self.attributes.items():
            yield f"@{name}", value
        for name in self.children:
            yield name, self.get(name)

    def __repr__(self) -> str:
        return f"XmlNode({self.tag!r}, attributes={self.attributes!r}, text={self.text!r}, children={list(self.children)!r})"


Value = Union[str, XmlNode]


def as_node(value: Any, tag: str) -> XmlNode:
    """Wrap a bare string element so callers can always read children."""
    if isinstance(value, XmlNode):
        return value
    if isinstance(value, str):
        return XmlNode(tag, text=value)
    return XmlNode(tag)


def extract_text(value: Any) -> str:
    """Collapse any field shape to its text content.

    Strings pass through, numbers are stringified, lists are joined with
    single spaces. For structured values the own text wins, then a
    `text`/`value`/`content` child, then a sole string field, then the first
    non-blank string field in declaration order.
    """
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return " ".join(extract_text(v) for v in value).strip()
    if isinstance(value, XmlNode):
        if value.text:
            return value.text
        fields = list(value.fields())
    elif isinstance(value, Mapping):
        own = value.get("#text")
        if own:
            return extract_text(own)
        fields = list(value.items())
    else:
        return ""

    for key in TEXT_KEYS:
        for name, field in fields:
            if name == key:
                text = extract_text(field)
                if text:
                    return text

    if len(fields) == 1 and isinstance(fields[0][1], str):
        return fields[0][1]
    for _, field in fields:
        if isinstance(field, str) and field.strip():
            return field
    return ""


def parse_xml(raw: Union[str, bytes]) -> XmlNode:
    """Parse an XML document into an `XmlNode` tree.

    Namespaced names are rewritten to the prefix the document declared for
    them (``content:encoded``); the default namespace maps to bare names.
    Documents nesting deeper than `MAX_DEPTH` elements are rejected.
    """
    if isinstance(raw, bytes):
        data: Union[str, bytes] = raw.lstrip(b" \t\r\n")
    else:
        data = (raw or "").lstrip()
    if not data:
        raise ParseError("Empty feed document")

    parser = ET.XMLPullParser(events=("start-ns", "end"))
    prefixes: Dict[str, str] = {XML_NAMESPACE: "xml"}
    root: Optional[ET.Element] = None
    try:
        parser.feed(data)
        parser.close()
    except ET.ParseError as e:
        raise ParseError(f"Malformed XML: {e}") from e

    for event, payload in parser.read_events():
        if event == "start-ns":
            prefix, uri = payload
            prefixes.setdefault(uri, prefix)
        elif event == "end":
            root = payload
    if root is None:
        raise ParseError("Document has no root element")

    def qualify(name: str) -> str:
        if not name.startswith("{"):
            return name
        uri, _, local = name[1:].partition("}")
        prefix = prefixes.get(uri)
        return f"{prefix}:{local}" if prefix else local

    return as_node(_convert(root, qualify), qualify(root.tag))


def _own_text(elem: ET.Element) -> str:
    parts = [elem.text or ""]
    parts.extend(child.tail or "" for child in elem)
    return "".join(parts).strip()


def _convert(root: ET.Element, qualify) -> Value:
    """Convert an element tree without recursion, children before parents."""
    converted: Dict[int, Value] = {}
    stack: List[Tuple[ET.Element, int, bool]] = [(root, 1, False)]
    while stack:
        elem, depth, expanded = stack.pop()
        if depth > MAX_DEPTH:
            raise ParseError(f"Document nests deeper than {MAX_DEPTH} elements")

        tag = qualify(elem.tag)
        attributes = {qualify(k): v for k, v in elem.attrib.items()}

        # Inline XHTML content: keep the readable text, not the markup tree
        if attributes.get("type") == "xhtml":
            text = " ".join("".join(elem.itertext()).split())
            converted[id(elem)] = XmlNode(tag, attributes, text)
            continue

        children = list(elem)
        if not expanded:
            stack.append((elem, depth, True))
            stack.extend((child, depth + 1, False) for child in reversed(children))
            continue

        text = _own_text(elem)
        if not attributes and not children:
            converted[id(elem)] = text
            continue

        node = XmlNode(tag, attributes, text)
        for child in children:
            node.add(qualify(child.tag), converted.pop(id(child)))
        converted[id(elem)] = node
    return converted[id(root)]
