"""Order-preserving document tree for rich-text (XAML) markup.

DocumentNode is the single tree shape consumed by every conversion stage.
The parser owns the tree; downstream stages only read it.

Two historical dict encodings are accepted at the boundary and normalized
into DocumentNode instances:

    Marker-key encoding (order preserving):
        {"Paragraph": [{"Run": [], ":@": {"@_Text": "hi"}}], ":@": {"@_FontSize": "24"}}

    Inline encoding (legacy object output):
        {"Paragraph": {"@_FontSize": "24", "Run": {"@_Text": "hi"}}}
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Union

ATTRIBUTE_MARKER_KEY = ':@'
INLINE_ATTRIBUTE_PREFIX = '@_'
TEXT_KEY = '#text'


@dataclass
class DocumentNode:
    """A tagged node with ordered attributes and ordered children.

    Attributes:
        tag: Local tag name as it appeared in the markup (e.g. "Paragraph")
        attributes: Attribute name to raw string value, in document order
        children: Child nodes and raw text runs, in document order

    Example:
        >>> node = DocumentNode('Run', {'Text': 'hello', 'FontBold': 'True'})
        >>> node.kind
        'run'
    """
    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List[Union['DocumentNode', str]] = field(default_factory=list)

    @property
    def kind(self) -> str:
        """Lower-cased tag name used for dispatch."""
        return self.tag.lower()

    def get(self, name: str, default: str = '') -> str:
        """Return a raw attribute value without coercion."""
        return self.attributes.get(name, default)

    def has(self, name: str) -> bool:
        return name in self.attributes

    def element_children(self) -> List['DocumentNode']:
        """Return child nodes, skipping raw text runs."""
        return [child for child in self.children if isinstance(child, DocumentNode)]

    def iter_descendants(self, kind: str) -> Iterator['DocumentNode']:
        """Yield every descendant of the given kind in document order."""
        for child in self.element_children():
            if child.kind == kind:
                yield child
            yield from child.iter_descendants(kind)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'DocumentNode':
        """Build a node from either legacy dict encoding.

        Args:
            data: Single-tag mapping in marker-key or inline encoding

        Returns:
            Equivalent DocumentNode

        Raises:
            ValueError: If the mapping does not name exactly one tag
        """
        tag_keys = [key for key in data if not _is_reserved_key(key)]
        if len(tag_keys) != 1:
            raise ValueError(
                f"Expected exactly one tag key, got {len(tag_keys)}: {tag_keys}"
            )

        tag = tag_keys[0]
        body = data[tag]
        attributes = get_attributes(data)
        children: List[Union[DocumentNode, str]] = []

        if isinstance(body, list):
            for item in body:
                children.extend(_children_from_item(item))
        elif isinstance(body, Mapping):
            attributes.update(get_attributes(body))
            for key, value in body.items():
                if key == TEXT_KEY:
                    children.append(str(value))
                elif _is_reserved_key(key):
                    continue
                else:
                    values = value if isinstance(value, list) else [value]
                    for item in values:
                        if isinstance(item, Mapping):
                            children.append(cls.from_mapping({key: item}))
                        elif item is None or item == '':
                            children.append(cls(key))
                        else:
                            children.append(cls(key, children=[str(item)]))
        elif body is not None and body != '':
            children.append(str(body))

        return cls(tag, attributes, children)


def get_attributes(element: Union[DocumentNode, Mapping[str, Any]]) -> Dict[str, str]:
    """Return un-prefixed attributes regardless of storage encoding.

    Args:
        element: DocumentNode, marker-key mapping, or inline-attribute mapping

    Returns:
        New dict of attribute name to string value
    """
    if isinstance(element, DocumentNode):
        return dict(element.attributes)

    if not isinstance(element, Mapping):
        return {}

    marker = element.get(ATTRIBUTE_MARKER_KEY)
    source = marker if isinstance(marker, Mapping) else element

    attributes = {}
    for key, value in source.items():
        if key.startswith(INLINE_ATTRIBUTE_PREFIX):
            attributes[key[len(INLINE_ATTRIBUTE_PREFIX):]] = str(value)
        elif source is marker:
            attributes[key] = str(value)
    return attributes


def _is_reserved_key(key: str) -> bool:
    return (
        key == ATTRIBUTE_MARKER_KEY
        or key == TEXT_KEY
        or key.startswith(INLINE_ATTRIBUTE_PREFIX)
    )


def _children_from_item(item: Any) -> List[Union[DocumentNode, str]]:
    if isinstance(item, str):
        return [item]
    if isinstance(item, Mapping):
        if set(item) == {TEXT_KEY}:
            return [str(item[TEXT_KEY])]
        return [DocumentNode.from_mapping(item)]
    return [str(item)]
