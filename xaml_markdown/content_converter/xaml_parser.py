"""Sanitizing and parsing of rich-text (XAML) markup into DocumentNode trees.

The markup is a constrained WPF flow-document dialect. Namespaces carry no
meaning for conversion, so prologs, namespace declarations and prefixes are
removed before parsing. Parsing is strict: malformed markup raises ParseError
and the caller decides how to degrade.
"""

import html
import logging
import re
from typing import List, Union

from lxml import etree

from xaml_markdown.models.document_node import DocumentNode
from .errors import ParseError
from .unicode_cleaner import UnicodeCleaner

logger = logging.getLogger(__name__)

ROOT_TAG = 'Root'

XML_PROLOG_PATTERN = re.compile(r'<\?xml[^>]*\?>', re.IGNORECASE)
NAMESPACE_DECLARATION_PATTERN = re.compile(
    r'\s*\bxmlns(?::[\w.-]+)?\s*=\s*(?:"[^"]*"|\'[^\']*\')',
    re.IGNORECASE
)
MARKUP_TAG_PATTERN = re.compile(r'<(?:[^<>"\']|"[^"]*"|\'[^\']*\')+>')
QUOTED_VALUE_PATTERN = re.compile(r'("[^"]*"|\'[^\']*\')')
NAME_PREFIX_PATTERN = re.compile(r'(?<=[<\s/])[A-Za-z_][\w.-]*:(?=[A-Za-z_])')

RICH_TEXT_PATTERNS = [
    re.compile(r'<\s*Paragraph\b', re.IGNORECASE),
    re.compile(r'<\s*Run\b', re.IGNORECASE),
    re.compile(r'<\s*Span\b', re.IGNORECASE),
    re.compile(r'<\s*Section\b', re.IGNORECASE),
    re.compile(r'\bText\s*=\s*"[^"]*"', re.IGNORECASE),
]

TEXT_ATTRIBUTE_PATTERN = re.compile(r'\bText\s*=\s*"([^"]*)"')
HEADING_LINE_PATTERN = re.compile(r'^(#{1,6} .+)$', re.MULTILINE)
INLINE_LIST_MARKER_PATTERN = re.compile(r'(?<=\S)[ \t]+(?=(?:\d+\.|[*-]) \S)')


def sanitize_xaml(xaml: str) -> str:
    """Remove XML prologs, namespace declarations and name prefixes.

    Attribute values are never modified; only element and attribute names
    lose their prefixes (e.g. ``x:Name`` becomes ``Name``).

    Args:
        xaml: Raw markup

    Returns:
        Sanitized markup, trimmed
    """
    cleaned = XML_PROLOG_PATTERN.sub('', xaml)
    cleaned = MARKUP_TAG_PATTERN.sub(_strip_tag_prefixes, cleaned)
    return cleaned.strip()


def _strip_tag_prefixes(match: re.Match) -> str:
    tag = match.group(0)
    if tag.startswith('<!') or tag.startswith('<?'):
        return tag

    tag = NAMESPACE_DECLARATION_PATTERN.sub('', tag)

    # Odd segments are quoted attribute values and stay untouched
    segments = QUOTED_VALUE_PATTERN.split(tag)
    for index in range(0, len(segments), 2):
        segments[index] = NAME_PREFIX_PATTERN.sub('', segments[index])
    return ''.join(segments)


def parse_xaml(xaml: str) -> DocumentNode:
    """Parse markup into an order-preserving tree under a synthetic root.

    The input may hold several top-level siblings; they become children of a
    ``Root`` node. Attribute values stay strings. Whitespace-only text between
    elements is dropped.

    Args:
        xaml: Raw or sanitized markup

    Returns:
        DocumentNode tagged ``Root``

    Raises:
        ParseError: If the markup is not well-formed
    """
    sanitized = sanitize_xaml(xaml)
    wrapped = f'<{ROOT_TAG}>{sanitized}</{ROOT_TAG}>'

    parser = etree.XMLParser(
        recover=False,
        remove_comments=True,
        remove_pis=True,
        resolve_entities=False,
        no_network=True,
    )
    try:
        element = etree.fromstring(wrapped.encode('utf-8'), parser)
    except etree.XMLSyntaxError as e:
        logger.debug(f"Markup parse failed: {e}")
        raise ParseError(f"Malformed rich-text markup: {e.msg}", line=e.lineno) from e

    return _to_document_node(element)


def _to_document_node(element: etree._Element) -> DocumentNode:
    tag = etree.QName(element).localname
    attributes = {
        etree.QName(name).localname: value
        for name, value in element.attrib.items()
    }

    children: List[Union[DocumentNode, str]] = []
    _append_text(children, element.text)
    for child in element:
        if isinstance(child.tag, str):
            children.append(_to_document_node(child))
        _append_text(children, child.tail)

    return DocumentNode(tag, attributes, children)


def _append_text(children: List[Union[DocumentNode, str]], text) -> None:
    if text and text.strip():
        children.append(text)


def decode_text(text: str) -> str:
    """Decode residual HTML entities and strip invisible characters.

    Note text is frequently entity-encoded twice; the parser resolves the
    first layer and this resolves the rest.
    """
    if not text:
        return ''
    return UnicodeCleaner.clean(html.unescape(text))


def looks_like_rich_text(content: str) -> bool:
    """Return True if content appears to contain rich-text markup."""
    if not content or not content.strip():
        return False
    return any(pattern.search(content) for pattern in RICH_TEXT_PATTERNS)


def extract_plain_text(xaml: str) -> str:
    """Recover readable text from markup that could not be parsed.

    Every ``Text="..."`` attribute value is decoded and joined with newlines.
    Heading lines are separated by blank lines and list markers that ended up
    mid-line are moved onto their own line.

    Args:
        xaml: Raw markup, possibly malformed

    Returns:
        Plain text, trimmed
    """
    texts = [decode_text(value).strip() for value in TEXT_ATTRIBUTE_PATTERN.findall(xaml)]
    result = '\n'.join(text for text in texts if text)

    result = HEADING_LINE_PATTERN.sub(r'\n\n\1\n\n', result)
    result = INLINE_LIST_MARKER_PATTERN.sub('\n', result)
    result = re.sub(r'\n{3,}', '\n\n', result)

    return result.strip()
