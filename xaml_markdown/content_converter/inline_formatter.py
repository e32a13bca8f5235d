"""Inline style resolution for runs, spans and paragraph indentation.

Font attributes on a run (and, for some attributes, on its enclosing
paragraph) are turned into nested Markdown/HTML decorations. The wrap order is
fixed so overlapping styles always nest the same way:

    sub/superscript (innermost) -> small caps -> ~~ -> <u> -> * -> ** -> == (outermost)

Monospace text and small text short-circuit: they never receive any other
decoration.
"""

import re
from typing import Optional, Tuple, Union

from xaml_markdown.models.conversion_options import ConversionOptions
from xaml_markdown.models.document_node import DocumentNode

MONOSPACE_FONTS = [
    'courier new',
    'courier',
    'andale mono',
    'monaco',
    'consolas',
    'lucida console',
    'sf mono',
    'menlo',
    'cascadia code',
]

# (minimum font size, heading level), checked top-down
HEADING_BANDS = [
    (23, 1),
    (21, 2),
    (19, 3),
    (17, 4),
    (15, 5),
    (13, 6),
]

SMALL_TEXT_MAX_SIZE = 9
INDENT_UNIT = 36
MAX_INDENT_LEVEL = 6
NBSP_INDENT = '&nbsp;    '

BOLD_WEIGHTS = {'bold', 'semibold', 'demibold', 'extrabold', 'ultrabold', 'black', 'heavy'}
ITALIC_STYLES = {'italic', 'oblique'}

MARKDOWN_LINK_PATTERNS = [
    re.compile(r'!?\[[^\]]*\]\([^)]+\)'),
    re.compile(r'!?\[[^\]]*\]\[[^\]]*\]'),
]

LEADING_TABS_PATTERN = re.compile(r'^(\t+)', re.MULTILINE)

Attributed = Optional[DocumentNode]


def has_markdown_link_syntax(text: str) -> bool:
    """Return True if text contains a Markdown link or image reference."""
    return any(pattern.search(text) for pattern in MARKDOWN_LINK_PATTERNS)


def parse_font_size(value: Optional[str]) -> Optional[float]:
    """Parse a font size attribute, returning None when absent or invalid."""
    if value is None or not str(value).strip():
        return None
    try:
        return float(value)
    except ValueError:
        return None


def heading_level(font_size: Union[float, str, None]) -> int:
    """Map a font size to a heading level (1-6), or 0 for body text.

    Example:
        >>> heading_level(24)
        1
        >>> heading_level('14')
        6
        >>> heading_level(12)
        0
    """
    if isinstance(font_size, str):
        font_size = parse_font_size(font_size)
    if font_size is None:
        return 0

    for minimum, level in HEADING_BANDS:
        if font_size >= minimum:
            return level
    return 0


def parse_indent_level(margin: Optional[str]) -> int:
    """Derive an indent level from a ``left,top,right,bottom`` margin.

    Each level is 36 units of left margin, rounded and capped at 6.
    """
    if not margin:
        return 0

    parts = [part.strip() for part in margin.split(',')]
    if len(parts) != 4:
        return 0
    try:
        left = float(parts[0])
    except ValueError:
        return 0
    if left <= 0:
        return 0

    # Halves round up
    level = int(left / INDENT_UNIT + 0.5)
    return min(level, MAX_INDENT_LEVEL)


def split_surrounding_whitespace(text: str) -> Tuple[str, str, str]:
    """Split text into (leading whitespace, core, trailing whitespace)."""
    without_leading = text.lstrip()
    leading = text[:len(text) - len(without_leading)]
    core = without_leading.rstrip()
    return leading, core, without_leading[len(core):]


class InlineFormatter:
    """Applies font-driven decorations and indent encoding.

    Attributes:
        options: Conversion options in effect for the current note

    Example:
        >>> formatter = InlineFormatter(ConversionOptions())
        >>> run = DocumentNode('Run', {'FontBold': 'True', 'FontItalic': 'True'})
        >>> formatter.format_text('grace', run)
        '***grace***'
    """

    def __init__(self, options: ConversionOptions):
        self.options = options

    def is_monospace_font(self, font_family: Optional[str]) -> bool:
        if not font_family:
            return False
        family = font_family.lower()
        configured = self.options.monospace_font_name.lower()
        if configured and configured in family:
            return True
        return any(font in family for font in MONOSPACE_FONTS)

    def indent_prefix(self, level: int) -> str:
        """Return the indent encoding for the given level."""
        if level <= 0:
            return ''
        if self.options.convert_indents_to_quotes:
            return '>' * level + ' '
        return NBSP_INDENT * level

    def convert_leading_tabs(self, text: str) -> str:
        """Replace leading tab runs on each line with indent encoding.

        One level per tab, capped at 6. Tabs elsewhere are left alone.
        """
        if not text or '\t' not in text:
            return text
        return LEADING_TABS_PATTERN.sub(
            lambda match: self.indent_prefix(min(len(match.group(1)), MAX_INDENT_LEVEL)),
            text
        )

    def paragraph_heading_level(self, paragraph: DocumentNode) -> int:
        """Heading level of a paragraph using first-run dominance.

        The paragraph's own FontSize is checked first. When it is absent or
        not a heading size, only the first run's FontSize is consulted.
        """
        if self.options.disable_heading_sizes:
            return 0

        level = heading_level(paragraph.get('FontSize', None))
        if level > 0:
            return level

        first_run = next(paragraph.iter_descendants('run'), None)
        if first_run is None:
            return 0
        return heading_level(first_run.get('FontSize', None))

    def effective_font_family(self, node: Attributed, paragraph: Attributed = None) -> str:
        """Run-level FontFamily, falling back to the paragraph's."""
        return self._inherited('FontFamily', node, paragraph)

    def format_text(self, text: str, node: Attributed = None, paragraph: Attributed = None) -> str:
        """Decorate text according to its node's and paragraph's attributes.

        Args:
            text: Decoded text of the run or span
            node: Run/Span carrying the style attributes
            paragraph: Enclosing paragraph for inherited attributes

        Returns:
            Decorated text with its surrounding whitespace preserved
        """
        if not text:
            return ''

        leading, core, trailing = split_surrounding_whitespace(text)
        if not core:
            return text

        if self.is_monospace_font(self.effective_font_family(node, paragraph)):
            formatted = code_span(core)
        elif has_markdown_link_syntax(core):
            formatted = core
        elif self._is_small_text(node, paragraph):
            formatted = f'<small>{core}</small>'
        else:
            formatted = self._apply_styles(core, node, paragraph)

        return leading + formatted + trailing

    def _is_small_text(self, node: Attributed, paragraph: Attributed) -> bool:
        size = parse_font_size(self._inherited('FontSize', node, paragraph) or None)
        return size is not None and size <= SMALL_TEXT_MAX_SIZE

    def _apply_styles(self, text: str, node: Attributed, paragraph: Attributed) -> str:
        attributes = node.attributes if node is not None else {}

        variant = self._font_variant(attributes, paragraph)
        if variant == 'subscript':
            text = f'<sub>{text}</sub>' if self.options.html_sub_superscript else f'~{text}~'
        elif variant == 'superscript':
            text = f'<sup>{text}</sup>' if self.options.html_sub_superscript else f'^{text}^'

        if attributes.get('FontCapitals', '').lower() == 'smallcaps':
            text = text.upper()

        if _is_true(attributes.get('HasStrikethrough')):
            text = f'~~{text}~~'

        if _is_true(attributes.get('HasUnderline')):
            text = f'<u>{text}</u>'

        if _is_true(attributes.get('FontItalic')) or attributes.get('FontStyle', '').lower() in ITALIC_STYLES:
            text = f'*{text}*'

        if _is_true(attributes.get('FontBold')) or attributes.get('FontWeight', '').lower() in BOLD_WEIGHTS:
            text = f'**{text}**'

        if attributes.get('BackgroundColor', '').strip():
            text = f'=={text}=='

        return text

    def _font_variant(self, attributes: dict, paragraph: Attributed) -> str:
        variant = attributes.get('FontVariant', '')
        if not variant and paragraph is not None:
            inherited = paragraph.get('FontVariant')
            if inherited and inherited.lower() != 'normal':
                variant = inherited
        return variant.lower()

    @staticmethod
    def _inherited(name: str, node: Attributed, paragraph: Attributed) -> str:
        if node is not None and node.get(name):
            return node.get(name)
        if paragraph is not None:
            return paragraph.get(name)
        return ''


def code_span(text: str) -> str:
    """Wrap text in a backtick code span long enough to hold its backticks."""
    longest = max((len(run) for run in re.findall(r'`+', text)), default=0)
    fence = '`' * (longest + 1)
    if longest:
        return f'{fence} {text} {fence}'
    return f'{fence}{text}{fence}'


def _is_true(value: Optional[str]) -> bool:
    return bool(value) and value.strip().lower() == 'true'
