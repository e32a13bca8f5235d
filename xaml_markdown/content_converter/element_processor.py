"""Recursive dispatch of DocumentNode trees to Markdown.

ElementProcessor walks the parsed tree and branches on tag identity. Sibling
sequences are walked left to right so that runs of consecutive monospaced
paragraphs can be coalesced into a single inline code span or fenced block.
Image references are not resolved here: each one is replaced by a unique
placeholder and recorded for the image pass that runs after the walk.
"""

import logging
import re
import uuid
from typing import Any, Callable, Dict, List, Mapping, Optional, Pattern, Sequence, Union

from xaml_markdown.image_client.image_processor import UNAVAILABLE_IMAGE
from xaml_markdown.models.conversion_options import ConversionOptions
from xaml_markdown.models.document_node import DocumentNode
from .inline_formatter import (
    InlineFormatter,
    code_span,
    has_markdown_link_syntax,
    parse_indent_level,
)
from .list_processor import ListProcessor
from .xaml_parser import decode_text

logger = logging.getLogger(__name__)

PLACEHOLDER_PREFIX = 'IMAGE_PLACEHOLDER'
EXISTING_LINK_PREFIXES = ('](', ']: ')

Node = Union[DocumentNode, str]


def placeholder_markdown(placeholder_id: str) -> str:
    return f'![{placeholder_id}]()'


class ElementProcessor:
    """Converts a parsed document tree to Markdown.

    Attributes:
        options: Conversion options for the current note
        formatter: Inline style resolver shared with list rendering
        pending_images: Placeholder id to image URI, in insertion order

    Example:
        >>> processor = ElementProcessor(ConversionOptions())
        >>> processor.convert(parse_xaml('<Paragraph><Run Text="hi"/></Paragraph>'))
        'hi  \\n'
    """

    def __init__(self, options: ConversionOptions):
        self.options = options
        self.formatter = InlineFormatter(options)
        self.lists = ListProcessor(self.render_siblings)
        self.pending_images: Dict[str, str] = {}
        self._placeholder_nonce = uuid.uuid4().hex[:8]

        self._handlers: Dict[str, Callable[[DocumentNode, Optional[DocumentNode]], str]] = {
            'section': self._process_section,
            'paragraph': self._process_paragraph,
            'run': self._process_run,
            'span': self._process_span,
            'list': self._process_list,
            'table': self._process_table,
            'hyperlink': self._process_hyperlink,
            'urilink': self._process_hyperlink,
            'urimedia': self._process_image_reference,
        }

    @property
    def placeholder_pattern(self) -> Pattern:
        """Pattern matching any placeholder this processor can emit."""
        return re.compile(
            r'!\[' + re.escape(f'{PLACEHOLDER_PREFIX}_{self._placeholder_nonce}_') + r'\d+\]\(\)'
        )

    def clear_pending_images(self) -> None:
        self.pending_images.clear()

    def convert(
        self,
        node: Union[Node, Mapping[str, Any], Sequence[Node], None],
        paragraph: Optional[DocumentNode] = None
    ) -> str:
        """Render a node, a text run, or a sequence of siblings.

        Args:
            node: DocumentNode, dict-encoded node, raw string, or list of
                siblings
            paragraph: Enclosing paragraph used for attribute inheritance

        Returns:
            Markdown fragment
        """
        if node is None:
            return ''
        if isinstance(node, str):
            return node
        if isinstance(node, Mapping):
            node = DocumentNode.from_mapping(node)
        if isinstance(node, (list, tuple)):
            nodes = [
                DocumentNode.from_mapping(item) if isinstance(item, Mapping) else item
                for item in node
            ]
            return self.render_siblings(nodes, paragraph)

        handler = self._handlers.get(node.kind)
        if handler is None:
            if node.kind != 'root':
                logger.debug(f"Unrecognized element <{node.tag}>, rendering children")
            return self.render_siblings(node.children, paragraph)
        return handler(node, paragraph)

    def render_siblings(
        self,
        nodes: Sequence[Node],
        paragraph: Optional[DocumentNode] = None
    ) -> str:
        """Render siblings left to right, coalescing monospaced paragraphs."""
        parts = []
        index = 0
        while index < len(nodes):
            if not self.is_code_paragraph(nodes[index]):
                parts.append(self.convert(nodes[index], paragraph))
                index += 1
                continue

            end = index
            while end < len(nodes) and self.is_code_paragraph(nodes[end]):
                end += 1
            parts.append(self._render_code_paragraphs(nodes[index:end]))
            index = end

        return ''.join(parts)

    def is_code_paragraph(self, node: Node) -> bool:
        """True for a paragraph whose runs all use a monospace font."""
        if not isinstance(node, DocumentNode) or node.kind != 'paragraph':
            return False

        runs = list(node.iter_descendants('run'))
        if not runs:
            return False
        return all(
            self.formatter.is_monospace_font(self.formatter.effective_font_family(run, node))
            for run in runs
        )

    def plain_text(self, node: Node) -> str:
        """Concatenated, decoded text of a node without any markup."""
        if isinstance(node, str):
            return decode_text(node)

        text = decode_text(node.get('Text'))
        for child in node.children:
            text += self.plain_text(child)
        return text

    def _render_code_paragraphs(self, paragraphs: Sequence[Node]) -> str:
        lines = [self.plain_text(paragraph).strip('\r\n') for paragraph in paragraphs]
        lines = [line for line in lines if line.strip()]

        if not lines:
            return ''.join(self._process_paragraph(paragraph) for paragraph in paragraphs)
        if len(lines) == 1:
            return code_span(lines[0]) + '  \n'
        return '```\n' + '\n'.join(lines) + '\n```\n\n'

    def _process_section(self, node: DocumentNode, paragraph: Optional[DocumentNode]) -> str:
        if self.formatter.is_monospace_font(node.get('FontFamily')):
            language = node.get('Tag')
            code = '\n'.join(
                self.plain_text(child).strip('\r\n')
                for child in node.children
            )
            return f'```{language}\n{code}\n```\n\n'

        return self.render_siblings(node.children, paragraph) + '\n\n'

    def _process_paragraph(self, node: DocumentNode, paragraph: Optional[DocumentNode] = None) -> str:
        content = self.render_siblings(node.children, node)
        if not content.strip():
            return '\n\n'

        indent = self.formatter.indent_prefix(parse_indent_level(node.get('Margin')))
        level = self.formatter.paragraph_heading_level(node)
        if level > 0:
            return f"{indent}{'#' * level} {content.strip()}\n"
        content = self.formatter.convert_leading_tabs(content)
        return f'{indent}{content.rstrip()}  \n'

    def _process_run(self, node: DocumentNode, paragraph: Optional[DocumentNode]) -> str:
        text = self.plain_text(node)
        return self.formatter.format_text(text, node, paragraph)

    def _process_span(self, node: DocumentNode, paragraph: Optional[DocumentNode]) -> str:
        if node.has('Text'):
            return self._process_run(node, paragraph)

        # Children already carry the paragraph's inherited styles
        content = self.render_siblings(node.children, paragraph)
        return self.formatter.format_text(content, node)

    def _process_list(self, node: DocumentNode, paragraph: Optional[DocumentNode]) -> str:
        return self.lists.process_list(node)

    def _process_table(self, node: DocumentNode, paragraph: Optional[DocumentNode]) -> str:
        rows = self._table_rows(node)
        if not rows:
            return ''

        cell_rows = [
            [self._render_cell(cell) for cell in row.element_children() if cell.kind == 'tablecell']
            for row in rows
        ]
        width = max(len(cells) for cells in cell_rows)
        if width == 0:
            return ''

        lines = []
        for index, cells in enumerate(cell_rows):
            cells = cells + [''] * (width - len(cells))
            lines.append('| ' + ' | '.join(cells) + ' |')
            if index == 0:
                lines.append('| ' + ' | '.join(['---'] * width) + ' |')
        return '\n'.join(lines) + '\n\n'

    @staticmethod
    def _table_rows(table: DocumentNode) -> List[DocumentNode]:
        rows = []
        for child in table.element_children():
            if child.kind == 'tablerowgroup':
                rows.extend(row for row in child.element_children() if row.kind == 'tablerow')
            elif child.kind == 'tablerow':
                rows.append(child)
        return rows

    def _render_cell(self, cell: DocumentNode) -> str:
        content = self.render_siblings(cell.children).strip()
        lines = [line.strip() for line in content.split('\n')]
        return '<br>'.join(line for line in lines if line).replace('|', '\\|')

    def _process_hyperlink(self, node: DocumentNode, paragraph: Optional[DocumentNode]) -> str:
        url = node.get('Uri') or node.get('NavigateUri')
        text = self.render_siblings(node.children, paragraph).strip()
        if not text:
            return ''

        if self._in_code_context(node, paragraph) or not url:
            return text
        if paragraph is not None and self._is_part_of_existing_link(url, paragraph):
            return url
        if has_markdown_link_syntax(text):
            return text
        return f'[{text}]({url})'

    def _in_code_context(self, node: DocumentNode, paragraph: Optional[DocumentNode]) -> bool:
        family = node.get('FontFamily')
        if not family and paragraph is not None:
            family = paragraph.get('FontFamily')
        return self.formatter.is_monospace_font(family)

    def _is_part_of_existing_link(self, url: str, paragraph: DocumentNode) -> bool:
        paragraph_text = self.plain_text(paragraph)
        start = paragraph_text.find(url)
        while start != -1:
            preceding = paragraph_text[:start]
            if preceding.endswith(EXISTING_LINK_PREFIXES):
                return True
            start = paragraph_text.find(url, start + 1)
        return False

    def _process_image_reference(self, node: DocumentNode, paragraph: Optional[DocumentNode]) -> str:
        uri = node.get('Uri')
        if not uri:
            return ''

        if not self.options.image_pipeline_enabled:
            logger.debug(f"No output directory, image left unavailable: {uri}")
            return f'{UNAVAILABLE_IMAGE}\n\n'

        placeholder_id = f'{PLACEHOLDER_PREFIX}_{self._placeholder_nonce}_{len(self.pending_images) + 1}'
        self.pending_images[placeholder_id] = uri
        return f'{placeholder_markdown(placeholder_id)}\n\n'
