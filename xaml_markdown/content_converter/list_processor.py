"""Reconstruction of nested Markdown lists from List/ListItem trees.

Each ListItem is partitioned into direct content (paragraphs, runs, ...) and
nested List nodes. Direct content becomes one marker line; the items of nested
lists are emitted as children of the current item one level deeper, each
nested list starting its own counter. Indentation is 3 spaces per depth.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Sequence, Tuple, Union

from xaml_markdown.models.document_node import DocumentNode

logger = logging.getLogger(__name__)

INDENT = '   '
UNORDERED_MARKER = '* '
DEFAULT_MARKER_STYLE = 'Disc'

Renderable = Union[DocumentNode, str]


class ListKind(Enum):
    ORDERED = "ordered"
    UNORDERED = "unordered"


@dataclass(frozen=True)
class ListContext:
    """Position of an item within the list being reconstructed.

    Attributes:
        kind: Ordered or unordered marker
        depth: Nesting depth, 0 for a top-level list
        counter: Ordinal emitted for the next ordered item
    """
    kind: ListKind
    depth: int = 0
    counter: int = 1

    @property
    def marker(self) -> str:
        if self.kind == ListKind.ORDERED:
            return f'{self.counter}. '
        return UNORDERED_MARKER

    @property
    def indentation(self) -> str:
        return INDENT * self.depth


def list_kind(list_node: DocumentNode) -> ListKind:
    """Ordered when the marker style is 'decimal', unordered otherwise."""
    style = list_node.get('Kind') or list_node.get('MarkerStyle') or DEFAULT_MARKER_STYLE
    if style.lower() == 'decimal':
        return ListKind.ORDERED
    return ListKind.UNORDERED


def list_items(list_node: DocumentNode) -> List[DocumentNode]:
    return [child for child in list_node.element_children() if child.kind == 'listitem']


def partition_item(item: DocumentNode) -> Tuple[List[Renderable], List[DocumentNode]]:
    """Split a ListItem's children into (direct content, nested lists)."""
    direct: List[Renderable] = []
    nested: List[DocumentNode] = []
    for child in item.children:
        if isinstance(child, DocumentNode) and child.kind == 'list':
            nested.append(child)
        else:
            direct.append(child)
    return direct, nested


class ListProcessor:
    """Renders List nodes as indented Markdown list lines.

    Args:
        render: Callable rendering a sequence of sibling nodes to Markdown;
            used for each item's direct content

    Example:
        >>> processor = ListProcessor(dispatcher.render_siblings)
        >>> processor.process_list(list_node)
        '* top\\n   1. nested\\n'
    """

    def __init__(self, render: Callable[[Sequence[Renderable]], str]):
        self.render = render

    def process_list(self, list_node: DocumentNode, depth: int = 0) -> str:
        """Render a complete List node at the given depth."""
        context = ListContext(kind=list_kind(list_node), depth=depth)
        logger.debug(f"Rendering {context.kind.value} list at depth {depth}")
        return self._process_items(list_items(list_node), context)

    def _process_items(self, items: List[DocumentNode], context: ListContext) -> str:
        lines = []
        counter = context.counter
        for item in items:
            lines.append(self._process_item(item, replace(context, counter=counter)))
            if context.kind == ListKind.ORDERED:
                counter += 1
        return ''.join(lines)

    def _process_item(self, item: DocumentNode, context: ListContext) -> str:
        direct, nested = partition_item(item)

        result = ''
        content = self.render(direct).strip() if direct else ''
        if content:
            result = self._marker_line(content, context)

        for nested_list in nested:
            nested_context = ListContext(
                kind=list_kind(nested_list),
                depth=context.depth + 1,
            )
            result += self._process_items(list_items(nested_list), nested_context)

        return result

    @staticmethod
    def _marker_line(content: str, context: ListContext) -> str:
        marker = context.marker
        continuation = context.indentation + ' ' * len(marker)
        lines = content.split('\n')
        body = lines[0] + ''.join(
            '\n' + (continuation + line if line.strip() else '')
            for line in lines[1:]
        )
        return f'{context.indentation}{marker}{body}\n'
