"""Unit tests for the models package."""

import pytest

from xaml_markdown.models import (
    ConversionOptions,
    ConversionResult,
    DocumentNode,
    ElementFailure,
    ElementFailureType,
    FailureType,
    ImageFailure,
    ImageStats,
    RecoveryAction,
    failure_summary,
    get_attributes,
)


class TestDocumentNode:
    """Test cases for DocumentNode."""

    def test_kind_is_lowercase_tag(self):
        """kind lower-cases the tag for dispatch."""
        assert DocumentNode('TableRowGroup').kind == 'tablerowgroup'

    def test_get_returns_raw_string_value(self):
        """Attribute values are returned without coercion."""
        node = DocumentNode('Run', {'FontSize': '24', 'FontBold': 'True'})

        assert node.get('FontSize') == '24'
        assert node.get('FontBold') == 'True'
        assert node.get('Missing') == ''
        assert node.get('Missing', None) is None

    def test_element_children_skips_text(self):
        """element_children ignores raw text runs."""
        run = DocumentNode('Run')
        node = DocumentNode('Paragraph', children=['hello', run, 'world'])

        assert node.element_children() == [run]

    def test_iter_descendants_in_document_order(self):
        """iter_descendants walks depth-first in document order."""
        first = DocumentNode('Run', {'Text': '1'})
        second = DocumentNode('Run', {'Text': '2'})
        third = DocumentNode('Run', {'Text': '3'})
        tree = DocumentNode('Paragraph', children=[
            first,
            DocumentNode('Span', children=[second]),
            third,
        ])

        texts = [run.get('Text') for run in tree.iter_descendants('run')]

        assert texts == ['1', '2', '3']


class TestDocumentNodeFromMapping:
    """Test cases for building nodes from dict encodings."""

    def test_marker_key_encoding(self):
        """Marker-key encoding keeps attributes and child order."""
        data = {
            'Paragraph': [
                {'Run': [], ':@': {'@_Text': 'first'}},
                {'#text': 'middle'},
                {'Run': [], ':@': {'@_Text': 'last'}},
            ],
            ':@': {'@_FontSize': '24'},
        }

        node = DocumentNode.from_mapping(data)

        assert node.tag == 'Paragraph'
        assert node.attributes == {'FontSize': '24'}
        assert node.children[0].get('Text') == 'first'
        assert node.children[1] == 'middle'
        assert node.children[2].get('Text') == 'last'

    def test_inline_encoding(self):
        """Inline '@_' attributes are stripped of their prefix."""
        data = {'Paragraph': {'@_FontSize': '24', 'Run': {'@_Text': 'hi'}}}

        node = DocumentNode.from_mapping(data)

        assert node.get('FontSize') == '24'
        assert len(node.element_children()) == 1
        assert node.element_children()[0].get('Text') == 'hi'

    def test_inline_encoding_with_repeated_children(self):
        """A list value produces one child per item."""
        data = {'List': {'ListItem': [{'@_Tag': 'a'}, {'@_Tag': 'b'}]}}

        node = DocumentNode.from_mapping(data)

        assert [child.get('Tag') for child in node.element_children()] == ['a', 'b']

    def test_multiple_tag_keys_raise(self):
        """A mapping naming two tags is rejected."""
        with pytest.raises(ValueError, match="exactly one tag"):
            DocumentNode.from_mapping({'Run': [], 'Span': []})


class TestGetAttributes:
    """Test cases for get_attributes across encodings."""

    def test_from_document_node_returns_copy(self):
        """Mutating the result does not touch the node."""
        node = DocumentNode('Run', {'Text': 'x'})

        attributes = get_attributes(node)
        attributes['Text'] = 'changed'

        assert node.get('Text') == 'x'

    def test_from_marker_mapping(self):
        """Marker-key attributes are un-prefixed."""
        assert get_attributes({'Run': [], ':@': {'@_Text': 'x'}}) == {'Text': 'x'}

    def test_from_inline_mapping(self):
        """Inline attributes are un-prefixed and tag keys ignored."""
        assert get_attributes({'@_FontSize': 12, 'Run': {}}) == {'FontSize': '12'}

    def test_non_mapping_returns_empty(self):
        """Anything else has no attributes."""
        assert get_attributes('text') == {}


class TestConversionOptions:
    """Test cases for ConversionOptions."""

    def test_defaults(self):
        """Defaults match documented values."""
        options = ConversionOptions()

        assert options.monospace_font_name == 'Courier New'
        assert options.convert_indents_to_quotes is True
        assert options.html_sub_superscript is False
        assert options.max_image_size_mb == 8
        assert options.download_retries == 3
        assert options.image_pipeline_enabled is False

    def test_max_image_bytes(self):
        """Size cap is converted to bytes."""
        assert ConversionOptions(max_image_size_mb=2).max_image_bytes == 2 * 1024 * 1024

    def test_for_note_returns_scoped_copy(self):
        """for_note sets the output location without touching the original."""
        options = ConversionOptions()

        scoped = options.for_note('/tmp/out', 'Romans 8.md')

        assert scoped.output_directory == '/tmp/out'
        assert scoped.note_filename == 'Romans 8.md'
        assert scoped.image_pipeline_enabled is True
        assert options.output_directory is None

    @pytest.mark.parametrize("field,value", [
        ('max_image_size_mb', 0),
        ('download_timeout', -1),
        ('download_retries', 0),
    ])
    def test_invalid_values_raise(self, field, value):
        """Non-positive limits are rejected."""
        with pytest.raises(ValueError, match=field):
            ConversionOptions(**{field: value})


class TestImageModels:
    """Test cases for image statistics and failure records."""

    def test_url_preview_truncated(self):
        """Long URLs are shortened to 80 characters plus ellipsis."""
        url = 'https://files.logoscdn.com/' + 'a' * 100

        failure = ImageFailure(url, FailureType.NETWORK, 'boom')

        assert failure.url_preview == url[:80] + '...'
        assert failure.recovery == RecoveryAction.PLACEHOLDER

    def test_short_url_preview_unchanged(self):
        """Short URLs are kept whole."""
        failure = ImageFailure('https://a.unsplash.com/x', FailureType.VALIDATION, 'bad')

        assert failure.url_preview == 'https://a.unsplash.com/x'

    def test_failure_summary_counts_by_type(self):
        """Summary reports totals, per-type counts and the most common type."""
        failures = [
            ImageFailure('u1', FailureType.NETWORK, 'a'),
            ImageFailure('u2', FailureType.NETWORK, 'b'),
            ImageFailure('u3', FailureType.VALIDATION, 'c'),
        ]

        summary = failure_summary(failures)

        assert summary['total'] == 3
        assert summary['by_type'] == {
            'validation': 1,
            'network': 2,
            'filesystem': 0,
            'exception': 0,
        }
        assert summary['most_common'] == 'network'

    def test_failure_summary_empty(self):
        """Empty input has no most common type."""
        summary = failure_summary([])

        assert summary['total'] == 0
        assert summary['most_common'] is None

    def test_image_stats_start_at_zero(self):
        """All counters start at zero."""
        stats = ImageStats()

        assert stats.images_found == 0
        assert stats.images_downloaded == 0
        assert stats.total_image_size_mb == 0.0


class TestConversionResult:
    """Test cases for ConversionResult and ElementFailure."""

    def test_has_failures_false_by_default(self):
        """A plain result has no failures."""
        assert ConversionResult(markdown='# Title').has_failures is False

    def test_has_failures_with_element_failure(self):
        """Element failures count as failures."""
        failure = ElementFailure(ElementFailureType.EXCEPTION, 'boom')

        assert ConversionResult(markdown='', element_failures=[failure]).has_failures is True

    def test_element_failure_preview_truncated(self):
        """Content previews are capped at 150 characters."""
        failure = ElementFailure.from_content(ElementFailureType.EXCEPTION, 'boom', 'x' * 200)

        assert failure.content_preview == 'x' * 150 + '...'

    def test_element_failure_short_preview(self):
        """Short content is kept whole."""
        failure = ElementFailure.from_content(ElementFailureType.EMPTY_CONTENT, 'empty', '<Run/>')

        assert failure.content_preview == '<Run/>'
