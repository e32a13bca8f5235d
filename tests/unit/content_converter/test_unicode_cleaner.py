"""Unit tests for content_converter.unicode_cleaner module."""

import pytest

from xaml_markdown.content_converter.unicode_cleaner import UnicodeCleaner


class TestUnicodeCleaner:
    """Test cases for UnicodeCleaner.clean."""

    @pytest.mark.parametrize("char", ['\ufeff', '\u200b', '\u200d', '\u2060', '\u180e'])
    def test_removes_zero_width_characters(self, char):
        """Zero-width characters and BOMs are removed."""
        assert UnicodeCleaner.clean(f'gr{char}ace') == 'grace'

    def test_removes_control_characters(self):
        """C0 and C1 control characters are removed."""
        assert UnicodeCleaner.clean('a\x00b\x1fc\x85d') == 'abcd'

    def test_keeps_tabs_and_newlines(self):
        """Tab, newline and carriage return survive."""
        assert UnicodeCleaner.clean('a\tb\nc\r\n') == 'a\tb\nc\r\n'

    def test_keeps_visible_unicode(self):
        """Accented and non-Latin text is untouched."""
        assert UnicodeCleaner.clean('Ἰησοῦς café') == 'Ἰησοῦς café'

    def test_empty_passthrough(self):
        """Empty input is returned as-is."""
        assert UnicodeCleaner.clean('') == ''
