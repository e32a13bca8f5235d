"""Removal of invisible and control characters from note text.

Exported notes often carry zero-width joiners, byte-order marks and stray
C0/C1 control characters that render as question marks in Markdown viewers.
"""

import re

ZERO_WIDTH_PATTERN = re.compile(
    '[\ufeff\u200b-\u200f\u2060-\u2064\u180e\u17b4\u17b5]'
)

# Tab, newline and carriage return are kept
CONTROL_CHAR_PATTERN = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]')


class UnicodeCleaner:
    """Strips zero-width and control characters from text.

    Example:
        >>> UnicodeCleaner.clean('gr\\u200bace')
        'grace'
    """

    @staticmethod
    def clean(text: str) -> str:
        if not text:
            return text
        text = ZERO_WIDTH_PATTERN.sub('', text)
        return CONTROL_CHAR_PATTERN.sub('', text)
