"""Final whitespace normalization of generated Markdown."""

import re

WHITESPACE_ONLY_LINE = re.compile(r'^[ \t]+$', re.MULTILINE)
LONG_TRAILING_SPACES = re.compile(r'[ \t]{3,}$', re.MULTILINE)
TRAILING_WHITESPACE = re.compile(r'[ \t]+$', re.MULTILINE)
QUOTE_FOLLOWED_BY_TEXT = re.compile(r'^(>+[ \t].*\n)(?=[^>\n])(?![ \t]*$)', re.MULTILINE)
EXCESS_BLANK_LINES = re.compile(r'\n{3,}')


def normalize_markdown(markdown: str, convert_indents_to_quotes: bool = True) -> str:
    """Collapse blank lines, fix trailing spaces and separate blockquotes.

    Only two trailing spaces (a hard line break) survive at the end of a line.
    In blockquote mode a blank line is inserted after a quoted line that is
    directly followed by unquoted text. Running this twice gives the same
    result as running it once.

    Args:
        markdown: Generated Markdown
        convert_indents_to_quotes: Whether indents were rendered as blockquotes

    Returns:
        Normalized Markdown with no leading or trailing whitespace
    """
    result = markdown.replace('\r\n', '\n')
    result = WHITESPACE_ONLY_LINE.sub('', result)
    result = LONG_TRAILING_SPACES.sub('  ', result)
    result = TRAILING_WHITESPACE.sub(lambda match: match.group(0) if match.group(0) == '  ' else '', result)

    if convert_indents_to_quotes:
        result = QUOTE_FOLLOWED_BY_TEXT.sub(r'\1\n', result)

    result = EXCESS_BLANK_LINES.sub('\n\n', result)
    return result.strip()
