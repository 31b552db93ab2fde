"""Comment clean-up and field attribute extraction.

Protobuf has no "required" keyword, so a field is marked mandatory by
starting its trailing comment with the token ``required``:

    string title = 1; // required, the article headline
"""

import re
from typing import Callable

# Takes a cleaned trailing comment, returns (is_required, remaining_text).
FieldAttributeExtractor = Callable[[str], tuple[bool, str]]

REQUIRED_TOKEN = "required"

_INDENTED_NEWLINE = re.compile(r"\n[ ]+")
_MARKER_SEPARATOR = re.compile(r"^\s*[,:;-]?\s*")


def clean_comment(text: str) -> str:
    """Trim a comment and fold indented line breaks into single spaces."""
    return _INDENTED_NEWLINE.sub(" ", text.strip())


def required_marker(trailing: str) -> tuple[bool, str]:
    """Detect a leading ``required`` token (case-sensitive) and strip it."""
    if not trailing.startswith(REQUIRED_TOKEN):
        return False, trailing
    remainder = trailing[len(REQUIRED_TOKEN):]
    return True, _MARKER_SEPARATOR.sub("", remainder, count=1)


def field_documentation(
    leading: str,
    trailing: str,
    extractor: FieldAttributeExtractor = required_marker,
) -> tuple[bool, str]:
    """Build a field's documentation from its leading and trailing comments.

    Returns (is_required, description).
    """
    is_required, trailing = extractor(clean_comment(trailing))
    return is_required, clean_comment(f"{leading} {trailing}")
