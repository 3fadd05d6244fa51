# -*- coding: utf-8 -*-
"""
Rich text to plain text conversion for printable exports.
"""

import html
import re

_BLOCK_RULES = (
    (re.compile(r"<br\s*/?>", re.IGNORECASE), "\n"),
    (re.compile(r"</p>", re.IGNORECASE), "\n\n"),
    (re.compile(r"</div>", re.IGNORECASE), "\n"),
    (re.compile(r"</li>", re.IGNORECASE), "\n- "),
)
_TAG = re.compile(r"<[^>]+>")
_SPACES = re.compile(r" +")


def html_to_text(value: str | None) -> str:
    """
    Flatten an HTML fragment produced by the rich-text editor.

    Line-level tags become newlines, every other tag is dropped, entities
    are decoded and runs of spaces collapse to one. Newlines are kept.

    Example:
        >>> html_to_text("<p>Hello</p><p>World</p>")
        'Hello\\n\\nWorld'
    """
    if not value:
        return ""

    text = value
    for pattern, replacement in _BLOCK_RULES:
        text = pattern.sub(replacement, text)
    text = _TAG.sub("", text)
    text = html.unescape(text).replace("\xa0", " ")
    text = _SPACES.sub(" ", text)
    return text.strip()
