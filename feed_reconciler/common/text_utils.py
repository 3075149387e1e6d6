"""
Text Utilities

Helper functions for turning storefront HTML into plain text and
building URL slugs.
"""

import re

from bs4 import BeautifulSoup


def strip_html(html: str) -> str:
    """
    Convert an HTML fragment to plain text.

    Paragraph boundaries and <br> tags become newlines, all other tags are
    dropped and entities are decoded (&nbsp; becomes a plain space).

    Args:
        html: HTML fragment (may be plain text already)

    Returns:
        Plain text
    """
    if not html:
        return ""

    text = re.sub(r'</p>\s*<p[^>]*>', '\n', html)
    text = re.sub(r'<br\s*/?>', '\n', text, flags=re.IGNORECASE)
    text = BeautifulSoup(text, 'lxml').get_text()
    return text.replace('\xa0', ' ')


def slugify(name: str) -> str:
    """
    Build a slug from a product name: lower case, whitespace runs to '-'.

    Example:
        >>> slugify("Платье  Лето 2024")
        'платье-лето-2024'
        >>> slugify("Костюм ")
        'костюм-'
    """
    return re.sub(r'\s+', '-', name.lower())


def collapse_newlines(text: str) -> str:
    """Replace runs of newlines with a single newline."""
    return re.sub(r'\n+', '\n', text)
