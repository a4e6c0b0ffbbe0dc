"""
Link annotation for display strings.

Only the rendered text changes: an item's stored name is never rewritten.
"""

from __future__ import annotations

import re
from typing import List

URL_PATTERN = re.compile(r"https?://[^\s)\]]+")

LINK_TEMPLATE = '<a href="{url}" target="_blank">{url}</a>'


def find_urls(name: str) -> List[str]:
    """Return every URL substring of name, in order of appearance."""
    return URL_PATTERN.findall(name)


# PUBLIC_INTERFACE
def annotate(name: str) -> str:
    """
    Wrap each http(s) URL in name with hyperlink markup opening in a new
    browsing context. A URL ends at whitespace, ')' or ']'; all other text
    is returned unchanged.
    """
    return URL_PATTERN.sub(lambda m: LINK_TEMPLATE.format(url=m.group(0)), name)
