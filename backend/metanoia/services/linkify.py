"""Split chat text into plain, email and phone segments.

Concatenating the segment values always reproduces the input, so clients
can render the segments inline and make the contact ones tappable.
"""

import re
from typing import Literal, TypedDict

EMAIL_PATTERN = r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"
PHONE_PATTERN = r"\+?\d[\d\s\-]{8,}\d"

_CONTACT = re.compile(f"(?P<email>{EMAIL_PATTERN})|(?P<phone>{PHONE_PATTERN})")
_WHITESPACE = re.compile(r"\s+")


class Segment(TypedDict):
    type: Literal["text", "email", "phone"]
    value: str
    href: str | None


def parse_message_content(text: str) -> list[Segment]:
    """Split message text into ordered segments.

    Emails link to ``mailto:``; phone numbers link to ``tel:`` with
    whitespace removed (hyphens are kept).

    Args:
        text: Message body.

    Returns:
        Segments in order. Empty text gives an empty list.
    """
    segments: list[Segment] = []
    position = 0
    for match in _CONTACT.finditer(text):
        start, end = match.span()
        if start > position:
            segments.append({"type": "text", "value": text[position:start], "href": None})
        value = match.group()
        if match.lastgroup == "email":
            segments.append({"type": "email", "value": value, "href": f"mailto:{value}"})
        else:
            segments.append(
                {
                    "type": "phone",
                    "value": value,
                    "href": f"tel:{_WHITESPACE.sub('', value)}",
                }
            )
        position = end
    if position < len(text):
        segments.append({"type": "text", "value": text[position:], "href": None})
    return segments
