"""Input Sanitizer — normalizes and bounds untrusted text before it reaches storage.

Invariants:
    - sanitize_submission is PURE: no IO, no logging, same input → same output
    - Truncation counts RAW characters and happens BEFORE escaping
    - Stored text never contains & < > " ' / unescaped (the only markup defense;
      nothing downstream escapes again)
    - Rejections raise MessageValidationError (client error, 400)
    - Accepted text is storable on every backend: valid UTF-8, no NUL characters
    - The blank check sees exactly the text that would be stored

Design Decisions:
    - Author is escaped too: it is rendered next to the body and the render
      layer trusts stored text
    - Explicit translate table over html.escape: html.escape leaves "/" alone
"""

from dataclasses import dataclass

from wall.core.domain_types import (
    DEFAULT_AUTHOR, MAX_AUTHOR_LENGTH, MAX_BODY_LENGTH,
)
from wall.core.errors import MessageValidationError


_MARKUP_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
})


@dataclass(frozen=True)
class SanitizedSubmission:
    body: str
    author: str


def escape_markup(text: str) -> str:
    """Replace HTML-significant characters with entity equivalents."""
    return text.translate(_MARKUP_ESCAPES)


def _require_storable(text: str, field: str) -> None:
    if "\x00" in text:
        raise MessageValidationError("Text must not contain NUL characters", field)
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        raise MessageValidationError("Text must be valid Unicode", field)


def sanitize_body(raw_body: object) -> str:
    body = raw_body[:MAX_BODY_LENGTH] if isinstance(raw_body, str) else None
    if not body or not body.strip():
        raise MessageValidationError(
            "Message is required and must be a non-empty string", "message",
        )
    _require_storable(body, "message")
    return escape_markup(body)


def sanitize_author(raw_author: object) -> str:
    # Absent and empty both mean "anon"
    if raw_author is None or raw_author == "":
        return DEFAULT_AUTHOR
    if not isinstance(raw_author, str):
        raise MessageValidationError("Author must be a string", "author")
    author = raw_author[:MAX_AUTHOR_LENGTH]
    _require_storable(author, "author")
    return escape_markup(author)


def sanitize_submission(raw_body: object, raw_author: object = None) -> SanitizedSubmission:
    """Validate, truncate, and escape a raw (body, author) pair."""
    return SanitizedSubmission(
        body=sanitize_body(raw_body),
        author=sanitize_author(raw_author),
    )
