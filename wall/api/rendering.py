"""Wall Page Rendering — HTML for the public read view.

Invariants:
    - body/author are emitted as stored: they were escaped at submission and are
      not escaped again (double escaping would show entities to readers)
    - payer comes from the payment envelope, not the sanitizer, so it IS escaped here
"""

from wall.core.domain_types import Message
from wall.core.sanitize import escape_markup


def render_wall_page(messages: list[Message], price_label: str) -> str:
    items = "".join(
        f"<li>{m.body} ({m.timestamp}) by {m.author}"
        f"{f' <small>paid by {escape_markup(m.payer)}</small>' if m.payer else ''}</li>"
        for m in messages
    )
    return (
        "<html><head><title>Message Wall x402 example</title></head><body>"
        "<h1>Post a Message</h1>"
        '<form action="/wall" method="POST">'
        '<input type="text" name="message" placeholder="Enter your message" required>'
        '<input type="text" name="author" placeholder="anon">'
        f'<button type="submit">POST ({escape_markup(price_label)} USDC)</button>'
        "</form>"
        f"<h1>MESSAGE WALL</h1><ul>{items}</ul>"
        "<script>window.onload = () => history.replaceState(null, '', '/wall')</script>"
        "</body></html>"
    )
