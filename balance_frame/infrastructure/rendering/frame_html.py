from __future__ import annotations

from html import escape
from urllib.parse import urlencode

from balance_frame.domain.entities.frame import Button, FrameRoute, ViewDescription

MAX_BUTTONS = 4
ASPECT_RATIO = "1.91:1"


def frame_url(base_url: str, route: FrameRoute, value: str | None = None) -> str:
    url = base_url.rstrip("/") + route.path
    if value is not None:
        url += "?" + urlencode({"value": value})
    return url


def _meta(name: str, content: str) -> str:
    return f'<meta property="{escape(name)}" content="{escape(content)}" />'


def _button_tags(index: int, button: Button, base_url: str) -> list[str]:
    prefix = f"fc:frame:button:{index}"
    return [
        _meta(prefix, button.label),
        _meta(f"{prefix}:action", "post"),
        _meta(f"{prefix}:target", frame_url(base_url, button.target, button.value)),
    ]


def build_frame_html(view: ViewDescription, image_src: str, base_url: str) -> str:
    """Build a Farcaster vNext frame document for a rendered view.

    ``base_url`` is the absolute URL of the frame prefix; button targets are
    resolved against it.
    """
    if len(view.buttons) > MAX_BUTTONS:
        raise ValueError(f"A frame supports at most {MAX_BUTTONS} buttons, got {len(view.buttons)}")

    tags = [
        _meta("og:title", view.title),
        _meta("og:image", image_src),
        _meta("fc:frame", "vNext"),
        _meta("fc:frame:image", image_src),
        _meta("fc:frame:image:aspect_ratio", ASPECT_RATIO),
        _meta("fc:frame:post_url", frame_url(base_url, FrameRoute.HOME)),
    ]
    if view.input_placeholder:
        tags.append(_meta("fc:frame:input:text", view.input_placeholder))
    for i, button in enumerate(view.buttons, start=1):
        tags.extend(_button_tags(i, button, base_url))

    body_lines = "".join(f"<p>{escape(t.text)}</p>" for t in view.texts)
    head = "\n    ".join(tags)
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "  <head>\n"
        '    <meta charset="utf-8" />\n'
        f"    <title>{escape(view.title)}</title>\n"
        f"    {head}\n"
        "  </head>\n"
        f'  <body data-frame-state="{view.state.value}">{body_lines}</body>\n'
        "</html>\n"
    )
