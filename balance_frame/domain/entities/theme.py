from __future__ import annotations

from dataclasses import dataclass

from balance_frame.domain.entities.frame import Background

GOLDIES_TOKEN_ADDRESS = "0x3150E01c36ad3Af80bA16C1836eFCD967E96776e"


@dataclass(frozen=True)
class Theme:
    """Presentation settings for the frame flow.

    The flow itself never changes between themes; only colours, copy and
    which profile fields are shown do.
    """

    name: str
    background: Background
    title_color: str
    text_color: str
    error_color: str
    caption_color: str
    app_title: str = "Farcaster $GOLDIES Balance Checker"
    token_symbol: str = "$GOLDIES"
    show_avatar: bool = False
    show_profile_name: bool = True


CLASSIC = Theme(
    name="classic",
    background=Background(color="#f0f0f0"),
    title_color="#000000",
    text_color="#000000",
    error_color="#ff0000",
    caption_color="#555555",
)

GOLDIES = Theme(
    name="goldies",
    background=Background(color="#1a1200"),
    title_color="#ffd700",
    text_color="#ffffff",
    error_color="#ff6b6b",
    caption_color="#e0c97a",
    show_avatar=True,
)

THEMES: dict[str, Theme] = {t.name: t for t in (CLASSIC, GOLDIES)}


def get_theme(name: str) -> Theme:
    try:
        return THEMES[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown theme '{name}'. Available: {', '.join(sorted(THEMES))}") from None
