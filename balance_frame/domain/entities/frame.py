from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FrameState(str, Enum):
    HOME = "home"
    CHECKING = "checking"
    RESULT = "result"
    ERROR = "error"


class FrameRoute(str, Enum):
    """States a button can target, with their path under the frame prefix."""

    HOME = ""
    CHECKING = "/check"
    RESULT = "/result"

    @property
    def path(self) -> str:
        return self.value


class TextRole(str, Enum):
    TITLE = "title"
    BODY = "body"
    ERROR = "error"
    CAPTION = "caption"


@dataclass(frozen=True)
class Background:
    color: str
    image_url: str | None = None  # drawn over color when it can be fetched


@dataclass(frozen=True)
class TextLine:
    text: str
    role: TextRole = TextRole.BODY


@dataclass(frozen=True)
class Button:
    label: str
    target: FrameRoute
    value: str | None = None  # carried back as ?value= on click


@dataclass(frozen=True)
class ViewDescription:
    state: FrameState
    background: Background
    texts: tuple[TextLine, ...] = ()
    buttons: tuple[Button, ...] = ()
    avatar_url: str | None = None
    input_placeholder: str | None = None  # shows a text input when set
    title: str = ""

    def has_home_button(self) -> bool:
        return any(b.target is FrameRoute.HOME for b in self.buttons)


@dataclass(frozen=True)
class FrameRequest:
    """Inbound click data, reduced to what the flow needs."""

    fid: str | None = None  # platform-supplied identity
    carried_value: str | None = None
    input_text: str | None = None
    button_index: int | None = None
