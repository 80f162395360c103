from __future__ import annotations

from decimal import Decimal, InvalidOperation

from balance_frame.domain.entities.frame import (
    Button,
    FrameRoute,
    FrameState,
    TextLine,
    TextRole,
    ViewDescription,
)
from balance_frame.domain.entities.theme import Theme
from balance_frame.domain.entities.user_info import UserInfo
from balance_frame.domain.errors import FrameError


def format_balance(value: str) -> str:
    """Add thousands separators to decimal text, e.g. "1234.5" -> "1,234.5".

    Anything that is not a finite decimal is returned untouched.
    """
    try:
        number = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return value
    if not number.is_finite():
        return value
    return format(number, ",f")


class FrameStateMachine:
    """Builds the view for each frame state.

    Transitions live in the buttons: every view returned here offers at least
    one button, and every view except home offers a way back to home.

    home     -> checking
    checking -> result | home
    result   -> result (refresh) | home
    error    -> retry target | home
    """

    def __init__(self, theme: Theme, text_input: bool = False) -> None:
        self.theme = theme
        self.text_input = text_input

    def _view(
        self,
        state: FrameState,
        texts: list[TextLine],
        buttons: list[Button],
        avatar_url: str | None = None,
        input_placeholder: str | None = None,
    ) -> ViewDescription:
        return ViewDescription(
            state=state,
            background=self.theme.background,
            texts=tuple(texts),
            buttons=tuple(buttons),
            avatar_url=avatar_url,
            input_placeholder=input_placeholder,
            title=self.theme.app_title,
        )

    def home(self) -> ViewDescription:
        return self._view(
            FrameState.HOME,
            [
                TextLine(self.theme.app_title, TextRole.TITLE),
                TextLine(f"Click to check your {self.theme.token_symbol} balance"),
            ],
            [Button("Check Balance", FrameRoute.CHECKING)],
            input_placeholder="FID or ENS name (optional)" if self.text_input else None,
        )

    def checking(self, identity: str) -> ViewDescription:
        return self._view(
            FrameState.CHECKING,
            [
                TextLine(f"Checking {self.theme.token_symbol} balance", TextRole.TITLE),
                TextLine(f"Identity: {identity}"),
                TextLine("Tap Show Balance to continue", TextRole.CAPTION),
            ],
            [
                Button("Show Balance", FrameRoute.RESULT, value=identity),
                Button("Back", FrameRoute.HOME),
            ],
        )

    def result(self, identity: str, info: UserInfo) -> ViewDescription:
        texts = [TextLine(f"{self.theme.token_symbol} Balance", TextRole.TITLE)]
        if self.theme.show_profile_name:
            texts.append(TextLine(f"Profile: {info.profile_name}"))
        texts.append(TextLine(f"Balance: {format_balance(info.balance)} {self.theme.token_symbol}"))
        avatar = info.profile_image if self.theme.show_avatar else None
        return self._view(
            FrameState.RESULT,
            texts,
            [
                Button("Back", FrameRoute.HOME),
                Button("Refresh", FrameRoute.RESULT, value=identity),
            ],
            avatar_url=avatar,
        )

    def error(
        self,
        error: FrameError,
        retry: FrameRoute = FrameRoute.RESULT,
        identity: str | None = None,
    ) -> ViewDescription:
        return self._view(
            FrameState.ERROR,
            [
                TextLine(error.title, TextRole.ERROR),
                TextLine(error.message),
            ],
            [
                Button("Back", FrameRoute.HOME),
                Button("Retry", retry, value=identity),
            ],
        )
