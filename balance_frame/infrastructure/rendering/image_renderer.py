from __future__ import annotations

import base64
from io import BytesIO

import httpx
from loguru import logger
from PIL import Image, ImageDraw, ImageFont, ImageOps

from balance_frame.domain.entities.frame import TextLine, TextRole, ViewDescription
from balance_frame.domain.entities.theme import Theme

WIDTH = 1200
HEIGHT = 630  # 1.91:1
AVATAR_SIZE = 160
MARGIN = 60
LINE_SPACING = 20

FONT_SIZES: dict[TextRole, int] = {
    TextRole.TITLE: 48,
    TextRole.ERROR: 44,
    TextRole.BODY: 32,
    TextRole.CAPTION: 24,
}


MAX_ASSET_BYTES = 5 * 1024 * 1024
MAX_ASSET_PIXELS = 4096 * 4096


class AssetRejected(ValueError):
    """Asset is too large to decode for a frame."""


class AssetFetcher:
    """Downloads background and avatar images. Failures return None."""

    def __init__(
        self,
        timeout: float = 3.0,
        transport: httpx.BaseTransport | None = None,
        max_bytes: int = MAX_ASSET_BYTES,
        max_pixels: int = MAX_ASSET_PIXELS,
    ) -> None:
        self.timeout = timeout
        self._transport = transport
        self.max_bytes = max_bytes
        self.max_pixels = max_pixels

    def _download(self, url: str) -> bytes:
        with httpx.Client(
            timeout=self.timeout, transport=self._transport, follow_redirects=True
        ) as client:
            with client.stream("GET", url) as response:
                response.raise_for_status()
                declared = response.headers.get("Content-Length")
                if declared and declared.isdigit() and int(declared) > self.max_bytes:
                    raise AssetRejected(f"declared size {declared} exceeds {self.max_bytes} bytes")
                buf = bytearray()
                for chunk in response.iter_bytes():
                    buf.extend(chunk)
                    if len(buf) > self.max_bytes:
                        raise AssetRejected(f"body exceeds {self.max_bytes} bytes")
        return bytes(buf)

    def fetch(self, url: str) -> Image.Image | None:
        try:
            data = self._download(url)
            img = Image.open(BytesIO(data))
            width, height = img.size
            if width * height > self.max_pixels:
                raise AssetRejected(f"{width}x{height} exceeds {self.max_pixels} pixels")
            img.load()
            return img.convert("RGBA")
        except (httpx.HTTPError, OSError, ValueError, Image.DecompressionBombError) as exc:
            # ValueError covers AssetRejected
            logger.warning("Could not load image asset {}: {}", url, exc)
            return None


class FrameImageRenderer:
    """Draws a ViewDescription as a 1200x630 PNG with Pillow."""

    def __init__(self, theme: Theme, fetcher: AssetFetcher | None = None) -> None:
        self.theme = theme
        self.fetcher = fetcher

    def _color_for(self, role: TextRole) -> str:
        return {
            TextRole.TITLE: self.theme.title_color,
            TextRole.ERROR: self.theme.error_color,
            TextRole.CAPTION: self.theme.caption_color,
        }.get(role, self.theme.text_color)

    @staticmethod
    def _font(size: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
        return ImageFont.load_default(size=size)

    def _background(self, view: ViewDescription) -> Image.Image:
        canvas = Image.new("RGB", (WIDTH, HEIGHT), view.background.color)
        if view.background.image_url and self.fetcher is not None:
            bg = self.fetcher.fetch(view.background.image_url)
            if bg is not None:
                fitted = ImageOps.fit(bg, (WIDTH, HEIGHT))
                canvas.paste(fitted, (0, 0), fitted)
        return canvas

    def _avatar(self, url: str | None) -> Image.Image | None:
        if not url or self.fetcher is None:
            return None
        img = self.fetcher.fetch(url)
        if img is None:
            return None
        img = ImageOps.fit(img, (AVATAR_SIZE, AVATAR_SIZE))
        mask = Image.new("L", (AVATAR_SIZE, AVATAR_SIZE), 0)
        ImageDraw.Draw(mask).ellipse((0, 0, AVATAR_SIZE - 1, AVATAR_SIZE - 1), fill=255)
        img.putalpha(mask)
        return img

    @staticmethod
    def _break_word(draw: ImageDraw.ImageDraw, word: str, font, max_width: int) -> list[str]:
        pieces: list[str] = []
        current = ""
        for char in word:
            if current and draw.textlength(current + char, font=font) > max_width:
                pieces.append(current)
                current = char
            else:
                current += char
        pieces.append(current)
        return pieces

    @classmethod
    def _wrap(cls, draw: ImageDraw.ImageDraw, text: str, font, max_width: int) -> list[str]:
        words: list[str] = []
        for word in text.split():
            if draw.textlength(word, font=font) > max_width:
                words.extend(cls._break_word(draw, word, font, max_width))
            else:
                words.append(word)
        if not words:
            return [""]
        lines: list[str] = []
        current = words[0]
        for word in words[1:]:
            candidate = f"{current} {word}"
            if draw.textlength(candidate, font=font) <= max_width:
                current = candidate
            else:
                lines.append(current)
                current = word
        lines.append(current)
        return lines

    def _layout(self, draw: ImageDraw.ImageDraw, texts: tuple[TextLine, ...]):
        rows = []
        for line in texts:
            font = self._font(FONT_SIZES[line.role])
            for chunk in self._wrap(draw, line.text, font, WIDTH - 2 * MARGIN):
                left, top, right, bottom = draw.textbbox((0, 0), chunk, font=font)
                rows.append((chunk, font, self._color_for(line.role), left, top, right - left, bottom - top))
        return rows

    def render(self, view: ViewDescription) -> bytes:
        canvas = self._background(view)
        draw = ImageDraw.Draw(canvas)
        avatar = self._avatar(view.avatar_url)
        rows = self._layout(draw, view.texts)

        total = sum(r[6] for r in rows) + LINE_SPACING * max(len(rows) - 1, 0)
        if avatar is not None:
            total += AVATAR_SIZE + LINE_SPACING
        y = max((HEIGHT - total) // 2, 0)

        if avatar is not None:
            canvas.paste(avatar, ((WIDTH - AVATAR_SIZE) // 2, y), avatar)
            y += AVATAR_SIZE + LINE_SPACING

        for text, font, color, left, top, width, height in rows:
            draw.text(((WIDTH - width) // 2 - left, y - top), text, font=font, fill=color)
            y += height + LINE_SPACING

        buf = BytesIO()
        canvas.save(buf, format="PNG", optimize=True)
        return buf.getvalue()


def to_data_uri(png: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")
