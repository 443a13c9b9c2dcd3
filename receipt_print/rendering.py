"""Console and raster previews of command sequences."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from rich.text import Text

from receipt_print.commands import (
    AlignCenter,
    AlignLeft,
    AlignRight,
    Bold,
    CommandSequence,
    Cut,
    DrawLine,
    LeftRight,
    NewLine,
    PrintBarcode,
    PrintQR,
    Println,
    TextNormal,
    TextSize,
    justify,
)
from receipt_print.config import (
    PREVIEW_FONT_PATH,
    PREVIEW_FONT_SIZE,
    PREVIEW_WIDTH_PX,
    PRINTER_LINE_CHARACTER,
    PRINTER_LINE_WIDTH,
)

_FONT_OVERRIDE_ENV = "RECEIPT_PREVIEW_FONT_PATH"
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSansMono.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/liberation/LiberationMono-Regular.ttf",
)
_LEFT_INDENT_PX = 8
_LINE_GAP_PX = 4
_CUT_MARK = "- - - - - - - - cut - - - - - - - -"


@dataclass(frozen=True)
class PaperLine:
    """One simulated printed line, already aligned to the paper width."""

    text: str
    bold: bool = False
    scale: int = 1
    kind: str = "text"


def paper_lines(sequence: CommandSequence, width: int = PRINTER_LINE_WIDTH) -> Iterator[PaperLine]:
    """Replay a sequence the way the printer would lay it out."""
    align = "left"
    bold = False
    width_scale = 1
    height_scale = 1

    def place(text: str) -> str:
        chars = max(1, width // width_scale)
        text = text[:chars]
        if align == "center":
            return text.center(chars).rstrip()
        if align == "right":
            return text.rjust(chars)
        return text

    for command in sequence:
        chars = max(1, width // width_scale)
        if isinstance(command, AlignLeft):
            align = "left"
        elif isinstance(command, AlignCenter):
            align = "center"
        elif isinstance(command, AlignRight):
            align = "right"
        elif isinstance(command, Bold):
            bold = command.on
        elif isinstance(command, TextSize):
            width_scale, height_scale = command.width + 1, command.height + 1
        elif isinstance(command, TextNormal):
            width_scale = height_scale = 1
        elif isinstance(command, Println):
            yield PaperLine(place(command.text), bold, height_scale)
        elif isinstance(command, LeftRight):
            yield PaperLine(justify(command.left, command.right, chars), bold, height_scale)
        elif isinstance(command, DrawLine):
            yield PaperLine(PRINTER_LINE_CHARACTER * chars, bold, height_scale)
        elif isinstance(command, NewLine):
            yield PaperLine("")
        elif isinstance(command, Cut):
            yield PaperLine(_CUT_MARK.center(width).rstrip(), kind="cut")
        elif isinstance(command, PrintBarcode):
            yield PaperLine(place(f"|||| {command.symbology} ||||"), kind="barcode")
            yield PaperLine(place(command.data), kind="barcode")
        elif isinstance(command, PrintQR):
            yield PaperLine(place(f"[QR {command.data}]"), kind="qr")


def preview_text(sequence: CommandSequence, width: int = PRINTER_LINE_WIDTH) -> Text:
    """Render a sequence as rich Text for terminal output."""
    text = Text()
    for idx, line in enumerate(paper_lines(sequence, width)):
        if idx > 0:
            text.append("\n")
        if line.kind == "cut":
            text.append(line.text, style="dim")
        elif line.kind in {"barcode", "qr"}:
            text.append(line.text, style="bold cyan")
        elif line.bold or line.scale > 1:
            text.append(line.text, style="bold")
        else:
            text.append(line.text)
    return text


def resolve_preview_font_path() -> str | None:
    """
    Resolve a monospace font for raster previews.

    Resolution order:
    1. RECEIPT_PREVIEW_FONT_PATH (if set)
    2. PREVIEW_FONT_PATH
    3. Known Linux fallbacks

    Returns None when nothing is found; Pillow's built-in font is used then.
    """
    env_override = os.environ.get(_FONT_OVERRIDE_ENV, "").strip()
    candidates: list[str] = []
    if env_override:
        candidates.append(env_override)
    candidates.append(PREVIEW_FONT_PATH)
    candidates.extend(_LINUX_FONT_FALLBACKS)

    for candidate in candidates:
        if candidate and Path(candidate).is_file():
            return candidate
    return None


def _load_font(size: int) -> object:
    from PIL import ImageFont

    font_path = resolve_preview_font_path()
    if font_path is None:
        return ImageFont.load_default()
    return ImageFont.truetype(font_path, size)


def preview_image(sequence: CommandSequence, width: int = PRINTER_LINE_WIDTH) -> object:
    """Render a sequence onto a 1-bit image the width of the paper roll."""
    from PIL import Image, ImageDraw

    font = _load_font(PREVIEW_FONT_SIZE)
    probe = ImageDraw.Draw(Image.new("1", (1, 1), color=1))
    bbox = probe.textbbox((0, 0), "Mg", font=font)
    line_px = (bbox[3] - bbox[1]) + _LINE_GAP_PX

    lines = list(paper_lines(sequence, width))
    heights = [line_px * line.scale for line in lines]
    img = Image.new("1", (PREVIEW_WIDTH_PX, max(1, sum(heights) + _LINE_GAP_PX)), color=1)
    draw = ImageDraw.Draw(img)

    y = _LINE_GAP_PX // 2
    for line, height in zip(lines, heights):
        # Offset by bbox top so descenders are not clipped.
        text_y = y + (height - line_px) // 2 - bbox[1]
        draw.text((_LEFT_INDENT_PX, text_y), line.text, font=font, fill=0)
        if line.bold:
            draw.text((_LEFT_INDENT_PX + 1, text_y), line.text, font=font, fill=0)
        y += height
    return img
