"""Abstract printer commands and the builder that accumulates them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union

from receipt_print.barcode import EAN13, BarcodeOptions, QROptions


@dataclass(frozen=True)
class AlignLeft:
    pass


@dataclass(frozen=True)
class AlignCenter:
    pass


@dataclass(frozen=True)
class AlignRight:
    pass


@dataclass(frozen=True)
class Bold:
    on: bool


@dataclass(frozen=True)
class TextSize:
    """Character magnification; 0 is normal size, 7 is eight times."""

    width: int
    height: int

    def __post_init__(self) -> None:
        for value in (self.width, self.height):
            if not 0 <= value <= 7:
                raise ValueError("text size must be between 0 and 7")


@dataclass(frozen=True)
class TextNormal:
    pass


@dataclass(frozen=True)
class Println:
    text: str


@dataclass(frozen=True)
class LeftRight:
    left: str
    right: str


@dataclass(frozen=True)
class DrawLine:
    pass


@dataclass(frozen=True)
class NewLine:
    pass


@dataclass(frozen=True)
class Cut:
    pass


@dataclass(frozen=True)
class PrintBarcode:
    data: str
    symbology: str = EAN13
    options: BarcodeOptions = field(default_factory=BarcodeOptions)


@dataclass(frozen=True)
class PrintQR:
    data: str
    options: QROptions = field(default_factory=QROptions)


Command = Union[
    AlignLeft,
    AlignCenter,
    AlignRight,
    Bold,
    TextSize,
    TextNormal,
    Println,
    LeftRight,
    DrawLine,
    NewLine,
    Cut,
    PrintBarcode,
    PrintQR,
]


@dataclass(frozen=True)
class CommandSequence:
    """An immutable, ordered list of commands; emission order is print order."""

    commands: tuple[Command, ...] = ()

    def __iter__(self) -> Iterator[Command]:
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)

    def __getitem__(self, index: int) -> Command:
        return self.commands[index]


class CommandBuilder:
    """Single-use accumulator: append commands, then finish() once."""

    def __init__(self) -> None:
        self._commands: list[Command] = []
        self._finished = False

    def append(self, command: Command) -> None:
        if self._finished:
            raise RuntimeError("CommandBuilder already finished")
        self._commands.append(command)

    def extend(self, commands: list[Command]) -> None:
        for command in commands:
            self.append(command)

    def finish(self) -> CommandSequence:
        if self._finished:
            raise RuntimeError("CommandBuilder already finished")
        self._finished = True
        return CommandSequence(tuple(self._commands))

    def align_left(self) -> None:
        self.append(AlignLeft())

    def align_center(self) -> None:
        self.append(AlignCenter())

    def align_right(self) -> None:
        self.append(AlignRight())

    def bold(self, on: bool) -> None:
        self.append(Bold(on))

    def text_size(self, width: int, height: int) -> None:
        self.append(TextSize(width, height))

    def text_normal(self) -> None:
        self.append(TextNormal())

    def println(self, text: str) -> None:
        self.append(Println(text))

    def left_right(self, left: str, right: str) -> None:
        self.append(LeftRight(left, right))

    def draw_line(self) -> None:
        self.append(DrawLine())

    def new_line(self) -> None:
        self.append(NewLine())

    def cut(self) -> None:
        self.append(Cut())


def justify(left: str, right: str, width: int) -> str:
    """Format left and right text on one line of `width` characters.

    The right text is never shortened; the left text is cut to leave at
    least one space between the two.
    """
    room = width - len(right) - 1
    if room <= 0:
        return right[-width:] if width > 0 else ""
    if len(left) > room:
        left = left[:room]
    return f"{left}{' ' * (width - len(left) - len(right))}{right}"
