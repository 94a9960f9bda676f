"""
Parsed listfile content — command invocations and their arguments.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


def unescape_value(value: str) -> str:
    """Resolve backslash escapes (``\\n``, ``\\r``, ``\\t``, ``\\x`` -> ``x``)."""
    first = value.find("\\")
    if first < 0:
        return value

    parts: list[str] = []
    last = 0
    i = first
    while 0 <= i < len(value) - 1:
        parts.append(value[last:i])
        current = value[i + 1]
        parts.append(_ESCAPES.get(current, current))
        last = i + 2
        i = value.find("\\", last)
    parts.append(value[last:])
    return "".join(parts)


@dataclass
class Argument:
    """One argument of a command invocation.

    ``separator`` is the whitespace (and folded comments) that preceded
    the argument in the source. It is cosmetic and does not take part in
    equality.
    """
    value: str
    quoted: bool = False
    separator: str = field(default="", compare=False)
    # Source spelling, kept so unchanged arguments serialise verbatim.
    raw: Optional[str] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_source(
        cls,
        text: str,
        quoted: bool = False,
        separator: str = "",
        bracket: bool = False,
    ) -> "Argument":
        """Build an argument from its raw token text.

        Quoted tokens carry their surrounding quotes and bracket tokens
        their ``[=[``/``]=]`` delimiters in *text*.
        """
        if quoted:
            value = unescape_value(text[1:-1])
        elif bracket:
            open_len = text.index("[", 1) + 1
            value = text[open_len:len(text) - open_len]
            if value.startswith("\n"):
                value = value[1:]
        else:
            value = unescape_value(text)
        return cls(value=value, quoted=quoted, separator=separator, raw=text)

    def matches(self, value: str) -> bool:
        return self.value == value

    def set_value(self, value: str) -> None:
        self.value = value
        self.raw = None

    def source_text(self) -> str:
        """The argument as it appears in a listfile, without separator."""
        if self.raw is not None:
            return self.raw
        if self.quoted:
            return f'"{self.value}"'
        return self.value

    def copy(self) -> "Argument":
        return Argument(self.value, self.quoted, self.separator, self.raw)


@dataclass
class Statement:
    """A command invocation ``name(args...)`` and its source span.

    Positions are 1-based and inclusive; the end position is the closing
    parenthesis. Statements created programmatically have no span.
    """
    name: str
    arguments: list[Argument] = field(default_factory=list)
    start_line: Optional[int] = None
    start_column: Optional[int] = None
    end_line: Optional[int] = None
    end_column: Optional[int] = None
    leading_space: str = ""
    trailing_space: str = ""
    spelling: str = ""

    def __post_init__(self) -> None:
        if not self.spelling:
            self.spelling = self.name
        self.name = self.name.lower()

    @property
    def has_span(self) -> bool:
        return self.start_line is not None

    def add_argument(self, argument: Argument) -> None:
        self.arguments.append(argument)

    def to_string(self) -> str:
        args = "".join(
            arg.separator + arg.source_text() for arg in self.arguments
        )
        return (
            f"{self.spelling}{self.leading_space}("
            f"{args}{self.trailing_space})"
        )
