"""
Lexer — splits CMake listfile text into positioned tokens.

Every character of the input belongs to exactly one token, so joining
the token texts reproduces the input.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass


class TokenType(enum.Enum):
    IDENTIFIER = "identifier"
    PAREN_LEFT = "paren_left"
    PAREN_RIGHT = "paren_right"
    ARGUMENT_QUOTED = "argument_quoted"
    ARGUMENT_UNQUOTED = "argument_unquoted"
    ARGUMENT_BRACKET = "argument_bracket"
    SPACE = "space"
    NEWLINE = "newline"
    COMMENT_LINE = "comment_line"
    COMMENT_BRACKET = "comment_bracket"
    BAD_STRING = "bad_string"
    BAD_BRACKET = "bad_bracket"
    BAD_CHARACTER = "bad_character"


BAD_TOKENS = frozenset({
    TokenType.BAD_STRING,
    TokenType.BAD_BRACKET,
    TokenType.BAD_CHARACTER,
})


@dataclass(frozen=True)
class Token:
    """A lexical token with its 1-based start position."""
    type: TokenType
    text: str
    line: int
    column: int


# Order matters: bracket forms before their line/unquoted fallbacks.
_TOKEN_RE = re.compile(
    r"""
    (?P<comment_bracket>\#\[(?P<ceq>=*)\[.*?\](?P=ceq)\])
    |(?P<comment_line>\#[^\n]*)
    |(?P<argument_bracket>\[(?P<beq>=*)\[.*?\](?P=beq)\])
    |(?P<argument_quoted>"(?:[^"\\]|\\.)*")
    |(?P<newline>\n)
    |(?P<space>[ \t\r]+)
    |(?P<paren_left>\()
    |(?P<paren_right>\))
    |(?P<argument_unquoted>(?:[^\s()#"\\]|\\[^\n])+)
    """,
    re.VERBOSE | re.DOTALL,
)

_BAD_BRACKET_RE = re.compile(r"\#?\[=*\[")
_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

_GROUP_TYPES = {
    "comment_bracket": TokenType.COMMENT_BRACKET,
    "comment_line": TokenType.COMMENT_LINE,
    "argument_bracket": TokenType.ARGUMENT_BRACKET,
    "argument_quoted": TokenType.ARGUMENT_QUOTED,
    "newline": TokenType.NEWLINE,
    "space": TokenType.SPACE,
    "paren_left": TokenType.PAREN_LEFT,
    "paren_right": TokenType.PAREN_RIGHT,
    "argument_unquoted": TokenType.ARGUMENT_UNQUOTED,
}


def tokenize(text: str) -> list[Token]:
    """Scan *text* into a list of tokens.

    Unterminated quoted or bracket constructs produce a single
    ``BAD_STRING`` / ``BAD_BRACKET`` token spanning the rest of the
    input; a stray character produces ``BAD_CHARACTER``. The scanner
    itself never fails, callers decide what to do with bad tokens.
    """
    tokens: list[Token] = []
    pos = 0
    line = 1
    column = 1
    length = len(text)

    while pos < length:
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            token_type, end = _scan_bad(text, pos)
        else:
            token_type = _GROUP_TYPES[match.lastgroup]
            end = match.end()
            # An unterminated bracket opener must not decay into a
            # line comment or an unquoted argument.
            if token_type in (TokenType.COMMENT_LINE,
                              TokenType.ARGUMENT_UNQUOTED) \
                    and _BAD_BRACKET_RE.match(text, pos):
                token_type, end = TokenType.BAD_BRACKET, length

        token_text = text[pos:end]
        if token_type == TokenType.ARGUMENT_UNQUOTED \
                and _IDENTIFIER_RE.fullmatch(token_text):
            token_type = TokenType.IDENTIFIER

        tokens.append(Token(token_type, token_text, line, column))

        newlines = token_text.count("\n")
        if newlines:
            line += newlines
            column = len(token_text) - token_text.rfind("\n")
        else:
            column += len(token_text)
        pos = end

    return tokens


def _scan_bad(text: str, pos: int) -> tuple[TokenType, int]:
    """Classify the unmatched input at *pos*."""
    if text[pos] == '"':
        return TokenType.BAD_STRING, len(text)
    return TokenType.BAD_CHARACTER, pos + 1
