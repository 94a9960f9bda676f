"""
Statement parser — groups lexer tokens into command invocations.

Only the outer shape of each command is recognised: a name at the start
of a line followed by a balanced parenthesised argument list. Anything
that does not fit fails the whole file; there is no recovery.
"""

from __future__ import annotations

import logging
from typing import Iterator

from .content import Argument, Statement
from .lexer import BAD_TOKENS, Token, TokenType, tokenize

logger = logging.getLogger(__name__)

_ARGUMENT_TOKENS = frozenset({
    TokenType.IDENTIFIER,
    TokenType.ARGUMENT_UNQUOTED,
    TokenType.ARGUMENT_QUOTED,
    TokenType.ARGUMENT_BRACKET,
})

# Folded into the separator of the next argument.
_SEPARATOR_TOKENS = frozenset({
    TokenType.SPACE,
    TokenType.NEWLINE,
    TokenType.COMMENT_LINE,
    TokenType.COMMENT_BRACKET,
})


class ParseError(Exception):
    """Raised when the token stream is not a valid listfile."""

    def __init__(self, message: str, name: str = "", line: int = 0) -> None:
        super().__init__(message)
        self.name = name
        self.line = line


def parse_statements(tokens: list[Token]) -> list[Statement]:
    """Parse *tokens* into the ordered list of statements.

    Raises
    ------
    ParseError
        On a bad token, a name not followed by ``(``, or a statement
        whose parentheses never balance.
    """
    statements: list[Statement] = []
    stream = iter(tokens)
    have_newline = True

    for token in stream:
        if token.type in BAD_TOKENS:
            raise ParseError(
                f"unexpected {token.type.value} {token.text[:20]!r}",
                line=token.line,
            )
        if token.type == TokenType.NEWLINE:
            have_newline = True
        elif token.type == TokenType.IDENTIFIER and have_newline:
            have_newline = False
            statement = Statement(
                name=token.text,
                start_line=token.line,
                start_column=token.column,
            )
            _read_statement(stream, statement)
            statements.append(statement)

    return statements


def _read_statement(stream: Iterator[Token], statement: Statement) -> None:
    """Consume tokens after the command name up to the closing paren."""
    separator = ""
    last_line = statement.start_line or 0

    for token in stream:
        last_line = token.line
        if token.type == TokenType.SPACE:
            separator += token.text
        elif token.type == TokenType.PAREN_LEFT:
            break
        else:
            raise ParseError(
                f"expected '(' after {statement.spelling}, got {token.type.value}",
                statement.name, token.line,
            )
    else:
        raise ParseError(
            f"unexpected end of file after {statement.spelling}",
            statement.name, last_line,
        )

    statement.leading_space = separator
    separator = ""
    depth = 1

    for token in stream:
        last_line = token.line
        ttype = token.type

        if ttype in _SEPARATOR_TOKENS:
            separator += token.text
            continue

        if ttype == TokenType.PAREN_RIGHT:
            depth -= 1
            if depth == 0:
                statement.trailing_space = separator
                statement.end_line = token.line
                statement.end_column = token.column
                return
            statement.add_argument(
                Argument.from_source(token.text, separator=separator)
            )
        elif ttype == TokenType.PAREN_LEFT:
            depth += 1
            statement.add_argument(
                Argument.from_source(token.text, separator=separator)
            )
        elif ttype in _ARGUMENT_TOKENS:
            statement.add_argument(Argument.from_source(
                token.text,
                quoted=ttype == TokenType.ARGUMENT_QUOTED,
                separator=separator,
                bracket=ttype == TokenType.ARGUMENT_BRACKET,
            ))
        else:
            raise ParseError(
                f"unexpected {ttype.value} inside {statement.spelling}",
                statement.name, token.line,
            )
        separator = ""

    raise ParseError(
        f"unterminated {statement.spelling}", statement.name, last_line,
    )


def read_cmake_file(text: str) -> tuple[list[Statement], bool]:
    """Tokenize and parse *text*.

    Returns
    -------
    tuple[list[Statement], bool]
        The statements and an error flag. On error the list is empty;
        the failure is logged, never raised.
    """
    try:
        return parse_statements(tokenize(text)), False
    except ParseError as exc:
        logger.error(
            "[CMakeParse] Error while parsing: %s at line %d: %s",
            exc.name or "<toplevel>", exc.line, exc,
        )
        return [], True
