"""CMake listfile parsing — tokens, statements and arguments."""

from .lexer import Token, TokenType, tokenize
from .content import Argument, Statement, unescape_value
from .statements import ParseError, parse_statements, read_cmake_file

__all__ = [
    "Token", "TokenType", "tokenize",
    "Argument", "Statement", "unescape_value",
    "ParseError", "parse_statements", "read_cmake_file",
]
