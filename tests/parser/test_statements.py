"""Tests for the statement parser."""

import logging

import pytest

from cmakelists_edit.parser.lexer import tokenize
from cmakelists_edit.parser.statements import (
    ParseError, parse_statements, read_cmake_file,
)


def _parse(text: str):
    return parse_statements(tokenize(text))


def _span_text(text: str, statement) -> str:
    lines = text.split("\n")
    if statement.start_line == statement.end_line:
        line = lines[statement.start_line - 1]
        return line[statement.start_column - 1:statement.end_column]
    parts = [lines[statement.start_line - 1][statement.start_column - 1:]]
    parts.extend(lines[statement.start_line:statement.end_line - 1])
    parts.append(lines[statement.end_line - 1][:statement.end_column])
    return "\n".join(parts)


SAMPLE = """\
cmake_minimum_required(VERSION 3.16)

# sources
TARGET_SOURCES (main PRIVATE
    a.cpp
    "b c.cpp"
 )
add_executable(tool [[raw]] tool.cpp)
"""


class TestParseStatements:
    def test_statement_names_and_spelling(self):
        statements = _parse(SAMPLE)
        assert [s.name for s in statements] == [
            "cmake_minimum_required", "target_sources", "add_executable",
        ]
        assert statements[1].spelling == "TARGET_SOURCES"

    def test_arguments_and_separators(self):
        statement = _parse(SAMPLE)[1]
        assert [a.value for a in statement.arguments] == [
            "main", "PRIVATE", "a.cpp", "b c.cpp",
        ]
        assert [a.separator for a in statement.arguments] == [
            "", " ", "\n    ", "\n    ",
        ]
        assert statement.arguments[3].quoted is True
        assert statement.leading_space == " "
        assert statement.trailing_space == "\n "

    def test_spans(self):
        statements = _parse(SAMPLE)
        ts = statements[1]
        assert (ts.start_line, ts.start_column) == (4, 1)
        assert (ts.end_line, ts.end_column) == (7, 2)
        tool = statements[2]
        assert (tool.start_line, tool.end_line) == (8, 8)

    def test_to_string_reproduces_source(self):
        for statement in _parse(SAMPLE):
            assert statement.to_string() == _span_text(SAMPLE, statement)

    def test_bracket_argument_value(self):
        tool = _parse(SAMPLE)[2]
        assert tool.arguments[1].value == "raw"
        assert tool.arguments[1].source_text() == "[[raw]]"

    def test_nested_parens_become_arguments(self):
        statement = _parse("if((a) AND b)\nendif()")[0]
        assert [a.value for a in statement.arguments] == [
            "(", "a", ")", "AND", "b",
        ]

    def test_comments_fold_into_separator(self):
        text = "target_sources(main PRIVATE\n    a.cpp # first\n    b.cpp\n)"
        statement = _parse(text)[0]
        assert statement.arguments[3].separator == " # first\n    "
        assert statement.to_string() == text

    def test_comment_before_closing_paren(self):
        text = "foo(a\n  #[[note]]\n)"
        statement = _parse(text)[0]
        assert statement.trailing_space == "\n  #[[note]]\n"

    def test_identifier_not_at_line_start_is_ignored(self):
        statements = _parse("foo() bar()\nbaz()")
        assert [s.name for s in statements] == ["foo", "baz"]

    def test_top_level_comments_are_skipped(self):
        assert _parse("# only a comment\n\n") == []


class TestParseErrors:
    @pytest.mark.parametrize("text", [
        "foo(a b",
        "foo bar()",
        "foo\n(a)",
        'foo("abc)',
        "foo([[abc)",
        "\\\nfoo()",
        "foo",
    ])
    def test_invalid_input_raises(self, text):
        with pytest.raises(ParseError):
            _parse(text)

    def test_error_carries_statement_name(self):
        with pytest.raises(ParseError) as exc_info:
            _parse("first()\nSecond(a\n")
        assert exc_info.value.name == "second"


class TestReadCMakeFile:
    def test_success(self):
        statements, error = read_cmake_file(SAMPLE)
        assert error is False
        assert len(statements) == 3

    def test_failure_returns_empty_and_logs(self, caplog):
        with caplog.at_level(logging.ERROR):
            statements, error = read_cmake_file("project(x)\nadd_library(x a.cpp\n")
        assert error is True
        assert statements == []
        assert "Error while parsing" in caplog.text
        assert "add_library" in caplog.text
