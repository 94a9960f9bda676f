"""Tests for arguments, statements and unescaping."""

import pytest

from cmakelists_edit.parser.content import Argument, Statement, unescape_value


class TestUnescape:
    @pytest.mark.parametrize("raw,expected", [
        ("plain.cpp", "plain.cpp"),
        ("a\\nb", "a\nb"),
        ("a\\tb\\rc", "a\tb\rc"),
        ("a\\;b", "a;b"),
        ("a\\\\b", "a\\b"),
        ("trailing\\", "trailing\\"),
    ])
    def test_unescape(self, raw, expected):
        assert unescape_value(raw) == expected


class TestArgument:
    def test_equality_ignores_separator(self):
        assert Argument("a.cpp", False, " ") == Argument("a.cpp", False, "\n  ")

    def test_equality_considers_quoting(self):
        assert Argument("a.cpp", True) != Argument("a.cpp", False)

    def test_from_source_quoted(self):
        arg = Argument.from_source('"my\\tfile.cpp"', quoted=True, separator=" ")
        assert arg.value == "my\tfile.cpp"
        assert arg.quoted is True
        assert arg.separator == " "
        assert arg.source_text() == '"my\\tfile.cpp"'

    def test_from_source_bracket(self):
        arg = Argument.from_source("[==[\nx]]y]==]", bracket=True)
        assert arg.value == "x]]y"
        assert arg.quoted is False
        assert arg.source_text() == "[==[\nx]]y]==]"

    def test_from_source_unquoted_escape_kept_in_source_text(self):
        arg = Argument.from_source("a\\;b")
        assert arg.value == "a;b"
        assert arg.source_text() == "a\\;b"

    def test_set_value_drops_source_spelling(self):
        arg = Argument.from_source('"old.cpp"', quoted=True)
        arg.set_value("new.cpp")
        assert arg.source_text() == '"new.cpp"'

    def test_matches(self):
        assert Argument("src/a.cpp").matches("src/a.cpp")
        assert not Argument("src/a.cpp").matches("a.cpp")

    def test_empty_argument_is_truthy(self):
        arg = Argument("")
        assert arg
        assert (arg or None) is arg

    def test_copy_is_independent(self):
        arg = Argument("a.cpp", False, " ")
        copy = arg.copy()
        copy.separator = "\n"
        assert arg.separator == " "
        assert copy == arg


class TestStatement:
    def test_name_is_lower_cased_spelling_kept(self):
        statement = Statement("Add_Executable")
        assert statement.name == "add_executable"
        assert statement.spelling == "Add_Executable"

    def test_new_statement_has_no_span(self):
        assert Statement("target_sources").has_span is False

    def test_to_string(self):
        statement = Statement(
            "target_sources",
            [
                Argument("main"),
                Argument("PRIVATE", False, " "),
                Argument("a b.cpp", True, "\n  "),
            ],
            trailing_space="\n",
        )
        assert statement.to_string() == 'target_sources(main PRIVATE\n  "a b.cpp"\n)'

    def test_add_argument(self):
        statement = Statement("foo")
        statement.add_argument(Argument("x"))
        assert statement.to_string() == "foo(x)"
