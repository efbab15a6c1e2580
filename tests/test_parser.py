import pytest

from glist import Empty, GList
from glist_parser import Command, CommandParser, Op, Symbol, print_value
from glist_payload import PayloadKind


@pytest.fixture
def parser():
    return CommandParser()


def test_parse_add(parser):
    assert parser.parse("add xs int32 3 -2 +5") == Command(Op.ADD, (Symbol("xs"), Symbol("int32"), 3, -2, 5))


def test_parse_numbers(parser):
    command = parser.parse("add xs float64 1e3 -0.5 0x10 1_000")
    assert command.args[2:] == (1000.0, -0.5, 16, 1000)
    assert isinstance(command.args[2], float)


def test_parse_strings(parser):
    command = parser.parse("add s ptr 'hello world' \"x\"")
    assert command.args == (Symbol("s"), Symbol("ptr"), "hello world", "x")


@pytest.mark.parametrize("line", ["", "   ", "# just a comment", "; also a comment"])
def test_blank_lines(parser, line):
    assert parser.parse(line) is None


def test_trailing_comments_are_dropped(parser):
    assert parser.parse("count xs ; how many") == Command(Op.COUNT, (Symbol("xs"),))
    assert parser.parse("count xs # how many") == Command(Op.COUNT, (Symbol("xs"),))


def test_commands_without_arguments(parser):
    assert parser.parse("stats") == Command(Op.STATS)


@pytest.mark.parametrize("line", [
    "xs count",
    "42",
    "add xs int32 -",
    "add xs int32 - - 3",
    "add xs int32 -abc",
    "add xs int32 (3)",
    "add xs 'unterminated",
])
def test_malformed_lines(parser, line):
    with pytest.raises(ValueError):
        parser.parse(line)


def test_print_value():
    assert print_value(None) == "none"
    assert print_value(True) == "true"
    assert print_value(3) == "3"
    assert print_value("a") == "'a'"
    assert print_value(Command(Op.TAIL, (Symbol("xs"),))) == "tail xs"
    assert print_value({"nodes": 2, "cap": None}) == "nodes=2 cap=none"
    assert print_value(GList.of(PayloadKind.INT32, 1, 2)) == "(1 2)"
    assert print_value(Empty()) == "()"
