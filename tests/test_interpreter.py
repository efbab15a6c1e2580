import pytest

from glist_errors import AllocationError, KindMismatchError, PayloadValueError
from glist_interpreter import GlistInterpreter


@pytest.fixture
def interpreter():
    return GlistInterpreter()


def run(interpreter, *lines):
    return [interpreter.repl(line) for line in lines]


def test_int32_session(interpreter):
    assert run(interpreter,
               "add xs int32 3",
               "add xs int32 2 5",
               "count xs",
               "show xs",
               "reverse xs",
               "tail xs",
               "has xs 2",
               "has xs 7") == [
        "int32(3)",
        "int32(5 2 3)",
        "3",
        "int32(5 2 3)",
        "int32(3 2 5)",
        "5",
        "true",
        "false",
    ]


def test_unknown_names_are_empty(interpreter):
    assert run(interpreter, "count nothing", "tail nothing", "has nothing 1", "show nothing", "reverse nothing") == [
        "0", "none", "false", "()", "()",
    ]


def test_float_lists(interpreter):
    assert interpreter.repl("add fs float32 0.5 -1.25") == "float32(-1.25 0.5)"
    assert interpreter.repl("has fs 0.5") == "true"
    assert interpreter.repl("add ds float64 0.1") == "float64(0.1)"


def test_ptr_lists_use_blocks(interpreter):
    assert interpreter.repl("add s ptr 'ab' 'cd'") == "ptr('cd' 'ab')"
    assert interpreter.repl("tail s") == "'ab'"
    # identity comparison: a freshly typed string is never the stored block
    assert interpreter.repl("has s 'ab'") == "false"
    assert interpreter.blocks.live == 2
    assert interpreter.repl("drop s") == "2"
    assert interpreter.blocks.live == 0
    assert interpreter.allocator.live == 0
    assert interpreter.repl("count s") == "0"


def test_ptr_values_are_truncated_to_block_size():
    interpreter = GlistInterpreter(block_size=4)
    assert interpreter.repl("add s ptr 'abcdefgh'") == "ptr('abcd')"


def test_free(interpreter):
    run(interpreter, "add xs uint32 1 2 3")
    assert interpreter.repl("free xs") == "3"
    assert interpreter.repl("count xs") == "0"
    assert interpreter.allocator.live == 0
    assert interpreter.repl("free xs") == "0"


def test_drop_rejects_numeric_lists(interpreter):
    run(interpreter, "add xs int32 1 2")
    with pytest.raises(KindMismatchError):
        interpreter.repl("drop xs")
    assert interpreter.repl("show xs") == "int32(2 1)"


def test_capacity_failure_keeps_earlier_insertions():
    interpreter = GlistInterpreter(node_capacity=2)
    with pytest.raises(AllocationError):
        interpreter.repl("add xs int32 1 2 3")
    assert interpreter.repl("show xs") == "int32(2 1)"


def test_ptr_block_is_returned_when_node_allocation_fails():
    interpreter = GlistInterpreter(node_capacity=0)
    with pytest.raises(AllocationError):
        interpreter.repl("add s ptr 'x'")
    assert interpreter.blocks.live == 0


def test_kind_errors(interpreter):
    run(interpreter, "add xs int32 1")
    with pytest.raises(KindMismatchError):
        interpreter.repl("add xs uint32 2")
    with pytest.raises(PayloadValueError):
        interpreter.repl("add ys uint32 -1")
    assert interpreter.repl("has xs 1.5") == "false"
    with pytest.raises(ValueError):
        interpreter.repl("add ys int8 1")
    with pytest.raises(ValueError):
        interpreter.repl("add ys ptr 3")


def test_lists_and_stats(interpreter):
    run(interpreter, "add xs int32 1 2", "add fs float64 1.5")
    assert interpreter.repl("lists") == "fs=(float64 1) xs=(int32 2)"
    assert interpreter.repl("stats") == "nodes=3 node_capacity=none blocks=0 block_size=64"


@pytest.mark.parametrize("line", ["count", "add xs int32", "show xs ys", "stats now"])
def test_malformed_commands(interpreter, line):
    with pytest.raises(ValueError):
        interpreter.repl(line)


def test_comment_lines_do_nothing(interpreter):
    assert interpreter.repl("; nothing") is None


def test_init_resets_state(interpreter):
    run(interpreter, "add xs int32 1")
    interpreter.init()
    assert interpreter.repl("count xs") == "0"
    assert interpreter.allocator.live == 0


def test_quick_eval():
    assert GlistInterpreter.quick_eval("add xs int32 4 5", node_capacity=4) == "int32(5 4)"


def test_load_file(interpreter, tmp_path, capsys):
    script = tmp_path / "prelude.gl"
    script.write_text("add xs int32 3\n\n; comment\nadd xs int32 2\n")
    interpreter.load_file(str(script))
    assert interpreter.repl("show xs") == "int32(2 3)"
    assert "add xs int32 2" in capsys.readouterr().out
