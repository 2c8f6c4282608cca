# tests/test_parser.py
import time

import pytest

from graceful.commands.errors import ArgumentError, CircularAliasError, CommandNotFoundError, TemplateError
from graceful.commands.parser import InvocationParser, shape_arguments, substitute_positionals
from graceful.commands.registry import CommandRegistry


def noop(context, *args):
    return None


@pytest.fixture
def registry():
    reg = CommandRegistry()
    reg.define("pick", noop, template="{count:number} {...items:array<string>}")
    reg.define("split_v", noop, template="{link:boolean}")
    reg.define("split_h", noop, template="{link:boolean}")
    reg.alias("sb", "split_v {0}\nsplit_h {0}")
    return reg


@pytest.fixture
def parser(registry):
    return InvocationParser(registry)


def _raises(step, error_type):
    with pytest.raises(error_type):
        step.command.handler(None, *step.arguments)


def test_number_and_array_rest(parser):
    steps = parser.resolve("pick 3 [a, b, c]")

    assert len(steps) == 1
    assert steps[0].name == "pick"
    assert steps[0].arguments == [3.0, ["a", "b", "c"]]


def test_repeated_arrays_in_rest_are_concatenated(parser):
    steps = parser.resolve("pick 1 [a] ['b c', d]")
    assert steps[0].arguments == [1.0, ["a", "b c", "d"]]


def test_alias_expands_to_one_step_per_line(parser):
    steps = parser.resolve("sb true")

    assert [s.name for s in steps] == ["split_v", "split_h"]
    assert [s.arguments for s in steps] == [[True], [True]]


def test_names_are_case_insensitive(parser):
    steps = parser.resolve("SB no")
    assert [s.arguments for s in steps] == [[False], [False]]


def test_lines_resolve_in_order(parser):
    steps = parser.resolve("split_h yes\r\n\n  \nsb n\rsplit_v y")
    assert [s.name for s in steps] == ["split_h", "split_v", "split_h", "split_v"]
    assert [s.arguments[0] for s in steps] == [True, False, False, True]


def test_unrecognized_command_yields_failing_step(parser):
    steps = parser.resolve("bogus 1 2")

    assert len(steps) == 1
    assert steps[0].name == "bogus"
    assert steps[0].command.unrecognized
    _raises(steps[0], CommandNotFoundError)


def test_self_referencing_alias(registry, parser):
    registry.alias("a", "a")
    with pytest.raises(CircularAliasError) as exc:
        parser.resolve("a")
    assert exc.value.chain == ["a", "a"]


def test_indirect_alias_cycle(registry, parser):
    registry.alias("a", "b")
    registry.alias("b", "a")
    with pytest.raises(CircularAliasError) as exc:
        parser.resolve("a")
    assert exc.value.chain == ["a", "b", "a"]


def test_same_alias_twice_in_one_batch_is_not_a_cycle(parser):
    steps = parser.resolve("sb y\nsb n")
    assert len(steps) == 4


def test_boolean_cast_failure(parser):
    steps = parser.resolve("split_v maybe")

    assert steps[0].name == "split_v"
    assert not steps[0].command.unrecognized
    _raises(steps[0], ArgumentError)


def test_missing_required_argument(parser):
    steps = parser.resolve("split_v")
    _raises(steps[0], ArgumentError)


def test_rest_element_cast_failure(registry, parser):
    registry.define("sum", noop, template="{...values:array<number>}")
    _raises(parser.resolve("sum [1, x]")[0], ArgumentError)
    assert parser.resolve("sum [1, 2] [3]")[0].arguments == [[1.0, 2.0, 3.0]]


def test_uncompilable_template_fails_on_invocation(registry, parser):
    registry.define("broken", noop, template="no placeholders")
    _raises(parser.resolve("broken")[0], TemplateError)


def test_templateless_commands_receive_raw_tokens(registry, parser):
    registry.define("say", noop, argument_count=-1)
    registry.define("pair", noop, argument_count=2)
    registry.define("bare", noop)

    assert parser.resolve("say hello, world")[0].arguments == ["hello, world"]
    assert parser.resolve("pair a b c")[0].arguments == ["a", "b c"]
    assert parser.resolve("bare ignored words")[0].arguments == []


def test_absent_optionals(registry, parser):
    registry.define("close", noop, template="{...panes?:string}")
    registry.define("open", noop, template="{path?:string}")

    assert parser.resolve("close")[0].arguments == [[]]
    assert parser.resolve("open")[0].arguments == [None]
    assert parser.resolve("close 1 2 'all but'")[0].arguments == [["1", "2", "all but"]]


def test_alias_missing_positional_becomes_empty(registry, parser):
    registry.define("save", noop, template="{path?:string}")
    registry.alias("w", "save {0}")

    assert parser.resolve("w")[0].arguments == [None]
    assert parser.resolve("w notes.txt")[0].arguments == ["notes.txt"]


def test_custom_delimiter(registry, parser):
    registry.define("move", noop, template="{x:number},{y:number}", delimiter=",")
    assert parser.resolve("move 3,4")[0].arguments == [3.0, 4.0]


@pytest.mark.parametrize("text,count,expected", [
    ("a b c", 0, []),
    ("a b c", -1, ["a b c"]),
    ("", -1, []),
    ("", 2, []),
    ("a b c", 2, ["a", "b c"]),
    ("a b", 5, ["a", "b"]),
])
def test_shape_arguments(text, count, expected):
    assert shape_arguments(text, " ", count) == expected


def test_substitute_positionals():
    assert substitute_positionals("move {1} {0} {1}", ["x", "y"]) == "move y x y"
    assert substitute_positionals("save {0}", []) == "save "


def test_long_rest_input_that_cannot_match_fails_quickly(registry, parser):
    registry.define("close", noop, template="{...panes?:string}")
    text = "close " + " ".join(f"w{i}" for i in range(30)) + " ,"

    started = time.perf_counter()
    steps = parser.resolve(text)
    elapsed = time.perf_counter() - started

    assert elapsed < 1.0
    assert len(steps) == 1
    _raises(steps[0], ArgumentError)


def test_rest_elements_are_validated_one_by_one(registry, parser):
    registry.define("close", noop, template="{...panes:string}")
    _raises(parser.resolve("close 1 , 2")[0], ArgumentError)
    assert parser.resolve("close 1 2")[0].arguments == [["1", "2"]]
