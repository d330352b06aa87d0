"""
Evaluator tests for the Schwift interpreter
"""

import io

import pytest

from error_handling import (
  SchwiftError,
  UnknownVariable,
  UnexpectedType,
  IndexOutOfBounds,
  IndexUnindexable,
  InputError,
  DivideByZero,
)
from interpreter import State, create_debug_interpreter, create_interpreter, run_program
from parsing import parse_expression, parse_program, parse_statement
from syntax_tree import If, ListIndex, Literal, Print, While
from values import make_bool, make_int, make_list, make_string


@pytest.fixture
def state():
  return create_interpreter(input_stream=io.StringIO(""), output_stream=io.StringIO())


def run_lines(state: State, source: str) -> None:
  state.run(parse_program(source))


class TestPrinting:
  """Test the print statement"""

  def test_print_hello(self, run_source):
    _, output = run_source('show me what you got "Hello"')
    assert output == "Hello\n"

  def test_print_values(self, run_source):
    source = "\n".join([
        "show me what you got 42",
        "show me what you got rick",
        "show me what you got morty",
        "xs on a cob",
        'xs assimilate "a"',
        "xs assimilate 1",
        "show me what you got xs",
    ])
    _, output = run_source(source)
    assert output == '42\nrick\nmorty\n["a", 1]\n'

  def test_print_evaluation_error_is_wrapped(self, state):
    statement = parse_statement("show me what you got missing")
    with pytest.raises(SchwiftError) as exc_info:
      state.execute(statement)
    assert exc_info.value.statement == statement
    assert isinstance(exc_info.value.kind, UnknownVariable)


class TestExpressions:
  """Test expression evaluation"""

  def test_list_length(self, state):
    state.symbols["apple"] = make_list([make_int(1), make_int(2), make_int(3)])
    assert state.evaluate(parse_expression("apple squanch")) == make_int(3)

  def test_string_length(self, state):
    state.symbols["s"] = make_string("squanchy")
    assert state.evaluate(parse_expression("s squanch")) == make_int(8)

  def test_length_of_int_is_unindexable(self, state):
    state.symbols["n"] = make_int(3)
    with pytest.raises(IndexUnindexable):
      state.evaluate(parse_expression("n squanch"))

  def test_string_index(self, state):
    state.symbols["s"] = make_string("rick")
    assert state.evaluate(parse_expression("s[2]")) == make_string("c")

  def test_index_with_non_int(self, state):
    state.symbols["xs"] = make_list([make_int(1)])
    with pytest.raises(UnexpectedType) as exc_info:
      state.evaluate(parse_expression('xs["0"]'))
    assert exc_info.value.expected == "int"

  def test_index_into_int(self, state):
    state.symbols["n"] = make_int(5)
    with pytest.raises(IndexUnindexable):
      state.evaluate(parse_expression("n[0]"))

  def test_index_unknown_name(self, state):
    with pytest.raises(UnknownVariable):
      state.evaluate(ListIndex("nope", Literal(make_int(0))))

  def test_negative_index(self, state):
    state.symbols["xs"] = make_list([make_int(1)])
    with pytest.raises(IndexOutOfBounds):
      state.evaluate(parse_expression("xs[0 - 1]"))

  @pytest.mark.parametrize("container", [
      make_list([make_int(7), make_int(8), make_int(9)]),
      make_string("abc"),
  ])
  def test_index_bounds(self, state, container):
    state.symbols["c"] = container
    length = len(container.value)
    for i in range(length):
      state.evaluate(ListIndex("c", Literal(make_int(i))))
    for i in range(length, length + 5):
      with pytest.raises(IndexOutOfBounds) as exc_info:
        state.evaluate(ListIndex("c", Literal(make_int(i))))
      assert exc_info.value.index == i

  def test_not(self, state):
    state.symbols["x"] = make_bool(False)
    assert state.evaluate(parse_expression("!x")) == make_bool(True)

  def test_not_requires_bool(self, state):
    with pytest.raises(UnexpectedType):
      state.evaluate(parse_expression("!1"))

  def test_negated_comparison(self, state):
    state.symbols["x"] = make_int(1)
    state.symbols["y"] = make_int(2)
    assert state.evaluate(parse_expression("!x == y")) == make_bool(True)

  def test_arithmetic(self, state):
    assert state.evaluate(parse_expression("2 + 3 * 4 - 6 / 2 % 2")) == make_int(13)

  def test_add_requires_ints(self, state):
    with pytest.raises(UnexpectedType):
      state.evaluate(parse_expression('1 + "a"'))

  def test_divide_by_zero(self, state):
    with pytest.raises(DivideByZero):
      state.evaluate(parse_expression("1 / 0"))

  def test_equality_across_types(self, state):
    assert state.evaluate(parse_expression('1 == "1"')) == make_bool(False)
    assert state.evaluate(parse_expression("rick == rick")) == make_bool(True)
    assert state.evaluate(parse_expression("1 != 2")) == make_bool(True)

  def test_list_equality_is_structural(self, state):
    state.symbols["a"] = make_list([make_int(1), make_string("x")])
    state.symbols["b"] = make_list([make_int(1), make_string("x")])
    assert state.evaluate(parse_expression("a == b")) == make_bool(True)

  def test_string_comparison(self, state):
    assert state.evaluate(parse_expression('"apple" < "banana"')) == make_bool(True)

  def test_comparison_of_mixed_types(self, state):
    with pytest.raises(UnexpectedType):
      state.evaluate(parse_expression('1 < "2"'))

  def test_logic_requires_bools(self, state):
    with pytest.raises(UnexpectedType):
      state.evaluate(parse_expression("rick and 1"))

  def test_logic_is_strict(self, state):
    # Both operands are always evaluated
    with pytest.raises(UnknownVariable):
      state.evaluate(parse_expression("rick or missing"))

  def test_logic(self, state):
    assert state.evaluate(parse_expression("rick and morty or rick")) == make_bool(True)


class TestListStatements:
  """Test list creation and mutation"""

  def test_assign_then_index(self, state):
    run_lines(state, "xs on a cob\nxs assimilate 1\nxs assimilate 2\nxs[1] squanch 5")
    assert state.evaluate(parse_expression("xs[1]")) == make_int(5)
    assert state.get("xs") == make_list([make_int(1), make_int(5)])

  def test_delete_shifts_elements(self, state):
    run_lines(state, "xs on a cob\nxs assimilate 1\nxs assimilate 2\nxs assimilate 3\nsquanch xs[1]")
    assert state.get("xs") == make_list([make_int(1), make_int(3)])
    assert state.evaluate(parse_expression("xs squanch")) == make_int(2)

  def test_assign_out_of_bounds(self, state):
    run_lines(state, "xs on a cob\nxs assimilate 1")
    with pytest.raises(SchwiftError) as exc_info:
      run_lines(state, "xs[1] squanch 5")
    assert isinstance(exc_info.value.kind, IndexOutOfBounds)
    assert exc_info.value.kind.container == make_list([make_int(1)])

  def test_delete_out_of_bounds(self, state):
    run_lines(state, "xs on a cob")
    with pytest.raises(SchwiftError) as exc_info:
      run_lines(state, "squanch xs[0]")
    assert isinstance(exc_info.value.kind, IndexOutOfBounds)

  def test_delete_with_non_int_index(self, state):
    run_lines(state, "xs on a cob\nxs assimilate 1")
    with pytest.raises(SchwiftError) as exc_info:
      run_lines(state, "squanch xs[rick]")
    assert isinstance(exc_info.value.kind, UnexpectedType)

  def test_append_to_unknown(self, state):
    with pytest.raises(SchwiftError) as exc_info:
      run_lines(state, "xs assimilate 1")
    assert isinstance(exc_info.value.kind, UnknownVariable)

  def test_reassigned_name_is_no_longer_a_list(self, state):
    run_lines(state, "xs on a cob\nxs squanch 3")
    for source in ("xs assimilate 1", "xs[0] squanch 1", "squanch xs[0]"):
      with pytest.raises(SchwiftError) as exc_info:
        run_lines(state, source)
      assert isinstance(exc_info.value.kind, IndexUnindexable)

  def test_list_new_overwrites(self, state):
    run_lines(state, "xs squanch 3\nxs on a cob")
    assert state.get("xs") == make_list()

  def test_strings_are_not_mutable_lists(self, state):
    run_lines(state, 's squanch "abc"')
    with pytest.raises(SchwiftError) as exc_info:
      run_lines(state, 's assimilate "d"')
    assert isinstance(exc_info.value.kind, IndexUnindexable)

  def test_values_are_copied(self, state):
    run_lines(state, "a on a cob\na assimilate 1\nb squanch a\nb assimilate 2")
    assert state.evaluate(parse_expression("a squanch")) == make_int(1)
    assert state.evaluate(parse_expression("b squanch")) == make_int(2)


class TestVariables:
  """Test assignment, deletion and lookup"""

  def test_assignment_overwrites(self, state):
    run_lines(state, "x squanch 1\nx squanch x + 1")
    assert state.get("x") == make_int(2)

  def test_deleted_variable_is_unknown(self, state):
    run_lines(state, "x squanch 1\nshoot x")
    for source in ("show me what you got x", "y squanch x", "shoot x", "x assimilate 1"):
      with pytest.raises(SchwiftError) as exc_info:
        run_lines(state, source)
      assert isinstance(exc_info.value.kind, UnknownVariable)
      assert exc_info.value.kind.name == "x"

    run_lines(state, "x squanch 2")
    assert state.get("x") == make_int(2)

  def test_never_assigned(self, state):
    with pytest.raises(UnknownVariable):
      state.get("ghost")


class TestInput:
  """Test the input statement"""

  def test_input_is_trimmed_string(self, run_source):
    state, _ = run_source("portal gun name", stdin="  Morty  \n")
    assert state.get("name") == make_string("Morty")

  def test_input_reads_one_line_each(self, run_source):
    state, output = run_source("portal gun a\nportal gun b\nshow me what you got b", stdin="1\n2\n")
    assert state.get("a") == make_string("1")
    assert output == "2\n"

  def test_input_at_end_of_stream(self, run_source):
    state, _ = run_source("portal gun a")
    assert state.get("a") == make_string("")

  def test_input_failure(self):
    class BrokenStream:
      def readline(self):
        raise OSError("device unplugged")

    state = create_interpreter(input_stream=BrokenStream(), output_stream=io.StringIO())
    with pytest.raises(SchwiftError) as exc_info:
      run_lines(state, "portal gun x")
    assert isinstance(exc_info.value.kind, InputError)
    assert "x" not in state.symbols

  def test_undecodable_input_is_input_error(self):
    stream = io.TextIOWrapper(io.BytesIO(b"\xff\xfe\n"), encoding="utf-8")
    state = create_interpreter(input_stream=stream, output_stream=io.StringIO())
    with pytest.raises(SchwiftError) as exc_info:
      run_lines(state, "portal gun x")
    assert isinstance(exc_info.value.kind, InputError)
    assert isinstance(exc_info.value.kind.cause, UnicodeDecodeError)

  def test_undecodable_input_is_recoverable(self):
    stream = io.TextIOWrapper(io.BytesIO(b"\xff\xfe\n"), encoding="utf-8")
    output = io.StringIO()
    state = create_interpreter(input_stream=stream, output_stream=output)
    run_lines(state, 'schwifty :< portal gun x >: getschwifty :< show me what you got "recovered" >:')
    assert output.getvalue() == "recovered\n"
    assert "x" not in state.symbols


class TestControlFlow:
  """Test if, while and catch"""

  def test_if_else(self, run_source):
    source = "x squanch 3\nif x == 3 :<\n  show me what you got 1\n>: else :<\n  show me what you got 2\n>:"
    _, output = run_source(source)
    assert output == "1\n"

  def test_if_false_without_else(self, run_source):
    _, output = run_source("if morty :<\n  show me what you got 1\n>:")
    assert output == ""

  def test_if_requires_bool(self, state):
    statement = parse_statement("if 1 :<\n  show me what you got 1\n>:")
    with pytest.raises(SchwiftError) as exc_info:
      state.execute(statement)
    assert isinstance(exc_info.value.kind, UnexpectedType)
    assert isinstance(exc_info.value.statement, If)

  def test_while_false_runs_zero_times(self, run_source):
    _, output = run_source("while morty :<\n  show me what you got 1\n>:")
    assert output == ""

  def test_while_terminates(self, run_source):
    state, output = run_source("i squanch 3\nwhile !i == 0 :<\n  show me what you got i\n  i squanch i - 1\n>:")
    assert output == "3\n2\n1\n"
    assert state.get("i") == make_int(0)

  def test_while_condition_error(self, state):
    statement = parse_statement("while x :<\n>:")
    with pytest.raises(SchwiftError) as exc_info:
      state.execute(statement)
    assert isinstance(exc_info.value.statement, While)

  def test_error_in_body_reports_inner_statement(self, state):
    with pytest.raises(SchwiftError) as exc_info:
      run_lines(state, "while rick :<\n  show me what you got nope\n>:")
    assert isinstance(exc_info.value.statement, Print)

  def test_catch_recovers(self, run_source):
    source = "\n".join([
        "x squanch 0",
        "schwifty :<",
        "  x squanch 1",
        "  show me what you got missing",
        "  x squanch 2",
        ">: getschwifty :<",
        '  show me what you got "caught"',
        ">:",
    ])
    state, output = run_source(source)
    assert output == "caught\n"
    # No rollback of effects before the failure
    assert state.get("x") == make_int(1)

  def test_catch_body_skipped_on_success(self, run_source):
    _, output = run_source("schwifty :<\n  show me what you got 1\n>: getschwifty :<\n  show me what you got 2\n>:")
    assert output == "1\n"

  def test_error_in_catch_body_propagates(self, state):
    with pytest.raises(SchwiftError) as exc_info:
      run_lines(state, "schwifty :<\n  shoot a\n>: getschwifty :<\n  shoot b\n>:")
    assert exc_info.value.kind.name == "b"

  def test_run_stops_at_first_error(self):
    output = io.StringIO()
    with pytest.raises(SchwiftError):
      run_program("show me what you got 1\nshoot x\nshow me what you got 2", output_stream=output)
    assert output.getvalue() == "1\n"


class TestRunProgram:
  """Test the parse-and-run helper"""

  def test_returns_final_state(self):
    output = io.StringIO()
    state = run_program("x squanch 40 + 2\nshow me what you got x", output_stream=output)
    assert state.get("x") == make_int(42)
    assert output.getvalue() == "42\n"

  def test_states_are_isolated(self):
    first = run_program("x squanch 1", output_stream=io.StringIO())
    second = run_program("y squanch 2", output_stream=io.StringIO())
    assert "y" not in first.symbols
    assert "x" not in second.symbols

  def test_debug_interpreter_traces_to_stderr(self, capsys):
    state = create_debug_interpreter()
    state.run(parse_program('schwifty :<\n  shoot x\n>: getschwifty :<\n  y squanch 1\n>:'))
    err = capsys.readouterr().err
    assert "DEBUG: executing shoot x" in err
    assert "recovered from error" in err
