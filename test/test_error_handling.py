"""
Error model tests: runtime error kinds, statement wrapping and parse error reports
"""

import pytest

from error_handling import (
  SchwiftError,
  SchwiftParseError,
  UnknownVariable,
  UnexpectedType,
  IndexOutOfBounds,
  IndexUnindexable,
  InputError,
  DivideByZero,
  get_context_lines,
  generate_suggestions,
)
from syntax_tree import Print, Variable, While, Literal
from values import make_bool, make_int, make_list, make_string


class TestErrorKinds:
  """Each kind keeps its data and formats a precise message"""

  def test_unknown_variable(self):
    error = UnknownVariable("x")
    assert error.name == "x"
    assert str(error) == "Unknown variable 'x'"

  def test_unexpected_type(self):
    error = UnexpectedType("int", make_string("3"))
    assert error.actual == make_string("3")
    assert str(error) == 'Expected a value of type int, got string "3"'

  def test_index_out_of_bounds(self):
    error = IndexOutOfBounds(make_list([make_int(1)]), 4)
    assert error.index == 4
    assert "Index 4 is out of bounds" in str(error)
    assert "length 1" in str(error)

  def test_index_unindexable(self):
    assert str(IndexUnindexable(make_bool(True))) == "Cannot index into bool rick"

  def test_input_error(self):
    cause = OSError("closed")
    error = InputError(cause)
    assert error.cause is cause
    assert "closed" in str(error)

  def test_divide_by_zero(self):
    assert str(DivideByZero(make_int(7))) == "Cannot divide 7 by zero"


class TestStatementWrapper:
  """SchwiftError attaches the failing statement"""

  def test_message_names_statement(self):
    statement = Print(Variable("x"))
    error = SchwiftError(UnknownVariable("x"), statement)
    assert error.statement is statement
    assert error.message == "Unknown variable 'x'"
    assert str(error) == "Error in statement 'show me what you got x': Unknown variable 'x'"

  def test_block_statements_are_summarized(self):
    statement = While(Literal(make_int(1)), (Print(Variable("x")),))
    error = SchwiftError(UnexpectedType("bool", make_int(1)), statement)
    assert "while 1 :< ... >:" in str(error)


class TestParseErrorReports:
  """Parse errors carry position, context and suggestions"""

  def test_context_marks_column(self):
    context = get_context_lines("a\nbb cc\nd", 2, 4)
    assert "   2: bb cc" in context
    assert "^ Error here" in context

  def test_unclosed_block_suggestion(self, parser):
    with pytest.raises(SchwiftParseError) as exc_info:
      parser.parse_string("while rick :<\n  show me what you got 1\n")
    assert any(":<" in suggestion for suggestion in exc_info.value.suggestions)

  def test_equals_assignment_suggestion(self):
    suggestions = generate_suggestions("x = 3", 1, "'= 3'")
    assert any("squanch" in suggestion for suggestion in suggestions)

  def test_str_includes_location(self, parser):
    with pytest.raises(SchwiftParseError) as exc_info:
      parser.parse_string("x squanch 1\ny squanch\n", "prog.schwift")
    report = str(exc_info.value)
    assert "prog.schwift" in report
    assert "line 2, column 1" in report
