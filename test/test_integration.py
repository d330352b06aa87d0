"""
Integration tests running the example programs end to end
"""

import io

import pytest

from interpreter import run_program


EXPECTED_OUTPUT = {
  "hello.schwift": "Hello, Schwift!\n",
  "lists.schwift": '3\n["Jerry", "Summer"]\nJerry\nSummer\n',
  "recover.schwift": "before\nrecovered\nrick\n",
  "fizzbuzz.schwift": "1\n2\nFizz\n4\nBuzz\nFizz\n7\n8\nFizz\nBuzz\n11\nFizz\n13\n14\nFizzBuzz\n",
}


class TestExamplePrograms:
  """Run each example file and compare its output"""

  @pytest.mark.parametrize("name", sorted(EXPECTED_OUTPUT))
  def test_example_output(self, examples_dir, name):
    example = examples_dir / name
    if not example.exists():
      pytest.skip(f"Example file {example} not found")

    output = io.StringIO()
    run_program(example.read_text(encoding="utf-8"), output_stream=output, filename=str(example))
    assert output.getvalue() == EXPECTED_OUTPUT[name]

  def test_echo_reads_input(self, examples_dir):
    source = (examples_dir / "echo.schwift").read_text(encoding="utf-8")
    output = io.StringIO()
    state = run_program(source, input_stream=io.StringIO("Squanchy\n"), output_stream=output)
    assert output.getvalue() == "Squanchy\n8\nS\n"
    assert state.symbols["name"].value == "Squanchy"
