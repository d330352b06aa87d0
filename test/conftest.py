"""
Test configuration for Schwift parser and interpreter tests
"""

import io
import sys
from pathlib import Path

import pytest

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from interpreter import create_interpreter
from parsing import create_parser


@pytest.fixture
def parser():
  """Provide a fresh parser instance for each test"""
  return create_parser()


@pytest.fixture
def examples_dir():
  """Get the examples directory path"""
  return project_root / "examples"


@pytest.fixture
def run_source(parser):
  """Parse and run source text with captured I/O; returns (state, output)"""
  def run(source: str, stdin: str = ""):
    output = io.StringIO()
    state = create_interpreter(input_stream=io.StringIO(stdin), output_stream=output)
    state.run(parser.parse_string(source))
    return state, output.getvalue()

  return run
