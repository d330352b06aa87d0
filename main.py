"""
Schwift Programming Language - Main Entry Point
Runs script files and the interactive prompt
"""

import sys
import argparse
from pathlib import Path
from typing import List
import os

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from error_handling import SchwiftError, SchwiftParseError
from interpreter import State, create_interpreter
from parsing import RESERVED_WORDS, create_parser
from syntax_tree import pretty_print_ast
from utilities import split_symbols
from values import repr_value


VERSION = "Schwift v0.3.0"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      prog='schwift',
      description='Schwift Programming Language - get schwifty',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.schwift          # Run a Schwift script
  %(prog)s -i                      # Interactive mode
  %(prog)s --parse script.schwift  # Parse and show the syntax tree
  %(prog)s --debug script.schwift  # Run with debug output on stderr
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Schwift script file to execute'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show the syntax tree instead of running it'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def format_symbols(symbols) -> List[str]:
  """Render a symbol table one binding per line, scalars before lists"""
  lists, scalars = split_symbols(symbols)
  lines = []
  for name in sorted(scalars):
    lines.append(f"  {name} = {repr_value(scalars[name])}")
  for name in sorted(lists):
    val_str = repr_value(lists[name])
    if len(val_str) > 60:
      val_str = val_str[:57] + "..."
    lines.append(f"  {name} = {val_str}")
  return lines


def report_file_error(script_path: str, e: Exception) -> None:
  if isinstance(e, FileNotFoundError):
    print(f"Error: Script file '{script_path}' not found")
    print("  Hint: Check the file path and make sure the file exists")
  elif isinstance(e, PermissionError):
    print(f"Error: Permission denied reading '{script_path}'")
    print("  Hint: Make sure you have read permissions for this file")
  elif isinstance(e, UnicodeDecodeError):
    print(f"Error: Cannot decode file '{script_path}': {e}")
    print("  Hint: Make sure the file is a text file with UTF-8 encoding")
  else:
    print(f"Error: Cannot read '{script_path}': {e}")


def report_runtime_error(script_path: str, e: SchwiftError, state: State, debug: bool) -> None:
  print(f"\n{'='*70}", file=sys.stderr)
  print(f"Runtime Error in '{script_path}'", file=sys.stderr)
  print(f"{'='*70}", file=sys.stderr)
  print(f"\nError: {e.message}", file=sys.stderr)
  print(f"\nStatement:", file=sys.stderr)
  for line in str(e.statement).split("\n"):
    print(f"  {line}", file=sys.stderr)

  if debug:
    print(f"\nSymbols at error:", file=sys.stderr)
    lines = format_symbols(state.symbols)
    for line in lines[:10]:
      print(line, file=sys.stderr)
    if len(lines) > 10:
      print(f"  ... and {len(lines) - 10} more bindings", file=sys.stderr)
    if not lines:
      print("  (no bindings)", file=sys.stderr)

  print(f"\n{'='*70}\n", file=sys.stderr)


def parse_file(script_path: str, debug: bool = False) -> None:
  """Parse a Schwift script file and show the syntax tree"""
  parser = create_parser(debug=debug)
  try:
    statements = parser.parse_file(script_path)
  except (OSError, UnicodeDecodeError) as e:
    report_file_error(script_path, e)
    sys.exit(1)
  except SchwiftParseError as e:
    print(f"{e}")
    sys.exit(1)

  print(f"Parsed {len(statements)} top-level statements:")
  print("=" * 50)
  for i, statement in enumerate(statements, 1):
    print(f"\nStatement {i}:")
    print(pretty_print_ast(statement), end="")


def run_script_file(script_path: str, debug: bool = False) -> None:
  """Run a Schwift script file with full interpretation"""
  parser = create_parser(debug=debug)
  state = create_interpreter(debug=debug)

  try:
    if debug:
      print(f"DEBUG: parsing {script_path}...", file=sys.stderr)
    statements = parser.parse_file(script_path)
  except (OSError, UnicodeDecodeError) as e:
    report_file_error(script_path, e)
    sys.exit(1)
  except SchwiftParseError as e:
    print(f"{e}", file=sys.stderr)
    sys.exit(1)

  try:
    state.run(statements)
  except SchwiftError as e:
    report_runtime_error(script_path, e, state, debug)
    sys.exit(1)

  if debug:
    print(f"DEBUG: program finished with {len(state.symbols)} bindings", file=sys.stderr)


def setup_readline():
  """Setup readline with history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser("~/.schwift_history")
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First time, no history yet, or permission denied

  readline.set_history_length(1000)

  completions = sorted(set(RESERVED_WORDS) | {
      "show me what you got", "portal gun", "on a cob",
      ":parse", ":env", ":help", "exit",
  })

  def completer(text, state):
    options = [cmd for cmd in completions if cmd.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  import atexit
  atexit.register(readline.write_history_file, history_file)


def needs_more_input(buffer: str) -> bool:
  """True while a chunk of REPL input has unclosed blocks or a dangling schwifty"""
  if buffer.count(":<") > buffer.count(">:"):
    return True
  stripped = buffer.lstrip()
  return stripped.startswith("schwifty") and "getschwifty" not in stripped


def show_repl_help() -> None:
  print("REPL Commands:")
  print("  :parse <stmt>     - Show the syntax tree of a statement")
  print("  :env              - Show current symbols")
  print("  :help             - Show this help")
  print("  exit              - Exit REPL")
  print()
  print("Language features:")
  print("  x squanch 5                     - Assignment")
  print("  show me what you got x          - Print")
  print("  portal gun name                 - Read a line into name")
  print("  shoot x                         - Delete a variable")
  print("  xs on a cob                     - New empty list")
  print("  xs assimilate 3                 - Append to a list")
  print("  xs[0] squanch 4 / squanch xs[0] - Assign / delete an element")
  print("  xs squanch                      - Length of a list or string")
  print("  if c :< ... >: else :< ... >:   - Conditional")
  print("  while c :< ... >:               - Loop")
  print("  schwifty :< ... >: getschwifty :< ... >: - Recover from errors")


def run_interactive_mode(debug: bool = False) -> None:
  """Run Schwift in interactive mode; one symbol table lives for the whole session"""
  print(f"{VERSION} - Interactive Mode")
  print("Type 'exit' to quit, ':help' for commands")
  if READLINE_AVAILABLE:
    print("Readline enabled: Use ↑/↓ for history, Tab for completion")
  if debug:
    print("Debug mode enabled")
  print()

  setup_readline()

  parser = create_parser(debug=debug)
  state = create_interpreter(debug=debug)

  while True:
    try:
      code = input("schwift> ")

      if code.strip() == "exit":
        break

      if not code.strip():
        continue

      if code.startswith(":parse "):
        try:
          statement = parser.parse_statement(code[7:].strip())
          print(pretty_print_ast(statement), end="")
        except SchwiftParseError as e:
          print(f"{e}")
        continue

      if code.strip() == ":env":
        print("Current symbols:")
        lines = format_symbols(state.symbols)
        for line in lines:
          print(line)
        if not lines:
          print("  (no bindings)")
        continue

      if code.strip() == ":help":
        show_repl_help()
        continue

      while needs_more_input(code):
        code += "\n" + input("    ... ")

      try:
        state.run(parser.parse_string(code, "<repl>"))
      except SchwiftParseError as e:
        print(f"{e}")
      except SchwiftError as e:
        print(f"\nRuntime Error:")
        print(f"  {e}")
        print()

    except KeyboardInterrupt:
      print("\nGoodbye!")
      break
    except EOFError:
      print("\nGoodbye!")
      break


def show_language_info() -> None:
  """Show Schwift language information"""
  print("Schwift Programming Language")
  print("=" * 50)
  print("A small imperative scripting language with:")
  print("• Integers, strings, booleans (rick / morty) and lists")
  print("• if / while blocks written :< ... >:")
  print("• schwifty / getschwifty error recovery")
  print()


def main() -> None:
  """Main entry point for Schwift"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args()

  if len(sys.argv) == 1:
    show_language_info()
    print("Starting interactive mode...")
    print("Use 'schwift --help' for command line options")
    print()
    run_interactive_mode(debug=False)
    return

  if args.script:
    if not Path(args.script).exists():
      print(f"Error: Script file '{args.script}' does not exist")
      sys.exit(1)

    if args.parse:
      parse_file(args.script, debug=args.debug)
    else:
      run_script_file(args.script, debug=args.debug)

  elif args.interactive:
    run_interactive_mode(debug=args.debug)

  else:
    arg_parser.print_help()
    print()
    show_language_info()


if __name__ == "__main__":
  main()
