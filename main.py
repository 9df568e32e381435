"""
Abacus - Main Entry Point
A calculator language with constants, user functions and implicit multiplication
"""

import sys
import os
import argparse
import atexit
from typing import List, Optional, Dict

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from parsing import create_parser, create_debug_parser
from syntax import pretty_print_node
from environment import env_lookup, env_names, describe_function
from stdlib import DEFAULT_ENV, BUILTIN_NAMES
from interpreter import evaluate_text, is_success
from error_handling import AbacusParseError, make_parse_error, format_interpret_error


VERSION = "Abacus v0.1.0"
PROMPT = "abacus> "
HISTORY_FILE = "~/.abacus_history"
EXIT_COMMANDS = ("exit", "quit", ":q")


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      description='Abacus - a calculator language with user-defined functions',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s "2 pi"                 # Evaluate one statement
  %(prog)s "f(x) = x^2"           # Definitions produce no value
  %(prog)s -i                     # Interactive mode
  %(prog)s --parse "1 + 2 * 3"    # Show the parse tree
  %(prog)s -i --debug             # Interactive mode with evaluation trace
        """
  )

  parser.add_argument(
      'statement',
      nargs='?',
      help='statement to evaluate'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse the statement and show the tree instead of evaluating it'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Trace parsing and evaluation'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


# ============================================================================
# OUTPUT
# ============================================================================

def report_result(result: Dict) -> None:
  """Print a statement result; function definitions print nothing"""
  if not is_success(result):
    print(format_interpret_error(result['error']))
  elif result['value'] is not None:
    print(f"=> {result['value']}")


def show_parse_tree(text: str, debug: bool = False) -> bool:
  parser = create_debug_parser() if debug else create_parser()
  try:
    statement = parser.parse_statement(text)
  except AbacusParseError as e:
    print(format_interpret_error(make_parse_error(str(e))))
    return False
  if not debug:
    print(pretty_print_node(statement), end='')
  return True


def show_environment(env: Dict) -> None:
  print("Current environment:")
  user_names = [name for name in env_names(env) if name not in BUILTIN_NAMES]
  if not user_names:
    print("  (no user-defined bindings)")
    return
  for name in user_names:
    print(f"  {name} = {describe_function(env_lookup(env, name))}")


def show_help() -> None:
  print("REPL Commands:")
  print("  :parse <stmt>     - Show parse tree")
  print("  :env              - Show user-defined bindings")
  print("  :help             - Show this help")
  print("  exit, quit, :q    - Exit REPL")
  print()
  print("Language features:")
  print("  1 + 2 * 3                 - Arithmetic, ^ for powers")
  print("  x = 5                     - Constant binding")
  print("  f(x, y) = x^2 + y         - Function definition")
  print("  f(2, 1)                   - Function call")
  print("  2 pi, pi 2, x(3)          - Implicit multiplication")
  print("  ans + 1                   - Previous result")


# ============================================================================
# INTERACTIVE MODE
# ============================================================================

def setup_readline(env_provider) -> None:
  """Setup readline with history and completion of visible names"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser(HISTORY_FILE)
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # No history yet

  readline.set_history_length(1000)

  def completer(text, state):
    names = env_names(env_provider()) + [":parse", ":env", ":help", ":q", "exit", "quit"]
    options = [name for name in names if name.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")
  atexit.register(readline.write_history_file, history_file)


def run_interactive_mode(debug: bool = False) -> None:
  """Run Abacus in interactive mode, threading one environment through the session"""
  print(f"{VERSION} - Interactive Mode")
  print("Type 'exit' to quit, ':help' for commands")
  if debug:
    print("Debug mode enabled")
  print()

  session = {'env': DEFAULT_ENV}
  setup_readline(lambda: session['env'])

  while True:
    try:
      line = input(PROMPT).strip()
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break

    if not line:
      continue

    if line in EXIT_COMMANDS:
      break

    if line == ":help":
      show_help()
      continue

    if line == ":env":
      show_environment(session['env'])
      continue

    if line == ":parse":
      print("Usage: :parse <statement>")
      continue

    if line.startswith(":parse "):
      show_parse_tree(line[len(":parse "):], debug)
      continue

    result = evaluate_text(session['env'], line, debug)
    if is_success(result):
      session['env'] = result['env']
    report_result(result)


def main(argv: Optional[List[str]] = None) -> int:
  """Main entry point for Abacus"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  if args.parse and args.statement is None:
    print("Error: --parse needs a statement")
    return 2

  if args.statement is None or args.interactive:
    if args.statement is not None:
      print("Error: a statement cannot be combined with --interactive")
      return 2
    run_interactive_mode(debug=args.debug)
    return 0

  if args.parse:
    return 0 if show_parse_tree(args.statement, args.debug) else 1

  result = evaluate_text(DEFAULT_ENV, args.statement, args.debug)
  report_result(result)
  return 0 if is_success(result) else 1


if __name__ == "__main__":
  sys.exit(main())
