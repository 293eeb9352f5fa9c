"""
Lumen Programming Language - Main Entry Point
Run scripts of S-expressions, inspect their ASTs, or evaluate interactively
"""

import sys
import argparse
from pathlib import Path
from typing import List, Optional
import os

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from environment import Environment, PRIMITIVE_NAMES, TOP_ENVIRONMENT, env_bindings, user_bindings
from error_handling import LumenError, LumenParseError
from interpreter import create_interpreter, create_debug_interpreter
from parsing import format_literal
from semantics import pretty_print_ast
from values import serialize


VERSION = "Lumen v0.1.0"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      prog='lumen',
      description='Lumen - a small expression language with closures',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.lm                  # Evaluate every expression in a file
  %(prog)s -e "(+ 1 2)"               # Evaluate one expression
  %(prog)s -i                         # Interactive mode
  %(prog)s --parse script.lm          # Show literal trees and ASTs
  %(prog)s --debug script.lm          # Run with evaluation trace
  %(prog)s --recursion-limit 20000 deep.lm
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Lumen script file to execute'
  )

  parser.add_argument(
      '-e', '--eval',
      metavar='EXPR',
      help='Evaluate a single expression and print its value'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show literal trees and ASTs instead of evaluating'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--recursion-limit',
      type=int,
      metavar='N',
      help='Raise the Python recursion limit for deeply nested programs'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def report_error(error: LumenError, source: str) -> None:
  """Print a Lumen error for a given source"""
  if isinstance(error, LumenParseError):
    print(f"Parse error in '{source}':")
    print(error)
  else:
    print(f"Error in '{source}': {error}")


def parse_file(script_path: str, debug: bool = False) -> None:
  """Read a Lumen script file and show literal trees and ASTs"""
  interpreter = create_debug_interpreter() if debug else create_interpreter()
  try:
    literals = interpreter.parser.read_file(script_path)
    print(f"Parsed {len(literals)} top-level expression(s):")
    print("=" * 50)

    for i, literal in enumerate(literals, 1):
      print(f"\nExpression {i}: {format_literal(literal)}")
      node = interpreter.analyzer.analyze_expression(literal)
      print(pretty_print_ast(node), end='')

  except OSError as e:
    print(f"Error: Cannot read '{script_path}': {e.strerror}")
    sys.exit(1)
  except LumenError as e:
    report_error(e, script_path)
    sys.exit(1)


def run_script_file(script_path: str, debug: bool = False) -> None:
  """Evaluate every expression in a script and print each value"""
  interpreter = create_debug_interpreter() if debug else create_interpreter()
  try:
    for value in interpreter.run_file(script_path):
      print(serialize(value))

  except OSError as e:
    print(f"Error: Cannot read '{script_path}': {e.strerror}")
    sys.exit(1)
  except LumenError as e:
    report_error(e, script_path)
    sys.exit(1)
  except RecursionError:
    print(f"Error in '{script_path}': recursion too deep")
    print("  Hint: try --recursion-limit with a larger value")
    sys.exit(1)


def eval_expression(source: str, debug: bool = False) -> None:
  """Evaluate one expression from the command line"""
  interpreter = create_debug_interpreter() if debug else create_interpreter()
  try:
    print(serialize(interpreter.run_source(source, TOP_ENVIRONMENT)))
  except LumenError as e:
    report_error(e, "<command line>")
    sys.exit(1)
  except RecursionError:
    print("Error in '<command line>': recursion too deep")
    sys.exit(1)


def setup_readline():
  """Setup readline with history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser("~/.lumen_history")
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First time, no history yet, or permission denied

  readline.set_history_length(1000)

  completions = list(PRIMITIVE_NAMES) + ["if", "=>", ":parse", ":env", ":help", "exit"]

  def completer(text, state):
    options = [cmd for cmd in completions if cmd.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  import atexit
  atexit.register(readline.write_history_file, history_file)


def show_repl_help() -> None:
  print("REPL Commands:")
  print("  :parse <expr>     - Show literal tree and AST")
  print("  :env              - Show visible bindings")
  print("  :help             - Show this help")
  print("  exit              - Exit REPL")
  print()
  print("Language:")
  print("  (+ 1 2)                   - Primitive application")
  print("  (if (<= 1 2) \"a\" \"b\")     - Conditional")
  print("  ((x y => (* x y)) 3 4)    - Lambda and application")


def run_interactive_mode(debug: bool = False, global_env: Environment = TOP_ENVIRONMENT) -> None:
  """Run Lumen in interactive mode; every input is evaluated under global_env"""
  print(f"{VERSION} - Interactive Mode")
  print("Type 'exit' to quit, ':help' for commands")
  if READLINE_AVAILABLE:
    print("Readline enabled: Use ↑/↓ for history, Tab for completion")
  if debug:
    print("Debug mode enabled")
  print()

  setup_readline()

  interpreter = create_interpreter(debug=debug, global_env=global_env)

  while True:
    try:
      code = input("lumen> ").strip()
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break

    if code == "exit":
      break

    if not code:
      continue

    if code == ":help":
      show_repl_help()
      continue

    if code == ":env":
      names = user_bindings(global_env)
      print("Primitives: " + " ".join(PRIMITIVE_NAMES))
      if names:
        bindings = env_bindings(global_env)
        for name in names:
          print(f"  {name} = {serialize(bindings[name])}")
      continue

    try:
      if code.startswith(":parse "):
        literal = interpreter.parser.read(code[7:])
        print(f"Literal: {format_literal(literal)}")
        print(pretty_print_ast(interpreter.analyzer.analyze_expression(literal)), end='')
        continue

      for value in interpreter.run_program(code):
        print(f"=> {serialize(value)}")
    except LumenParseError as e:
      print(e)
    except LumenError as e:
      print(f"Error: {e}")
    except RecursionError:
      print("Error: recursion too deep")


def show_language_info() -> None:
  """Show Lumen language information"""
  print("Lumen Programming Language")
  print("=" * 50)
  print("A small expression language with:")
  print("• Numbers, strings and booleans")
  print("• Conditionals: (if test then else)")
  print("• Lambdas with lexical closures: (x y => body)")
  print("• Primitives: " + " ".join(PRIMITIVE_NAMES))
  print()


def main(argv: Optional[List[str]] = None) -> None:
  """Main entry point for Lumen"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  if args.recursion_limit:
    sys.setrecursionlimit(args.recursion_limit)

  if args.eval is not None:
    eval_expression(args.eval, debug=args.debug)

  elif args.script:
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
