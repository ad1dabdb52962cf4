"""
Lox - Main Entry Point
Runs a script file or an interactive prompt
"""

import os
import sys
import argparse
from pathlib import Path
from typing import List, Optional

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from error_handling import create_error_handler
from parsing import create_debug_parser, create_parser
from pipeline import EXIT_STATIC_ERROR, LoxSession, create_session
from scanning import KEYWORDS
from syntax import format_ast, pretty_print_ast


VERSION = "Lox 0.1.0 (tree-walking interpreter)"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      prog='lox',
      description='Lox expression language - scanner, parser and tree-walking interpreter',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.lox             # Run a Lox script
  %(prog)s                        # Interactive mode
  %(prog)s --tokens script.lox    # Show the token stream
  %(prog)s --parse script.lox     # Show the syntax tree
  %(prog)s --context script.lox   # Show source excerpts under errors
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Lox script file to execute'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--tokens',
      action='store_true',
      help='Scan file and show the tokens'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show the syntax tree'
  )

  parser.add_argument(
      '--allow-mixed-concat',
      action='store_true',
      help='Let + join a string with a number'
  )

  parser.add_argument(
      '--context',
      action='store_true',
      help='Print the offending source line under each error'
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


def read_source(script_path: str) -> Optional[str]:
  """Read a script, printing a hint and returning None when that fails"""
  try:
    with open(script_path, 'r', encoding='utf-8') as f:
      return f.read()
  except FileNotFoundError:
    print(f"Error: Script file '{script_path}' not found", file=sys.stderr)
    print(f"  Hint: Check the file path and make sure the file exists", file=sys.stderr)
  except PermissionError:
    print(f"Error: Permission denied reading '{script_path}'", file=sys.stderr)
    print(f"  Hint: Make sure you have read permissions for this file", file=sys.stderr)
  except UnicodeDecodeError as e:
    print(f"Error: Cannot decode file '{script_path}': {e}", file=sys.stderr)
    print(f"  Hint: Make sure the file is a text file with UTF-8 encoding", file=sys.stderr)
  return None


def show_tokens(source: str, show_context: bool = False, debug: bool = False,
                filename: str = "<input>") -> int:
  """Print the token stream of source"""
  error_handler = create_error_handler(source, filename, show_context=show_context)
  parser = create_debug_parser(error_handler) if debug else create_parser(error_handler)
  for token in parser.tokenize(source):
    print(token)
  return EXIT_STATIC_ERROR if error_handler.had_error else 0


def show_syntax_tree(source: str, show_context: bool = False, debug: bool = False,
                     filename: str = "<input>") -> int:
  """Print the syntax tree of every statement that parses"""
  error_handler = create_error_handler(source, filename, show_context=show_context)
  parser = create_debug_parser(error_handler) if debug else create_parser(error_handler)
  statements = parser.parse_string(source)

  print(f"Parsed {len(statements)} statements:")
  print("=" * 50)
  for i, stmt in enumerate(statements, 1):
    print(f"\nStatement {i}: {format_ast(stmt)}")
    print(pretty_print_ast(stmt), end='')

  return EXIT_STATIC_ERROR if error_handler.had_error else 0


def run_script_file(script_path: str, args: argparse.Namespace) -> int:
  """Run a Lox script file and return the exit status"""
  source = read_source(script_path)
  if source is None:
    return 1

  if args.tokens:
    return show_tokens(source, args.context, args.debug, script_path)
  if args.parse:
    return show_syntax_tree(source, args.context, args.debug, script_path)

  session = create_session(
      allow_mixed_concat=args.allow_mixed_concat,
      show_context=args.context,
      debug=args.debug
  )
  session.error_handler.filename = script_path
  return session.run_source(source)


def setup_readline() -> None:
  """Setup readline with history and keyword completion"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser("~/.lox_history")
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First time, no history yet

  readline.set_history_length(1000)

  completions: List[str] = sorted(KEYWORDS) + [":tokens", ":parse", ":help", "exit"]

  def completer(text, state):
    options = [cmd for cmd in completions if cmd.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  import atexit
  atexit.register(readline.write_history_file, history_file)


def handle_line(session: LoxSession, parser, line: str) -> None:
  """Run one REPL line, either a command or Lox source"""
  if line.startswith(":tokens "):
    session.error_handler.set_source(line[8:])
    for token in parser.tokenize(line[8:]):
      print(token)
    session.error_handler.reset()
    return

  if line.startswith(":parse "):
    session.error_handler.set_source(line[7:])
    expr = parser.parse_expression(line[7:])
    if expr is not None:
      print(format_ast(expr))
    session.error_handler.reset()
    return

  if line.strip() == ":help":
    print("REPL Commands:")
    print("  :tokens <source>  - Show the tokens of a line")
    print("  :parse <expr>     - Show the syntax tree of an expression")
    print("  :help             - Show this help")
    print("  exit              - Exit REPL")
    print()
    print("Language:")
    print("  print 1 + 2 * 3;          - Print a value")
    print("  \"a\" + \"b\" == \"ab\";        - Expression statement")
    return

  session.run_line(line)


def run_interactive_mode(session: LoxSession, debug: bool = False) -> None:
  """Read lines and run each one independently"""
  print(VERSION + " - Interactive Mode")
  print("Type 'exit' to quit, ':help' for commands")
  if debug:
    print("Debug mode enabled")
  print()

  setup_readline()
  parser = create_debug_parser(session.error_handler) if debug else create_parser(session.error_handler)

  while True:
    try:
      line = input("> ")
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break

    if line.strip() == "exit":
      break
    if not line.strip():
      continue

    try:
      handle_line(session, parser, line)
    except Exception as e:
      print(f"Unexpected error: {e}", file=sys.stderr)
      if debug:
        import traceback
        traceback.print_exc()
      session.error_handler.reset()


def main(argv: Optional[List[str]] = None) -> int:
  """Main entry point for Lox"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  if args.script and args.interactive:
    arg_parser.error("a script cannot be combined with --interactive")

  if args.script:
    if not Path(args.script).exists():
      print(f"Error: Script file '{args.script}' does not exist", file=sys.stderr)
      return 1
    return run_script_file(args.script, args)

  session = create_session(
      allow_mixed_concat=args.allow_mixed_concat,
      show_context=args.context,
      debug=args.debug
  )
  run_interactive_mode(session, debug=args.debug)
  return 0


if __name__ == "__main__":
  sys.exit(main())
