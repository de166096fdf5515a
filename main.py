"""
Tama Programming Language - Main Entry Point
A minimal imperative scripting language with embedded host functions
"""

import sys
import argparse
from pathlib import Path
from typing import Dict, Tuple
import os

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from parsing import create_parser, create_debug_parser, pretty_print_tree, TamaTokenizerError
from error_handling import TamaParseError, format_error_value
from semantics import create_analyzer, create_debug_analyzer, TamaSemanticsError
from interpreter import create_interpreter, create_debug_interpreter
from environment import defined_functions
from stdlib import create_stdlib_environment, list_builtin_functions
from utilities import format_value
from values import is_error, TamaRuntimeError


VERSION = "Tama v0.1.0"
HISTORY_FILE = "~/.tama_history"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      description='Tama Programming Language - a minimal imperative scripting language',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.tama            # Run a Tama script
  %(prog)s -i                     # Interactive mode
  %(prog)s --parse script.tama    # Parse and show the parse tree
  %(prog)s --tokens script.tama   # Show the token stream
  %(prog)s --debug script.tama    # Run with debug output
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Tama script file to execute'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show the parse tree (for debugging)'
  )

  parser.add_argument(
      '--tokens',
      action='store_true',
      help='Tokenize file and show the tokens (for debugging)'
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


def run_source(source: str, environment: Dict, debug: bool = False, filename: str = "<input>") -> Tuple[Dict, Dict]:
  """Parse, analyze and evaluate source text against an environment"""
  parser = create_debug_parser() if debug else create_parser()
  analyzer = create_debug_analyzer() if debug else create_analyzer()
  interpreter = create_debug_interpreter() if debug else create_interpreter()

  statements = parser.parse_string(source, filename)
  ast_root = analyzer(statements)
  return interpreter(ast_root, environment)


def tokenize_file(script_path: str) -> None:
  """Tokenize a Tama script file and show the tokens"""
  try:
    parser = create_parser()
    with open(script_path, 'r', encoding='utf-8') as f:
      tokens = parser.tokenize(f.read(), script_path)

    for token in tokens:
      print(f"{token.span.start_line}:{token.span.start_col}\t{token}")

  except TamaTokenizerError as e:
    print(f"Tokenizer error: {e}")
    sys.exit(1)
  except UnicodeDecodeError as e:
    print(f"Error: Cannot decode file '{script_path}': {e}")
    sys.exit(1)


def parse_file(script_path: str, debug: bool = False) -> None:
  """Parse a Tama script file and show the parse tree"""
  try:
    parser = create_debug_parser() if debug else create_parser()

    print(f"Parsing {script_path}...")
    statements = parser.parse_file(script_path)

    print(f"\nParsed {len(statements)} top-level statements:")
    print("=" * 50)

    for i, node in enumerate(statements, 1):
      print(f"\nStatement {i}:")
      print(pretty_print_tree(node))

  except TamaParseError as e:
    print(f"Parse error in '{script_path}': {e}")
    sys.exit(1)


def run_script_file(script_path: str, debug: bool = False) -> None:
  """Run a Tama script file with the standard library"""
  try:
    with open(script_path, 'r', encoding='utf-8') as f:
      source = f.read()

    result, environment = run_source(source, create_stdlib_environment(), debug, script_path)

  except PermissionError:
    print(f"Error: Permission denied reading '{script_path}'")
    print("  Hint: Make sure you have read permissions for this file")
    sys.exit(1)
  except UnicodeDecodeError as e:
    print(f"Error: Cannot decode file '{script_path}': {e}")
    print("  Hint: Make sure the file is a text file with UTF-8 encoding")
    sys.exit(1)
  except TamaParseError as e:
    print(f"Parse error in '{script_path}': {e}")
    sys.exit(1)
  except TamaSemanticsError as e:
    print(f"Semantic analysis error in '{script_path}': {e}")
    sys.exit(1)
  except TamaRuntimeError as e:
    print(f"Host error in '{script_path}': {e.message}")
    sys.exit(1)
  except RecursionError:
    print(f"Error in '{script_path}': maximum recursion depth exceeded")
    print("  Hint: Expressions are nested too deeply to parse")
    sys.exit(1)

  if is_error(result):
    print(f"\n{'='*70}")
    print(f"Runtime Error in '{script_path}'")
    print(f"{'='*70}")
    print(f"\nError: {format_error_value(result)}")
    if debug:
      print_environment(environment)
    print(f"\n{'='*70}\n")
    sys.exit(1)

  if debug:
    print(f"Result: {format_value(result)}")
    print_environment(environment)


def print_environment(environment: Dict) -> None:
  """Show variables and script-defined functions"""
  print("Variables:")
  if environment['variables']:
    for name, value in environment['variables'].items():
      print(f"  {name} = {format_value(value)}")
  else:
    print("  (none)")

  functions = defined_functions(environment)
  if functions:
    print("Functions:")
    for name, function in functions.items():
      print(f"  {name}({', '.join(function['arguments'])})")


def setup_readline() -> None:
  """Setup readline with history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser(HISTORY_FILE)
  try:
    readline.read_history_file(history_file)
  except (FileNotFoundError, PermissionError, OSError):
    pass  # First run, or history is not readable

  readline.set_history_length(1000)

  completions = (
      ["def", "if", "true", "false", "null"] +
      list_builtin_functions() +
      [":parse", ":tokens", ":env", ":help", "exit"]
  )

  def completer(text, state):
    options = [cmd for cmd in completions if cmd.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  import atexit
  atexit.register(readline.write_history_file, history_file)


def read_statement(prompt: str = "tama> ") -> str:
  """Read one input, continuing while braces are unbalanced"""
  code = input(prompt)
  while code.count('{') > code.count('}'):
    code += "\n" + input("....> ")
  return code


def show_help() -> None:
  print("REPL Commands:")
  print("  :parse <code>     - Show the parse tree")
  print("  :tokens <code>    - Show the token stream")
  print("  :env              - Show current environment")
  print("  :help             - Show this help")
  print("  exit              - Exit REPL")
  print()
  print("Language features:")
  print("  a = 1;                    - Assignment")
  print("  a + 2;                    - Integer addition")
  print("  if (a) { b = 1; }         - Conditional (null and false are falsy)")
  print("  def f(x) { x + 1; }       - Function definition")
  print("  f(41);                    - Function call")
  print(f"  Built-ins: {', '.join(list_builtin_functions())}")


def run_interactive_mode(debug: bool = False) -> None:
  """Run Tama in interactive mode; one environment is threaded through the session"""
  print(f"{VERSION} - Interactive Mode")
  print("Type 'exit' to quit, ':help' for commands")
  if READLINE_AVAILABLE:
    print("Readline enabled: Use ↑/↓ for history, Tab for completion")
  if debug:
    print("Debug mode enabled")
  print()

  setup_readline()

  parser = create_debug_parser() if debug else create_parser()
  session_env = create_stdlib_environment()

  while True:
    try:
      code = read_statement()
      command = code.strip()

      if command == "exit":
        break

      if not command:
        continue

      if command.startswith(":parse "):
        try:
          for node in parser.parse_string(command[7:]):
            print(pretty_print_tree(node), end='')
        except TamaParseError as e:
          print(f"Parse error: {e}")
        continue

      if command.startswith(":tokens "):
        try:
          for token in parser.tokenize(command[8:]):
            print(f"  {token}")
        except TamaTokenizerError as e:
          print(f"Tokenizer error: {e}")
        continue

      if command == ":env":
        print_environment(session_env)
        continue

      if command == ":help":
        show_help()
        continue

      try:
        result, session_env = run_source(code, session_env, debug)
        if is_error(result):
          print(f"Error: {format_error_value(result)}")
        else:
          print(f"=> {format_value(result)}")
      except TamaParseError as e:
        print(f"Parse error: {e}")
      except TamaSemanticsError as e:
        print(f"Semantic error: {e}")
      except TamaRuntimeError as e:
        print(f"Host error: {e.message}")
      except RecursionError:
        print("Error: expressions are nested too deeply to parse")

    except KeyboardInterrupt:
      print("\nGoodbye!")
      break
    except EOFError:
      print("\nGoodbye!")
      break


def show_language_info() -> None:
  """Show Tama language information"""
  print("Tama Programming Language")
  print("=" * 50)
  print("A minimal imperative scripting language with:")
  print("• Integers, booleans and null")
  print("• Variables, addition and if blocks")
  print("• Functions with isolated variable scopes")
  print("• Embedded functions provided by the host")
  print()


def main() -> None:
  """Main entry point for Tama"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args()

  if len(sys.argv) == 1:
    show_language_info()
    print("Starting interactive mode...")
    print("Use 'tama --help' for command line options")
    print()
    run_interactive_mode(debug=False)
    return

  if args.script:
    if not Path(args.script).exists():
      print(f"Error: Script file '{args.script}' does not exist")
      sys.exit(1)

    if args.tokens:
      tokenize_file(args.script)
    elif args.parse:
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
