"""Command-line driver: C++ file in, Java class out."""

from __future__ import annotations

import logging
import os
import sys

from .backend.java import JavaBackend
from .backend.util import to_pascal
from .frontend.parse import ParseError, Parser
from .frontend.tokens import Lexer
from .serialize import to_json

logger = logging.getLogger(__name__)

PHASES: list[str] = ["tokens", "parse"]

USAGE: str = """\
cppjava [OPTIONS] [INPUT] [-o OUTPUT]

Options:
  --class-name NAME   Wrapper class name (default: PascalCase input stem, or Main)
  --stop-at PHASE     Stop after phase and dump JSON: tokens, parse
  --dump-dir DIR      Also write tokens.json, ast.json and diagnostics.txt into DIR
  -v, --verbose       Log progress and diagnostics to stderr at INFO level
  -o, --output FILE   Write output to FILE instead of stdout
  -h, --help          Show this help message
"""


class UsageError(Exception):
    """Bad command line; exits with status 2."""


class Options:
    """Parsed command-line options."""

    def __init__(self) -> None:
        self.input_file: str | None = None
        self.output_file: str | None = None
        self.class_name: str | None = None
        self.stop_at: str | None = None
        self.dump_dir: str | None = None
        self.verbose: bool = False
        self.help: bool = False


def parse_args(argv: list[str]) -> Options:
    """Parse command-line arguments. Raises UsageError on bad input."""
    opts = Options()
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in ("-h", "--help"):
            opts.help = True
            i += 1
        elif arg in ("-v", "--verbose"):
            opts.verbose = True
            i += 1
        elif arg in ("--class-name", "--stop-at", "--dump-dir", "-o", "--output"):
            if i + 1 >= len(argv):
                raise UsageError(arg + " requires an argument")
            value = argv[i + 1]
            if arg == "--class-name":
                opts.class_name = value
            elif arg == "--stop-at":
                opts.stop_at = value
            elif arg == "--dump-dir":
                opts.dump_dir = value
            else:
                opts.output_file = value
            i += 2
        elif arg.startswith("-") and arg != "-":
            raise UsageError("unknown flag '" + arg + "'")
        else:
            if opts.input_file is not None:
                raise UsageError("unexpected argument '" + arg + "'")
            opts.input_file = arg
            i += 1
    if opts.stop_at is not None and opts.stop_at not in PHASES:
        raise UsageError("unknown phase '" + opts.stop_at + "'")
    if opts.class_name is not None and not opts.class_name.isidentifier():
        raise UsageError("invalid class name '" + opts.class_name + "'")
    return opts


def read_source(input_file: str | None) -> str:
    """Read source from a file, or stdin when no file (or '-') is given."""
    if input_file is None or input_file == "-":
        return sys.stdin.read()
    with open(input_file, encoding="utf-8") as f:
        return f.read()


def default_class_name(input_file: str | None) -> str:
    if input_file is None or input_file == "-":
        return "Main"
    stem = os.path.splitext(os.path.basename(input_file))[0]
    return to_pascal(stem)


def write_output(output: str, output_file: str | None) -> int:
    """Write output to file or stdout. Returns 0 on success, 1 on error."""
    if output_file is None:
        sys.stdout.write(output)
        return 0
    try:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(output)
    except OSError:
        print("error: cannot write '" + output_file + "'", file=sys.stderr)
        return 1
    logger.info("wrote %s", output_file)
    return 0


def _dump(dump_dir: str, name: str, text: str) -> None:
    os.makedirs(dump_dir, exist_ok=True)
    path = os.path.join(dump_dir, name)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    logger.info("dumped %s", path)


def run(opts: Options, source: str) -> tuple[int, str]:
    """Run the pipeline. Returns (exit_code, output)."""
    lexer = Lexer(source)
    tokens = lexer.tokenize()
    if opts.dump_dir is not None:
        _dump(opts.dump_dir, "tokens.json", to_json(tokens) + "\n")
    if opts.stop_at == "tokens":
        if lexer.error is not None:
            print(f"error:{lexer.error_line}:{lexer.error_col}: lexical error: {lexer.error}", file=sys.stderr)
            return (1, "")
        return (0, to_json(tokens) + "\n")
    try:
        program = Parser(tokens).parse_program()
    except ParseError as e:
        print(f"error:{e.line}:{e.col}: {e.msg}", file=sys.stderr)
        return (1, "")
    if opts.dump_dir is not None:
        _dump(opts.dump_dir, "ast.json", to_json(program) + "\n")
    if opts.stop_at == "parse":
        return (0, to_json(program) + "\n")
    class_name = opts.class_name or default_class_name(opts.input_file)
    backend = JavaBackend()
    output = backend.emit(program, class_name)
    logger.info("translated %s: %d diagnostic(s)", opts.input_file or "<stdin>", len(backend.diagnostics))
    if opts.dump_dir is not None:
        text = "".join(repr(d) + "\n" for d in backend.diagnostics.items)
        _dump(opts.dump_dir, "diagnostics.txt", text)
    return (0, output)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    try:
        opts = parse_args(sys.argv[1:] if argv is None else argv)
    except UsageError as e:
        print("error: " + str(e), file=sys.stderr)
        print(USAGE, end="", file=sys.stderr)
        return 2
    if opts.help:
        print(USAGE, end="")
        return 0
    logging.basicConfig(
        level=logging.INFO if opts.verbose else logging.WARNING,
        format="%(message)s",
    )
    try:
        source = read_source(opts.input_file)
    except (OSError, UnicodeDecodeError):
        print("error: cannot open '" + str(opts.input_file) + "'", file=sys.stderr)
        return 1
    try:
        exit_code, output = run(opts, source)
    except OSError as e:
        print("error: " + str(e), file=sys.stderr)
        return 1
    if exit_code != 0:
        return exit_code
    return write_output(output, opts.output_file)


if __name__ == "__main__":
    sys.exit(main())
