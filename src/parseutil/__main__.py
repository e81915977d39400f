"""Command-line interface for parseutil.

Parses an input file with a lark grammar and prints the generic ast dump,
or a diagnostic with the failing source excerpt.
"""

import argparse
import logging
import sys
from pathlib import Path

import lark

import parseutil


def _prefix_lines(text, prefix):
    return "\n".join(prefix + line for line in text.split("\n"))


def _read_input(name):
    if name == "-":
        return sys.stdin.read()
    return Path(name).read_text(encoding="utf-8")


def run(grammar_path, input_name, start=None, parser="earley"):
    """Parse one input and report the outcome.

    Args:
        grammar_path: Path to the .lark grammar file
        input_name: Path of the input file, "-" reads stdin
        start: Grammar entry point, lark's default when None
        parser: Lark parsing algorithm

    Returns:
        (int) Process exit code
    """
    try:
        grammar = Path(grammar_path).read_text(encoding="utf-8")
        text = _read_input(input_name)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    lark_options = {"parser": parser}
    if start is not None:
        lark_options["start"] = start
    try:
        grammar_parser = parseutil.LarkParser(grammar, **lark_options)
    except lark.exceptions.LarkError as e:
        print(f"Error: invalid grammar {grammar_path}:", file=sys.stderr)
        print(_prefix_lines(str(e).rstrip(), "  "), file=sys.stderr)
        return 2

    options = {}
    if start is not None:
        options["start_rule"] = start
    result = parseutil.parse(grammar_parser, text, options)
    if result.error is not None:
        message = parseutil.error_message(result.error, no_final_newline=True)
        print(
            _prefix_lines("Parsing Failure:\n" + message, "ERROR: "),
            file=sys.stderr,
        )
        return 1

    print(result.ast.dump().rstrip("\n"))
    return 0


def main(argv=None):
    """Main entry point for the parseutil CLI.

    Usage:
        parseutil <grammar.lark> <input>          - Dump the generic ast
        parseutil <grammar.lark> - --start expr   - Parse stdin from a rule
    """
    argparser = argparse.ArgumentParser(
        prog="parseutil",
        description="Parse a file with a lark grammar and dump the ast",
    )
    argparser.add_argument("grammar", help="lark grammar file")
    argparser.add_argument("input", help="input file, - for stdin")
    argparser.add_argument("--start", help="grammar rule to start from")
    argparser.add_argument(
        "--parser",
        choices=["earley", "lalr"],
        default="earley",
        help="lark parsing algorithm (default: earley)",
    )
    argparser.add_argument(
        "-v", "--verbose", action="store_true", help="show debug logging"
    )
    args = argparser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    return run(args.grammar, args.input, start=args.start, parser=args.parser)


if __name__ == "__main__":
    sys.exit(main())
