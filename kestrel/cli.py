"""
Command line driver for the Kestrel front end.

Reads a source file, optionally prints the token list, then prints the
parsed program (tree dump or infix form) or the diagnostics.

Exit codes: 0 on success, 1 on lexer/parser errors, 2 if the file
cannot be read.
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import FrontendConfiguration, RecoveryMode
from .lexer import LexerError, tokenize
from .parser import ParseError, Parser, dump_ast, to_infix

_RECOVERY_MODES = {
    "abort": RecoveryMode.ABORT,
    "skip": RecoveryMode.SKIP_TOKEN,
    "synchronize": RecoveryMode.SYNCHRONIZE,
}


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="kestrel", description="Kestrel lexer and parser")
    ap.add_argument("source", help="Kestrel source file")
    ap.add_argument("--tokens", action="store_true", help="print the token list before the AST")
    ap.add_argument("--format", choices=("tree", "infix"), default="tree",
                    help="how to print the AST (default: tree)")
    ap.add_argument("--recovery", choices=sorted(_RECOVERY_MODES), default="skip",
                    help="what to do after a syntax error (default: skip)")
    ap.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )
    logger = logging.getLogger("kestrel")

    try:
        with open(args.source, "r", encoding="utf-8") as f:
            source = f.read()
    except OSError as e:
        logger.error("Cannot read %s: %s", args.source, e)
        return 2

    config = FrontendConfiguration(
        filename=args.source,
        recovery_mode=_RECOVERY_MODES[args.recovery],
        raise_on_error=False
    )

    try:
        tokens = tokenize(source, args.source)
    except LexerError as e:
        print(e, file=sys.stderr, end="")
        return 1

    if args.tokens:
        for token in tokens:
            print(token)
        print()

    parser = Parser(tokens, config)
    try:
        program = parser.parse()
    except ParseError:
        # ABORT mode re-raises the first error; it is already in parser.errors
        program = None

    for error in parser.errors:
        print(error, file=sys.stderr, end="")

    if program is not None:
        if args.format == "infix":
            print(to_infix(program, config.anonymous_function_name), end="")
        else:
            print(dump_ast(program))

    return 1 if parser.errors else 0


if __name__ == "__main__":
    sys.exit(main())
