import argparse
import logging
import os
import sys
import traceback
from pathlib import Path

import colorama

from minic.SyntacticAnalysis.AstBuilder import AstFormatError, load_program
from minic.Compiler.Compiler import Compiler, CompilerOptions

__version__ = "1.0.0"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="minic",
        description="Semantic analysis of a single-function program, read as a JSON syntax tree.")
    parser.add_argument("program", type=Path, help="JSON syntax tree produced by the parser")
    parser.add_argument("--no-colour", action="store_true", help="plain text output")
    parser.add_argument("--dump", type=Path, metavar="DIR", help="write ast.json and symbol_table.json to DIR")
    parser.add_argument("--show-ast", action="store_true", help="print the syntax tree before the report")
    parser.add_argument("-v", "--verbose", action="store_true", help="trace the analysis on stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(name)s: %(message)s")

    # Command line flags take priority over the environment
    options = CompilerOptions.from_environment()
    if args.no_colour:
        options.colour = False
    if args.dump is not None:
        options.dump_dir = args.dump
    options.show_ast = args.show_ast

    # Strips the colour codes again when stdout is not a terminal
    if options.colour:
        colorama.init()

    # Analysis recurses once per nesting level, so a tree that loaded can still be too deep to analyse
    try:
        compiler = Compiler(load_program(args.program), options)
        report = compiler.report()
    except (OSError, AstFormatError, RecursionError) as e:
        print(f"Error during compilation: {e}", file=sys.stderr)
        if os.environ.get("MINIC_DEBUG"):
            traceback.print_exc()
        return 1

    print(report)
    return compiler.exit_code


if __name__ == "__main__":
    sys.exit(main())
