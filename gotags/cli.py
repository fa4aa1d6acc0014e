"""
Command-line interface.

    gotags [options] file(s)

Flags follow the Go ``flag`` package conventions of the original tool:
single-dash long names and boolean flags that accept ``-flag=false``.
"""

import argparse
import logging
import sys
from pathlib import Path

from .collector import run
from .config import DEFAULT_PROGRAM, VERSION, TagsOptions
from .parser import GoParser, ParseError, format_tree
from .tagsignore import scan_go_files

logger = logging.getLogger(__name__)

TRUE_VALUES = {"1", "t", "T", "true", "TRUE", "True"}
FALSE_VALUES = {"0", "f", "F", "false", "FALSE", "False"}

# name -> (default, help)
BOOL_FLAGS = {
    "v": (False, "print version"),
    "sort": (True, "sort tags"),
    "silent": (False, "do not produce any output on error"),
    "tree": (False, "print syntax tree (debugging)"),
    "stdin": (False, "read source from stdin"),
    "R": (False, "recurse into directories in the file list"),
    "package": (False, "emit a tag for each package clause"),
}


def parse_bool(value: str) -> bool:
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean value {value!r}")


def normalize_bool_flags(argv: list[str]) -> list[str]:
    """Rewrite ``-flag=value`` for boolean flags as ``-flag`` or ``-no-flag``.

    Boolean flags never take the following argument as their value, so
    ``-sort main.go`` keeps ``main.go`` as a file name.
    """
    out = []
    for i, arg in enumerate(argv):
        if arg == "--":
            out.extend(argv[i:])
            break
        name, sep, value = arg.lstrip("-").partition("=")
        if arg.startswith("-") and name in BOOL_FLAGS:
            if not sep or parse_bool(value):
                out.append(f"-{name}")
            else:
                out.append(f"-no-{name}")
            continue
        out.append(arg)
    return out


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gotags",
        usage="%(prog)s [options] file(s)",
        description=f"gotags version {VERSION}",
    )
    parser.add_argument("files", nargs="*", help="Go source files")
    for name, (default, help) in BOOL_FLAGS.items():
        parser.add_argument(f"-{name}", dest=name, action="store_true", default=default, help=help)
        parser.add_argument(f"-no-{name}", dest=name, action="store_false", help=argparse.SUPPRESS)
    parser.add_argument("-L", dest="input_file", default="",
                        help="source file names are read from the specified file.")
    parser.add_argument("-f", dest="output", default="-",
                        help='write output to specified file ("-" for stdout)')
    return parser


def get_file_names(args: argparse.Namespace) -> list[str]:
    """Collect file names from the arguments and the -L list."""
    names = list(args.files)

    if args.input_file:
        if args.input_file == "-":
            names.extend(line.rstrip("\n") for line in sys.stdin)
        else:
            with open(args.input_file, encoding="utf-8") as f:
                names.extend(line.rstrip("\n") for line in f)

    if args.R:
        expanded = []
        for name in names:
            if Path(name).is_dir():
                expanded.extend(scan_go_files(name))
            else:
                expanded.append(name)
        names = expanded

    return names


def write_output(lines: list[str], output: str) -> None:
    if output == "-":
        for line in lines:
            print(line)
        return
    with open(output, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    if argv is None:
        argv = sys.argv[1:]
    try:
        argv = normalize_bool_flags(argv)
    except ValueError as e:
        parser.error(str(e))
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(message)s", stream=sys.stderr)

    if args.v:
        print(f"gotags version {VERSION}")
        return 0

    options = TagsOptions(sort_output=args.sort, silent=args.silent, package_tags=args.package)

    if args.stdin:
        files = ["-"]
    else:
        try:
            files = get_file_names(args)
        except OSError as e:
            logger.debug(f"Reading file list failed: {e}")
            print("cannot get specified files\n", file=sys.stderr)
            parser.print_help(sys.stderr)
            return 1

        if not files:
            print("no file specified\n", file=sys.stderr)
            parser.print_help(sys.stderr)
            return 1

        if args.tree:
            try:
                print(format_tree(GoParser().parse_file(files[0])))
            except ParseError as e:
                print(f"parse error: {e}\n", file=sys.stderr)
                return 1
            return 0

    lines = run(files, options, DEFAULT_PROGRAM)
    write_output(lines, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
