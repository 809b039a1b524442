"""Command-line front end.

Usage::

    latin1-ascii reply.txt                 # converted text on stdout
    latin1-ascii --in-place reply.txt      # rewrite the file
    latin1-ascii --interactive reply.txt   # confirm each replacement
    latin1-ascii --check *.txt             # exit 1 if unhandled 8-bit chars remain

Files are read and written as Latin-1. Exit codes: 0 success, 1 check
failed, 2 usage or region error.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from latin1_ascii.core.buffer import StringBuffer
from latin1_ascii.core.config import ConfigLoader
from latin1_ascii.core.converter import RegionError, resolve_region
from latin1_ascii.core.models import Decision
from latin1_ascii.core.scanner import find_uncovered_8bit
from latin1_ascii.core.session import EditorSession
from latin1_ascii.core.tables import CONTROL_TABLE

_log = logging.getLogger(__name__)

ENCODING = "latin-1"

_ANSWERS: dict[str, Decision] = {
    "y": Decision.YES,
    "yes": Decision.YES,
    " ": Decision.YES,
    "n": Decision.NO,
    "no": Decision.NO,
    "!": Decision.ALL,
    "a": Decision.ALL,
    "all": Decision.ALL,
    "q": Decision.QUIT,
    "quit": Decision.QUIT,
}


def console_prompt(message: str) -> Decision:
    """Ask on the terminal until a valid answer is given. EOF means quit.

    The prompt goes to stderr; stdout carries the converted text.
    """
    while True:
        print(f"{message}[y/n/!/q] ", end="", file=sys.stderr, flush=True)
        try:
            answer = input()
        except EOFError:
            return Decision.QUIT
        decision = _ANSWERS.get(answer.strip().lower() or " ")
        if decision is not None:
            return decision
        print("Answer y (replace), n (skip), ! (replace all) or q (quit).", file=sys.stderr)


def console_notify(message: str) -> None:
    print(message, file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="latin1-ascii",
        description="Convert Latin-1 high-bit characters to 7-bit ASCII equivalents.",
    )
    parser.add_argument("files", nargs="+", help="Files to convert ('-' for stdin)")
    parser.add_argument("--start", type=int, default=0, help="Region start offset (default 0)")
    parser.add_argument("--end", type=int, default=None, help="Region end offset (default end of text)")
    parser.add_argument("--strict", action="store_true", default=None,
                        help="Leave the region untouched if it holds unhandled 8-bit characters")
    parser.add_argument("-i", "--interactive", action="store_true", help="Confirm each replacement")
    parser.add_argument("--check", action="store_true",
                        help="Only report unhandled 8-bit characters")
    parser.add_argument("--in-place", action="store_true", help="Rewrite files instead of printing")
    parser.add_argument("--control-chars", action="store_true",
                        help="Also convert control characters to caret notation")
    parser.add_argument("--config", type=Path, default=None, help="YAML config file")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def _read(name: str) -> str:
    if name == "-":
        return sys.stdin.buffer.read().decode(ENCODING)
    return Path(name).read_text(encoding=ENCODING)


def _check_file(name: str, session: EditorSession, start: int, end: int | None) -> bool:
    end = len(session.buffer) if end is None else end
    region = resolve_region(session.buffer, start, end)
    if not session.region_has_uncovered_8bit(region.start, region.end):
        return True
    found = find_uncovered_8bit(session.buffer, region.start, region.end, session.config.table)
    for offset, char in found:
        print(f"{name}:{offset}: unhandled 8-bit character 0x{ord(char):02X} {char!r}")
    return False


def _convert_file(name: str, session: EditorSession, args: argparse.Namespace) -> None:
    end = len(session.buffer) if args.end is None else args.end
    if args.interactive:
        changed = session.convert_region_interactive(args.start, end, strict=args.strict)
    else:
        changed = session.convert_region(args.start, end, strict=args.strict)
    _log.info("%s: %s", name, "converted" if changed else "unchanged")

    if args.in_place and name != "-":
        if changed:
            Path(name).write_text(session.buffer.text, encoding=ENCODING)
    else:
        sys.stdout.buffer.write(session.buffer.text.encode(ENCODING))
        sys.stdout.flush()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING - 10 * min(args.verbose, 2),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.interactive and "-" in args.files:
        parser.error("--interactive cannot read the text from stdin")

    try:
        config = ConfigLoader().load(args.config)
    except FileNotFoundError as exc:
        parser.error(str(exc))
    if args.control_chars:
        config = replace(config, control_table=CONTROL_TABLE)

    status = 0
    for name in args.files:
        try:
            buffer = StringBuffer(_read(name))
        except OSError as exc:
            print(f"latin1-ascii: {exc}", file=sys.stderr)
            return 2
        session = EditorSession(buffer, config, prompt=console_prompt, notify=console_notify)
        try:
            if args.check:
                if not _check_file(name, session, args.start, args.end):
                    status = 1
            else:
                _convert_file(name, session, args)
        except RegionError as exc:
            print(f"latin1-ascii: {name}: {exc}", file=sys.stderr)
            return 2
    return status


if __name__ == "__main__":
    sys.exit(main())
