"""Line-oriented command front end.

Reads commands such as ``SUBMIT A BY team WITH Accepted AT 10`` one per line,
applies them to a single ContestState and writes the transcript to ``out``.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, Iterable, Optional, TextIO

from .contest import apply_command
from .logging_config import setup_logging
from .render import render_outcome
from .state import ContestState, default_state

logger = logging.getLogger(__name__)


def _int_token(value: str, what: str) -> int:
    try:
        return int(value, 10)
    except ValueError:
        raise ValueError(f"{what} must be an integer, got {value!r}")


def _expect(tokens: list[str], index: int, keyword: str, line: str) -> None:
    if len(tokens) <= index or tokens[index] != keyword:
        raise ValueError(f"expected {keyword} in {line!r}")


def _filter_token(token: str, key: str, line: str) -> str:
    prefix = f"{key}="
    if not token.startswith(prefix):
        raise ValueError(f"expected {prefix}... in {line!r}")
    return token[len(prefix):]


def parse_line(line: str) -> Optional[Dict[str, Any]]:
    """Parse one input line into a command dict. Blank lines return None.

    Raises:
        ValueError: unknown keyword or malformed arguments
    """
    tokens = line.split()
    if not tokens:
        return None
    keyword = tokens[0]

    if keyword in {"ADDTEAM", "QUERY_RANKING"}:
        if len(tokens) != 2:
            raise ValueError(f"{keyword} takes exactly one team name: {line!r}")
        return {"type": keyword, "team": tokens[1]}

    if keyword == "START":
        # START DURATION <d> PROBLEM <p>
        if len(tokens) != 5:
            raise ValueError(f"malformed START: {line!r}")
        _expect(tokens, 1, "DURATION", line)
        _expect(tokens, 3, "PROBLEM", line)
        return {
            "type": "START",
            "duration": _int_token(tokens[2], "duration"),
            "problemCount": _int_token(tokens[4], "problem count"),
        }

    if keyword == "SUBMIT":
        # SUBMIT <P> BY <team> WITH <status> AT <t>
        if len(tokens) != 8:
            raise ValueError(f"malformed SUBMIT: {line!r}")
        _expect(tokens, 2, "BY", line)
        _expect(tokens, 4, "WITH", line)
        _expect(tokens, 6, "AT", line)
        return {
            "type": "SUBMIT",
            "problem": tokens[1],
            "team": tokens[3],
            "status": tokens[5],
            "time": _int_token(tokens[7], "time"),
        }

    if keyword == "QUERY_SUBMISSION":
        # QUERY_SUBMISSION <team> WHERE PROBLEM=<p> AND STATUS=<s>
        if len(tokens) != 6:
            raise ValueError(f"malformed QUERY_SUBMISSION: {line!r}")
        _expect(tokens, 2, "WHERE", line)
        _expect(tokens, 4, "AND", line)
        return {
            "type": "QUERY_SUBMISSION",
            "team": tokens[1],
            "problemFilter": _filter_token(tokens[3], "PROBLEM", line),
            "statusFilter": _filter_token(tokens[5], "STATUS", line),
        }

    if keyword in {"FLUSH", "FREEZE", "SCROLL", "END"}:
        return {"type": keyword}

    raise ValueError(f"unknown command {keyword!r}")


def run(lines: Iterable[str], out: TextIO, state: ContestState | None = None) -> int:
    """Process commands until END or end of input. Returns commands applied."""
    if state is None:
        state = default_state()
    applied = 0
    for lineno, line in enumerate(lines, start=1):
        try:
            cmd = parse_line(line)
            if cmd is None:
                continue
            outcome = apply_command(state, cmd)
        except ValueError as e:
            logger.warning(f"line {lineno} skipped: {e}")
            continue
        applied += 1
        for text in render_outcome(outcome):
            out.write(text + "\n")
        if state.ended:
            break
    return applied


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scoreboard-core", description="ICPC scoreboard with freeze and scroll"
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Command file (default: stdin)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for diagnostics on stderr",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level))

    if args.input == "-":
        run(sys.stdin, sys.stdout)
    else:
        with open(args.input, "r", encoding="utf-8") as fh:
            run(fh, sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
