import io
import logging

import pytest

from scoreboard_core import ProblemCell, render_cell
from scoreboard_core.cli import main, parse_line, run
from scoreboard_core.logging_config import setup_logging


def _cell(solved=False, wrong=0, withheld=0):
    return ProblemCell(problem="A", solved=solved, wrong_attempts=wrong, withheld=withheld)


def test_render_cell_encodings():
    assert render_cell(_cell(solved=True)) == "+"
    assert render_cell(_cell(solved=True, wrong=2)) == "+2"
    assert render_cell(_cell(withheld=3)) == "0/3"
    assert render_cell(_cell(wrong=1, withheld=2)) == "-1/2"
    assert render_cell(_cell(wrong=4)) == "-4"
    assert render_cell(_cell()) == "."


def test_parse_line_grammar():
    assert parse_line("   ") is None
    assert parse_line("ADDTEAM red") == {"type": "ADDTEAM", "team": "red"}
    assert parse_line("START DURATION 300 PROBLEM 5") == {
        "type": "START",
        "duration": 300,
        "problemCount": 5,
    }
    assert parse_line("SUBMIT C BY red WITH Wrong_Answer AT 17") == {
        "type": "SUBMIT",
        "problem": "C",
        "team": "red",
        "status": "Wrong_Answer",
        "time": 17,
    }
    assert parse_line("QUERY_SUBMISSION red WHERE PROBLEM=ALL AND STATUS=Accepted") == {
        "type": "QUERY_SUBMISSION",
        "team": "red",
        "problemFilter": "ALL",
        "statusFilter": "Accepted",
    }
    assert parse_line("SCROLL") == {"type": "SCROLL"}


@pytest.mark.parametrize(
    "line",
    [
        "LAUNCH now",
        "START DURATION x PROBLEM 3",
        "SUBMIT A red Accepted 10",
        "QUERY_SUBMISSION red WHERE STATUS=ALL AND PROBLEM=A",
    ],
)
def test_parse_line_rejects_malformed(line):
    with pytest.raises(ValueError):
        parse_line(line)


def test_full_transcript():
    commands = """\
ADDTEAM Alpha
ADDTEAM Beta
ADDTEAM Alpha
START DURATION 300 PROBLEM 2
ADDTEAM Gamma
SUBMIT A BY Alpha WITH Wrong_Answer AT 5
SUBMIT A BY Alpha WITH Accepted AT 10

QUERY_RANKING Beta
BOGUS
FLUSH
FREEZE
SUBMIT A BY Beta WITH Accepted AT 20
SUBMIT B BY Beta WITH Accepted AT 30
QUERY_RANKING Beta
SCROLL
QUERY_SUBMISSION Beta WHERE PROBLEM=ALL AND STATUS=Accepted
QUERY_SUBMISSION Alpha WHERE PROBLEM=B AND STATUS=ALL
END
FLUSH
"""
    out = io.StringIO()
    applied = run(commands.splitlines(), out)

    assert applied == 17
    assert out.getvalue().splitlines() == [
        "[Info]Add successfully.",
        "[Info]Add successfully.",
        "[Error]Add failed: duplicated team name.",
        "[Info]Competition starts.",
        "[Error]Add failed: competition has started.",
        "[Info]Complete query ranking.",
        "Beta NOW AT RANKING 2",
        "[Info]Flush scoreboard.",
        "[Info]Freeze scoreboard.",
        "[Info]Complete query ranking.",
        "[Warning]Scoreboard is frozen. The ranking may be inaccurate until it were scrolled.",
        "Beta NOW AT RANKING 2",
        "[Info]Scroll scoreboard.",
        "Alpha 1 1 30 +1 .",
        "Beta 2 0 0 0/1 0/1",
        "Beta Alpha 1 20",
        "Beta 1 2 50 + +",
        "Alpha 2 1 30 +1 .",
        "[Info]Complete query submission.",
        "Beta B Accepted 30",
        "[Info]Complete query submission.",
        "Cannot find any submission.",
        "[Info]Competition ends.",
    ]


def test_scroll_error_and_unknown_team_lines():
    out = io.StringIO()
    run(
        [
            "ADDTEAM a",
            "START DURATION 10 PROBLEM 1",
            "SCROLL",
            "QUERY_RANKING nobody",
            "QUERY_SUBMISSION nobody WHERE PROBLEM=A AND STATUS=ALL",
            "FREEZE",
            "FREEZE",
        ],
        out,
    )
    assert out.getvalue().splitlines() == [
        "[Info]Add successfully.",
        "[Info]Competition starts.",
        "[Error]Scroll failed: scoreboard has not been frozen.",
        "[Error]Query ranking failed: cannot find the team.",
        "[Error]Query submission failed: cannot find the team.",
        "[Info]Freeze scoreboard.",
        "[Error]Freeze failed: scoreboard has been frozen.",
    ]


def test_long_team_name_through_cli():
    name = "T" * 65
    out = io.StringIO()
    run(
        [
            f"ADDTEAM {name}",
            "START DURATION 10 PROBLEM 1",
            f"SUBMIT A BY {name} WITH Accepted AT 4",
            f"QUERY_RANKING {name}",
        ],
        out,
    )
    assert out.getvalue().splitlines() == [
        "[Info]Add successfully.",
        "[Info]Competition starts.",
        "[Info]Complete query ranking.",
        f"{name} NOW AT RANKING 1",
    ]


def test_main_reads_command_file(tmp_path, capsys):
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    path = tmp_path / "commands.txt"
    path.write_text(
        "ADDTEAM red\n"
        "START DURATION 60 PROBLEM 1\n"
        "SUBMIT A BY red WITH Accepted AT 7\n"
        "NONSENSE\n"
        "FLUSH\n"
        "QUERY_RANKING red\n"
        "END\n",
        encoding="utf-8",
    )
    try:
        assert main([str(path), "--log-level", "DEBUG"]) == 0
        assert root.level == logging.DEBUG
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)

    captured = capsys.readouterr()
    assert captured.out.splitlines() == [
        "[Info]Add successfully.",
        "[Info]Competition starts.",
        "[Info]Flush scoreboard.",
        "[Info]Complete query ranking.",
        "red NOW AT RANKING 1",
        "[Info]Competition ends.",
    ]
    assert "line 4 skipped" in captured.err


def test_setup_logging_installs_single_stderr_handler():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        setup_logging(logging.INFO)
        setup_logging(logging.WARNING)
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
