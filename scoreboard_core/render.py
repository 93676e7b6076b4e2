"""Text rendering of outcomes (pure; no ranking logic here)."""
from __future__ import annotations

from typing import List

from .contest import CommandOutcome, OvertakeEvent
from .ranking import ProblemCell, Standing, StandingRow

_ERROR_LINES = {
    ("ADDTEAM", "competition_already_started"): "[Error]Add failed: competition has started.",
    ("ADDTEAM", "duplicate_team"): "[Error]Add failed: duplicated team name.",
    ("START", "competition_already_started"): "[Error]Start failed: competition has started.",
    ("FREEZE", "already_frozen"): "[Error]Freeze failed: scoreboard has been frozen.",
    ("SCROLL", "not_frozen"): "[Error]Scroll failed: scoreboard has not been frozen.",
    ("QUERY_RANKING", "team_not_found"): "[Error]Query ranking failed: cannot find the team.",
    ("QUERY_SUBMISSION", "team_not_found"): "[Error]Query submission failed: cannot find the team.",
    ("SUBMIT", "team_not_found"): "[Error]Submit failed: cannot find the team.",
}

_INFO_LINES = {
    "ADDTEAM": "[Info]Add successfully.",
    "START": "[Info]Competition starts.",
    "FLUSH": "[Info]Flush scoreboard.",
    "FREEZE": "[Info]Freeze scoreboard.",
    "SCROLL": "[Info]Scroll scoreboard.",
    "QUERY_RANKING": "[Info]Complete query ranking.",
    "QUERY_SUBMISSION": "[Info]Complete query submission.",
    "END": "[Info]Competition ends.",
}

FROZEN_WARNING = "[Warning]Scoreboard is frozen. The ranking may be inaccurate until it were scrolled."
NO_SUBMISSION = "Cannot find any submission."


def render_cell(cell: ProblemCell) -> str:
    """
    Encode one team-problem cell.

    - solved: "+" or "+k" (k wrong attempts before the accept)
    - unsolved with withheld: "-k/n" or "0/n" (k visible wrong, n withheld)
    - unsolved with wrong attempts: "-k"
    - untouched: "."
    """
    if cell.solved:
        return f"+{cell.wrong_attempts}" if cell.wrong_attempts > 0 else "+"
    if cell.withheld > 0:
        prefix = "-" if cell.wrong_attempts > 0 else ""
        return f"{prefix}{cell.wrong_attempts}/{cell.withheld}"
    if cell.wrong_attempts > 0:
        return f"-{cell.wrong_attempts}"
    return "."


def render_row(row: StandingRow) -> str:
    parts = [row.team, str(row.rank), str(row.solved), str(row.penalty)]
    parts.extend(render_cell(cell) for cell in row.cells)
    return " ".join(parts)


def render_standing(standing: Standing) -> List[str]:
    return [render_row(row) for row in standing]


def render_overtake(event: OvertakeEvent) -> str:
    return f"{event.team} {event.displaced} {event.solved} {event.penalty}"


def render_outcome(outcome: CommandOutcome) -> List[str]:
    """Transcript lines for one outcome. Accepted submissions print nothing."""
    if outcome.error is not None:
        line = _ERROR_LINES.get((outcome.command, outcome.error.kind))
        if line is None:
            line = f"[Error]{outcome.command} failed: {outcome.error.message or outcome.error.kind}."
        return [line]

    if outcome.command == "SUBMIT":
        return []

    lines = [_INFO_LINES[outcome.command]]

    if outcome.command == "SCROLL":
        if outcome.standing is not None:
            lines.extend(render_standing(outcome.standing))
        lines.extend(render_overtake(event) for event in outcome.events)
        if outcome.final_standing is not None:
            lines.extend(render_standing(outcome.final_standing))

    elif outcome.command == "QUERY_RANKING":
        if outcome.stale:
            lines.append(FROZEN_WARNING)
        lines.append(f"{outcome.team} NOW AT RANKING {outcome.rank}")

    elif outcome.command == "QUERY_SUBMISSION":
        sub = outcome.submission
        if sub is None:
            lines.append(NO_SUBMISSION)
        else:
            lines.append(f"{outcome.team} {sub.problem} {sub.status} {sub.time}")

    return lines
