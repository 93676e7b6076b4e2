from .contest import (
    CommandOutcome,
    ContestError,
    OvertakeEvent,
    add_team,
    apply_command,
    end,
    flush,
    freeze,
    query_ranking,
    query_submission,
    scroll,
    start,
    submit,
)
from .ranking import (
    ProblemCell,
    RankEntry,
    Standing,
    StandingRow,
    build_rank_entry,
    compare_entries,
    compute_standing,
    rank_sort_key,
)
from .render import render_cell, render_outcome, render_row, render_standing
from .state import ContestState, ProblemState, Submission, Team, default_state
from .types import CommandPayload, ErrorKind
from .validation import InputSanitizer, ScoringConfig, ValidatedCmd

__all__ = [
    "CommandOutcome",
    "CommandPayload",
    "ContestError",
    "ContestState",
    "ErrorKind",
    "OvertakeEvent",
    "ProblemState",
    "Submission",
    "Team",
    "add_team",
    "apply_command",
    "default_state",
    "end",
    "flush",
    "freeze",
    "query_ranking",
    "query_submission",
    "scroll",
    "start",
    "submit",
    "ProblemCell",
    "RankEntry",
    "Standing",
    "StandingRow",
    "build_rank_entry",
    "compare_entries",
    "compute_standing",
    "rank_sort_key",
    "render_cell",
    "render_outcome",
    "render_row",
    "render_standing",
    "InputSanitizer",
    "ScoringConfig",
    "ValidatedCmd",
]
