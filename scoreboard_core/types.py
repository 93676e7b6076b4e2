"""Type definitions for contest commands and outcome tags."""
from __future__ import annotations

from typing import Literal, Optional, TypedDict


ErrorKind = Literal[
    "duplicate_team",
    "competition_already_started",
    "team_not_found",
    "already_frozen",
    "not_frozen",
]

CommandType = Literal[
    "ADDTEAM",
    "START",
    "SUBMIT",
    "FLUSH",
    "FREEZE",
    "SCROLL",
    "QUERY_RANKING",
    "QUERY_SUBMISSION",
    "END",
]


class CommandPayload(TypedDict, total=False):
    """
    TypedDict for command payloads sent to apply_command().

    Fields vary by command type.
    """
    # Common
    type: CommandType

    # ADDTEAM / SUBMIT / QUERY_RANKING / QUERY_SUBMISSION
    team: Optional[str]

    # START
    duration: Optional[int]
    problemCount: Optional[int]

    # SUBMIT
    problem: Optional[str]
    status: Optional[str]
    time: Optional[int]

    # QUERY_SUBMISSION ("ALL" matches anything)
    problemFilter: Optional[str]
    statusFilter: Optional[str]

