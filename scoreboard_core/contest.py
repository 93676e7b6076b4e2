"""Core contest operations (pure, no I/O).

This module implements the ICPC scoreboard business logic: team registration,
submission routing, flush, freeze and the scroll (unfreeze) procedure.

Architecture:
- State is a single ``ContestState`` instance passed to every operation.
- Each operation mutates that state in place and returns a ``CommandOutcome``.
- Contest errors (duplicate team, unknown team, ...) are never raised; they come
  back as ``outcome.error`` so the caller can keep processing input.
- Malformed commands given to apply_command() raise ValueError (validation layer).
- Rendering the outcome into text lives in ``render.py``.

Freeze semantics:
- While frozen, a submission to a problem the team has not visibly solved is
  withheld: recorded in the ledger and buffered, with no visible effect.
- A submission to an already solved problem is recorded and otherwise ignored.
- scroll() discloses buffers one team-problem at a time, always picking the
  worst-ranked team that still holds withheld data, and re-ranks after each one.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .ranking import Standing, alphabetical_rank, compute_standing
from .state import ContestState, Submission, Team, problem_letters
from .types import ErrorKind
from .validation import InputSanitizer, ScoringConfig

logger = logging.getLogger(__name__)


@dataclass
class ContestError:
    """A per-operation, non-fatal contest failure."""

    kind: ErrorKind
    message: str | None = None


@dataclass(frozen=True)
class OvertakeEvent:
    """A disclosed team whose rank strictly improved during scroll."""

    team: str
    displaced: str
    solved: int
    penalty: int


@dataclass
class CommandOutcome:
    """Result of applying a core command."""

    command: str
    error: ContestError | None = None
    # FLUSH, and the pre-scroll view for SCROLL
    standing: Standing | None = None
    # SCROLL only
    events: tuple[OvertakeEvent, ...] = ()
    final_standing: Standing | None = None
    # QUERY_RANKING / QUERY_SUBMISSION
    team: str | None = None
    rank: int | None = None
    stale: bool = False
    submission: Submission | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _fail(command: str, kind: ErrorKind, message: str, **fields: Any) -> CommandOutcome:
    logger.warning(f"{command} rejected: {kind}")
    return CommandOutcome(command=command, error=ContestError(kind=kind, message=message), **fields)


def _recompute(state: ContestState) -> Standing:
    standing = compute_standing(state.teams.values(), state.problem_ids)
    state.last_standing = standing
    return standing


def add_team(state: ContestState, name: str) -> CommandOutcome:
    """Register a team. Only allowed before start; names are unique."""
    if state.started:
        return _fail("ADDTEAM", "competition_already_started", "competition has started", team=name)
    if name in state.teams:
        return _fail("ADDTEAM", "duplicate_team", "duplicated team name", team=name)
    state.teams[name] = Team(name=name)
    # A standing cached before this team existed cannot rank it.
    state.last_standing = None
    logger.debug(f"team added: {name}")
    return CommandOutcome(command="ADDTEAM", team=name)


def start(state: ContestState, duration: int, problem_count: int) -> CommandOutcome:
    """Start the contest; problems are the first ``problem_count`` letters."""
    if state.started:
        return _fail("START", "competition_already_started", "competition has started")
    state.started = True
    state.duration = duration
    state.problem_ids = problem_letters(problem_count)
    logger.debug(
        f"contest started: duration={duration} problems={''.join(state.problem_ids)} "
        f"teams={len(state.teams)}"
    )
    return CommandOutcome(command="START")


def submit(
    state: ContestState, problem: str, team: str, status: str, time: int
) -> CommandOutcome:
    """Record a submission and route it to visible state or the withheld buffer.

    Routing:
        1. Always appended to the team's ledger.
        2. Problems outside the active set stay ledger-only.
        3. Not frozen, or already visibly solved -> applied directly
           (first accepted wins; later submissions have no effect).
        4. Frozen and not yet visibly solved -> appended to withheld.
    """
    entry = state.teams.get(team)
    if entry is None:
        return _fail("SUBMIT", "team_not_found", "cannot find the team", team=team)

    sub = Submission(problem=problem, status=status, time=time)
    entry.submissions.append(sub)

    if problem not in state.problem_ids:
        logger.debug(f"submission for inactive problem {problem} by {team} kept in ledger only")
        return CommandOutcome(command="SUBMIT", team=team, submission=sub)

    ps = entry.problem(problem)
    if state.frozen and not ps.solved:
        ps.withheld.append(sub)
        logger.debug(f"withheld {team}/{problem} {status}@{time} ({len(ps.withheld)} pending)")
    else:
        ps.apply(sub)
    return CommandOutcome(command="SUBMIT", team=team, submission=sub)


def flush(state: ContestState) -> CommandOutcome:
    """Recompute and cache the standing."""
    standing = _recompute(state)
    return CommandOutcome(command="FLUSH", standing=standing)


def freeze(state: ContestState) -> CommandOutcome:
    if state.frozen:
        return _fail("FREEZE", "already_frozen", "scoreboard has been frozen")
    state.frozen = True
    logger.debug("scoreboard frozen")
    return CommandOutcome(command="FREEZE")


def _select_next_disclosure(state: ContestState, standing: Standing) -> tuple[str, str] | None:
    """Pick (team, problem) to disclose next, or None when nothing is withheld.

    Team: largest rank in ``standing`` among teams holding withheld data, ties by
    name. Problem: smallest pending problem id for that team.
    """
    ranks = standing.ranks
    candidates = [team for team in state.teams.values() if team.has_withheld()]
    if not candidates:
        return None
    # Every team appears in the standing; the fallback keeps the key total.
    chosen = min(candidates, key=lambda t: (-ranks.get(t.name, len(ranks) + 1), t.name))
    pending = chosen.withheld_problems(state.problem_ids)
    return chosen.name, pending[0]


def scroll(state: ContestState) -> CommandOutcome:
    """Disclose all withheld submissions, worst-ranked team first.

    Returns:
        CommandOutcome with:
        - standing: the pre-scroll view (withheld problems still unsolved)
        - events: overtakes in the order they happened
        - final_standing: the standing after every buffer is drained

    Each iteration drains one team-problem buffer completely, so the loop runs
    at most once per buffered team-problem pair. The frozen flag is cleared at
    the end.
    """
    if not state.frozen:
        return _fail("SCROLL", "not_frozen", "scoreboard has not been frozen")

    before = _recompute(state)
    current = before
    events: list[OvertakeEvent] = []

    while True:
        selection = _select_next_disclosure(state, current)
        if selection is None:
            break
        team_name, problem = selection
        old_rank = current.rank_of(team_name)

        replayed = state.teams[team_name].problems[problem].disclose()
        current = _recompute(state)
        new_rank = current.rank_of(team_name)
        logger.debug(
            f"disclosed {team_name}/{problem}: {replayed} submission(s), rank {old_rank} -> {new_rank}"
        )

        if old_rank is not None and new_rank is not None and new_rank < old_rank:
            row = current.row_of(team_name)
            displaced = current.team_at(new_rank + 1)
            event = OvertakeEvent(
                team=team_name,
                displaced=displaced or "",
                solved=row.solved,
                penalty=row.penalty,
            )
            logger.debug(f"overtake: {event}")
            events.append(event)

    state.frozen = False
    return CommandOutcome(
        command="SCROLL",
        standing=before,
        events=tuple(events),
        final_standing=current,
    )


def query_ranking(state: ContestState, team: str) -> CommandOutcome:
    """Rank of ``team`` from the last computed standing.

    Before any flush/scroll the rank is the team's position in alphabetical
    order. While frozen the result is flagged stale.
    """
    if team not in state.teams:
        return _fail("QUERY_RANKING", "team_not_found", "cannot find the team", team=team)
    if state.last_standing is not None:
        rank = state.last_standing.rank_of(team)
    else:
        rank = alphabetical_rank(state.teams, team)
    return CommandOutcome(command="QUERY_RANKING", team=team, rank=rank, stale=state.frozen)


def query_submission(
    state: ContestState,
    team: str,
    problem: str = ScoringConfig.WILDCARD,
    status: str = ScoringConfig.WILDCARD,
) -> CommandOutcome:
    """Most recent ledger entry matching both filters ("ALL" matches anything).

    ``outcome.submission`` is None when nothing matches.
    """
    entry = state.teams.get(team)
    if entry is None:
        return _fail("QUERY_SUBMISSION", "team_not_found", "cannot find the team", team=team)

    found: Optional[Submission] = None
    for sub in reversed(entry.submissions):
        if problem != ScoringConfig.WILDCARD and sub.problem != problem:
            continue
        if status != ScoringConfig.WILDCARD and sub.status != status:
            continue
        found = sub
        break
    return CommandOutcome(command="QUERY_SUBMISSION", team=team, submission=found)


def end(state: ContestState) -> CommandOutcome:
    state.ended = True
    logger.debug("competition ended")
    return CommandOutcome(command="END")


def apply_command(state: ContestState, cmd: Dict[str, Any]) -> CommandOutcome:
    """Validate a command dict and apply it to ``state``.

    Args:
        state: Engine instance (mutated in place)
        cmd: Command dict with 'type' field and command-specific params

    Returns:
        CommandOutcome for the operation (contest errors in outcome.error)

    Raises:
        ValueError: If the command is malformed (unknown type, missing fields,
        out-of-range values)
    """
    validated = InputSanitizer.validate_and_sanitize_cmd(dict(cmd))
    ctype = validated.type

    if ctype == "ADDTEAM":
        return add_team(state, validated.team)
    if ctype == "START":
        return start(state, validated.duration, validated.problemCount)
    if ctype == "SUBMIT":
        return submit(state, validated.problem, validated.team, validated.status, validated.time)
    if ctype == "FLUSH":
        return flush(state)
    if ctype == "FREEZE":
        return freeze(state)
    if ctype == "SCROLL":
        return scroll(state)
    if ctype == "QUERY_RANKING":
        return query_ranking(state, validated.team)
    if ctype == "QUERY_SUBMISSION":
        return query_submission(
            state, validated.team, validated.problemFilter, validated.statusFilter
        )
    return end(state)
