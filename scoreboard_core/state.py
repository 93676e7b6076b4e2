"""Contest state: submission ledger, per-problem scoring state and the engine instance.

Every operation in ``contest.py`` receives one ``ContestState`` and mutates it in
place. Nothing here is global; two states never share data.

Per team-problem bookkeeping:
- solved / solve_time / wrong_attempts are the *visible* (committed) fields.
- withheld collects submissions that arrived while the board was frozen and the
  problem was not yet visibly solved. They only become visible through scroll.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

from .validation import ScoringConfig

if TYPE_CHECKING:
    from .ranking import Standing


@dataclass(frozen=True)
class Submission:
    problem: str
    status: str
    time: int

    @property
    def accepted(self) -> bool:
        return self.status == ScoringConfig.ACCEPTED


@dataclass
class ProblemState:
    solved: bool = False
    solve_time: int = 0
    wrong_attempts: int = 0
    withheld: List[Submission] = field(default_factory=list)

    def apply(self, submission: Submission) -> None:
        """Apply one submission under the unfrozen rule (first accepted wins)."""
        if self.solved:
            return
        if submission.accepted:
            self.solved = True
            self.solve_time = submission.time
        else:
            self.wrong_attempts += 1

    def disclose(self) -> int:
        """Replay and clear the withheld buffer. Returns how many were replayed."""
        pending = self.withheld
        self.withheld = []
        for sub in pending:
            self.apply(sub)
        return len(pending)

    @property
    def penalty(self) -> int:
        if not self.solved:
            return 0
        return self.solve_time + ScoringConfig.PENALTY_PER_WRONG_ATTEMPT * self.wrong_attempts


@dataclass
class Team:
    name: str
    submissions: List[Submission] = field(default_factory=list)
    problems: Dict[str, ProblemState] = field(default_factory=dict)

    def problem(self, problem_id: str) -> ProblemState:
        # Created lazily on first submission for the pair.
        ps = self.problems.get(problem_id)
        if ps is None:
            ps = ProblemState()
            self.problems[problem_id] = ps
        return ps

    def withheld_problems(self, problem_ids: Iterable[str]) -> List[str]:
        """Problem ids (in the given order) that still hold withheld submissions."""
        return [
            pid
            for pid in problem_ids
            if pid in self.problems and self.problems[pid].withheld
        ]

    def has_withheld(self) -> bool:
        return any(ps.withheld for ps in self.problems.values())


@dataclass
class ContestState:
    """The scoreboard engine instance: team table, lifecycle flags, cached standing."""

    teams: Dict[str, Team] = field(default_factory=dict)
    started: bool = False
    ended: bool = False
    frozen: bool = False
    # Recorded at start for callers; scoring does not depend on it.
    duration: int = 0
    problem_ids: List[str] = field(default_factory=list)
    last_standing: Optional["Standing"] = None

    def pending_disclosures(self) -> int:
        """Total withheld submissions across all teams."""
        return sum(
            len(ps.withheld) for team in self.teams.values() for ps in team.problems.values()
        )


def default_state() -> ContestState:
    """Create a fresh, not-yet-started contest with no teams."""
    return ContestState()


def problem_letters(count: int) -> List[str]:
    """First ``count`` letters of the alphabet, in order."""
    return [chr(ord("A") + i) for i in range(count)]
