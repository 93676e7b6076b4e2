"""ICPC standings engine (solved count, penalty, solve-time profile, name).

Single source of truth for team ordering across flush/scroll/queries:
- More solved problems first.
- Then lower penalty (solve minute + 20 per wrong attempt, solved problems only).
- Then the descending-sorted solve times, compared element-wise; smaller wins.
- Then team name ascending.

Only visibly solved problems count. Withheld submissions never influence the
order until they are disclosed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

from .state import Team


@dataclass(frozen=True)
class RankEntry:
    team: str
    solved: int
    penalty: int
    # Descending; equal solved counts imply equal length.
    solve_times: tuple[int, ...]


@dataclass(frozen=True)
class ProblemCell:
    problem: str
    solved: bool
    wrong_attempts: int
    withheld: int


@dataclass(frozen=True)
class StandingRow:
    team: str
    rank: int
    solved: int
    penalty: int
    cells: tuple[ProblemCell, ...]


@dataclass(frozen=True)
class Standing:
    rows: tuple[StandingRow, ...]

    def __iter__(self) -> Iterator[StandingRow]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def ranks(self) -> dict[str, int]:
        return {row.team: row.rank for row in self.rows}

    def rank_of(self, team: str) -> int | None:
        for row in self.rows:
            if row.team == team:
                return row.rank
        return None

    def row_of(self, team: str) -> StandingRow | None:
        for row in self.rows:
            if row.team == team:
                return row
        return None

    def team_at(self, rank: int) -> str | None:
        # Ranks are 1..n without gaps.
        if 1 <= rank <= len(self.rows):
            return self.rows[rank - 1].team
        return None


def build_rank_entry(team: Team, problem_ids: Sequence[str]) -> RankEntry:
    solved = 0
    penalty = 0
    times: list[int] = []
    for pid in problem_ids:
        ps = team.problems.get(pid)
        if ps is None or not ps.solved:
            continue
        solved += 1
        penalty += ps.penalty
        times.append(ps.solve_time)
    times.sort(reverse=True)
    return RankEntry(team=team.name, solved=solved, penalty=penalty, solve_times=tuple(times))


def rank_sort_key(entry: RankEntry) -> tuple[int, int, tuple[int, ...], str]:
    return (-entry.solved, entry.penalty, entry.solve_times, entry.team)


def compare_entries(a: RankEntry, b: RankEntry) -> int:
    """Three-way comparison: negative when ``a`` ranks above ``b``."""
    ka, kb = rank_sort_key(a), rank_sort_key(b)
    if ka < kb:
        return -1
    if ka > kb:
        return 1
    return 0


def _cells(team: Team, problem_ids: Sequence[str]) -> tuple[ProblemCell, ...]:
    cells: list[ProblemCell] = []
    for pid in problem_ids:
        ps = team.problems.get(pid)
        if ps is None:
            cells.append(ProblemCell(problem=pid, solved=False, wrong_attempts=0, withheld=0))
            continue
        cells.append(
            ProblemCell(
                problem=pid,
                solved=ps.solved,
                wrong_attempts=ps.wrong_attempts,
                withheld=len(ps.withheld),
            )
        )
    return tuple(cells)


def compute_standing(teams: Iterable[Team], problem_ids: Sequence[str]) -> Standing:
    """
    Compute the full standing for the given teams.

    Args:
      teams: teams to rank (order does not matter).
      problem_ids: active problem ids; only these contribute to score and cells.

    Pure and deterministic: the same input always yields the same standing.
    """
    team_list = list(teams)
    entries = [(build_rank_entry(team, problem_ids), team) for team in team_list]
    entries.sort(key=lambda pair: rank_sort_key(pair[0]))

    rows = tuple(
        StandingRow(
            team=entry.team,
            rank=pos,
            solved=entry.solved,
            penalty=entry.penalty,
            cells=_cells(team, problem_ids),
        )
        for pos, (entry, team) in enumerate(entries, start=1)
    )
    return Standing(rows=rows)


def alphabetical_rank(team_names: Iterable[str], team: str) -> int | None:
    """Fallback rank before any standing exists: position in sorted names."""
    for pos, name in enumerate(sorted(team_names), start=1):
        if name == team:
            return pos
    return None
