"""Weighted vote tallying for proposals.

Ballots name options by their index in the proposal's option list. A ballot
is either a single choice, which puts its whole weight on one option, or a
multiple choice, which splits its weight equally across the chosen options.
The tally is always recomputed from the full list of ballots.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class SingleChoice:
    index: int


@dataclass(frozen=True)
class MultipleChoice:
    indices: Tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(self, "indices", tuple(sorted(set(self.indices))))


Choice = Union[SingleChoice, MultipleChoice]


@dataclass(frozen=True)
class Ballot:
    voter: str
    choice: Choice
    weight: Optional[float] = None

    @property
    def effective_weight(self) -> float:
        if self.weight is not None and self.weight > 0:
            return float(self.weight)
        return 1.0


def choice_from_raw(raw) -> Choice:
    """Build a choice from its stored form: an int or a list of ints."""
    if isinstance(raw, (list, tuple, set, frozenset)):
        return MultipleChoice(tuple(int(index) for index in raw))
    return SingleChoice(int(raw))


def tally(options: Sequence[str], votes: Iterable[Ballot]) -> List[dict]:
    totals = [0.0] * len(options)

    for vote in votes:
        weight = vote.effective_weight

        if isinstance(vote.choice, SingleChoice):
            if 0 <= vote.choice.index < len(totals):
                totals[vote.choice.index] += weight
            continue

        # Out-of-range indices are dropped before splitting.
        chosen = [index for index in vote.choice.indices if 0 <= index < len(totals)]
        if not chosen:
            continue
        share = weight / len(chosen)
        for index in chosen:
            totals[index] += share

    total_weight = sum(totals)

    results = []
    for index, option in enumerate(options):
        count = totals[index]
        percent = (count / total_weight * 100) if total_weight > 0 else 0.0
        results.append(
            {"option": option, "index": index, "votes": count, "percentage": percent}
        )
    return results


def leading_option(results: Sequence[dict]) -> Optional[dict]:
    """Highest tallied option; ties go to the earliest option."""
    leader = None
    for row in results:
        if leader is None or row["votes"] > leader["votes"]:
            leader = row
    return leader


def total_vote_count(votes: Sequence[Ballot]) -> int:
    return len(votes)


def total_weight(results: Sequence[dict]) -> float:
    return sum(row["votes"] for row in results)
