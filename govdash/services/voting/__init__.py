from govdash.services.voting.tally import (
    Ballot,
    MultipleChoice,
    SingleChoice,
    choice_from_raw,
    leading_option,
    tally,
    total_vote_count,
    total_weight,
)

__all__ = [
    "Ballot",
    "MultipleChoice",
    "SingleChoice",
    "choice_from_raw",
    "leading_option",
    "tally",
    "total_vote_count",
    "total_weight",
]
