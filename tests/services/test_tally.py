import math
from itertools import permutations

from govdash.services.voting import (
    Ballot,
    MultipleChoice,
    SingleChoice,
    choice_from_raw,
    leading_option,
    tally,
    total_vote_count,
    total_weight,
)


def single(index, weight=None, voter="0xvoter"):
    return Ballot(voter=voter, choice=SingleChoice(index), weight=weight)


def multiple(indices, weight=None, voter="0xvoter"):
    return Ballot(voter=voter, choice=MultipleChoice(tuple(indices)), weight=weight)


def test_single_choice_counts_and_percentages():
    results = tally(["Yes", "No", "Abstain"], [single(0, 1), single(0, 1), single(1, 1)])

    assert [row["option"] for row in results] == ["Yes", "No", "Abstain"]
    assert [row["index"] for row in results] == [0, 1, 2]
    assert [row["votes"] for row in results] == [2, 1, 0]
    assert [round(row["percentage"], 2) for row in results] == [66.67, 33.33, 0]


def test_multiple_choice_splits_weight_equally():
    results = tally(["A", "B", "C"], [multiple([0, 1], weight=2)])

    assert [row["votes"] for row in results] == [1, 1, 0]
    assert [row["percentage"] for row in results] == [50, 50, 0]


def test_no_votes_gives_zero_baseline():
    results = tally(["A", "B"], [])

    assert all(row["votes"] == 0 for row in results)
    assert all(row["percentage"] == 0 for row in results)
    assert all(isinstance(row["percentage"], float) for row in results)


def test_empty_options_yield_empty_result():
    assert tally([], [single(0)]) == []
    assert leading_option([]) is None


def test_percentages_sum_to_one_hundred():
    votes = [
        single(0, 3),
        multiple([0, 1, 2], weight=7),
        multiple([1, 3]),
        single(3, 0.25),
    ]
    results = tally(["A", "B", "C", "D"], votes)

    assert math.isclose(sum(row["percentage"] for row in results), 100, rel_tol=1e-9)
    assert math.isclose(total_weight(results), 3 + 7 + 1 + 0.25, rel_tol=1e-9)


def test_missing_or_non_positive_weight_counts_as_one():
    results = tally(["A", "B", "C"], [single(0), single(1, 0), single(2, -4)])

    assert [row["votes"] for row in results] == [1, 1, 1]


def test_out_of_range_indices_are_ignored():
    results = tally(["A", "B"], [single(5), single(-1), single(1)])
    assert [row["votes"] for row in results] == [0, 1]
    assert [row["percentage"] for row in results] == [0, 100]

    # Remaining valid indices share the full weight.
    results = tally(["A", "B"], [multiple([0, 1, 9], weight=4)])
    assert [row["votes"] for row in results] == [2, 2]


def test_empty_multiple_choice_contributes_nothing():
    results = tally(["A", "B"], [multiple([]), multiple([7, 8])])

    assert [row["votes"] for row in results] == [0, 0]
    assert [row["percentage"] for row in results] == [0, 0]


def test_duplicate_indices_count_once():
    results = tally(["A", "B"], [multiple([0, 0, 1], weight=2)])

    assert [row["votes"] for row in results] == [1, 1]


def test_leading_option_tie_goes_to_first_option():
    results = tally(["X", "Y"], [single(0, 5), single(1, 5)])

    assert leading_option(results)["option"] == "X"


def test_leading_option_picks_highest_weight():
    results = tally(["X", "Y", "Z"], [single(0, 1), single(2, 4), single(1, 3)])

    leader = leading_option(results)
    assert leader["option"] == "Z"
    assert leader["index"] == 2


def test_result_is_stable_under_vote_reordering():
    votes = [single(0, 2), multiple([0, 1], weight=4), single(2), multiple([1, 2])]
    expected = tally(["A", "B", "C"], votes)

    for ordering in permutations(votes):
        assert tally(["A", "B", "C"], list(ordering)) == expected


def test_tally_is_idempotent():
    options = ["A", "B", "C"]
    votes = [single(0, 1.5), multiple([1, 2], weight=3)]

    assert tally(options, votes) == tally(options, votes)


def test_total_vote_count_counts_records_not_weight():
    votes = [single(0, 1000), single(1, 500), multiple([0, 1])]

    assert total_vote_count(votes) == 3


def test_repeat_voter_is_tallied_additively():
    votes = [single(0, voter="0xsame"), single(0, voter="0xsame")]

    assert tally(["A", "B"], votes)[0]["votes"] == 2


def test_choice_from_raw_builds_tagged_choices():
    assert choice_from_raw(2) == SingleChoice(2)
    assert choice_from_raw([2, 0, 2]) == MultipleChoice((0, 2))
