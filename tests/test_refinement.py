from __future__ import annotations

from grouping.constraints import ConstraintSets, classify_constraints
from grouping.optimization import optimize_groups, refine_by_swaps
from grouping.pair_generation import PairIndex
from grouping.scoring import score_group
from tests.utils import cannot, make_people, must, rating, same_group


def _crossed_ratings():
    return [
        rating("A", "C", 5), rating("B", "D", 5),
        rating("A", "B", 1), rating("C", "D", 1),
    ]


def test_swaps_reach_better_split() -> None:
    a, b, c, d = make_people("A", "B", "C", "D")
    index = PairIndex(_crossed_ratings())
    buckets = [[a, b], [c, d]]

    swaps = refine_by_swaps(buckets, index, ConstraintSets())

    assert swaps >= 1
    assert [len(members) for members in buckets] == [2, 2]
    assert sum(score_group(members, index) for members in buckets) == 10
    assert {frozenset(p.id for p in members) for members in buckets} == {
        frozenset({"A", "C"}), frozenset({"B", "D"})
    }


def test_optimal_split_is_left_alone() -> None:
    a, b, c, d = make_people("A", "B", "C", "D")
    buckets = [[a, c], [b, d]]

    assert refine_by_swaps(buckets, PairIndex(_crossed_ratings()), ConstraintSets()) == 0
    assert [[p.id for p in members] for members in buckets] == [["A", "C"], ["B", "D"]]


def test_cannot_pair_blocks_swap() -> None:
    people = make_people("A", "B", "C", "D")
    ratings = [rating("A", "B", 4), rating("C", "D", 1), rating("A", "C", 5)]

    result = optimize_groups(people, ratings, [cannot("A", "C")], 2, refine=True)

    assert result.total_score == 6
    assert not same_group(result, "A", "C")
    assert not result.has_violations


def test_must_pair_partners_stay_together() -> None:
    people = make_people("A", "B", "C", "D")
    ratings = [rating("A", "B", 4), rating("C", "D", 1), rating("A", "C", 5)]

    result = optimize_groups(people, ratings, [must("A", "B")], 2, refine=True)

    assert result.total_score == 5
    assert same_group(result, "A", "B")


def test_pass_limit_stops_search() -> None:
    a, b, c, d = make_people("A", "B", "C", "D")
    index = PairIndex(_crossed_ratings())
    sets = classify_constraints([])
    buckets = [[a, b], [c, d]]

    refine_by_swaps(buckets, index, sets, max_passes=1)

    assert sorted(p.id for members in buckets for p in members) == ["A", "B", "C", "D"]


def test_refinement_never_lowers_total() -> None:
    names = [f"P{i}" for i in range(9)]
    people = make_people(*names)
    ratings = [
        rating(names[i], names[j], ((i * 7 + j * 3) % 5) + 1)
        for i in range(9)
        for j in range(i + 1, 9)
        if (i + j) % 3 != 0
    ]
    constraints = [cannot("P0", "P4"), must("P2", "P7")]

    greedy = optimize_groups(people, ratings, constraints, 3)
    refined = optimize_groups(people, ratings, constraints, 3, refine=True)

    assert refined.total_score >= greedy.total_score
    assert sorted(g.size for g in refined) == sorted(g.size for g in greedy)
    assert same_group(refined, "P2", "P7")
    assert not same_group(refined, "P0", "P4")
