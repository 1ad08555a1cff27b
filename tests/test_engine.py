from __future__ import annotations

import pytest

from grouping.entities import GroupingInputs
from grouping.optimization import (
    CANNOT_PAIR_VIOLATED,
    FALLBACK_PLACEMENT,
    MUST_PAIR_SEPARATED,
    UNHONORED_MUST_PAIR,
    GroupingConfig,
    optimize_groups,
    run_assignment,
)
from grouping.pair_generation import PairIndex
from grouping.scoring import score_group
from tests.utils import cannot, make_people, member_sets, must, rating, same_group


def test_highest_rated_pair_grouped_together() -> None:
    people = make_people("A", "B", "C", "D")
    result = optimize_groups(people, [rating("A", "B", 5)], [], 2)

    assert member_sets(result) == [{"A", "B"}, {"C", "D"}]
    assert [g.total_score for g in result] == [5, 3]
    assert result.total_score == 8
    assert result.warnings == []


def test_cannot_pair_people_are_separated() -> None:
    people = make_people("A", "B", "C", "D")
    result = optimize_groups(people, [], [cannot("A", "B")], 2)

    assert not same_group(result, "A", "B")
    # C ties between both groups and takes the first one
    assert member_sets(result) == [{"A", "C"}, {"B", "D"}]
    assert not result.has_violations


def test_must_pair_seeds_first_group() -> None:
    people = make_people("A", "B", "C", "D", "E", "F")
    result = optimize_groups(people, [], [must("A", "B")], 3)

    assert same_group(result, "A", "B")
    assert [g.size for g in result] == [3, 3]
    assert member_sets(result) == [{"A", "B", "C"}, {"D", "E", "F"}]


def test_remainder_leaves_single_member_group() -> None:
    people = make_people("A", "B", "C", "D", "E")
    result = optimize_groups(people, [], [], 2)

    assert len(result) == 3
    assert [g.size for g in result] == [2, 2, 1]
    assert result[2].total_score == 0
    assert result[2].average_rating is None


def test_empty_roster_gives_empty_assignment() -> None:
    result = optimize_groups([], [], [], 3)

    assert len(result) == 0
    assert result.total_score == 0
    assert result.efficiency() == 0.0


@pytest.mark.parametrize("bad_size", [0, -2, 1.5, "3", True, None])
def test_invalid_group_size_rejected(bad_size) -> None:
    with pytest.raises(ValueError):
        optimize_groups(make_people("A", "B"), [], [], bad_size)


def test_every_person_placed_exactly_once() -> None:
    names = [f"P{i}" for i in range(11)]
    people = make_people(*names)
    ratings = [rating(names[i], names[(i * 3) % 11], (i % 5) + 1) for i in range(1, 11)]
    constraints = [must("P1", "P2"), cannot("P3", "P4"), cannot("P5", "P6")]

    result = optimize_groups(people, ratings, constraints, 4)

    placed = [pid for g in result for pid in g.member_ids]
    assert sorted(placed) == sorted(names)
    assert all(g.size <= 4 for g in result)
    assert not same_group(result, "P3", "P4")
    assert same_group(result, "P1", "P2")


def test_repeated_runs_are_identical() -> None:
    people = make_people("A", "B", "C", "D", "E", "F", "G")
    ratings = [rating("A", "G", 5), rating("B", "C", 1), rating("D", "E", 4)]
    constraints = [cannot("A", "B"), must("C", "F")]

    first = optimize_groups(people, ratings, constraints, 3)
    second = optimize_groups(people, ratings, constraints, 3)

    assert first.to_dict() == second.to_dict()


def test_reported_scores_match_recomputation() -> None:
    people = make_people("A", "B", "C", "D", "E", "F")
    ratings = [rating("A", "C", 5), rating("B", "D", 2), rating("E", "F", 4), rating("C", "E", 1)]
    result = optimize_groups(people, ratings, [], 3)

    index = PairIndex(ratings)
    for group in result:
        ids = group.member_ids
        expected = sum(
            index.lookup_score(ids[i], ids[j])
            for i in range(len(ids))
            for j in range(i + 1, len(ids))
        )
        assert group.total_score == expected == score_group(group.members, index)


def test_unrated_pair_counts_as_neutral() -> None:
    result = optimize_groups(make_people("A", "B"), [], [], 2)

    assert result[0].total_score == 3


def test_custom_default_rating_used_for_unrated_pairs() -> None:
    result = optimize_groups(make_people("A", "B", "C"), [], [], 3, default_rating=1)

    assert result[0].total_score == 3


def test_fallback_placement_reports_violation() -> None:
    people = make_people("A", "B")
    result = optimize_groups(people, [], [cannot("A", "B")], 2)

    assert member_sets(result) == [{"A", "B"}]
    kinds = [w.kind for w in result.warnings]
    assert FALLBACK_PLACEMENT in kinds
    assert CANNOT_PAIR_VIOLATED in kinds
    assert result.has_violations


def test_must_pair_without_room_falls_back_to_greedy() -> None:
    people = make_people("A", "B", "C", "D", "E", "F")
    constraints = [must("A", "B"), must("C", "D"), must("E", "F")]
    result = optimize_groups(people, [], constraints, 3)

    assert same_group(result, "A", "B")
    assert same_group(result, "C", "D")
    assert not same_group(result, "E", "F")
    separated = [w for w in result.warnings if w.kind == MUST_PAIR_SEPARATED]
    assert [set(w.person_ids) for w in separated] == [{"E", "F"}]
    unhonored = [w for w in result.warnings if w.kind == UNHONORED_MUST_PAIR]
    assert [w.person_ids for w in unhonored] == [("E", "F")]


def test_must_pair_with_unknown_person_is_inert() -> None:
    people = make_people("A", "B", "C", "D")
    result = optimize_groups(people, [rating("A", "B", 5)], [must("A", "ghost")], 2)

    assert member_sets(result) == [{"A", "B"}, {"C", "D"}]
    assert result.warnings == []


def test_must_pair_skipped_when_person_already_seeded() -> None:
    people = make_people("A", "B", "C", "D")
    result = optimize_groups(people, [], [must("A", "B"), must("B", "C")], 2)

    assert same_group(result, "A", "B")
    assert any(w.kind == MUST_PAIR_SEPARATED for w in result.warnings)


def test_group_ids_follow_creation_order() -> None:
    result = optimize_groups(make_people("A", "B", "C"), [], [], 1)

    assert [g.id for g in result] == ["group-0", "group-1", "group-2"]
    assert result.assignment_of("B").id == "group-1"
    assert result.assignment_of("nobody") is None


def test_run_assignment_resolves_group_count() -> None:
    inputs = GroupingInputs(people=make_people("A", "B", "C", "D", "E"))
    result = run_assignment(inputs, GroupingConfig(group_size=None, num_groups=2))

    assert result.group_size == 3
    assert [g.size for g in result] == [3, 2]


def test_refinement_improves_greedy_result() -> None:
    people = make_people("A", "B", "C", "D")
    ratings = [rating("A", "B", 4), rating("C", "D", 1), rating("A", "C", 5)]

    greedy = optimize_groups(people, ratings, [], 2)
    refined = optimize_groups(people, ratings, [], 2, refine=True)

    assert greedy.total_score == 5
    assert refined.total_score == 8
    assert same_group(refined, "A", "C")


def test_seeded_must_pairs_raise_no_unhonored_warning() -> None:
    result = optimize_groups(make_people("A", "B", "C", "D"), [], [must("A", "B")], 2)

    assert not any(w.kind == UNHONORED_MUST_PAIR for w in result.warnings)


def test_fallback_warning_names_group_after_refinement() -> None:
    people = make_people("A", "B", "C", "D")
    ratings = [rating("A", "C", 5), rating("B", "D", 5)]

    # D has no eligible group and falls back next to C; refinement then moves D
    result = optimize_groups(people, ratings, [cannot("C", "D")], 2, refine=True)

    assert member_sets(result) == [{"B", "D"}, {"A", "C"}]
    fallback = [w for w in result.warnings if w.kind == FALLBACK_PLACEMENT]
    assert [w.person_ids for w in fallback] == [("D",)]
    assert fallback[0].group_id == result.assignment_of("D").id == "group-0"
    assert not result.has_violations


def test_tuning_arguments_are_keyword_only() -> None:
    with pytest.raises(TypeError):
        optimize_groups(make_people("A", "B"), [], [], 2, 1)
