import random
from functools import cmp_to_key

import pytest

from standings_kiosk.models.team import NO_RANK
from standings_kiosk.ranking.engine import compare_teams, merge_ranks, rank_teams, sort_key


def names(ranked):
    return [r.team for r in ranked]


class TestMerge:
    def test_net_rank_merge_only_touches_rank_fields(self, team):
        record = team("TEAM A", conf=(5, 2), overall=(10, 4))
        [merged] = merge_ranks([record], {"TEAM A": 12}, field="net_rank")
        assert merged.net_rank == 12
        assert merged.ap_rank == NO_RANK
        assert (merged.conf_wins, merged.conf_losses) == (5, 2)
        assert (merged.overall_wins, merged.overall_losses) == (10, 4)
        # Input is not mutated
        assert record.net_rank is None

    def test_ap_merge_matches_by_normalized_name(self, team):
        records = [team("MICHIGAN STATE"), team("PURDUE")]
        merged = merge_ranks(records, {"Michigan St.": 8, "purdue": 2})
        assert [r.ap_rank for r in merged] == [8, 2]

    def test_unmatched_poll_entries_are_dropped(self, team):
        records = [team("PURDUE"), team("IOWA")]
        merged = merge_ranks(records, {"HOUSTON": 1, "PURDUE": 3})
        assert names(merged) == ["PURDUE", "IOWA"]
        assert [r.ap_rank for r in merged] == [3, NO_RANK]

    def test_empty_ranks_returns_copy(self, team):
        records = [team("PURDUE")]
        merged = merge_ranks(records, {})
        assert merged == records
        assert merged is not records

    def test_unknown_field_rejected(self, team):
        with pytest.raises(ValueError):
            merge_ranks([team("PURDUE")], {"PURDUE": 1}, field="conf_wins")


class TestComparator:
    def test_conference_pct_first(self, team):
        ranked = rank_teams(
            [
                team("A", conf=(5, 2), overall=(20, 2)),
                team("B", conf=(6, 1), overall=(10, 10)),
            ]
        )
        assert names(ranked) == ["B", "A"]

    def test_conference_wins_break_pct_ties(self, team):
        ranked = rank_teams([team("A", conf=(3, 1)), team("B", conf=(6, 2))])
        assert names(ranked) == ["B", "A"]

    def test_overall_pct_then_wins(self, team):
        ranked = rank_teams(
            [
                team("A", conf=(5, 5), overall=(10, 10)),
                team("B", conf=(5, 5), overall=(15, 5)),
                team("C", conf=(5, 5), overall=(18, 6)),
            ]
        )
        # B and C both .750 overall; C has more wins
        assert names(ranked) == ["C", "B", "A"]

    def test_favorite_sorts_ahead_of_tied_team(self, team):
        records = [
            team("ILLINOIS", conf=(7, 3), overall=(18, 5), ap_rank=10),
            team("WISCONSIN", conf=(7, 3), overall=(18, 5)),
        ]
        assert names(rank_teams(records)) == ["ILLINOIS", "WISCONSIN"]
        assert names(rank_teams(records, favorite_team="Wisconsin")) == ["WISCONSIN", "ILLINOIS"]

    def test_favorite_does_not_beat_better_record(self, team):
        records = [
            team("ILLINOIS", conf=(8, 2)),
            team("WISCONSIN", conf=(7, 3)),
        ]
        assert names(rank_teams(records, favorite_team="WISCONSIN")) == ["ILLINOIS", "WISCONSIN"]

    def test_ranked_beats_unranked_then_lower_rank(self, team):
        ranked = rank_teams([team("A"), team("B", ap_rank=20), team("C", ap_rank=4)])
        assert names(ranked) == ["C", "B", "A"]

    def test_net_rank_breaks_remaining_ties(self, team):
        ranked = rank_teams(
            [team("A"), team("B", net_rank=40), team("C", net_rank=7), team("D", ap_rank=25)]
        )
        assert names(ranked) == ["D", "C", "B", "A"]

    def test_alphabetical_fallback(self, team):
        ranked = rank_teams([team("NEBRASKA"), team("IOWA"), team("MARYLAND")])
        assert names(ranked) == ["IOWA", "MARYLAND", "NEBRASKA"]

    def test_comparator_is_antisymmetric(self, team):
        a = team("A", conf=(4, 4), ap_rank=9)
        b = team("B", conf=(4, 4), net_rank=3)
        assert compare_teams(a, b) == -compare_teams(b, a)
        assert compare_teams(a, a) == 0


def test_sorting_is_deterministic_under_shuffles(team):
    rng = random.Random(1234)
    records = []
    for index in range(40):
        records.append(
            team(
                f"TEAM {index:02d}",
                conf=(rng.randint(0, 4), rng.randint(0, 4)),
                overall=(rng.randint(0, 8), rng.randint(0, 8)),
                ap_rank=rng.choice([NO_RANK, NO_RANK, rng.randint(1, 25)]),
                net_rank=rng.choice([None, rng.randint(1, 360)]),
            )
        )

    expected = names(rank_teams(records, favorite_team="TEAM 07"))
    for _ in range(10):
        shuffled = records[:]
        rng.shuffle(shuffled)
        assert names(rank_teams(shuffled, favorite_team="TEAM 07")) == expected

    # The tuple key produces the same order
    by_key = sorted(records, key=lambda r: sort_key(r, "TEAM 07"))
    assert [r.team for r in by_key] == expected

    by_cmp = sorted(records, key=cmp_to_key(lambda a, b: compare_teams(a, b, "TEAM 07")))
    for first, second in zip(by_cmp, by_cmp[1:]):
        assert compare_teams(first, second, "TEAM 07") < 0


def test_duplicate_teams_keep_first(team):
    ranked = rank_teams([team("IOWA", conf=(1, 0)), team("IOWA", conf=(0, 1)), team("OHIO STATE")])
    assert names(ranked) == ["IOWA", "OHIO STATE"]
    assert ranked[0].conf_wins == 1
    assert [r.position for r in ranked] == [1, 2]
