"""
Tests for draft order prediction, pick slot numbering and draft results.

The standings fixture gives franchise n exactly n wins, so franchise 0001
has the worst record and picks first in every round.
"""

import pytest

from conftest import franchise_id, make_standing
from league_api.draft_order import (
    TradeCommentStatus,
    apply_pick_ownership,
    build_actual_draft_picks,
    build_trade_chains,
    calculate_draft_order,
    classify_trade_comment,
    convert_actual_picks_to_predictions,
    extract_actual_assets,
    format_trade_chain,
    overall_pick_number,
    parse_trade_from_comment,
    regular_picks_in_round,
    round_size,
    sort_by_record_reverse,
)
from league_api.models import AssetPick, AssetsFranchise, AssetsResult, ToiletBowlLevel, ToiletBowlResult


@pytest.fixture
def toilet_bowl():
    return [
        ToiletBowlResult(ToiletBowlLevel.WINNER, "0003"),
        ToiletBowlResult(ToiletBowlLevel.CONSOLATION, "0005"),
        ToiletBowlResult(ToiletBowlLevel.CONSOLATION2, "0007"),
    ]


class TestSlotLayout:
    """Overall numbers follow the order picks are actually made."""

    def test_round_sizes(self):
        assert round_size(1, 16) == 17
        assert round_size(2, 16) == 18
        assert round_size(3, 16) == 16

    def test_overall_numbers(self):
        assert overall_pick_number(1, 1) == 1
        assert overall_pick_number(1, 16) == 16
        assert overall_pick_number(1, 17) == 17
        assert overall_pick_number(2, 1) == 18
        assert overall_pick_number(2, 17) == 34
        assert overall_pick_number(2, 18) == 35
        assert overall_pick_number(3, 1) == 36
        assert overall_pick_number(3, 16) == 51

    def test_regular_picks_skip_reserved_slots(self):
        assert regular_picks_in_round(1, 16) == list(range(1, 17))
        assert 17 not in regular_picks_in_round(2, 16)


class TestSortByRecordReverse:

    def test_worst_record_first(self, standings):
        ordered = sort_by_record_reverse(reversed(standings))
        assert [s.id for s in ordered] == [franchise_id(n) for n in range(1, 17)]

    def test_ties_excluded_from_win_pct(self):
        tied = make_standing(1, wins=5, losses=5, ties=2, all_play_pct=0.6)
        untied = make_standing(2, wins=5, losses=5, all_play_pct=0.4)

        assert tied.win_pct == untied.win_pct == 0.5
        assert [s.id for s in sort_by_record_reverse([tied, untied])] == ["0002", "0001"]

    @pytest.mark.parametrize("field", ["all_play_pct", "pf", "pwr", "vp", "pa"])
    def test_tiebreaker_cascade(self, field):
        """Each tiebreaker decides only when everything before it is equal."""
        low = make_standing(1, wins=8, losses=9, **{field: 1})
        high = make_standing(2, wins=8, losses=9, **{field: 2})

        assert [s.id for s in sort_by_record_reverse([high, low])] == ["0001", "0002"]

    def test_all_play_beats_points_for(self):
        a = make_standing(1, wins=8, losses=9, all_play_pct=0.30, pf=2000.0)
        b = make_standing(2, wins=8, losses=9, all_play_pct=0.50, pf=1000.0)

        assert [s.id for s in sort_by_record_reverse([b, a])] == ["0001", "0002"]

    def test_full_tie_keeps_input_order(self):
        a = make_standing(1, wins=8, losses=9)
        b = make_standing(2, wins=8, losses=9)

        assert [s.id for s in sort_by_record_reverse([b, a])] == ["0002", "0001"]


class TestCalculateDraftOrder:

    def test_full_board_with_toilet_bowl(self, standings, team_configs, toilet_bowl):
        picks = calculate_draft_order(standings, team_configs, toilet_bowl_winners=toilet_bowl)

        assert len(picks) == 51
        assert [p.overall_pick_number for p in picks] == list(range(1, 52))

    def test_board_without_toilet_bowl(self, standings, team_configs):
        picks = calculate_draft_order(standings, team_configs)

        assert len(picks) == 48
        assert not any(p.is_toilet_bowl_pick for p in picks)
        numbers = [p.overall_pick_number for p in picks]
        assert numbers == sorted(numbers)
        assert {17, 34, 35}.isdisjoint(numbers)

    def test_overall_numbers_unique(self, standings, team_configs, toilet_bowl):
        picks = calculate_draft_order(standings, team_configs, toilet_bowl_winners=toilet_bowl)
        assert len({p.overall_pick_number for p in picks}) == len(picks)
        assert len({(p.round, p.pick_in_round) for p in picks}) == len(picks)

    def test_reverse_standings_each_round(self, standings, team_configs):
        picks = calculate_draft_order(standings, team_configs)

        for round_number in (1, 2, 3):
            in_round = [p for p in picks if p.round == round_number]
            assert [p.franchise_id for p in in_round] == [franchise_id(n) for n in range(1, 17)]

    def test_toilet_bowl_slots(self, standings, team_configs, toilet_bowl):
        picks = {p.overall_pick_number: p for p in calculate_draft_order(standings, team_configs, toilet_bowl_winners=toilet_bowl)}

        assert (picks[17].round, picks[17].pick_in_round, picks[17].franchise_id) == (1, 17, "0003")
        assert picks[17].toilet_bowl_type == ToiletBowlLevel.WINNER
        assert (picks[34].pick_in_round, picks[34].franchise_id) == (17, "0005")
        assert (picks[35].pick_in_round, picks[35].franchise_id) == (18, "0007")
        assert all(picks[n].is_toilet_bowl_pick for n in (17, 34, 35))

    def test_partial_toilet_bowl(self, standings, team_configs):
        winners = [ToiletBowlResult(ToiletBowlLevel.WINNER, "0003")]
        picks = calculate_draft_order(standings, team_configs, toilet_bowl_winners=winners)

        assert len(picks) == 49
        assert [p.overall_pick_number for p in picks if p.is_toilet_bowl_pick] == [17]

    def test_toilet_bowl_winner_missing_from_standings(self, standings, team_configs):
        winners = [ToiletBowlResult(ToiletBowlLevel.WINNER, "0099")]
        assert len(calculate_draft_order(standings, team_configs, toilet_bowl_winners=winners)) == 48

    def test_league_winner_flagged_not_moved(self, standings, team_configs):
        picks = calculate_draft_order(standings, team_configs, league_winner_id="0016")

        flagged = [p for p in picks if p.is_league_winner]
        assert len(flagged) == 1
        assert (flagged[0].round, flagged[0].pick_in_round) == (1, 16)

    def test_unknown_league_winner_ignored(self, standings, team_configs):
        picks = calculate_draft_order(standings, team_configs, league_winner_id="0099")
        assert not any(p.is_league_winner for p in picks)

    def test_deterministic(self, standings, team_configs, toilet_bowl):
        first = calculate_draft_order(standings, team_configs, "0016", toilet_bowl)
        second = calculate_draft_order(list(standings), dict(team_configs), "0016", list(toilet_bowl))
        assert first == second

    def test_display_metadata(self, standings, team_configs):
        pick = calculate_draft_order(standings, team_configs)[0]

        assert pick.team_name == "Team 1"
        assert pick.team_icon == "/icons/1.png"
        assert (pick.current_record.wins, pick.current_record.losses) == (1, 16)
        assert pick.current_standing.points_for == 1001.0

    def test_falls_back_to_standings_name(self, standings):
        assert calculate_draft_order(standings, {})[0].team_name == "Team 1"

    def test_empty_standings(self):
        assert calculate_draft_order([], {}) == []


class TestApplyPickOwnership:

    def test_traded_pick_moves_to_owner(self, standings, team_configs, toilet_bowl):
        assets = AssetsResult(franchises=(
            AssetsFranchise("0005", "Team 5", (AssetPick(1, 1, "0001"), AssetPick(1, 5, "0005"))),
        ))
        picks = calculate_draft_order(standings, team_configs, toilet_bowl_winners=toilet_bowl)
        moved = apply_pick_ownership(picks, assets, team_configs)

        first = moved[0]
        assert first.franchise_id == "0005"
        assert first.team_name == "Team 5"
        assert first.is_traded
        assert first.original_team_name == "Team 1"
        assert first.trade_chain == ("Team 1",)
        assert moved[4] == picks[4]
        # Round 2 pick of franchise 0001 wasn't traded
        assert moved[17].franchise_id == "0001"

    def test_toilet_bowl_picks_never_move(self, standings, team_configs, toilet_bowl):
        assets = AssetsResult(franchises=(AssetsFranchise("0009", "Team 9", (AssetPick(1, 3, "0003"),)),))
        picks = calculate_draft_order(standings, team_configs, toilet_bowl_winners=toilet_bowl)
        moved = apply_pick_ownership(picks, assets, team_configs)

        assert moved[2].franchise_id == "0009"
        assert moved[16].franchise_id == "0003"
        assert moved[16].is_toilet_bowl_pick

    def test_error_result_leaves_predictions(self, standings, team_configs):
        picks = calculate_draft_order(standings, team_configs)
        assert apply_pick_ownership(picks, AssetsResult(error="Missing"), team_configs) == picks


class TestTradeComments:

    def test_traded_from(self):
        assert parse_trade_from_comment("[Pick traded from Team Alpha.]") == "Team Alpha"

    def test_traded_without_from(self):
        assert parse_trade_from_comment("[Pick traded Team Alpha.]") == "Team Alpha"

    def test_name_with_period(self):
        assert parse_trade_from_comment("Auto pick [Pick traded from St. Louis Blues.]") == "St. Louis Blues"

    def test_no_comment(self):
        assert classify_trade_comment(None).status == TradeCommentStatus.NONE
        assert classify_trade_comment("Great value pick").status == TradeCommentStatus.NONE

    def test_unparseable_trade_note(self):
        comment = classify_trade_comment("Pick traded to Team Alpha")

        assert comment.status == TradeCommentStatus.UNPARSEABLE
        assert comment.team_name is None

    def test_format_trade_chain(self):
        assert format_trade_chain([]) == ""
        assert format_trade_chain(["A"]) == "from A"
        assert format_trade_chain(["A", "B", "C"]) == "from A via B via C"


@pytest.fixture
def draft_results():
    return {
        "draftResults": {
            "draftUnit": {
                "draftPick": [
                    {"round": "01", "pick": "01", "franchise": "0005", "comments": "[Pick traded from Team 1.]"},
                    {"round": "01", "pick": "02", "franchise": "0002", "comments": ""},
                    {"round": "02", "pick": "01", "franchise": "0001"},
                    {"round": "02", "pick": "02", "franchise": ""},
                ]
            }
        }
    }


class TestDraftResults:

    def test_extract_actual_assets(self, draft_results, team_configs):
        assets = extract_actual_assets(draft_results, team_configs)

        assert list(assets) == ["01.01", "01.02", "02.01"]
        traded = assets["01.01"]
        assert traded["current_franchise_id"] == "0005"
        assert traded["current_team_name"] == "Team 5"
        assert traded["original_team_name"] == "Team 1"
        assert traded["is_traded"]
        assert not assets["01.02"]["is_traded"]

    def test_unknown_owner_name(self, draft_results):
        assert extract_actual_assets(draft_results, {})["01.02"]["current_team_name"] == "Unknown Team"

    def test_trade_chains(self, draft_results, team_configs):
        chains = build_trade_chains(draft_results, team_configs)

        assert chains == {
            "01.01": {"original": "Team 1", "original_franchise_id": "0001", "chain": ["Team 1"]},
        }

    def test_actual_picks_sorted_by_overall(self, draft_results, team_configs):
        picks = build_actual_draft_picks(draft_results, team_configs)

        assert [p["overall_pick_number"] for p in picks] == [1, 2, 18]
        assert picks[0]["original_team_icon"] == "/icons/1.png"
        assert picks[1]["original_team_icon"] is None

    def test_convert_to_predictions(self, draft_results, team_configs):
        predictions = convert_actual_picks_to_predictions(build_actual_draft_picks(draft_results, team_configs), team_configs)

        assert predictions[0].franchise_id == "0005"
        assert predictions[0].trade_chain == ("Team 1",)
        assert predictions[0].original_team_icon == "/icons/1.png"
        assert predictions[2].round == 2
        assert not predictions[2].is_traded

    def test_missing_results(self, team_configs):
        assert extract_actual_assets(None, team_configs) == {}
        assert build_actual_draft_picks({"draftResults": {}}, team_configs) == []
