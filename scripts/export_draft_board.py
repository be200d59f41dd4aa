"""
Export the predicted draft board to Excel.
Reads saved MFL JSON snapshots from data/<league_id>/<season>/ and writes
data/<league_id>/draft_board_<draft_year>.xlsx.

Usage: python scripts/export_draft_board.py 13522 2025 [league_winner_id]
"""

import json
import sys
from pathlib import Path

import openpyxl
from openpyxl.styles import Font, PatternFill

from league_api.assets import extract_assets_from_transactions
from league_api.data_processor import parse_standings, team_configs_from_league
from league_api.draft_order import apply_pick_ownership, calculate_draft_order, format_trade_chain
from league_api.toilet_bowl import extract_toilet_bowl_winners

DATA_DIR = Path(__file__).parent.parent / "data"

HEADERS = ["Overall", "Pick", "Team", "Record", "All-Play %", "Points For", "Notes"]
TOILET_BOWL_FILL = PatternFill(start_color="FFF2CC", end_color="FFF2CC", fill_type="solid")
TRADED_FILL = PatternFill(start_color="DDEBF7", end_color="DDEBF7", fill_type="solid")


def load_snapshot(season_dir, name):
    """Load a saved export, or None if it wasn't saved."""
    path = season_dir / f"{name}.json"
    if not path.exists():
        print(f"  {path.name} not found, skipping")
        return None
    with open(path, "r") as f:
        return json.load(f)


def pick_notes(pick):
    notes = []
    if pick.is_toilet_bowl_pick:
        notes.append(f"Toilet bowl ({pick.toilet_bowl_type.value})")
    if pick.is_league_winner:
        notes.append("League winner")
    if pick.is_traded:
        notes.append(format_trade_chain(list(pick.trade_chain)))
    return ", ".join(notes)


def write_board(predictions, output_path, draft_year):
    wb = openpyxl.Workbook()
    sheet = wb.active
    sheet.title = f"{draft_year} Draft"

    sheet.append(HEADERS)
    for cell in sheet[1]:
        cell.font = Font(bold=True)

    for pick in predictions:
        record = pick.current_record
        sheet.append([
            pick.overall_pick_number,
            f"{pick.round}.{pick.pick_in_round:02d}",
            pick.team_name,
            f"{record.wins}-{record.losses}-{record.ties}",
            pick.current_standing.all_play_pct,
            pick.current_standing.points_for,
            pick_notes(pick),
        ])
        row = sheet.max_row
        fill = TOILET_BOWL_FILL if pick.is_toilet_bowl_pick else TRADED_FILL if pick.is_traded else None
        if fill:
            for cell in sheet[row]:
                cell.fill = fill

    sheet.column_dimensions["C"].width = 28
    sheet.column_dimensions["G"].width = 40
    wb.save(output_path)


def main():
    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(1)

    league_id = sys.argv[1]
    season = int(sys.argv[2])
    league_winner_id = sys.argv[3] if len(sys.argv) > 3 else None
    draft_year = season + 1
    season_dir = DATA_DIR / league_id / str(season)

    print(f"Building {draft_year} draft board for league {league_id}...")

    standings_data = load_snapshot(season_dir, "standings")
    if standings_data is None:
        print("Standings are required")
        sys.exit(1)

    standings = parse_standings(standings_data)
    team_configs = team_configs_from_league(load_snapshot(season_dir, "league"))
    toilet_bowl = extract_toilet_bowl_winners(load_snapshot(season_dir, "playoffBracket"))

    predictions = calculate_draft_order(standings, team_configs, league_winner_id, toilet_bowl)

    assets = extract_assets_from_transactions(load_snapshot(season_dir, "transactions"), standings_data, draft_year)
    if assets.ok:
        predictions = apply_pick_ownership(predictions, assets, team_configs)
    else:
        print(f"  Pick ownership not applied: {assets.error}")

    output_path = DATA_DIR / league_id / f"draft_board_{draft_year}.xlsx"
    write_board(predictions, output_path, draft_year)

    print(f"  {len(predictions)} picks, {len(toilet_bowl)} toilet bowl picks")
    print(f"Saved {output_path}")


if __name__ == "__main__":
    main()
