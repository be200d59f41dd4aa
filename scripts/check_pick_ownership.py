"""
Cross-check draft pick ownership.
Compares the owners recorded in a draft's results (with their trade comments)
against the owners rebuilt by replaying the previous season's trades.

Usage: python scripts/check_pick_ownership.py 13522 2026
"""

import json
import sys
from pathlib import Path

from league_api.assets import compare_ownership, extract_assets_from_transactions
from league_api.data_processor import team_configs_from_league
from league_api.draft_order import TradeCommentStatus, extract_actual_assets

DATA_DIR = Path(__file__).parent.parent / "data"


def load_json(path):
    if not path.exists():
        return None
    with open(path, "r") as f:
        return json.load(f)


def main():
    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(1)

    league_id = sys.argv[1]
    draft_year = int(sys.argv[2])
    draft_dir = DATA_DIR / league_id / str(draft_year)
    season_dir = DATA_DIR / league_id / str(draft_year - 1)

    print(f"Checking {draft_year} pick ownership for league {league_id}...")

    team_configs = team_configs_from_league(load_json(season_dir / "league.json"))
    actual = extract_actual_assets(load_json(draft_dir / "draftResults.json"), team_configs)
    replayed = extract_assets_from_transactions(
        load_json(season_dir / "transactions.json"),
        load_json(season_dir / "standings.json"),
        draft_year,
    )

    if not actual:
        print("  No draft results saved")
        sys.exit(1)
    if not replayed.ok:
        print(f"  Can't replay trades: {replayed.error}")
        sys.exit(1)

    unparseable = [pick_id for pick_id, a in actual.items() if a["comment_status"] == TradeCommentStatus.UNPARSEABLE]
    for pick_id in unparseable:
        print(f"  {pick_id}: trade comment couldn't be parsed")

    mismatches = compare_ownership(actual, replayed)
    for m in mismatches:
        print(f"  {m['pick_id']}: draft results say {m['draft_results_owner']}, trades say {m['transactions_owner']}")

    print(f"Done! {len(actual)} picks checked, {len(mismatches)} mismatches, {len(unparseable)} unparseable comments")


if __name__ == "__main__":
    main()
