"""
Tests for contract submission windows and rules.

Dates used: Aug 1 2025 is a Friday (3rd Sunday = Aug 17), Aug 1 2021 is a
Sunday (3rd Sunday = Aug 15).
"""

from datetime import datetime, timezone

import pytest

from league_api.contract_validation import (
    OUTSIDE_WINDOW_REASON,
    get_contract_window,
    get_third_sunday_in_august,
    is_in_offseason_window,
    is_in_season_window,
    validate_contract_submission,
)
from league_api.models import WindowType

OPEN = datetime(2025, 3, 1, 12, 0)
CLOSED = datetime(2025, 8, 25, 12, 0)


class TestThirdSundayInAugust:

    def test_first_sunday_after_the_first(self):
        assert get_third_sunday_in_august(2025) == datetime(2025, 8, 17, 20, 45)

    def test_august_first_is_a_sunday(self):
        """Aug 1 counts as the first Sunday."""
        assert get_third_sunday_in_august(2021) == datetime(2021, 8, 15, 20, 45)


class TestWindows:

    def test_offseason_opens_feb_15(self):
        assert is_in_offseason_window(datetime(2025, 2, 15, 0, 0))
        assert not is_in_offseason_window(datetime(2025, 2, 14, 23, 59))

    def test_offseason_deadline_is_inclusive(self):
        assert is_in_offseason_window(datetime(2025, 8, 17, 20, 45))
        assert not is_in_offseason_window(datetime(2025, 8, 17, 20, 46))

    def test_in_season_starts_sept_1(self):
        assert is_in_season_window(datetime(2025, 9, 1, 0, 0))
        assert not is_in_season_window(datetime(2025, 8, 31, 23, 59))

    def test_in_season_runs_into_next_year(self):
        assert is_in_season_window(datetime(2026, 1, 10, 9, 0))
        assert is_in_season_window(datetime(2026, 2, 14, 23, 59, 59))
        assert not is_in_season_window(datetime(2026, 2, 15, 0, 0))

    def test_window_types(self):
        assert get_contract_window(OPEN).window_type == WindowType.OFFSEASON
        assert get_contract_window(datetime(2025, 10, 5)).window_type == WindowType.IN_SEASON

    def test_late_august_gap_is_closed(self):
        status = get_contract_window(CLOSED)

        assert not status.in_window
        assert status.window_type is None
        assert status.reason == OUTSIDE_WINDOW_REASON


class TestValidateContractSubmission:

    def test_valid_submission(self):
        result = validate_contract_submission("13522", 2, 3, "12345", "0001", now=OPEN)

        assert result.valid
        assert result.errors == []
        assert result.window_status.in_window

    def test_test_league_allowed(self):
        assert validate_contract_submission("18202", 1, 5, "12345", "0001", now=OPEN).valid

    def test_collects_every_failure(self):
        result = validate_contract_submission("99999", 3, 3, None, "0001", now=CLOSED)

        assert not result.valid
        assert [e.field for e in result.errors] == ["leagueId", "player", "contractYears", "window"]

    @pytest.mark.parametrize("new_years, message", [
        (0, "Contract years must be at least 1"),
        (6, "Contract years cannot exceed 5"),
        (2.5, "Contract years must be a whole number"),
    ])
    def test_year_bounds(self, new_years, message):
        result = validate_contract_submission("13522", 1, new_years, "12345", "0001", now=OPEN)

        assert not result.valid
        assert message in [e.message for e in result.errors]

    def test_unchanged_years_rejected(self):
        result = validate_contract_submission("13522", 4, 4, "12345", "0001", now=OPEN)

        assert [e.message for e in result.errors] == [
            "New contract years must be different from current contract years"
        ]


class TestTimezoneAwareInput:
    """Aware datetimes are converted to Pacific time before the window checks."""

    def test_utc_submission_is_validated(self):
        result = validate_contract_submission("13522", 2, 3, "1", "0001", now=datetime(2025, 3, 1, 12, tzinfo=timezone.utc))

        assert result.valid
        assert result.window_status.window_type == WindowType.OFFSEASON

    def test_offseason_deadline_in_utc(self):
        # 8:45 PM PDT on Aug 17 is 03:45 UTC on Aug 18
        assert is_in_offseason_window(datetime(2025, 8, 18, 3, 45, tzinfo=timezone.utc))
        assert not is_in_offseason_window(datetime(2025, 8, 18, 3, 46, tzinfo=timezone.utc))

    def test_in_season_start_in_utc(self):
        assert not is_in_season_window(datetime(2025, 9, 1, 6, 59, tzinfo=timezone.utc))
        assert is_in_season_window(datetime(2025, 9, 1, 7, 0, tzinfo=timezone.utc))

    def test_closed_window_reported_not_raised(self):
        result = validate_contract_submission("13522", 2, 3, "1", "0001", now=datetime(2025, 8, 25, 19, tzinfo=timezone.utc))

        assert not result.valid
        assert [e.field for e in result.errors] == ["window"]
