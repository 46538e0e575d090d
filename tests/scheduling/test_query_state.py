"""Tests for query-string persistence of navigation state."""

from datetime import date

import pytest

from curator_board.scheduling.errors import MalformedPersistedStateError
from curator_board.scheduling.navigation import CalendarMode, NavigationState, ProgramMode
from curator_board.scheduling.query_state import (
    decode_query,
    encode_query,
    parse_group_id,
    restore_navigation,
    to_query_params,
)
from curator_board.scheduling.types import CalendarWeek, CuratorGroup

GROUPS = [
    CuratorGroup(id=2, name="Group A", start_date=date(2024, 1, 1), total_weeks=10),
    CuratorGroup(id=5, name="Group B", start_date=date(2024, 2, 5), total_weeks=12),
]


class TestRestoreNavigation:
    """Tests for rebuilding state from query parameters."""

    def test_week_becomes_offset(self, now, utc_offset):
        """Test that a persisted week is restored relative to the current week."""
        state = restore_navigation({"week": "2024-W05"}, GROUPS, now, utc_offset_minutes=utc_offset)
        assert state == NavigationState(mode=CalendarMode(2))

    def test_past_week(self, now, utc_offset):
        state = restore_navigation({"week": "2023-W52"}, GROUPS, now, utc_offset_minutes=utc_offset)
        assert state.mode == CalendarMode(-3)

    def test_far_week_is_not_clamped(self, now, utc_offset):
        """Test that restored offsets keep their distance; only stepping is bounded."""
        state = restore_navigation({"week": "2026-W03"}, GROUPS, now, utc_offset_minutes=utc_offset)
        assert state.mode == CalendarMode(104)

    def test_empty_query(self, now, utc_offset):
        assert restore_navigation({}, GROUPS, now, utc_offset_minutes=utc_offset) == NavigationState()

    @pytest.mark.parametrize(
        "value", ["2024-W5", "garbage", "9999-W99", "2024-W00", "2024W05", "0000-W01", "9999-W53", "2024-W05\n"]
    )
    def test_malformed_week_falls_back(self, now, utc_offset, log_records, value):
        """Test that a malformed week never raises and is reported."""
        state = restore_navigation({"week": value}, GROUPS, now, utc_offset_minutes=utc_offset)

        assert state.mode == CalendarMode(0)
        warnings = [r for r in log_records if r["message"] == "MALFORMED_QUERY_STATE"]
        assert len(warnings) == 1
        assert warnings[0]["extra"]["code"] == "MALFORMED_WEEK"
        assert warnings[0]["extra"]["value"] == value

    def test_group_id(self, now, utc_offset):
        state = restore_navigation(
            {"week": "2024-W03", "groupId": "5"}, GROUPS, now, utc_offset_minutes=utc_offset
        )
        assert state == NavigationState(mode=CalendarMode(0), selected_group_id=5)

    def test_malformed_group_id_is_dropped(self, now, utc_offset, log_records):
        state = restore_navigation(
            {"week": "2024-W04", "groupId": "abc"}, GROUPS, now, utc_offset_minutes=utc_offset
        )
        assert state == NavigationState(mode=CalendarMode(1))
        assert any(r["extra"].get("code") == "MALFORMED_GROUP_ID" for r in log_records)

    def test_unknown_group_id_is_dropped(self, now, utc_offset, log_records):
        state = restore_navigation({"groupId": "77"}, GROUPS, now, utc_offset_minutes=utc_offset)
        assert state.selected_group_id is None
        assert any(r["extra"].get("code") == "UNKNOWN_GROUP_ID" for r in log_records)

    def test_auto_selects_single_group(self, now, utc_offset):
        state = restore_navigation(
            {}, GROUPS[:1], now, utc_offset_minutes=utc_offset, auto_select_single_group=True
        )
        assert state.selected_group_id == 2

    def test_no_auto_select_with_several_groups(self, now, utc_offset):
        state = restore_navigation({}, GROUPS, now, utc_offset_minutes=utc_offset, auto_select_single_group=True)
        assert state.selected_group_id is None

    def test_explicit_group_wins_over_auto_select(self, now, utc_offset):
        state = restore_navigation(
            {"groupId": "2"}, GROUPS[:1], now, utc_offset_minutes=utc_offset, auto_select_single_group=True
        )
        assert state.selected_group_id == 2


class TestParseGroupId:
    """Tests for persisted group ids."""

    def test_integer(self):
        assert parse_group_id(" 12 ") == 12

    def test_not_an_integer(self):
        with pytest.raises(MalformedPersistedStateError) as exc_info:
            parse_group_id("1.5")
        assert exc_info.value.code == "MALFORMED_GROUP_ID"

    @pytest.mark.parametrize("value", ["+5", "-5", "1_000", "\uff11\uff12", ""])
    def test_only_plain_digits(self, value):
        """Test that signs, digit separators and non-ASCII digits are rejected."""
        with pytest.raises(MalformedPersistedStateError):
            parse_group_id(value)

    def test_group_id_with_separator_is_dropped(self, now, utc_offset):
        groups = [CuratorGroup(id=1000, name="Big")]
        state = restore_navigation({"groupId": "1_000"}, groups, now, utc_offset_minutes=utc_offset)
        assert state.selected_group_id is None


class TestEncodeQuery:
    """Tests for writing state back to the query string."""

    def test_encode(self):
        state = NavigationState(selected_group_id=2)
        assert encode_query(state, CalendarWeek(2024, 3)) == "week=2024-W03&groupId=2"

    def test_encode_without_group(self):
        assert encode_query(NavigationState(), CalendarWeek(2024, 3)) == "week=2024-W03"

    def test_program_mode_persists_its_calendar_week(self):
        """Test that program mode is written as the calendar week it resolves to."""
        state = NavigationState(mode=ProgramMode(5), selected_group_id=2)
        assert to_query_params(state, CalendarWeek(2024, 5)) == {"week": "2024-W05", "groupId": "2"}

    def test_decode(self):
        assert decode_query("?week=2024-W03&groupId=2") == {"week": "2024-W03", "groupId": "2"}
        assert decode_query("") == {}

    def test_encode_restore_round_trip(self, now, utc_offset):
        """Test that a persisted calendar view restores to the same state."""
        state = NavigationState(mode=CalendarMode(-7), selected_group_id=5)
        query = encode_query(state, CalendarWeek(2023, 48))

        restored = restore_navigation(decode_query(query), GROUPS, now, utc_offset_minutes=utc_offset)

        assert restored == state
