"""Navigation state persisted in the page query string.

Two keys round-trip: ``week`` (``YYYY-Www``, the active calendar week) and
``groupId`` (integer). Restoring never raises: malformed values are logged and
replaced by defaults.
"""

import re
from collections.abc import Mapping, Sequence
from datetime import datetime
from urllib.parse import parse_qsl, urlencode

from loguru import logger

from curator_board.scheduling.errors import MalformedPersistedStateError
from curator_board.scheduling.iso_week import current_week, week_offset
from curator_board.scheduling.navigation import CalendarMode, NavigationState, select_group
from curator_board.scheduling.types import CalendarWeek, CuratorGroup

WEEK_PARAM = "week"
GROUP_PARAM = "groupId"
GROUP_ID_PATTERN = re.compile(r"[0-9]+")


def parse_group_id(value: str) -> int:
    """Parse a persisted group id.

    Raises:
        MalformedPersistedStateError: If the value is not a plain ASCII integer
    """
    digits = value.strip()
    if not GROUP_ID_PATTERN.fullmatch(digits):
        raise MalformedPersistedStateError("MALFORMED_GROUP_ID", [f"expected integer, got {value!r}"])
    return int(digits)


def _restore_mode(raw_week: str | None, now: datetime, utc_offset_minutes: int) -> CalendarMode:
    if not raw_week:
        return CalendarMode()
    try:
        week = CalendarWeek.parse(raw_week)
    except MalformedPersistedStateError as err:
        logger.warning("MALFORMED_QUERY_STATE", code=err.code, param=WEEK_PARAM, value=raw_week)
        return CalendarMode()
    return CalendarMode(week_offset(week, current_week(now, utc_offset_minutes)))


def _restore_group_id(raw_group: str | None, groups: Sequence[CuratorGroup]) -> int | None:
    if not raw_group:
        return None
    try:
        group_id = parse_group_id(raw_group)
    except MalformedPersistedStateError as err:
        logger.warning("MALFORMED_QUERY_STATE", code=err.code, param=GROUP_PARAM, value=raw_group)
        return None
    if not any(group.id == group_id for group in groups):
        logger.warning("MALFORMED_QUERY_STATE", code="UNKNOWN_GROUP_ID", param=GROUP_PARAM, value=raw_group)
        return None
    return group_id


def restore_navigation(
    params: Mapping[str, str],
    groups: Sequence[CuratorGroup],
    now: datetime,
    *,
    utc_offset_minutes: int,
    auto_select_single_group: bool = False,
) -> NavigationState:
    """Rebuild navigation from query parameters.

    Args:
        params: Decoded query parameters
        groups: Groups visible to the curator
        now: Current instant
        utc_offset_minutes: Board offset east of UTC, in minutes
        auto_select_single_group: Select the only group when none is given
            (regular curators see exactly one group most of the time)

    Returns:
        Restored state; CalendarMode(0) with no group when nothing valid is found
    """
    mode = _restore_mode(params.get(WEEK_PARAM), now, utc_offset_minutes)
    state = NavigationState(mode=mode)

    group_id = _restore_group_id(params.get(GROUP_PARAM), groups)
    if group_id is None and auto_select_single_group and len(groups) == 1:
        group_id = groups[0].id
    if group_id is not None:
        state = select_group(state, group_id, from_query=True)

    logger.debug(
        "Navigation restored from query",
        week=params.get(WEEK_PARAM),
        group_id=group_id,
        offset=mode.offset,
    )
    return state


def to_query_params(state: NavigationState, week: CalendarWeek) -> dict[str, str]:
    """Query parameters for a state and its active week."""
    params = {WEEK_PARAM: str(week)}
    if state.selected_group_id is not None:
        params[GROUP_PARAM] = str(state.selected_group_id)
    return params


def encode_query(state: NavigationState, week: CalendarWeek) -> str:
    """Encode a state as a query string (without the leading "?")."""
    return urlencode(to_query_params(state, week))


def decode_query(query: str) -> dict[str, str]:
    """Decode a query string; the last value wins for repeated keys."""
    return dict(parse_qsl(query.lstrip("?")))
