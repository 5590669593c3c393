"""Tests for the pure list state machine: filters, paging, clamping, stale results."""

from __future__ import annotations

import random
from datetime import date

import pytest

from app.records.errors import InvalidFilter
from app.records.listing.state import (
    ApplyFilter,
    ClearFilter,
    FetchPage,
    GoToPage,
    ListState,
    NextPage,
    PageLoaded,
    PrevPage,
    Refresh,
    parse_filter,
    reduce,
)
from app.records.models import FilterKind, FilterState, QueryResult


def _settle(state, effect, *, count, rows=()):
    """Complete `effect` with a result carrying `count` rows in total."""
    while effect is not None:
        state, effect = reduce(state, PageLoaded(token=effect.token, result=QueryResult(rows=list(rows), count=count)))
    return state


class TestParseFilter:
    def test_number_takes_precedence_over_date(self):
        f = parse_filter(" 25001 ", "2025-11-06")
        assert f.kind == FilterKind.incident
        assert f.incident_number == 25001
        assert f.day is None

    def test_date_only(self):
        f = parse_filter("   ", "2025-11-06")
        assert f == FilterState.by_date(date(2025, 11, 6))

    def test_blank_means_no_filter(self):
        assert parse_filter("", "").kind == FilterKind.none

    def test_bad_number_rejected(self):
        with pytest.raises(InvalidFilter):
            parse_filter("12abc", "")

    def test_bad_date_rejected(self):
        with pytest.raises(InvalidFilter):
            parse_filter("", "11/06/2025")


class TestTransitions:
    def test_refresh_issues_fetch_for_current_page(self):
        state, effect = reduce(ListState(), Refresh())
        assert isinstance(effect, FetchPage)
        assert effect.page == 1
        assert effect.page_size == 20
        assert effect.filter.kind == FilterKind.none
        assert state.loading is True

    def test_apply_filter_resets_page(self):
        state = _settle(*reduce(ListState(), Refresh()), count=100)
        state = _settle(*reduce(state, GoToPage(page=4)), count=100)
        assert state.current_page == 4

        state, effect = reduce(state, ApplyFilter(incident_number="", date="2025-11-06"))
        assert state.current_page == 1
        assert effect.filter == FilterState.by_date(date(2025, 11, 6))

    def test_invalid_filter_leaves_state_alone(self):
        state = _settle(*reduce(ListState(), Refresh()), count=100)
        with pytest.raises(InvalidFilter):
            reduce(state, ApplyFilter(incident_number="x1"))

    def test_clear_resets_filter_and_page(self):
        state = _settle(*reduce(ListState(), ApplyFilter(date="2025-11-06")), count=60)
        state = _settle(*reduce(state, NextPage()), count=60)
        state, effect = reduce(state, ClearFilter())
        assert state.filter == FilterState()
        assert state.current_page == 1
        assert effect is not None

    def test_next_and_prev_stop_at_bounds(self):
        state = _settle(*reduce(ListState(), Refresh()), count=45)

        same, effect = reduce(state, PrevPage())
        assert effect is None and same is state

        state = _settle(*reduce(state, NextPage()), count=45)
        state = _settle(*reduce(state, NextPage()), count=45)
        assert state.current_page == 3
        same, effect = reduce(state, NextPage())
        assert effect is None and same.current_page == 3

    def test_go_to_page_is_clamped(self):
        state = _settle(*reduce(ListState(), Refresh()), count=45)
        state, effect = reduce(state, GoToPage(page=99))
        assert effect.page == 3

    def test_incident_number_mode_disables_paging(self):
        state, effect = reduce(ListState(), ApplyFilter(incident_number="25001"))
        state = _settle(state, effect, count=None, rows=[])
        for action in (NextPage(), PrevPage(), GoToPage(page=2)):
            same, effect = reduce(state, action)
            assert effect is None
            assert same is state


class TestLoadResults:
    def test_stale_result_is_dropped(self):
        state, first = reduce(ListState(), Refresh())
        state, second = reduce(state, ApplyFilter(date="2025-11-06"))

        # the older request finishes last-but-one: ignored
        after, effect = reduce(state, PageLoaded(token=first.token, result=QueryResult(count=999)))
        assert after is state
        assert effect is None

        after, _ = reduce(state, PageLoaded(token=second.token, result=QueryResult(count=7)))
        assert after.total_count == 7
        assert after.loading is False

    def test_error_discards_rows_but_keeps_paging(self, record, now):
        rows = [record(1, "A", now)]
        state = _settle(*reduce(ListState(), Refresh()), count=45, rows=rows)
        state = _settle(*reduce(state, NextPage()), count=45, rows=rows)

        state, effect = reduce(state, NextPage())
        state, _ = reduce(state, PageLoaded(token=effect.token, result=QueryResult(error="boom")))
        assert state.error == "boom"
        assert state.rows == ()
        assert state.current_page == 3
        assert state.total_count == 45

    def test_incident_number_count_is_row_count(self, record, now):
        rows = [record(25001, "MRS-1", now), record(25001, "MRS-2", now)]
        state, effect = reduce(ListState(), ApplyFilter(incident_number="25001"))
        state, effect = reduce(state, PageLoaded(token=effect.token, result=QueryResult(rows=rows)))
        assert effect is None
        assert state.total_count == 2
        assert state.current_page == 1

    def test_shrinking_count_clamps_and_refetches(self):
        state = _settle(*reduce(ListState(), Refresh()), count=100)
        state, effect = reduce(state, GoToPage(page=5))

        # by the time page 5 comes back only 30 rows remain
        state, effect = reduce(state, PageLoaded(token=effect.token, result=QueryResult(count=30)))
        assert state.current_page == 2
        assert isinstance(effect, FetchPage)
        assert effect.page == 2


def test_current_page_stays_in_range_under_random_paging():
    rng = random.Random(7)
    for _ in range(50):
        count = rng.randint(0, 250)
        upper = max(1, -(-count // 20))
        state = _settle(*reduce(ListState(), Refresh()), count=count)
        for _ in range(40):
            action = rng.choice([NextPage(), PrevPage()])
            state = _settle(*reduce(state, action), count=count)
            assert 1 <= state.current_page <= upper
