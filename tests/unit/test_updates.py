"""Tests for update detection
===========================

Date comparison between local copies and repository entries.
"""

from datetime import UTC, datetime

from fontcatcher.core.models import RepoFont
from fontcatcher.fonts.font import Font
from fontcatcher.fonts.models import LocalFontRecord, Location, RawFontHandle, UpdateState
from tests.helpers import CountingResolver


def _font(resolver, record, dates, priority=None):
    font = Font("Roboto", resolver, repo_priority=priority)
    if record is not None:
        font.set_local_font(Location.USER, record)
    for repo, date in dates.items():
        font.add_repo_font(repo, RepoFont(family="Roboto", last_modified=date))
    return font


class TestUpdateDetection:
    """Test has_update and check_updates."""

    def test_only_newer_repositories(self, resolver, user_roboto_record):
        """Repositories strictly newer than the local copy are reported."""
        font = _font(resolver, user_roboto_record, {"New": "2023-06-01", "Old": "2022-01-01"})

        assert font.has_update(Location.USER) == ["New"]
        result = font.check_updates(Location.USER)
        assert result.state is UpdateState.UPDATE_AVAILABLE
        assert result.has_update

    def test_same_day_is_not_newer(self, resolver, user_roboto_record):
        """Equal dates are not an update."""
        font = _font(resolver, user_roboto_record, {"Same": "2023-01-01"})

        assert font.has_update(Location.USER) is None
        assert font.check_updates(Location.USER).state is UpdateState.UP_TO_DATE

    def test_results_in_priority_order(self, resolver, user_roboto_record):
        """Several newer repositories come back in priority order."""
        dates = {"A": "2023-03-01", "B": "2023-06-01"}
        font = _font(resolver, user_roboto_record, dates, priority=["B", "A"])

        assert font.has_update(Location.USER) == ["B", "A"]

    def test_invalid_date_is_excluded(self, resolver, user_roboto_record, caplog):
        """A malformed date is skipped with a warning, not raised."""
        dates = {"Broken": "2023-13-40", "New": "2023-06-01"}
        font = _font(resolver, user_roboto_record, dates)

        assert font.has_update(Location.USER) == ["New"]
        assert "2023-13-40" in caplog.text

    def test_missing_date_is_excluded(self, resolver, user_roboto_record):
        """An entry without a date never counts as an update."""
        font = _font(resolver, user_roboto_record, {"Undated": None})

        assert font.has_update(Location.USER) is None

    def test_no_local_copy(self, resolver):
        """Without a local copy the outcome says so explicitly."""
        font = _font(resolver, None, {"New": "2030-01-01"})

        assert font.check_updates(Location.USER).state is UpdateState.NO_LOCAL_COPY
        assert font.has_update(Location.USER) is None
        assert len(resolver.resolve_calls) == 1

    def test_naive_local_timestamp(self, resolver):
        """Naive local timestamps are read as UTC."""
        record = LocalFontRecord(
            family="Roboto", last_modified=datetime(2023, 1, 1), installed=True
        )
        font = _font(resolver, record, {"New": "2023-01-02"})

        assert font.has_update(Location.USER) == ["New"]

    def test_installed_without_timestamp(self):
        """An in-memory copy has no timestamp and counts as current."""
        resolver = CountingResolver([RawFontHandle("Roboto", "Roboto", "Roboto")])
        font = _font(resolver, None, {"Old": "2023-01-01"})

        assert font.check_updates(Location.MEMORY).state is UpdateState.UP_TO_DATE

    def test_local_last_modified_default(self, resolver):
        """Missing local timestamps default to now."""
        font = _font(resolver, None, {})

        before = datetime.now(UTC)
        assert font.get_local_last_modified(Location.USER) >= before
