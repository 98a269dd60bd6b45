"""
Unit tests for core and font data models.
"""

import pytest
from pydantic import ValidationError

from fontcatcher.core.models import FontsList, RepoFont, Repository
from fontcatcher.fonts.models import LocalFontRecord, Location, RawFontHandle, UpdateCheck, UpdateState


class TestRepository:
    """Test Repository model."""

    def test_resolved_url(self):
        """Test API key substitution."""
        repo = Repository(name="GF", url="https://g/webfonts?key={API_KEY}", key="abc")

        assert repo.requires_key
        assert repo.resolved_url() == "https://g/webfonts?key=abc"
        assert repo.cache_filename == "GF.json"

    def test_no_key(self):
        """Test templates without a key are returned unchanged."""
        repo = Repository(name="GF", url="https://g/webfonts?key={API_KEY}")

        assert repo.resolved_url() == "https://g/webfonts?key={API_KEY}"

    def test_repr_masks_key(self):
        """Test that the key is not shown."""
        repo = Repository(name="GF", url="https://g", key="abc")

        assert "abc" not in repr(repo)
        assert "***" in repr(repo)

    def test_fields_stripped_and_required(self):
        """Test name and url validation."""
        assert Repository(name="  OFR ", url=" http://x ").name == "OFR"
        with pytest.raises(ValidationError):
            Repository(name=" ", url="http://x")

    @pytest.mark.parametrize("name", ["../../etc/evil", "a/b", "a\\b", "..", ".hidden"])
    def test_name_must_be_file_safe(self, name):
        """Test names that would escape the cache directory are rejected."""
        with pytest.raises(ValidationError, match="path separators"):
            Repository(name=name, url="http://x")

    def test_frozen(self):
        """Test repositories are immutable."""
        repo = Repository(name="OFR", url="http://x")
        with pytest.raises(ValidationError):
            repo.name = "Other"


class TestRepoFont:
    """Test RepoFont model."""

    def test_last_modified_alias(self):
        """Test both spellings of last modified."""
        assert RepoFont.model_validate({"family": "A", "lastModified": "2023-01-01"}).last_modified == "2023-01-01"
        assert RepoFont(family="A", last_modified="2023-01-01").last_modified == "2023-01-01"

    def test_family_required(self):
        """Test that family cannot be empty."""
        with pytest.raises(ValidationError):
            RepoFont(family="")

    def test_ordered_files(self):
        """Test declared variants come first, undeclared files after."""
        font = RepoFont(
            family="A",
            variants=["Bold", "Regular"],
            files={"Regular": "r", "Extra": "e", "Bold": "b"},
        )

        assert font.ordered_files == [("Bold", "b"), ("Regular", "r"), ("Extra", "e")]

    def test_fonts_list(self):
        """Test the payload envelope."""
        payload = FontsList.model_validate({"items": [{"family": "A"}, {"family": "B"}]})

        assert payload.kind is None
        assert [f.family for f in payload.items] == ["A", "B"]


class TestLocalModels:
    """Test local font models."""

    def test_sentinel(self):
        """Test the uninstalled sentinel."""
        sentinel = LocalFontRecord.uninstalled()

        assert sentinel.is_sentinel
        assert not LocalFontRecord().is_sentinel
        assert not LocalFontRecord(family="A", installed=False).is_sentinel

    def test_get_attribute(self):
        """Test attribute access by name."""
        record = LocalFontRecord(family="A", variants=["Regular"])

        assert record.get("family") == "A"
        assert record.get("files") is None
        with pytest.raises(AttributeError):
            record.get("colour")

    def test_location_str(self):
        """Test locations print as their value."""
        assert str(Location.USER) == "user"

    def test_in_memory_handle(self):
        """Test handles without a path are in memory."""
        assert RawFontHandle("A", "A", "A").in_memory

    def test_update_check(self):
        """Test update outcome flags."""
        assert UpdateCheck(UpdateState.UPDATE_AVAILABLE, ["OFR"]).has_update
        assert not UpdateCheck(UpdateState.NO_LOCAL_COPY).has_update
