"""
CLI Integration Tests
=====================

Runs the CLI commands against a temporary data directory, a static font
resolver and fake network and storage collaborators.
"""

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from fontcatcher.cli import CliSession, cli
from fontcatcher.fonts.models import RawFontHandle
from tests.helpers import CountingResolver, FakeStorage

LATO_PATH = Path("/usr/share/fonts/truetype/lato/Lato-Regular.ttf")

PAYLOAD = {
    "kind": "webfonts#webfontList",
    "items": [
        {
            "family": "Roboto",
            "variants": ["Regular", "Bold"],
            "lastModified": "2023-06-01",
            "version": "v3.0",
            "files": {"Regular": "http://x/r.ttf", "Bold": "http://x/b.ttf"},
        },
        {
            "family": "Lato",
            "variants": ["Regular"],
            "lastModified": "2020-01-01",
            "files": {"Regular": "http://x/lato.ttf"},
        },
    ],
}


@pytest.mark.integration
class TestCLIIntegration:
    """CLI integration tests."""

    @pytest.fixture
    def runner(self):
        """Click test runner."""
        return CliRunner()

    @pytest.fixture
    def session(self, app_config, downloader):
        """Session with one cached repository and an old local copy of Lato."""
        app_config.repos_file.parent.mkdir(parents=True, exist_ok=True)
        app_config.repos_file.write_text('[[repo]]\nname = "OFR"\nurl = "http://x/fonts.json"\n')
        app_config.repos_dir.mkdir(parents=True)
        (app_config.repos_dir / "OFR.json").write_text(json.dumps(PAYLOAD))

        mtime = datetime(2019, 1, 1, tzinfo=UTC).timestamp()
        resolver = CountingResolver([RawFontHandle("Lato Regular", "Lato-Regular", "Lato", LATO_PATH, mtime)])
        return CliSession(app_config, resolver=resolver, downloader=downloader, storage=FakeStorage())

    def test_cli_help(self, runner):
        """Test main CLI help."""
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("install", "remove", "search", "update-repos", "check-updates"):
            assert command in result.output

    def test_version(self, runner):
        """Test the version banner with its license notice."""
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert result.output.startswith("font-catcher 0.2.0\n")
        assert "GNU Affero General Public License" in result.output

    def test_list_repos(self, runner, session):
        """Test listing configured repositories."""
        result = runner.invoke(cli, ["list-repos"], obj=session)

        assert result.exit_code == 0
        assert "OFR\thttp://x/fonts.json" in result.output

    def test_update_repos(self, runner, session, downloader):
        """Test refreshing the repository cache."""
        downloader.fetch_text.return_value = json.dumps(PAYLOAD)

        result = runner.invoke(cli, ["update-repos"], obj=session)

        assert result.exit_code == 0
        assert "OFR: 2 families" in result.output

    def test_search(self, runner, session):
        """Test case-insensitive search with installed marker."""
        result = runner.invoke(cli, ["search", "LAT"], obj=session)

        assert result.exit_code == 0
        assert "Lato (OFR) [installed]" in result.output
        assert "Roboto" not in result.output

    def test_search_no_results(self, runner, session):
        """Test search without matches."""
        result = runner.invoke(cli, ["search", "comic"], obj=session)

        assert result.exit_code == 0
        assert "No fonts found" in result.output

    def test_info(self, runner, session):
        """Test family details."""
        result = runner.invoke(cli, ["info", "roboto"], obj=session)

        assert result.exit_code == 0
        assert "variants: Regular, Bold" in result.output
        assert "last modified: 2023-06-01" in result.output

    def test_info_unknown(self, runner, session):
        """Test details of an unknown family."""
        result = runner.invoke(cli, ["info", "Comic Sans"], obj=session)

        assert result.exit_code == 1

    def test_install(self, runner, session, app_config):
        """Test installing writes every variant into the user font directory."""
        result = runner.invoke(cli, ["install", "roboto"], obj=session)

        assert result.exit_code == 0
        assert "Roboto: installed 2 files" in result.output
        assert set(session.storage.files) == {
            app_config.user_font_dir / "Roboto-Regular.ttf",
            app_config.user_font_dir / "Roboto-Bold.ttf",
        }

    def test_install_continues_past_unknown(self, runner, session):
        """Test that one unknown family does not stop the others."""
        result = runner.invoke(cli, ["install", "Comic Sans", "Roboto"], obj=session)

        assert result.exit_code == 1
        assert "Roboto: installed 2 files" in result.output

    def test_install_unknown_repository(self, runner, session):
        """Test installing from a repository without the family."""
        result = runner.invoke(cli, ["install", "Roboto", "--repo", "Nowhere"], obj=session)

        assert result.exit_code == 1
        assert session.storage.files == {}

    def test_download(self, runner, session, tmp_path):
        """Test downloading into an arbitrary directory."""
        out = tmp_path / "out"

        result = runner.invoke(cli, ["download", str(out), "Lato"], obj=session)

        assert result.exit_code == 0
        assert list(session.storage.files) == [out / "Lato-Regular.ttf"]

    def test_remove(self, runner, session):
        """Test removing a system-wide family."""
        result = runner.invoke(cli, ["remove", "Lato", "--system"], obj=session)

        assert result.exit_code == 0
        assert "Lato: removed 1 files" in result.output
        assert session.storage.deleted == [LATO_PATH]

    def test_remove_not_installed(self, runner, session):
        """Test removing a family that is not installed."""
        result = runner.invoke(cli, ["remove", "Roboto"], obj=session)

        assert result.exit_code == 1
        assert session.storage.deleted == []

    def test_check_updates(self, runner, session):
        """Test update listing for system fonts."""
        result = runner.invoke(cli, ["check-updates", "--system"], obj=session)

        assert result.exit_code == 0
        assert "Lato: OFR" in result.output

    def test_check_updates_none(self, runner, session):
        """Test update listing with nothing installed."""
        result = runner.invoke(cli, ["check-updates"], obj=session)

        assert result.exit_code == 0
        assert "All fonts are up to date" in result.output

    def test_config_file(self, runner, tmp_path):
        """Test loading configuration from YAML."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.dump({"data_dir": str(tmp_path / "data")}))

        result = runner.invoke(cli, ["--config", str(config_path), "list-repos"])

        assert result.exit_code == 0
        assert "Open Font Repository" in result.output

    def test_invalid_config_file(self, runner, tmp_path):
        """Test that a broken configuration exits with an error."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("data_dir: [unclosed")

        result = runner.invoke(cli, ["--config", str(config_path), "list-repos"])

        assert result.exit_code == 1
