"""Tests for the command-line entry point."""

import json
from pathlib import Path

import pytest
import yaml

import run


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.delenv("BIBLIO_SQLITE_PATH", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"storage": {"sqlite_path": str(tmp_path / "db" / "biblio.db")}}))
    return path


class TestCli:
    def test_import_then_list_and_stats(self, config_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert run.main(["--config", str(config_file), "import-legacy"]) == 0
        assert "imported" in capsys.readouterr().out

        assert run.main(["--config", str(config_file), "list", "--search", "dune"]) == 0
        assert "Dune - Frank Herbert" in capsys.readouterr().out

        assert run.main(["--config", str(config_file), "stats"]) == 0
        assert "Pages read:" in capsys.readouterr().out

    def test_second_import_finds_nothing_new(
        self, config_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        run.main(["--config", str(config_file), "import-legacy"])
        capsys.readouterr()
        assert run.main(["--config", str(config_file), "import-legacy"]) == 0
        assert "already in your library" in capsys.readouterr().out

    def test_import_from_file(
        self, config_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        source = tmp_path / "mine.json"
        source.write_text(json.dumps([{"title": "Emma", "isWishlist": True}]))
        assert run.main(["--config", str(config_file), "import-legacy", str(source)]) == 0
        capsys.readouterr()

        run.main(["--config", str(config_file), "list", "--wishlist"])
        assert "Emma" in capsys.readouterr().out

    def test_import_missing_file(self, config_file: Path, tmp_path: Path) -> None:
        assert run.main(["--config", str(config_file), "import-legacy", str(tmp_path / "x.json")]) == 1

    def test_command_required(self, config_file: Path) -> None:
        with pytest.raises(SystemExit):
            run.main(["--config", str(config_file)])


class TestUnusableDatabase:
    def _config_for(self, tmp_path: Path, db_path: Path) -> Path:
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"storage": {"sqlite_path": str(db_path)}}))
        return path

    def test_db_file_is_not_a_database(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.delenv("BIBLIO_SQLITE_PATH", raising=False)
        db_path = tmp_path / "biblio.db"
        db_path.write_bytes(b"this is not a sqlite database, just some bytes" * 20)
        config_file = self._config_for(tmp_path, db_path)

        assert run.main(["--config", str(config_file), "stats"]) == 0
        assert "Library: 0" in capsys.readouterr().out

    def test_db_path_is_a_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.delenv("BIBLIO_SQLITE_PATH", raising=False)
        db_dir = tmp_path / "biblio.db"
        db_dir.mkdir()
        config_file = self._config_for(tmp_path, db_dir)

        assert run.main(["--config", str(config_file), "list"]) == 0
        assert capsys.readouterr().out == ""

    def test_import_into_unusable_database_reports_failure(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.delenv("BIBLIO_SQLITE_PATH", raising=False)
        db_path = tmp_path / "biblio.db"
        db_path.write_bytes(b"garbage" * 100)
        config_file = self._config_for(tmp_path, db_path)

        assert run.main(["--config", str(config_file), "import-legacy"]) == 1
        assert "Cannot write slot" in capsys.readouterr().out
