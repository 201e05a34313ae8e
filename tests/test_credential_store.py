"""Tests for the file-backed credential store."""

from pathlib import Path

from lazycarbs.adapters.credential_store import FileCredentialStore


def test_load_missing_file_returns_none(tmp_path: Path) -> None:
    store = FileCredentialStore(tmp_path / "missing" / "api_key")

    assert store.load() is None


def test_store_load_and_clear(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "api_key"
    store = FileCredentialStore(path)

    store.store("my-key")
    assert store.load() == "my-key"
    assert path.stat().st_mode & 0o077 == 0

    store.clear()
    assert store.load() is None
    assert not path.exists()


def test_store_tightens_existing_file_permissions(tmp_path: Path) -> None:
    path = tmp_path / "api_key"
    path.write_text("old", encoding="utf-8")
    path.chmod(0o644)

    FileCredentialStore(path).store("new-key")

    assert path.stat().st_mode & 0o777 == 0o600
    assert path.read_text(encoding="utf-8") == "new-key"


def test_blank_file_counts_as_missing(tmp_path: Path) -> None:
    path = tmp_path / "api_key"
    path.write_text("  \n", encoding="utf-8")

    assert FileCredentialStore(path).load() is None


def test_clear_without_file_is_harmless(tmp_path: Path) -> None:
    FileCredentialStore(tmp_path / "api_key").clear()
