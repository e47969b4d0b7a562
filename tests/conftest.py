# tests/conftest.py
import os
from pathlib import Path

# Ensure Qt can run headless (CI runners have no display server)
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication
from pytestqt.qtbot import QtBot

from playdeck.core.file_system import FileSystem
from playdeck.core.metadata_store import MetadataStore


@pytest.fixture(scope="session")
def qapp():
    """QApplication instance for all Qt tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def qtbot(qapp, request):
    """Provide qtbot fixture with automatic cleanup."""
    bot = QtBot(request)
    yield bot
    if hasattr(bot, "cleanup"):
        bot.cleanup()


@pytest.fixture(autouse=True)
def _no_env_overrides(monkeypatch):
    """Keep PLAYDECK_* variables from the developer's shell out of the tests."""
    for key in ("PLAYDECK_GAMES_PATH", "PLAYDECK_GAMES_EXTENSIONS", "PLAYDECK_GAMES_EXCLUSIONS"):
        monkeypatch.delenv(key, raising=False)


def _make_file(path: Path, content: bytes = b"") -> Path:
    """Create a file and its parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


@pytest.fixture
def file_system() -> FileSystem:
    """Local disk filesystem capability."""
    return FileSystem()


@pytest.fixture
def metadata_store(file_system) -> MetadataStore:
    """Sidecar store backed by the local disk."""
    return MetadataStore(file_system)


@pytest.fixture
def library(tmp_path) -> Path:
    """Library root with two games and one non-game directory.

    Layout::

        Foo/game.exe
        Foo/bin/tool.exe
        Bar/launcher.exe
        Bar/unins000.exe
        Bar/readme.txt
        Docs/manual.pdf
    """
    root = tmp_path / "Games"
    _make_file(root / "Foo" / "game.exe")
    _make_file(root / "Foo" / "bin" / "tool.exe")
    _make_file(root / "Bar" / "launcher.exe")
    _make_file(root / "Bar" / "unins000.exe")
    _make_file(root / "Bar" / "readme.txt")
    _make_file(root / "Docs" / "manual.pdf")
    return root
