# tests/conftest.py

import os

# Widgets are created without a display during tests.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

from filespy.core.navigation import NavigationController
from filespy.core.session_store import SessionStateStore
from filespy.core.settings_store import MemorySettingsStore


@pytest.fixture(scope="session")
def qapp():
    """Creates a QApplication instance for the test session."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


@pytest.fixture
def app_home(tmp_path, monkeypatch):
    """Points the support directory at a throwaway folder."""
    home = tmp_path / "support"
    monkeypatch.setenv("FILESPY_HOME", str(home))
    return home


@pytest.fixture
def demo_dir(tmp_path):
    """demo/ with a.txt, .hidden and the sub/ folder."""
    demo = tmp_path.resolve() / "demo"
    demo.mkdir()
    (demo / "a.txt").write_text("hello", encoding="utf-8")
    (demo / ".hidden").write_text("secret", encoding="utf-8")
    (demo / "sub").mkdir()
    return demo


@pytest.fixture
def settings():
    return MemorySettingsStore()


@pytest.fixture
def session_store(tmp_path):
    return SessionStateStore(tmp_path / "state" / "StoredState.txt")


@pytest.fixture
def controller(qapp, settings, session_store):
    return NavigationController(settings, session_store)
