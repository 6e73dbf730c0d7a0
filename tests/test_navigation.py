# tests/test_navigation.py

from pathlib import Path

import pytest

from filespy.core.bookmark_store import BOOKMARK_KEY
from filespy.core.errors import ExportWriteFailed
from filespy.core.filesystem import FilesystemEntry
from filespy.core.navigation import NavigationController, PostRenderQueue


def names(controller):
    return sorted(e.name for e in controller.entries)


@pytest.fixture
def other_dir(tmp_path):
    other = tmp_path.resolve() / "other"
    other.mkdir()
    (other / "b.txt").write_text("b", encoding="utf-8")
    return other


# --- Folder navigation ---

def test_controller_starts_without_folder(controller):
    assert controller.current_folder is None
    assert controller.selected_entry is None
    assert controller.entries == []
    assert controller.window_title == "FileSpy"
    assert not controller.can_navigate_up
    assert not controller.can_export


def test_set_folder_clears_selection(controller, demo_dir):
    controller.set_folder(demo_dir)
    controller.select_path(demo_dir / "a.txt")
    assert controller.selected_entry is not None

    controller.set_folder(demo_dir)
    assert controller.selected_entry is None


def test_demo_folder_scenario(controller, demo_dir):
    titles = []
    controller.folder_changed.connect(lambda folder: titles.append(controller.window_title))

    controller.set_folder(demo_dir)
    assert names(controller) == ["a.txt", "sub"]

    sub = FilesystemEntry(demo_dir / "sub", True)
    controller.set_selection(sub)
    assert controller.can_export

    assert controller.navigate_into(sub)
    assert controller.current_folder == demo_dir / "sub"
    assert controller.selected_entry is None
    assert controller.entries == []
    assert titles == [str(demo_dir), str(demo_dir / "sub")]


def test_signals_fire_after_state_is_consistent(controller, demo_dir):
    controller.set_folder(demo_dir)
    controller.select_path(demo_dir / "a.txt")

    seen = []

    def snapshot(name):
        def record(*args):
            seen.append((name, controller.current_folder, controller.selected_entry, names(controller)))
        return record

    controller.entries_changed.connect(snapshot("entries"))
    controller.folder_changed.connect(snapshot("folder"))
    controller.selection_changed.connect(snapshot("selection"))

    controller.set_folder(demo_dir / "sub")

    assert [s[0] for s in seen] == ["entries", "folder", "selection"]
    for _, folder, selection, listed in seen:
        assert folder == demo_dir / "sub"
        assert selection is None
        assert listed == []


def test_toggle_show_hidden_recomputes_entries(controller, demo_dir):
    folder_events = []
    selections = []
    controller.folder_changed.connect(folder_events.append)
    controller.selection_changed.connect(selections.append)

    controller.set_folder(demo_dir)
    controller.select_path(demo_dir / "a.txt")
    folder_events.clear()
    selections.clear()

    controller.toggle_show_hidden(True)

    assert controller.show_hidden
    assert names(controller) == [".hidden", "a.txt", "sub"]
    assert controller.selected_entry is None
    assert selections == [None]
    assert folder_events == []


def test_toggle_show_hidden_without_folder_only_sets_flag(controller):
    entries_events = []
    controller.entries_changed.connect(lambda: entries_events.append(True))

    controller.toggle_show_hidden(True)

    assert controller.show_hidden
    assert entries_events == []


def test_show_hidden_applies_to_later_folders(controller, demo_dir):
    controller.toggle_show_hidden(True)
    controller.set_folder(demo_dir)
    assert ".hidden" in names(controller)


def test_navigate_into_file_is_a_no_op(controller, demo_dir):
    controller.set_folder(demo_dir)
    assert not controller.navigate_into(FilesystemEntry(demo_dir / "a.txt", False))
    assert controller.current_folder == demo_dir


def test_navigate_up(controller, demo_dir):
    controller.set_folder(demo_dir / "sub")
    assert controller.navigate_up()
    assert controller.current_folder == demo_dir
    assert "sub" in names(controller)


def test_relative_folder_is_made_absolute(controller, demo_dir, monkeypatch):
    monkeypatch.chdir(demo_dir)
    controller.set_folder(Path("sub"))
    assert controller.current_folder == demo_dir / "sub"

    # Walking up keeps heading towards the root instead of stopping at ".".
    assert controller.navigate_up()
    assert controller.navigate_up()
    assert controller.current_folder == demo_dir.parent


def test_navigate_up_is_idempotent_at_root(controller, tmp_path):
    root = Path(tmp_path.anchor)
    controller.set_folder(root)
    changes = []
    controller.folder_changed.connect(changes.append)

    for _ in range(3):
        assert not controller.navigate_up()

    assert controller.current_folder == root
    assert changes == []


def test_navigate_up_without_folder(controller):
    assert not controller.navigate_up()
    assert controller.current_folder is None


def test_clearing_folder_empties_everything(controller, demo_dir):
    controller.set_folder(demo_dir)
    controller.select_path(demo_dir / "a.txt")

    controller.set_folder(None)

    assert controller.current_folder is None
    assert controller.selected_entry is None
    assert controller.entries == []
    assert controller.window_title == "FileSpy"
    assert not controller.can_navigate_up


def test_set_folder_rejects_a_file(controller, demo_dir):
    controller.set_folder(demo_dir)
    assert not controller.set_folder(demo_dir / "a.txt")
    assert controller.current_folder == demo_dir


def test_unreadable_folder_lists_as_empty_with_status(controller, tmp_path):
    statuses = []
    controller.status_updated.connect(lambda message, is_error: statuses.append((message, is_error)))

    missing = tmp_path / "missing"
    assert controller.set_folder(missing)

    assert controller.current_folder == missing
    assert controller.entries == []
    assert statuses == [(f"Could not read the contents of {missing}", True)]


# --- Selection ---

def test_selecting_an_unlisted_entry_is_refused(controller, demo_dir, other_dir):
    controller.set_folder(demo_dir)
    with pytest.raises(ValueError):
        controller.set_selection(FilesystemEntry(other_dir / "b.txt", False))
    assert controller.selected_entry is None


def test_select_path_for_unlisted_path(controller, demo_dir):
    controller.set_folder(demo_dir)
    assert not controller.select_path(demo_dir / ".hidden")
    assert controller.selected_entry is None


def test_clear_selection(controller, demo_dir):
    selections = []
    controller.selection_changed.connect(selections.append)
    controller.set_folder(demo_dir)
    controller.select_path(demo_dir / "a.txt")

    controller.set_selection(None)

    assert controller.selected_entry is None
    assert not controller.can_export
    assert selections[-1] is None


def test_describe_selected_entry(controller, demo_dir):
    controller.set_folder(demo_dir)
    controller.select_path(demo_dir / "a.txt")
    assert controller.describe(controller.selected_entry).startswith(str(demo_dir / "a.txt"))


# --- Folder choice and export ---

def test_choose_folder_bookmarks_it(controller, settings, demo_dir):
    assert controller.choose_folder(demo_dir)
    assert controller.current_folder == demo_dir
    assert controller.bookmark_store.resolve_stored() == demo_dir
    assert settings.get(BOOKMARK_KEY)


def test_export_selection(controller, demo_dir, tmp_path):
    controller.set_folder(demo_dir)
    controller.select_path(demo_dir / "a.txt")
    destination = tmp_path / "a.fs.txt"

    controller.export_selection(destination)

    assert destination.read_text(encoding="utf-8") == controller.describe(controller.selected_entry)


def test_export_without_selection_fails(controller, demo_dir, tmp_path):
    controller.set_folder(demo_dir)
    with pytest.raises(ExportWriteFailed):
        controller.export_selection(tmp_path / "x.fs.txt")


# --- Session persistence ---

def relaunch(settings, session_store):
    return NavigationController(settings, session_store)


def test_restore_without_record_starts_empty(controller):
    assert not controller.restore_session()
    assert controller.current_folder is None


def test_restore_with_empty_folder_line(controller, session_store):
    session_store.save(None, None)
    assert not controller.restore_session()
    assert controller.current_folder is None


def test_save_and_restore_session(controller, settings, session_store, demo_dir):
    controller.set_folder(demo_dir)
    controller.select_path(demo_dir / "a.txt")
    controller.save_session()

    restored = relaunch(settings, session_store)
    assert restored.restore_session()

    assert restored.current_folder == demo_dir
    # The selection waits until the display has rendered the rows.
    assert restored.selected_entry is None
    assert restored.render_queue.pending == 1

    restored.render_queue.drain()
    assert restored.selected_entry == FilesystemEntry(demo_dir / "a.txt", False)


def test_restore_keeps_subfolder_of_bookmarked_folder(controller, settings, session_store, demo_dir):
    controller.choose_folder(demo_dir)
    controller.navigate_into(FilesystemEntry(demo_dir / "sub", True))
    controller.save_session()

    restored = relaunch(settings, session_store)
    restored.restore_session()

    assert restored.current_folder == demo_dir / "sub"


def test_restore_prefers_bookmark_over_unrelated_folder(controller, settings, session_store, demo_dir,
                                                        other_dir):
    controller.choose_folder(demo_dir)
    controller.set_folder(other_dir)
    controller.select_path(other_dir / "b.txt")
    controller.save_session()

    restored = relaunch(settings, session_store)
    restored.restore_session()
    restored.render_queue.drain()

    assert restored.current_folder == demo_dir
    assert restored.selected_entry is None


def test_restore_with_unresolvable_bookmark_starts_empty(controller, settings, session_store, demo_dir):
    controller.set_folder(demo_dir)
    controller.save_session()
    settings.set(BOOKMARK_KEY, "garbage")

    restored = relaunch(settings, session_store)
    assert not restored.restore_session()
    assert restored.current_folder is None


def test_folder_change_drops_pending_selection(controller, settings, session_store, demo_dir, other_dir):
    controller.set_folder(demo_dir)
    controller.select_path(demo_dir / "a.txt")
    controller.save_session()

    restored = relaunch(settings, session_store)
    restored.restore_session()
    restored.set_folder(other_dir)

    assert restored.render_queue.pending == 0
    restored.render_queue.drain()
    assert restored.selected_entry is None


def test_post_render_queue_runs_callbacks_once():
    queue = PostRenderQueue()
    calls = []
    queue.enqueue(lambda: calls.append(1))
    queue.enqueue(lambda: calls.append(2))

    queue.drain()
    queue.drain()

    assert calls == [1, 2]
    assert queue.pending == 0


def test_session_record_written_on_save(controller, session_store, demo_dir):
    controller.set_folder(demo_dir)
    controller.save_session()
    assert session_store.load() == (str(demo_dir), "")
