"""
窗口标题测试
"""

from presentation.file_dialogs import build_name_filter
from presentation.window_title import APP_TITLE, WindowTitleUpdater, format_window_title
from shared.event_types import EVENT_EDITOR_MAP_SAVED


class FakeWindow:
    def __init__(self):
        self.titles = []

    def setWindowTitle(self, title):
        self.titles.append(title)


def test_title_without_document(session):
    assert format_window_title(None) == APP_TITLE
    assert format_window_title(session) == APP_TITLE


def test_title_uses_file_stem(session, side):
    session.update_side_state(side, None, "/maps/forsaken_city.bin")

    assert format_window_title(session) == "forsaken_city - Map Editor"


def test_title_uses_package_for_untitled_map(session, side):
    session.update_side_state(side, None, None)

    assert format_window_title(session) == "demo - Map Editor"


def test_title_marks_unsaved_changes(session, side):
    session.update_side_state(side, None, "/maps/level.bin")
    session.history.made_changes = True

    assert format_window_title(session) == "level - Map Editor *"


def test_updater_refreshes_after_save(session, side, event_bus):
    window = FakeWindow()
    updater = WindowTitleUpdater(window)
    updater.attach(session, event_bus)
    session.update_side_state(side, None, "/maps/level.bin")
    session.history.made_changes = True
    updater.update_window_title(session)

    session.history.made_changes = False
    event_bus.publish(EVENT_EDITOR_MAP_SAVED, {"filename": "/maps/level.bin"})

    assert window.titles == ["level - Map Editor *", "level - Map Editor"]
    assert updater.title == "level - Map Editor"


def test_name_filter():
    assert build_name_filter("bin") == "Map Files (*.bin);;All Files (*)"
