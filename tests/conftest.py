"""
编辑器会话测试夹具

全局配置目录在导入任何项目模块之前指向临时目录，日志与持久化文件都不会写进用户目录。
"""

import os
import tempfile

os.environ.setdefault("MAP_EDITOR_HOME", tempfile.mkdtemp(prefix="map_editor_tests_"))

from typing import Any, Callable, List, Optional

import pytest

from application.collaborators import (
    EditorHistory,
    FileDialogs,
    MapRenderer,
    ModHandler,
    SaveSanitizers,
    WindowTitle,
)
from application.editor_session import EditorSession
from domain.map.models import Filler, MapData, Room, Side
from infrastructure.config.config_manager import ConfigManager
from infrastructure.persistence.file_manager import FileManager
from infrastructure.persistence.json_repository import JsonRepository
from infrastructure.persistence.map_coder import MapCoder
from infrastructure.persistence.persistence_store import PersistenceStore
from shared.event_bus import EventBus
from shared.service_locator import ServiceLocator
from shared.task_runner import TaskRunner, execute_work


# ============================================================
# 测试替身
# ============================================================

class EventRecorder:
    """订阅若干事件并按顺序记录 (事件类型, data)"""

    def __init__(self, event_bus: EventBus):
        self._event_bus = event_bus
        self.events: List[tuple] = []

    def listen(self, *event_types: str) -> "EventRecorder":
        for event_type in event_types:
            self._event_bus.subscribe(event_type, self._on_event)
        return self

    def _on_event(self, event_data: dict) -> None:
        self.events.append((event_data["type"], event_data["data"]))

    def types(self) -> List[str]:
        return [event_type for event_type, _ in self.events]

    def of_type(self, event_type: str) -> List[dict]:
        return [data for t, data in self.events if t == event_type]


class DeferredTaskRunner:
    """
    手动推进的任务执行器

    new_task 只登记任务；run_next / run_all 在测试线程中依次执行，
    用来在任务之间插入操作（例如保存进行中再次保存）。
    """

    def __init__(self):
        self.pending: List[tuple] = []
        self.submitted: List[str] = []

    def new_task(self, work: Callable[[], Any], callback=None, name: str = "task") -> str:
        self.pending.append((name, work, callback))
        self.submitted.append(name)
        return f"{name}_{len(self.submitted)}"

    def run_next(self) -> str:
        name, work, callback = self.pending.pop(0)
        result = execute_work(work)
        if callback is not None:
            callback(result)
        return name

    def run_all(self) -> List[str]:
        ran = []
        while self.pending:
            ran.append(self.run_next())
        return ran


class RecordingRenderer(MapRenderer):
    def __init__(self, calls: List[str]):
        super().__init__()
        self.calls = calls

    def invalidate_room_cache(self, room=None, keys=None):
        self.calls.append("invalidate_room_cache")
        super().invalidate_room_cache(room, keys)

    def clear_batching_tasks(self):
        self.calls.append("clear_batching_tasks")
        super().clear_batching_tasks()

    def load_custom_tileset_autotiler(self, session):
        self.calls.append("load_custom_tileset_autotiler")
        super().load_custom_tileset_autotiler(session)


class RecordingHistory(EditorHistory):
    def __init__(self, calls: List[str]):
        super().__init__()
        self.calls = calls

    def reset(self):
        self.calls.append("history_reset")
        super().reset()


class RecordingModHandler(ModHandler):
    def __init__(self, calls: List[str]):
        super().__init__()
        self.calls = calls

    def invalidate_filenames_cache_from_path(self, filename):
        self.calls.append("invalidate_mod_cache")
        super().invalidate_filenames_cache_from_path(filename)


class RecordingWindowTitle(WindowTitle):
    def __init__(self, calls: List[str]):
        self.calls = calls
        self.updates = 0

    def update_window_title(self, session):
        self.calls.append("window_title")
        self.updates += 1


class ScriptedFileDialogs(FileDialogs):
    """按预设路径"选择"文件的对话框"""

    def __init__(self, chosen: Optional[str] = None):
        self.chosen = chosen
        self.open_requests: List[tuple] = []
        self.save_requests: List[tuple] = []

    def open_dialog(self, directory, extension, callback):
        self.open_requests.append((directory, extension))
        if self.chosen:
            callback(self.chosen)

    def save_dialog(self, filename, extension, callback):
        self.save_requests.append((filename, extension))
        if self.chosen:
            callback(self.chosen)


# ============================================================
# 地图样例
# ============================================================

def make_side(package: str = "demo") -> Side:
    """两个房间、一个填充块的小地图"""
    start = Room(
        name="lvl_start",
        x=0,
        y=0,
        entities=[
            {"_name": "player", "x": 16, "y": 16},
            {"_name": "spring", "x": 40, "y": 16, "_editorLayer": 2},
        ],
        triggers=[{"_name": "cameraTrigger", "x": 0, "y": 0, "width": 8, "height": 8}],
        tiles_fg="111\n1.1\n111",
        attributes={"music": "level1"},
    )
    end = Room(name="lvl_end", x=320, y=0, decals_fg=[{"_name": "decal", "texture": "a.png"}])

    return Side(
        map=MapData(
            package=package,
            rooms=[start, end],
            fillers=[Filler(x=0, y=200, width=4, height=4)],
        ),
        meta={"ForegroundTiles": "Graphics/fg.xml"},
    )


# ============================================================
# 夹具
# ============================================================

@pytest.fixture(autouse=True)
def clean_service_locator():
    ServiceLocator.clear()
    yield
    ServiceLocator.clear()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def recorder(event_bus) -> EventRecorder:
    return EventRecorder(event_bus)


@pytest.fixture
def file_manager() -> FileManager:
    return FileManager()


@pytest.fixture
def map_coder(file_manager) -> MapCoder:
    return MapCoder(file_manager)


@pytest.fixture
def persistence(tmp_path, file_manager) -> PersistenceStore:
    store = PersistenceStore(tmp_path / "persistence.json", JsonRepository(file_manager))
    store.load()
    return store


@pytest.fixture
def config_manager(tmp_path, event_bus) -> ConfigManager:
    manager = ConfigManager(tmp_path / "config.json", event_bus=event_bus)
    manager.load_config()
    return manager


@pytest.fixture
def calls() -> List[str]:
    return []


@pytest.fixture
def deferred_runner() -> DeferredTaskRunner:
    return DeferredTaskRunner()


@pytest.fixture
def dialogs() -> ScriptedFileDialogs:
    return ScriptedFileDialogs()


def _build_session(task_runner, event_bus, config_manager, persistence, file_manager, map_coder, calls, dialogs):
    return EditorSession(
        event_bus=event_bus,
        task_runner=task_runner,
        config_manager=config_manager,
        persistence=persistence,
        file_manager=file_manager,
        map_coder=map_coder,
        history=RecordingHistory(calls),
        renderer=RecordingRenderer(calls),
        save_sanitizers=SaveSanitizers(),
        mod_handler=RecordingModHandler(calls),
        file_dialogs=dialogs,
        window_title=RecordingWindowTitle(calls),
    )


@pytest.fixture
def session(event_bus, config_manager, persistence, file_manager, map_coder, calls, dialogs) -> EditorSession:
    """任务在调用线程内同步执行的会话（没有 QApplication）"""
    return _build_session(
        TaskRunner(event_bus), event_bus, config_manager, persistence, file_manager, map_coder, calls, dialogs
    )


@pytest.fixture
def deferred_session(
    deferred_runner, event_bus, config_manager, persistence, file_manager, map_coder, calls, dialogs
) -> EditorSession:
    """任务需要手动推进的会话"""
    return _build_session(
        deferred_runner, event_bus, config_manager, persistence, file_manager, map_coder, calls, dialogs
    )


@pytest.fixture
def side() -> Side:
    return make_side()


@pytest.fixture
def map_file(tmp_path, map_coder, side) -> str:
    """磁盘上一个合法的地图文件"""
    from domain.map.side_codec import encode_side

    path = str(tmp_path / "maps" / "level.bin")
    map_coder.encode_file(path, encode_side(side))
    return path
