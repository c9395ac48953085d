"""
加载流程测试：提交顺序、未保存修改拦截、失败路径、中断保存恢复、校验
"""

import os
from pathlib import Path

import pytest

from application.operations.load_operation import LoadState
from application.operations.verify_operation import VerifyState
from domain.map.side_codec import encode_side
from shared.event_types import (
    EVENT_EDITOR_LOAD_WITH_CHANGES,
    EVENT_EDITOR_MAP_LOAD_FAILED,
    EVENT_EDITOR_MAP_LOADED,
    EVENT_EDITOR_MAP_NEW,
    EVENT_EDITOR_MAP_TARGET_CHANGED,
    EVENT_EDITOR_MAP_VERIFICATION_FAILED,
    EVENT_EDITOR_NEW_MAP_WITH_CHANGES,
    EVENT_SCENE_CHANGE_REQUESTED,
)


@pytest.fixture
def scenes(event_bus):
    changes = []
    event_bus.subscribe(EVENT_SCENE_CHANGE_REQUESTED, lambda e: changes.append(e["data"]["scene"]))
    return changes


def test_load_commits_in_order(session, map_file, event_bus, calls):
    """测试提交步骤的顺序：缓存失效在前，loaded 事件最后"""
    event_bus.subscribe(EVENT_SCENE_CHANGE_REQUESTED, lambda e: calls.append("scene:" + e["data"]["scene"]))
    event_bus.subscribe(EVENT_EDITOR_MAP_TARGET_CHANGED, lambda e: calls.append("selection"))
    event_bus.subscribe(EVENT_EDITOR_MAP_LOADED, lambda e: calls.append("loaded"))

    operation = session.load_file(map_file)

    assert operation.state == LoadState.COMMITTED
    assert calls == [
        "scene:Loading",
        "invalidate_mod_cache",
        "invalidate_room_cache",
        "clear_batching_tasks",
        "load_custom_tileset_autotiler",
        "history_reset",
        "selection",
        "window_title",
        "scene:Editor",
        "loaded",
    ]


def test_load_installs_document(session, map_file, recorder):
    """测试加载后文档、子图层、持久化状态与最近文件都已更新"""
    recorder.listen(EVENT_EDITOR_MAP_LOADED)

    session.load_file(map_file)

    assert session.filename == map_file
    assert session.map.package == "demo"
    assert [room.name for room in session.map.rooms] == ["lvl_start", "lvl_end"]
    assert session.sub_layers == {
        "entities": [0, 2],
        "triggers": [0],
        "decalsFg": [0],
        "decalsBg": [],
    }
    assert session.get_selected_room().name == "lvl_start"
    assert session.scene == "Editor"

    assert session.persistence.last_loaded_filename == map_file
    assert session.persistence.last_selected_room_name == "lvl_start"
    assert session.persistence.recent_files == [map_file]

    assert recorder.of_type(EVENT_EDITOR_MAP_LOADED) == [{"filename": map_file}]


def test_load_selects_named_room(session, map_file):
    """测试按房间名（可省略 lvl_ 前缀）选中初始房间"""
    session.load_file(map_file, room_name="end")

    assert session.get_selected_room().name == "lvl_end"
    assert session.persistence.last_selected_room_name == "lvl_end"


def test_load_unknown_room_falls_back_to_first(session, map_file):
    """测试房间名不存在时选中第一个房间"""
    session.load_file(map_file, room_name="missing")

    assert session.get_selected_room().name == "lvl_start"


def test_load_refused_with_unsaved_changes(session, map_file, recorder, scenes):
    """测试有未保存修改时拒绝加载，状态不变"""
    recorder.listen(EVENT_EDITOR_LOAD_WITH_CHANGES, EVENT_EDITOR_MAP_LOADED)
    session.history.made_changes = True

    assert session.load_file(map_file) is None

    assert recorder.events == [
        (EVENT_EDITOR_LOAD_WITH_CHANGES, {"filename": map_file, "current_filename": None}),
    ]
    assert scenes == []
    assert session.side is None


def test_load_without_filename_is_ignored(session, scenes):
    assert session.load_file(None) is None
    assert session.load_file("") is None
    assert scenes == []


def test_load_corrupted_file_fails(session, tmp_path, recorder, scenes):
    """测试解码失败：回到编辑器场景并发送 load failed"""
    recorder.listen(EVENT_EDITOR_MAP_LOAD_FAILED, EVENT_EDITOR_MAP_LOADED)
    path = tmp_path / "broken.bin"
    path.write_bytes(b"not a map at all")

    operation = session.load_file(str(path))

    assert operation.state == LoadState.FAILED
    assert scenes == ["Loading", "Editor"]
    assert recorder.types() == [EVENT_EDITOR_MAP_LOAD_FAILED]
    failed = recorder.of_type(EVENT_EDITOR_MAP_LOAD_FAILED)[0]
    assert failed["filename"] == str(path)
    assert "魔数不匹配" in failed["error"]
    assert session.side is None


def test_load_missing_file_fails(session, tmp_path, recorder):
    """测试文件不存在时发送 load failed"""
    recorder.listen(EVENT_EDITOR_MAP_LOAD_FAILED)
    path = str(tmp_path / "missing.bin")

    operation = session.load_file(path)

    assert operation.state == LoadState.FAILED
    assert recorder.of_type(EVENT_EDITOR_MAP_LOAD_FAILED)[0]["filename"] == path


def test_load_structure_error_fails(session, tmp_path, map_coder, recorder):
    """测试反序列化抛出异常时走 load failed"""
    recorder.listen(EVENT_EDITOR_MAP_LOAD_FAILED, EVENT_EDITOR_MAP_LOADED)
    path = str(tmp_path / "bad_structure.bin")
    map_coder.encode_file(path, {"__name": "Map", "__children": "nope"})

    operation = session.load_file(path)

    assert operation.state == LoadState.FAILED
    assert recorder.types() == [EVENT_EDITOR_MAP_LOAD_FAILED]


def test_load_empty_tree_commits_empty_document(session, tmp_path, map_coder, recorder):
    """测试空元素树得到空文档并照常提交"""
    recorder.listen(EVENT_EDITOR_MAP_LOADED)
    path = str(tmp_path / "empty.bin")
    map_coder.encode_file(path, {})

    operation = session.load_file(path)

    assert operation.state == LoadState.COMMITTED
    assert session.map.rooms == []
    assert session.selection.is_empty
    assert recorder.types() == [EVENT_EDITOR_MAP_LOADED]


def test_scene_stays_loading_until_decode_completes(deferred_session, deferred_runner, map_file):
    """测试后台任务完成前停留在加载场景"""
    operation = deferred_session.load_file(map_file)

    assert deferred_session.scene == "Loading"
    assert operation.state == LoadState.DECODING
    assert deferred_session.side is None

    deferred_runner.run_next()
    assert operation.state == LoadState.DESERIALIZING

    deferred_runner.run_all()
    assert operation.state == LoadState.COMMITTED
    assert deferred_session.scene == "Editor"


def test_load_recovers_interrupted_save(session, tmp_path, map_coder, side):
    """测试只有临时文件时先提交临时文件再加载"""
    path = str(tmp_path / "level.bin")
    map_coder.encode_file(path + ".saving", encode_side(side))

    operation = session.load_file(path)

    assert operation.state == LoadState.COMMITTED
    assert os.path.isfile(path)
    assert not os.path.exists(path + ".saving")
    assert len(session.map.rooms) == 2


def test_load_discards_stale_temporary(session, map_file):
    """测试目标文件与临时文件都存在时丢弃临时文件"""
    Path(map_file + ".saving").write_bytes(b"half written")

    operation = session.load_file(map_file)

    assert operation.state == LoadState.COMMITTED
    assert not os.path.exists(map_file + ".saving")


def test_new_map_installs_empty_document(session, recorder):
    """测试新建地图：空文档、无文件名、发送 new 事件"""
    recorder.listen(EVENT_EDITOR_MAP_NEW, EVENT_EDITOR_MAP_LOADED)

    assert session.new_map() is True

    assert session.side is not None
    assert session.filename is None
    assert session.map.rooms == []
    assert session.scene == "Editor"
    assert recorder.types() == [EVENT_EDITOR_MAP_NEW]


def test_new_map_refused_with_unsaved_changes(session, map_file, recorder):
    """测试有未保存修改时拒绝新建"""
    session.load_file(map_file)
    session.history.made_changes = True
    recorder.listen(EVENT_EDITOR_NEW_MAP_WITH_CHANGES, EVENT_EDITOR_MAP_NEW)

    assert session.new_map() is False

    assert recorder.events == [(EVENT_EDITOR_NEW_MAP_WITH_CHANGES, {"filename": map_file})]
    assert session.filename == map_file


def test_open_map_starts_in_game_directory(session, dialogs, map_file):
    """测试没有当前文件时对话框从游戏目录打开，选中后加载"""
    dialogs.chosen = map_file

    session.open_map()

    assert dialogs.open_requests == [(str(Path.home()), "bin")]
    assert session.filename == map_file


def test_open_map_starts_next_to_current_file(session, dialogs, map_file):
    """测试当前文件存在时对话框从其所在目录打开"""
    session.load_file(map_file)

    session.open_map()

    assert dialogs.open_requests == [(str(Path(map_file).parent), "bin")]


def test_open_map_uses_configured_game_directory(session, dialogs, config_manager, tmp_path):
    from infrastructure.config.settings import CONFIG_GAME_DIRECTORY

    config_manager.set(CONFIG_GAME_DIRECTORY, str(tmp_path))

    session.open_map()

    assert dialogs.open_requests == [(str(tmp_path), "bin")]


def test_window_title_updated_on_load(session, map_file):
    session.load_file(map_file)

    assert session.window_title.updates == 1


# ============================================================
# 回读校验
# ============================================================

def test_verify_valid_file(session, map_file):
    """测试合法文件校验通过"""
    results = []

    operation = session.verify_file(map_file, lambda: results.append("ok"), lambda f: results.append(f))

    assert operation.state == VerifyState.VERIFIED
    assert results == ["ok"]
    assert session.side is None


def test_verify_corrupted_file_calls_error_callback(session, tmp_path):
    path = tmp_path / "broken.bin"
    path.write_bytes(b"MAPEDIT\x00\x01garbage")
    results = []

    operation = session.verify_file(str(path), lambda: results.append("ok"), lambda f: results.append(f))

    assert operation.state == VerifyState.FAILED
    assert results == [str(path)]
    assert path.exists()


def test_verify_structure_error_calls_error_callback(session, tmp_path, map_coder):
    """测试反序列化失败同样走校验失败"""
    path = str(tmp_path / "bad.bin")
    map_coder.encode_file(path, {"__children": [{"__name": "levels", "__children": [{"__name": "level"}]}]})
    results = []

    session.verify_file(path, lambda: results.append("ok"), lambda f: results.append(f))

    assert results == [path]


def test_default_verify_error_removes_file(session, tmp_path, recorder):
    """测试默认错误回调发送事件并删除文件"""
    recorder.listen(EVENT_EDITOR_MAP_VERIFICATION_FAILED)
    path = tmp_path / "broken.bin"
    path.write_bytes(b"broken")

    session.verify_file(str(path), lambda: None)

    assert recorder.of_type(EVENT_EDITOR_MAP_VERIFICATION_FAILED) == [{"filename": str(path)}]
    assert not path.exists()


def test_load_invalid_editor_layer_fails_cleanly(session, tmp_path, map_coder, side, recorder, scenes):
    """测试子图层编号非法的文件走 load failed，会话保持可用"""
    recorder.listen(EVENT_EDITOR_MAP_LOAD_FAILED, EVENT_EDITOR_MAP_LOADED)
    tree = encode_side(side)
    levels = tree["__children"][0]
    entities = levels["__children"][0]["__children"][0]
    entities["__children"][0]["_editorLayer"] = "top"
    path = str(tmp_path / "bad_layer.bin")
    map_coder.encode_file(path, tree)

    operation = session.load_file(path)

    assert operation.state == LoadState.FAILED
    assert recorder.types() == [EVENT_EDITOR_MAP_LOAD_FAILED]
    assert scenes == ["Loading", "Editor"]
    assert session.side is None
    assert session.filename is None


def test_verify_invalid_editor_layer_fails(session, tmp_path, map_coder, side):
    tree = encode_side(side)
    entities = tree["__children"][0]["__children"][0]["__children"][0]
    entities["__children"][0]["_editorLayer"] = "top"
    path = str(tmp_path / "bad_layer.bin")
    map_coder.encode_file(path, tree)
    results = []

    session.verify_file(path, lambda: results.append("ok"), lambda f: results.append(f))

    assert results == [path]
