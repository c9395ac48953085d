"""
保存流程测试：原子写入、回读校验、合并队列、否决与失败路径
"""

import os

from application.operations.save_operation import SaveState
from domain.map.models import Side
from domain.map.side_codec import decode_side
from infrastructure.persistence.file_exceptions import MapCodecError
from infrastructure.persistence.map_coder import MapCoder
from shared.event_types import (
    EVENT_EDITOR_MAP_SAVE_FAILED,
    EVENT_EDITOR_MAP_SAVE_INTERRUPTED,
    EVENT_EDITOR_MAP_SAVED,
    EVENT_EDITOR_MAP_VERIFICATION_FAILED,
)


SAVE_EVENTS = (
    EVENT_EDITOR_MAP_SAVED,
    EVENT_EDITOR_MAP_SAVE_FAILED,
    EVENT_EDITOR_MAP_SAVE_INTERRUPTED,
    EVENT_EDITOR_MAP_VERIFICATION_FAILED,
)


class BrokenVerifyCoder(MapCoder):
    """写入正常，回读时总是报格式错误"""

    def decode_file(self, path):
        raise MapCodecError(str(path), "corrupted")


def test_save_with_verification_commits_target(session, side, tmp_path, map_coder, recorder):
    """测试保存后临时文件消失，目标文件可以被重新加载"""
    recorder.listen(*SAVE_EVENTS)
    path = str(tmp_path / "level.bin")
    session.update_side_state(side, None, path)
    session.history.made_changes = True

    operation = session.save_file(path)

    assert operation.state == SaveState.DONE
    assert os.path.isfile(path)
    assert not os.path.exists(path + ".saving")

    reloaded = decode_side(map_coder.decode_file(path))
    assert [room.name for room in reloaded.map.rooms] == ["lvl_start", "lvl_end"]
    assert reloaded.map.rooms[0].attributes == {"music": "level1"}

    assert recorder.types() == [EVENT_EDITOR_MAP_SAVED]
    assert recorder.of_type(EVENT_EDITOR_MAP_SAVED)[0]["filename"] == path
    assert not session.has_unsaved_changes
    assert not session.save_queue.is_in_flight(path)


def test_save_replaces_existing_file(session, side, map_file, map_coder):
    """测试保存覆盖已有地图文件"""
    session.update_side_state(side, None, map_file)
    session.map.rooms.pop()

    session.save_file(map_file)

    reloaded = decode_side(map_coder.decode_file(map_file))
    assert [room.name for room in reloaded.map.rooms] == ["lvl_start"]
    assert not os.path.exists(map_file + ".saving")


def test_save_adds_missing_extension(session, side, tmp_path):
    """测试缺少扩展名时自动补全"""
    session.update_side_state(side, None, None)
    base = str(tmp_path / "untitled")

    operation = session.save_file(base)

    assert operation.filename == base + ".bin"
    assert os.path.isfile(base + ".bin")
    assert session.filename == base + ".bin"


def test_save_keeps_extension_when_disabled(session, side, tmp_path):
    """测试关闭扩展名补全时按原样保存"""
    session.update_side_state(side, None, None)
    path = str(tmp_path / "level.map")

    session.save_file(path, add_ext_if_missing=False)

    assert os.path.isfile(path)
    assert not os.path.exists(path + ".bin")


def test_save_without_verification_writes_target_directly(deferred_session, deferred_runner, side, tmp_path):
    """测试关闭校验时直接写目标文件，不产生校验任务"""
    path = str(tmp_path / "level.bin")
    deferred_session.side = side

    operation = deferred_session.save_file(path, verify_map=False)
    deferred_runner.run_all()

    assert operation.state == SaveState.DONE
    assert operation.write_target == path
    assert os.path.isfile(path)
    assert "verify_decode" not in deferred_runner.submitted


def test_save_creates_missing_directory(session, side, tmp_path):
    """测试目标目录不存在时先创建"""
    path = str(tmp_path / "nested" / "deeper" / "level.bin")
    session.update_side_state(side, None, path)

    session.save_file(path)

    assert os.path.isfile(path)


def test_save_without_document_is_ignored(session, tmp_path):
    """测试没有文档时不保存"""
    assert session.save_file(str(tmp_path / "level.bin")) is None
    assert session.save_file(None) is None


def test_save_requests_coalesce_last_one_wins(deferred_session, deferred_runner, side, tmp_path, recorder):
    """测试保存进行中的重复请求合并为一次，最后一次请求的参数生效"""
    recorder.listen(EVENT_EDITOR_MAP_SAVED)
    path = str(tmp_path / "level.bin")
    deferred_session.side = side
    deferred_session.filename = path

    first_callbacks, second_callbacks, third_callbacks = [], [], []

    first = deferred_session.save_file(path, after_save_callback=lambda f, s: first_callbacks.append(f))
    assert first is not None
    assert deferred_session.save_queue.is_in_flight(path)

    assert deferred_session.save_file(path, after_save_callback=lambda f, s: second_callbacks.append(f)) is None
    assert deferred_session.save_file(path, after_save_callback=lambda f, s: third_callbacks.append(f)) is None
    assert deferred_session.save_queue.has_pending(path)

    deferred_runner.run_all()

    assert deferred_runner.submitted.count("map_encode") == 2
    assert first_callbacks == [path]
    assert second_callbacks == []
    assert third_callbacks == [path]
    assert len(recorder.of_type(EVENT_EDITOR_MAP_SAVED)) == 2
    assert not deferred_session.save_queue.is_in_flight(path)
    assert not deferred_session.save_queue.has_pending(path)
    assert not os.path.exists(path + ".saving")


def test_saves_to_different_files_do_not_queue(deferred_session, deferred_runner, side, tmp_path):
    """测试不同文件名的保存互不排队"""
    deferred_session.side = side
    first = str(tmp_path / "a.bin")
    second = str(tmp_path / "b.bin")

    assert deferred_session.save_file(first) is not None
    assert deferred_session.save_file(second) is not None

    deferred_runner.run_all()

    assert os.path.isfile(first)
    assert os.path.isfile(second)


def test_before_save_veto_leaves_filename_in_flight(session, side, tmp_path, recorder):
    """测试 before-save 否决后文件名保持 in-flight，后续保存只会排队"""
    recorder.listen(*SAVE_EVENTS)
    path = str(tmp_path / "level.bin")
    session.update_side_state(side, None, path)

    result = session.save_file(path, before_save_callback=lambda f, s: False)

    assert result is None
    assert recorder.types() == [EVENT_EDITOR_MAP_SAVE_INTERRUPTED]
    assert session.save_queue.is_in_flight(path)
    assert not os.path.exists(path)

    assert session.save_file(path) is None
    assert session.save_queue.has_pending(path)
    assert not os.path.exists(path)


def test_save_sanitizer_veto(session, side, tmp_path, recorder):
    """测试默认 before-save 回调执行已注册的保存前钩子"""
    recorder.listen(EVENT_EDITOR_MAP_SAVE_INTERRUPTED)
    path = str(tmp_path / "level.bin")
    session.update_side_state(side, None, path)
    session.save_sanitizers.register_before_save(lambda filename, s: filename.endswith(".other"))

    assert session.save_file(path) is None
    assert recorder.of_type(EVENT_EDITOR_MAP_SAVE_INTERRUPTED) == [{"filename": path}]


def test_disabled_before_save_callback_skips_sanitizers(session, side, tmp_path):
    """测试 before_save_callback=False 时不执行保存前钩子"""
    path = str(tmp_path / "level.bin")
    session.update_side_state(side, None, path)
    session.save_sanitizers.register_before_save(lambda filename, s: False)

    operation = session.save_file(path, before_save_callback=False)

    assert operation.state == SaveState.DONE
    assert os.path.isfile(path)


def test_after_save_sanitizers_run(session, side, tmp_path):
    """测试默认 after-save 回调执行保存后钩子"""
    path = str(tmp_path / "level.bin")
    session.update_side_state(side, None, None)
    saved = []
    session.save_sanitizers.register_after_save(lambda filename, s: saved.append(filename))

    session.save_file(path)

    assert saved == [path]
    assert session.filename == path


def test_verification_failure_removes_temporary_and_releases(
    event_bus, config_manager, persistence, file_manager, calls, dialogs, side, tmp_path, recorder
):
    """测试回读校验失败：删除临时文件，不覆盖目标文件，释放 in-flight"""
    from application.editor_session import EditorSession
    from shared.task_runner import TaskRunner

    recorder.listen(*SAVE_EVENTS)
    session = EditorSession(
        event_bus=event_bus,
        task_runner=TaskRunner(event_bus),
        config_manager=config_manager,
        persistence=persistence,
        file_manager=file_manager,
        map_coder=BrokenVerifyCoder(file_manager),
        file_dialogs=dialogs,
    )
    path = str(tmp_path / "level.bin")
    session.side = side
    session.filename = path

    operation = session.save_file(path)

    assert operation.state == SaveState.FAILED
    assert recorder.types() == [EVENT_EDITOR_MAP_VERIFICATION_FAILED]
    assert recorder.of_type(EVENT_EDITOR_MAP_VERIFICATION_FAILED)[0]["filename"] == path + ".saving"
    assert not os.path.exists(path + ".saving")
    assert not os.path.exists(path)
    assert not session.save_queue.is_in_flight(path)


def test_serialization_failure_reports_save_failed(session, tmp_path, recorder):
    """测试序列化失败时发送 save failed 并释放 in-flight"""
    recorder.listen(*SAVE_EVENTS)
    path = str(tmp_path / "level.bin")
    session.side = Side(map=None)

    operation = session.save_file(path)

    assert operation.state == SaveState.FAILED
    assert recorder.types() == [EVENT_EDITOR_MAP_SAVE_FAILED]
    failed = recorder.of_type(EVENT_EDITOR_MAP_SAVE_FAILED)[0]
    assert failed["filename"] == path
    assert "error" in failed
    assert not session.save_queue.is_in_flight(path)
    assert not os.path.exists(path + ".saving")


def test_failed_save_resumes_pending_request(deferred_session, deferred_runner, side, tmp_path, recorder):
    """测试保存失败后仍会恢复等待中的请求"""
    recorder.listen(EVENT_EDITOR_MAP_SAVE_FAILED, EVENT_EDITOR_MAP_SAVED)
    path = str(tmp_path / "level.bin")
    deferred_session.side = Side(map=None)
    deferred_session.filename = path

    deferred_session.save_file(path)
    deferred_session.save_file(path)

    deferred_runner.run_next()

    # 第一次保存失败后，等待请求已重新提交
    assert recorder.types() == [EVENT_EDITOR_MAP_SAVE_FAILED]
    assert deferred_session.save_queue.is_in_flight(path)
    assert not deferred_session.save_queue.has_pending(path)

    # 序列化任务在执行时读取文档
    deferred_session.side = side
    deferred_runner.run_all()

    assert recorder.types() == [EVENT_EDITOR_MAP_SAVE_FAILED, EVENT_EDITOR_MAP_SAVED]
    assert os.path.isfile(path)


def test_backup_save_does_not_announce(session, side, tmp_path, recorder):
    """测试保存到与当前文件不同的位置（备份）时不发送 saved 事件"""
    recorder.listen(EVENT_EDITOR_MAP_SAVED)
    current = str(tmp_path / "level.bin")
    backup = str(tmp_path / "backups" / "level-1.bin")
    session.update_side_state(side, None, current)

    session.save_file(backup, after_save_callback=False)

    assert os.path.isfile(backup)
    assert recorder.events == []
    assert session.filename == current
    assert backup not in session.persistence.recent_files


def test_save_current_map_uses_dialog_when_untitled(session, side, tmp_path, dialogs):
    """测试未命名地图通过另存为对话框选择文件名"""
    session.update_side_state(side, None, None)
    dialogs.chosen = str(tmp_path / "chosen")

    assert session.save_current_map() is None

    assert dialogs.save_requests == [(None, "bin")]
    assert os.path.isfile(str(tmp_path / "chosen.bin"))
    assert session.filename == str(tmp_path / "chosen.bin")


def test_save_current_map_saves_to_current_file(session, side, map_file):
    """测试已命名地图直接保存到当前文件"""
    session.update_side_state(side, None, map_file)

    operation = session.save_current_map()

    assert operation.filename == map_file
    assert operation.state == SaveState.DONE


def test_save_current_map_honors_verify_setting(deferred_session, deferred_runner, config_manager, side, tmp_path):
    """测试配置关闭 verify_on_save 后保存不再回读校验"""
    from infrastructure.config.settings import CONFIG_VERIFY_ON_SAVE

    path = str(tmp_path / "level.bin")
    config_manager.set(CONFIG_VERIFY_ON_SAVE, False)
    deferred_session.side = side
    deferred_session.filename = path

    deferred_session.save_current_map()
    deferred_runner.run_all()

    assert "verify_decode" not in deferred_runner.submitted
    assert os.path.isfile(path)


def test_saved_file_added_to_recent_files(session, side, tmp_path):
    """测试保存成功后文件进入最近文件列表"""
    path = str(tmp_path / "level.bin")
    session.update_side_state(side, None, None)

    session.save_file(path)

    assert session.persistence.recent_files[0] == path


def test_raising_after_save_hook_reports_failure_and_releases(session, side, tmp_path, recorder):
    """测试保存后钩子抛出异常：文件已提交，发送 save failed，释放 in-flight"""
    recorder.listen(*SAVE_EVENTS)
    path = str(tmp_path / "level.bin")
    session.update_side_state(side, None, path)

    def broken_hook(filename, s):
        raise RuntimeError("sanitizer crashed")

    session.save_sanitizers.register_after_save(broken_hook)

    operation = session.save_file(path)

    assert operation.state == SaveState.FAILED
    assert recorder.types() == [EVENT_EDITOR_MAP_SAVE_FAILED]
    assert "sanitizer crashed" in recorder.of_type(EVENT_EDITOR_MAP_SAVE_FAILED)[0]["error"]
    assert not session.save_queue.is_in_flight(path)
    assert os.path.isfile(path)
    assert not os.path.exists(path + ".saving")


def test_raising_after_save_callback_resumes_pending_request(deferred_session, deferred_runner, side, tmp_path, recorder):
    """测试保存后回调抛出异常后，等待中的请求仍会执行"""
    recorder.listen(EVENT_EDITOR_MAP_SAVE_FAILED, EVENT_EDITOR_MAP_SAVED)
    path = str(tmp_path / "level.bin")
    deferred_session.side = side
    deferred_session.filename = path

    def broken_callback(filename, s):
        raise RuntimeError("boom")

    deferred_session.save_file(path, after_save_callback=broken_callback)
    assert deferred_session.save_file(path) is None

    deferred_runner.run_all()

    assert recorder.types() == [EVENT_EDITOR_MAP_SAVE_FAILED, EVENT_EDITOR_MAP_SAVED]
    assert not deferred_session.save_queue.is_in_flight(path)
    assert not deferred_session.save_queue.has_pending(path)
