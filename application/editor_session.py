# Editor Session - Loaded Map State Controller
"""
编辑器会话 - 当前打开地图的状态控制器

职责：
- 持有当前文档（Side）、文件名、选中项、图层渲染信息
- 加载：未保存修改拦截 → 中断保存恢复 → 解码 → 反序列化 → 提交
- 保存：扩展名补全 → 合并队列 → before-save 钩子 → 序列化 → 编码 → 回读校验 → 提交
- 新建、打开、另存为等命令
- 选择、图层可见性/强制渲染、图层名、依赖模组显示开关
- 最近文件列表与跨会话状态写入 PersistenceStore

初始化顺序：
- Phase 3.4，依赖 EventBus、TaskRunner、ConfigManager、PersistenceStore、FileManager、MapCoder
  以及渲染器/历史/保存钩子/模组处理器等协作者

设计原则：
- 所有状态只在主线程中修改；后台任务只做编解码和文件 IO
- 失败从不抛给调用方，一律以事件通知 UI 层，会话保持可用
- 协作者可通过构造参数注入，未注入时从 ServiceLocator 延迟获取

提交顺序（update_side_state）：
    缓存失效 → 安装文档 → 自定义图块集 → 历史重置 → 初始房间选择
    → 持久化 → 最近文件 → 窗口标题 → 切换到编辑器场景 → 发送事件
"loaded" 事件的订阅者可以假定文档与选中项都已就绪。

使用示例：
    session = EditorSession()
    session.load_file("/maps/level.bin", room_name="start")
    ...
    session.save_current_map()
"""

from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from application.collaborators import EditorHistory, MapRenderer, ModHandler, SaveSanitizers
from application.operations.load_operation import LoadOperation
from application.operations.save_operation import SaveOperation
from application.operations.verify_operation import VerifyOperation
from application.save_queue import SaveCallbackArg, SaveCoalescingQueue, SaveRequest
from domain.editor.layer_state import KEY_FORCE_RENDER, KEY_VISIBLE, LayerInformationTable
from domain.editor.recent_files import add_to_recent_files
from domain.editor.selection import (
    EMPTY_SELECTION,
    MultiSelection,
    Selection,
    SingleSelection,
)
from domain.map.models import ITEM_TYPE_FILLER, ITEM_TYPE_ROOM, MapData, Room, Side, item_type_of
from domain.map.side_codec import decode_side, get_sub_layers
from infrastructure.config.settings import (
    DEFAULT_RECENT_FILES_ENTRY_LIMIT,
    MAP_FILE_EXTENSION,
    ROOM_NAME_PREFIX,
    SCENE_EDITOR,
    SCENE_LOADING,
)
from infrastructure.persistence.atomic_writer import get_temporary_filename, recover_interrupted_save
from infrastructure.persistence.file_exceptions import FileManagerError
from shared.event_types import (
    EVENT_EDITOR_LAYER_INFORMATION_CHANGED,
    EVENT_EDITOR_LOAD_WITH_CHANGES,
    EVENT_EDITOR_MAP_LOAD_FAILED,
    EVENT_EDITOR_MAP_LOADED,
    EVENT_EDITOR_MAP_NEW,
    EVENT_EDITOR_MAP_SAVE_FAILED,
    EVENT_EDITOR_MAP_SAVE_INTERRUPTED,
    EVENT_EDITOR_MAP_SAVED,
    EVENT_EDITOR_MAP_TARGET_CHANGED,
    EVENT_EDITOR_MAP_VERIFICATION_FAILED,
    EVENT_EDITOR_NEW_MAP_WITH_CHANGES,
    EVENT_EDITOR_SHOWN_DEPENDENCIES_CHANGED,
    EVENT_SCENE_CHANGE_REQUESTED,
)
from shared.service_locator import ServiceLocator
from shared.service_names import (
    SVC_CONFIG_MANAGER,
    SVC_EVENT_BUS,
    SVC_FILE_DIALOGS,
    SVC_FILE_MANAGER,
    SVC_HISTORY,
    SVC_MAP_CODER,
    SVC_MAP_RENDERER,
    SVC_MOD_HANDLER,
    SVC_PERSISTENCE,
    SVC_SAVE_SANITIZERS,
    SVC_TASK_RUNNER,
    SVC_WINDOW_TITLE,
)


# 清空房间渲染缓存时失效的缓存键
ROOM_RENDER_CACHE_KEYS = ("canvas", "complete")

LayerTarget = Union[str, List[str], Tuple[str, ...], set]


class EditorSession:
    """
    编辑器会话

    进程内唯一的文档状态控制器，替代全局可变状态表。
    """

    def __init__(
        self,
        event_bus=None,
        task_runner=None,
        config_manager=None,
        persistence=None,
        file_manager=None,
        map_coder=None,
        history=None,
        renderer=None,
        save_sanitizers=None,
        mod_handler=None,
        file_dialogs=None,
        window_title=None,
    ):
        # 文档状态
        self.filename: Optional[str] = None
        self.side: Optional[Side] = None
        self.sub_layers: Dict[str, List[int]] = {}
        self.scene: Optional[str] = None

        # 选择与图层
        self._selection: Selection = EMPTY_SELECTION
        self.layer_information = LayerInformationTable()
        self.only_show_depended_on_mods: Dict[str, bool] = {}

        # 地图渲染开关
        self.show_room_borders = True
        self.show_room_background = True

        # 保存合并队列
        self.save_queue = SaveCoalescingQueue()

        # 协作者（未注入时延迟获取）
        self._services: Dict[str, Any] = {
            SVC_EVENT_BUS: event_bus,
            SVC_TASK_RUNNER: task_runner,
            SVC_CONFIG_MANAGER: config_manager,
            SVC_PERSISTENCE: persistence,
            SVC_FILE_MANAGER: file_manager,
            SVC_MAP_CODER: map_coder,
            SVC_HISTORY: history,
            SVC_MAP_RENDERER: renderer,
            SVC_SAVE_SANITIZERS: save_sanitizers,
            SVC_MOD_HANDLER: mod_handler,
            SVC_FILE_DIALOGS: file_dialogs,
            SVC_WINDOW_TITLE: window_title,
        }
        self._logger = None

    # ============================================================
    # 延迟获取服务
    # ============================================================

    def _service(self, name: str, factory: Optional[Callable[[], Any]] = None) -> Any:
        """已注入则直接返回，否则查询 ServiceLocator，仍缺失时用 factory 创建本地实例"""
        service = self._services.get(name)
        if service is None:
            service = ServiceLocator.get_optional(name)
            if service is None and factory is not None:
                service = factory()
            self._services[name] = service
        return service

    @property
    def logger(self):
        """延迟获取日志器"""
        if self._logger is None:
            from infrastructure.utils.logger import get_logger
            self._logger = get_logger("editor_session")
        return self._logger

    @property
    def event_bus(self):
        return self._service(SVC_EVENT_BUS)

    @property
    def task_runner(self):
        def create():
            from shared.task_runner import TaskRunner
            return TaskRunner(self.event_bus)
        return self._service(SVC_TASK_RUNNER, create)

    @property
    def config_manager(self):
        return self._service(SVC_CONFIG_MANAGER)

    @property
    def persistence(self):
        def create():
            from infrastructure.persistence.persistence_store import PersistenceStore
            store = PersistenceStore()
            store.load()
            return store
        return self._service(SVC_PERSISTENCE, create)

    @property
    def file_manager(self):
        def create():
            from infrastructure.persistence.file_manager import FileManager
            return FileManager()
        return self._service(SVC_FILE_MANAGER, create)

    @property
    def map_coder(self):
        def create():
            from infrastructure.persistence.map_coder import MapCoder
            return MapCoder(self.file_manager)
        return self._service(SVC_MAP_CODER, create)

    @property
    def history(self) -> EditorHistory:
        return self._service(SVC_HISTORY, EditorHistory)

    @property
    def renderer(self) -> MapRenderer:
        return self._service(SVC_MAP_RENDERER, MapRenderer)

    @property
    def save_sanitizers(self) -> SaveSanitizers:
        return self._service(SVC_SAVE_SANITIZERS, SaveSanitizers)

    @property
    def mod_handler(self) -> ModHandler:
        return self._service(SVC_MOD_HANDLER, ModHandler)

    @property
    def file_dialogs(self):
        return self._service(SVC_FILE_DIALOGS)

    @property
    def window_title(self):
        return self._service(SVC_WINDOW_TITLE)

    # ============================================================
    # 文档访问
    # ============================================================

    @property
    def map(self) -> Optional[MapData]:
        return self.side.map if self.side is not None else None

    @property
    def has_unsaved_changes(self) -> bool:
        return bool(self.history.made_changes)

    def get_room_by_name(self, name: str) -> Tuple[Optional[Room], Optional[int]]:
        """
        按名称查找房间，name 可以省略 lvl_ 前缀

        Returns:
            (房间, 在房间列表中的下标)；找不到时为 (None, None)
        """
        rooms = self.map.rooms if self.map is not None else []
        name_with_prefix = f"{ROOM_NAME_PREFIX}{name}"

        for index, room in enumerate(rooms):
            if room.name == name or room.name == name_with_prefix:
                return room, index

        return None, None

    # ============================================================
    # 事件
    # ============================================================

    def _publish(self, event_type: str, data: Optional[Dict[str, Any]] = None) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(event_type, data or {}, source="editor_session")

    def _report(self, event_type: str, filename: Optional[str], error: Optional[BaseException] = None, **extra) -> None:
        """按失败分类记录日志后发送通知事件"""
        from infrastructure.utils.logger import log_editor_event

        log_editor_event(event_type, filename, str(error) if error is not None else None)

        data = {"filename": filename}
        if error is not None:
            data["error"] = str(error)
        data.update(extra)
        self._publish(event_type, data)

    def change_scene(self, scene: str) -> None:
        self.scene = scene
        self._publish(EVENT_SCENE_CHANGE_REQUESTED, {"scene": scene})

    # ============================================================
    # 最近文件
    # ============================================================

    def add_to_recent_files(self, filename: Optional[str]) -> List[str]:
        """放到最近文件最前（去重、截断），返回新列表"""
        limit = DEFAULT_RECENT_FILES_ENTRY_LIMIT
        if self.config_manager is not None:
            limit = self.config_manager.get_recent_files_entry_limit()

        recent = add_to_recent_files(self.persistence.recent_files, filename, limit)
        if filename:
            self.persistence.recent_files = recent
        return recent

    # ============================================================
    # 加载
    # ============================================================

    def load_file(self, filename: Optional[str], room_name: Optional[str] = None) -> Optional[LoadOperation]:
        """
        加载地图文件

        有未保存修改时拒绝并发送 EVENT_EDITOR_LOAD_WITH_CHANGES。

        Returns:
            LoadOperation: 已启动的加载操作；被拒绝时返回 None
        """
        if not filename:
            return None

        if self.history.made_changes:
            self._report(EVENT_EDITOR_LOAD_WITH_CHANGES, filename, current_filename=self.filename)
            return None

        try:
            recover_interrupted_save(filename, self.file_manager)
        except FileManagerError as e:
            self.logger.error(f"恢复中断的保存失败: {e}")

        self.change_scene(SCENE_LOADING)

        operation = LoadOperation(self, filename, room_name, EVENT_EDITOR_MAP_LOADED)
        operation.start()
        return operation

    def map_load_failed(self, filename: str, error: Optional[BaseException] = None) -> None:
        self.change_scene(SCENE_EDITOR)
        self._report(EVENT_EDITOR_MAP_LOAD_FAILED, filename, error)

    def update_side_state(
        self,
        side: Side,
        room_name: Optional[str],
        filename: Optional[str],
        event_name: Optional[str] = None,
    ) -> None:
        """提交新文档，顺序见模块说明"""
        event_name = event_name or EVENT_EDITOR_MAP_LOADED

        self.mod_handler.invalidate_filenames_cache_from_path(filename)
        self.renderer.invalidate_room_cache()
        self.renderer.clear_batching_tasks()

        self.filename = filename
        self.side = side
        self.sub_layers = get_sub_layers(side.map)

        self.renderer.load_custom_tileset_autotiler(self)

        self.history.reset()

        rooms = side.map.rooms
        initial_room = rooms[0] if rooms else None

        if room_name:
            room_by_name, _ = self.get_room_by_name(room_name)
            if room_by_name is not None:
                initial_room = room_by_name

        with self.persistence.batch():
            self.select_item(initial_room)

            selected = self._selection
            selected_name = None
            if isinstance(selected, SingleSelection) and selected.item_type == ITEM_TYPE_ROOM:
                selected_name = selected.item.name

            self.persistence.last_loaded_filename = filename
            self.persistence.last_selected_room_name = selected_name

            self.add_to_recent_files(filename)

        if self.window_title is not None:
            self.window_title.update_window_title(self)

        self.change_scene(SCENE_EDITOR)

        self.logger.info(f"地图已提交: {filename} ({len(rooms)} rooms)")
        self._publish(event_name, {"filename": filename})

    # ============================================================
    # 校验
    # ============================================================

    def verify_file(
        self,
        filename: Optional[str],
        success_callback: Callable[[], Any],
        error_callback: Optional[Callable[[Optional[str]], Any]] = None,
    ) -> VerifyOperation:
        """重新解码并反序列化文件，确认可以被加载"""
        error_callback = error_callback or self.default_verify_error_callback

        operation = VerifyOperation(self, filename, success_callback, error_callback)
        operation.start()
        return operation

    def default_verify_error_callback(self, filename: Optional[str]) -> None:
        """发送校验失败事件并删除无法加载的文件"""
        self._report(EVENT_EDITOR_MAP_VERIFICATION_FAILED, filename)

        if filename:
            try:
                self.file_manager.remove(filename)
            except FileManagerError as e:
                self.logger.error(f"删除校验失败的文件出错: {e}")

    # ============================================================
    # 保存
    # ============================================================

    def get_temporary_filename(self, filename: str) -> str:
        return get_temporary_filename(filename)

    def default_before_save_callback(self, filename: str, session: "EditorSession") -> bool:
        return self.save_sanitizers.before_save(filename, session)

    def default_after_save_callback(self, filename: str, session: "EditorSession") -> None:
        """记录文件名、清除未保存标志，再执行保存后钩子"""
        self.filename = filename
        self.history.made_changes = False

        self.save_sanitizers.after_save(filename, session)

    def save_file(
        self,
        filename: Optional[str],
        after_save_callback: SaveCallbackArg = None,
        before_save_callback: SaveCallbackArg = None,
        add_ext_if_missing: bool = True,
        verify_map: bool = True,
    ) -> Optional[SaveOperation]:
        """
        保存当前文档

        回调参数为 None 时使用默认回调，为 False 时禁用。
        同一文件名正在保存时请求进入等待槽（后来者覆盖）。

        Returns:
            SaveOperation: 已启动的保存操作；未启动（无文档、排队、被否决、目录失败）时返回 None
        """
        if not filename or self.side is None:
            return None

        if add_ext_if_missing is not False and self.file_manager.file_extension(filename) != MAP_FILE_EXTENSION:
            filename = f"{filename}.{MAP_FILE_EXTENSION}"

        if self.save_queue.is_in_flight(filename):
            replaced = self.save_queue.queue_delayed_save(SaveRequest(
                filename=filename,
                after_save_callback=after_save_callback,
                before_save_callback=before_save_callback,
                add_ext_if_missing=add_ext_if_missing,
                verify_map=verify_map,
            ))
            self.logger.debug(
                f"保存已排队: {filename}" + ("（覆盖之前的等待请求）" if replaced else "")
            )
            return None

        self.save_queue.mark_in_flight(filename)

        if after_save_callback is not False:
            if after_save_callback is None or after_save_callback is True:
                after_save_callback = self.default_after_save_callback

        if before_save_callback is not False:
            if before_save_callback is None or before_save_callback is True:
                before_save_callback = self.default_before_save_callback

            if not before_save_callback(filename, self):
                # 否决时保留 in-flight 标记，之后对该文件名的保存都会排队
                self._report(EVENT_EDITOR_MAP_SAVE_INTERRUPTED, filename)
                return None

        verify = verify_map is not False
        write_target = self.get_temporary_filename(filename) if verify else filename

        try:
            self.file_manager.ensure_directory(self.file_manager.dirname(write_target))
        except FileManagerError as e:
            self.map_save_failed(filename, e)
            return None

        operation = SaveOperation(
            self,
            filename,
            write_target,
            after_save_callback or None,
            verify,
        )
        operation.start()
        return operation

    def map_save_success(self, filename: str) -> None:
        from_backup = filename != self.filename

        self.save_queue.clear_in_flight(filename)

        if not from_backup:
            self.add_to_recent_files(filename)
            self.logger.info(f"地图已保存: {filename}")
            self._publish(EVENT_EDITOR_MAP_SAVED, {"filename": filename})
        else:
            self.logger.info(f"地图副本已保存: {filename}")

        self.resume_queued_save(filename)

    def map_save_failed(self, filename: str, error: Optional[BaseException] = None) -> None:
        self.save_queue.clear_in_flight(filename)
        self._report(EVENT_EDITOR_MAP_SAVE_FAILED, filename, error)
        self.resume_queued_save(filename)

    def release_save(self, filename: str) -> None:
        """校验失败后释放 in-flight 标记并恢复等待请求"""
        self.save_queue.clear_in_flight(filename)
        self.resume_queued_save(filename)

    def resume_queued_save(self, filename: str) -> Optional[SaveOperation]:
        """取出等待请求并重新提交一次"""
        request = self.save_queue.take_pending(filename)
        if request is None:
            return None

        self.logger.debug(f"恢复排队的保存: {filename}")
        return self.save_file(
            request.filename,
            request.after_save_callback,
            request.before_save_callback,
            request.add_ext_if_missing,
            request.verify_map,
        )

    # ============================================================
    # 文档命令
    # ============================================================

    def open_map(self) -> None:
        """打开文件对话框，选择后加载"""
        target_directory = ""
        if self.config_manager is not None:
            target_directory = self.config_manager.get_game_directory()

        if self.filename and self.file_manager.is_file(self.filename):
            target_directory = self.file_manager.dirname(self.filename)

        if self.file_dialogs is None:
            self.logger.warning("没有可用的文件对话框，无法打开地图")
            return

        self.file_dialogs.open_dialog(target_directory, MAP_FILE_EXTENSION, self.load_file)

    def new_map(self) -> bool:
        """
        新建空地图

        Returns:
            bool: 是否已新建（有未保存修改时拒绝）
        """
        if self.history.made_changes:
            self._report(EVENT_EDITOR_NEW_MAP_WITH_CHANGES, self.filename)
            return False

        self.update_side_state(decode_side({}), None, None, EVENT_EDITOR_MAP_NEW)
        return True

    def _verify_on_save(self) -> bool:
        if self.config_manager is None:
            return True
        return self.config_manager.get_verify_on_save()

    def save_as_current_map(
        self,
        after_save_callback: SaveCallbackArg = None,
        before_save_callback: SaveCallbackArg = None,
        add_ext_if_missing: bool = True,
    ) -> None:
        if self.side is None:
            return

        if self.file_dialogs is None:
            self.logger.warning("没有可用的文件对话框，无法另存为")
            return

        def on_selected(filename: str) -> None:
            self.save_file(
                filename,
                after_save_callback,
                before_save_callback,
                add_ext_if_missing,
                self._verify_on_save(),
            )

        self.file_dialogs.save_dialog(self.filename, MAP_FILE_EXTENSION, on_selected)

    def save_current_map(
        self,
        after_save_callback: SaveCallbackArg = None,
        before_save_callback: SaveCallbackArg = None,
        add_ext_if_missing: bool = True,
    ) -> Optional[SaveOperation]:
        if self.side is None:
            return None

        if self.filename:
            return self.save_file(
                self.filename,
                after_save_callback,
                before_save_callback,
                add_ext_if_missing,
                self._verify_on_save(),
            )

        self.save_as_current_map(after_save_callback, before_save_callback, add_ext_if_missing)
        return None

    # ============================================================
    # 选择
    # ============================================================

    @property
    def selection(self) -> Selection:
        return self._selection

    def select_item(self, item: Any, add: bool = False) -> None:
        """
        选中 item

        add 为真且已有选择时提升为多选并追加；已在多选中的项不重复追加、不发送事件。
        选中房间时记录房间名，供下次启动恢复。
        """
        item_type = item_type_of(item)
        previous = self._selection

        if item_type == ITEM_TYPE_ROOM:
            self.persistence.last_selected_room_name = item.name

        if add and item is not None and not previous.is_empty:
            multi = previous if isinstance(previous, MultiSelection) else previous.promote_to_multi()

            if multi.contains(item):
                self._selection = multi
                return

            self._selection = multi.with_item(item)
        else:
            self._selection = SingleSelection.of(item)

        self._publish(EVENT_EDITOR_MAP_TARGET_CHANGED, {
            "selection": self._selection,
            "previous_selection": previous,
            "add": bool(add),
        })

    def get_selected_item(self) -> Tuple[Any, Optional[str]]:
        """
        Returns:
            单选为 (item, 类型)；多选为 ({item: 类型}, "table")
        """
        return self._selection.as_pair()

    def get_selected_room(self) -> Optional[Room]:
        selected = self._selection
        if isinstance(selected, SingleSelection) and selected.item_type == ITEM_TYPE_ROOM:
            return selected.item
        return None

    def get_selected_filler(self):
        selected = self._selection
        if isinstance(selected, SingleSelection) and selected.item_type == ITEM_TYPE_FILLER:
            return selected.item
        return None

    def is_item_selected(self, item: Any) -> bool:
        return self._selection.contains(item)

    # ============================================================
    # 图层信息
    # ============================================================

    def get_layer_information(self, layer: str, key: str, default: Any = None) -> Any:
        return self.layer_information.get(layer, key, default)

    def init_layer_information(self, layer: str) -> Tuple[Dict[str, Any], bool]:
        return self.layer_information.init(layer)

    def set_layer_information(self, layer: str, key: str, value: Any, only_if_missing: bool = False) -> bool:
        changed = self.layer_information.set(layer, key, value, only_if_missing)

        if changed:
            self._publish(EVENT_EDITOR_LAYER_INFORMATION_CHANGED, {
                "layer": layer,
                "key": key,
                "value": value,
            })

        return changed

    def get_layer_visible(self, layer: str) -> bool:
        return self.layer_information.visible(layer)

    def set_layer_visible(self, layer: str, visible: bool, silent: bool = False) -> bool:
        changed = self.set_layer_information(layer, KEY_VISIBLE, visible)

        if changed and not silent:
            self.clear_room_render_cache()

        return changed

    def get_layer_force_rendered(self, layer: str) -> bool:
        return self.layer_information.force_rendered(layer)

    def get_layer_should_render(self, layer: str) -> bool:
        return self.layer_information.should_render(layer)

    def set_layer_force_render(
        self,
        base_layer: str,
        layer: LayerTarget,
        current_value: bool,
        other_value: bool = False,
        silent: bool = False,
    ) -> bool:
        """
        设置强制渲染

        匹配 layer 的图层设为 current_value，其余已知图层设为 other_value。

        Returns:
            bool: 是否影响了可见结果
        """
        changes_visibility, changed_layers = self.layer_information.apply_force_render(
            base_layer, layer, current_value, other_value
        )

        for target, value in changed_layers.items():
            self._publish(EVENT_EDITOR_LAYER_INFORMATION_CHANGED, {
                "layer": target,
                "key": KEY_FORCE_RENDER,
                "value": value,
            })

        if changes_visibility and not silent:
            self.clear_room_render_cache()

        return changes_visibility

    def clear_room_render_cache(self) -> None:
        """清空所有房间的画布缓存并请求重绘可见房间"""
        rooms = self.map.rooms if self.map is not None else []
        selected_item, selected_item_type = self.get_selected_item()

        self.renderer.invalidate_room_cache(None, ROOM_RENDER_CACHE_KEYS)
        self.renderer.clear_batching_tasks()
        self.renderer.force_redraw_visible_rooms(rooms, self, selected_item, selected_item_type)

    # ============================================================
    # 图层名
    # ============================================================

    def get_layer_name(self, layer: str) -> Optional[str]:
        if self.side is None:
            return None

        names = self.side.editor_information.get("layerNames") or {}
        name = names.get(layer)
        return name.strip() if isinstance(name, str) else None

    def set_layer_name(self, layer: str, name: Optional[str]) -> None:
        """设置图层名（去除首尾空白，空字符串表示清除）"""
        if self.side is None:
            return

        name = name.strip() if name else None
        names = self.side.editor_information.setdefault("layerNames", {})

        if name:
            names[layer] = name
        else:
            names.pop(layer, None)

    # ============================================================
    # 依赖模组显示
    # ============================================================

    def init_from_persistence(self) -> None:
        stored = self.persistence.get_only_show_depended_on_mods()
        if stored is not None:
            self.only_show_depended_on_mods = stored

    def set_show_depended_on_mods(self, layer: str, value: bool) -> None:
        self.only_show_depended_on_mods[layer] = value
        self.persistence.set_only_show_depended_on_mods(layer, value)

        self._publish(EVENT_EDITOR_SHOWN_DEPENDENCIES_CHANGED, {"layer": layer, "value": value})

    def get_show_depended_on_mods(self, layer: str) -> bool:
        return bool(self.only_show_depended_on_mods.get(layer, False))


# ============================================================
# 模块导出
# ============================================================

__all__ = [
    "EditorSession",
    "ROOM_RENDER_CACHE_KEYS",
]
