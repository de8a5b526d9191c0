"""命名 logger 注册表。

同一个注册表中每个名称最多构造一次 Logger，即使多个线程同时首次请求同一名称。
状态机：absent -> constructing -> ready。构造期间名称处于 constructing，
其他请求同名的线程等待构造结果；构造失败则名称回到 absent，后续调用可重试。
"""

from __future__ import annotations

import enum
import itertools
import sys
import threading
from typing import Any, Callable, Dict, List, Optional, Sequence

from loguru import logger as _logger

from .base import Logger
from .encoders import INTERNAL_KEY
from .options import Option, apply_options
from .sinks import RotatingFileSink, Sink, build_sinks, compose
from .types import Config

SinkBuilder = Callable[[str, Config], Sequence[Sink]]

_TOKENS = itertools.count(1)

_DEFAULT_HANDLER_LOCK = threading.Lock()
_DEFAULT_HANDLER_RELEASED = False


def _release_default_handler(engine: Any) -> None:
    """移除 loguru 导入时自带的 stderr handler（id 0），只执行一次。

    只在使用全局 loguru logger 时生效；否则每条记录都会额外以 loguru 的默认格式
    输出到 stderr。
    """
    global _DEFAULT_HANDLER_RELEASED
    if engine is not _logger:
        return
    with _DEFAULT_HANDLER_LOCK:
        if _DEFAULT_HANDLER_RELEASED:
            return
        try:
            _logger.remove(0)
        except ValueError:
            # 已被应用自行移除
            pass
        _DEFAULT_HANDLER_RELEASED = True


class _State(enum.Enum):
    CONSTRUCTING = "constructing"
    READY = "ready"


class _Entry:
    __slots__ = ("state", "logger", "done")

    def __init__(self) -> None:
        self.state = _State.CONSTRUCTING
        self.logger: Optional[Logger] = None
        self.done = threading.Event()


class _InstanceFilter:
    """loguru handler 过滤器：只放行属于指定注册表与名称的记录。"""

    def __init__(self, token: str, name: str) -> None:
        self.token = token
        self.name = name

    def __call__(self, record: Dict[str, Any]) -> bool:
        state = record["extra"].get(INTERNAL_KEY)
        if not isinstance(state, dict):
            return False
        return state.get("registry") == self.token and state.get("name") == self.name


class Registry:
    """名称 -> Logger 的注册表。

    - `get_or_create`：已就绪则直接返回；否则保证只构造一次，先到者的配置生效。
    - `lookup`：纯读取，不会触发构造。
    - `default_config`：若已设置，新名称以它的副本为基础再应用选项。
    """

    def __init__(
        self,
        *,
        engine: Any = None,
        sink_builder: Optional[SinkBuilder] = None,
        exit_func: Callable[[int], Any] = sys.exit,
    ) -> None:
        self._engine = engine if engine is not None else _logger
        self._sink_builder = sink_builder or build_sinks
        self._exit_func = exit_func
        self._token = f"registry-{next(_TOKENS)}"
        self._lock = threading.Lock()
        self._entries: Dict[str, _Entry] = {}
        self._default_config: Optional[Config] = None

    # ------------------------------------------------------------------ 配置

    @property
    def default_config(self) -> Optional[Config]:
        return self._default_config

    def set_default_config(self, config: Optional[Config]) -> None:
        with self._lock:
            self._default_config = config

    def _base_config(self) -> Config:
        with self._lock:
            base = self._default_config
        return base.model_copy(deep=True) if base is not None else Config()

    # ------------------------------------------------------------------ 构造

    def _construct(self, name: str, options: Sequence[Option]) -> Logger:
        config = apply_options(self._base_config(), options)
        sinks = list(self._sink_builder(name, config))
        composite = compose(sinks)
        _release_default_handler(self._engine)
        # 失败时 attach 会回滚已注册的 handler 并抛出 SinkError
        composite.attach(self._engine, _InstanceFilter(self._token, name))
        path = next((s.path for s in sinks if isinstance(s, RotatingFileSink)), None)
        return Logger(
            name,
            config,
            self._engine,
            sinks=composite,
            path=path,
            on_fatal=self.terminate,
            routing={"registry": self._token, "name": name},
        )

    def get_or_create(self, name: str, *options: Option) -> Logger:
        """返回 name 对应的 Logger，必要时构造。

        名称一旦就绪，之后传入的 options 会被忽略（首次创建时的配置生效）。
        """
        entry = self._entries.get(name)
        if entry is not None and entry.state is _State.READY:
            return entry.logger  # type: ignore[return-value]

        while True:
            with self._lock:
                entry = self._entries.get(name)
                if entry is None:
                    entry = _Entry()
                    self._entries[name] = entry
                    owner = True
                elif entry.state is _State.READY:
                    return entry.logger  # type: ignore[return-value]
                else:
                    owner = False

            if owner:
                return self._complete(name, entry, options)

            # 等待其他线程完成构造；失败时名称回到 absent，循环重试
            entry.done.wait()

    def _complete(self, name: str, entry: _Entry, options: Sequence[Option]) -> Logger:
        try:
            logger = self._construct(name, options)
        except BaseException:
            with self._lock:
                if self._entries.get(name) is entry:
                    del self._entries[name]
            entry.done.set()
            raise

        stale = None
        with self._lock:
            current = self._entries.get(name)
            if current is entry:
                entry.logger = logger
                entry.state = _State.READY
            elif current is not None and current.state is _State.READY:
                # 构造期间已被 replace 覆盖，放弃本次结果
                stale, logger = logger, current.logger  # type: ignore[assignment]
            else:
                # 构造期间注册表已被 close
                stale = logger
        entry.done.set()
        if stale is not None:
            stale.close()
        return logger

    def replace(self, name: str, *options: Option) -> Logger:
        """重新构造 name 对应的 Logger 并替换旧实例，旧实例的 handler 会被关闭。"""
        logger = self._construct(name, options)
        entry = _Entry()
        entry.logger = logger
        entry.state = _State.READY
        entry.done.set()
        with self._lock:
            previous = self._entries.get(name)
            self._entries[name] = entry
        if previous is not None:
            previous.done.set()
            if previous.logger is not None:
                previous.logger.close()
        return logger

    # ------------------------------------------------------------------ 查询

    def lookup(self, name: str) -> Optional[Logger]:
        entry = self._entries.get(name)
        if entry is not None and entry.state is _State.READY:
            return entry.logger
        return None

    def names(self) -> List[str]:
        with self._lock:
            return [n for n, e in self._entries.items() if e.state is _State.READY]

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    # ------------------------------------------------------------------ 生命周期

    def sync(self) -> None:
        """等待所有排队中的记录写出。"""
        self._engine.complete()

    def close(self) -> None:
        """关闭全部实例并清空注册表。"""
        with self._lock:
            entries = list(self._entries.values())
            self._entries.clear()
        for entry in entries:
            entry.done.set()
            if entry.logger is not None:
                entry.logger.close()

    def terminate(self, code: int = 1) -> None:
        """fatal 日志的唯一退出路径：先刷新全部 sink，再调用 exit_func。"""
        self.sync()
        self._exit_func(code)


__all__ = ["Registry"]
