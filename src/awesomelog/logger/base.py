from __future__ import annotations

import sys
import traceback
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from .encoders import INTERNAL_KEY
from .types import Config, Level

if TYPE_CHECKING:  # pragma: no cover - 仅用于类型检查的导入
    from .sinks import CompositeSink


class LoggerError(Exception):
    """日志库通用错误类型。"""


class SinkError(LoggerError):
    """sink 构造失败（目录无法创建、文件无法打开等）。"""


class NotInitializedError(LoggerError, RuntimeError):
    """在调用 `initialize` 之前使用了全局日志函数。"""


def _internal_patcher(state: Dict[str, Any]) -> Callable[[Dict[str, Any]], None]:
    # patcher 在 bind 合并之后执行，调用方字段无法覆盖内部状态
    def patch(record: Dict[str, Any]) -> None:
        record["extra"][INTERNAL_KEY] = state

    return patch


class Logger:
    """一个已构造完成的命名日志实例。

    实例本身不可变，可被多个线程并发使用；真正的写入由 loguru handler 串行化。
    `with_name` / `bind` 返回共享同一组 sink 的派生实例，派生实例不拥有 sink，
    对其调用 `close` 不会产生任何效果。

    路由信息（所属注册表、名称）与显示名称放在 ``extra[INTERNAL_KEY]`` 下，
    调用方字段原样保存在 ``extra`` 中，两者互不干扰。
    """

    def __init__(
        self,
        name: str,
        config: Config,
        engine: Any,
        *,
        sinks: Optional["CompositeSink"] = None,
        path: Optional[str] = None,
        on_fatal: Optional[Callable[[], None]] = None,
        display_name: Optional[str] = None,
        routing: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.name = name
        self.config = config
        self.path = path
        self.display_name = name if display_name is None else display_name
        self._engine = engine
        self._sinks = sinks
        self._on_fatal = on_fatal
        self._routing = dict(routing or {})

    def __repr__(self) -> str:
        return f"Logger(name={self.name!r}, level={self.config.level.value!r})"

    # ------------------------------------------------------------------ 派生

    def _derive(self, engine: Any, display_name: str) -> "Logger":
        return Logger(
            self.name,
            self.config,
            engine,
            path=self.path,
            on_fatal=self._on_fatal,
            display_name=display_name,
            routing=self._routing,
        )

    def with_name(self, name: str) -> "Logger":
        """返回一个名称追加了 `.name` 的子 logger，输出到相同的 sink。"""
        display = f"{self.display_name}.{name}" if self.display_name else name
        return self._derive(self._engine, display)

    def bind(self, **fields: Any) -> "Logger":
        """返回一个在每条记录上附带 fields 的 logger。"""
        return self._derive(self._engine.bind(**fields), self.display_name)

    # ------------------------------------------------------------------ 写入

    def _log(
        self,
        level: Level,
        message: Any,
        args: tuple,
        fields: Dict[str, Any],
        *,
        depth: int = 1,
        exception: Any = None,
        terminate: bool = False,
    ) -> None:
        # depth 为调用 _log 的帧相对用户代码的层数
        state = dict(self._routing, logger=self.display_name)
        if level.severity >= self.config.stacktrace_level.severity and not exception:
            state["stacktrace"] = "".join(traceback.format_stack(sys._getframe(depth + 1)))
        engine = self._engine.bind(**fields) if fields else self._engine
        engine = engine.patch(_internal_patcher(state))
        engine.opt(depth=depth + 1, exception=exception).log(
            level.engine_name, str(message), *args
        )
        if terminate and self._on_fatal is not None:
            self._on_fatal()

    def debug(self, message: Any, /, *args: Any, **fields: Any) -> None:
        self._log(Level.DEBUG, message, args, fields)

    def info(self, message: Any, /, *args: Any, **fields: Any) -> None:
        self._log(Level.INFO, message, args, fields)

    def warn(self, message: Any, /, *args: Any, **fields: Any) -> None:
        self._log(Level.WARN, message, args, fields)

    warning = warn

    def error(self, message: Any, /, *args: Any, **fields: Any) -> None:
        self._log(Level.ERROR, message, args, fields)

    def exception(self, message: Any, /, *args: Any, **fields: Any) -> None:
        """以 ERROR 级别记录当前正在处理的异常及其回溯。"""
        self._log(Level.ERROR, message, args, fields, exception=True)

    def fatal(self, message: Any, /, *args: Any, **fields: Any) -> None:
        """记录 FATAL 日志，刷新所有 sink 后终止进程。"""
        self._log(Level.FATAL, message, args, fields, terminate=True)

    def log(self, level: str | Level, message: Any, /, *args: Any, **fields: Any) -> None:
        """按任意级别记录日志。即使级别为 fatal 也不会终止进程。"""
        self._log(Level.resolve(level), message, args, fields)

    # ------------------------------------------------------------------ 生命周期

    def sync(self) -> None:
        """等待所有排队中的记录写出。"""
        self._engine.complete()

    def close(self) -> None:
        """移除本实例拥有的 handler，loguru 会刷新并关闭文件。"""
        if self._sinks is not None:
            self._sinks.close()

    @property
    def closed(self) -> bool:
        return self._sinks is not None and not self._sinks.attached

    def __enter__(self) -> "Logger":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.sync()
        self.close()


__all__ = ["LoggerError", "SinkError", "NotInitializedError", "Logger"]
