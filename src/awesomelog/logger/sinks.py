"""输出 sink 与 sink 组合。

每个 sink 对应 loguru 的一个 handler，有自己的级别阈值与编码器。文件轮转、
重命名与压缩全部交给 loguru 的文件 sink，这里只负责计算路径、提前创建目录
并把参数配置好。
"""

from __future__ import annotations

import abc
import os
import re
import sys
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, TextIO

from .base import SinkError
from .encoders import Encoder, select_encoder
from .types import Config, Level

_MB = 1024 * 1024
_DAY = 24 * 60 * 60

RecordFilter = Callable[[Dict[str, Any]], bool]


def derive_path(base_path: str, name: str) -> str:
    """为命名 logger 计算独立的文件路径。

    `logs/app.log` + `user-service` -> `logs/app.user-service.log`；
    name 为空时原样返回。
    """
    if not name:
        return base_path
    root, ext = os.path.splitext(base_path)
    return f"{root}.{name}{ext}"


class Sink(abc.ABC):
    """sink 抽象：描述如何把自己注册为 loguru handler。"""

    def __init__(self, level: Level, encoder: Encoder, *, enqueue: bool = False) -> None:
        self.level = level
        self.encoder = encoder
        self.enqueue = enqueue

    @abc.abstractmethod
    def target(self) -> Any:
        """传给 `logger.add` 的 sink 对象（流、路径或可调用对象）。"""

    def handler_options(self) -> Dict[str, Any]:
        return {}

    def attach(self, engine: Any, record_filter: Optional[RecordFilter] = None) -> int:
        # catch=True：单个 handler 写入失败只会打印到 stderr，不影响其他 handler
        return engine.add(
            self.target(),
            level=self.level.severity,
            format=self.encoder,
            filter=record_filter,
            enqueue=self.enqueue,
            catch=True,
            backtrace=False,
            diagnose=False,
            **self.handler_options(),
        )


class StreamSink(Sink):
    """输出到文本流（默认标准输出）。"""

    def __init__(
        self,
        level: Level,
        encoder: Encoder,
        *,
        stream: Optional[TextIO] = None,
        colorize: bool = False,
        enqueue: bool = False,
    ) -> None:
        super().__init__(level, encoder, enqueue=enqueue)
        self.stream = stream
        self.colorize = colorize

    def target(self) -> Any:
        # 延迟到 attach 时再取 sys.stdout，便于测试中替换
        return self.stream if self.stream is not None else sys.stdout

    def handler_options(self) -> Dict[str, Any]:
        return {"colorize": self.colorize}


class BackupRetention:
    """loguru 的 retention 回调：按数量与天数清理本实例的轮转备份。

    loguru 传入的文件列表按路径通配匹配，`app.log` 的通配会命中
    `app.user-service.log`，因此这里只保留符合本实例备份命名的文件。
    """

    # loguru 轮转后的命名：{root}.{YYYY-MM-DD_HH-mm-ss_ffffff}[.N]{ext}[.gz]
    _STAMP = r"\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}_\d{6}"

    def __init__(self, path: str, max_backups: int = 0, max_age: int = 0) -> None:
        root, ext = os.path.splitext(os.path.basename(path))
        self._pattern = re.compile(
            rf"^{re.escape(root)}\.{self._STAMP}(\.\d+)?{re.escape(ext)}(\.[A-Za-z0-9.]+)?$"
        )
        self.max_backups = max_backups
        self.max_age = max_age

    def backups(self, files: Iterable[str]) -> List[str]:
        """筛出属于本实例的备份，按修改时间从新到旧排序。"""
        matched = [f for f in files if self._pattern.match(os.path.basename(f))]
        return sorted(matched, key=os.path.getmtime, reverse=True)

    def __call__(self, files: List[str]) -> None:
        backups = self.backups(files)
        expired = set()
        if self.max_backups > 0:
            expired.update(backups[self.max_backups :])
        if self.max_age > 0:
            cutoff = time.time() - self.max_age * _DAY
            expired.update(f for f in backups if os.path.getmtime(f) < cutoff)
        for path in expired:
            os.remove(path)


class RotatingFileSink(Sink):
    """带轮转的文件 sink，构造时即创建目录并验证文件可追加写入。"""

    def __init__(
        self,
        path: str,
        level: Level,
        encoder: Encoder,
        *,
        max_size: int = 100,
        max_age: int = 7,
        max_backups: int = 10,
        compress: bool = True,
        enqueue: bool = False,
    ) -> None:
        super().__init__(level, encoder, enqueue=enqueue)
        self.path = path
        self.max_size = max_size
        self.max_age = max_age
        self.max_backups = max_backups
        self.compress = compress
        self._prepare()

    def _prepare(self) -> None:
        directory = os.path.dirname(self.path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
        except OSError as exc:
            raise SinkError(f"failed to create log directory {directory!r}: {exc}") from exc
        try:
            with open(self.path, "a", encoding="utf-8"):
                pass
        except OSError as exc:
            raise SinkError(f"failed to open log file {self.path!r}: {exc}") from exc

    def target(self) -> Any:
        return self.path

    def retention(self) -> Optional[BackupRetention]:
        if self.max_backups <= 0 and self.max_age <= 0:
            return None
        return BackupRetention(self.path, self.max_backups, self.max_age)

    def handler_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"colorize": False, "encoding": "utf-8"}
        if self.max_size > 0:
            options["rotation"] = self.max_size * _MB
        retention = self.retention()
        if retention is not None:
            options["retention"] = retention
        if self.compress:
            options["compression"] = "gz"
        return options


def build_file_sink(
    base_path: str,
    name: str,
    max_size: int,
    max_age: int,
    max_backups: int,
    compress: bool,
    *,
    level: Level = Level.INFO,
    encoder: Optional[Encoder] = None,
    enqueue: bool = False,
) -> RotatingFileSink:
    """按 logger 名称派生路径并构造文件 sink。目录或文件不可用时抛出 SinkError。"""
    return RotatingFileSink(
        derive_path(base_path, name),
        level,
        encoder or select_encoder("json"),
        max_size=max_size,
        max_age=max_age,
        max_backups=max_backups,
        compress=compress,
        enqueue=enqueue,
    )


class CompositeSink:
    """把多个 sink 组合为一个扇出输出。

    每条记录会交给每个 sink 各一次；各 sink 独立应用自己的级别与编码器。
    """

    def __init__(self, sinks: Sequence[Sink]) -> None:
        self.sinks = list(sinks)
        self._engine: Any = None
        self._handler_ids: List[int] = []

    @property
    def attached(self) -> bool:
        return bool(self._handler_ids)

    @property
    def handler_ids(self) -> List[int]:
        return list(self._handler_ids)

    def attach(self, engine: Any, record_filter: Optional[RecordFilter] = None) -> List[int]:
        """把全部 sink 注册到 engine；任一失败时回滚已注册的 handler。"""
        self._engine = engine
        try:
            for sink in self.sinks:
                self._handler_ids.append(sink.attach(engine, record_filter))
        except Exception as exc:
            self.close()
            if isinstance(exc, SinkError):
                raise
            raise SinkError(f"failed to attach sink: {exc}") from exc
        return self.handler_ids

    def close(self) -> None:
        """移除已注册的 handler（loguru 会刷新并关闭文件）。可重复调用。"""
        while self._handler_ids:
            handler_id = self._handler_ids.pop()
            try:
                self._engine.remove(handler_id)
            except ValueError:
                # handler 已被外部移除
                continue


def compose(sinks: Sequence[Sink]) -> CompositeSink:
    return CompositeSink(sinks)


def build_sinks(name: str, config: Config) -> List[Sink]:
    """根据配置构造一个命名实例的全部 sink：控制台 + 可选的轮转文件。"""
    encoder_options = {
        "time_format": config.time_format,
        "record_caller": config.record_caller,
        "caller_base_dir": config.caller_base_dir,
    }
    sinks: List[Sink] = [
        StreamSink(
            config.level,
            select_encoder(config.format, **encoder_options),
            colorize=config.enable_color,
            enqueue=config.enqueue,
        )
    ]
    if config.write_to_file:
        file_config = config.file
        sinks.append(
            build_file_sink(
                file_config.filename,
                name,
                file_config.max_size,
                file_config.max_age,
                file_config.max_backups,
                file_config.compress,
                level=config.file_level,
                encoder=select_encoder(file_config.format, **encoder_options),
                enqueue=config.enqueue,
            )
        )
    return sinks


__all__ = [
    "Sink",
    "StreamSink",
    "RotatingFileSink",
    "BackupRetention",
    "CompositeSink",
    "compose",
    "derive_path",
    "build_file_sink",
    "build_sinks",
]
