from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class Level(str, Enum):
    """日志级别枚举（debug < info < warn < error < fatal）。

    `resolve` 是全函数：任何输入都会得到一个级别，无法识别时回退到 INFO。
    """

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @property
    def engine_name(self) -> str:
        """loguru 中对应的级别名称。"""
        return _ENGINE_NAMES[self]

    @property
    def label(self) -> str:
        return self.value.upper()

    @classmethod
    def resolve(cls, name: Any) -> "Level":
        if isinstance(name, Level):
            return name
        if not isinstance(name, str):
            return cls.INFO
        return _BY_NAME.get(name, cls.INFO)

    @classmethod
    def from_number(cls, number: int) -> "Level":
        """把标准库 logging 的数值级别映射为不高于它的最大级别。"""
        result = cls.DEBUG
        for level in cls:
            if level.severity <= number:
                result = level
        return result


_SEVERITY = {
    Level.DEBUG: 10,
    Level.INFO: 20,
    Level.WARN: 30,
    Level.ERROR: 40,
    Level.FATAL: 50,
}

_ENGINE_NAMES = {
    Level.DEBUG: "DEBUG",
    Level.INFO: "INFO",
    Level.WARN: "WARNING",
    Level.ERROR: "ERROR",
    Level.FATAL: "CRITICAL",
}

# 只接受五个小写名称，其余（包括大小写变体）一律回退到 INFO
_BY_NAME = {level.value: level for level in Level}


class LogFormat(str, Enum):
    """输出格式。无法识别的名称回退为 console。"""

    JSON = "json"
    CONSOLE = "console"

    @classmethod
    def resolve(cls, name: Any) -> "LogFormat":
        if isinstance(name, LogFormat):
            return name
        if name == "json":
            return cls.JSON
        return cls.CONSOLE


class FileConfig(BaseModel):
    """文件输出（轮转）配置。"""

    model_config = ConfigDict(frozen=True)

    filename: str = "logs/app.log"
    # 单个日志文件最大大小（MB）
    max_size: int = 100
    # 最大保留天数，0 表示不限
    max_age: int = 7
    # 最大保留备份数，0 表示不限
    max_backups: int = 10
    compress: bool = True
    format: LogFormat = LogFormat.JSON
    # 文件 sink 的独立级别，留空则沿用 Config.level
    level: Optional[Level] = None

    @field_validator("format", mode="before")
    @classmethod
    def _resolve_format(cls, v: Any) -> LogFormat:
        return LogFormat.resolve(v)

    @field_validator("level", mode="before")
    @classmethod
    def _resolve_level(cls, v: Any) -> Optional[Level]:
        if v is None:
            return None
        return Level.resolve(v)


class Config(BaseModel):
    """日志实例的完整配置，构造后不可变。

    通过 `awesomelog.logger.options` 中的选项函数在默认值上逐个修改得到。
    """

    model_config = ConfigDict(frozen=True)

    level: Level = Level.INFO
    format: LogFormat = LogFormat.CONSOLE
    write_to_file: bool = False
    enable_color: bool = True
    file: FileConfig = FileConfig()
    record_caller: bool = True
    # 达到该级别时附带调用栈
    stacktrace_level: Level = Level.FATAL
    # loguru 时间格式（见 loguru 文档中的 time tokens）
    time_format: str = "YYYY-MM-DD HH:mm:ss.SSS"
    # caller 相对路径的基准目录；留空则取调用文件向上两级目录
    caller_base_dir: Optional[str] = None
    # 是否使用 loguru 的异步队列写入
    enqueue: bool = False

    @field_validator("level", "stacktrace_level", mode="before")
    @classmethod
    def _resolve_level(cls, v: Any) -> Level:
        return Level.resolve(v)

    @field_validator("format", mode="before")
    @classmethod
    def _resolve_format(cls, v: Any) -> LogFormat:
        return LogFormat.resolve(v)

    @property
    def file_level(self) -> Level:
        return self.file.level or self.level


__all__ = ["Level", "LogFormat", "FileConfig", "Config"]
