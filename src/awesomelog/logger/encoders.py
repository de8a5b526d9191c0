"""日志记录编码器。

编码器本身就是 loguru 的 `format` 回调：loguru 对每条记录调用它，拿到一个
格式模板再渲染输出。路由信息与计算好的字段都放在 ``record["extra"][INTERNAL_KEY]``
这一个字典里，模板只引用其中的键，避免用户数据中的花括号被再次解析；
``extra`` 中的其余键都是调用方字段，原样输出。
"""

from __future__ import annotations

import os
import traceback
from typing import Any, Dict, Optional

import orjson

from .types import Level, LogFormat

# extra 中唯一的保留键，保存本库的内部状态
INTERNAL_KEY = "__awesomelog__"

# 级别 -> loguru 颜色标签
LEVEL_TAGS: Dict[Level, tuple[str, ...]] = {
    Level.DEBUG: ("blue",),
    Level.INFO: ("green",),
    Level.WARN: ("yellow",),
    Level.ERROR: ("red",),
    Level.FATAL: ("red", "bold"),
}
TIME_TAGS = ("white", "bold")


def orjson_dumps(value: Any) -> str:
    """使用 orjson 序列化，无法序列化的值退化为 str。"""
    return orjson.dumps(value, default=str).decode()


def _field(key: str) -> str:
    """模板中引用内部状态字段的占位符。"""
    return "{extra[" + INTERNAL_KEY + "][" + key + "]}"


def _markup(placeholder: str, tags: tuple[str, ...]) -> str:
    opening = "".join(f"<{tag}>" for tag in tags)
    closing = "".join(f"</{tag}>" for tag in reversed(tags))
    return f"{opening}{placeholder}{closing}"


def record_level(record: Dict[str, Any]) -> Level:
    return Level.from_number(record["level"].no)


def caller_path(path: str, line: int, base_dir: Optional[str] = None) -> str:
    """把调用文件路径渲染为 `相对路径:行号`。

    未指定 base_dir 时，以调用文件向上两级目录作为项目根目录。
    """
    root = base_dir or os.path.dirname(os.path.dirname(path))
    try:
        rel = os.path.relpath(path, root)
    except ValueError:
        # Windows 下跨盘符无法计算相对路径
        rel = path
    return f"{rel}:{line}"


def internal_state(record: Dict[str, Any]) -> Dict[str, Any]:
    return record["extra"].setdefault(INTERNAL_KEY, {})


def user_fields(record: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in record["extra"].items() if k != INTERNAL_KEY}


def stacktrace(record: Dict[str, Any]) -> Optional[str]:
    """优先使用异常的回溯，其次使用记录时捕获的调用栈。"""
    exc = record["exception"]
    if exc is not None and exc.type is not None:
        return "".join(traceback.format_exception(exc.type, exc.value, exc.traceback))
    return internal_state(record).get("stacktrace")


class Encoder:
    """编码器基类，实例可直接作为 loguru 的 format 参数使用。"""

    def __init__(
        self,
        *,
        time_format: str = "YYYY-MM-DD HH:mm:ss.SSS",
        record_caller: bool = True,
        caller_base_dir: Optional[str] = None,
    ) -> None:
        self.time_format = time_format
        self.record_caller = record_caller
        self.caller_base_dir = caller_base_dir

    def render_time(self, record: Dict[str, Any]) -> str:
        # loguru 的 datetime 子类支持在 __format__ 中使用 time tokens
        return format(record["time"], self.time_format)

    def render_caller(self, record: Dict[str, Any]) -> str:
        return caller_path(record["file"].path, record["line"], self.caller_base_dir)

    def __call__(self, record: Dict[str, Any]) -> str:
        raise NotImplementedError()


class JsonEncoder(Encoder):
    """每条记录输出一行 JSON，键名固定。"""

    def encode(self, record: Dict[str, Any]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "time": self.render_time(record),
            "level": record_level(record).label,
            "logger": internal_state(record).get("logger", ""),
        }
        if self.record_caller:
            payload["caller"] = self.render_caller(record)
            payload["func"] = record["function"]
        payload["msg"] = record["message"]
        trace = stacktrace(record)
        if trace:
            payload["stacktrace"] = trace
        for key, value in user_fields(record).items():
            # 固定键优先
            payload.setdefault(key, value)
        return payload

    def __call__(self, record: Dict[str, Any]) -> str:
        internal_state(record)["json"] = orjson_dumps(self.encode(record))
        return _field("json") + "\n"


class ConsoleEncoder(Encoder):
    """面向人阅读的控制台格式：制表符分隔，颜色只作用于时间与级别。"""

    def __call__(self, record: Dict[str, Any]) -> str:
        state = internal_state(record)
        level = record_level(record)
        state["time"] = self.render_time(record)
        state["level"] = f"{level.label:<7}"

        parts = []
        if state.get("logger"):
            parts.append(state["logger"])
        if self.record_caller:
            parts.append(self.render_caller(record))
        parts.append(record["message"])
        fields = user_fields(record)
        if fields:
            parts.append(orjson_dumps(fields))
        body = "\t".join(str(p) for p in parts)
        if state.get("stacktrace") and record["exception"] is None:
            body = f"{body}\n{state['stacktrace'].rstrip()}"
        state["body"] = body

        return (
            _markup(_field("time"), TIME_TAGS)
            + "\t"
            + _markup(_field("level"), LEVEL_TAGS[level])
            + "\t" + _field("body") + "\n{exception}"
        )


def select_encoder(
    fmt: str | LogFormat,
    *,
    time_format: str = "YYYY-MM-DD HH:mm:ss.SSS",
    record_caller: bool = True,
    caller_base_dir: Optional[str] = None,
) -> Encoder:
    """按格式名选择编码器，非 json 一律使用控制台格式。"""
    cls = JsonEncoder if LogFormat.resolve(fmt) is LogFormat.JSON else ConsoleEncoder
    return cls(
        time_format=time_format,
        record_caller=record_caller,
        caller_base_dir=caller_base_dir,
    )


__all__ = [
    "Encoder",
    "JsonEncoder",
    "ConsoleEncoder",
    "select_encoder",
    "caller_path",
    "orjson_dumps",
    "INTERNAL_KEY",
]
